"""Cache contract and entry model.

Backends satisfy the Cache protocol structurally; none of them inherit from
it. A backend is selected by name through the registry, never by type.

Contract:
  - get(key) returns the entry or raises CacheNotFoundError on a miss. Every
    other failure (corruption, I/O) is a real error and must not be confused
    with a miss.
  - set(entry) replaces whatever is stored under entry.key.
  - invalidate(key) is idempotent: an absent key is not an error.
  - clear() is best-effort: failing to remove one entry does not stop the
    others and is not reported to the caller.

All operations must be safe to call concurrently on distinct keys. Nothing
orders concurrent operations on the same key.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from pydantic import BaseModel, Field


class CacheEntry(BaseModel):
    """A cached payload plus what is needed to re-serve or re-store it."""

    key: str = Field(min_length=1)
    data: bytes
    filename: str


@runtime_checkable
class Cache(Protocol):
    def get(self, key: str) -> CacheEntry: ...

    def set(self, entry: CacheEntry) -> None: ...

    def invalidate(self, key: str) -> None: ...

    def clear(self) -> None: ...
