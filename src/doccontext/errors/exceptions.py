"""Custom exception hierarchy for doccontext."""

from __future__ import annotations

from typing import Any


class DocContextError(Exception):
    """Base exception for all recoverable doccontext errors."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(DocContextError):
    """Invalid or missing configuration — raised at construction time only.

    Examples: empty cache name, unknown backend, malformed backend options.
    """


class CacheError(DocContextError):
    """Base for conditions reported by a cache backend."""

    def __init__(self, message: str = "", key: str | None = None) -> None:
        super().__init__(message)
        self.key = key


class CacheNotFoundError(CacheError):
    """Cache miss — expected, callers proceed without cached data."""

    def __init__(self, message: str = "cache entry not found", key: str | None = None) -> None:
        super().__init__(message, key=key)


class CacheCorruptionError(CacheError):
    """Stored state violates the backend's structural invariants.

    reason is "file_count" (with found set to the number of children) or
    "directory_instead_of_file". Never repaired silently.
    """

    def __init__(
        self,
        message: str = "",
        key: str | None = None,
        reason: str = "file_count",
        found: int | None = None,
    ) -> None:
        super().__init__(message, key=key)
        self.reason = reason
        self.found = found


class CacheIOError(CacheError):
    """Underlying read/write/remove failure (permissions, disk full, ...)."""

    def __init__(
        self,
        message: str = "",
        key: str | None = None,
        original: OSError | None = None,
    ) -> None:
        super().__init__(message, key=key)
        self.original = original


class RenderError(DocContextError):
    """The external renderer failed, or its output could not be read."""

    def __init__(
        self,
        message: str = "",
        page_number: int | None = None,
        output: str = "",
    ) -> None:
        super().__init__(message)
        self.page_number = page_number
        self.output = output


class DocumentError(DocContextError):
    """Document could not be opened, or a page could not be extracted."""


class ProgrammerError(AssertionError):
    """Broken precondition in backend wiring.

    Deliberately outside DocContextError: only reachable from incorrect
    registration code, never from user input, so it is not meant to be caught.
    """
