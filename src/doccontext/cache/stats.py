"""Read-only inspection of an on-disk cache root."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class CacheFileInfo(BaseModel):
    name: str
    size_bytes: int


class CacheEntryInfo(BaseModel):
    """One key directory and the regular files inside it."""

    key: str
    files: list[CacheFileInfo] = Field(default_factory=list)

    @property
    def size_bytes(self) -> int:
        return sum(f.size_bytes for f in self.files)


class CacheStats(BaseModel):
    """Aggregate statistics for a cache root."""

    directory: str
    exists: bool = True
    entries: int = 0
    files: int = 0
    size_bytes: int = 0

    @property
    def is_empty(self) -> bool:
        return self.entries == 0


def inspect_entries(directory: str | Path) -> list[CacheEntryInfo]:
    """List key directories under directory, sorted by key.

    A missing or unreadable root is an empty cache. Unreadable key
    directories, and files that vanish mid-scan, are skipped.
    """
    root = Path(directory)
    if not root.is_dir():
        return []

    try:
        key_dirs = sorted(root.iterdir())
    except OSError as e:
        logger.warning("Cannot read cache directory %s: %s", root, e)
        return []

    result: list[CacheEntryInfo] = []
    for key_dir in key_dirs:
        if not key_dir.is_dir():
            continue
        try:
            children = sorted(key_dir.iterdir())
        except OSError:
            continue
        files: list[CacheFileInfo] = []
        for child in children:
            try:
                if not child.is_file():
                    continue
                size = child.stat().st_size
            except OSError:
                continue
            files.append(CacheFileInfo(name=child.name, size_bytes=size))
        result.append(CacheEntryInfo(key=key_dir.name, files=files))
    return result


def collect_stats(directory: str | Path) -> CacheStats:
    root = Path(directory)
    if not root.is_dir():
        return CacheStats(directory=str(root), exists=False)

    entries = inspect_entries(root)
    return CacheStats(
        directory=str(root),
        entries=len(entries),
        files=sum(len(e.files) for e in entries),
        size_bytes=sum(e.size_bytes for e in entries),
    )


def format_bytes(size: int) -> str:
    """Human-readable size: 512 B, 3.4 KB, 1.2 MB."""
    value = float(size)
    for unit in ("B", "KB", "MB", "GB"):
        if value < 1024 or unit == "GB":
            return f"{int(value)} {unit}" if unit == "B" else f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} GB"
