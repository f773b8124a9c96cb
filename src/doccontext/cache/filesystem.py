"""Filesystem cache backend — one directory per key."""

from __future__ import annotations

import itertools
import logging
import os
import shutil
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError

from doccontext.cache.base import CacheEntry
from doccontext.config.schema import CacheConfig, describe_validation_error
from doccontext.errors.exceptions import (
    CacheCorruptionError,
    CacheIOError,
    CacheNotFoundError,
    ConfigurationError,
)
from doccontext.logger import create_logger

logger = logging.getLogger(__name__)

# Loggers built from CacheConfig.logger stop propagating; each instance gets its own
_CONFIGURED_LOGGER = f"{__name__}.configured"
_instance_ids = itertools.count(1)


class FilesystemCacheOptions(BaseModel):
    """Typed options for the "filesystem" backend. Unknown keys are rejected."""

    model_config = ConfigDict(extra="forbid")

    directory: StrictStr = Field(min_length=1)


def parse_filesystem_options(options: dict[str, Any]) -> FilesystemCacheOptions:
    try:
        return FilesystemCacheOptions.model_validate(options)
    except ValidationError as e:
        raise ConfigurationError(
            f"invalid filesystem cache options: {describe_validation_error(e)}"
        ) from e


class FilesystemCache:
    """Stores each entry as <root>/<key>/<filename>.

    A key directory must hold exactly one regular file; anything else is
    reported as corruption. That includes an empty key directory, which may
    also be left behind by an interrupted set().

    Operations on different keys touch disjoint subtrees and can interleave
    freely. Operations on the same key are not atomic: a concurrent reader can
    observe a partially written file.
    """

    def __init__(self, directory: str | Path, log: logging.Logger | None = None) -> None:
        self._logger = log or logger
        self._directory = Path(os.path.abspath(directory))
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigurationError(
                f"failed to create cache directory {self._directory}: {e}"
            ) from e

    @classmethod
    def from_config(cls, config: CacheConfig) -> FilesystemCache:
        """Registry factory: build from CacheConfig.options["directory"]."""
        options = parse_filesystem_options(config.options)
        log = None
        if config.logger is not None:
            name = f"{_CONFIGURED_LOGGER}.{next(_instance_ids)}"
            log = create_logger(name, config.logger)
        return cls(options.directory, log=log)

    @property
    def directory(self) -> Path:
        return self._directory

    def get(self, key: str) -> CacheEntry:
        key_dir = self._key_dir(key)
        try:
            children = list(key_dir.iterdir())
        except FileNotFoundError:
            self._logger.debug("Cache miss for %s", key)
            raise CacheNotFoundError(key=key) from None
        except OSError as e:
            raise CacheIOError(
                f"failed to read cache directory: {e}", key=key, original=e
            ) from e

        if len(children) != 1:
            raise CacheCorruptionError(
                f"cache corruption: expected 1 file, found {len(children)}",
                key=key,
                reason="file_count",
                found=len(children),
            )

        payload = children[0]
        if payload.is_dir():
            raise CacheCorruptionError(
                "cache corruption: expected file, found directory",
                key=key,
                reason="directory_instead_of_file",
            )

        try:
            data = payload.read_bytes()
        except OSError as e:
            raise CacheIOError(f"failed to read cache file: {e}", key=key, original=e) from e

        self._logger.debug("Cache hit for %s", key)
        return CacheEntry(key=key, data=data, filename=payload.name)

    def set(self, entry: CacheEntry) -> None:
        key_dir = self._key_dir(entry.key)
        filename = entry.filename
        if not filename or Path(filename).name != filename:
            raise ValueError(f"invalid cache filename: {filename!r}")

        try:
            key_dir.mkdir(parents=True, exist_ok=True)
            # Keep exactly one payload per key when the filename changes
            for stale in key_dir.iterdir():
                if stale.name != filename:
                    _remove(stale)
            (key_dir / filename).write_bytes(entry.data)
        except OSError as e:
            raise CacheIOError(
                f"failed to write cache file: {e}", key=entry.key, original=e
            ) from e

        self._logger.debug("Stored %d bytes under %s", len(entry.data), entry.key)

    def invalidate(self, key: str) -> None:
        key_dir = self._key_dir(key)
        try:
            _remove(key_dir)
        except FileNotFoundError:
            pass
        except OSError as e:
            raise CacheIOError(
                f"failed to invalidate cache entry: {e}", key=key, original=e
            ) from e

        self._logger.debug("Invalidated %s", key)

    def clear(self) -> None:
        """Remove every key directory under the root.

        Per-entry failures are logged and skipped, and never raised: cleanup
        keeps going under partial permission or lock problems. Only an
        unreadable root raises.
        """
        try:
            children = list(self._directory.iterdir())
        except OSError as e:
            raise CacheIOError(f"failed to read cache directory: {e}", original=e) from e

        removed = 0
        for child in children:
            if not child.is_dir():
                continue
            try:
                shutil.rmtree(child)
            except OSError as e:
                self._logger.warning("Failed to remove cache entry %s: %s", child, e)
                continue
            removed += 1

        self._logger.info("Cleared %d cache entries from %s", removed, self._directory)

    def _key_dir(self, key: str) -> Path:
        if not key or key in (".", "..") or "/" in key or os.sep in key:
            raise ValueError(f"invalid cache key: {key!r}")
        return self._directory / key


def _remove(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()
