"""Error handling — the doccontext exception hierarchy."""

from doccontext.errors.exceptions import (
    CacheCorruptionError,
    CacheError,
    CacheIOError,
    CacheNotFoundError,
    ConfigurationError,
    DocContextError,
    DocumentError,
    ProgrammerError,
    RenderError,
)

__all__ = [
    "DocContextError",
    "ConfigurationError",
    "CacheError",
    "CacheNotFoundError",
    "CacheCorruptionError",
    "CacheIOError",
    "RenderError",
    "DocumentError",
    "ProgrammerError",
]
