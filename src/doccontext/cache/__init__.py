"""Cache subsystem — pluggable, content-addressed storage for rendered pages."""

from doccontext.cache.base import Cache, CacheEntry
from doccontext.cache.filesystem import FilesystemCache
from doccontext.cache.keys import build_key_input, generate_key
from doccontext.cache.registry import (
    CacheRegistry,
    create_cache,
    get_registry,
    register_builtin_caches,
)
from doccontext.cache.stats import CacheStats, collect_stats, inspect_entries

__all__ = [
    "Cache",
    "CacheEntry",
    "CacheRegistry",
    "CacheStats",
    "FilesystemCache",
    "build_key_input",
    "collect_stats",
    "create_cache",
    "generate_key",
    "get_registry",
    "inspect_entries",
    "register_builtin_caches",
]
