"""Package-level default configuration values."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Any

# Default rendering settings
DEFAULT_FORMAT = "png"
DEFAULT_DPI = 300
DEFAULT_QUALITY = 90
DEFAULT_BACKGROUND = "white"

# Default cache settings
DEFAULT_CACHE_BACKEND = "filesystem"
DEFAULT_CACHE_DIR = str(Path(tempfile.gettempdir()) / "document-context-cache")
DEFAULT_CACHE_DISABLED = False

# Default concurrency settings
DEFAULT_MAX_WORKERS = 4

# Log level
DEFAULT_LOG_LEVEL = "WARNING"


def get_defaults() -> dict[str, Any]:
    """Return all defaults as a flat dictionary for merging."""
    return {
        "format": DEFAULT_FORMAT,
        "dpi": DEFAULT_DPI,
        "quality": DEFAULT_QUALITY,
        "background": DEFAULT_BACKGROUND,
        "cache_backend": DEFAULT_CACHE_BACKEND,
        "cache_dir": DEFAULT_CACHE_DIR,
        "cache_disabled": DEFAULT_CACHE_DISABLED,
        "max_workers": DEFAULT_MAX_WORKERS,
        "log_level": DEFAULT_LOG_LEVEL,
        "image_options": {},
        "cache_options": {},
    }
