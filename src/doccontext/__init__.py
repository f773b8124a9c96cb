"""doccontext — render document pages to images through a pluggable cache."""

from doccontext.cache import Cache, CacheEntry, CacheRegistry, create_cache, get_registry
from doccontext.config.schema import CacheConfig, ImageConfig, LoggerConfig
from doccontext.core import DocumentConverter, convert
from doccontext.types import ConversionResult, ImageFormat, PageImage

__all__ = [
    "Cache",
    "CacheConfig",
    "CacheEntry",
    "CacheRegistry",
    "ConversionResult",
    "DocumentConverter",
    "ImageConfig",
    "ImageFormat",
    "LoggerConfig",
    "PageImage",
    "convert",
    "create_cache",
    "get_registry",
]
