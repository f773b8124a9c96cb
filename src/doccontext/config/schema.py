"""Pydantic models for cache, image and logger configuration.

Configuration objects only live during initialization: they are validated and
transformed into domain objects (caches, renderers, loggers) at construction
time and discarded afterwards.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from doccontext.config.defaults import DEFAULT_BACKGROUND, DEFAULT_DPI, DEFAULT_FORMAT


def describe_validation_error(exc: ValidationError) -> str:
    """Flatten a pydantic ValidationError into one readable line."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "options"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


class LogLevel(StrEnum):
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    DISABLED = "disabled"


class LogFormat(StrEnum):
    TEXT = "text"
    JSON = "json"


class LogOutput(StrEnum):
    STDERR = "stderr"
    STDOUT = "stdout"
    DISCARD = "discard"


class LoggerConfig(BaseModel):
    """Logger settings. A disabled level always discards output."""

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.TEXT
    output: LogOutput = LogOutput.STDERR

    @classmethod
    def disabled(cls) -> LoggerConfig:
        return cls(level=LogLevel.DISABLED, output=LogOutput.DISCARD)


class CacheConfig(BaseModel):
    """Selects a registered cache backend by name.

    options is backend-specific; each backend parses it into its own typed
    options model when constructed. logger=None means the backend logs through
    its module logger.
    """

    name: str = ""
    options: dict[str, Any] = Field(default_factory=dict)
    logger: LoggerConfig | None = None

    def merge(self, source: CacheConfig) -> None:
        """Overlay a non-empty name and all option entries from source."""
        if source.name:
            self.name = source.name
        self.options.update(source.options)
        if source.logger is not None:
            self.logger = source.logger


class ImageConfig(BaseModel):
    """Rendering settings shared by every renderer.

    Empty strings and zero integers mean "not set"; finalize() fills them from
    the package defaults. options carries renderer-specific settings.
    """

    format: str = ""
    quality: int = 0
    dpi: int = 0
    options: dict[str, Any] = Field(default_factory=dict)

    def merge(self, source: ImageConfig) -> None:
        if source.format:
            self.format = source.format
        if source.quality > 0:
            self.quality = source.quality
        if source.dpi > 0:
            self.dpi = source.dpi
        self.options.update(source.options)

    def finalize(self) -> ImageConfig:
        """Return a copy with defaults applied to every unset field."""
        result = ImageConfig(format=DEFAULT_FORMAT, dpi=DEFAULT_DPI)
        result.merge(self)
        return result


class RuntimeSettings(BaseModel):
    """The resolved configuration hierarchy, validated.

    Bridges the flat key/value layers (defaults, YAML, environment, CLI) to
    the ImageConfig and CacheConfig objects the library consumes.
    """

    format: str = DEFAULT_FORMAT
    dpi: int = Field(default=DEFAULT_DPI, gt=0)
    quality: int = Field(default=0, ge=0, le=100)
    background: str = Field(default=DEFAULT_BACKGROUND, min_length=1)
    image_options: dict[str, Any] = Field(default_factory=dict)
    cache_backend: str = Field(min_length=1)
    cache_dir: str = Field(min_length=1)
    cache_disabled: bool = False
    cache_options: dict[str, Any] = Field(default_factory=dict)
    max_workers: int = Field(default=4, ge=1)
    log_level: str = "WARNING"

    def image_config(self, **option_overrides: Any) -> ImageConfig:
        """ImageConfig with background folded into options.

        Overrides set to None are ignored.
        """
        options = {"background": self.background, **self.image_options}
        options.update({k: v for k, v in option_overrides.items() if v is not None})
        return ImageConfig(
            format=self.format,
            dpi=self.dpi,
            quality=self.quality,
            options=options,
        )

    def cache_config(self, logger: LoggerConfig | None = None) -> CacheConfig | None:
        """CacheConfig for the selected backend, or None when caching is disabled."""
        if self.cache_disabled:
            return None
        options: dict[str, Any] = {}
        if self.cache_backend == "filesystem":
            options["directory"] = self.cache_dir
        options.update(self.cache_options)
        return CacheConfig(name=self.cache_backend, options=options, logger=logger)
