"""Configuration hierarchy — merges sources in priority order.

Precedence (later overrides earlier):
  1. Package defaults
  2. Global config   (~/.doccontext/config.yaml)
  3. Project config   (./doccontext.yaml, searched upward)
  4. Environment variables (DOCCONTEXT_*)
  5. Runtime arguments

Config files may use flat keys (``dpi: 150``) or sections::

    image:
      format: jpg
      quality: 85
      options: {brightness: 110}
    cache:
      backend: filesystem
      directory: /var/cache/doccontext
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from doccontext.config.defaults import get_defaults
from doccontext.config.schema import RuntimeSettings, describe_validation_error
from doccontext.errors.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

_GLOBAL_CONFIG_PATH = Path.home() / ".doccontext" / "config.yaml"
_PROJECT_CONFIG_NAME = "doccontext.yaml"

_ENV_PREFIX = "DOCCONTEXT_"

_ENV_KEYS = (
    "cache_dir",
    "cache_backend",
    "cache_disabled",
    "format",
    "dpi",
    "quality",
    "background",
    "max_workers",
    "log_level",
)

# Section name -> {key inside section: flat key}
_SECTIONS: dict[str, dict[str, str]] = {
    "image": {
        "format": "format",
        "dpi": "dpi",
        "quality": "quality",
        "background": "background",
        "options": "image_options",
    },
    "cache": {
        "backend": "cache_backend",
        "directory": "cache_dir",
        "disabled": "cache_disabled",
        "options": "cache_options",
    },
}

_INT_KEYS = frozenset({"dpi", "quality", "max_workers"})

_TRUTHY = {"1", "true", "yes", "on"}


def load_config_hierarchy(**runtime_overrides: Any) -> dict[str, Any]:
    """Load and merge configuration from all sources into a flat dict.

    Runtime overrides set to None are ignored.
    """
    config = get_defaults()

    for path in (_GLOBAL_CONFIG_PATH, _find_project_config()):
        if path is None:
            continue
        file_cfg = _load_yaml_config(path)
        if file_cfg:
            _merge_layer(config, _flatten_file_config(file_cfg, path))

    _merge_layer(config, _load_env_vars())
    _merge_layer(config, {k: v for k, v in runtime_overrides.items() if v is not None})
    return config


def load_settings(**runtime_overrides: Any) -> RuntimeSettings:
    """Resolve the hierarchy and validate it.

    Raises ConfigurationError naming every invalid field.
    """
    merged = load_config_hierarchy(**runtime_overrides)
    try:
        return RuntimeSettings.model_validate(merged)
    except ValidationError as e:
        raise ConfigurationError(f"invalid configuration: {describe_validation_error(e)}") from e


def _merge_layer(config: dict[str, Any], layer: dict[str, Any]) -> None:
    # Option mappings accumulate across layers; everything else is replaced
    for key, value in layer.items():
        if key.endswith("_options") and isinstance(value, dict):
            config[key] = {**config.get(key, {}), **value}
        else:
            config[key] = value


def _flatten_file_config(data: dict[str, Any], source: Path) -> dict[str, Any]:
    flat: dict[str, Any] = {}
    for key, value in data.items():
        section = _SECTIONS.get(key)
        if section is None:
            flat[key] = value
            continue
        if not isinstance(value, dict):
            logger.warning("Section '%s' in %s is not a mapping, ignoring", key, source)
            continue
        for inner_key, inner_value in value.items():
            target = section.get(inner_key)
            if target is None:
                logger.warning("Unknown key '%s.%s' in %s, ignoring", key, inner_key, source)
                continue
            flat[target] = inner_value
    return flat


def _load_yaml_config(path: Path) -> dict[str, Any] | None:
    """Load a YAML config file if it exists."""
    if not path.is_file():
        return None
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Failed to load config %s: %s", path, e)
        return None
    if data is None:
        return None
    if not isinstance(data, dict):
        logger.warning("Config file %s is not a mapping, ignoring", path)
        return None
    logger.debug("Loaded config from %s", path)
    return data


def _find_project_config() -> Path | None:
    """Search for doccontext.yaml from cwd upward."""
    cwd = Path.cwd()
    for parent in [cwd, *cwd.parents]:
        candidate = parent / _PROJECT_CONFIG_NAME
        if candidate.is_file():
            return candidate
    return None


def _load_env_vars() -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key in _ENV_KEYS:
        value = os.environ.get(_ENV_PREFIX + key.upper())
        if value is not None:
            result[key] = _coerce_env_value(key, value)
    return result


def _coerce_env_value(key: str, value: str) -> Any:
    """Coerce an environment variable string to the type its key expects.

    Values that fail to convert are passed through unchanged so validation
    can report them against the right field.
    """
    if key.endswith("_disabled"):
        return value.strip().lower() in _TRUTHY

    if key in _INT_KEYS:
        try:
            return int(value)
        except ValueError:
            logger.warning("Cannot convert env var for '%s' to int: %s", key, value)
            return value

    return value
