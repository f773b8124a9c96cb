"""Tests for config hierarchy."""

import pytest

from doccontext.config import hierarchy
from doccontext.config.hierarchy import (
    _coerce_env_value,
    _find_project_config,
    _flatten_file_config,
    _load_yaml_config,
    load_config_hierarchy,
    load_settings,
)
from doccontext.errors.exceptions import ConfigurationError


class TestLoadConfigHierarchy:
    def test_returns_defaults(self):
        config = load_config_hierarchy()
        assert config["format"] == "png"
        assert config["dpi"] == 300
        assert config["max_workers"] == 4

    def test_runtime_overrides(self):
        config = load_config_hierarchy(format="jpg", dpi=150)
        assert config["format"] == "jpg"
        assert config["dpi"] == 150

    def test_none_overrides_ignored(self):
        config = load_config_hierarchy(format=None)
        assert config["format"] == "png"  # Default preserved

    def test_env_var_override(self, monkeypatch):
        monkeypatch.setenv("DOCCONTEXT_FORMAT", "jpg")
        config = load_config_hierarchy()
        assert config["format"] == "jpg"

    def test_runtime_beats_env(self, monkeypatch):
        monkeypatch.setenv("DOCCONTEXT_DPI", "72")
        config = load_config_hierarchy(dpi=600)
        assert config["dpi"] == 600  # Runtime wins

    def test_env_numeric_coercion(self, monkeypatch):
        monkeypatch.setenv("DOCCONTEXT_MAX_WORKERS", "8")
        config = load_config_hierarchy()
        assert config["max_workers"] == 8
        assert isinstance(config["max_workers"], int)

    def test_env_bool_coercion(self, monkeypatch):
        monkeypatch.setenv("DOCCONTEXT_CACHE_DISABLED", "true")
        config = load_config_hierarchy()
        assert config["cache_disabled"] is True

    def test_env_cache_dir(self, monkeypatch, tmp_path):
        monkeypatch.setenv("DOCCONTEXT_CACHE_DIR", str(tmp_path))
        assert load_config_hierarchy()["cache_dir"] == str(tmp_path)

    def test_global_config(self, monkeypatch, tmp_path):
        path = tmp_path / "global.yaml"
        path.write_text("dpi: 200\nbackground: black\n")
        monkeypatch.setattr(hierarchy, "_GLOBAL_CONFIG_PATH", path)
        config = load_config_hierarchy()
        assert config["dpi"] == 200
        assert config["background"] == "black"

    def test_project_beats_global(self, monkeypatch, tmp_path):
        global_path = tmp_path / "global.yaml"
        global_path.write_text("dpi: 200\n")
        project_path = tmp_path / "doccontext.yaml"
        project_path.write_text("dpi: 150\n")
        monkeypatch.setattr(hierarchy, "_GLOBAL_CONFIG_PATH", global_path)
        monkeypatch.setattr(hierarchy, "_find_project_config", lambda: project_path)
        assert load_config_hierarchy()["dpi"] == 150

    def test_env_beats_project(self, monkeypatch, tmp_path):
        project_path = tmp_path / "doccontext.yaml"
        project_path.write_text("format: jpg\n")
        monkeypatch.setattr(hierarchy, "_find_project_config", lambda: project_path)
        monkeypatch.setenv("DOCCONTEXT_FORMAT", "png")
        assert load_config_hierarchy()["format"] == "png"

    def test_sections_in_file(self, monkeypatch, tmp_path):
        path = tmp_path / "doccontext.yaml"
        path.write_text(
            "image:\n  format: jpg\n  quality: 85\n  options:\n    brightness: 110\n"
            "cache:\n  directory: /srv/cache\n  disabled: true\n"
        )
        monkeypatch.setattr(hierarchy, "_find_project_config", lambda: path)
        config = load_config_hierarchy()
        assert config["format"] == "jpg"
        assert config["quality"] == 85
        assert config["image_options"] == {"brightness": 110}
        assert config["cache_dir"] == "/srv/cache"
        assert config["cache_disabled"] is True

    def test_options_accumulate_across_files(self, monkeypatch, tmp_path):
        global_path = tmp_path / "global.yaml"
        global_path.write_text("image:\n  options:\n    brightness: 110\n    contrast: 5\n")
        project_path = tmp_path / "doccontext.yaml"
        project_path.write_text("image:\n  options:\n    contrast: 20\n")
        monkeypatch.setattr(hierarchy, "_GLOBAL_CONFIG_PATH", global_path)
        monkeypatch.setattr(hierarchy, "_find_project_config", lambda: project_path)
        config = load_config_hierarchy()
        assert config["image_options"] == {"brightness": 110, "contrast": 20}


class TestFindProjectConfig:
    def test_searches_upward(self, monkeypatch, tmp_path):
        (tmp_path / "doccontext.yaml").write_text("dpi: 72\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        assert _find_project_config() == tmp_path / "doccontext.yaml"


class TestLoadYamlConfig:
    def test_valid_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("format: jpg\nquality: 80\n")
        result = _load_yaml_config(path)
        assert result == {"format": "jpg", "quality": 80}

    def test_missing_file(self, tmp_path):
        assert _load_yaml_config(tmp_path / "nope.yaml") is None

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n")
        assert _load_yaml_config(path) is None

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("format: [unclosed\n")
        assert _load_yaml_config(path) is None


class TestCoerceEnvValue:
    def test_int(self):
        assert _coerce_env_value("dpi", "150") == 150

    def test_invalid_int_kept_as_string(self):
        assert _coerce_env_value("dpi", "high") == "high"

    @pytest.mark.parametrize("value", ["1", "true", "YES", "on"])
    def test_truthy(self, value):
        assert _coerce_env_value("cache_disabled", value) is True

    @pytest.mark.parametrize("value", ["0", "false", "no", ""])
    def test_falsy(self, value):
        assert _coerce_env_value("cache_disabled", value) is False

    def test_string_passthrough(self):
        assert _coerce_env_value("background", "black") == "black"


class TestFlattenFileConfig:
    def test_flat_keys_pass_through(self, tmp_path):
        assert _flatten_file_config({"dpi": 72}, tmp_path) == {"dpi": 72}

    def test_unknown_section_key_dropped(self, tmp_path):
        flat = _flatten_file_config({"cache": {"backend": "filesystem", "ttl": 5}}, tmp_path)
        assert flat == {"cache_backend": "filesystem"}

    def test_non_mapping_section_ignored(self, tmp_path):
        assert _flatten_file_config({"image": "jpg"}, tmp_path) == {}


class TestLoadSettings:
    def test_defaults(self):
        settings = load_settings()
        assert settings.format == "png"
        assert settings.cache_backend == "filesystem"
        assert settings.max_workers == 4

    def test_invalid_env_value(self, monkeypatch):
        monkeypatch.setenv("DOCCONTEXT_DPI", "high")
        with pytest.raises(ConfigurationError, match="invalid configuration: dpi"):
            load_settings()

    def test_invalid_runtime_value(self):
        with pytest.raises(ConfigurationError, match="max_workers"):
            load_settings(max_workers=0)

    def test_image_config(self):
        image = load_settings(format="jpg", quality=70, background="black").image_config(
            rotation=90, contrast=None
        )
        assert image.format == "jpg"
        assert image.quality == 70
        assert image.options == {"background": "black", "rotation": 90}

    def test_cache_config(self, tmp_path):
        cache = load_settings(cache_dir=str(tmp_path)).cache_config()
        assert cache.name == "filesystem"
        assert cache.options == {"directory": str(tmp_path)}

    def test_cache_disabled(self):
        assert load_settings(cache_disabled=True).cache_config() is None
