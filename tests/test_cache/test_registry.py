"""Tests for the cache backend registry."""

import threading

import pytest

from doccontext.cache.filesystem import FilesystemCache
from doccontext.cache.registry import (
    CacheRegistry,
    create_cache,
    get_registry,
    register_builtin_caches,
)
from doccontext.config.schema import CacheConfig
from doccontext.errors.exceptions import ConfigurationError, DocContextError, ProgrammerError


class _Recorder:
    def __init__(self):
        self.configs = []

    def __call__(self, config):
        self.configs.append(config)
        return object()


class TestRegister:
    def test_register_and_create(self):
        registry = CacheRegistry()
        factory = _Recorder()
        registry.register("memory", factory)
        config = CacheConfig(name="memory", options={"size": 10})
        registry.create(config)
        assert factory.configs == [config]

    def test_reregister_replaces(self):
        registry = CacheRegistry()
        first, second = _Recorder(), _Recorder()
        registry.register("memory", first)
        registry.register("memory", second)
        registry.create(CacheConfig(name="memory"))
        assert first.configs == []
        assert len(second.configs) == 1
        assert registry.list_caches() == ["memory"]

    def test_empty_name_is_programmer_error(self):
        with pytest.raises(ProgrammerError, match="name is empty"):
            CacheRegistry().register("", _Recorder())

    def test_none_factory_is_programmer_error(self):
        with pytest.raises(ProgrammerError, match="factory"):
            CacheRegistry().register("memory", None)

    def test_non_callable_factory_is_programmer_error(self):
        with pytest.raises(ProgrammerError):
            CacheRegistry().register("memory", "not callable")

    def test_programmer_error_not_recoverable_error(self):
        with pytest.raises(ProgrammerError) as exc_info:
            CacheRegistry().register("", _Recorder())
        assert not isinstance(exc_info.value, DocContextError)

    def test_contains(self):
        registry = CacheRegistry()
        registry.register("memory", _Recorder())
        assert "memory" in registry
        assert "filesystem" not in registry


class TestCreate:
    def test_empty_name(self):
        with pytest.raises(ConfigurationError, match="cache name cannot be empty"):
            CacheRegistry().create(CacheConfig())

    def test_unknown_name(self):
        with pytest.raises(ConfigurationError, match="unknown cache type: redis"):
            CacheRegistry().create(CacheConfig(name="redis"))

    def test_factory_error_propagates(self):
        class Boom(Exception):
            pass

        def factory(config):
            raise Boom("factory failed")

        registry = CacheRegistry()
        registry.register("broken", factory)
        with pytest.raises(Boom, match="factory failed"):
            registry.create(CacheConfig(name="broken"))

    def test_filesystem_options_error(self):
        registry = register_builtin_caches(CacheRegistry())
        with pytest.raises(ConfigurationError, match="invalid filesystem cache options"):
            registry.create(CacheConfig(name="filesystem"))


class TestListCaches:
    def test_empty(self):
        assert CacheRegistry().list_caches() == []

    def test_sorted(self):
        registry = CacheRegistry()
        for name in ("zeta", "alpha", "mid"):
            registry.register(name, _Recorder())
        assert registry.list_caches() == ["alpha", "mid", "zeta"]

    def test_returns_copy(self):
        registry = CacheRegistry()
        registry.register("a", _Recorder())
        registry.list_caches().append("b")
        assert registry.list_caches() == ["a"]


class TestConcurrency:
    def test_concurrent_register_create_list(self):
        registry = CacheRegistry()
        errors = []

        def work(i):
            try:
                name = f"backend-{i:02d}"
                registry.register(name, _Recorder())
                registry.create(CacheConfig(name=name))
                assert name in registry.list_caches()
            except BaseException as e:
                errors.append(e)

        threads = [threading.Thread(target=work, args=(i,)) for i in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert registry.list_caches() == [f"backend-{i:02d}" for i in range(20)]


class TestBuiltins:
    def test_register_builtin_caches(self):
        registry = register_builtin_caches(CacheRegistry())
        assert registry.list_caches() == ["filesystem"]

    def test_default_registry_has_filesystem(self):
        assert "filesystem" in get_registry()

    def test_default_registry_is_shared(self):
        assert get_registry() is get_registry()

    def test_create_cache(self, tmp_path):
        cache = create_cache(
            CacheConfig(name="filesystem", options={"directory": str(tmp_path / "c")})
        )
        assert isinstance(cache, FilesystemCache)
        assert cache.directory == tmp_path / "c"
