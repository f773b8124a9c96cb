"""Cache backend registry — select and construct backends by name."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from doccontext.cache.base import Cache
from doccontext.config.schema import CacheConfig
from doccontext.errors.exceptions import ConfigurationError, ProgrammerError

logger = logging.getLogger(__name__)

CacheFactory = Callable[[CacheConfig], Cache]


class _ReadWriteLock:
    """Many concurrent readers or one writer. Waiting writers block new readers."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            while self._writer or self._readers:
                self._cond.wait()
            self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class CacheRegistry:
    """Name → factory table. Safe for concurrent register/create/list."""

    def __init__(self) -> None:
        self._factories: dict[str, CacheFactory] = {}
        self._lock = _ReadWriteLock()

    def register(self, name: str, factory: CacheFactory) -> None:
        """Register factory under name. Re-registering a name replaces it.

        An empty name or a non-callable factory is a wiring bug, not a runtime
        condition, and raises ProgrammerError.
        """
        if not isinstance(name, str) or not name:
            raise ProgrammerError("cache: register name is empty")
        if factory is None or not callable(factory):
            raise ProgrammerError("cache: register factory is None or not callable")

        with self._lock.write():
            self._factories[name] = factory
        logger.debug("Registered cache backend '%s'", name)

    def create(self, config: CacheConfig) -> Cache:
        """Construct the backend named by config.name.

        Raises ConfigurationError for an empty or unknown name. Errors raised
        by the factory itself propagate unchanged.
        """
        if not config.name:
            raise ConfigurationError("cache name cannot be empty")

        with self._lock.read():
            factory = self._factories.get(config.name)

        if factory is None:
            raise ConfigurationError(f"unknown cache type: {config.name}")

        return factory(config)

    def list_caches(self) -> list[str]:
        """Registered backend names in alphabetical order."""
        with self._lock.read():
            return sorted(self._factories)

    def __contains__(self, name: object) -> bool:
        with self._lock.read():
            return name in self._factories


def register_builtin_caches(registry: CacheRegistry) -> CacheRegistry:
    """Register every backend shipped with doccontext."""
    from doccontext.cache.filesystem import FilesystemCache

    registry.register("filesystem", FilesystemCache.from_config)
    return registry


_default_registry: CacheRegistry | None = None
_default_lock = threading.Lock()


def get_registry() -> CacheRegistry:
    """Process-wide registry, built with the builtin backends on first use."""
    global _default_registry
    with _default_lock:
        if _default_registry is None:
            _default_registry = register_builtin_caches(CacheRegistry())
        return _default_registry


def create_cache(config: CacheConfig) -> Cache:
    return get_registry().create(config)
