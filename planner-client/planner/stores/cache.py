"""Short-lived read cache for events.

Entries expire lazily: age is checked when an entry is read, and an
expired entry is evicted on that read. Storage is any Django cache backend;
by default each TTLCache owns a private LocMemCache, so tests can build a
fresh one per case. get_default_cache() returns the process-wide instance
for the configured alias, shared by every client that is not given its own.
A cache built without an explicit ttl reads CACHE_TTL on every lookup.

The cache is only an optimization. Backend failures are logged and read
as misses, never raised.
"""

import logging
import time
from collections.abc import Callable
from typing import Any
from uuid import uuid4

from django.core.cache import caches
from django.core.cache.backends.base import BaseCache
from django.core.cache.backends.locmem import LocMemCache

from planner.conf import planner_settings

logger = logging.getLogger(__name__)

EVENT_LIST_KEY = "events:list"


def event_key(event_id: Any) -> str:
    return f"event:{event_id}"


class _Miss:
    def __repr__(self) -> str:
        return "MISS"

    def __bool__(self) -> bool:
        return False


MISS: Any = _Miss()


class TTLCache:
    """Key/value store whose entries live for `ttl` seconds after their last set."""

    def __init__(
        self,
        ttl: float | None = None,
        backend: BaseCache | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._ttl = ttl
        if backend is None:
            backend = LocMemCache(f"planner-{uuid4().hex}", {"TIMEOUT": None})
        self._backend = backend
        self._clock = clock

    @property
    def ttl(self) -> float:
        return planner_settings.CACHE_TTL if self._ttl is None else self._ttl

    def get(self, key: str) -> Any:
        """Return the cached value, or MISS if absent, expired or unreadable."""
        try:
            entry = self._backend.get(key, MISS)
        except Exception:
            logger.warning(f"Discarding unreadable cache entry {key}", exc_info=True)
            self.invalidate(key)
            return MISS
        if entry is MISS:
            return MISS

        try:
            captured_at, value = entry
            age = self._clock() - captured_at
        except (TypeError, ValueError):
            logger.warning(f"Discarding malformed cache entry {key}")
            self.invalidate(key)
            return MISS

        if age >= self.ttl:
            self.invalidate(key)
            return MISS
        return value

    def set(self, key: str, value: Any) -> None:
        try:
            self._backend.set(key, (self._clock(), value), timeout=None)
        except Exception:
            logger.warning(f"Could not cache {key}", exc_info=True)

    def invalidate(self, key: str) -> None:
        try:
            self._backend.delete(key)
        except Exception:
            logger.warning(f"Could not invalidate cache entry {key}", exc_info=True)

    def clear(self) -> None:
        try:
            self._backend.clear()
        except Exception:
            logger.warning("Could not clear the event cache", exc_info=True)


_default_caches: dict[str, TTLCache] = {}


def get_default_cache() -> TTLCache:
    """Return the process-wide cache, backed by the configured Django cache alias."""
    alias = planner_settings.CACHE_ALIAS
    if alias not in _default_caches:
        _default_caches[alias] = TTLCache(backend=caches[alias])
    return _default_caches[alias]
