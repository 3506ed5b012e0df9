"""Metadata cache.

``Cacheable`` is the interface the metadata registry talks to; callers can
plug in their own store. ``SlidingCache`` is the default: an in-memory
cachetools TTLCache where every hit restarts the entry's time-to-live.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from datetime import timedelta
from typing import Generic, Protocol, TypeVar, runtime_checkable

import cachetools

V = TypeVar("V")

DEFAULT_EXPIRATION = timedelta(hours=4)
DEFAULT_MAXSIZE = 1024


@runtime_checkable
class Cacheable(Protocol[V]):
    """Key/value store used for cached field mappings."""

    def get(self, key: str) -> V | None:
        """Return the cached value for *key*, or None."""
        ...

    def set(self, key: str, value: V) -> None:
        """Cache *value* under *key*."""
        ...


class SlidingCache(Generic[V]):
    """Thread-safe in-memory cache with sliding expiration.

    Args:
        expiration: Idle time after which an entry is evicted, as a
            timedelta or a number of seconds.
        maxsize: Maximum number of entries; least recently used go first.
        timer: Clock used for expiry, ``time.monotonic`` by default.
    """

    def __init__(
        self,
        expiration: timedelta | float = DEFAULT_EXPIRATION,
        maxsize: int = DEFAULT_MAXSIZE,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        if isinstance(expiration, timedelta):
            expiration = expiration.total_seconds()
        self._expiration = float(expiration)
        self._cache: cachetools.TTLCache[str, V] = cachetools.TTLCache(
            maxsize=maxsize, ttl=self._expiration, timer=timer
        )
        self._lock = threading.RLock()

    @property
    def expiration(self) -> float:
        """Sliding window in seconds."""
        return self._expiration

    def get(self, key: str) -> V | None:
        with self._lock:
            value = self._cache.get(key)
            if value is not None:
                # re-inserting restarts the TTL
                self._cache[key] = value
            return value

    def set(self, key: str, value: V) -> None:
        with self._lock:
            self._cache[key] = value

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._cache

    def __len__(self) -> int:
        with self._lock:
            self._cache.expire()
            return len(self._cache)
