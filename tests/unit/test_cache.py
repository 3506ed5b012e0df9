"""Unit tests for SlidingCache."""

from __future__ import annotations

import threading
from datetime import timedelta

from db_field.mapping.cache import DEFAULT_EXPIRATION, Cacheable, SlidingCache


class FakeTimer:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class TestSlidingCache:
    def test_default_expiration_is_four_hours(self) -> None:
        assert DEFAULT_EXPIRATION == timedelta(hours=4)
        assert SlidingCache().expiration == 4 * 60 * 60

    def test_implements_cacheable(self) -> None:
        assert isinstance(SlidingCache(), Cacheable)

    def test_get_and_set(self) -> None:
        cache: SlidingCache[str] = SlidingCache()
        assert cache.get("album") is None
        cache.set("album", "metadata")
        assert cache.get("album") == "metadata"
        assert "album" in cache
        assert len(cache) == 1

    def test_entry_expires_after_idle_window(self) -> None:
        timer = FakeTimer()
        cache: SlidingCache[str] = SlidingCache(expiration=10, timer=timer)
        cache.set("album", "metadata")
        timer.now = 11
        assert cache.get("album") is None
        assert len(cache) == 0

    def test_read_restarts_window(self) -> None:
        timer = FakeTimer()
        cache: SlidingCache[str] = SlidingCache(expiration=timedelta(seconds=10), timer=timer)
        cache.set("album", "metadata")
        timer.now = 8
        assert cache.get("album") == "metadata"
        timer.now = 16
        assert cache.get("album") == "metadata"
        timer.now = 27
        assert cache.get("album") is None

    def test_write_restarts_window(self) -> None:
        timer = FakeTimer()
        cache: SlidingCache[str] = SlidingCache(expiration=10, timer=timer)
        cache.set("album", "v1")
        timer.now = 8
        cache.set("album", "v2")
        timer.now = 16
        assert cache.get("album") == "v2"

    def test_maxsize_evicts(self) -> None:
        cache: SlidingCache[int] = SlidingCache(maxsize=2)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("c", 3)
        assert len(cache) == 2
        assert cache.get("c") == 3

    def test_clear(self) -> None:
        cache: SlidingCache[int] = SlidingCache()
        cache.set("a", 1)
        cache.clear()
        assert cache.get("a") is None

    def test_concurrent_access(self) -> None:
        cache: SlidingCache[int] = SlidingCache()
        errors: list[BaseException] = []

        def worker(offset: int) -> None:
            try:
                for i in range(200):
                    key = f"k{(i + offset) % 20}"
                    cache.set(key, i)
                    value = cache.get(key)
                    assert value is None or isinstance(value, int)
            except BaseException as e:  # noqa: BLE001
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert errors == []
        assert len(cache) == 20
