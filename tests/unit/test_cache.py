"""Unit tests for docpilot.cache."""

from __future__ import annotations

import threading

import pytest

from docpilot.cache import ContentCache


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


class TestContentCacheBasics:
    def test_put_and_get(self, clock: FakeClock) -> None:
        cache = ContentCache(max_entries=3, ttl_seconds=60, clock=clock)
        cache.put("https://developers.glean.com/a", "<main>A</main>")
        assert cache.get("https://developers.glean.com/a") == "<main>A</main>"

    def test_miss_returns_none(self, clock: FakeClock) -> None:
        cache = ContentCache(max_entries=3, ttl_seconds=60, clock=clock)
        assert cache.get("https://developers.glean.com/missing") is None

    def test_put_replaces_value(self, clock: FakeClock) -> None:
        cache = ContentCache(max_entries=3, ttl_seconds=60, clock=clock)
        cache.put("a", "v1")
        cache.put("a", "v2")
        assert cache.get("a") == "v2"
        assert len(cache) == 1

    def test_invalid_capacity(self) -> None:
        with pytest.raises(ValueError):
            ContentCache(max_entries=0, ttl_seconds=60)


class TestContentCacheEviction:
    def test_capacity_plus_one_evicts_least_recently_used(self, clock: FakeClock) -> None:
        cache = ContentCache(max_entries=3, ttl_seconds=60, clock=clock)
        for key in ("a", "b", "c", "d"):
            cache.put(key, key.upper())

        assert len(cache) == 3
        assert "a" not in cache
        assert [cache.get(key) for key in ("b", "c", "d")] == ["B", "C", "D"]

    def test_get_refreshes_recency(self, clock: FakeClock) -> None:
        cache = ContentCache(max_entries=3, ttl_seconds=60, clock=clock)
        for key in ("a", "b", "c"):
            cache.put(key, key)

        assert cache.get("a") == "a"  # a becomes most recently used
        cache.put("d", "d")

        assert "a" in cache
        assert "b" not in cache

    def test_put_existing_refreshes_recency(self, clock: FakeClock) -> None:
        cache = ContentCache(max_entries=2, ttl_seconds=60, clock=clock)
        cache.put("a", "a")
        cache.put("b", "b")
        cache.put("a", "a2")
        cache.put("c", "c")

        assert "a" in cache
        assert "b" not in cache

    def test_size_never_exceeds_capacity(self, clock: FakeClock) -> None:
        cache = ContentCache(max_entries=5, ttl_seconds=60, clock=clock)
        for i in range(50):
            cache.put(f"k{i}", str(i))
            assert len(cache) <= 5


class TestContentCacheExpiry:
    def test_expired_entry_is_absent_and_removed(self, clock: FakeClock) -> None:
        cache = ContentCache(max_entries=3, ttl_seconds=10, clock=clock)
        cache.put("a", "A")

        clock.now = 10.5
        assert cache.get("a") is None
        assert "a" not in cache
        assert len(cache) == 0

    def test_entry_fresh_until_expiry(self, clock: FakeClock) -> None:
        cache = ContentCache(max_entries=3, ttl_seconds=10, clock=clock)
        cache.put("a", "A")

        clock.now = 10.0
        assert cache.get("a") == "A"

    def test_read_does_not_extend_ttl(self, clock: FakeClock) -> None:
        cache = ContentCache(max_entries=3, ttl_seconds=10, clock=clock)
        cache.put("a", "A")

        clock.now = 8.0
        assert cache.get("a") == "A"
        clock.now = 11.0
        assert cache.get("a") is None

    def test_rewrite_resets_ttl(self, clock: FakeClock) -> None:
        cache = ContentCache(max_entries=3, ttl_seconds=10, clock=clock)
        cache.put("a", "A")
        clock.now = 8.0
        cache.put("a", "A2")
        clock.now = 15.0
        assert cache.get("a") == "A2"


class TestContentCacheConcurrency:
    def test_concurrent_get_put_respects_capacity(self) -> None:
        cache = ContentCache(max_entries=20, ttl_seconds=60)
        errors: list[BaseException] = []

        def worker(worker_id: int) -> None:
            try:
                for i in range(500):
                    key = f"k{(worker_id * 7 + i) % 60}"
                    cache.put(key, key)
                    cache.get(key)
            except BaseException as exc:  # noqa: BLE001
                errors.append(exc)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert len(cache) <= 20
