"""Unit tests for the per-namespace TTL cache."""

import pytest

from propertysnap.services.memory_cache import CacheEntry, MemoryCache


@pytest.fixture
def cache(clock):
    return MemoryCache("test", default_ttl=300, clock=clock)


class TestGetSet:

    def test_get_before_ttl_returns_value(self, cache, clock) -> None:
        cache.set("k", {"a": 1}, 10)
        clock.advance(9.999)
        assert cache.get("k") == {"a": 1}

    def test_get_after_ttl_returns_none(self, cache, clock) -> None:
        cache.set("k", "v", 10)
        clock.advance(10.001)
        assert cache.get("k") is None

    def test_entry_is_invalid_exactly_at_expiry(self, cache, clock) -> None:
        cache.set("k", "v", 10)
        clock.advance(10)
        assert cache.get("k") is None

    def test_missing_key_is_not_an_error(self, cache) -> None:
        assert cache.get("nope") is None

    def test_overwrite_uses_latest_value_and_ttl(self, cache, clock) -> None:
        cache.set("k", "v1", 5)
        clock.advance(2)
        cache.set("k", "v2", 60)
        clock.advance(10)  # past the first ttl
        assert cache.get("k") == "v2"
        clock.advance(51)
        assert cache.get("k") is None

    def test_set_records_timestamps(self, cache, clock) -> None:
        cache.set("k", "v", 30)
        entry = cache._store["k"]
        assert entry.created_at == clock.now
        assert entry.last_accessed_at == clock.now
        assert entry.expires_at == clock.now + 30

    def test_get_updates_last_accessed(self, cache, clock) -> None:
        cache.set("k", "v", 30)
        clock.advance(7)
        cache.get("k")
        entry = cache._store["k"]
        assert entry.last_accessed_at == clock.now
        assert entry.created_at == clock.now - 7

    def test_persistent_entry_never_expires(self, cache, clock) -> None:
        cache.set("k", "v", persistent=True)
        clock.advance(10 ** 9)
        assert cache.get("k") == "v"
        assert cache.cleanup() == 0
        assert cache._store["k"].expires_at is None


class TestInvalidTtl:

    @pytest.mark.parametrize("ttl", [None, 0, -5, "300", True, float("nan")])
    def test_invalid_ttl_falls_back_to_default(self, cache, clock, ttl) -> None:
        cache.set("k", "v", ttl)
        assert cache._store["k"].expires_at == clock.now + 300

    def test_omitted_ttl_uses_namespace_default(self, clock) -> None:
        cache = MemoryCache("short", default_ttl=30, clock=clock)
        cache.set("k", "v")
        clock.advance(29)
        assert cache.get("k") == "v"
        clock.advance(2)
        assert cache.get("k") is None


class TestEviction:

    def test_expired_read_removes_entry(self, cache, clock) -> None:
        cache.set("k", "v", 1)
        clock.advance(2)
        assert cache.get_stats()["total"] == 1
        assert cache.get("k") is None
        assert cache.get_stats()["total"] == 0

    def test_cleanup_removes_only_expired(self, cache, clock) -> None:
        for i in range(3):
            cache.set(f"short{i}", i, 10)
        for i in range(4):
            cache.set(f"long{i}", i, 100)
        clock.advance(50)

        assert cache.cleanup() == 3
        stats = cache.get_stats()
        assert stats["total"] == 4
        assert stats["expired"] == 0

    def test_cleanup_is_idempotent(self, cache, clock) -> None:
        cache.set("k", "v", 1)
        clock.advance(5)
        assert cache.cleanup() == 1
        assert cache.cleanup() == 0

    def test_delete_is_noop_when_absent(self, cache) -> None:
        cache.delete("missing")
        cache.set("k", "v", 10)
        cache.delete("k")
        assert cache.get("k") is None


class TestStats:

    def test_stats_on_empty_cache(self, cache) -> None:
        assert cache.get_stats() == {"total": 0, "active": 0, "expired": 0, "hits": 0, "misses": 0}

    def test_hits_and_misses_are_counted(self, cache, clock) -> None:
        cache.set("a", 1, 10)
        cache.set("b", 2, 1)
        for _ in range(3):
            cache.get("a")
        cache.get("missing")
        clock.advance(5)
        cache.get("b")  # expired

        stats = cache.get_stats()
        assert stats["hits"] == 3
        assert stats["misses"] == 2

    def test_clear_keeps_lifetime_counters(self, cache) -> None:
        cache.set("a", 1, 10)
        cache.get("a")
        cache.get("b")
        assert cache.clear() == 1

        stats = cache.get_stats()
        assert stats["total"] == 0
        assert stats["hits"] == 1
        assert stats["misses"] == 1

    def test_falsy_values_are_hits(self, cache) -> None:
        cache.set("empty", [], 10)
        assert cache.get("empty") == []
        assert cache.get_stats()["hits"] == 1


class TestScenario:

    def test_ads_sidebar_expires_after_one_second(self, registry, clock) -> None:
        ads = registry.ads
        ads.set("ads_sidebar", [{"id": 1}], 1)
        assert ads.get("ads_sidebar") == [{"id": 1}]

        clock.advance(1.1)
        stats = ads.get_stats()
        assert stats["expired"] == 1
        assert stats["active"] == 0

        assert ads.get("ads_sidebar") is None
        assert ads.get_stats()["total"] == 0


class TestDegradedStore:

    def test_broken_store_degrades_to_miss(self, cache) -> None:
        class ExplodingStore(dict):
            def get(self, key, default=None):
                raise RuntimeError("corrupted")

        cache._store = ExplodingStore()
        assert cache.get("k") is None
        assert cache.misses == 1


def test_cache_entry_validity() -> None:
    entry = CacheEntry(value=1, created_at=0, expires_at=10, last_accessed_at=0)
    assert entry.is_valid(9.9)
    assert not entry.is_valid(10)
    assert CacheEntry(value=1, created_at=0, expires_at=None, last_accessed_at=0).is_valid(10 ** 12)
