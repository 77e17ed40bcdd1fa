"""Tests for the bounded identity cache."""

import pytest

from perceptron_store.infrastructure.cache import IdentityCache


class TestIdentityCache:
    def test_miss_then_hit(self) -> None:
        cache = IdentityCache(2)
        assert cache.get("buy") is None
        cache.put("buy", 1)
        assert cache.get("buy") == 1
        stats = cache.stats()
        assert (stats.hits, stats.misses, stats.size) == (1, 1, 1)

    def test_evicts_least_recently_used(self) -> None:
        cache = IdentityCache(2)
        cache.put("a", 1)
        cache.put("b", 2)
        cache.get("a")  # b is now least recent
        cache.put("c", 3)
        assert "a" in cache
        assert "b" not in cache
        assert "c" in cache
        assert len(cache) == 2

    def test_put_refreshes_recency(self) -> None:
        cache = IdentityCache(2)
        cache.put("a", 1)
        cache.put("b", 2)
        cache.put("a", 1)
        cache.put("c", 3)
        assert "a" in cache
        assert "b" not in cache

    def test_zero_capacity_disables(self) -> None:
        cache = IdentityCache(0)
        cache.put("a", 1)
        assert cache.get("a") is None
        assert len(cache) == 0

    def test_negative_capacity_rejected(self) -> None:
        with pytest.raises(ValueError, match="capacity"):
            IdentityCache(-1)

    def test_clear_resets_counters(self) -> None:
        cache = IdentityCache(4)
        cache.put("a", 1)
        cache.get("a")
        cache.clear()
        stats = cache.stats()
        assert (stats.hits, stats.misses, stats.size, stats.capacity) == (0, 0, 0, 4)

    def test_zero_id_is_cached(self) -> None:
        cache = IdentityCache(1)
        cache.put("zero", 0)
        assert cache.get("zero") == 0
