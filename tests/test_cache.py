"""Tests for the in-memory cache."""

from datetime import UTC, datetime, timedelta

from nutrition_recommender.services.cache import InMemoryCache, cache_key


def test_cache_expires_entries() -> None:
    now = datetime(2024, 1, 1, tzinfo=UTC)
    cache = InMemoryCache(clock=lambda: now)

    cache.set("key", [1, 2], ttl_seconds=60)
    assert cache.get("key") == [1, 2]

    now += timedelta(seconds=61)
    assert cache.get("key") is None
    assert len(cache) == 0


def test_cache_ignores_non_positive_ttl() -> None:
    cache = InMemoryCache()

    cache.set("key", "value", ttl_seconds=0)

    assert cache.get("key") is None


def test_cache_key_joins_parts() -> None:
    assert cache_key("safety", ["kidney", "", "42"]) == "safety:kidney||42"
