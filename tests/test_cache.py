"""Tests for the TTL result cache."""

from unittest.mock import AsyncMock

import pytest

from anisource.core.cache import DEFAULT_TTL, TTLCache
from anisource.core.exceptions import NetworkError


class TestTTLCache:
    def test_default_ttl_is_five_minutes(self) -> None:
        assert DEFAULT_TTL == 300
        assert TTLCache().ttl == 300

    def test_missing_key_returns_none(self, clock) -> None:
        cache = TTLCache(clock=clock)
        assert cache.get("search_x") is None
        assert "search_x" not in cache

    def test_set_then_get(self, clock) -> None:
        cache = TTLCache(clock=clock)
        cache.set("search_x", [1, 2])
        assert cache.get("search_x") == [1, 2]
        assert "search_x" in cache
        assert len(cache) == 1

    def test_entry_expires_after_ttl(self, clock) -> None:
        cache = TTLCache(ttl=300, clock=clock)
        cache.set("k", "v")

        clock.advance(299)
        assert cache.get("k") == "v"

        clock.advance(1)
        assert cache.get("k") is None
        assert "k" not in cache

    def test_overwrite_refreshes_timestamp(self, clock) -> None:
        cache = TTLCache(ttl=300, clock=clock)
        cache.set("k", "old")
        clock.advance(200)
        cache.set("k", "new")
        clock.advance(200)

        assert cache.get("k") == "new"
        assert len(cache) == 1

    def test_clear(self, clock) -> None:
        cache = TTLCache(clock=clock)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.clear()
        assert len(cache) == 0
        assert cache.get("a") is None


class TestGetOrFetch:
    @pytest.mark.asyncio
    async def test_fetches_once_while_fresh(self, clock) -> None:
        cache = TTLCache(clock=clock)
        fetcher = AsyncMock(return_value=["result"])

        assert await cache.get_or_fetch("k", fetcher) == ["result"]
        assert await cache.get_or_fetch("k", fetcher) == ["result"]
        assert fetcher.await_count == 1

    @pytest.mark.asyncio
    async def test_refetches_after_expiry(self, clock) -> None:
        cache = TTLCache(ttl=10, clock=clock)
        fetcher = AsyncMock(side_effect=["first", "second"])

        assert await cache.get_or_fetch("k", fetcher) == "first"
        clock.advance(10)
        assert await cache.get_or_fetch("k", fetcher) == "second"

    @pytest.mark.asyncio
    async def test_failures_are_not_cached(self, clock) -> None:
        cache = TTLCache(clock=clock)
        failing = AsyncMock(side_effect=NetworkError("boom"))

        with pytest.raises(NetworkError):
            await cache.get_or_fetch("k", failing)
        assert "k" not in cache

        assert await cache.get_or_fetch("k", AsyncMock(return_value="ok")) == "ok"

    @pytest.mark.asyncio
    async def test_empty_results_are_cached(self, clock) -> None:
        cache = TTLCache(clock=clock)
        fetcher = AsyncMock(return_value=[])

        await cache.get_or_fetch("k", fetcher)
        await cache.get_or_fetch("k", fetcher)
        assert fetcher.await_count == 1
