"""Unit tests for the cache providers (in-memory and Redis)."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from spotify_search_proxy.providers.cache.memory_cache import MemoryCacheProvider
from spotify_search_proxy.providers.cache.redis_cache import RedisCacheProvider
from spotify_search_proxy.utils.errors import CacheError


class _Timer:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


# ======================================================================
# MemoryCacheProvider
# ======================================================================


class TestMemoryCacheProvider:
    @pytest.fixture()
    def timer(self) -> _Timer:
        return _Timer()

    @pytest.fixture()
    def cache(self, timer: _Timer) -> MemoryCacheProvider:
        return MemoryCacheProvider(max_size=10, ttl=60, timer=timer)

    @pytest.mark.asyncio
    async def test_missing_key_returns_none(self, cache: MemoryCacheProvider) -> None:
        assert await cache.get("spotify:artist:nobody") is None

    @pytest.mark.asyncio
    async def test_set_then_get(self, cache: MemoryCacheProvider) -> None:
        await cache.set("spotify:artist:TWICE", b'{"name": "TWICE"}', ttl=30)
        assert await cache.get("spotify:artist:TWICE") == b'{"name": "TWICE"}'

    @pytest.mark.asyncio
    async def test_per_entry_ttl(self, cache: MemoryCacheProvider, timer: _Timer) -> None:
        await cache.set("short", "a", ttl=10)
        await cache.set("long", "b", ttl=100)

        timer.now += 11

        assert await cache.get("short") is None
        assert await cache.get("long") == "b"

    @pytest.mark.asyncio
    async def test_default_ttl_when_none(self, cache: MemoryCacheProvider, timer: _Timer) -> None:
        await cache.set("k", "v")

        timer.now += 59
        assert await cache.get("k") == "v"
        timer.now += 2
        assert await cache.get("k") is None

    @pytest.mark.asyncio
    async def test_overwrite_replaces_value(self, cache: MemoryCacheProvider) -> None:
        await cache.set("k", "old", ttl=10)
        await cache.set("k", "new", ttl=10)
        assert await cache.get("k") == "new"

    @pytest.mark.asyncio
    async def test_max_size_evicts(self, timer: _Timer) -> None:
        cache = MemoryCacheProvider(max_size=2, ttl=60, timer=timer)
        await cache.set("a", "1")
        await cache.set("b", "2")
        await cache.set("c", "3")

        values = [await cache.get(key) for key in ("a", "b", "c")]
        assert values.count(None) == 1
        assert values[2] == "3"

    def test_provider_name(self, cache: MemoryCacheProvider) -> None:
        assert cache.get_provider_name() == "memory"


# ======================================================================
# RedisCacheProvider
# ======================================================================


class TestRedisCacheProvider:
    @pytest.fixture()
    def redis_client(self) -> MagicMock:
        client = MagicMock()
        client.get = AsyncMock(return_value=None)
        client.set = AsyncMock(return_value=True)
        client.aclose = AsyncMock()
        return client

    @pytest.fixture()
    def cache(self, redis_client: MagicMock) -> RedisCacheProvider:
        return RedisCacheProvider(redis_client, default_ttl=86400, operation_timeout=0.05)

    @pytest.mark.asyncio
    async def test_nil_is_miss(self, cache: RedisCacheProvider, redis_client: MagicMock) -> None:
        assert await cache.get("spotify:track:Fancy") is None
        redis_client.get.assert_awaited_once_with("spotify:track:Fancy")

    @pytest.mark.asyncio
    async def test_hit_returns_raw_bytes(
        self, cache: RedisCacheProvider, redis_client: MagicMock
    ) -> None:
        redis_client.get.return_value = b'{"name": "Fancy"}'
        assert await cache.get("spotify:track:Fancy") == b'{"name": "Fancy"}'

    @pytest.mark.asyncio
    async def test_set_uses_expiry(self, cache: RedisCacheProvider, redis_client: MagicMock) -> None:
        await cache.set("k", b"v", ttl=120)
        redis_client.set.assert_awaited_once_with("k", b"v", ex=120)

    @pytest.mark.asyncio
    async def test_set_without_ttl_uses_default(
        self, cache: RedisCacheProvider, redis_client: MagicMock
    ) -> None:
        await cache.set("k", b"v")
        redis_client.set.assert_awaited_once_with("k", b"v", ex=86400)

    @pytest.mark.asyncio
    async def test_get_redis_error_raises_cache_error(
        self, cache: RedisCacheProvider, redis_client: MagicMock
    ) -> None:
        redis_client.get.side_effect = RedisConnectionError("Connection refused")

        with pytest.raises(CacheError) as exc_info:
            await cache.get("k")

        assert exc_info.value.provider_name == "redis"
        assert isinstance(exc_info.value.__cause__, RedisConnectionError)

    @pytest.mark.asyncio
    async def test_set_redis_error_raises_cache_error(
        self, cache: RedisCacheProvider, redis_client: MagicMock
    ) -> None:
        redis_client.set.side_effect = RedisConnectionError("READONLY")
        with pytest.raises(CacheError):
            await cache.set("k", b"v", ttl=10)

    @pytest.mark.asyncio
    async def test_slow_get_times_out(
        self, cache: RedisCacheProvider, redis_client: MagicMock
    ) -> None:
        async def hang(_key: str) -> bytes:
            await asyncio.sleep(10)
            return b"never"

        redis_client.get.side_effect = hang

        with pytest.raises(CacheError, match="timed out"):
            await cache.get("k")

    @pytest.mark.asyncio
    async def test_close_releases_pool(
        self, cache: RedisCacheProvider, redis_client: MagicMock
    ) -> None:
        await cache.close()
        redis_client.aclose.assert_awaited_once()

    def test_from_url_builds_client(self) -> None:
        provider = RedisCacheProvider.from_url(
            "redis://localhost:6379/0", default_ttl=10, operation_timeout=1.0
        )
        assert provider.get_provider_name() == "redis"
