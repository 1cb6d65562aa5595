"""Redis cache provider using redis-py's asyncio client.

Every operation is bounded by a fixed deadline so a degraded Redis cannot
stall the request path.  A missing key (Redis ``nil``) is reported as
``None``; connection errors, protocol errors and timeouts raise
:class:`~spotify_search_proxy.utils.errors.CacheError`.
"""

from __future__ import annotations

import asyncio

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from spotify_search_proxy.interfaces.cache_provider import ICacheProvider
from spotify_search_proxy.utils.errors import CacheError
from spotify_search_proxy.utils.logging import get_logger

_DEFAULT_OPERATION_TIMEOUT = 5.0  # seconds


class RedisCacheProvider(ICacheProvider):
    """Cache adapter for a Redis server with native key expiry.

    Parameters
    ----------
    redis_client:
        Injected ``redis.asyncio.Redis`` client (owns the connection pool).
    default_ttl:
        Time-to-live in seconds applied when a write passes ``None`` or ``0``.
    operation_timeout:
        Deadline in seconds for each individual GET / SET.
    """

    def __init__(
        self,
        redis_client: aioredis.Redis,
        default_ttl: int = 86400,
        operation_timeout: float = _DEFAULT_OPERATION_TIMEOUT,
    ) -> None:
        self._redis = redis_client
        self._default_ttl = default_ttl
        self._operation_timeout = operation_timeout
        self._logger = get_logger(__name__)

    @classmethod
    def from_url(
        cls,
        url: str,
        default_ttl: int = 86400,
        operation_timeout: float = _DEFAULT_OPERATION_TIMEOUT,
    ) -> RedisCacheProvider:
        """Build a provider from a ``redis://`` URL (address and credentials)."""
        client = aioredis.from_url(
            url,
            socket_timeout=operation_timeout,
            socket_connect_timeout=operation_timeout,
        )
        return cls(client, default_ttl=default_ttl, operation_timeout=operation_timeout)

    # ------------------------------------------------------------------
    # ICacheProvider implementation
    # ------------------------------------------------------------------

    async def get(self, key: str) -> bytes | str | None:
        try:
            value = await asyncio.wait_for(self._redis.get(key), self._operation_timeout)
        except asyncio.TimeoutError as exc:
            raise CacheError(
                message=f"GET {key} timed out after {self._operation_timeout}s",
                provider_name=self.get_provider_name(),
            ) from exc
        except RedisError as exc:
            raise CacheError(
                message=f"GET {key} failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        if value is None:
            self._logger.debug("cache_miss", key=key)
        else:
            self._logger.debug("cache_hit", key=key)
        return value

    async def set(self, key: str, value: bytes | str, ttl: int | None = None) -> None:
        expiry = ttl or self._default_ttl
        try:
            await asyncio.wait_for(
                self._redis.set(key, value, ex=expiry), self._operation_timeout
            )
        except asyncio.TimeoutError as exc:
            raise CacheError(
                message=f"SET {key} timed out after {self._operation_timeout}s",
                provider_name=self.get_provider_name(),
            ) from exc
        except RedisError as exc:
            raise CacheError(
                message=f"SET {key} failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        self._logger.debug("cache_set", key=key, ttl=expiry)

    def get_provider_name(self) -> str:
        return "redis"

    async def close(self) -> None:
        """Release the underlying connection pool."""
        await self._redis.aclose()
