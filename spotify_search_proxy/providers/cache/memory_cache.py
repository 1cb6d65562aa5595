"""In-memory cache provider using cachetools.TLRUCache.

Simple, fast cache suitable for development, tests and single-process
deployments without Redis.  Each entry carries its own TTL, matching the
Redis adapter's per-write expiry.
"""

from __future__ import annotations

import time
from typing import Callable

import structlog
from cachetools import TLRUCache

from spotify_search_proxy.interfaces.cache_provider import ICacheProvider

logger = structlog.get_logger(logger_name=__name__)

_Entry = tuple[bytes | str, int]


def _time_to_use(_key: str, entry: _Entry, now: float) -> float:
    return now + entry[1]


class MemoryCacheProvider(ICacheProvider):
    """In-memory cache backed by ``cachetools.TLRUCache``.

    Parameters
    ----------
    max_size:
        Maximum number of entries before the least-recently-used entry
        is evicted.
    ttl:
        Default time-to-live in seconds, applied when a write has none.
    timer:
        Monotonic clock used for expiry; injectable for tests.
    """

    def __init__(
        self,
        max_size: int = 1000,
        ttl: int = 86400,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self._default_ttl = ttl
        self._cache: TLRUCache[str, _Entry] = TLRUCache(
            maxsize=max_size, ttu=_time_to_use, timer=timer
        )

    # ------------------------------------------------------------------
    # ICacheProvider implementation
    # ------------------------------------------------------------------

    async def get(self, key: str) -> bytes | str | None:
        """Retrieve the cached value for *key*, or ``None`` if missing/expired."""
        entry = self._cache.get(key)
        if entry is None:
            logger.debug("cache_miss", key=key)
            return None
        logger.debug("cache_hit", key=key)
        return entry[0]

    async def set(self, key: str, value: bytes | str, ttl: int | None = None) -> None:
        """Store *value* under *key* for *ttl* seconds (default TTL if falsy)."""
        self._cache[key] = (value, ttl or self._default_ttl)
        logger.debug("cache_set", key=key)

    def get_provider_name(self) -> str:
        return "memory"
