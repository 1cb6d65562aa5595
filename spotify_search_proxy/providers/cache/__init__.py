"""Cache providers.

RedisCacheProvider is the production backend: shared across workers, with
native per-key TTL.  MemoryCacheProvider is a process-local fallback used
when no ``REDIS_URL`` is configured, and in tests.
"""

from spotify_search_proxy.providers.cache.memory_cache import MemoryCacheProvider
from spotify_search_proxy.providers.cache.redis_cache import RedisCacheProvider

__all__ = ["MemoryCacheProvider", "RedisCacheProvider"]
