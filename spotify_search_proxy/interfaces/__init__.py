"""Public interface definitions for the external services.

Both external dependencies of the search path (the cache backend and the
upstream catalog) are accessed exclusively through the abstract base
classes defined here.  Concrete adapters live in ``providers/`` and are
wired together in ``main.py``.

    Interface       →  Concrete implementations
    ──────────────────────────────────────────────
    ICacheProvider  →  RedisCacheProvider, MemoryCacheProvider
    ISearchClient   →  SpotifyClient
"""

from spotify_search_proxy.interfaces.cache_provider import ICacheProvider
from spotify_search_proxy.interfaces.search_client import ISearchClient

__all__ = [
    "ICacheProvider",
    "ISearchClient",
]
