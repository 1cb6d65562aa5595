"""Domain models — re-exports the public search model classes."""

from __future__ import annotations

from spotify_search_proxy.models.search import (
    CACHE_KEY_PREFIX,
    Credential,
    SearchKind,
    SearchResult,
    build_cache_key,
)

__all__ = [
    "CACHE_KEY_PREFIX",
    "Credential",
    "SearchKind",
    "SearchResult",
    "build_cache_key",
]
