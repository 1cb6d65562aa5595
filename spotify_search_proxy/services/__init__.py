"""Application services."""

from spotify_search_proxy.services.search_service import (
    SEARCH_RESULT_TTL_SECONDS,
    SpotifySearchService,
)

__all__ = ["SEARCH_RESULT_TTL_SECONDS", "SpotifySearchService"]
