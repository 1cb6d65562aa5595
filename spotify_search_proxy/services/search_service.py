"""Search orchestration: cache in front of the upstream catalog.

``SpotifySearchService.search`` is the whole request-level policy:

    validate kind → derive key → cache read → decode query →
    upstream search → serialize → cache write (best-effort) → return

Cache policy is fail-open.  Any cache read problem (miss, undecodable
payload, backend down) falls through to a live lookup, and a failed write
is logged without failing the request.  The service stays correct with the
cache entirely unavailable; it is only slower.

Concurrent searches for the same uncached key may both reach Spotify.
Both write the same payload under the same key, so the duplicate call is
wasted work rather than a correctness problem.
"""

from __future__ import annotations

import json

import structlog

from spotify_search_proxy.interfaces.cache_provider import ICacheProvider
from spotify_search_proxy.interfaces.search_client import ISearchClient
from spotify_search_proxy.models.search import SearchKind, SearchResult, build_cache_key
from spotify_search_proxy.utils.errors import (
    NoResultsFoundError,
    ResultSerializationError,
    SpotifyClientError,
)
from spotify_search_proxy.utils.logging import get_logger
from spotify_search_proxy.utils.query import decode_query

SEARCH_RESULT_TTL_SECONDS = 24 * 60 * 60


class SpotifySearchService:
    """Cached first-result search over an :class:`ISearchClient`.

    Parameters
    ----------
    search_client:
        Upstream catalog client (owns credential renewal).
    cache:
        Cache backend for serialized results.
    result_ttl:
        Time-to-live in seconds for cached results.
    """

    def __init__(
        self,
        search_client: ISearchClient,
        cache: ICacheProvider,
        result_ttl: int = SEARCH_RESULT_TTL_SECONDS,
    ) -> None:
        self._client = search_client
        self._cache = cache
        self._result_ttl = result_ttl
        self._logger: structlog.BoundLogger = get_logger(__name__)

    # -- Public API -----------------------------------------------------------

    async def search(self, raw_query: str, kind_token: str) -> SearchResult:
        """Return the first *kind_token* result for *raw_query*.

        Parameters
        ----------
        raw_query:
            The query exactly as it appeared in the URL (still percent-encoded).
        kind_token:
            ``"artist"``, ``"album"`` or ``"track"``.

        Raises
        ------
        InvalidQueryTypeError
            *kind_token* is not a known kind.  Nothing else is attempted.
        QueryDecodeError
            *raw_query* is not valid percent-encoded UTF-8.
        SpotifyClientError
            The upstream client failed; the cause is chained.
        NoResultsFoundError
            Spotify returned no candidate of the requested kind.
        ResultSerializationError
            The upstream result could not be encoded as JSON.
        """
        kind = SearchKind.parse(kind_token)
        key = build_cache_key(kind, raw_query)

        cached = await self._cache_get(key)
        if cached is not None:
            return cached

        decoded_query = decode_query(raw_query)

        try:
            result = await self._client.search(decoded_query, kind)
        except Exception as exc:
            self._logger.warning(
                "upstream_search_failed",
                kind=kind.value,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            raise SpotifyClientError(
                message=f"Spotify client error: {exc}",
                provider_name=self._client.get_provider_name(),
            ) from exc

        if result is None:
            self._logger.info("no_results_found", kind=kind.value, query=decoded_query)
            raise NoResultsFoundError(message=f"No {kind.value} found for '{decoded_query}'")

        try:
            payload = json.dumps(result)
        except (TypeError, ValueError) as exc:
            raise ResultSerializationError(
                message=f"Could not serialize {kind.value} result: {exc}"
            ) from exc

        await self._cache_set(key, payload)
        return result

    # -- Cache helpers ---------------------------------------------------------
    # Cache operations never raise out of this class: a read problem is a
    # miss and a write problem is logged.

    async def _cache_get(self, key: str) -> SearchResult | None:
        """Return the decoded cached result for *key*, or ``None``."""
        try:
            raw = await self._cache.get(key)
        except Exception as exc:
            self._logger.warning(
                "cache_read_failed",
                key=key,
                provider=self._cache.get_provider_name(),
                error=str(exc),
            )
            return None

        if raw is None:
            return None

        try:
            value = json.loads(raw)
        except ValueError as exc:
            self._logger.warning("cache_payload_invalid", key=key, error=str(exc))
            return None

        self._logger.debug("search_cache_hit", key=key)
        return value

    async def _cache_set(self, key: str, payload: str) -> None:
        try:
            await self._cache.set(key, payload, ttl=self._result_ttl)
        except Exception as exc:
            self._logger.warning(
                "cache_write_failed",
                key=key,
                provider=self._cache.get_provider_name(),
                error=str(exc),
            )
