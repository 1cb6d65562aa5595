"""FastAPI routes for the search proxy.

    Endpoint                     Method  Description
    ──────────────────────────────────────────────────────────────
    /search/{kind}/{query}       GET     First artist/album/track match
    /search/...                  GET     400 for a missing kind or query segment
    /health                      GET     Health check + provider status

The query segment may itself contain ``/`` (``AC/DC``), so it is declared
with the ``path`` convertor.  Starlette hands path parameters over already
percent-decoded; the cache key must use the encoding the client sent, so
the raw segment is recovered from the ASGI ``raw_path``.

Service dependencies are resolved from ``app.state`` (populated in
``main.py``) through ``Depends`` helpers.
"""

from __future__ import annotations

from typing import Annotated, Any
from urllib.parse import quote

import structlog
from fastapi import APIRouter, Depends, Request

from spotify_search_proxy import __version__
from spotify_search_proxy.api.schemas import ErrorResponse, HealthResponse
from spotify_search_proxy.interfaces.cache_provider import ICacheProvider
from spotify_search_proxy.interfaces.search_client import ISearchClient
from spotify_search_proxy.services.search_service import SpotifySearchService
from spotify_search_proxy.utils.errors import MissingQueryError, MissingQueryTypeError
from spotify_search_proxy.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

router = APIRouter()

_SEARCH_PREFIX = "/search/"


# ---------------------------------------------------------------------------
# Dependency injection helpers — resolve singletons from app.state
# ---------------------------------------------------------------------------


def _get_search_service(request: Request) -> SpotifySearchService:
    """Return the search orchestrator from application state."""
    return request.app.state.search_service


def _get_search_client(request: Request) -> ISearchClient:
    return request.app.state.search_client


def _get_cache(request: Request) -> ICacheProvider:
    return request.app.state.cache


SearchServiceDep = Annotated[SpotifySearchService, Depends(_get_search_service)]
SearchClientDep = Annotated[ISearchClient, Depends(_get_search_client)]
CacheDep = Annotated[ICacheProvider, Depends(_get_cache)]


def raw_query_from_request(request: Request, decoded_query: str) -> str:
    """Return the query segment exactly as the client encoded it.

    Falls back to re-encoding the decoded path parameter when the server
    does not provide ``raw_path``.
    """
    raw_path: bytes | None = request.scope.get("raw_path")
    if raw_path:
        path = raw_path.decode("latin-1").split("?", 1)[0]
        _, found, rest = path.partition(_SEARCH_PREFIX)
        if found:
            _, _, raw_query = rest.partition("/")
            return raw_query
    return quote(decoded_query, safe="/")


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


@router.get(
    "/search/{kind}/{query:path}",
    summary="Return the first Spotify match for a query",
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def search(
    kind: str,
    query: str,
    request: Request,
    service: SearchServiceDep,
) -> Any:
    """Search Spotify for *query* and return the first *kind* result verbatim."""
    if not query:
        raise MissingQueryError()

    raw_query = raw_query_from_request(request, query)
    if not raw_query:
        raise MissingQueryError()

    return await service.search(raw_query, kind)


@router.get(
    "/search/{segments:path}",
    include_in_schema=False,
    responses={400: {"model": ErrorResponse}},
)
async def search_missing_segment(segments: str) -> Any:
    """Answer search paths lacking a kind (``/search//TWICE``) or a query.

    Registered after :func:`search`, so it only sees paths that route
    could not match.
    """
    kind, _, _ = segments.partition("/")
    if not kind:
        raise MissingQueryTypeError()
    raise MissingQueryError()


# ---------------------------------------------------------------------------
# System endpoints
# ---------------------------------------------------------------------------


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Application health check",
)
async def health_check(client: SearchClientDep, cache: CacheDep) -> HealthResponse:
    """Report whether a Spotify credential is held and which cache is in use."""
    providers: dict[str, Any] = {
        "spotify": client.is_available(),
        "cache": cache.get_provider_name(),
    }
    return HealthResponse(
        status="healthy" if providers["spotify"] else "degraded",
        version=__version__,
        providers=providers,
    )
