"""Search proxy FastAPI application entry point.

Wires together the cache, the Spotify client and the search service via
dependency injection.  Loads configuration from the environment / ``.env``,
configures structured logging, and fetches the first Spotify token during
startup so bad credentials stop the process instead of failing every
request.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import httpx
import structlog
import uvicorn
from fastapi import FastAPI

from spotify_search_proxy import __version__
from spotify_search_proxy.api.middleware import ErrorHandlingMiddleware, RequestLoggingMiddleware
from spotify_search_proxy.api.routes import router
from spotify_search_proxy.config.settings import Settings
from spotify_search_proxy.interfaces.cache_provider import ICacheProvider
from spotify_search_proxy.providers.cache.memory_cache import MemoryCacheProvider
from spotify_search_proxy.providers.cache.redis_cache import RedisCacheProvider
from spotify_search_proxy.providers.spotify.spotify_client import SpotifyClient
from spotify_search_proxy.services.search_service import SpotifySearchService
from spotify_search_proxy.utils.logging import configure_logging, get_logger

_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Dependency assembly
# ---------------------------------------------------------------------------


def _build_cache(app_settings: Settings) -> ICacheProvider:
    """Use Redis when ``REDIS_URL`` is set, otherwise the in-process cache."""
    if app_settings.redis_url:
        return RedisCacheProvider.from_url(
            app_settings.redis_url,
            default_ttl=app_settings.cache_default_ttl,
            operation_timeout=app_settings.cache_operation_timeout,
        )
    _logger.warning(
        "redis_not_configured",
        msg="REDIS_URL is empty; using the in-process cache.",
    )
    return MemoryCacheProvider(
        max_size=app_settings.cache_max_entries,
        ttl=app_settings.cache_default_ttl,
    )


def build_components(
    app_settings: Settings,
    http_client: httpx.AsyncClient | None = None,
    cache: ICacheProvider | None = None,
) -> dict[str, Any]:
    """Construct every component of the application.

    Returns a flat dict of named components to be stored on ``app.state``.
    ``http_client`` and ``cache`` may be injected (tests, instrumentation).
    """
    http_client = http_client or httpx.AsyncClient(timeout=app_settings.http_timeout)
    cache = cache or _build_cache(app_settings)

    search_client = SpotifyClient(
        client_id=app_settings.spotify_client_id,
        client_secret=app_settings.spotify_client_secret,
        http_client=http_client,
        token_url=app_settings.spotify_token_url,
        api_base_url=app_settings.spotify_api_base_url,
    )
    search_service = SpotifySearchService(search_client=search_client, cache=cache)

    return {
        "http_client": http_client,
        "cache": cache,
        "search_client": search_client,
        "search_service": search_service,
    }


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app(
    app_settings: Settings | None = None,
    components: dict[str, Any] | None = None,
) -> FastAPI:
    """Build and configure the FastAPI application.

    When *components* is given it is used as is and no Spotify token is
    fetched at startup.
    """
    app_settings = app_settings or Settings()

    @asynccontextmanager
    async def lifespan(application: FastAPI):  # noqa: ANN202
        owned = components is None
        if owned:
            app_settings.validate_spotify_credentials()
        state = build_components(app_settings) if owned else components
        for key, value in state.items():
            setattr(application.state, key, value)

        if owned:
            await state["search_client"].authenticate()

        _logger.info(
            "app_startup",
            version=__version__,
            environment=app_settings.app_env,
            cache=state["cache"].get_provider_name(),
        )

        yield

        if owned:
            await state["http_client"].aclose()
            cache = state["cache"]
            if isinstance(cache, RedisCacheProvider):
                await cache.close()
            _logger.info("app_shutdown", message="HTTP and cache clients closed")

    application = FastAPI(
        title="spotify-search-proxy",
        version=__version__,
        description="Caching first-result search proxy for the Spotify Web API.",
        lifespan=lifespan,
    )

    # Last added = first executed; request logging sees the converted status.
    application.add_middleware(ErrorHandlingMiddleware)
    if not app_settings.disable_middleware:
        application.add_middleware(RequestLoggingMiddleware)

    application.include_router(router)
    return application


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def run() -> None:
    """Start the server with uvicorn using environment settings."""
    settings = Settings()
    configure_logging(log_level=settings.log_level, json_output=settings.json_logs)
    uvicorn.run(
        create_app(settings),
        host=settings.app_host,
        port=settings.app_port,
        log_config=None,
    )


if __name__ == "__main__":
    run()
