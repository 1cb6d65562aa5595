"""Utility modules for the search proxy.

- **errors** -- Domain-specific exception hierarchy rooted at SearchProxyError;
  each layer raises its own subclass so the HTTP layer can map failures to
  status codes without broad ``except Exception`` blocks.
- **concurrency** -- asyncio reader/writer lock guarding the shared Spotify
  credential.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
- **query** -- strict percent-decoding of raw search queries.
"""

# -- Domain exception hierarchy --------------------------------------------
from spotify_search_proxy.utils.errors import (
    CacheError,
    ConfigurationError,
    CredentialRenewalError,
    InvalidQueryTypeError,
    MissingQueryError,
    MissingQueryTypeError,
    NoResultsFoundError,
    QueryDecodeError,
    ResultSerializationError,
    SearchProxyError,
    SpotifyClientError,
    UpstreamRequestError,
)

# -- Async concurrency helpers ---------------------------------------------
from spotify_search_proxy.utils.concurrency import ReadWriteLock

# -- Structured logging setup ----------------------------------------------
from spotify_search_proxy.utils.logging import configure_logging, get_logger

# -- Query decoding ----------------------------------------------------------
from spotify_search_proxy.utils.query import decode_query

__all__ = [
    "CacheError",
    "ConfigurationError",
    "CredentialRenewalError",
    "InvalidQueryTypeError",
    "MissingQueryError",
    "MissingQueryTypeError",
    "NoResultsFoundError",
    "QueryDecodeError",
    "ReadWriteLock",
    "ResultSerializationError",
    "SearchProxyError",
    "SpotifyClientError",
    "UpstreamRequestError",
    "configure_logging",
    "decode_query",
    "get_logger",
]
