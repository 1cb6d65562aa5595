"""Custom exception hierarchy for the search proxy.

All application exceptions inherit from :class:`SearchProxyError`, which
carries an optional ``provider_name`` so error handlers can identify which
external service (e.g. "spotify", "redis") caused the failure.

The hierarchy is organized by how the HTTP layer must treat the failure:

    SearchProxyError  (base -- catch-all for any proxy error)
    +-- InvalidQueryTypeError    (InvalidInput: kind not artist/album/track)
    +-- MissingQueryTypeError    (InvalidInput: empty kind segment)
    +-- MissingQueryError        (InvalidInput: empty query segment)
    +-- NoResultsFoundError      (NotFound: upstream returned nothing)
    +-- SpotifyClientError       (UpstreamFailure, raised by the orchestrator)
    +-- UpstreamRequestError     (catalog call failed inside the Spotify client)
    +-- CredentialRenewalError   (token endpoint failed inside the Spotify client)
    +-- CacheError               (CacheDegradation: absorbed, never surfaced)
    +-- QueryDecodeError         (internal: malformed percent-encoding)
    +-- ResultSerializationError (internal: result is not JSON-serializable)
    +-- ConfigurationError       (startup / missing config)

``UpstreamRequestError`` and ``CredentialRenewalError`` never leave the
orchestrator unwrapped: :class:`~spotify_search_proxy.services.search_service.SpotifySearchService`
chains them into a ``SpotifyClientError``.
"""


class SearchProxyError(Exception):
    """Base exception for all search proxy errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which external service triggered the
    error.  The ``__str__`` method prefixes the provider name in brackets
    for structured log output, e.g. ``[spotify] Token request failed``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Client-facing input errors
# ---------------------------------------------------------------------------

class InvalidQueryTypeError(SearchProxyError):
    """Raised when the requested search kind is not artist, album or track."""

    def __init__(
        self,
        message: str = "Invalid query type",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class MissingQueryTypeError(SearchProxyError):
    """Raised when a search request arrives without a kind segment."""

    def __init__(
        self,
        message: str = "Query type is required",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class MissingQueryError(SearchProxyError):
    """Raised when a search request arrives without a query."""

    def __init__(
        self,
        message: str = "Query is required",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class NoResultsFoundError(SearchProxyError):
    """Raised when the upstream catalog has no candidate for the query."""

    def __init__(
        self,
        message: str = "No results found",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Upstream errors
# ---------------------------------------------------------------------------

class SpotifyClientError(SearchProxyError):
    """Raised by the orchestrator when the upstream search client fails.

    The original client exception is always chained as ``__cause__``.
    """

    def __init__(
        self,
        message: str = "Spotify client error",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class UpstreamRequestError(SearchProxyError):
    """Raised when a catalog search call fails (transport, status, or body)."""

    def __init__(
        self,
        message: str = "Upstream request failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class CredentialRenewalError(SearchProxyError):
    """Raised when a fresh access token cannot be obtained.

    The previously held credential is left untouched when this is raised.
    """

    def __init__(
        self,
        message: str = "Credential renewal failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Cache errors
# ---------------------------------------------------------------------------

class CacheError(SearchProxyError):
    """Raised by cache adapters for any failure other than a miss.

    The orchestrator logs and absorbs these; a missing key is reported by
    returning ``None``, never by raising.
    """

    def __init__(
        self,
        message: str = "Cache operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Internal / configuration errors
# ---------------------------------------------------------------------------

class QueryDecodeError(SearchProxyError):
    """Raised when the raw query is not valid percent-encoded UTF-8."""

    def __init__(
        self,
        message: str = "Query could not be decoded",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ResultSerializationError(SearchProxyError):
    """Raised when an upstream result cannot be serialized to JSON."""

    def __init__(
        self,
        message: str = "Result could not be serialized",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ConfigurationError(SearchProxyError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
