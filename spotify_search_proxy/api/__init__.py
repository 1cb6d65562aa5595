"""Search proxy API layer — routes, schemas, and middleware."""

from spotify_search_proxy.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    error_status,
)
from spotify_search_proxy.api.routes import router
from spotify_search_proxy.api.schemas import ErrorResponse, HealthResponse

__all__ = [
    "ErrorHandlingMiddleware",
    "RequestLoggingMiddleware",
    "error_status",
    "router",
    "ErrorResponse",
    "HealthResponse",
]
