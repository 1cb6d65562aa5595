"""API middleware — request logging and error handling.

``ErrorHandlingMiddleware`` is where the closed error taxonomy becomes HTTP:

    InvalidQueryTypeError, MissingQueryTypeError,
    MissingQueryError                         →  400
    NoResultsFoundError                       →  404
    SpotifyClientError                        →  502
    any other SearchProxyError                →  500

Starlette middleware is a stack (last added, first executed).  ``main.py``
adds ErrorHandling first and RequestLogging second, so the request log sees
the final status code after error conversion.
"""

from __future__ import annotations

import time
import uuid

import structlog
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from spotify_search_proxy.api.schemas import ErrorResponse
from spotify_search_proxy.utils.errors import (
    InvalidQueryTypeError,
    MissingQueryError,
    MissingQueryTypeError,
    NoResultsFoundError,
    SearchProxyError,
    SpotifyClientError,
)
from spotify_search_proxy.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

# (exception type, status code, client-facing message); first match wins.
_ERROR_MAP: tuple[tuple[type[SearchProxyError], int, str], ...] = (
    (InvalidQueryTypeError, 400, "invalid search type"),
    (MissingQueryTypeError, 400, "type is required"),
    (MissingQueryError, 400, "query is required"),
    (NoResultsFoundError, 404, "no results found"),
    (SpotifyClientError, 502, "spotify client error"),
)
_INTERNAL_ERROR = (500, "internal server error")


def error_status(exc: SearchProxyError) -> tuple[int, str]:
    """Return the HTTP status and public message for *exc*."""
    for error_type, status_code, message in _ERROR_MAP:
        if isinstance(exc, error_type):
            return status_code, message
    return _INTERNAL_ERROR


# ---------------------------------------------------------------------------
# Request Logging
# ---------------------------------------------------------------------------


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every HTTP request with method, path, status code, and duration.

    Binds a short ``request_id`` into structlog's context so every event
    logged while handling the request (cache, Spotify, errors) carries it.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        start = time.perf_counter()
        response: Response | None = None
        structlog.contextvars.bind_contextvars(request_id=uuid.uuid4().hex[:12])

        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            status_code = response.status_code if response else 500
            _logger.info(
                "http_request",
                method=request.method,
                path=str(request.url.path),
                status=status_code,
                duration_ms=duration_ms,
            )
            structlog.contextvars.unbind_contextvars("request_id")


# ---------------------------------------------------------------------------
# Error Handling
# ---------------------------------------------------------------------------


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Convert ``SearchProxyError`` subclasses into structured JSON errors.

    Internal details (provider names, upstream messages) are logged
    server-side only; the client sees the short public message.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        try:
            return await call_next(request)
        except SearchProxyError as exc:
            status_code, public_message = error_status(exc)
            log = _logger.warning if status_code < 500 else _logger.error
            log(
                "application_error",
                error_type=type(exc).__name__,
                message=exc.message,
                provider=exc.provider_name,
                status=status_code,
                path=str(request.url.path),
            )
            body = ErrorResponse(error=public_message)
            return JSONResponse(
                status_code=status_code,
                content=body.model_dump(exclude_none=True),
            )
