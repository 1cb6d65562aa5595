"""Pydantic response schemas for the search proxy API.

Search results are not modelled: the route returns Spotify's JSON object
verbatim.  Only the envelopes the proxy itself produces are defined here.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: str
    detail: str | None = None


class HealthResponse(BaseModel):
    """Application health check response."""

    status: str
    version: str
    providers: dict[str, Any]
