"""Domain models for the search path.

Defines the search-kind enum, the cache-key derivation, and the Spotify
access credential.  The search result itself is deliberately *not*
modelled: it is an opaque JSON value passed through verbatim from the
Spotify API to the cache and the HTTP response.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from spotify_search_proxy.utils.errors import InvalidQueryTypeError

CACHE_KEY_PREFIX = "spotify"

# An upstream search result: whatever JSON object Spotify returned.
SearchResult = Any


class SearchKind(str, Enum):  # noqa: UP042 — StrEnum requires Python 3.11+
    """Which catalog entity a search targets.

    Parsed once at the orchestrator boundary and passed by value to the
    Spotify client, which uses :attr:`container` to find the result list
    in the search response.
    """

    ARTIST = "artist"
    ALBUM = "album"
    TRACK = "track"

    @classmethod
    def parse(cls, token: str) -> SearchKind:
        """Return the kind named by *token*, or raise ``InvalidQueryTypeError``."""
        try:
            return cls(token)
        except ValueError:
            raise InvalidQueryTypeError(message=f"Invalid query type: {token}") from None

    @property
    def container(self) -> str:
        """Key of the paging object holding this kind's items, e.g. ``"artists"``."""
        return f"{self.value}s"


def build_cache_key(kind: SearchKind, raw_query: str) -> str:
    """Derive the cache key from the kind and the *raw* (still encoded) query.

    Two encodings of the same text (``a%20b`` and ``a+b``) produce two
    different keys.
    """
    return f"{CACHE_KEY_PREFIX}:{kind.value}:{raw_query}"


class Credential(BaseModel):
    """A client-credentials access token and its absolute expiry instant."""

    model_config = ConfigDict(frozen=True)

    access_token: str = Field(..., min_length=1)
    token_type: str = "Bearer"
    expires_at: datetime

    @classmethod
    def from_token_response(cls, data: dict[str, Any], now: datetime) -> Credential:
        """Build a credential from the token endpoint's JSON body."""
        return cls(
            access_token=data["access_token"],
            token_type=data.get("token_type") or "Bearer",
            expires_at=now + timedelta(seconds=int(data["expires_in"])),
        )

    def expires_within(self, margin: timedelta, now: datetime) -> bool:
        """``True`` when the token expires no later than ``now + margin``."""
        return self.expires_at <= now + margin

    @property
    def authorization_header(self) -> str:
        return f"{self.token_type} {self.access_token}"
