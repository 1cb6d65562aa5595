"""Shared pytest fixtures for the search proxy test suite."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from spotify_search_proxy.interfaces.cache_provider import ICacheProvider
from spotify_search_proxy.interfaces.search_client import ISearchClient
from spotify_search_proxy.providers.spotify.spotify_client import SpotifyClient

# ---------------------------------------------------------------------------
# Sample upstream data
# ---------------------------------------------------------------------------

TWICE_ARTIST: dict[str, Any] = {
    "id": "7n2Ycct7Beij7Dj7meI4X0",
    "name": "TWICE",
    "type": "artist",
    "genres": ["k-pop", "k-pop girl group"],
    "popularity": 78,
    "followers": {"href": None, "total": 17000000},
    "external_urls": {"spotify": "https://open.spotify.com/artist/7n2Ycct7Beij7Dj7meI4X0"},
}


def search_payload(kind: str, items: list[dict[str, Any]]) -> dict[str, Any]:
    """Build a Spotify ``/v1/search`` body with one paging object."""
    return {
        f"{kind}s": {
            "href": f"https://api.spotify.com/v1/search?type={kind}",
            "items": items,
            "limit": 1,
            "offset": 0,
            "total": len(items),
        }
    }


# ---------------------------------------------------------------------------
# Fake Spotify endpoints (httpx.MockTransport)
# ---------------------------------------------------------------------------


class FakeClock:
    """Mutable UTC clock for credential-expiry tests."""

    def __init__(self) -> None:
        self.now = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class FakeSpotify:
    """Token and search endpoints backed by an ``httpx.MockTransport`` handler.

    ``token_gate`` (when set) holds every token response until released,
    so tests can observe a renewal in flight.
    """

    def __init__(self, expires_in: int = 3600) -> None:
        self.expires_in = expires_in
        self.token_status = 200
        self.token_body: dict[str, Any] | None = None
        self.token_calls = 0
        self.token_started = asyncio.Event()
        self.token_gate: asyncio.Event | None = None
        self.search_status = 200
        self.search_body: dict[str, Any] = search_payload("artist", [TWICE_ARTIST])
        self.search_requests: list[httpx.Request] = []

    async def handler(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/token":
            return await self._token(request)
        if request.url.path == "/v1/search":
            self.search_requests.append(request)
            if self.search_status != 200:
                return httpx.Response(self.search_status, json={"error": {"status": self.search_status}})
            return httpx.Response(200, json=self.search_body)
        return httpx.Response(404)

    async def _token(self, request: httpx.Request) -> httpx.Response:
        self.token_calls += 1
        self.token_started.set()
        if self.token_gate is not None:
            await self.token_gate.wait()
        else:
            # Yield so concurrent callers really overlap with the renewal.
            await asyncio.sleep(0)
        if self.token_status != 200:
            return httpx.Response(self.token_status, json={"error": "invalid_client"})
        if self.token_body is not None:
            return httpx.Response(200, json=self.token_body)
        return httpx.Response(
            200,
            json={
                "access_token": f"token-{self.token_calls}",
                "token_type": "Bearer",
                "expires_in": self.expires_in,
            },
        )

    def http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_spotify() -> FakeSpotify:
    return FakeSpotify()


@pytest.fixture
def spotify_client(fake_spotify: FakeSpotify, fake_clock: FakeClock) -> SpotifyClient:
    """SpotifyClient wired to the fake endpoints and the fake clock."""
    return SpotifyClient(
        client_id="test-client-id",
        client_secret="test-client-secret",
        http_client=fake_spotify.http_client(),
        clock=fake_clock,
    )


# ---------------------------------------------------------------------------
# Mock ports
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_search_client() -> ISearchClient:
    """Mock ISearchClient returning the TWICE artist by default."""
    mock = MagicMock(spec=ISearchClient)
    mock.get_provider_name.return_value = "mock-spotify"
    mock.is_available.return_value = True
    mock.search = AsyncMock(return_value=dict(TWICE_ARTIST))
    return mock


@pytest.fixture
def mock_cache() -> ICacheProvider:
    """Mock ICacheProvider that always misses and accepts writes."""
    mock = MagicMock(spec=ICacheProvider)
    mock.get_provider_name.return_value = "mock-cache"
    mock.get = AsyncMock(return_value=None)
    mock.set = AsyncMock(return_value=None)
    return mock
