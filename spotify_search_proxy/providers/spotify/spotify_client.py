"""Spotify Web API search client with a self-renewing access token.

Implements :class:`ISearchClient` on top of an injected ``httpx.AsyncClient``
so the bootstrap layer controls timeouts, connection pooling and any
instrumentation of outbound traffic.

Authentication uses the OAuth2 client-credentials grant.  The resulting
:class:`~spotify_search_proxy.models.search.Credential` is the only state
shared across requests:

- every search reads it under the shared side of a :class:`ReadWriteLock`;
- a search that finds it within ``renewal_margin`` of expiry starts a
  renewal, or joins the one already in flight, so N callers arriving
  together trigger one token request between them;
- the renewal swaps the credential under the exclusive side, re-checking
  first in case ``authenticate`` ran meanwhile;
- a failed renewal leaves the previous credential in place and raises the
  same :class:`CredentialRenewalError` to every caller that awaited it.

Renewal runs in its own task, held on the client until it finishes and
shielded from the triggering request: if that
request is cancelled mid-renewal, the token request still completes and the
new credential is still installed for everyone else.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

import httpx

from spotify_search_proxy.interfaces.search_client import ISearchClient
from spotify_search_proxy.models.search import Credential, SearchKind, SearchResult
from spotify_search_proxy.utils.concurrency import ReadWriteLock
from spotify_search_proxy.utils.errors import CredentialRenewalError, UpstreamRequestError
from spotify_search_proxy.utils.logging import get_logger

TOKEN_URL = "https://accounts.spotify.com/api/token"
API_BASE_URL = "https://api.spotify.com/v1"
_RENEWAL_MARGIN = timedelta(minutes=5)
_SEARCH_LIMIT = 1  # only the first candidate is ever used


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class SpotifyClient(ISearchClient):
    """First-result search against the Spotify catalog.

    Parameters
    ----------
    client_id, client_secret:
        Spotify application credentials for the client-credentials grant.
    http_client:
        Injected ``httpx.AsyncClient`` used for both the token endpoint and
        the search endpoint.
    token_url, api_base_url:
        Endpoint overrides (tests, proxies).
    renewal_margin:
        A credential expiring within this window is renewed before use.
    clock:
        Returns the current timezone-aware UTC time; injectable for tests.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        http_client: httpx.AsyncClient,
        *,
        token_url: str = TOKEN_URL,
        api_base_url: str = API_BASE_URL,
        renewal_margin: timedelta = _RENEWAL_MARGIN,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._client_id = client_id
        self._client_secret = client_secret
        self._http = http_client
        self._token_url = token_url
        self._search_url = f"{api_base_url.rstrip('/')}/search"
        self._renewal_margin = renewal_margin
        self._clock = clock
        self._credential: Credential | None = None
        self._lock = ReadWriteLock()
        self._renewal: asyncio.Task[Credential] | None = None
        self._logger = get_logger(__name__)

    # -- ISearchClient implementation ------------------------------------------

    def get_provider_name(self) -> str:
        return "spotify"

    def is_available(self) -> bool:
        return self._credential is not None

    @property
    def credential(self) -> Credential | None:
        """The credential currently installed, if any."""
        return self._credential

    async def authenticate(self) -> Credential:
        """Obtain a credential now, regardless of the current one's expiry.

        Called once at startup so that bad client credentials fail fast.
        """
        async with self._lock.write():
            self._credential = await self._request_token()
            return self._credential

    async def search(self, query: str, kind: SearchKind) -> SearchResult | None:
        """Return the first *kind* result for *query*, or ``None``."""
        credential = await self._valid_credential()

        try:
            response = await self._http.get(
                self._search_url,
                params={"q": query, "type": kind.value, "limit": _SEARCH_LIMIT},
                headers={"Authorization": credential.authorization_header},
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            self._logger.warning(
                "spotify_search_failed",
                kind=kind.value,
                status=exc.response.status_code,
            )
            raise UpstreamRequestError(
                message=f"Spotify search returned HTTP {exc.response.status_code}",
                provider_name=self.get_provider_name(),
            ) from exc
        except httpx.HTTPError as exc:
            self._logger.warning("spotify_search_failed", kind=kind.value, error=str(exc))
            raise UpstreamRequestError(
                message=f"Spotify search request failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        except ValueError as exc:
            raise UpstreamRequestError(
                message=f"Spotify search returned a non-JSON body: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        result = self._first_item(payload, kind)
        self._logger.debug("spotify_search_complete", kind=kind.value, found=result is not None)
        return result

    # -- Private helpers -------------------------------------------------------

    @staticmethod
    def _first_item(payload: Any, kind: SearchKind) -> SearchResult | None:
        """Pick the first entry of ``payload[<kind>s]["items"]``."""
        if not isinstance(payload, dict):
            return None
        page = payload.get(kind.container)
        if not isinstance(page, dict):
            return None
        items = page.get("items") or []
        return items[0] if items else None

    def _needs_renewal(self, credential: Credential | None) -> bool:
        return credential is None or credential.expires_within(
            self._renewal_margin, self._clock()
        )

    async def _valid_credential(self) -> Credential:
        """Return a credential valid for at least the renewal margin."""
        async with self._lock.read():
            credential = self._credential
        if not self._needs_renewal(credential):
            return credential

        # No await between the check and the assignment: one renewal in flight.
        if self._renewal is None:
            self._renewal = asyncio.ensure_future(self._renew_if_needed())
            self._renewal.add_done_callback(_retrieve_exception)
        return await asyncio.shield(self._renewal)

    async def _renew_if_needed(self) -> Credential:
        try:
            async with self._lock.write():
                # authenticate() may have replaced the credential meanwhile.
                if not self._needs_renewal(self._credential):
                    return self._credential
                self._credential = await self._request_token()
                return self._credential
        finally:
            self._renewal = None

    async def _request_token(self) -> Credential:
        """POST the client-credentials grant and build a :class:`Credential`."""
        try:
            response = await self._http.post(
                self._token_url,
                data={"grant_type": "client_credentials"},
                auth=(self._client_id, self._client_secret),
            )
            response.raise_for_status()
            credential = Credential.from_token_response(response.json(), self._clock())
        except httpx.HTTPStatusError as exc:
            self._logger.error(
                "spotify_token_renewal_failed",
                status=exc.response.status_code,
            )
            raise CredentialRenewalError(
                message=f"Token endpoint returned HTTP {exc.response.status_code}",
                provider_name=self.get_provider_name(),
            ) from exc
        except httpx.HTTPError as exc:
            self._logger.error("spotify_token_renewal_failed", error=str(exc))
            raise CredentialRenewalError(
                message=f"Token request failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        except (ValueError, KeyError, TypeError) as exc:
            self._logger.error("spotify_token_renewal_failed", error=repr(exc))
            raise CredentialRenewalError(
                message=f"Token endpoint returned an unusable body: {exc!r}",
                provider_name=self.get_provider_name(),
            ) from exc

        self._logger.info("spotify_token_renewed", expires_at=credential.expires_at.isoformat())
        return credential


def _retrieve_exception(task: asyncio.Future) -> None:
    # The triggering request may have been cancelled; its renewal outcome is
    # then observed only here.
    if not task.cancelled():
        task.exception()
