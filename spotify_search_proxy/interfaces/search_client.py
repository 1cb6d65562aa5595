"""Abstract base class for upstream catalog search clients.

Defines the contract the search orchestrator uses to run a single-result
search against an external music catalog (currently the Spotify Web API).
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from spotify_search_proxy.models.search import SearchKind, SearchResult


class ISearchClient(ABC):
    """Contract for first-result catalog search."""

    @abstractmethod
    async def search(self, query: str, kind: SearchKind) -> SearchResult | None:
        """Return the first catalog entry of *kind* matching *query*.

        Parameters
        ----------
        query:
            Free-text query, already percent-decoded.  Implementations must
            not decode it again.
        kind:
            Which entity list to take the first item from.

        Returns
        -------
        SearchResult or None
            The first matching object, verbatim, or ``None`` when the
            catalog returned no candidates of *kind*.

        Raises
        ------
        UpstreamRequestError
            If the catalog call fails.
        CredentialRenewalError
            If a required token renewal fails.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier for the catalog (e.g. ``"spotify"``)."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` when the client currently holds a credential."""
