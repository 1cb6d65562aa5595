"""Abstract base class for cache service providers.

Defines the contract for key-value caching of serialized search results.
Implementations may use Redis or an in-process TTL cache.  The adapter
pattern allows the cache backend to be swapped without touching the search
orchestrator.

The contract distinguishes a *miss* from a *failure*: a missing or expired
key is reported by returning ``None``; anything else (connection refused,
timeout, protocol error) raises :class:`~spotify_search_proxy.utils.errors.CacheError`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class ICacheProvider(ABC):
    """Contract for key-value cache services.

    All operations are async to allow for network-backed stores (e.g. Redis)
    without blocking the event loop.
    """

    @abstractmethod
    async def get(self, key: str) -> bytes | str | None:
        """Retrieve the value stored under *key*.

        Parameters
        ----------
        key:
            The cache key to look up.

        Returns
        -------
        bytes, str or None
            The stored value if present and not expired; ``None`` on a miss.

        Raises
        ------
        CacheError
            If the backend could not answer.
        """

    @abstractmethod
    async def set(self, key: str, value: bytes | str, ttl: int | None = None) -> None:
        """Store *value* under *key* with a time-to-live.

        Parameters
        ----------
        key:
            The cache key.
        value:
            The serialized payload.
        ttl:
            Time-to-live in seconds.  ``None`` or ``0`` applies the
            provider's default TTL.  The TTL given on write is authoritative;
            reads never extend it.

        Raises
        ------
        CacheError
            If the backend could not store the value.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier for the backend (e.g. ``"redis"``)."""
