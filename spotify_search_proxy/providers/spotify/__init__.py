"""Spotify Web API adapter."""

from spotify_search_proxy.providers.spotify.spotify_client import SpotifyClient

__all__ = ["SpotifyClient"]
