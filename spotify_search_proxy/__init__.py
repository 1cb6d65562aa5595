"""Caching search proxy in front of the Spotify Web API."""

__version__ = "0.1.0"
