"""Configuration module — exports Settings."""

from spotify_search_proxy.config.settings import Settings

__all__ = ["Settings"]
