"""Adapters implementing the interfaces in ``spotify_search_proxy.interfaces``."""
