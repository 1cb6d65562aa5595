"""Allow ``python -m spotify_search_proxy``."""

from spotify_search_proxy.main import run

run()
