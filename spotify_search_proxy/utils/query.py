"""Strict percent-decoding for raw search queries.

Queries arrive percent-encoded in the URL path.  They are decoded exactly
once before being handed to the Spotify client, which re-encodes them when
building the upstream request.  ``urllib.parse.unquote_plus`` silently
passes malformed escapes through, so they are rejected here first.
"""

from __future__ import annotations

import re
from urllib.parse import unquote_plus

from spotify_search_proxy.utils.errors import QueryDecodeError

_MALFORMED_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def decode_query(raw_query: str) -> str:
    """Decode *raw_query* with query-string rules (``+`` becomes a space).

    Raises
    ------
    QueryDecodeError
        If the query contains a ``%`` not followed by two hex digits, or
        the escapes do not form valid UTF-8.
    """
    match = _MALFORMED_ESCAPE.search(raw_query)
    if match:
        raise QueryDecodeError(
            message=f"Invalid percent-escape at position {match.start()} in query"
        )
    try:
        return unquote_plus(raw_query, errors="strict")
    except UnicodeDecodeError as exc:
        raise QueryDecodeError(message=f"Query is not valid UTF-8: {exc}") from exc
