"""Unit tests for the search models and query decoding."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from spotify_search_proxy.models.search import (
    Credential,
    SearchKind,
    build_cache_key,
)
from spotify_search_proxy.utils.errors import InvalidQueryTypeError, QueryDecodeError
from spotify_search_proxy.utils.query import decode_query

NOW = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


# ======================================================================
# SearchKind
# ======================================================================


class TestSearchKind:
    @pytest.mark.parametrize(
        "token,expected",
        [
            ("artist", SearchKind.ARTIST),
            ("album", SearchKind.ALBUM),
            ("track", SearchKind.TRACK),
        ],
    )
    def test_parse_valid(self, token: str, expected: SearchKind) -> None:
        assert SearchKind.parse(token) is expected

    @pytest.mark.parametrize("token", ["playlist", "Artist", "", "tracks"])
    def test_parse_invalid(self, token: str) -> None:
        with pytest.raises(InvalidQueryTypeError) as exc_info:
            SearchKind.parse(token)
        assert exc_info.value.__cause__ is None

    def test_container(self) -> None:
        assert SearchKind.ARTIST.container == "artists"
        assert SearchKind.ALBUM.container == "albums"
        assert SearchKind.TRACK.container == "tracks"

    def test_is_str(self) -> None:
        assert SearchKind.TRACK == "track"


# ======================================================================
# Cache key
# ======================================================================


class TestCacheKey:
    def test_format(self) -> None:
        assert build_cache_key(SearchKind.ARTIST, "TWICE") == "spotify:artist:TWICE"

    def test_uses_raw_query(self) -> None:
        assert build_cache_key(SearchKind.TRACK, "Feel%20Special") == "spotify:track:Feel%20Special"

    def test_kind_separates_keys(self) -> None:
        assert build_cache_key(SearchKind.ALBUM, "x") != build_cache_key(SearchKind.TRACK, "x")


# ======================================================================
# Credential
# ======================================================================


class TestCredential:
    def test_from_token_response(self) -> None:
        credential = Credential.from_token_response(
            {"access_token": "abc", "token_type": "Bearer", "expires_in": 3600}, NOW
        )
        assert credential.access_token == "abc"
        assert credential.expires_at == NOW + timedelta(hours=1)
        assert credential.authorization_header == "Bearer abc"

    def test_token_type_defaults_to_bearer(self) -> None:
        credential = Credential.from_token_response({"access_token": "abc", "expires_in": 60}, NOW)
        assert credential.token_type == "Bearer"

    def test_missing_fields(self) -> None:
        with pytest.raises(KeyError):
            Credential.from_token_response({"access_token": "abc"}, NOW)

    def test_empty_token_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Credential(access_token="", expires_at=NOW)

    def test_frozen(self) -> None:
        credential = Credential(access_token="abc", expires_at=NOW)
        with pytest.raises(ValidationError):
            credential.access_token = "other"  # type: ignore[misc]

    @pytest.mark.parametrize(
        "remaining,expected",
        [
            (timedelta(minutes=10), False),
            (timedelta(minutes=5, seconds=1), False),
            (timedelta(minutes=5), True),
            (timedelta(minutes=1), True),
            (timedelta(minutes=-1), True),
        ],
    )
    def test_expires_within(self, remaining: timedelta, expected: bool) -> None:
        credential = Credential(access_token="abc", expires_at=NOW + remaining)
        assert credential.expires_within(timedelta(minutes=5), NOW) is expected


# ======================================================================
# Query decoding
# ======================================================================


class TestDecodeQuery:
    @pytest.mark.parametrize(
        "raw,decoded",
        [
            ("TWICE", "TWICE"),
            ("Red%20Velvet", "Red Velvet"),
            ("Red+Velvet", "Red Velvet"),
            ("AC%2FDC", "AC/DC"),
            ("%ED%8A%B8%EC%99%80%EC%9D%B4%EC%8A%A4", "트와이스"),
            ("100%25", "100%"),
            ("%2b", "+"),
        ],
    )
    def test_decodes(self, raw: str, decoded: str) -> None:
        assert decode_query(raw) == decoded

    @pytest.mark.parametrize("raw", ["100%", "%zz", "a%2", "%%20"])
    def test_malformed_escape(self, raw: str) -> None:
        with pytest.raises(QueryDecodeError):
            decode_query(raw)

    def test_invalid_utf8(self) -> None:
        with pytest.raises(QueryDecodeError):
            decode_query("%ff%fe")
