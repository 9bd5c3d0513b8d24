"""Tests for utils/place_id.py."""

from __future__ import annotations

import pytest

from placecache.utils.place_id import extract_place_id


@pytest.mark.parametrize("url,expected", [
    ("https://maps.googleapis.com/maps/api/place/details/json?place_id=ChIJabc123", "ChIJabc123"),
    ("https://www.google.com/maps/search/?api=1&query=Park&query_place_id=ChIJxyz", "ChIJxyz"),
    ("https://www.google.com/maps/place/?q=place_id:ChIJ-SZuer-foRQR_xVHROWWreM", "ChIJ-SZuer-foRQR_xVHROWWreM"),
    ("https://example.com/place_id/ChIJpath", "ChIJpath"),
    ("https://example.com/venues/place_id:ChIJcolon/details", "ChIJcolon"),
])
def test_extracts(url, expected):
    assert extract_place_id(url) == expected


def test_query_parameter_wins_over_path():
    assert extract_place_id("https://example.com/place_id/FromPath?place_id=FromQuery") == "FromQuery"


@pytest.mark.parametrize("url", [
    "",
    None,
    "not a url",
    "https://www.google.com/maps/place/Some+Park/",
    "https://www.google.com/maps/place/?q=Some+Park",
    "https://example.com/?place_id=",
    "http://[invalid-ipv6/path",
])
def test_returns_none(url):
    assert extract_place_id(url) is None
