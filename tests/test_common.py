"""Tests for point handling, distance and cache keys."""

import pytest

from relief_api.exceptions import ResourceLookupError
from relief_api.utils import (
    format_number,
    format_point,
    haversine_km,
    parse_point,
    resources_cache_key,
    social_cache_key,
    updates_cache_key,
    verify_cache_key,
)


def test_parse_point_returns_lng_lat():
    assert parse_point("POINT(-73.9857 40.7484)") == (-73.9857, 40.7484)


def test_parse_point_accepts_integers_and_plus_sign():
    assert parse_point("POINT(+10 -5)") == (10.0, -5.0)


@pytest.mark.parametrize(
    "text",
    [
        "",
        "POINT(-73.9857,40.7484)",
        "POINT(-73.9857  40.7484)",
        "POINT( -73.9857 40.7484)",
        "POINT(-73.9857 40.7484",
        "point(-73.9857 40.7484)",
        "POINT(abc def)",
        "POINT(-73.9857 40.7484) trailing",
        "POINT(1e3 40)",
        None,
    ],
)
def test_parse_point_rejects_malformed_input(text):
    with pytest.raises(ResourceLookupError) as exc_info:
        parse_point(text)

    assert exc_info.value.message == "Invalid location format in database"
    assert exc_info.value.status_code == 500


def test_format_point_is_longitude_first():
    assert format_point(42.36, -71.06) == "POINT(-71.06 42.36)"


def test_format_point_output_parses_back():
    lng, lat = parse_point(format_point(40.7484, -73.9857))
    assert (lat, lng) == (40.7484, -73.9857)


@pytest.mark.parametrize(
    "value, expected",
    [
        (10.0, "10"),
        (10, "10"),
        (-73.9857, "-73.9857"),
        (0.5, "0.5"),
        (1e-05, "0.00001"),
    ],
)
def test_format_number(value, expected):
    assert format_number(value) == expected


def test_resources_cache_key_drops_integral_fraction():
    key = resources_cache_key("abc", 40.7484, -73.9857, 10.0)
    assert key == "resources:abc:40.7484:-73.9857:10"


def test_other_cache_keys():
    assert social_cache_key("d-1") == "social:d-1"
    assert updates_cache_key("d-1") == "updates:d-1"
    assert verify_cache_key("d-1", "https://x/img.jpg") == "verify:d-1:https://x/img.jpg"


def test_haversine_same_point_is_zero():
    assert haversine_km(40.7484, -73.9857, 40.7484, -73.9857) == 0


def test_haversine_new_york_to_boston():
    distance = haversine_km(40.7128, -74.0060, 42.3601, -71.0589)
    assert 300 < distance < 310
