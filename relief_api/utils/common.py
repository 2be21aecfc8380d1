"""
Common utilities shared across services and routes.

Provides centralized implementations for:
- Persisted point format (POINT(<lng> <lat>)) parsing and formatting
- Cache key construction (keys must stay bit-for-bit stable)
- Great-circle distance
"""

import math
import re
from typing import Tuple, Union

from ..exceptions import ResourceLookupError

Number = Union[int, float, str]

EARTH_RADIUS_KM = 6371.0

# Longitude first, single space, signed decimals only
POINT_PATTERN = re.compile(r"^POINT\(([-+]?\d+(?:\.\d+)?) ([-+]?\d+(?:\.\d+)?)\)$")


def format_number(value: Number) -> str:
    """
    Render a number the way it appears in stored points and cache keys.

    Integral values drop the trailing ".0" and exponent notation is never
    produced, so the output always fits POINT_PATTERN.

    Example:
        >>> format_number(10.0)
        "10"
        >>> format_number(-73.9857)
        "-73.9857"
    """
    number = float(value)
    if number.is_integer():
        return str(int(number))

    text = repr(number)
    if "e" in text or "E" in text:
        text = f"{number:.15f}".rstrip("0").rstrip(".")
    return text


def format_point(lat: Number, lng: Number) -> str:
    """
    Build the persisted point representation.

    Example:
        >>> format_point(42.36, -71.06)
        "POINT(-71.06 42.36)"
    """
    return f"POINT({format_number(lng)} {format_number(lat)})"


def parse_point(text: str) -> Tuple[float, float]:
    """
    Parse a persisted point into (lng, lat).

    Args:
        text: Stored representation, exactly "POINT(<lng> <lat>)"

    Returns:
        Tuple of (longitude, latitude)

    Raises:
        ResourceLookupError: If the text does not match the grammar
    """
    match = POINT_PATTERN.match(text) if isinstance(text, str) else None
    if not match:
        raise ResourceLookupError(
            "Invalid location format in database",
            details={"location": text},
        )
    return float(match.group(1)), float(match.group(2))


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance between two WGS84 points in km."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lng2 - lng1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(a), math.sqrt(1 - a))


# ============== Cache Keys ==============


def resources_cache_key(disaster_id: str, lat: Number, lng: Number, radius_km: Number) -> str:
    return (
        f"resources:{disaster_id}:{format_number(lat)}:"
        f"{format_number(lng)}:{format_number(radius_km)}"
    )


def social_cache_key(disaster_id: str) -> str:
    return f"social:{disaster_id}"


def verify_cache_key(disaster_id: str, image_url: str) -> str:
    return f"verify:{disaster_id}:{image_url}"


def updates_cache_key(disaster_id: str) -> str:
    return f"updates:{disaster_id}"
