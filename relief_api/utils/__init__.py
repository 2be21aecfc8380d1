"""
Shared utilities for the Disaster Response Coordination API.

This module provides common functions used across multiple services and
routes so that point formats and cache keys are produced in one place.
"""

from .common import (
    format_number,
    format_point,
    parse_point,
    haversine_km,
    resources_cache_key,
    social_cache_key,
    verify_cache_key,
    updates_cache_key,
    POINT_PATTERN,
)

__all__ = [
    "format_number",
    "format_point",
    "parse_point",
    "haversine_km",
    "resources_cache_key",
    "social_cache_key",
    "verify_cache_key",
    "updates_cache_key",
    "POINT_PATTERN",
]
