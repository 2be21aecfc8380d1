"""
External Data Clients Module.

Provides async clients for the external capabilities the API relies on:
- Geocoding providers: Google Maps, Mapbox, OpenStreetMap Nominatim
- GeminiClient: Location extraction and image analysis
- SocialFeed: Citizen reports (mock feed by default)
"""

from .geocoding import (
    GeocodingProvider,
    GoogleMapsProvider,
    MapboxProvider,
    NominatimProvider,
    build_default_providers,
)
from .gemini_client import GeminiClient, get_gemini_client
from .social_feed import SocialFeed, MockSocialFeed, get_social_feed

__all__ = [
    "GeocodingProvider",
    "GoogleMapsProvider",
    "MapboxProvider",
    "NominatimProvider",
    "build_default_providers",
    "GeminiClient",
    "get_gemini_client",
    "SocialFeed",
    "MockSocialFeed",
    "get_social_feed",
]
