"""
Geocoding Provider Clients.

Each provider turns a location name into a coordinate pair using one
external backend:
- GoogleMapsProvider: Google Geocoding API (requires key)
- MapboxProvider: Mapbox Places API (requires key)
- NominatimProvider: OpenStreetMap Nominatim (free, no key required)

Providers follow a two-outcome contract: they return a GeocodeResult when a
usable pair is found, None when the backend answers but knows no such place,
and raise ProviderUnavailableError when the backend cannot be reached or
answers with something unusable.
"""

import logging
import math
from abc import ABC, abstractmethod
from typing import Any, List, Optional
from urllib.parse import quote

import httpx

from ..config import Settings
from ..exceptions import ProviderUnavailableError
from ..models import GeocodeResult

logger = logging.getLogger(__name__)

GOOGLE_GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"
MAPBOX_GEOCODE_URL = "https://api.mapbox.com/geocoding/v5/mapbox.places/{query}.json"


def _coerce_pair(lat: Any, lng: Any) -> Optional[GeocodeResult]:
    """Build a result only from a complete, finite, in-range pair."""
    try:
        lat_f = float(lat)
        lng_f = float(lng)
    except (TypeError, ValueError):
        return None

    if not (math.isfinite(lat_f) and math.isfinite(lng_f)):
        return None
    if not (-90 <= lat_f <= 90 and -180 <= lng_f <= 180):
        return None

    return GeocodeResult(lat=lat_f, lng=lng_f)


class GeocodingProvider(ABC):
    """Base class for a single geocoding backend."""

    name: str = "provider"

    async def geocode(
        self,
        client: httpx.AsyncClient,
        location_name: str,
    ) -> Optional[GeocodeResult]:
        """
        Look up coordinates for a location name.

        Args:
            client: Shared HTTP client
            location_name: Place name, e.g. "Boston, MA"

        Returns:
            GeocodeResult, or None if the provider has no match

        Raises:
            ProviderUnavailableError: On transport or response-format failure
        """
        try:
            response = await self._request(client, location_name)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise ProviderUnavailableError(self.name, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise ProviderUnavailableError(self.name, str(e) or type(e).__name__) from e
        except ValueError as e:
            raise ProviderUnavailableError(self.name, f"invalid JSON: {e}") from e

        try:
            return self._parse(data)
        except (AttributeError, TypeError, IndexError, KeyError) as e:
            raise ProviderUnavailableError(self.name, "unexpected response shape") from e

    @abstractmethod
    async def _request(self, client: httpx.AsyncClient, location_name: str) -> httpx.Response:
        """Issue the provider-specific HTTP request."""

    @abstractmethod
    def _parse(self, data: Any) -> Optional[GeocodeResult]:
        """Extract the first match from the provider's JSON body."""


class GoogleMapsProvider(GeocodingProvider):
    """Google Maps Geocoding API."""

    name = "google_maps"

    def __init__(self, api_key: str):
        self._api_key = api_key

    async def _request(self, client: httpx.AsyncClient, location_name: str) -> httpx.Response:
        return await client.get(
            GOOGLE_GEOCODE_URL,
            params={"address": location_name, "key": self._api_key},
        )

    def _parse(self, data: Any) -> Optional[GeocodeResult]:
        if not isinstance(data, dict):
            raise ProviderUnavailableError(self.name, "unexpected response shape")

        # ZERO_RESULTS is a miss; quota and key problems are not
        status = data.get("status", "OK")
        if status not in ("OK", "ZERO_RESULTS"):
            raise ProviderUnavailableError(self.name, f"status {status}")

        results = data.get("results") or []
        if not results:
            return None

        location = results[0].get("geometry", {}).get("location", {})
        return _coerce_pair(location.get("lat"), location.get("lng"))


class MapboxProvider(GeocodingProvider):
    """Mapbox Places API. Feature centers are [lng, lat]."""

    name = "mapbox"

    def __init__(self, api_key: str):
        self._api_key = api_key

    async def _request(self, client: httpx.AsyncClient, location_name: str) -> httpx.Response:
        url = MAPBOX_GEOCODE_URL.format(query=quote(location_name, safe=""))
        return await client.get(url, params={"access_token": self._api_key})

    def _parse(self, data: Any) -> Optional[GeocodeResult]:
        if not isinstance(data, dict):
            raise ProviderUnavailableError(self.name, "unexpected response shape")

        features = data.get("features") or []
        if not features:
            return None

        center = features[0].get("center") or []
        if len(center) < 2:
            return None
        return _coerce_pair(center[1], center[0])


class NominatimProvider(GeocodingProvider):
    """OpenStreetMap Nominatim search. Coordinates come back as strings."""

    name = "nominatim"

    def __init__(self, base_url: str, user_agent: str):
        self._base_url = base_url
        self._user_agent = user_agent

    async def _request(self, client: httpx.AsyncClient, location_name: str) -> httpx.Response:
        return await client.get(
            self._base_url,
            params={"format": "json", "q": location_name},
            # Nominatim usage policy requires an identifying User-Agent
            headers={"User-Agent": self._user_agent},
        )

    def _parse(self, data: Any) -> Optional[GeocodeResult]:
        if not isinstance(data, list):
            raise ProviderUnavailableError(self.name, "unexpected response shape")
        if not data:
            return None

        first = data[0]
        return _coerce_pair(first.get("lat"), first.get("lon"))


def build_default_providers(settings: Settings) -> List[GeocodingProvider]:
    """
    Build the provider list in fixed priority order.

    Keyed providers are only included when their key is configured;
    Nominatim is always last.
    """
    providers: List[GeocodingProvider] = []

    if settings.google_maps_api_key:
        providers.append(GoogleMapsProvider(settings.google_maps_api_key))

    if settings.mapbox_api_key:
        providers.append(MapboxProvider(settings.mapbox_api_key))

    providers.append(
        NominatimProvider(settings.nominatim_base_url, settings.nominatim_user_agent)
    )

    logger.info(f"Geocoding providers: {[p.name for p in providers]}")
    return providers
