"""
Geocoding Provider Chain.

Resolves a location name to coordinates by trying independent geocoding
backends in a fixed priority order and returning the first usable result.
"""

import logging
from typing import List, Optional, Sequence

import httpx

from ..clients.geocoding import GeocodingProvider, build_default_providers
from ..config import Settings, get_settings
from ..exceptions import GeocodeError, GeocodingUnavailableError, ProviderUnavailableError
from ..models import GeocodeResult

logger = logging.getLogger(__name__)


class GeocodingProviderChain:
    """
    Ordered fallback across geocoding providers.

    - First configured, first tried; the order never changes at runtime
    - The first provider returning a result wins, later ones are not called
    - A provider with no match or an unreachable provider is skipped
    - No retries, no caching, no parallel calls
    """

    def __init__(
        self,
        providers: Optional[Sequence[GeocodingProvider]] = None,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._settings = settings or get_settings()
        self._providers: List[GeocodingProvider] = list(
            providers if providers is not None else build_default_providers(self._settings)
        )
        self._client = client

    @property
    def provider_names(self) -> List[str]:
        return [provider.name for provider in self._providers]

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self._settings.geocoder_timeout_seconds)
        return self._client

    async def geocode(self, location_name: str) -> GeocodeResult:
        """
        Geocode a location name.

        Args:
            location_name: Place name, e.g. "Boston, MA"

        Returns:
            GeocodeResult from the first provider with a match

        Raises:
            GeocodeError: No provider found the location
            GeocodingUnavailableError: Every provider was unreachable
        """
        client = await self._get_client()
        attempted: List[str] = []
        unreachable: List[str] = []

        logger.info(f"Geocoding location: {location_name}")

        for provider in self._providers:
            attempted.append(provider.name)

            try:
                result = await provider.geocode(client, location_name)
            except ProviderUnavailableError as e:
                logger.warning(f"Geocoding provider {provider.name} unreachable: {e.reason}")
                unreachable.append(provider.name)
                continue

            if result is not None:
                logger.info(
                    f"Geocoded '{location_name}' via {provider.name}: "
                    f"({result.lat}, {result.lng})"
                )
                return result

            logger.info(f"No geocoding result from {provider.name} for: {location_name}")

        if attempted and len(unreachable) == len(attempted):
            logger.error(f"All geocoding providers unreachable for: {location_name}")
            raise GeocodingUnavailableError(
                location_name,
                attempted=attempted,
                unreachable=unreachable,
                message="All geocoding providers are unavailable",
            )

        logger.warning(f"Geocoding failed for: {location_name} (tried {attempted})")
        raise GeocodeError(location_name, attempted=attempted, unreachable=unreachable)

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None


# Singleton instance
_geocoder_instance: Optional[GeocodingProviderChain] = None


def get_geocoder() -> GeocodingProviderChain:
    """Get the singleton geocoder instance."""
    global _geocoder_instance
    if _geocoder_instance is None:
        _geocoder_instance = GeocodingProviderChain()
    return _geocoder_instance
