"""
Proximity Resource Matcher.

Finds relief resources near a disaster. The query origin is either given
explicitly or derived from the disaster's stored point. Results are cached
per (disaster, origin, radius) and announced to live subscribers.
"""

import logging
from typing import List, Optional, Tuple

from ..config import Settings, get_settings
from ..exceptions import DisasterNotFoundError
from ..models import Resource
from ..storage.repository import DisasterRepository, get_disaster_repository
from ..storage.resources import ResourceIndex, get_resource_index
from ..utils.common import parse_point, resources_cache_key
from .cache import CacheService, get_cache_service
from .events import RESOURCES_UPDATED, EventBus, get_event_bus

logger = logging.getLogger(__name__)


class ProximityResourceMatcher:
    """Resolves a query origin and retrieves nearby resources through the cache."""

    def __init__(
        self,
        repository: Optional[DisasterRepository] = None,
        index: Optional[ResourceIndex] = None,
        cache: Optional[CacheService] = None,
        event_bus: Optional[EventBus] = None,
        settings: Optional[Settings] = None,
    ):
        self._settings = settings or get_settings()
        self._repository = repository or get_disaster_repository()
        self._index = index or get_resource_index()
        self._cache = cache or get_cache_service()
        self._event_bus = event_bus or get_event_bus()

    async def resolve_origin(
        self,
        disaster_id: str,
        lat: Optional[float] = None,
        lng: Optional[float] = None,
    ) -> Tuple[float, float]:
        """
        Determine the (lat, lng) to search around.

        Explicit coordinates are used only when both are given; otherwise the
        disaster's stored point is loaded and parsed.

        Raises:
            DisasterNotFoundError: The disaster does not exist
            ResourceLookupError: The stored point is malformed
        """
        if lat is not None and lng is not None:
            return float(lat), float(lng)

        disaster = await self._repository.get(disaster_id)
        if disaster is None:
            raise DisasterNotFoundError(disaster_id)

        stored_lng, stored_lat = parse_point(disaster.location)
        return stored_lat, stored_lng

    async def find_near(
        self,
        disaster_id: str,
        lat: Optional[float] = None,
        lng: Optional[float] = None,
        radius_km: Optional[float] = None,
    ) -> List[Resource]:
        """
        Find resources within radius_km of the query origin.

        Args:
            disaster_id: Disaster the query is for
            lat: Explicit origin latitude (optional)
            lng: Explicit origin longitude (optional)
            radius_km: Search radius (defaults to resource_search_radius_km)

        Returns:
            Resources as returned by the spatial query, nearest first
        """
        radius = self._settings.resource_search_radius_km if radius_km is None else radius_km
        origin_lat, origin_lng = await self.resolve_origin(disaster_id, lat, lng)

        # Key is built from the resolved origin so disasters never share entries
        cache_key = resources_cache_key(disaster_id, origin_lat, origin_lng, radius)

        cached = await self._cache.get(cache_key)
        if cached is not None:
            return [Resource(**item) for item in cached]

        resources = await self._index.find_resources_near(
            lat=origin_lat,
            lng=origin_lng,
            distance_km=radius,
        )

        serialized = [r.model_dump() for r in resources]
        await self._cache.set(cache_key, serialized)

        self._event_bus.publish(
            RESOURCES_UPDATED,
            {"disaster_id": disaster_id, "resources": serialized},
            disaster_id=disaster_id,
        )

        return resources


# Singleton instance
_matcher_instance: Optional[ProximityResourceMatcher] = None


def get_resource_matcher() -> ProximityResourceMatcher:
    """Get the singleton resource matcher instance."""
    global _matcher_instance
    if _matcher_instance is None:
        _matcher_instance = ProximityResourceMatcher()
    return _matcher_instance
