"""
Spatial Resource Index.

ResourceIndex is the boundary to the spatial query that finds relief
resources within a radius of a point (a PostGIS function in production).
InMemoryResourceIndex answers the same query with a haversine scan over a
fixed resource list.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, List, Optional

from ..models import Resource
from ..utils.common import haversine_km

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResourceRecord:
    """A stored resource location."""
    id: str
    name: str
    category: str
    lat: float
    lng: float


# Sample NYC relief resources
DEFAULT_RESOURCES = (
    ResourceRecord("res-001", "Red Cross Shelter - Lower East Side", "shelter", 40.7157, -73.9863),
    ResourceRecord("res-002", "Bellevue Hospital Center", "hospital", 40.7394, -73.9754),
    ResourceRecord("res-003", "Javits Center Emergency Shelter", "shelter", 40.7578, -74.0022),
    ResourceRecord("res-004", "Brooklyn Food Bank Distribution", "food", 40.6782, -73.9442),
    ResourceRecord("res-005", "Mount Sinai Hospital", "hospital", 40.7900, -73.9526),
    ResourceRecord("res-006", "Queens Community Relief Center", "shelter", 40.7282, -73.7949),
    ResourceRecord("res-007", "Harlem Water Distribution Point", "water", 40.8116, -73.9465),
    ResourceRecord("res-008", "Staten Island Evacuation Center", "shelter", 40.5795, -74.1502),
)


class ResourceIndex(ABC):
    """Spatial query contract."""

    @abstractmethod
    async def find_resources_near(
        self,
        lat: float,
        lng: float,
        distance_km: float,
    ) -> List[Resource]:
        """Return resources within distance_km of (lat, lng), nearest first."""


class InMemoryResourceIndex(ResourceIndex):
    """Haversine scan over an in-memory resource list."""

    def __init__(self, resources: Iterable[ResourceRecord] = DEFAULT_RESOURCES):
        self._resources = list(resources)

    async def find_resources_near(
        self,
        lat: float,
        lng: float,
        distance_km: float,
    ) -> List[Resource]:
        matches = []
        for record in self._resources:
            distance = haversine_km(lat, lng, record.lat, record.lng)
            if distance <= distance_km:
                matches.append(
                    Resource(
                        id=record.id,
                        name=record.name,
                        category=record.category,
                        lat=record.lat,
                        lng=record.lng,
                        distance_km=round(distance, 3),
                    )
                )

        matches.sort(key=lambda r: r.distance_km)
        logger.info(f"Found {len(matches)} resources within {distance_km}km of ({lat}, {lng})")
        return matches


# Singleton instance
_index_instance: Optional[ResourceIndex] = None


def get_resource_index() -> ResourceIndex:
    """Get the singleton resource index instance."""
    global _index_instance
    if _index_instance is None:
        _index_instance = InMemoryResourceIndex()
    return _index_instance
