"""
Disaster Pipeline.

Creates, updates and deletes disaster records. Creation is staged: the
location is resolved and geocoded in full before anything is persisted, so a
failed resolution or geocode leaves no record and publishes nothing.
"""

import logging
import uuid
from typing import List, Optional, Tuple

from ..exceptions import DisasterNotFoundError, UnknownLocationError
from ..models import (
    AuditAction,
    AuditEntry,
    Disaster,
    DisasterCreate,
    DisasterUpdate,
    GeocodeResult,
)
from ..storage.repository import DisasterRepository, get_disaster_repository
from ..utils.common import format_point
from .events import DISASTER_UPDATED, EventBus, get_event_bus
from .geocoder import GeocodingProviderChain, get_geocoder
from .location import UNKNOWN_LOCATION, LocationResolver, get_location_resolver

logger = logging.getLogger(__name__)


class DisasterService:
    """Disaster lifecycle: resolve, geocode, persist, announce."""

    def __init__(
        self,
        resolver: Optional[LocationResolver] = None,
        geocoder: Optional[GeocodingProviderChain] = None,
        repository: Optional[DisasterRepository] = None,
        event_bus: Optional[EventBus] = None,
    ):
        self._resolver = resolver or get_location_resolver()
        self._geocoder = geocoder or get_geocoder()
        self._repository = repository or get_disaster_repository()
        self._event_bus = event_bus or get_event_bus()

    async def locate(self, description: str) -> Tuple[str, GeocodeResult]:
        """
        Resolve a description to a location name and coordinates.

        Raises:
            UnknownLocationError: No place is mentioned
            ResolutionError: The extraction call failed
            GeocodeError: No provider could geocode the name
        """
        location_name = await self._resolver.resolve(description)
        if location_name == UNKNOWN_LOCATION:
            raise UnknownLocationError()

        coordinates = await self._geocoder.geocode(location_name)
        return location_name, coordinates

    async def create(self, payload: DisasterCreate, owner_id: str) -> Disaster:
        """Report a new disaster on behalf of owner_id."""
        location_name, coordinates = await self.locate(payload.description)

        disaster = Disaster(
            id=str(uuid.uuid4()),
            title=payload.title,
            description=payload.description,
            tags=payload.tags,
            owner_id=owner_id,
            location_name=location_name,
            location=format_point(coordinates.lat, coordinates.lng),
            audit_trail=[AuditEntry(action=AuditAction.CREATE, user_id=owner_id)],
        )

        stored = await self._repository.insert(disaster)

        self._event_bus.publish(
            DISASTER_UPDATED,
            {"action": "create", "disaster": stored.model_dump(mode="json")},
            disaster_id=stored.id,
        )
        logger.info(f"disaster_create: disaster_id={stored.id} owner={owner_id}")
        return stored

    async def list(self, tag: Optional[str] = None) -> List[Disaster]:
        return await self._repository.list(tag=tag)

    async def get(self, disaster_id: str) -> Disaster:
        disaster = await self._repository.get(disaster_id)
        if disaster is None:
            raise DisasterNotFoundError(disaster_id)
        return disaster

    async def update(self, disaster_id: str, payload: DisasterUpdate, user_id: str) -> Disaster:
        """Apply an update and append an audit entry."""
        entry = AuditEntry(action=AuditAction.UPDATE, user_id=user_id)
        updated = await self._repository.update(disaster_id, payload.changes(), entry)
        if updated is None:
            raise DisasterNotFoundError(disaster_id)

        self._event_bus.publish(
            DISASTER_UPDATED,
            {"action": "update", "disaster": updated.model_dump(mode="json")},
            disaster_id=disaster_id,
        )
        logger.info(f"disaster_update: disaster_id={disaster_id} user={user_id}")
        return updated

    async def delete(self, disaster_id: str, user_id: str) -> None:
        deleted = await self._repository.delete(disaster_id)
        if not deleted:
            raise DisasterNotFoundError(disaster_id)

        self._event_bus.publish(
            DISASTER_UPDATED,
            {"action": "delete", "disaster": {"id": disaster_id}},
            disaster_id=disaster_id,
        )
        logger.info(f"disaster_delete: disaster_id={disaster_id} user={user_id}")


# Singleton instance
_service_instance: Optional[DisasterService] = None


def get_disaster_service() -> DisasterService:
    """Get the singleton disaster service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = DisasterService()
    return _service_instance
