"""
Disaster Persistence.

DisasterRepository is the boundary to whatever database stores disaster
records. InMemoryDisasterRepository backs development and tests; a
production deployment swaps in a database-backed implementation.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..models import AuditEntry, Disaster

logger = logging.getLogger(__name__)


class DisasterRepository(ABC):
    """Storage contract for disaster records."""

    @abstractmethod
    async def insert(self, disaster: Disaster) -> Disaster:
        """Persist a new disaster and return the stored record."""

    @abstractmethod
    async def get(self, disaster_id: str) -> Optional[Disaster]:
        """Fetch one disaster, or None if it does not exist."""

    @abstractmethod
    async def list(self, tag: Optional[str] = None) -> List[Disaster]:
        """List disasters newest first, optionally only those carrying a tag."""

    @abstractmethod
    async def update(
        self,
        disaster_id: str,
        changes: Dict[str, Any],
        audit_entry: AuditEntry,
    ) -> Optional[Disaster]:
        """Apply changes and append one audit entry. None if not found."""

    @abstractmethod
    async def delete(self, disaster_id: str) -> bool:
        """Hard delete. Returns False if the disaster did not exist."""


class InMemoryDisasterRepository(DisasterRepository):
    """Dictionary-backed repository. Operations never await, so each is atomic on the event loop."""

    # Fields an update may never touch
    _PROTECTED_FIELDS = frozenset(
        ("id", "owner_id", "location_name", "location", "audit_trail", "created_at")
    )

    def __init__(self):
        self._records: Dict[str, Disaster] = {}

    async def insert(self, disaster: Disaster) -> Disaster:
        self._records[disaster.id] = disaster
        return disaster

    async def get(self, disaster_id: str) -> Optional[Disaster]:
        return self._records.get(disaster_id)

    async def list(self, tag: Optional[str] = None) -> List[Disaster]:
        records = list(self._records.values())
        if tag:
            records = [d for d in records if tag in d.tags]
        return sorted(records, key=lambda d: d.created_at, reverse=True)

    async def update(
        self,
        disaster_id: str,
        changes: Dict[str, Any],
        audit_entry: AuditEntry,
    ) -> Optional[Disaster]:
        current = self._records.get(disaster_id)
        if current is None:
            return None

        allowed = {k: v for k, v in changes.items() if k not in self._PROTECTED_FIELDS}
        updated = current.model_copy(
            update={**allowed, "audit_trail": [*current.audit_trail, audit_entry]}
        )
        self._records[disaster_id] = updated
        return updated

    async def delete(self, disaster_id: str) -> bool:
        return self._records.pop(disaster_id, None) is not None


# Singleton instance
_repository_instance: Optional[DisasterRepository] = None


def get_disaster_repository() -> DisasterRepository:
    """Get the singleton repository instance."""
    global _repository_instance
    if _repository_instance is None:
        _repository_instance = InMemoryDisasterRepository()
        logger.info("Using in-memory disaster repository")
    return _repository_instance
