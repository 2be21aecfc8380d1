"""
Storage Boundaries Module.

Interfaces to the external stores the API depends on, each with an
in-memory implementation:
- DisasterRepository: disaster records (create/read/update/delete)
- ResourceIndex: spatial "resources near a point" query
"""

from .repository import DisasterRepository, InMemoryDisasterRepository, get_disaster_repository
from .resources import (
    ResourceIndex,
    InMemoryResourceIndex,
    ResourceRecord,
    DEFAULT_RESOURCES,
    get_resource_index,
)

__all__ = [
    "DisasterRepository",
    "InMemoryDisasterRepository",
    "get_disaster_repository",
    "ResourceIndex",
    "InMemoryResourceIndex",
    "ResourceRecord",
    "DEFAULT_RESOURCES",
    "get_resource_index",
]
