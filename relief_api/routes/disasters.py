"""
Disaster Routes.

Create, list, fetch, update and delete disaster reports. Every mutation is
announced on the event bus as a "disaster_updated" event.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from ..middleware.auth import require_user
from ..models import Disaster, DisasterCreate, DisasterUpdate, ErrorResponse
from ..services.disasters import DisasterService, get_disaster_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/disasters", tags=["disasters"])


@router.post(
    "",
    response_model=Disaster,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "No location in description"},
        401: {"model": ErrorResponse, "description": "Missing credentials"},
        422: {"model": ErrorResponse, "description": "Location could not be geocoded"},
        502: {"model": ErrorResponse, "description": "Location extraction failed"},
        503: {"model": ErrorResponse, "description": "All geocoding providers unavailable"},
    },
    summary="Report Disaster",
    description="""
    Report a new disaster.

    The location is extracted from the description, geocoded, and stored as
    `POINT(<lng> <lat>)`. Nothing is stored if either step fails.

    **Example Request:**
    ```json
    {
        "title": "NYC Flood",
        "description": "Heavy flooding in Manhattan near Wall Street",
        "tags": ["flood", "urgent"]
    }
    ```
    """,
)
async def create_disaster(
    payload: DisasterCreate,
    user_id: str = Depends(require_user),
    service: DisasterService = Depends(get_disaster_service),
) -> Disaster:
    return await service.create(payload, owner_id=user_id)


@router.get(
    "",
    response_model=List[Disaster],
    summary="List Disasters",
    description="List disasters, newest first, optionally filtered by tag.",
)
async def list_disasters(
    tag: Optional[str] = Query(default=None, max_length=100, description="Only disasters with this tag"),
    service: DisasterService = Depends(get_disaster_service),
) -> List[Disaster]:
    return await service.list(tag=tag)


@router.get(
    "/{disaster_id}",
    response_model=Disaster,
    responses={404: {"model": ErrorResponse, "description": "Disaster not found"}},
    summary="Get Disaster",
)
async def get_disaster(
    disaster_id: str,
    service: DisasterService = Depends(get_disaster_service),
) -> Disaster:
    return await service.get(disaster_id)


@router.put(
    "/{disaster_id}",
    response_model=Disaster,
    responses={
        401: {"model": ErrorResponse, "description": "Missing credentials"},
        404: {"model": ErrorResponse, "description": "Disaster not found"},
    },
    summary="Update Disaster",
    description="Update title, description or tags. Appends an audit trail entry; location is never changed.",
)
async def update_disaster(
    disaster_id: str,
    payload: DisasterUpdate,
    user_id: str = Depends(require_user),
    service: DisasterService = Depends(get_disaster_service),
) -> Disaster:
    return await service.update(disaster_id, payload, user_id=user_id)


@router.delete(
    "/{disaster_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        401: {"model": ErrorResponse, "description": "Missing credentials"},
        404: {"model": ErrorResponse, "description": "Disaster not found"},
    },
    summary="Delete Disaster",
)
async def delete_disaster(
    disaster_id: str,
    user_id: str = Depends(require_user),
    service: DisasterService = Depends(get_disaster_service),
) -> Response:
    await service.delete(disaster_id, user_id=user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
