"""
Resource Routes.

Nearby relief resources for a disaster.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ..middleware.auth import require_user
from ..models import ErrorResponse, Resource
from ..services.resources import ProximityResourceMatcher, get_resource_matcher

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/disasters", tags=["resources"])


@router.get(
    "/{disaster_id}/resources",
    response_model=List[Resource],
    responses={
        401: {"model": ErrorResponse, "description": "Missing credentials"},
        404: {"model": ErrorResponse, "description": "Disaster not found"},
        500: {"model": ErrorResponse, "description": "Stored location is malformed"},
    },
    summary="Nearby Resources",
    description="""
    Find relief resources near a disaster.

    Pass `lat` and `lon` to search around an explicit point; otherwise the
    disaster's stored location is used. `distance` is the radius in km.
    """,
)
async def get_resources(
    disaster_id: str,
    lat: Optional[float] = Query(default=None, ge=-90, le=90),
    lon: Optional[float] = Query(default=None, ge=-180, le=180),
    distance: Optional[float] = Query(default=None, gt=0, le=500, description="Radius in km (default 10)"),
    user_id: str = Depends(require_user),
    matcher: ProximityResourceMatcher = Depends(get_resource_matcher),
) -> List[Resource]:
    return await matcher.find_near(disaster_id, lat=lat, lng=lon, radius_km=distance)
