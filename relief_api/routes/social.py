"""
Social Media Routes.

Citizen reports for a disaster, tagged with urgency.
"""

from typing import List

from fastapi import APIRouter, Depends

from ..middleware.auth import require_user
from ..models import ErrorResponse, SocialReport
from ..services.social import SocialReportService, get_social_service

router = APIRouter(prefix="/disasters", tags=["social"])


@router.get(
    "/{disaster_id}/social-media",
    response_model=List[SocialReport],
    responses={401: {"model": ErrorResponse, "description": "Missing credentials"}},
    summary="Social Media Reports",
    description="Social reports for a disaster, each classified as `Normal` or `High` priority.",
)
async def get_social_media(
    disaster_id: str,
    user_id: str = Depends(require_user),
    service: SocialReportService = Depends(get_social_service),
) -> List[SocialReport]:
    return await service.get_reports(disaster_id)
