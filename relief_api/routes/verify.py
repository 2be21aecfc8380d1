"""
Image Verification Routes.
"""

import logging

from fastapi import APIRouter, Depends

from ..middleware.auth import require_user
from ..models import ErrorResponse, ImageVerificationRequest, ImageVerificationResult
from ..services.cache import CacheService, get_cache_service
from ..services.disasters import DisasterService, get_disaster_service
from ..services.verification import ImageVerifier, get_image_verifier
from ..utils.common import verify_cache_key

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/disasters", tags=["verification"])


@router.post(
    "/{disaster_id}/verify-image",
    response_model=ImageVerificationResult,
    responses={
        401: {"model": ErrorResponse, "description": "Missing credentials"},
        404: {"model": ErrorResponse, "description": "Disaster not found"},
        502: {"model": ErrorResponse, "description": "Verification failed"},
    },
    summary="Verify Disaster Image",
    description="Check an image for signs of manipulation. Results are cached per disaster and URL.",
)
async def verify_image(
    disaster_id: str,
    payload: ImageVerificationRequest,
    user_id: str = Depends(require_user),
    verifier: ImageVerifier = Depends(get_image_verifier),
    disasters: DisasterService = Depends(get_disaster_service),
    cache: CacheService = Depends(get_cache_service),
) -> ImageVerificationResult:
    cache_key = verify_cache_key(disaster_id, payload.image_url)

    cached = await cache.get(cache_key)
    if cached is not None:
        return ImageVerificationResult(**cached)

    # Raises DisasterNotFoundError
    await disasters.get(disaster_id)

    result = await verifier.verify(payload.image_url)
    await cache.set(cache_key, result.model_dump())

    logger.info(f"Verified image for {disaster_id}: verified={result.verified}")
    return result
