"""
Geocode Route.

Extracts a location from free text and returns its coordinates without
creating a disaster.
"""

import logging

from fastapi import APIRouter, Depends

from ..exceptions import APIError
from ..models import ErrorResponse, GeocodeRequest, GeocodeResponse
from ..services.disasters import DisasterService, get_disaster_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["geocode"])


@router.post(
    "/geocode",
    response_model=GeocodeResponse,
    responses={
        400: {"model": ErrorResponse, "description": "No location in description"},
        422: {"model": ErrorResponse, "description": "Location could not be geocoded"},
        502: {"model": ErrorResponse, "description": "Location extraction failed"},
    },
    summary="Geocode Description",
    description="""
    Extract a location name from a description and geocode it.

    **Example Response:**
    ```json
    {"location_name": "Boston, MA", "coordinates": {"lat": 42.36, "lng": -71.06}}
    ```
    """,
)
async def geocode_description(
    payload: GeocodeRequest,
    service: DisasterService = Depends(get_disaster_service),
) -> GeocodeResponse:
    try:
        location_name, coordinates = await service.locate(payload.description)
    except APIError as e:
        logger.warning(f"geocode_failure: {e.code} - {e.message}")
        raise

    logger.info(f"geocode_success: location={location_name}")
    return GeocodeResponse(location_name=location_name, coordinates=coordinates)
