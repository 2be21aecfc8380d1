"""
Official Updates Routes.

Headline updates scraped from an official news source, cached for a
shorter interval than other lookups.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends

from ..config import Settings, get_settings
from ..exceptions import NoUpdatesFoundError
from ..middleware.auth import require_user
from ..models import ErrorResponse, OfficialUpdate
from ..scrapers.updates_scraper import OfficialUpdatesScraper, get_updates_scraper
from ..services.cache import CacheService, get_cache_service
from ..utils.common import updates_cache_key

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/disasters", tags=["updates"])


@router.get(
    "/{disaster_id}/official-updates",
    response_model=List[OfficialUpdate],
    responses={
        401: {"model": ErrorResponse, "description": "Missing credentials"},
        404: {"model": ErrorResponse, "description": "No updates found"},
        502: {"model": ErrorResponse, "description": "Source unavailable"},
    },
    summary="Official Updates",
)
async def get_official_updates(
    disaster_id: str,
    user_id: str = Depends(require_user),
    scraper: OfficialUpdatesScraper = Depends(get_updates_scraper),
    cache: CacheService = Depends(get_cache_service),
    settings: Settings = Depends(get_settings),
) -> List[OfficialUpdate]:
    cache_key = updates_cache_key(disaster_id)

    cached = await cache.get(cache_key)
    if cached is not None:
        return [OfficialUpdate(**item) for item in cached]

    updates = await scraper.fetch_updates()
    if not updates:
        raise NoUpdatesFoundError()

    await cache.set(
        cache_key,
        [u.model_dump() for u in updates],
        ttl_seconds=settings.updates_cache_ttl_seconds,
    )
    return updates
