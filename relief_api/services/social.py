"""
Social Report Service.

Fetches social posts for a disaster, tags each with an urgency priority,
caches the classified reports and announces them to live subscribers.
"""

import logging
from typing import List, Optional

from ..clients.social_feed import SocialFeed, get_social_feed
from ..models import Priority, SocialReport
from ..utils.common import social_cache_key
from .cache import CacheService, get_cache_service
from .events import SOCIAL_MEDIA_UPDATED, EventBus, get_event_bus
from .urgency import UrgencyClassifier, get_classifier

logger = logging.getLogger(__name__)


class SocialReportService:
    def __init__(
        self,
        feed: Optional[SocialFeed] = None,
        classifier: Optional[UrgencyClassifier] = None,
        cache: Optional[CacheService] = None,
        event_bus: Optional[EventBus] = None,
    ):
        self._feed = feed or get_social_feed()
        self._classifier = classifier or get_classifier()
        self._cache = cache or get_cache_service()
        self._event_bus = event_bus or get_event_bus()

    async def get_reports(self, disaster_id: str) -> List[SocialReport]:
        """Return classified reports for a disaster, from cache when fresh."""
        cache_key = social_cache_key(disaster_id)

        cached = await self._cache.get(cache_key)
        if cached is not None:
            return [SocialReport(**item) for item in cached]

        posts = await self._feed.fetch_posts(disaster_id)
        reports = [
            SocialReport(
                text=post["text"],
                author=post["author"],
                priority=self._classifier.classify(post["text"]),
            )
            for post in posts
        ]

        serialized = [r.model_dump(mode="json") for r in reports]
        await self._cache.set(cache_key, serialized)

        self._event_bus.publish(
            SOCIAL_MEDIA_UPDATED,
            {"disaster_id": disaster_id, "reports": serialized},
            disaster_id=disaster_id,
        )

        high = sum(1 for r in reports if r.priority == Priority.HIGH)
        logger.info(f"Classified {len(reports)} reports for {disaster_id} ({high} high priority)")
        return reports


# Singleton instance
_social_instance: Optional[SocialReportService] = None


def get_social_service() -> SocialReportService:
    """Get the singleton social report service instance."""
    global _social_instance
    if _social_instance is None:
        _social_instance = SocialReportService()
    return _social_instance
