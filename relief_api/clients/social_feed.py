"""
Social Media Feed Client.

Source of citizen reports about a disaster. The mock feed returns a fixed
set of sample posts until a real platform integration is wired in.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


MOCK_POSTS = [
    {"text": "#floodrelief Need food in NYC, please help", "author": "citizen1"},
    {"text": "Offering shelter in Brooklyn", "author": "reliefAdmin"},
    {"text": "SOS trapped on second floor near Canal St", "author": "citizen1"},
    {"text": "Water levels receding on the east side", "author": "netrunnerX"},
]


class SocialFeed(ABC):
    """Fetches raw posts ({"text", "author"}) related to a disaster."""

    @abstractmethod
    async def fetch_posts(self, disaster_id: str) -> List[Dict[str, str]]:
        """Return recent posts for the disaster."""


class MockSocialFeed(SocialFeed):
    """Static sample posts."""

    def __init__(self, posts: Optional[List[Dict[str, str]]] = None):
        self._posts = posts if posts is not None else MOCK_POSTS

    async def fetch_posts(self, disaster_id: str) -> List[Dict[str, str]]:
        logger.info(f"Returning {len(self._posts)} mock posts for disaster {disaster_id}")
        return [dict(post) for post in self._posts]


# Singleton instance
_feed_instance: Optional[SocialFeed] = None


def get_social_feed() -> SocialFeed:
    """Get the singleton social feed instance."""
    global _feed_instance
    if _feed_instance is None:
        _feed_instance = MockSocialFeed()
    return _feed_instance
