"""
In-process Event Bus.

Fans real-time state changes out to connected subscribers (WebSocket
clients). Delivery is best-effort:
- No persistence or replay; late subscribers never see earlier messages
- A subscriber whose backlog is full misses the message, the publisher
  is never blocked or failed
- Messages reach a single subscriber in publish order
"""

import asyncio
import itertools
import logging
from typing import Any, Dict, Optional, Set

from ..config import Settings, get_settings

logger = logging.getLogger(__name__)

# Topics
DISASTER_UPDATED = "disaster_updated"
RESOURCES_UPDATED = "resources_updated"
SOCIAL_MEDIA_UPDATED = "social_media_updated"

_subscription_ids = itertools.count(1)


class Subscription:
    """
    One subscriber's delivery channel.

    Iterate with ``async for message in subscription`` or await ``get()``.
    A subscription with a disaster_id only receives messages published for
    that disaster; without one it receives everything.
    """

    def __init__(self, bus: "EventBus", max_queue_size: int, disaster_id: Optional[str] = None):
        self.id = next(_subscription_ids)
        self.disaster_id = disaster_id
        self.dropped = 0
        self._bus = bus
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=max_queue_size)

    def wants(self, disaster_id: Optional[str]) -> bool:
        return self.disaster_id is None or self.disaster_id == disaster_id

    def offer(self, message: Dict[str, Any]) -> bool:
        """Queue a message without waiting. Returns False if it was dropped."""
        try:
            self._queue.put_nowait(message)
            return True
        except asyncio.QueueFull:
            self.dropped += 1
            logger.debug(f"Subscriber {self.id} backlog full, dropped message")
            return False

    def pending(self) -> int:
        return self._queue.qsize()

    async def get(self) -> Dict[str, Any]:
        return await self._queue.get()

    def close(self) -> None:
        self._bus.unsubscribe(self)

    def __aiter__(self):
        return self

    async def __anext__(self) -> Dict[str, Any]:
        return await self._queue.get()


class EventBus:
    """Publish/subscribe registry for live change notifications."""

    def __init__(self, settings: Optional[Settings] = None, max_queue_size: Optional[int] = None):
        self._settings = settings or get_settings()
        self._max_queue_size = max_queue_size or self._settings.event_queue_size
        self._subscribers: Set[Subscription] = set()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self, disaster_id: Optional[str] = None) -> Subscription:
        """Register a new subscriber, optionally scoped to one disaster."""
        subscription = Subscription(self, self._max_queue_size, disaster_id=disaster_id)
        self._subscribers.add(subscription)
        logger.info(
            f"Subscriber {subscription.id} connected "
            f"(scope={disaster_id or 'all'}, total={len(self._subscribers)})"
        )
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        """Remove a subscriber. Unknown subscriptions are ignored."""
        if subscription in self._subscribers:
            self._subscribers.discard(subscription)
            logger.info(
                f"Subscriber {subscription.id} disconnected (total={len(self._subscribers)})"
            )

    def publish(self, topic: str, payload: Any, disaster_id: Optional[str] = None) -> int:
        """
        Deliver a message to every interested subscriber.

        Args:
            topic: Event name, e.g. "disaster_updated"
            payload: JSON-serialisable event data
            disaster_id: Disaster the event concerns, used for scoped subscribers

        Returns:
            Number of subscribers the message was queued for
        """
        message = {"event": topic, "data": payload}
        delivered = 0

        # Snapshot so subscribe/unsubscribe during fan-out is safe
        for subscription in list(self._subscribers):
            if not subscription.wants(disaster_id):
                continue
            if subscription.offer(message):
                delivered += 1

        logger.debug(f"Published {topic} to {delivered} subscriber(s)")
        return delivered


# Singleton instance
_event_bus_instance: Optional[EventBus] = None


def get_event_bus() -> EventBus:
    """Get the singleton event bus instance."""
    global _event_bus_instance
    if _event_bus_instance is None:
        _event_bus_instance = EventBus()
    return _event_bus_instance
