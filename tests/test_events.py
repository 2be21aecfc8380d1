"""Tests for the in-process event bus."""

import asyncio

from relief_api.services.events import (
    DISASTER_UPDATED,
    RESOURCES_UPDATED,
    EventBus,
)


async def test_publish_without_subscribers_is_a_no_op(event_bus):
    assert event_bus.publish(DISASTER_UPDATED, {"id": "d-1"}) == 0


async def test_every_subscriber_receives_the_message(event_bus):
    subscriptions = [event_bus.subscribe() for _ in range(3)]

    delivered = event_bus.publish(DISASTER_UPDATED, {"action": "create"})

    assert delivered == 3
    for subscription in subscriptions:
        message = await asyncio.wait_for(subscription.get(), timeout=1)
        assert message == {"event": DISASTER_UPDATED, "data": {"action": "create"}}


async def test_unsubscribed_receives_nothing(event_bus):
    subscription = event_bus.subscribe()
    event_bus.unsubscribe(subscription)

    event_bus.publish(DISASTER_UPDATED, {"action": "create"})

    assert subscription.pending() == 0
    assert event_bus.subscriber_count == 0


async def test_unsubscribe_is_idempotent(event_bus):
    subscription = event_bus.subscribe()
    subscription.close()
    subscription.close()

    assert event_bus.subscriber_count == 0


async def test_late_subscriber_sees_no_history(event_bus):
    event_bus.publish(DISASTER_UPDATED, {"n": 1})
    subscription = event_bus.subscribe()

    assert subscription.pending() == 0


async def test_messages_arrive_in_publish_order(event_bus):
    subscription = event_bus.subscribe()

    for n in range(5):
        event_bus.publish(RESOURCES_UPDATED, {"n": n})

    received = [(await subscription.get())["data"]["n"] for _ in range(5)]
    assert received == [0, 1, 2, 3, 4]


async def test_scoped_subscriber_only_gets_its_disaster(event_bus):
    scoped = event_bus.subscribe(disaster_id="d-1")
    everything = event_bus.subscribe()

    event_bus.publish(DISASTER_UPDATED, {"id": "d-2"}, disaster_id="d-2")
    event_bus.publish(DISASTER_UPDATED, {"id": "d-1"}, disaster_id="d-1")

    assert scoped.pending() == 1
    assert (await scoped.get())["data"] == {"id": "d-1"}
    assert everything.pending() == 2


async def test_full_backlog_drops_without_failing_publisher(settings):
    bus = EventBus(settings, max_queue_size=2)
    slow = bus.subscribe()
    fast = bus.subscribe()

    bus.publish(DISASTER_UPDATED, {"n": 1})
    bus.publish(DISASTER_UPDATED, {"n": 2})
    await fast.get()
    await fast.get()

    delivered = bus.publish(DISASTER_UPDATED, {"n": 3})

    assert delivered == 1
    assert slow.dropped == 1
    assert slow.pending() == 2
    assert (await fast.get())["data"] == {"n": 3}


async def test_async_iteration(event_bus):
    subscription = event_bus.subscribe()
    event_bus.publish(DISASTER_UPDATED, {"n": 1})

    async for message in subscription:
        assert message["data"] == {"n": 1}
        break
