"""
Real-time Routes.

WebSocket stream of event bus messages:
  { "event": "disaster_updated", "data": { ... } }

Connect to /ws for every event or /ws?disaster_id=<id> for one disaster.
Sending "ping" returns { "event": "pong" }.
"""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from ..services.events import EventBus, Subscription, get_event_bus

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])


async def _forward(websocket: WebSocket, subscription: Subscription) -> None:
    async for message in subscription:
        await websocket.send_json(message)


@router.websocket("/ws")
async def event_stream(
    websocket: WebSocket,
    disaster_id: Optional[str] = None,
    bus: EventBus = Depends(get_event_bus),
):
    # Register before accepting so no event published after the handshake is missed
    subscription = bus.subscribe(disaster_id=disaster_id)
    await websocket.accept()

    sender = asyncio.create_task(_forward(websocket, subscription))
    try:
        while True:
            data = await websocket.receive_text()
            if data == "ping":
                await websocket.send_json({"event": "pong"})
    except WebSocketDisconnect:
        logger.info(f"WebSocket subscriber {subscription.id} disconnected")
    finally:
        bus.unsubscribe(subscription)
        sender.cancel()
        try:
            await sender
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.warning(f"WebSocket subscriber {subscription.id} stopped forwarding: {e}")
