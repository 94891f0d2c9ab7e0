"""
Server-sent events (SSE) broadcasting module.

This module streams a session's notifications to its connected browser
tabs. Each open stream gets its own asyncio.Queue subscribed to the
session's Notifier.
"""

import asyncio
import json
from typing import AsyncIterator, Callable, Tuple

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from logic.hunt import HuntSession
from logic.notifications import Notification, Notifier
from user_context import get_hunt_session

router = APIRouter()


def format_event(notification: Notification) -> str:
    payload = {"type": "notification", **notification.to_dict()}
    return f"data: {json.dumps(payload)}\n\n"


def subscribe_queue(notifier: Notifier) -> Tuple[asyncio.Queue, Callable[[], None]]:
    """Attach a fresh queue to the notifier.

    Returns:
        The queue and the callable that detaches it again.
    """
    queue: asyncio.Queue = asyncio.Queue()
    unsubscribe = notifier.subscribe(queue.put_nowait)
    return queue, unsubscribe


async def event_generator(queue: asyncio.Queue, unsubscribe: Callable[[], None]) -> AsyncIterator[str]:
    """Generate SSE events from the queue.

    Args:
        queue: Async queue to read notifications from.
        unsubscribe: Called once the client goes away.

    Yields:
        SSE formatted event strings.
    """
    try:
        while True:
            notification = await queue.get()
            yield format_event(notification)
    finally:
        unsubscribe()


@router.get("/api/stream")
async def stream(hunt: HuntSession = Depends(get_hunt_session)):
    """Server-Sent Events (SSE) endpoint for notifications.

    Returns:
        StreamingResponse with text/event-stream content type.
    """
    queue, unsubscribe = subscribe_queue(hunt.notifier)
    return StreamingResponse(event_generator(queue, unsubscribe), media_type="text/event-stream")


@router.get("/api/notifications")
async def drain_notifications(hunt: HuntSession = Depends(get_hunt_session)):
    """Return and clear pending notifications for clients that poll."""
    return {"notifications": [n.to_dict() for n in hunt.notifier.drain()]}
