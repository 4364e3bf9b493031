"""
Real-time broadcast of content events to WebSocket subscribers.

Broadcasts are best-effort and fire-and-forget: they run after the HTTP
response is produced (via FastAPI ``BackgroundTasks``), failures are logged
and never raised, and sockets that fail a send are dropped from the registry.
"""

import asyncio
from typing import Any

from fastapi import WebSocket
from loguru import logger

JUNIOR_SPACE_CHANNEL = "junior-space"


class RealtimeEvent:
    """Event names published to subscribers."""

    NEW_COMMENT = "new-comment"
    COMMENT_DELETED = "comment-deleted"
    NEW_POST = "new-post"
    POST_DELETED = "post-deleted"


def doubt_channel(doubt_id: int) -> str:
    return f"doubt-{doubt_id}"


class RealtimeBroadcaster:
    """In-process registry of WebSocket subscribers keyed by channel."""

    def __init__(self) -> None:
        self._channels: dict[str, set[WebSocket]] = {}
        self._lock = asyncio.Lock()

    async def connect(self, channel: str, websocket: WebSocket) -> None:
        """Accept the socket and subscribe it to ``channel``."""
        await websocket.accept()
        async with self._lock:
            self._channels.setdefault(channel, set()).add(websocket)
        logger.debug(f"WebSocket subscribed to {channel}")

    async def disconnect(self, channel: str, websocket: WebSocket) -> None:
        async with self._lock:
            subscribers = self._channels.get(channel)
            if subscribers is None:
                return
            subscribers.discard(websocket)
            if not subscribers:
                del self._channels[channel]

    def subscriber_count(self, channel: str) -> int:
        return len(self._channels.get(channel, ()))

    async def publish(self, channel: str, event: str, payload: Any) -> int:
        """
        Send ``{"event": event, "data": payload}`` to every subscriber.

        Never raises.

        Args:
            channel: Channel name, e.g. ``doubt-12`` or ``junior-space``
            event: Event name
            payload: JSON-serializable data

        Returns:
            Number of subscribers the message was delivered to
        """
        async with self._lock:
            subscribers = list(self._channels.get(channel, ()))

        if not subscribers:
            return 0

        message = {"event": event, "data": payload}
        delivered = 0
        dead: list[WebSocket] = []
        for websocket in subscribers:
            try:
                await websocket.send_json(message)
                delivered += 1
            except Exception as e:
                logger.warning(f"Realtime send failed on {channel} ({event}): {e}")
                dead.append(websocket)

        for websocket in dead:
            await self.disconnect(channel, websocket)

        return delivered


broadcaster = RealtimeBroadcaster()
