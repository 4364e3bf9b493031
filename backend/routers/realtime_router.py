"""
WebSocket subscription endpoint.

Clients connect to ``/ws/junior-space`` or ``/ws/doubt-{id}`` and receive
``{"event": ..., "data": ...}`` messages. Anything the client sends is
ignored; the receive loop only exists to notice disconnects.
"""

import re

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status
from loguru import logger

from core.correlation import ensure_correlation_id
from services.realtime_service import JUNIOR_SPACE_CHANNEL, broadcaster

router = APIRouter(tags=["realtime"])

_DOUBT_CHANNEL = re.compile(r"^doubt-\d+$")


def is_valid_channel(channel: str) -> bool:
    return channel == JUNIOR_SPACE_CHANNEL or bool(_DOUBT_CHANNEL.match(channel))


@router.websocket("/ws/{channel}")
async def subscribe(websocket: WebSocket, channel: str) -> None:
    ensure_correlation_id()
    if not is_valid_channel(channel):
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await broadcaster.connect(channel, websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.debug(f"WebSocket left {channel}")
    finally:
        await broadcaster.disconnect(channel, websocket)
