"""Tests for the realtime broadcaster."""

from unittest.mock import AsyncMock

import pytest

from services.realtime_service import (
    JUNIOR_SPACE_CHANNEL,
    RealtimeBroadcaster,
    RealtimeEvent,
    doubt_channel,
)


def _socket(fail: bool = False) -> AsyncMock:
    websocket = AsyncMock()
    if fail:
        websocket.send_json.side_effect = RuntimeError("connection closed")
    return websocket


def test_doubt_channel_name() -> None:
    assert doubt_channel(42) == "doubt-42"


class TestRealtimeBroadcaster:
    @pytest.mark.asyncio
    async def test_connect_accepts_socket(self) -> None:
        broadcaster = RealtimeBroadcaster()
        websocket = _socket()

        await broadcaster.connect(JUNIOR_SPACE_CHANNEL, websocket)

        websocket.accept.assert_awaited_once()
        assert broadcaster.subscriber_count(JUNIOR_SPACE_CHANNEL) == 1

    @pytest.mark.asyncio
    async def test_publish_reaches_channel_subscribers_only(self) -> None:
        broadcaster = RealtimeBroadcaster()
        on_doubt = _socket()
        on_other = _socket()
        await broadcaster.connect(doubt_channel(1), on_doubt)
        await broadcaster.connect(doubt_channel(2), on_other)

        delivered = await broadcaster.publish(
            doubt_channel(1), RealtimeEvent.NEW_COMMENT, {"id": 7}
        )

        assert delivered == 1
        on_doubt.send_json.assert_awaited_once_with(
            {"event": "new-comment", "data": {"id": 7}}
        )
        on_other.send_json.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_publish_without_subscribers(self) -> None:
        broadcaster = RealtimeBroadcaster()
        assert await broadcaster.publish("doubt-9", RealtimeEvent.NEW_COMMENT, {}) == 0

    @pytest.mark.asyncio
    async def test_failed_send_drops_socket_and_does_not_raise(self) -> None:
        broadcaster = RealtimeBroadcaster()
        healthy = _socket()
        broken = _socket(fail=True)
        await broadcaster.connect(JUNIOR_SPACE_CHANNEL, healthy)
        await broadcaster.connect(JUNIOR_SPACE_CHANNEL, broken)

        delivered = await broadcaster.publish(
            JUNIOR_SPACE_CHANNEL, RealtimeEvent.POST_DELETED, {"post_id": 3}
        )

        assert delivered == 1
        assert broadcaster.subscriber_count(JUNIOR_SPACE_CHANNEL) == 1

    @pytest.mark.asyncio
    async def test_disconnect_removes_empty_channel(self) -> None:
        broadcaster = RealtimeBroadcaster()
        websocket = _socket()
        await broadcaster.connect(JUNIOR_SPACE_CHANNEL, websocket)

        await broadcaster.disconnect(JUNIOR_SPACE_CHANNEL, websocket)
        await broadcaster.disconnect(JUNIOR_SPACE_CHANNEL, websocket)

        assert broadcaster.subscriber_count(JUNIOR_SPACE_CHANNEL) == 0
