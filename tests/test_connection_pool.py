"""Tests for the websocket connection pools."""

from __future__ import annotations

from typing import Any

import pytest

from neighborly.infrastructure.notifications import ConnectionPool


class FakeWebSocket:
    def __init__(self, fail: bool = False) -> None:
        self.accepted = False
        self.fail = fail
        self.sent: list[dict[str, Any]] = []

    async def accept(self) -> None:
        self.accepted = True

    async def send_json(self, message: dict[str, Any]) -> None:
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(message)


@pytest.mark.asyncio
async def test_messages_reach_only_the_target_channel() -> None:
    pool = ConnectionPool("activity")
    first, second, elsewhere = FakeWebSocket(), FakeWebSocket(), FakeWebSocket()
    await pool.connect("hood-1", first)
    await pool.connect("hood-1", second)
    await pool.connect("hood-2", elsewhere)

    delivered = await pool.send("hood-1", {"type": "refresh"})

    assert delivered == 2
    assert first.accepted and second.accepted
    assert first.sent == second.sent == [{"type": "refresh"}]
    assert elsewhere.sent == []
    assert pool.connection_count("hood-1") == 2
    assert pool.connection_count() == 3


@pytest.mark.asyncio
async def test_disconnect_reports_when_channel_empties() -> None:
    pool = ConnectionPool("activity")
    first, second = FakeWebSocket(), FakeWebSocket()
    await pool.connect("hood-1", first)
    await pool.connect("hood-1", second)

    assert pool.disconnect("hood-1", first) is False
    assert pool.disconnect("hood-1", second) is True
    assert pool.has_connections("hood-1") is False
    assert pool.disconnect("hood-1", second) is False


@pytest.mark.asyncio
async def test_failed_sockets_are_dropped() -> None:
    pool = ConnectionPool("notifications")
    healthy, broken = FakeWebSocket(), FakeWebSocket(fail=True)
    await pool.connect("bob", healthy)
    await pool.connect("bob", broken)

    delivered = await pool.send("bob", {"type": "notification"})

    assert delivered == 1
    assert pool.connection_count("bob") == 1
    assert await pool.send("nobody", {"type": "notification"}) == 0
