"""Websocket connection pools keyed by channel.

Notification sockets are pooled per recipient, activity feed sockets per
neighborhood. A message sent to a channel reaches every socket in it; sockets
that fail to receive are dropped from the pool.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, DefaultDict, Set

from fastapi import WebSocket

logger = logging.getLogger(__name__)

ALL_NEIGHBORHOODS = "*"


class ConnectionPool:
    """Track open websockets grouped by channel key."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._connections: DefaultDict[str, Set[WebSocket]] = defaultdict(set)

    async def connect(self, channel: str, websocket: WebSocket) -> None:
        """Accept ``websocket`` and add it to ``channel``."""

        await websocket.accept()
        self._connections[channel].add(websocket)
        logger.debug(
            "%s websocket joined %s (%d open)",
            self.name,
            channel,
            len(self._connections[channel]),
        )

    def disconnect(self, channel: str, websocket: WebSocket) -> bool:
        """Remove ``websocket`` from ``channel``.

        Returns ``True`` when this left the channel without connections.
        """

        connections = self._connections.get(channel)
        if connections is None:
            return False
        connections.discard(websocket)
        if connections:
            return False
        self._connections.pop(channel, None)
        return True

    def has_connections(self, channel: str) -> bool:
        return bool(self._connections.get(channel))

    def connection_count(self, channel: str | None = None) -> int:
        if channel is not None:
            return len(self._connections.get(channel, ()))
        return sum(len(connections) for connections in self._connections.values())

    async def send(self, channel: str, message: dict[str, Any]) -> int:
        """Send ``message`` to every socket of ``channel``; return how many received it."""

        delivered = 0
        for connection in list(self._connections.get(channel, set())):
            try:
                await connection.send_json(message)
            except Exception:  # pragma: no cover - closed sockets are dropped
                logger.debug("Dropping %s websocket on %s after failed send", self.name, channel)
                self.disconnect(channel, connection)
            else:
                delivered += 1
        return delivered


notification_manager = ConnectionPool("notifications")
activity_connections = ConnectionPool("activity")


__all__ = [
    "ALL_NEIGHBORHOODS",
    "ConnectionPool",
    "activity_connections",
    "notification_manager",
]
