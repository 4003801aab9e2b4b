"""Utility helpers to push notifications to websocket subscribers."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from anyio import from_thread

from neighborly.domain.entities import Notification

from .manager import ConnectionPool, notification_manager

logger = logging.getLogger(__name__)


class NotificationPublisher:
    """Serialize notifications and schedule their delivery."""

    def __init__(self, manager: ConnectionPool) -> None:
        self._manager = manager

    def dispatch(self, notification: Notification) -> None:
        """Schedule ``notification`` to be delivered to its recipient."""

        message = {"type": "notification", "data": serialize_notification(notification)}
        self.send(notification.user_id, message)

    def send(self, user_id: str, message: dict[str, Any]) -> None:
        """Schedule ``message`` for every open connection of ``user_id``."""

        if not self._manager.has_connections(user_id):
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            try:
                from_thread.start_soon(self._manager.send, user_id, message)
            except RuntimeError:
                logger.debug(
                    "No event loop reachable; skipping realtime delivery to %s", user_id
                )
        else:
            loop.create_task(self._manager.send(user_id, message))


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the JSON representation pushed to websocket clients."""

    return {
        "id": notification.id,
        "user_id": notification.user_id,
        "actor_id": notification.actor_id,
        "title": notification.title,
        "content_type": notification.content_type,
        "content_id": notification.content_id,
        "notification_type": notification.notification_type,
        "action_type": notification.action_type,
        "action_label": notification.action_label,
        "relevance_score": notification.relevance_score,
        "is_read": notification.is_read,
        "is_archived": notification.is_archived,
        "context": notification.context or {},
        "created_at": notification.created_at.isoformat()
        if notification.created_at
        else None,
        "updated_at": notification.updated_at.isoformat()
        if notification.updated_at
        else None,
    }


notification_publisher = NotificationPublisher(notification_manager)


__all__ = [
    "NotificationPublisher",
    "notification_publisher",
    "serialize_notification",
]
