"""Refresh signalling and realtime notification delivery."""

from .manager import (
    ALL_NEIGHBORHOODS,
    ConnectionPool,
    activity_connections,
    notification_manager,
)
from .publisher import (
    NotificationPublisher,
    notification_publisher,
    serialize_notification,
)
from .refresh_bus import RefreshBus, emit_content_change, refresh_bus
from .refresher import (
    ACTIVITY_REFRESH_EVENTS,
    NOTIFICATION_REFRESH_EVENTS,
    DebouncedRefresher,
)

__all__ = [
    "ALL_NEIGHBORHOODS",
    "ConnectionPool",
    "activity_connections",
    "notification_manager",
    "NotificationPublisher",
    "notification_publisher",
    "serialize_notification",
    "RefreshBus",
    "emit_content_change",
    "refresh_bus",
    "ACTIVITY_REFRESH_EVENTS",
    "NOTIFICATION_REFRESH_EVENTS",
    "DebouncedRefresher",
]
