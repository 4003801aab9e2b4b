"""Aggregate application use cases."""

from .activity import get_activity_detail, get_activity_feed, ingest_activity
from .notifications import NotificationDispatcher, NotificationStateManager, process_template

__all__ = [
    "get_activity_detail",
    "get_activity_feed",
    "ingest_activity",
    "NotificationDispatcher",
    "NotificationStateManager",
    "process_template",
]
