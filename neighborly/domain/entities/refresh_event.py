"""Refresh signals exchanged between producers and consumers of feed data."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class RefreshEventType(str, Enum):
    """Catalog of refresh events; the values are the wire names."""

    NOTIFICATIONS = "notifications"
    NOTIFICATION_CREATED = "notification-created"
    NOTIFICATION_READ = "notification-read"
    NOTIFICATION_ARCHIVED = "notification-archived"
    NOTIFICATIONS_ALL_READ = "notifications-all-read"
    EVENT_RSVP_UPDATED = "event-rsvp-updated"
    SKILLS_UPDATED = "skills-updated"
    SAFETY_UPDATED = "safety-updated"
    GOODS_UPDATED = "goods-updated"
    CARE_UPDATED = "care-updated"
    ACTIVITIES_UPDATED = "activities-updated"
    NEIGHBORS_UPDATED = "neighbors-updated"
    EVENT_SUBMITTED = "event-submitted"
    EVENT_DELETED = "event-deleted"


@dataclass(frozen=True)
class RefreshEvent:
    """A single emission on the refresh bus."""

    event_type: RefreshEventType
    payload: dict[str, Any] = field(default_factory=dict)
    emitted_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


__all__ = ["RefreshEvent", "RefreshEventType"]
