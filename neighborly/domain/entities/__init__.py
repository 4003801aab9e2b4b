"""Domain entities exposed by the application."""

from .activity import Activity, ActivityGroup, ActorProfile, SourceKind, activity_category
from .activity_metadata import (
    ActivityMetadata,
    CareActivityMetadata,
    EventActivityMetadata,
    GoodsActivityMetadata,
    GroupActivityMetadata,
    NeighborActivityMetadata,
    SafetyActivityMetadata,
    SkillActivityMetadata,
    metadata_model_for,
)
from .notification import Notification
from .notification_template import NotificationTemplate, ProcessedTemplate
from .refresh_event import RefreshEvent, RefreshEventType

__all__ = [
    "Activity",
    "ActivityGroup",
    "ActorProfile",
    "SourceKind",
    "activity_category",
    "ActivityMetadata",
    "CareActivityMetadata",
    "EventActivityMetadata",
    "GoodsActivityMetadata",
    "GroupActivityMetadata",
    "NeighborActivityMetadata",
    "SafetyActivityMetadata",
    "SkillActivityMetadata",
    "metadata_model_for",
    "Notification",
    "NotificationTemplate",
    "ProcessedTemplate",
    "RefreshEvent",
    "RefreshEventType",
]
