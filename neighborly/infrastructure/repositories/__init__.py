"""Repository implementations for infrastructure layer."""

from .activity_repository import ActivityRepository
from .group_member_repository import GroupMemberRepository
from .notification_repository import DuplicateNotificationError, NotificationRepository

__all__ = [
    "ActivityRepository",
    "DuplicateNotificationError",
    "GroupMemberRepository",
    "NotificationRepository",
]
