"""ORM models used by the application infrastructure."""

from .activity import ActivityModel
from .notification import NotificationModel
from .profile import GroupMemberModel, ProfileModel

__all__ = [
    "ActivityModel",
    "GroupMemberModel",
    "NotificationModel",
    "ProfileModel",
]
