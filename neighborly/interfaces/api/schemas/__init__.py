from .activity import (
    ActivityGroupRead,
    ActivityIngestRequest,
    ActivityRead,
    ActorRead,
    ContentDeletedRequest,
    ContentDeletedResponse,
)
from .notification import (
    GroupNotificationCreate,
    GroupNotificationsCreated,
    NotificationCreate,
    NotificationCreated,
    NotificationRead,
    NotificationStateResponse,
    UnreadCountRead,
)
from .template import NotificationTemplateRead

__all__ = [
    "ActivityGroupRead",
    "ActivityIngestRequest",
    "ActivityRead",
    "ActorRead",
    "ContentDeletedRequest",
    "ContentDeletedResponse",
    "GroupNotificationCreate",
    "GroupNotificationsCreated",
    "NotificationCreate",
    "NotificationCreated",
    "NotificationRead",
    "NotificationStateResponse",
    "UnreadCountRead",
    "NotificationTemplateRead",
]
