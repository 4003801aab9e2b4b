"""Public helpers for creating and managing notifications."""

from .dispatcher import NotificationDispatcher
from .events import (
    notify_care_response,
    notify_event_rsvp,
    notify_goods_response,
    notify_group_event_created,
    notify_group_invitation,
    notify_group_update_posted,
    notify_neighbor_joined,
    notify_safety_comment,
    notify_skill_session_cancelled,
    notify_skill_session_request,
)
from .state import NotificationStateManager
from .templates import (
    NOTIFICATION_TEMPLATES,
    get_template,
    list_template_ids,
    process_template,
    template_placeholders,
)

__all__ = [
    "NotificationDispatcher",
    "NotificationStateManager",
    "NOTIFICATION_TEMPLATES",
    "get_template",
    "list_template_ids",
    "process_template",
    "template_placeholders",
    "notify_care_response",
    "notify_event_rsvp",
    "notify_goods_response",
    "notify_group_event_created",
    "notify_group_invitation",
    "notify_group_update_posted",
    "notify_neighbor_joined",
    "notify_safety_comment",
    "notify_skill_session_cancelled",
    "notify_skill_session_request",
]
