"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    actor_id: str | None = None
    title: str
    content_type: str
    content_id: str
    notification_type: str
    action_type: str
    action_label: str
    relevance_score: int
    is_read: bool
    is_archived: bool
    context: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime | None = None


class NotificationCreate(BaseModel):
    """Payload used to create a notification from a template."""

    template_id: str = Field(..., min_length=1)
    recipient_id: str = Field(..., min_length=1)
    content_id: str = Field(..., min_length=1)
    actor_id: str | None = None
    variables: dict[str, str | None] = Field(default_factory=dict)
    metadata: dict[str, Any] | None = None


class GroupNotificationCreate(BaseModel):
    """Payload used to notify every member of a group except the actor."""

    template_id: str = Field(..., min_length=1)
    actor_id: str = Field(..., min_length=1)
    content_id: str = Field(..., min_length=1)
    variables: dict[str, str | None] = Field(default_factory=dict)
    metadata: dict[str, Any] | None = None


class NotificationCreated(BaseModel):
    id: int


class GroupNotificationsCreated(BaseModel):
    ids: list[int] = Field(default_factory=list)


class UnreadCountRead(BaseModel):
    unread_count: int


class NotificationStateResponse(BaseModel):
    """Outcome of a read/archive mutation."""

    success: bool


__all__ = [
    "GroupNotificationCreate",
    "GroupNotificationsCreated",
    "NotificationCreate",
    "NotificationCreated",
    "NotificationRead",
    "NotificationStateResponse",
    "UnreadCountRead",
]
