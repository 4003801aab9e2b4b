"""Pydantic schemas for the notification template catalog."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class NotificationTemplateRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    template: str
    content_type: str
    notification_type: str
    action_type: str
    action_label: str
    relevance_score: int = Field(..., ge=1, le=3)
    description: str | None = None
    placeholders: list[str] = Field(default_factory=list)


__all__ = ["NotificationTemplateRead"]
