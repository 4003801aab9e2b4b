"""Domain entity representing a user notification."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class Notification:
    """Personally relevant alert delivered to a specific recipient."""

    id: int | None
    user_id: str
    title: str
    content_type: str
    content_id: str
    notification_type: str
    action_type: str
    action_label: str
    relevance_score: int
    actor_id: str | None = None
    is_read: bool = False
    is_archived: bool = False
    context: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def template_id(self) -> str | None:
        template_id = self.context.get("templateId")
        return str(template_id) if template_id else None


__all__ = ["Notification"]
