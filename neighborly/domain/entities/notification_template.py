"""Static notification template definition."""

from __future__ import annotations

from dataclasses import dataclass

RELEVANCE_SCORES = (1, 2, 3)


@dataclass(frozen=True)
class NotificationTemplate:
    """Parameterized title plus the routing metadata for a notification.

    ``relevance_score`` ranks how actionable the notification is for the
    recipient: 3 means a direct action is requested, 2 plausible relevance and
    1 ambient awareness.
    """

    id: str
    template: str
    content_type: str
    notification_type: str
    action_type: str
    action_label: str
    relevance_score: int
    description: str

    def __post_init__(self) -> None:
        if self.relevance_score not in RELEVANCE_SCORES:
            msg = f"Invalid relevance score {self.relevance_score} for template {self.id}"
            raise ValueError(msg)


@dataclass(frozen=True)
class ProcessedTemplate:
    """Result of substituting variables into a :class:`NotificationTemplate`."""

    title: str
    template: NotificationTemplate


__all__ = ["NotificationTemplate", "ProcessedTemplate", "RELEVANCE_SCORES"]
