"""Domain entities describing items of the shared activity feed."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from .activity_metadata import ActivityMetadata


class SourceKind(str, Enum):
    """Tag identifying which domain source a raw row was ingested from."""

    ACTIVITY = "activity"
    EVENT = "event"
    SKILL = "skill"
    SKILL_SESSION = "skill_session"
    GOODS = "goods"
    CARE = "care"
    SAFETY = "safety"
    GROUP_UPDATE = "group_update"
    GROUP_MEMBER = "group_member"
    NEIGHBOR = "neighbor"


def activity_category(activity_type: str) -> str:
    """Return the category prefix of ``activity_type`` (``skill_offered`` -> ``skill``)."""

    return activity_type.split("_", 1)[0]


@dataclass
class ActorProfile:
    """Display information for the actor behind an activity."""

    display_name: str | None = None
    avatar_url: str | None = None


@dataclass
class Activity:
    """Normalized, feed-displayable representation of a domain event."""

    id: str
    actor_id: str
    activity_type: str
    content_id: str
    content_type: str
    title: str
    created_at: datetime
    neighborhood_id: str | None = None
    metadata: ActivityMetadata | None = None
    is_public: bool = True
    actor: ActorProfile = field(default_factory=ActorProfile)

    @property
    def category(self) -> str:
        return activity_category(self.activity_type)

    @property
    def is_deleted(self) -> bool:
        return self.metadata is not None and self.metadata.deleted is True


@dataclass
class ActivityGroup:
    """Ephemeral bundle of activities from one actor and category in a time bucket."""

    group_key: str
    primary_activity: Activity
    activities: list[Activity] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.activities)


__all__ = [
    "Activity",
    "ActivityGroup",
    "ActorProfile",
    "SourceKind",
    "activity_category",
]
