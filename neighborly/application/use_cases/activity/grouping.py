"""Collapse runs of related activities into feed groups."""

from __future__ import annotations

import re
from collections.abc import Sequence
from datetime import date, tzinfo

from neighborly.domain.entities import Activity, ActivityGroup
from neighborly.utils import local_calendar_day

FALLBACK_FIRST_NAME = "Neighbor"

_CATEGORY_NOUNS: dict[str, tuple[str, str]] = {
    "event": ("event", "events"),
    "skill": ("skill", "skills"),
    "good": ("item", "items"),
    "goods": ("item", "items"),
    "care": ("care request", "care requests"),
    "safety": ("safety update", "safety updates"),
    "neighbor": ("neighbor update", "neighbor updates"),
    "group": ("group update", "group updates"),
}


GroupKey = tuple[str, str, date]


def group_key_for(activity: Activity, tz: tzinfo | None = None) -> GroupKey:
    """Return the ``(actor_id, category, local day)`` bucket of ``activity``."""

    return (activity.actor_id, activity.category, local_calendar_day(activity.created_at, tz))


def _display_key(key: GroupKey) -> str:
    actor_id, category, day = key
    return f"{actor_id}:{category}:{day.isoformat()}"


def group_activities(
    activities: Sequence[Activity], *, tz: tzinfo | None = None
) -> list[ActivityGroup]:
    """Merge consecutive activities by actor, category and calendar day.

    ``activities`` must already be sorted newest first. The first activity of
    each run becomes the group's primary activity; an activity without a
    matching neighbour forms a group of one.
    """

    groups: list[ActivityGroup] = []
    current: ActivityGroup | None = None
    current_key: GroupKey | None = None
    for activity in activities:
        key = group_key_for(activity, tz)
        if current is not None and current_key == key:
            current.activities.append(activity)
            continue
        current = ActivityGroup(
            group_key=_display_key(key), primary_activity=activity, activities=[activity]
        )
        current_key = key
        groups.append(current)
    return groups


def extract_first_name(display_name: str | None) -> str:
    """Return a friendly first name (``"Jane Doe"`` -> ``"Jane"``)."""

    name = (display_name or "").strip().lstrip("@")
    if not name:
        return FALLBACK_FIRST_NAME
    return re.split(r"\s+", name)[0] or FALLBACK_FIRST_NAME


def grouped_activity_text(group: ActivityGroup) -> str:
    """Summarize a group, e.g. ``"Jane shared 3 skills"``."""

    primary = group.primary_activity
    first_name = extract_first_name(primary.actor.display_name)
    if group.count == 1:
        return f"{first_name}: {primary.title}" if primary.title else first_name
    _, plural = _CATEGORY_NOUNS.get(primary.category, ("activity", "activities"))
    return f"{first_name} shared {group.count} {plural}"


__all__ = [
    "FALLBACK_FIRST_NAME",
    "GroupKey",
    "extract_first_name",
    "group_activities",
    "group_key_for",
    "grouped_activity_text",
]
