"""Typed payloads attached to activities, one variant per activity category."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ActivityMetadata(BaseModel):
    """Fields shared by every activity payload.

    ``deleted`` and ``original_title`` are surfaced by the content source when
    the referenced record has been removed.
    """

    model_config = ConfigDict(
        extra="allow", populate_by_name=True, coerce_numbers_to_str=True
    )

    deleted: bool = False
    original_title: str | None = Field(default=None, alias="originalTitle")


class EventActivityMetadata(ActivityMetadata):
    event_id: str | None = None
    start_time: str | None = None
    location: str | None = None
    group_id: str | None = None


class SkillActivityMetadata(ActivityMetadata):
    request_type: str | None = None
    skill_category: str | None = None
    session_id: str | None = None
    session_status: str | None = None


class GoodsActivityMetadata(ActivityMetadata):
    request_type: str | None = None
    goods_category: str | None = None
    urgency: str | None = None


class CareActivityMetadata(ActivityMetadata):
    request_type: str | None = None
    care_category: str | None = None


class SafetyActivityMetadata(ActivityMetadata):
    safety_type: str | None = None


class NeighborActivityMetadata(ActivityMetadata):
    neighbor_id: str | None = None


class GroupActivityMetadata(ActivityMetadata):
    group_id: str | None = None
    group_name: str | None = None


METADATA_BY_CATEGORY: dict[str, type[ActivityMetadata]] = {
    "event": EventActivityMetadata,
    "skill": SkillActivityMetadata,
    "good": GoodsActivityMetadata,
    "goods": GoodsActivityMetadata,
    "care": CareActivityMetadata,
    "safety": SafetyActivityMetadata,
    "neighbor": NeighborActivityMetadata,
    "group": GroupActivityMetadata,
}


def metadata_model_for(category: str) -> type[ActivityMetadata]:
    """Return the payload model registered for ``category``."""

    return METADATA_BY_CATEGORY.get(category, ActivityMetadata)


__all__ = [
    "ActivityMetadata",
    "EventActivityMetadata",
    "SkillActivityMetadata",
    "GoodsActivityMetadata",
    "CareActivityMetadata",
    "SafetyActivityMetadata",
    "NeighborActivityMetadata",
    "GroupActivityMetadata",
    "METADATA_BY_CATEGORY",
    "metadata_model_for",
]
