"""Pydantic schemas for activity feed endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from neighborly.domain.entities import SourceKind


class ActorRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    display_name: str | None = None
    avatar_url: str | None = None


class ActivityRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., description="Unique activity identifier")
    actor_id: str
    activity_type: str = Field(..., description="Activity type in <category>_<action> form")
    category: str
    content_id: str
    content_type: str
    title: str
    created_at: datetime
    neighborhood_id: str | None = None
    is_public: bool = True
    is_deleted: bool = False
    metadata: dict[str, Any] | None = None
    actor: ActorRead = Field(default_factory=ActorRead)


class ActivityGroupRead(BaseModel):
    group_key: str
    count: int = Field(..., ge=1)
    summary: str = Field(..., description="Short text describing the group")
    primary_activity: ActivityRead
    activities: list[ActivityRead] = Field(default_factory=list)


class ActivityIngestRequest(BaseModel):
    """Raw domain row to normalize into a feed activity."""

    source_kind: SourceKind
    record: dict[str, Any] = Field(..., description="Row as read from the domain source")


class ContentDeletedRequest(BaseModel):
    content_type: str | None = Field(
        default=None, description="Domain content type, used to emit its refresh event"
    )


class ContentDeletedResponse(BaseModel):
    activity_ids: list[str] = Field(default_factory=list)


__all__ = [
    "ActivityGroupRead",
    "ActivityIngestRequest",
    "ActivityRead",
    "ActorRead",
    "ContentDeletedRequest",
    "ContentDeletedResponse",
]
