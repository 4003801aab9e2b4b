"""Use cases for reading and feeding the shared activity feed."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from neighborly.config import get_settings
from neighborly.domain.entities import (
    Activity,
    ActivityGroup,
    RefreshEventType,
    SourceKind,
)
from neighborly.infrastructure.notifications import (
    RefreshBus,
    emit_content_change,
    refresh_bus,
)
from neighborly.infrastructure.repositories import ActivityRepository

from .grouping import group_activities
from .normalizer import normalize, normalize_many, visible_activities

logger = logging.getLogger(__name__)

_CONTENT_BY_SOURCE: dict[SourceKind, str] = {
    SourceKind.ACTIVITY: "activity",
    SourceKind.EVENT: "event",
    SourceKind.SKILL: "skills",
    SourceKind.SKILL_SESSION: "skills",
    SourceKind.GOODS: "goods",
    SourceKind.CARE: "care",
    SourceKind.SAFETY: "safety",
    SourceKind.GROUP_UPDATE: "activity",
    SourceKind.GROUP_MEMBER: "activity",
    SourceKind.NEIGHBOR: "neighbor",
}

# Content types whose creation already refreshes the activity feed.
_FEED_REFRESHING_CONTENT = {"activity", "goods", "neighbor"}


def list_activities(
    session: Session,
    *,
    neighborhood_id: str | None = None,
    limit: int | None = None,
    public_only: bool = False,
) -> list[Activity]:
    """Return visible activities newest first. Removed content is skipped."""

    if limit is None:
        limit = get_settings().activity_feed_limit
    repository = ActivityRepository(session)
    try:
        rows = repository.list_recent_rows(
            neighborhood_ids=[neighborhood_id] if neighborhood_id else None,
            limit=limit,
            public_only=public_only,
        )
    except SQLAlchemyError:
        logger.exception("Error fetching activities (neighborhood=%s)", neighborhood_id)
        return []
    return visible_activities(normalize_many(rows, SourceKind.ACTIVITY))


def get_activity_feed(
    session: Session,
    *,
    neighborhood_id: str | None = None,
    limit: int | None = None,
    public_only: bool = False,
) -> list[ActivityGroup]:
    """Return the grouped activity feed."""

    activities = list_activities(
        session,
        neighborhood_id=neighborhood_id,
        limit=limit,
        public_only=public_only,
    )
    return group_activities(activities)


def get_activity_detail(session: Session, activity_id: str) -> Activity | None:
    """Resolve a single activity by id, including activities whose content was removed."""

    try:
        row = ActivityRepository(session).get_row(activity_id)
    except SQLAlchemyError:
        logger.exception("Error fetching activity %s", activity_id)
        return None
    if row is None:
        return None
    return normalize(row, SourceKind.ACTIVITY)


def ingest_activity(
    session: Session,
    raw: Mapping[str, Any],
    source_kind: SourceKind | str,
    *,
    bus: RefreshBus = refresh_bus,
) -> Activity | None:
    """Normalize ``raw`` and persist it as a feed activity.

    Raises :class:`NormalizationError` when the row cannot be mapped. Storage
    failures are logged and reported as ``None``.
    """

    kind = SourceKind(source_kind)
    activity = normalize(raw, kind)
    try:
        ActivityRepository(session).save(activity)
    except SQLAlchemyError:
        session.rollback()
        logger.exception(
            "Error saving %s activity %s for actor %s",
            kind.value,
            activity.id,
            activity.actor_id,
        )
        return None

    content = _CONTENT_BY_SOURCE[kind]
    emit_content_change(
        bus, "create", content, activity_id=activity.id, content_id=activity.content_id
    )
    if content not in _FEED_REFRESHING_CONTENT:
        bus.emit(
            RefreshEventType.ACTIVITIES_UPDATED,
            activity_id=activity.id,
            content_id=activity.content_id,
        )
    logger.info("Ingested %s activity %s", activity.activity_type, activity.id)
    return activity


def mark_content_deleted(
    session: Session,
    content_id: str,
    *,
    content_type: str | None = None,
    bus: RefreshBus = refresh_bus,
) -> list[str]:
    """Flag the activities of removed content so they drop out of the feed."""

    try:
        changed = ActivityRepository(session).mark_content_deleted(content_id)
    except SQLAlchemyError:
        session.rollback()
        logger.exception("Error flagging activities for deleted content %s", content_id)
        return []

    if content_type is not None:
        emit_content_change(bus, "delete", content_type, content_id=content_id)
    if changed:
        bus.emit(
            RefreshEventType.ACTIVITIES_UPDATED,
            content_id=content_id,
            activity_ids=changed,
        )
    return changed


__all__ = [
    "get_activity_detail",
    "get_activity_feed",
    "ingest_activity",
    "list_activities",
    "mark_content_deleted",
]
