"""Tests for the activity feed use cases backed by the database."""

from __future__ import annotations

from sqlalchemy.orm import Session

from neighborly.application.use_cases.activity import (
    get_activity_detail,
    get_activity_feed,
    ingest_activity,
    list_activities,
    mark_content_deleted,
)
from neighborly.domain.entities import RefreshEvent, RefreshEventType, SourceKind
from neighborly.infrastructure.models import ProfileModel
from neighborly.infrastructure.notifications import RefreshBus


def _skill_row(row_id: str, hour: int, request_type: str = "offer", user_id: str = "jane"):
    return {
        "id": row_id,
        "user_id": user_id,
        "title": f"Skill {row_id}",
        "request_type": request_type,
        "neighborhood_id": "hood-1",
        "created_at": f"2024-06-01T{hour:02d}:00:00Z",
    }


def test_ingest_persists_and_emits_refresh_events(
    db_session: Session, bus: RefreshBus, recorded_events: list[RefreshEvent]
) -> None:
    activity = ingest_activity(db_session, _skill_row("s-1", 9), SourceKind.SKILL, bus=bus)

    assert activity is not None
    assert activity.id == "skill-s-1"
    assert get_activity_detail(db_session, "skill-s-1").activity_type == "skill_offered"
    assert [event.event_type for event in recorded_events] == [
        RefreshEventType.SKILLS_UPDATED,
        RefreshEventType.ACTIVITIES_UPDATED,
    ]


def test_goods_ingest_refreshes_feed_once(
    db_session: Session, bus: RefreshBus, recorded_events: list[RefreshEvent]
) -> None:
    ingest_activity(
        db_session,
        {"id": "g-1", "user_id": "amy", "title": "Ladder", "created_at": "2024-06-01T09:00:00Z"},
        "goods",
        bus=bus,
    )

    assert [event.event_type for event in recorded_events] == [
        RefreshEventType.GOODS_UPDATED,
        RefreshEventType.ACTIVITIES_UPDATED,
    ]


def test_feed_groups_bursts_from_the_same_actor(db_session: Session, bus: RefreshBus) -> None:
    db_session.add(ProfileModel(id="jane", display_name="Jane Doe"))
    db_session.commit()
    ingest_activity(db_session, _skill_row("s-1", 9), SourceKind.SKILL, bus=bus)
    ingest_activity(db_session, _skill_row("s-2", 11, "request"), SourceKind.SKILL, bus=bus)
    ingest_activity(db_session, _skill_row("s-3", 12, user_id="sam"), SourceKind.SKILL, bus=bus)

    groups = get_activity_feed(db_session, neighborhood_id="hood-1")

    assert [group.count for group in groups] == [1, 2]
    assert groups[1].primary_activity.id == "skill-s-2"
    assert groups[1].primary_activity.actor.display_name == "Jane Doe"
    assert groups[0].primary_activity.actor.display_name is None


def test_feed_filters_by_neighborhood_and_limit(db_session: Session, bus: RefreshBus) -> None:
    ingest_activity(db_session, _skill_row("s-1", 9), SourceKind.SKILL, bus=bus)
    other = _skill_row("s-2", 10)
    other["neighborhood_id"] = "hood-2"
    ingest_activity(db_session, other, SourceKind.SKILL, bus=bus)

    assert [a.id for a in list_activities(db_session, neighborhood_id="hood-1")] == ["skill-s-1"]
    assert len(list_activities(db_session, limit=1)) == 1


def test_deleted_content_leaves_feed_but_stays_resolvable(
    db_session: Session, bus: RefreshBus, recorded_events: list[RefreshEvent]
) -> None:
    activity = ingest_activity(db_session, _skill_row("s-1", 9), SourceKind.SKILL, bus=bus)
    recorded_events.clear()

    changed = mark_content_deleted(
        db_session, activity.content_id, content_type="skills", bus=bus
    )

    assert changed == [activity.id]
    assert list_activities(db_session) == []
    detail = get_activity_detail(db_session, activity.id)
    assert detail.is_deleted is True
    assert detail.metadata.original_title == "Skill s-1"
    assert [event.event_type for event in recorded_events] == [
        RefreshEventType.SKILLS_UPDATED,
        RefreshEventType.ACTIVITIES_UPDATED,
    ]


def test_marking_content_deleted_twice_changes_nothing(
    db_session: Session, bus: RefreshBus
) -> None:
    activity = ingest_activity(db_session, _skill_row("s-1", 9), SourceKind.SKILL, bus=bus)

    assert mark_content_deleted(db_session, activity.content_id, bus=bus) == [activity.id]
    assert mark_content_deleted(db_session, activity.content_id, bus=bus) == []


def test_unknown_activity_detail_is_none(db_session: Session) -> None:
    assert get_activity_detail(db_session, "missing") is None
