"""Tests for mapping raw domain rows onto activities."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

import pytest

from neighborly.application.use_cases.activity import (
    NormalizationError,
    normalize,
    normalize_many,
    parse_metadata,
    visible_activities,
)
from neighborly.domain.entities import (
    ActivityMetadata,
    ActorProfile,
    SafetyActivityMetadata,
    SkillActivityMetadata,
    SourceKind,
)


def _activity_row(**overrides):
    row = {
        "id": "act-1",
        "actor_id": "jane",
        "activity_type": "skill_offered",
        "content_id": "skill-1",
        "content_type": "skills_exchange",
        "title": "Guitar lessons",
        "created_at": "2024-06-01T10:00:00Z",
        "neighborhood_id": "hood-1",
        "metadata": {"request_type": "offer"},
        "profiles": {"display_name": "Jane Doe", "avatar_url": "https://img/jane.png"},
    }
    row.update(overrides)
    return row


def test_activity_row_maps_common_fields() -> None:
    activity = normalize(_activity_row(), SourceKind.ACTIVITY)

    assert activity.id == "act-1"
    assert activity.actor_id == "jane"
    assert activity.category == "skill"
    assert activity.created_at == datetime(2024, 6, 1, 10, 0, tzinfo=timezone.utc)
    assert activity.neighborhood_id == "hood-1"
    assert activity.actor == ActorProfile("Jane Doe", "https://img/jane.png")
    assert isinstance(activity.metadata, SkillActivityMetadata)
    assert activity.metadata.request_type == "offer"


def test_string_metadata_is_parsed_as_json() -> None:
    row = _activity_row(metadata=json.dumps({"skill_category": "music"}))

    activity = normalize(row, "activity")

    assert activity.metadata.skill_category == "music"


@pytest.mark.parametrize("raw_metadata", ["{not json", "[1, 2]", "42", 17])
def test_malformed_metadata_is_treated_as_absent(raw_metadata) -> None:
    activity = normalize(_activity_row(metadata=raw_metadata), SourceKind.ACTIVITY)

    assert activity.metadata is None


def test_metadata_failing_validation_is_dropped() -> None:
    activity = normalize(
        _activity_row(metadata={"request_type": {"unexpected": "shape"}}),
        SourceKind.ACTIVITY,
    )

    assert activity.metadata is None


def test_missing_profile_falls_back_to_empty_actor() -> None:
    row = _activity_row()
    del row["profiles"]

    activity = normalize(row, SourceKind.ACTIVITY)

    assert activity.actor == ActorProfile(display_name=None, avatar_url=None)


def test_event_row_uses_host_as_actor() -> None:
    activity = normalize(
        {
            "id": "42",
            "host_id": "host-1",
            "title": "Block Party",
            "created_at": datetime(2024, 6, 1, 18, 0, tzinfo=timezone.utc),
            "location": "Main St",
        },
        SourceKind.EVENT,
    )

    assert activity.id == "event-42"
    assert activity.actor_id == "host-1"
    assert activity.activity_type == "event_created"
    assert activity.content_type == "events"
    assert activity.content_id == "42"
    assert activity.metadata.location == "Main St"


@pytest.mark.parametrize(
    ("request_type", "expected"),
    [("offer", "skill_offered"), ("request", "skill_requested"), (None, "skill_offered")],
)
def test_skill_activity_type_follows_request_type(request_type, expected) -> None:
    activity = normalize(
        {
            "id": "s-1",
            "user_id": "jane",
            "title": "Gardening help",
            "request_type": request_type,
            "created_at": "2024-06-01T09:00:00+00:00",
        },
        SourceKind.SKILL,
    )

    assert activity.activity_type == expected
    assert activity.content_type == "skills_exchange"


@pytest.mark.parametrize(
    ("safety_type", "expected"),
    [
        ("emergency", "safety_emergency"),
        ("suspicious_activity", "safety_suspicious"),
        ("lost_pet", "safety_update"),
        (None, "safety_update"),
    ],
)
def test_safety_activity_type_follows_report_type(safety_type, expected) -> None:
    activity = normalize(
        {
            "id": "sf-1",
            "author_id": "kim",
            "title": "Report",
            "type": safety_type,
            "created_at": "2024-06-01T09:00:00Z",
        },
        SourceKind.SAFETY,
    )

    assert activity.activity_type == expected
    assert activity.actor_id == "kim"
    if safety_type is not None:
        assert isinstance(activity.metadata, SafetyActivityMetadata)
        assert activity.metadata.safety_type == safety_type


def test_skill_session_row_is_tagged_explicitly() -> None:
    activity = normalize(
        {
            "id": "session-9",
            "skill_id": "skill-3",
            "requester_id": "bob",
            "status": "cancelled",
            "skill": {"title": "Bike repair"},
            "created_at": "2024-06-02T08:00:00Z",
        },
        SourceKind.SKILL_SESSION,
    )

    assert activity.activity_type == "skill_session_cancelled"
    assert activity.category == "skill"
    assert activity.content_id == "skill-3"
    assert activity.title == "Bike repair"
    assert activity.metadata.session_status == "cancelled"


def test_goods_and_care_rows() -> None:
    goods = normalize(
        {"id": "g-1", "user_id": "amy", "title": "Ladder", "created_at": "2024-06-01T09:00:00Z"},
        SourceKind.GOODS,
    )
    care = normalize(
        {
            "id": "c-1",
            "user_id": "amy",
            "title": "Dog walking",
            "request_type": "request",
            "created_at": "2024-06-01T09:00:00Z",
        },
        SourceKind.CARE,
    )

    assert goods.activity_type == "good_shared"
    assert goods.content_type == "goods_exchange"
    assert care.activity_type == "care_requested"


def test_group_member_and_neighbor_rows() -> None:
    member = normalize(
        {
            "id": "m-1",
            "group_id": "garden-club",
            "group_name": "Garden Club",
            "user_id": "bob",
            "joined_at": "2024-06-01T09:00:00Z",
        },
        SourceKind.GROUP_MEMBER,
    )
    neighbor = normalize(
        {
            "user_id": "sam",
            "joined_at": "2024-06-01T09:00:00Z",
            "profile": {"display_name": "Sam Lee"},
        },
        SourceKind.NEIGHBOR,
    )

    assert member.activity_type == "group_member_joined"
    assert member.content_id == "garden-club"
    assert member.title == "Garden Club"
    assert neighbor.activity_type == "neighbor_joined"
    assert neighbor.id == "neighbor-sam"
    assert neighbor.title == "Sam Lee"
    assert neighbor.actor.display_name == "Sam Lee"


def test_activity_type_without_category_is_rejected() -> None:
    with pytest.raises(NormalizationError):
        normalize(_activity_row(activity_type="posted"), SourceKind.ACTIVITY)


def test_missing_timestamp_is_rejected() -> None:
    with pytest.raises(NormalizationError):
        normalize(_activity_row(created_at="yesterday"), SourceKind.ACTIVITY)


def test_normalize_many_skips_bad_rows(caplog: pytest.LogCaptureFixture) -> None:
    rows = [
        _activity_row(id="ok-1"),
        _activity_row(id="bad", actor_id=None),
        _activity_row(id="ok-2", profiles=None),
    ]

    with caplog.at_level(logging.WARNING):
        activities = normalize_many(rows, SourceKind.ACTIVITY)

    assert [activity.id for activity in activities] == ["ok-1", "ok-2"]
    assert "bad" in caplog.text


def test_deleted_activities_are_hidden_but_keep_original_title() -> None:
    deleted = normalize(
        _activity_row(id="gone", title="", metadata={"deleted": True, "originalTitle": "Old sofa"}),
        SourceKind.ACTIVITY,
    )
    kept = normalize(_activity_row(id="kept"), SourceKind.ACTIVITY)

    assert deleted.is_deleted is True
    assert deleted.title == "Old sofa"
    assert visible_activities([deleted, kept]) == [kept]


def test_integer_event_id_keeps_removal_markers() -> None:
    activity = normalize(
        {
            "id": 42,
            "host_id": "u1",
            "title": "",
            "created_at": "2024-06-01T18:00:00Z",
            "metadata": {"deleted": True, "originalTitle": "Party"},
        },
        SourceKind.EVENT,
    )

    assert activity.id == "event-42"
    assert activity.metadata.event_id == "42"
    assert activity.is_deleted is True
    assert activity.title == "Party"
    assert visible_activities([activity]) == []


def test_malformed_payload_still_hides_removed_content() -> None:
    activity = normalize(
        _activity_row(
            metadata={"request_type": {"unexpected": "shape"}, "deleted": True},
        ),
        SourceKind.ACTIVITY,
    )

    assert type(activity.metadata) is ActivityMetadata
    assert activity.is_deleted is True
    assert visible_activities([activity]) == []


def test_parse_metadata_variants() -> None:
    assert parse_metadata(None) is None
    assert parse_metadata({"a": 1}) == {"a": 1}
    assert parse_metadata('{"a": 1}') == {"a": 1}
    assert parse_metadata("nope") is None
