"""Tests for the notification template catalog and substitution engine."""

from __future__ import annotations

import logging

import pytest

from neighborly.application.use_cases.notifications import (
    NOTIFICATION_TEMPLATES,
    get_template,
    list_template_ids,
    process_template,
    template_placeholders,
)
from neighborly.application.use_cases.notifications.templates import render_template
from neighborly.domain.entities import NotificationTemplate

EXPECTED_TEMPLATE_IDS = {
    "event_rsvp",
    "event_created",
    "skill_requested",
    "skill_offered",
    "skill_session_request",
    "skill_session_cancelled",
    "goods_requested",
    "goods_offered",
    "goods_response",
    "safety_update",
    "safety_comment",
    "safety_emergency",
    "safety_suspicious",
    "neighbor_joined",
    "care_offered",
    "care_requested",
    "care_response",
    "group_member_joined",
    "group_update_posted",
    "group_update_comment",
    "group_event_created",
    "group_invitation",
}


def test_catalog_contains_every_template_family() -> None:
    assert EXPECTED_TEMPLATE_IDS <= set(list_template_ids())


@pytest.mark.parametrize("template_id", sorted(EXPECTED_TEMPLATE_IDS))
def test_every_template_resolves_all_placeholders(template_id: str) -> None:
    processed = process_template(template_id, {})

    assert processed is not None
    assert "{{" not in processed.title
    assert processed.template.id == template_id


def test_unknown_template_returns_none_and_warns(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        assert process_template("nonexistent", {"actor": "Jane"}) is None

    assert "nonexistent" in caplog.text


def test_event_rsvp_title() -> None:
    processed = process_template("event_rsvp", {"actor": "Jane", "title": "Block Party"})

    assert processed is not None
    assert processed.title == "Jane RSVP'd to Block Party"
    assert processed.template.relevance_score == 3


def test_neighbor_joined_title() -> None:
    processed = process_template("neighbor_joined", {"actor": "Sam"})

    assert processed is not None
    assert processed.title == "Sam joined your neighborhood"
    assert processed.template.relevance_score == 1


def test_missing_and_blank_variables_render_unknown() -> None:
    processed = process_template("group_invitation", {"actor": "  ", "groupName": None})

    assert processed is not None
    assert processed.title == "Unknown invited you to join Unknown"


def test_substitution_replaces_every_occurrence() -> None:
    assert render_template("{{a}} and {{ a }} and {{b}}", {"a": "x"}) == "x and x and Unknown"


def test_processed_template_carries_routing_metadata() -> None:
    processed = process_template("safety_emergency", {"actor": "Kim", "title": "Gas leak"})

    assert processed is not None
    template = processed.template
    assert template is NOTIFICATION_TEMPLATES["safety_emergency"]
    assert template.content_type
    assert template.notification_type
    assert template.action_type
    assert template.action_label
    assert template.relevance_score == 3


def test_relevance_scores_are_bounded() -> None:
    assert {template.relevance_score for template in NOTIFICATION_TEMPLATES.values()} <= {1, 2, 3}


def test_template_placeholders_in_order_of_use() -> None:
    assert template_placeholders("group_event_created") == ["actor", "groupName", "title"]
    assert template_placeholders("missing") == []


def test_get_template_returns_none_for_unknown_id() -> None:
    assert get_template("event_rsvp") is not None
    assert get_template("unknown") is None


def test_catalog_is_read_only() -> None:
    with pytest.raises(TypeError):
        NOTIFICATION_TEMPLATES["custom"] = NOTIFICATION_TEMPLATES["event_rsvp"]  # type: ignore[index]


def test_template_rejects_invalid_relevance_score() -> None:
    with pytest.raises(ValueError):
        NotificationTemplate(
            id="broken",
            template="{{actor}} did something",
            content_type="events",
            notification_type="event",
            action_type="view",
            action_label="View",
            relevance_score=4,
            description="Invalid",
        )
