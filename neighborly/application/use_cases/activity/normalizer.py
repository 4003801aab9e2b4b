"""Convert raw rows from each domain source into :class:`Activity` objects.

Every row arrives tagged with the :class:`SourceKind` it was read from. The tag
selects one entry of ``SOURCE_MAPPINGS`` which knows where that source keeps
the actor, the title, the timestamp and how to derive the activity type.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Callable

from pydantic import ValidationError

from neighborly.domain.entities import (
    Activity,
    ActivityMetadata,
    ActorProfile,
    SourceKind,
    activity_category,
    metadata_model_for,
)
from neighborly.utils import parse_timestamp

logger = logging.getLogger(__name__)

Row = Mapping[str, Any]

_REMOVAL_KEYS = ("deleted", "originalTitle", "original_title")


class NormalizationError(ValueError):
    """Raised when a raw row lacks the fields required to build an activity."""


@dataclass(frozen=True)
class SourceMapping:
    """Describe where a domain source stores the fields of an activity."""

    content_type: str
    activity_type: Callable[[Row], str]
    actor_fields: tuple[str, ...] = ("actor_id", "user_id")
    content_id_fields: tuple[str, ...] = ("id",)
    title_fields: tuple[str, ...] = ("title",)
    timestamp_fields: tuple[str, ...] = ("created_at",)
    extra_metadata: Callable[[Row], dict[str, Any]] = field(default=lambda row: {})
    prefix_ids: bool = True


def _fixed(activity_type: str) -> Callable[[Row], str]:
    return lambda row: activity_type


def _is_request(row: Row) -> bool:
    return str(row.get("request_type") or "").lower() in {"request", "need", "requested"}


def _pick(row: Row, *keys: str) -> dict[str, Any]:
    return {key: row[key] for key in keys if row.get(key) is not None}


def _as_str(value: Any) -> str | None:
    return None if value is None else str(value)


def _safety_type(row: Row) -> str:
    kind = str(row.get("type") or "").lower()
    if kind == "emergency":
        return "safety_emergency"
    if kind in {"suspicious", "suspicious_activity"}:
        return "safety_suspicious"
    return "safety_update"


def _skill_session_type(row: Row) -> str:
    status = str(row.get("status") or "requested").lower().replace(" ", "_")
    return f"skill_session_{status}"


def _nested_title(row: Row) -> str | None:
    for key in ("skill", "group"):
        nested = row.get(key)
        if isinstance(nested, Mapping):
            title = nested.get("title") or nested.get("name")
            if title:
                return str(title)
    return None


SOURCE_MAPPINGS: dict[SourceKind, SourceMapping] = {
    SourceKind.ACTIVITY: SourceMapping(
        content_type="activities",
        activity_type=lambda row: str(row.get("activity_type") or ""),
        actor_fields=("actor_id",),
        content_id_fields=("content_id",),
        prefix_ids=False,
    ),
    SourceKind.EVENT: SourceMapping(
        content_type="events",
        activity_type=_fixed("event_created"),
        actor_fields=("host_id", "user_id"),
        extra_metadata=lambda row: {
            "event_id": _as_str(row.get("id")),
            **_pick(row, "start_time", "location", "group_id"),
        },
    ),
    SourceKind.SKILL: SourceMapping(
        content_type="skills_exchange",
        activity_type=lambda row: "skill_requested" if _is_request(row) else "skill_offered",
        extra_metadata=lambda row: {
            **_pick(row, "request_type"),
            **({"skill_category": row["skill_category"]} if row.get("skill_category") else {}),
        },
    ),
    SourceKind.SKILL_SESSION: SourceMapping(
        content_type="skill_sessions",
        activity_type=_skill_session_type,
        actor_fields=("requester_id", "user_id"),
        content_id_fields=("skill_id", "id"),
        extra_metadata=lambda row: {
            "session_id": _as_str(row.get("id")),
            **({"session_status": row["status"]} if row.get("status") else {}),
        },
    ),
    SourceKind.GOODS: SourceMapping(
        content_type="goods_exchange",
        activity_type=lambda row: "good_requested" if _is_request(row) else "good_shared",
        extra_metadata=lambda row: {
            **_pick(row, "request_type", "urgency"),
            **({"goods_category": row["goods_category"]} if row.get("goods_category") else {}),
        },
    ),
    SourceKind.CARE: SourceMapping(
        content_type="care_requests",
        activity_type=lambda row: "care_requested" if _is_request(row) else "care_offered",
        extra_metadata=lambda row: {
            **_pick(row, "request_type"),
            **({"care_category": row["care_category"]} if row.get("care_category") else {}),
        },
    ),
    SourceKind.SAFETY: SourceMapping(
        content_type="safety_updates",
        activity_type=_safety_type,
        actor_fields=("author_id", "user_id"),
        extra_metadata=lambda row: {"safety_type": row["type"]} if row.get("type") else {},
    ),
    SourceKind.GROUP_UPDATE: SourceMapping(
        content_type="group_updates",
        activity_type=_fixed("group_update_posted"),
        actor_fields=("user_id", "author_id"),
        title_fields=("title", "group_name"),
        extra_metadata=lambda row: _pick(row, "group_id", "group_name"),
    ),
    SourceKind.GROUP_MEMBER: SourceMapping(
        content_type="groups",
        activity_type=_fixed("group_member_joined"),
        actor_fields=("user_id",),
        content_id_fields=("group_id",),
        title_fields=("group_name", "title"),
        timestamp_fields=("joined_at", "created_at"),
        extra_metadata=lambda row: _pick(row, "group_id", "group_name"),
    ),
    SourceKind.NEIGHBOR: SourceMapping(
        content_type="neighbors",
        activity_type=_fixed("neighbor_joined"),
        actor_fields=("user_id",),
        content_id_fields=("user_id",),
        title_fields=("display_name",),
        timestamp_fields=("joined_at", "created_at"),
        extra_metadata=lambda row: {"neighbor_id": _as_str(row.get("user_id"))},
    ),
}


def parse_metadata(value: Any) -> dict[str, Any] | None:
    """Best-effort conversion of a raw metadata value into a dictionary.

    Mappings pass through, strings are parsed as JSON, anything else (or JSON
    that does not decode to an object) yields ``None``.
    """

    if value is None:
        return None
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, (str, bytes)):
        try:
            parsed = json.loads(value)
        except (TypeError, ValueError):
            logger.debug("Discarding unparseable activity metadata")
            return None
        return parsed if isinstance(parsed, dict) else None
    return None


def _first(row: Row, fields: Iterable[str]) -> Any:
    for name in fields:
        value = row.get(name)
        if value not in (None, ""):
            return value
    return None


def _actor_profile(row: Row) -> ActorProfile:
    for key in ("profiles", "profile", "author", "actor"):
        nested = row.get(key)
        if isinstance(nested, Mapping):
            return ActorProfile(
                display_name=nested.get("display_name") or nested.get("name") or None,
                avatar_url=nested.get("avatar_url") or None,
            )
    return ActorProfile()


def _build_metadata(
    category: str, raw: dict[str, Any] | None, extras: dict[str, Any]
) -> ActivityMetadata | None:
    data = {**{k: v for k, v in extras.items() if v is not None}, **(raw or {})}
    if raw is None and not extras:
        return None
    try:
        return metadata_model_for(category).model_validate(data)
    except ValidationError as exc:
        logger.debug("Activity metadata failed validation for %s: %s", category, exc)

    # Keep the removal markers even when the category payload is malformed.
    markers = {key: data[key] for key in _REMOVAL_KEYS if key in data}
    if not markers:
        return None
    try:
        return ActivityMetadata.model_validate(markers)
    except ValidationError:
        logger.debug("Discarding activity metadata for %s", category)
        return None


def normalize(raw: Row, source_kind: SourceKind | str) -> Activity:
    """Map ``raw`` from ``source_kind`` onto the unified :class:`Activity` shape."""

    kind = SourceKind(source_kind)
    mapping = SOURCE_MAPPINGS[kind]

    row_id = raw.get("id")
    actor_id = _first(raw, mapping.actor_fields)
    content_id = _first(raw, mapping.content_id_fields)
    created_at = parse_timestamp(_first(raw, mapping.timestamp_fields))
    activity_type = mapping.activity_type(raw)

    if row_id in (None, "") and kind is not SourceKind.NEIGHBOR:
        raise NormalizationError(f"{kind.value} row is missing an id")
    if actor_id is None:
        raise NormalizationError(f"{kind.value} row {row_id} is missing an actor")
    if content_id is None:
        raise NormalizationError(f"{kind.value} row {row_id} is missing a content id")
    if created_at is None:
        raise NormalizationError(f"{kind.value} row {row_id} has no usable timestamp")
    if "_" not in activity_type.strip("_"):
        raise NormalizationError(f"Invalid activity type {activity_type!r}")

    category = activity_category(activity_type)
    metadata = _build_metadata(
        category, parse_metadata(raw.get("metadata")), mapping.extra_metadata(raw)
    )

    title = _first(raw, mapping.title_fields) or _nested_title(raw)
    if title is None and metadata is not None:
        title = metadata.original_title
    actor = _actor_profile(raw)
    if title is None and kind is SourceKind.NEIGHBOR:
        title = actor.display_name

    identifier = str(row_id if row_id not in (None, "") else content_id)
    if mapping.prefix_ids:
        identifier = f"{kind.value}-{identifier}"

    return Activity(
        id=identifier,
        actor_id=str(actor_id),
        activity_type=activity_type,
        content_id=str(content_id),
        content_type=str(raw.get("content_type") or mapping.content_type),
        title=str(title or ""),
        created_at=created_at,
        neighborhood_id=(
            str(raw["neighborhood_id"]) if raw.get("neighborhood_id") is not None else None
        ),
        metadata=metadata,
        is_public=bool(raw.get("is_public", True)),
        actor=actor,
    )


def normalize_many(rows: Iterable[Row], source_kind: SourceKind | str) -> list[Activity]:
    """Normalize a batch, skipping (and logging) rows that cannot be mapped."""

    activities: list[Activity] = []
    for row in rows:
        try:
            activities.append(normalize(row, source_kind))
        except NormalizationError as exc:
            logger.warning("Skipping %s row: %s", SourceKind(source_kind).value, exc)
    return activities


def visible_activities(activities: Iterable[Activity]) -> list[Activity]:
    """Drop activities whose source content has been removed."""

    return [activity for activity in activities if not activity.is_deleted]


__all__ = [
    "NormalizationError",
    "SOURCE_MAPPINGS",
    "SourceMapping",
    "normalize",
    "normalize_many",
    "parse_metadata",
    "visible_activities",
]
