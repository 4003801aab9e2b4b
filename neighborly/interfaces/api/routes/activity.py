"""Endpoints serving and feeding the neighborhood activity feed."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Query,
    WebSocket,
    WebSocketDisconnect,
    status,
)
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session, sessionmaker

from neighborly.application.use_cases.activity import (
    NormalizationError,
    get_activity_detail,
    get_activity_feed,
    grouped_activity_text,
    ingest_activity,
    list_activities,
    mark_content_deleted,
)
from neighborly.config import get_settings
from neighborly.domain.entities import Activity, ActivityGroup
from neighborly.infrastructure.database import get_db
from neighborly.infrastructure.notifications import (
    ACTIVITY_REFRESH_EVENTS,
    ALL_NEIGHBORHOODS,
    DebouncedRefresher,
    RefreshBus,
    activity_connections,
)
from neighborly.interfaces.api.dependencies import get_refresh_bus, get_session_factory
from neighborly.interfaces.api.schemas import (
    ActivityGroupRead,
    ActivityIngestRequest,
    ActivityRead,
    ActorRead,
    ContentDeletedRequest,
    ContentDeletedResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/activity", tags=["activity"])


def _activity_to_schema(activity: Activity) -> ActivityRead:
    return ActivityRead(
        id=activity.id,
        actor_id=activity.actor_id,
        activity_type=activity.activity_type,
        category=activity.category,
        content_id=activity.content_id,
        content_type=activity.content_type,
        title=activity.title,
        created_at=activity.created_at,
        neighborhood_id=activity.neighborhood_id,
        is_public=activity.is_public,
        is_deleted=activity.is_deleted,
        metadata=(
            activity.metadata.model_dump(mode="json", exclude_none=True)
            if activity.metadata is not None
            else None
        ),
        actor=ActorRead(
            display_name=activity.actor.display_name,
            avatar_url=activity.actor.avatar_url,
        ),
    )


def _group_to_schema(group: ActivityGroup) -> ActivityGroupRead:
    return ActivityGroupRead(
        group_key=group.group_key,
        count=group.count,
        summary=grouped_activity_text(group),
        primary_activity=_activity_to_schema(group.primary_activity),
        activities=[_activity_to_schema(activity) for activity in group.activities],
    )


@router.get("/feed", response_model=list[ActivityGroupRead])
def read_activity_feed(
    neighborhood_id: str | None = Query(None, description="Restrict to one neighborhood"),
    limit: int | None = Query(None, ge=1, le=100, description="Maximum number of activities"),
    grouped: bool = Query(True, description="Collapse related activities into groups"),
    db: Session = Depends(get_db),
) -> list[ActivityGroupRead]:
    """Return the most recent visible activities, grouped by actor and day."""

    if grouped:
        groups = get_activity_feed(db, neighborhood_id=neighborhood_id, limit=limit)
    else:
        groups = [
            ActivityGroup(group_key=activity.id, primary_activity=activity, activities=[activity])
            for activity in list_activities(db, neighborhood_id=neighborhood_id, limit=limit)
        ]
    return [_group_to_schema(group) for group in groups]


@router.get("/{activity_id}", response_model=ActivityRead)
def read_activity(activity_id: str, db: Session = Depends(get_db)) -> ActivityRead:
    """Return one activity, even when its content has been removed."""

    activity = get_activity_detail(db, activity_id)
    if activity is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Activity not found",
        )
    return _activity_to_schema(activity)


@router.post("/ingest", response_model=ActivityRead, status_code=status.HTTP_201_CREATED)
def ingest_activity_row(
    payload: ActivityIngestRequest,
    db: Session = Depends(get_db),
    bus: RefreshBus = Depends(get_refresh_bus),
) -> ActivityRead:
    try:
        activity = ingest_activity(db, payload.record, payload.source_kind, bus=bus)
    except NormalizationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        ) from exc
    if activity is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Activity could not be stored",
        )
    return _activity_to_schema(activity)


@router.post("/content/{content_id}/deleted", response_model=ContentDeletedResponse)
def flag_deleted_content(
    content_id: str,
    payload: ContentDeletedRequest | None = None,
    db: Session = Depends(get_db),
    bus: RefreshBus = Depends(get_refresh_bus),
) -> ContentDeletedResponse:
    """Hide the activities of removed content from the feed."""

    changed = mark_content_deleted(
        db,
        content_id,
        content_type=payload.content_type if payload is not None else None,
        bus=bus,
    )
    return ContentDeletedResponse(activity_ids=changed)


# Shared feed refresher per neighborhood channel, alive while the channel has sockets.
_feed_refreshers: dict[str, DebouncedRefresher] = {}


def _load_feed(
    session_factory: sessionmaker, neighborhood_id: str | None
) -> list[dict[str, Any]]:
    session = session_factory()
    try:
        groups = get_activity_feed(session, neighborhood_id=neighborhood_id)
        return [_group_to_schema(group).model_dump(mode="json") for group in groups]
    finally:
        session.close()


def _feed_refresher(
    channel: str,
    neighborhood_id: str | None,
    session_factory: sessionmaker,
    bus: RefreshBus,
) -> DebouncedRefresher:
    refresher = _feed_refreshers.get(channel)
    if refresher is not None:
        return refresher

    async def push_feed() -> None:
        groups = await run_in_threadpool(_load_feed, session_factory, neighborhood_id)
        await activity_connections.send(channel, {"type": "refresh", "data": groups})

    settings = get_settings()
    refresher = DebouncedRefresher(
        bus,
        push_feed,
        ACTIVITY_REFRESH_EVENTS,
        debounce_seconds=settings.refresh_debounce_ms / 1000,
        poll_interval=settings.activity_poll_seconds,
    ).start()
    _feed_refreshers[channel] = refresher
    return refresher


@router.websocket("/ws")
async def activity_websocket(
    websocket: WebSocket,
    session_factory: sessionmaker = Depends(get_session_factory),
    bus: RefreshBus = Depends(get_refresh_bus),
) -> None:
    """Push the grouped feed whenever activity changes, with a polling fallback.

    Sockets watching the same neighborhood share one refresher.
    """

    neighborhood_id = websocket.query_params.get("neighborhood_id")
    channel = neighborhood_id or ALL_NEIGHBORHOODS

    await activity_connections.connect(channel, websocket)
    _feed_refresher(channel, neighborhood_id, session_factory, bus)
    try:
        groups = await run_in_threadpool(_load_feed, session_factory, neighborhood_id)
        await websocket.send_json({"type": "init", "data": groups})
        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except ValueError:
                continue
            if isinstance(message, dict) and message.get("type") == "ping":
                await websocket.send_json({"type": "pong"})
    except WebSocketDisconnect:
        logger.debug("Activity websocket closed (neighborhood=%s)", neighborhood_id)
    finally:
        if activity_connections.disconnect(channel, websocket):
            refresher = _feed_refreshers.pop(channel, None)
            if refresher is not None:
                refresher.close()


__all__ = ["router"]
