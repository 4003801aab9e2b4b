"""Endpoints and websocket handler for neighborhood notifications."""

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

from neighborly.application.use_cases.notifications import (
    NOTIFICATION_TEMPLATES,
    NotificationDispatcher,
    NotificationStateManager,
    get_template,
    template_placeholders,
)
from neighborly.config import get_settings
from neighborly.domain.entities import Notification, NotificationTemplate, RefreshEvent
from neighborly.infrastructure.database import get_db
from neighborly.infrastructure.notifications import (
    NOTIFICATION_REFRESH_EVENTS,
    DebouncedRefresher,
    RefreshBus,
    notification_manager,
    serialize_notification,
)
from neighborly.infrastructure.repositories import NotificationRepository
from neighborly.interfaces.api.dependencies import (
    get_current_user_id,
    get_notification_dispatcher,
    get_notification_state_manager,
    get_refresh_bus,
    get_session_factory,
)
from neighborly.interfaces.api.schemas import (
    GroupNotificationCreate,
    GroupNotificationsCreated,
    NotificationCreate,
    NotificationCreated,
    NotificationRead,
    NotificationStateResponse,
    NotificationTemplateRead,
    UnreadCountRead,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _notification_to_schema(notification: Notification) -> NotificationRead:
    return NotificationRead.model_validate(notification)


def _template_to_schema(template: NotificationTemplate) -> NotificationTemplateRead:
    return NotificationTemplateRead(
        id=template.id,
        template=template.template,
        content_type=template.content_type,
        notification_type=template.notification_type,
        action_type=template.action_type,
        action_label=template.action_label,
        relevance_score=template.relevance_score,
        description=template.description,
        placeholders=template_placeholders(template.id),
    )


def _ensure_owned(db: Session, notification_id: int, user_id: str) -> None:
    notification = NotificationRepository(db).get(notification_id)
    if notification is None or notification.user_id != user_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Notification not found",
        )


def _state_response(success: bool) -> NotificationStateResponse:
    if not success:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Notification state could not be updated",
        )
    return NotificationStateResponse(success=True)


@router.get("/", response_model=list[NotificationRead])
def list_notifications(
    archived: bool = Query(False, description="List the archived partition instead"),
    limit: int | None = Query(None, ge=1, le=200),
    user_id: str = Depends(get_current_user_id),
    manager: NotificationStateManager = Depends(get_notification_state_manager),
) -> list[NotificationRead]:
    """Return the caller's notifications, newest first, one page at a time."""

    if limit is None:
        limit = get_settings().notification_list_limit
    notifications = manager.fetch_notifications(user_id, archived, limit=limit)
    return [_notification_to_schema(notification) for notification in notifications]


@router.get("/unread-count", response_model=UnreadCountRead)
def read_unread_count(
    user_id: str = Depends(get_current_user_id),
    manager: NotificationStateManager = Depends(get_notification_state_manager),
) -> UnreadCountRead:
    return UnreadCountRead(unread_count=manager.count_unread(user_id))


@router.get("/templates", response_model=list[NotificationTemplateRead])
def list_notification_templates() -> list[NotificationTemplateRead]:
    """Return the catalog of notification templates."""

    return [_template_to_schema(template) for template in NOTIFICATION_TEMPLATES.values()]


@router.get("/templates/{template_id}", response_model=NotificationTemplateRead)
def read_notification_template(template_id: str) -> NotificationTemplateRead:
    template = get_template(template_id)
    if template is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Template not found",
        )
    return _template_to_schema(template)


@router.post(
    "/",
    response_model=NotificationCreated,
    status_code=status.HTTP_201_CREATED,
)
def create_notification(
    payload: NotificationCreate,
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> NotificationCreated:
    """Create a notification for one recipient from a registered template."""

    notification_id = dispatcher.create_notification(
        payload.template_id,
        payload.recipient_id,
        actor_id=payload.actor_id,
        content_id=payload.content_id,
        variables=payload.variables,
        metadata=payload.metadata,
    )
    if notification_id is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Notification could not be created",
        )
    return NotificationCreated(id=notification_id)


@router.post(
    "/groups/{group_id}",
    response_model=GroupNotificationsCreated,
    status_code=status.HTTP_201_CREATED,
)
def notify_group(
    group_id: str,
    payload: GroupNotificationCreate,
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> GroupNotificationsCreated:
    """Notify every member of ``group_id`` except the acting member."""

    if get_template(payload.template_id) is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Unknown notification template",
        )
    ids = dispatcher.notify_group_members(
        group_id,
        actor_id=payload.actor_id,
        template_id=payload.template_id,
        content_id=payload.content_id,
        variables=payload.variables,
        metadata=payload.metadata,
    )
    return GroupNotificationsCreated(ids=ids)


@router.post("/read-all", response_model=NotificationStateResponse)
def mark_all_notifications_read(
    archived: bool = Query(False, description="Partition whose notifications are marked"),
    user_id: str = Depends(get_current_user_id),
    manager: NotificationStateManager = Depends(get_notification_state_manager),
) -> NotificationStateResponse:
    return _state_response(manager.mark_all_read(user_id, archived))


@router.post("/{notification_id}/read", response_model=NotificationStateResponse)
def mark_notification_read(
    notification_id: int,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    manager: NotificationStateManager = Depends(get_notification_state_manager),
) -> NotificationStateResponse:
    _ensure_owned(db, notification_id, user_id)
    return _state_response(manager.mark_read(notification_id))


@router.post("/{notification_id}/archive", response_model=NotificationStateResponse)
def archive_notification(
    notification_id: int,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    manager: NotificationStateManager = Depends(get_notification_state_manager),
) -> NotificationStateResponse:
    _ensure_owned(db, notification_id, user_id)
    return _state_response(manager.archive(notification_id))


def _load_unread_snapshot(
    session_factory: sessionmaker, bus: RefreshBus, user_id: str
) -> tuple[int, list[dict[str, Any]]]:
    session = session_factory()
    try:
        manager = NotificationStateManager(session, bus=bus)
        notifications = NotificationRepository(session).list_unread_for_user(user_id)
        return (
            manager.count_unread(user_id),
            [serialize_notification(notification) for notification in notifications],
        )
    finally:
        session.close()


def _acknowledge(
    session_factory: sessionmaker, bus: RefreshBus, user_id: str, ids: list[Any]
) -> None:
    session = session_factory()
    try:
        repository = NotificationRepository(session)
        manager = NotificationStateManager(session, bus=bus, notifications=repository)
        for notification_id in ids:
            if not isinstance(notification_id, int):
                continue
            notification = repository.get(notification_id)
            if notification is None or notification.user_id != user_id:
                continue
            manager.mark_read(notification_id)
    finally:
        session.close()


@router.websocket("/ws")
async def notifications_websocket(
    websocket: WebSocket,
    session_factory: sessionmaker = Depends(get_session_factory),
    bus: RefreshBus = Depends(get_refresh_bus),
) -> None:
    """Stream notifications and refreshed unread snapshots to one user."""

    user_id = websocket.query_params.get("user_id") or websocket.headers.get("x-user-id")
    if not user_id:
        await websocket.close(code=1008)
        return

    _, pending = await run_in_threadpool(_load_unread_snapshot, session_factory, bus, user_id)

    async def push_snapshot() -> None:
        unread_count, notifications = await run_in_threadpool(
            _load_unread_snapshot, session_factory, bus, user_id
        )
        await websocket.send_json(
            {"type": "refresh", "unread_count": unread_count, "data": notifications}
        )

    def concerns_user(event: RefreshEvent) -> bool:
        target = event.payload.get("user_id")
        return target is None or str(target) == user_id

    settings = get_settings()
    refresher = DebouncedRefresher(
        bus,
        push_snapshot,
        NOTIFICATION_REFRESH_EVENTS,
        debounce_seconds=settings.refresh_debounce_ms / 1000,
        poll_interval=settings.notification_poll_seconds,
        event_filter=concerns_user,
    )

    await notification_manager.connect(user_id, websocket)
    refresher.start()
    try:
        await websocket.send_json({"type": "init", "data": pending})
        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except ValueError:
                continue

            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
                continue

            if message_type == "ack":
                ids = message.get("ids", [])
                if isinstance(ids, list) and ids:
                    await run_in_threadpool(_acknowledge, session_factory, bus, user_id, ids)
                continue
    except WebSocketDisconnect:
        logger.debug("Notification websocket closed for %s", user_id)
    finally:
        refresher.close()
        notification_manager.disconnect(user_id, websocket)


__all__ = ["router"]
