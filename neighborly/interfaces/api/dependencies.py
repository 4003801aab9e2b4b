"""FastAPI dependency utilities."""

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session, sessionmaker

from neighborly.application.use_cases.notifications import (
    NotificationDispatcher,
    NotificationStateManager,
)
from neighborly.infrastructure.database import SessionLocal, get_db
from neighborly.infrastructure.notifications import (
    NotificationPublisher,
    RefreshBus,
    notification_publisher,
    refresh_bus,
)


def get_current_user_id(x_user_id: str | None = Header(default=None)) -> str:
    """Return the caller identity forwarded by the gateway in ``X-User-Id``."""

    user_id = (x_user_id or "").strip()
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-User-Id header",
        )
    return user_id


def get_refresh_bus() -> RefreshBus:
    return refresh_bus


def get_notification_publisher() -> NotificationPublisher:
    return notification_publisher


def get_session_factory() -> sessionmaker:
    """Return the factory used by long-lived handlers that manage their own sessions."""

    return SessionLocal


def get_notification_dispatcher(
    db: Session = Depends(get_db),
    bus: RefreshBus = Depends(get_refresh_bus),
    publisher: NotificationPublisher = Depends(get_notification_publisher),
) -> NotificationDispatcher:
    return NotificationDispatcher(db, bus=bus, publisher=publisher)


def get_notification_state_manager(
    db: Session = Depends(get_db),
    bus: RefreshBus = Depends(get_refresh_bus),
) -> NotificationStateManager:
    return NotificationStateManager(db, bus=bus)


__all__ = [
    "get_current_user_id",
    "get_notification_dispatcher",
    "get_notification_publisher",
    "get_notification_state_manager",
    "get_refresh_bus",
    "get_session_factory",
]
