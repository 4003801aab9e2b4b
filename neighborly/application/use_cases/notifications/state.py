"""Read access and read/archive state changes for notifications."""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from neighborly.domain.entities import Notification, RefreshEventType
from neighborly.infrastructure.notifications import RefreshBus, refresh_bus
from neighborly.infrastructure.repositories import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationStateManager:
    """Fetch notifications and flip their read/archived flags.

    Flags only ever move to ``True``; repeating an operation is harmless and
    still reports success. Every successful mutation emits a refresh event.
    Storage failures are logged and reported as ``False`` (or an empty result).
    """

    def __init__(
        self,
        session: Session,
        *,
        bus: RefreshBus = refresh_bus,
        notifications: NotificationRepository | None = None,
    ) -> None:
        self._bus = bus
        self._notifications = notifications or NotificationRepository(session)

    def fetch_notifications(
        self, recipient_id: str, show_archived: bool = False, *, limit: int | None = None
    ) -> list[Notification]:
        """Return the recipient's notifications in one archive partition, newest first.

        Every row of the partition is returned unless ``limit`` is given.
        """

        if not recipient_id:
            logger.debug("No recipient provided, returning empty notifications list")
            return []
        try:
            return list(
                self._notifications.list_for_user(
                    recipient_id, archived=show_archived, limit=limit
                )
            )
        except SQLAlchemyError:
            logger.exception("Error fetching notifications for %s", recipient_id)
            return []

    def count_unread(self, recipient_id: str) -> int:
        try:
            return self._notifications.count_unread(recipient_id)
        except SQLAlchemyError:
            logger.exception("Error counting unread notifications for %s", recipient_id)
            return 0

    def mark_read(self, notification_id: int) -> bool:
        logger.debug("Marking notification %s as read", notification_id)
        try:
            updated = self._notifications.mark_as_read(notification_id)
        except SQLAlchemyError:
            logger.exception("Error marking notification %s as read", notification_id)
            return False
        if updated is None:
            logger.warning("Notification %s not found; cannot mark as read", notification_id)
            return False

        self._bus.emit(
            RefreshEventType.NOTIFICATION_READ,
            user_id=updated.user_id,
            notification_id=notification_id,
        )
        return True

    def mark_all_read(self, recipient_id: str, archived: bool = False) -> bool:
        """Mark every unread notification of one archive partition as read."""

        if not recipient_id:
            logger.error("No recipient provided to mark_all_read")
            return False
        try:
            updated = self._notifications.mark_all_as_read(recipient_id, archived=archived)
        except SQLAlchemyError:
            logger.exception("Error marking all notifications as read for %s", recipient_id)
            return False

        logger.debug(
            "Marked %d notification(s) as read for %s (archived=%s)",
            updated,
            recipient_id,
            archived,
        )
        self._bus.emit(
            RefreshEventType.NOTIFICATIONS_ALL_READ,
            user_id=recipient_id,
            archived=archived,
        )
        return True

    def archive(self, notification_id: int) -> bool:
        logger.debug("Archiving notification %s", notification_id)
        try:
            updated = self._notifications.archive(notification_id)
        except SQLAlchemyError:
            logger.exception("Error archiving notification %s", notification_id)
            return False
        if updated is None:
            logger.warning("Notification %s not found; cannot archive", notification_id)
            return False

        self._bus.emit(
            RefreshEventType.NOTIFICATION_ARCHIVED,
            user_id=updated.user_id,
            notification_id=notification_id,
        )
        return True


__all__ = ["NotificationStateManager"]
