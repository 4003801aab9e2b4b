"""Create per-recipient notifications from templates."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from neighborly.domain.entities import Notification, RefreshEventType
from neighborly.infrastructure.notifications import (
    NotificationPublisher,
    RefreshBus,
    notification_publisher,
    refresh_bus,
)
from neighborly.infrastructure.repositories import (
    DuplicateNotificationError,
    GroupMemberRepository,
    NotificationRepository,
)
from neighborly.utils import now_in_app_timezone

from .templates import process_template

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Resolve templates and persist the resulting notifications.

    Expected failures (unknown template, rejected write) are logged and
    reported as ``None``; they never propagate to the caller, so the user
    action that triggered the notification still succeeds.
    """

    def __init__(
        self,
        session: Session,
        *,
        bus: RefreshBus = refresh_bus,
        publisher: NotificationPublisher | None = notification_publisher,
        notifications: NotificationRepository | None = None,
        members: GroupMemberRepository | None = None,
    ) -> None:
        self._bus = bus
        self._publisher = publisher
        self._notifications = notifications or NotificationRepository(session)
        self._members = members or GroupMemberRepository(session)

    def create_notification(
        self,
        template_id: str,
        recipient_id: str,
        *,
        content_id: str,
        variables: Mapping[str, str | None],
        actor_id: str | None = None,
        metadata: Mapping[str, Any] | None = None,
    ) -> int | None:
        """Create a notification for ``recipient_id`` using ``template_id``.

        Returns the identifier of the notification, the identifier of the
        existing one when the same event was already notified, or ``None`` when
        nothing could be written.
        """

        processed = process_template(template_id, variables)
        if processed is None:
            logger.error("Template processing failed for: %s", template_id)
            return None

        template = processed.template
        now = now_in_app_timezone()
        notification = Notification(
            id=None,
            user_id=recipient_id,
            actor_id=actor_id,
            title=processed.title,
            content_type=template.content_type,
            content_id=content_id,
            notification_type=template.notification_type,
            action_type=template.action_type,
            action_label=template.action_label,
            relevance_score=template.relevance_score,
            context={
                "templateId": template_id,
                "variables": dict(variables),
                **(metadata or {}),
            },
            created_at=now,
            updated_at=now,
        )

        try:
            saved = self._notifications.create(notification)
        except DuplicateNotificationError as exc:
            logger.info(
                "Notification already exists for template=%s recipient=%s content=%s",
                template_id,
                recipient_id,
                content_id,
            )
            return exc.existing_id
        except SQLAlchemyError:
            logger.exception(
                "Error creating templated notification (template=%s recipient=%s content=%s)",
                template_id,
                recipient_id,
                content_id,
            )
            return None

        logger.debug(
            "Templated notification %s created for %s: %s",
            saved.id,
            recipient_id,
            saved.title,
        )
        self._bus.emit(
            RefreshEventType.NOTIFICATIONS,
            user_id=recipient_id,
            notification_id=saved.id,
        )
        if self._publisher is not None:
            self._publisher.dispatch(saved)
        return saved.id

    def notify_group_members(
        self,
        group_id: str,
        *,
        actor_id: str,
        template_id: str,
        content_id: str,
        variables: Mapping[str, str | None],
        metadata: Mapping[str, Any] | None = None,
    ) -> list[int]:
        """Notify every member of ``group_id`` except ``actor_id``.

        Each recipient is written independently; a failed write is logged and
        the remaining members are still notified. Returns the created ids.
        """

        try:
            member_ids = self._members.list_member_ids(group_id, exclude=actor_id)
        except SQLAlchemyError:
            logger.exception("Error fetching members of group %s", group_id)
            return []

        if not member_ids:
            logger.debug("No group members to notify for group %s", group_id)
            return []

        group_metadata = {"groupId": group_id, **(metadata or {})}
        created: list[int] = []
        for member_id in member_ids:
            notification_id = self.create_notification(
                template_id,
                member_id,
                content_id=content_id,
                variables=variables,
                actor_id=actor_id,
                metadata=group_metadata,
            )
            if notification_id is not None:
                created.append(notification_id)

        logger.info(
            "Created %d of %d %s notifications for group %s",
            len(created),
            len(member_ids),
            template_id,
            group_id,
        )
        return created


__all__ = ["NotificationDispatcher"]
