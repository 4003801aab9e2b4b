"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from neighborly.domain.entities import Notification
from neighborly.infrastructure.models import NotificationModel
from neighborly.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)


class DuplicateNotificationError(Exception):
    """Raised when a notification already exists for the same recipient and event."""

    def __init__(self, existing_id: int | None) -> None:
        super().__init__(f"Notification already exists (id={existing_id})")
        self.existing_id = existing_id


class NotificationRepository:
    """Provide CRUD operations for :class:`Notification` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, notification_id: int) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model is not None else None

    def list_for_user(
        self,
        user_id: str,
        *,
        archived: bool = False,
        limit: int | None = 50,
    ) -> Sequence[Notification]:
        query = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.user_id == user_id)
            .filter(NotificationModel.is_archived.is_(archived))
            .order_by(
                NotificationModel.created_at.desc(), NotificationModel.id.desc()
            )
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def list_unread_for_user(
        self, user_id: str, *, limit: int | None = 50
    ) -> Sequence[Notification]:
        query = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.user_id == user_id)
            .filter(NotificationModel.is_read.is_(False))
            .filter(NotificationModel.is_archived.is_(False))
            .order_by(
                NotificationModel.created_at.desc(), NotificationModel.id.desc()
            )
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def count_unread(self, user_id: str) -> int:
        count = (
            self.session.query(func.count(NotificationModel.id))
            .filter(NotificationModel.user_id == user_id)
            .filter(NotificationModel.is_read.is_(False))
            .filter(NotificationModel.is_archived.is_(False))
            .scalar()
        )
        return int(count or 0)

    def create(self, notification: Notification) -> Notification:
        """Persist ``notification``.

        Raises :class:`DuplicateNotificationError` when a row already exists for
        the same recipient, actor, content, notification type and template.
        """

        model = NotificationModel()
        self._apply_entity_to_model(model, notification)
        self.session.add(model)
        try:
            self._commit()
        except IntegrityError as exc:
            existing = self._find_duplicate(notification)
            raise DuplicateNotificationError(
                existing.id if existing is not None else None
            ) from exc
        self.session.refresh(model)
        return self._to_entity(model)

    def mark_as_read(self, notification_id: int) -> Notification | None:
        """Flag a notification as read. Returns ``None`` when it does not exist."""

        model = self.session.get(NotificationModel, notification_id)
        if model is None:
            return None
        if not model.is_read:
            model.is_read = True
            self.session.add(model)
            self._commit()
        return self._to_entity(model)

    def mark_all_as_read(self, user_id: str, *, archived: bool) -> int:
        """Flag every unread notification of ``user_id`` in one archive partition."""

        updated = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.user_id == user_id,
                NotificationModel.is_archived.is_(archived),
                NotificationModel.is_read.is_(False),
            )
            .update(
                {
                    NotificationModel.is_read: True,
                    NotificationModel.updated_at: ensure_app_naive_datetime(
                        now_in_app_timezone()
                    ),
                },
                synchronize_session=False,
            )
        )
        self._commit()
        return int(updated or 0)

    def archive(self, notification_id: int) -> Notification | None:
        """Flag a notification as archived. Returns ``None`` when it does not exist."""

        model = self.session.get(NotificationModel, notification_id)
        if model is None:
            return None
        if not model.is_archived:
            model.is_archived = True
            self.session.add(model)
            self._commit()
        return self._to_entity(model)

    def _commit(self) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise

    def _find_duplicate(self, notification: Notification) -> Notification | None:
        query = self.session.query(NotificationModel).filter(
            NotificationModel.user_id == notification.user_id,
            NotificationModel.content_id == notification.content_id,
            NotificationModel.notification_type == notification.notification_type,
        )
        if notification.actor_id is None:
            query = query.filter(NotificationModel.actor_id.is_(None))
        else:
            query = query.filter(NotificationModel.actor_id == notification.actor_id)
        if notification.template_id is None:
            query = query.filter(NotificationModel.template_id.is_(None))
        else:
            query = query.filter(NotificationModel.template_id == notification.template_id)
        model = query.order_by(NotificationModel.id.asc()).first()
        return self._to_entity(model) if model is not None else None

    @staticmethod
    def _apply_entity_to_model(
        model: NotificationModel, notification: Notification
    ) -> None:
        created_at = ensure_app_naive_datetime(
            notification.created_at
        ) or ensure_app_naive_datetime(now_in_app_timezone())
        model.created_at = created_at
        model.updated_at = ensure_app_naive_datetime(notification.updated_at) or created_at
        model.user_id = notification.user_id
        model.actor_id = notification.actor_id
        model.title = notification.title
        model.content_type = notification.content_type
        model.content_id = notification.content_id
        model.notification_type = notification.notification_type
        model.action_type = notification.action_type
        model.action_label = notification.action_label
        model.relevance_score = notification.relevance_score
        model.template_id = notification.template_id
        model.is_read = notification.is_read
        model.is_archived = notification.is_archived
        model.context = notification.context or {}

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            user_id=model.user_id,
            actor_id=model.actor_id,
            title=model.title,
            content_type=model.content_type,
            content_id=model.content_id,
            notification_type=model.notification_type,
            action_type=model.action_type,
            action_label=model.action_label,
            relevance_score=model.relevance_score,
            is_read=bool(model.is_read),
            is_archived=bool(model.is_archived),
            context=model.context or {},
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
        )


__all__ = ["DuplicateNotificationError", "NotificationRepository"]
