"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Integer,
    SmallInteger,
    String,
    UniqueConstraint,
)

from neighborly.infrastructure.database import Base
from neighborly.utils import now_in_app_naive_datetime


class NotificationModel(Base):
    """Database representation for per-recipient notifications."""

    __tablename__ = "notification"
    __table_args__ = (
        UniqueConstraint(
            "user_id",
            "actor_id",
            "content_id",
            "notification_type",
            "template_id",
            name="uq_notification_recipient_event",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(64), nullable=False, index=True)
    actor_id = Column(String(64), nullable=True)
    title = Column(String(255), nullable=False)
    content_type = Column(String(50), nullable=False)
    content_id = Column(String(64), nullable=False)
    notification_type = Column(String(50), nullable=False)
    action_type = Column(String(50), nullable=False)
    action_label = Column(String(80), nullable=False)
    relevance_score = Column(SmallInteger, nullable=False)
    template_id = Column(String(64), nullable=True)
    is_read = Column(Boolean, nullable=False, default=False)
    is_archived = Column(Boolean, nullable=False, default=False, index=True)
    context = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    updated_at = Column(
        DateTime(),
        nullable=False,
        default=now_in_app_naive_datetime,
        onupdate=now_in_app_naive_datetime,
    )


__all__ = ["NotificationModel"]
