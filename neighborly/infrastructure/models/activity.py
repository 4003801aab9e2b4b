"""SQLAlchemy model for persisted activity rows."""

from sqlalchemy import JSON, Boolean, Column, DateTime, String

from neighborly.infrastructure.database import Base
from neighborly.utils import now_in_app_naive_datetime


class ActivityModel(Base):
    """Database representation of a normalized activity."""

    __tablename__ = "activity"

    id = Column(String(64), primary_key=True)
    actor_id = Column(String(64), nullable=False, index=True)
    activity_type = Column(String(50), nullable=False)
    content_id = Column(String(64), nullable=False, index=True)
    content_type = Column(String(50), nullable=False)
    title = Column(String(255), nullable=False)
    neighborhood_id = Column(String(64), nullable=True, index=True)
    # ``metadata`` is reserved by SQLAlchemy's declarative API
    metadata_ = Column("metadata", JSON, nullable=True)
    is_public = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)


__all__ = ["ActivityModel"]
