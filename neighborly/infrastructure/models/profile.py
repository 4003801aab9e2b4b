"""SQLAlchemy models mirroring the externally owned profile and group tables."""

from sqlalchemy import Column, DateTime, String

from neighborly.infrastructure.database import Base
from neighborly.utils import now_in_app_naive_datetime


class ProfileModel(Base):
    """Public display information for a member."""

    __tablename__ = "profile"

    id = Column(String(64), primary_key=True)
    display_name = Column(String(120), nullable=True)
    avatar_url = Column(String(500), nullable=True)


class GroupMemberModel(Base):
    """Membership of a user in a community group."""

    __tablename__ = "group_member"

    group_id = Column(String(64), primary_key=True)
    user_id = Column(String(64), primary_key=True)
    joined_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)


__all__ = ["ProfileModel", "GroupMemberModel"]
