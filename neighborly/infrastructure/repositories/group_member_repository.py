"""Lookup helpers for community group membership."""

from __future__ import annotations

from sqlalchemy.orm import Session

from neighborly.infrastructure.models import GroupMemberModel


class GroupMemberRepository:
    """Resolve the members of a group."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_member_ids(self, group_id: str, *, exclude: str | None = None) -> list[str]:
        query = self.session.query(GroupMemberModel.user_id).filter(
            GroupMemberModel.group_id == group_id
        )
        if exclude is not None:
            query = query.filter(GroupMemberModel.user_id != exclude)
        query = query.order_by(GroupMemberModel.joined_at.asc(), GroupMemberModel.user_id.asc())
        return [user_id for (user_id,) in query.all()]


__all__ = ["GroupMemberRepository"]
