"""Persistence helpers for feed activity rows."""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from neighborly.domain.entities import Activity
from neighborly.infrastructure.models import ActivityModel, ProfileModel
from neighborly.utils import ensure_app_naive_datetime, ensure_app_timezone


class ActivityRepository:
    """Read and write persisted activities.

    Reads return raw rows (plain dictionaries with the actor profile nested
    under ``profiles``) so they go through the same normalization as rows
    coming from any other domain source.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_recent_rows(
        self,
        *,
        neighborhood_ids: list[str] | None = None,
        limit: int | None = 20,
        public_only: bool = False,
    ) -> list[dict[str, Any]]:
        query = self.session.query(ActivityModel, ProfileModel).outerjoin(
            ProfileModel, ProfileModel.id == ActivityModel.actor_id
        )
        if neighborhood_ids is not None:
            if not neighborhood_ids:
                return []
            query = query.filter(ActivityModel.neighborhood_id.in_(neighborhood_ids))
        if public_only:
            query = query.filter(ActivityModel.is_public.is_(True))
        query = query.order_by(ActivityModel.created_at.desc(), ActivityModel.id.desc())
        if limit is not None:
            query = query.limit(limit)
        return [self._to_row(model, profile) for model, profile in query.all()]

    def get_row(self, activity_id: str) -> dict[str, Any] | None:
        result = (
            self.session.query(ActivityModel, ProfileModel)
            .outerjoin(ProfileModel, ProfileModel.id == ActivityModel.actor_id)
            .filter(ActivityModel.id == activity_id)
            .first()
        )
        if result is None:
            return None
        model, profile = result
        return self._to_row(model, profile)

    def save(self, activity: Activity) -> Activity:
        """Insert ``activity`` or overwrite the row with the same id."""

        model = ActivityModel(
            id=activity.id,
            actor_id=activity.actor_id,
            activity_type=activity.activity_type,
            content_id=activity.content_id,
            content_type=activity.content_type,
            title=activity.title,
            neighborhood_id=activity.neighborhood_id,
            metadata_=(
                activity.metadata.model_dump(mode="json", exclude_none=True)
                if activity.metadata is not None
                else None
            ),
            is_public=activity.is_public,
            created_at=ensure_app_naive_datetime(activity.created_at),
        )
        self.session.merge(model)
        self.session.commit()
        return activity

    def mark_content_deleted(self, content_id: str) -> list[str]:
        """Flag every activity referencing ``content_id`` as removed.

        Returns the identifiers of the activities that changed.
        """

        models = (
            self.session.query(ActivityModel)
            .filter(ActivityModel.content_id == content_id)
            .all()
        )
        changed: list[str] = []
        for model in models:
            metadata = dict(model.metadata_ or {})
            if metadata.get("deleted") is True:
                continue
            metadata["deleted"] = True
            metadata.setdefault("original_title", model.title)
            model.metadata_ = metadata
            self.session.add(model)
            changed.append(model.id)
        if changed:
            self.session.commit()
        return changed

    @staticmethod
    def _to_row(model: ActivityModel, profile: ProfileModel | None) -> dict[str, Any]:
        return {
            "id": model.id,
            "actor_id": model.actor_id,
            "activity_type": model.activity_type,
            "content_id": model.content_id,
            "content_type": model.content_type,
            "title": model.title,
            "created_at": ensure_app_timezone(model.created_at),
            "neighborhood_id": model.neighborhood_id,
            "metadata": model.metadata_,
            "is_public": bool(model.is_public),
            "profiles": (
                {"display_name": profile.display_name, "avatar_url": profile.avatar_url}
                if profile is not None
                else None
            ),
        }


__all__ = ["ActivityRepository"]
