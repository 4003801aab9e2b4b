"""Shared fixtures: an isolated in-memory database and refresh bus per test."""

from __future__ import annotations

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import datetime  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy import Engine, create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from neighborly.domain.entities import RefreshEvent, RefreshEventType  # noqa: E402
from neighborly.infrastructure import models  # noqa: E402,F401
from neighborly.infrastructure.database import Base  # noqa: E402
from neighborly.infrastructure.models import GroupMemberModel, ProfileModel  # noqa: E402
from neighborly.infrastructure.notifications import RefreshBus  # noqa: E402

GROUP_ID = "garden-club"


@pytest.fixture
def db_engine() -> Engine:
    """In-memory SQLite shared by every thread through ``StaticPool``."""

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine: Engine) -> sessionmaker:
    return sessionmaker(bind=db_engine, autocommit=False, autoflush=False)


@pytest.fixture
def db_session(session_factory: sessionmaker) -> Session:
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def bus() -> RefreshBus:
    return RefreshBus()


@pytest.fixture
def recorded_events(bus: RefreshBus) -> list[RefreshEvent]:
    """Every event emitted on ``bus`` during the test, in order."""

    events: list[RefreshEvent] = []
    for event_type in RefreshEventType:
        bus.on(event_type, events.append)
    return events


@pytest.fixture
def seeded_group(db_session: Session) -> str:
    """Garden club with alice, bob, carol and dave, joined in that order."""

    members = [
        ("alice", "Alice Walker"),
        ("bob", "Bob Stone"),
        ("carol", "Carol Diaz"),
        ("dave", "Dave Kim"),
    ]
    for position, (user_id, display_name) in enumerate(members):
        db_session.add(ProfileModel(id=user_id, display_name=display_name))
        db_session.add(
            GroupMemberModel(
                group_id=GROUP_ID,
                user_id=user_id,
                joined_at=datetime(2024, 5, 1, 9, position),
            )
        )
    db_session.commit()
    return GROUP_ID
