"""Shared fixtures: an in-memory database per test and an API client bound to it"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

from typing import Callable, Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import trackmanager.models  # noqa: F401
from trackmanager.database import Base, get_db
from trackmanager.main import app
from trackmanager.models.track import Track
from trackmanager.services.fields import TrackFields
from trackmanager.services.track_service import TrackService

STROBE = {
    "title": "Strobe",
    "artist": "deadmau5",
    "bpm": 128,
    "key": "8A",
    "genre": "Progressive House",
    "duration": "10:33",
}


@pytest.fixture
def engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory: sessionmaker) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory: sessionmaker) -> Iterator[TestClient]:
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_track(db: Session) -> Callable[..., Track]:
    """Create a track through the service, overriding any of the Strobe fields"""
    def factory(**overrides) -> Track:
        values = {**STROBE, **overrides}
        return TrackService(db).create_track(TrackFields(**values))

    return factory
