"""Shared test fixtures."""
import os

# Set test environment variables BEFORE any app imports
os.environ.setdefault("SQLALCHEMY_DATABASE_URI", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-testing-only")
os.environ.setdefault("CACHE_ENABLED", "false")
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "4")

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_clock, get_db, get_meta_cache
from app.core.security import create_access_token
from app.db.base import Base
from app.main import app
from app.models.user import User
from app.services.lifecycle import SecretLifecycle
from app.services.passwords import password_guard

OWNER_A = "owner-a-111"
OWNER_B = "owner-b-222"

START = datetime(2026, 1, 15, 12, 0, 0)


class FrozenClock:
    """Clock that only moves when a test moves it."""

    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    session = sessionmaker(bind=db_engine, autoflush=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def other_session(db_engine):
    """A second session on the same database, standing in for a concurrent request."""
    session = sessionmaker(bind=db_engine, autoflush=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def lifecycle(db_session, clock):
    return SecretLifecycle(db_session, clock=clock)


@pytest.fixture
def owners(db_session):
    for owner_id in (OWNER_A, OWNER_B):
        db_session.add(
            User(
                id=owner_id,
                email=f"{owner_id}@example.com",
                password_hash=password_guard.hash("owner-password"),
            )
        )
    db_session.commit()
    return OWNER_A, OWNER_B


@pytest.fixture
def client(db_session, clock, owners):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_meta_cache] = lambda: None
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def auth_headers(owner_id: str) -> dict:
    return {"Authorization": f"Bearer {create_access_token(owner_id)}"}
