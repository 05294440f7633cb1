# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import datetime, timedelta
from itertools import count
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from futuremedia.core.caller import Caller
from futuremedia.core.security import create_access_token, hash_password
from futuremedia.db.session import Base, enable_sqlite_foreign_keys
from futuremedia.db.session import get_db as app_get_session
from futuremedia.db.time import utcnow
from futuremedia.main import app as fastapi_app
from futuremedia.models import Post, Reel, Story, User

TEST_DB_URL = "sqlite://"
TEST_PASSWORD = "correct-horse-battery"

_USER_COUNTER = count(1)
# Base for explicit timestamps so ordering never depends on clock resolution.
_EPOCH = datetime(2025, 1, 1, 12, 0, 0)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()

        # Services commit, so wipe every table to give each test a clean database.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


def at(minutes: int) -> datetime:
    """Deterministic timestamp `minutes` after the test epoch."""
    return _EPOCH + timedelta(minutes=minutes)


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Factory persisting users with unique email and username."""

    def _make(name: str | None = None, **fields: Any) -> User:
        n = next(_USER_COUNTER)
        user = User(
            name=name or f"User {n}",
            email=fields.pop("email", f"user{n}@example.com"),
            username=fields.pop("username", f"user_{n}"),
            hashed_password=hash_password(fields.pop("password", TEST_PASSWORD)),
            **fields,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make


@pytest.fixture()
def test_user(make_user: Callable[..., User]) -> User:
    """Primary persisted user."""
    return make_user("Test User")


@pytest.fixture()
def other_user(make_user: Callable[..., User]) -> User:
    """Secondary persisted user."""
    return make_user("Other User")


@pytest.fixture()
def auth_token(test_user: User) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    return auth_headers(test_user)


@pytest.fixture()
def other_auth_token(other_user: User) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    return auth_headers(other_user)


@pytest.fixture()
def caller(test_user: User) -> Caller:
    return Caller(user_id=test_user.id)


@pytest.fixture()
def other_caller(other_user: User) -> Caller:
    return Caller(user_id=other_user.id)


@pytest.fixture()
def make_post(db_session: Session) -> Callable[..., Post]:
    def _make(user: User, minute: int = 0, **fields: Any) -> Post:
        post = Post(
            user_id=user.id,
            caption=fields.pop("caption", f"post at {minute}"),
            content_type=fields.pop("content_type", "text"),
            created_at=at(minute),
            updated_at=at(minute),
            **fields,
        )
        db_session.add(post)
        db_session.commit()
        db_session.refresh(post)
        return post

    return _make


@pytest.fixture()
def test_post(make_post: Callable[..., Post], other_user: User) -> Post:
    """A public post owned by `other_user`, so `test_user` actions notify."""
    return make_post(other_user, caption="Test post content")


@pytest.fixture()
def make_story(db_session: Session) -> Callable[..., Story]:
    def _make(user: User, minutes_ago: int = 5, *, expired: bool = False) -> Story:
        created = utcnow() - timedelta(minutes=minutes_ago)
        expires = utcnow() - timedelta(minutes=1) if expired else created + timedelta(hours=24)
        story = Story(
            user_id=user.id,
            media_url=f"https://cdn.example.com/{user.username}/{minutes_ago}.jpg",
            media_type="image",
            created_at=created,
            expires_at=expires,
        )
        db_session.add(story)
        db_session.commit()
        db_session.refresh(story)
        return story

    return _make


@pytest.fixture()
def make_reel(db_session: Session) -> Callable[..., Reel]:
    def _make(user: User, minute: int = 0, **fields: Any) -> Reel:
        reel = Reel(
            user_id=user.id,
            video_url=fields.pop("video_url", f"https://cdn.example.com/reel-{minute}.mp4"),
            created_at=at(minute),
            **fields,
        )
        db_session.add(reel)
        db_session.commit()
        db_session.refresh(reel)
        return reel

    return _make
