"""Shared fixtures for the API and service tests."""
from __future__ import annotations

import os
from typing import Callable, Iterator

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///./test_mindcanvus.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("DISABLE_PUBLISHER", "true")

from mindcanvus.database import Base, SessionLocal, engine  # noqa: E402
from mindcanvus.main import app  # noqa: E402
from mindcanvus.models import User, user_friends  # noqa: E402
from mindcanvus.services import get_current_user, get_optional_user  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def _create_schema() -> Iterator[None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def _clean_database() -> Iterator[None]:
    with SessionLocal() as session:
        for table in reversed(Base.metadata.sorted_tables):
            session.execute(table.delete())
        session.commit()
    yield


@pytest.fixture
def user_factory() -> Callable[..., User]:
    def _factory(username: str, **fields) -> User:
        with SessionLocal() as session:
            user = User(
                username=username,
                email=fields.pop("email", f"{username}@example.com"),
                hashed_password="test-hash",
                **fields,
            )
            session.add(user)
            session.commit()
            session.refresh(user)
            return user
    return _factory


@pytest.fixture
def befriend() -> Callable[..., None]:
    """Write friend edges directly; ``mutual=False`` writes only ``a -> b``."""

    def _befriend(a: User, b: User, *, mutual: bool = True) -> None:
        rows = [{"user_id": a.id, "friend_id": b.id}]
        if mutual:
            rows.append({"user_id": b.id, "friend_id": a.id})
        with SessionLocal() as session:
            session.execute(user_friends.insert(), rows)
            session.commit()
    return _befriend


@pytest.fixture
def authed_client() -> Iterator[Callable[[User], TestClient]]:
    with TestClient(app) as client:
        def _with_user(user: User) -> TestClient:
            def _override() -> User:
                return user
            app.dependency_overrides[get_current_user] = _override
            app.dependency_overrides[get_optional_user] = _override
            return client
        yield _with_user
    app.dependency_overrides.clear()


@pytest.fixture
def anon_client() -> Iterator[TestClient]:
    app.dependency_overrides.clear()
    with TestClient(app) as client:
        yield client
