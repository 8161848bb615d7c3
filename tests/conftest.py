"""
Pytest configuration and fixtures.
"""

from __future__ import annotations

import itertools
import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from tests.test_constants import TEST_INTERNAL_JOB_TOKEN, TEST_SECRET_KEY

# Force an in-memory SQLite database; don't inherit from .env
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["SECRET_KEY"] = TEST_SECRET_KEY
os.environ["INTERNAL_JOB_TOKEN"] = TEST_INTERNAL_JOB_TOKEN


@pytest.fixture
def client() -> TestClient:
    """FastAPI test client."""
    from turma.main import app

    return TestClient(app)


@pytest.fixture
def db() -> Session:
    """Database session on a fresh schema. Tables are dropped after each test."""
    import turma.models  # noqa: F401
    from turma.db.session import Base, SessionLocal, engine

    Base.metadata.create_all(engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)


@pytest.fixture
def client_with_db(db: Session) -> TestClient:
    """TestClient with get_db overridden to use the test db session."""
    from turma.db.session import get_db
    from turma.main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    c = TestClient(app)
    yield c
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def make_user(db: Session):
    """Factory for persisted users without a password (no bcrypt cost)."""
    from turma.models import User

    counter = itertools.count(1)

    def _make(name: str | None = None, email: str | None = None) -> User:
        n = next(counter)
        user = User(name=name or f"User {n}", email=email or f"user{n}@example.com")
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_team(db: Session):
    """Factory for a team whose creator is its admin, plus extra members by role."""
    from turma.schemas.team import TeamCreate
    from turma.services.authorization import Role, SqlMembershipStore
    from turma.services.team_service import create_team

    def _make(creator, members: dict | None = None, name: str = "Core"):
        team = create_team(db, TeamCreate(name=name), creator.id)
        store = SqlMembershipStore(db)
        for user, role in (members or {}).items():
            store.add_membership(team.id, user.id, Role(role))
        db.commit()
        return team

    return _make


@pytest.fixture
def auth_headers():
    """Build an Authorization header carrying a valid token for a user."""
    from turma.services.auth import create_access_token_for_user

    def _headers(user) -> dict:
        return {"Authorization": f"Bearer {create_access_token_for_user(user)}"}

    return _headers
