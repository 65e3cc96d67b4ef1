"""Pytest fixtures for users_api tests."""

import os

# Settings are read when users_api.main is imported; give it a database
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

from datetime import datetime, timezone
from typing import Callable, Generator
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from users_api.database import Base, create_db_engine, create_session_factory, get_db
from users_api.main import app
from users_api.models.user import User


@pytest.fixture(scope="function")
def test_db_engine():
    """Create a database engine for testing.

    Uses TEST_DATABASE_URL when set (e.g. a PostgreSQL instance), otherwise a
    private in-memory SQLite database.
    """
    test_db_url = os.getenv("TEST_DATABASE_URL", "sqlite+pysqlite:///:memory:")

    engine = create_db_engine(test_db_url, pool_size=5, max_overflow=10)

    # Create all tables
    Base.metadata.create_all(bind=engine)

    yield engine

    # Cleanup: drop all tables
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def test_db_session(test_db_engine) -> Generator[Session, None, None]:
    """Create a database session for testing with automatic rollback."""
    TestingSessionLocal = create_session_factory(test_db_engine)

    session = TestingSessionLocal()

    try:
        yield session
    finally:
        # Rollback any uncommitted changes to clean up test data
        session.rollback()
        session.close()


@pytest.fixture(scope="function")
def test_client(test_db_session: Session) -> Generator[TestClient, None, None]:
    """Create a test client with database dependency override."""

    def override_get_db() -> Generator[Session, None, None]:
        """Override get_db dependency to use test database session."""
        yield test_db_session

    app.dependency_overrides[get_db] = override_get_db

    client = TestClient(app)

    try:
        yield client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def create_user(test_db_session: Session) -> Callable:
    """Factory function to create users directly in the database.

    Example:
        ```python
        def test_example(create_user):
            user = create_user(email="test@example.com", name="Test User")
            assert user.email == "test@example.com"
        ```
    """

    def _create_user(email: str, name: str, bio: str | None = None) -> User:
        """Insert a user row and return it."""
        now = datetime.now(timezone.utc)
        user = User(
            id=uuid4(),
            email=email,
            name=name,
            bio=bio,
            created_at=now,
            updated_at=now,
        )
        test_db_session.add(user)
        test_db_session.commit()
        test_db_session.refresh(user)
        return user

    return _create_user
