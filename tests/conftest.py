"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.api.app import create_app
from src.core.config import Settings
from src.db.schema import Base

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)


@pytest.fixture
def db_session_repo() -> Generator[Session, None, None]:
    """Connection to a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session_shared(db_session_repo: Session) -> Generator[Session, None, None]:
    """A second session on the same tables. Mock real setup with one session per request."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Full app on its own in-memory database. The `with` block runs the startup (create tables) and shutdown."""
    app = create_app(Settings(database_url=DATABASE_URL))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def client_without_database() -> Generator[TestClient, None, None]:
    """App started without DATABASE_URL: boards work, comment storage does not."""
    app = create_app(Settings(database_url=None))
    with TestClient(app) as test_client:
        yield test_client
