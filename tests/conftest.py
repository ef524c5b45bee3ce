"""Pytest fixtures and configuration for taskcalendar tests."""

import os

# Keep the application's module-level engine off the developer database.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from datetime import date, datetime
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient
import uuid

from taskcalendar.database.database import Base, get_db
from taskcalendar.database import models  # noqa: F401  (registers tables)
from taskcalendar.database.repository import TaskRepository
from taskcalendar.database.calendar_event_repository import CalendarEventRepository
from taskcalendar.models.calendar_event import CalendarEvent
from taskcalendar.models.constants import PLACEHOLDER_USER_ID
from taskcalendar.models.task import Task, Priority


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"

# 2025-07-07 is a Monday
MONDAY = date(2025, 7, 7)


@pytest.fixture(scope="function")
def db_session():
    """Create a database session for testing.

    Uses an in-memory SQLite database that is created fresh for each test.
    """
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    @event.listens_for(engine, "connect")
    def set_sqlite_pragmas(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def task_repository(db_session: Session):
    """Create a TaskRepository instance for testing."""
    return TaskRepository(db_session)


@pytest.fixture
def event_repository(db_session: Session):
    """Create a CalendarEventRepository instance for testing."""
    return CalendarEventRepository(db_session)


@pytest.fixture
def test_user_id():
    return PLACEHOLDER_USER_ID


@pytest.fixture
def monday():
    return MONDAY


@pytest.fixture
def sample_task_base(test_user_id):
    """Base task data for creating test tasks.

    Returns a dict with default task attributes that can be overridden.
    """
    now = datetime.utcnow()
    return {
        "id": str(uuid.uuid4()),
        "user_id": test_user_id,
        "title": "Test Task",
        "duration_min": 30,
        "priority": Priority.MEDIUM,
        "can_overlap": False,
        "color": "#4285f4",
        "description": "Test description",
        "scheduled": False,
        "created_at": now,
        "updated_at": now,
    }


@pytest.fixture
def sample_task(sample_task_base):
    """Create a sample Task object for testing."""
    return Task(**sample_task_base)


@pytest.fixture
def make_task(sample_task_base):
    """Factory for tasks with a fresh id and overrides."""
    def _make(**overrides):
        return Task(**{**sample_task_base, "id": str(uuid.uuid4()), **overrides})
    return _make


@pytest.fixture
def make_event(test_user_id):
    """Factory for calendar events with a fresh id and overrides."""
    def _make(event_date=MONDAY, start="9:00 AM", end="10:00 AM", **overrides):
        return CalendarEvent(**{
            "id": str(uuid.uuid4()),
            "user_id": test_user_id,
            "title": "Busy",
            "event_date": event_date,
            "start_minute": start,
            "end_minute": end,
            "can_overlap": False,
            **overrides,
        })
    return _make


@pytest.fixture
def test_client(db_session: Session):
    """Create a FastAPI test client with overridden database dependency."""
    from taskcalendar.api.app import app

    def override_get_db():
        try:
            yield db_session
        finally:
            pass  # Don't close the session here, let the fixture handle it

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
