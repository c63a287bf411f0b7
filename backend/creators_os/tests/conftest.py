"""
Shared pytest fixtures.

All engine tests run against a frozen "now": Wednesday 2026-10-21 12:00
in Asia/Jerusalem. The current week therefore starts Monday 2026-10-19.
"""

from datetime import datetime, time, timedelta
from zoneinfo import ZoneInfo

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import creators_os.models  # noqa: F401  registers tables on Base.metadata
from creators_os.api.dependencies.config import get_now
from creators_os.database.session import get_db_session
from creators_os.db_base import Base
from creators_os.insights.config import InsightConfig
from creators_os.insights.models import (
    CalendarEvent,
    CompanyRef,
    CreatorSnapshot,
    Task,
    TaskStatus,
)
from creators_os.main import create_app


TZ = ZoneInfo("Asia/Jerusalem")
FROZEN_NOW = datetime(2026, 10, 21, 12, 0, tzinfo=TZ)


# ============================================================================
# CLOCK AND CONFIG
# ============================================================================

@pytest.fixture
def now():
    """Frozen reference time."""
    return FROZEN_NOW


@pytest.fixture
def today(now):
    return now.date()


@pytest.fixture
def config():
    """Default engine configuration."""
    return InsightConfig()


@pytest.fixture
def at():
    """Build an aware datetime `days` days from today (negative = past)."""
    def _at(days: int, hour: int = 10) -> datetime:
        day = FROZEN_NOW.date() + timedelta(days=days)
        return datetime.combine(day, time(hour), tzinfo=TZ)
    return _at


# ============================================================================
# SNAPSHOT FACTORIES
# ============================================================================

@pytest.fixture
def make_task():
    """Task factory with sequential ids."""
    counter = {"n": 0}

    def _make(
        status: TaskStatus = TaskStatus.TODO,
        due_date=None,
        archived: bool = False,
        company_id=None,
        created_at=None,
        title=None,
    ) -> Task:
        counter["n"] += 1
        return Task(
            id=f"task-{counter['n']}",
            title=title or f"Task {counter['n']}",
            status=status,
            due_date=due_date,
            archived=archived,
            company_id=company_id,
            created_at=created_at,
        )
    return _make


@pytest.fixture
def make_event():
    """Event factory with sequential ids."""
    counter = {"n": 0}

    def _make(start, company_id=None, created_at=None) -> CalendarEvent:
        counter["n"] += 1
        return CalendarEvent(
            id=f"event-{counter['n']}",
            start=start,
            end=start + timedelta(hours=1) if isinstance(start, datetime) else None,
            created_at=created_at,
            company_id=company_id,
            title=f"Event {counter['n']}",
        )
    return _make


@pytest.fixture
def companies():
    return [
        CompanyRef(id="acme", name="Acme"),
        CompanyRef(id="globex", name="Globex"),
    ]


@pytest.fixture
def at_risk_creator(make_task, at):
    """Managed creator whose every task is overdue and none done."""
    return CreatorSnapshot(
        id="creator-1",
        name="Dana",
        tasks=[make_task(due_date=at(-5)) for _ in range(5)],
    )


# ============================================================================
# DATABASE AND API
# ============================================================================

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
    """In-memory SQLite session, closed after the test."""
    session = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def app(db_session, config):
    app = create_app(insight_config=config, init_database=False)

    def _session_override():
        yield db_session

    app.dependency_overrides[get_db_session] = _session_override
    app.dependency_overrides[get_now] = lambda: FROZEN_NOW
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def creator_headers():
    return {"X-User-Id": "user-123"}


@pytest.fixture
def agency_headers():
    return {"X-User-Id": "agency-1", "X-Account-Type": "agency"}