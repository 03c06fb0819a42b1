"""Root conftest for all tests.

Points the application at an in-memory SQLite database and provides
factories for domain snapshots.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

from datetime import date

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import gymadmin.models  # noqa: F401  registers every table on Base.metadata
from gymadmin.db.postgresql import Base
from gymadmin.domain.entities import (
    ClassInstance,
    ClassSchedule,
    ClassStatus,
    MemberMembership,
    MembershipStatus,
    RecurrencePattern,
)


@pytest_asyncio.fixture
async def db():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest.fixture
def make_instance():
    """Factory for scheduled class instance snapshots."""

    def _make(**overrides) -> ClassInstance:
        values = {
            "id": 1,
            "schedule_id": 1,
            "name": "Morning Yoga",
            "class_type": "yoga",
            "instructor_id": 7,
            "capacity": 2,
            "duration_min": 60,
            "date": date(2024, 1, 1),
            "start_time": "09:00",
            "end_time": "10:00",
            "status": ClassStatus.SCHEDULED,
        }
        values.update(overrides)
        return ClassInstance(**values)

    return _make


@pytest.fixture
def make_schedule():
    """Factory for class schedule snapshots, recurring Mon/Wed by default."""

    def _make(**overrides) -> ClassSchedule:
        values = {
            "id": 1,
            "name": "Morning Yoga",
            "class_type": "yoga",
            "instructor_id": 7,
            "capacity": 10,
            "duration_min": 60,
            "start_date": date(2024, 1, 1),
            "start_time": "09:00",
            "recurrence": RecurrencePattern(schedule_type="recurring", days_of_week={1, 3}),
        }
        values.update(overrides)
        return ClassSchedule(**values)

    return _make


@pytest.fixture
def make_membership():
    """Factory for active membership snapshots."""

    def _make(**overrides) -> MemberMembership:
        values = {
            "id": 1,
            "member_id": 42,
            "plan_id": 3,
            "status": MembershipStatus.ACTIVE,
            "start_date": date(2024, 1, 1),
            "end_date": date(2024, 3, 1),
        }
        values.update(overrides)
        return MemberMembership(**values)

    return _make
