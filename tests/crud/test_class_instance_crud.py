"""Tests for class instance lifecycle and registration persistence."""

from datetime import date, datetime, timedelta, timezone

import pytest
import pytest_asyncio

from gymadmin.crud.classInstanceCrud import (
    cancel_class_instance,
    end_class_instance,
    get_class_instance_by_id,
    get_class_stats,
    get_instances_by_date_range,
    register_participant,
    start_class_instance,
    unregister_participant,
)
from gymadmin.crud.classScheduleCrud import create_class_schedule, materialize_schedule_instances


@pytest_asyncio.fixture
async def instance(db):
    schedule = await create_class_schedule(
        db,
        name="Spin Class",
        class_type="spin",
        instructor_id=3,
        capacity=1,
        duration_min=45,
        start_date=date(2024, 1, 1),
        start_time="18:00",
    )
    created = await materialize_schedule_instances(db, schedule.id)
    return created[0]


async def test_waitlist_promotion_is_persisted(db, instance):
    await register_participant(db, instance.id, 1)
    outcome = await register_participant(db, instance.id, 2)
    assert outcome.ok
    assert outcome.value.waitlist == [2]

    outcome = await unregister_participant(db, instance.id, 1)

    stored = await get_class_instance_by_id(db, instance.id)
    assert outcome.ok
    assert stored.registered_participants == [2]
    assert stored.waitlist == []


async def test_duplicate_registration_returns_typed_failure(db, instance):
    await register_participant(db, instance.id, 1)

    outcome = await register_participant(db, instance.id, 1)

    assert not outcome.ok
    assert outcome.error_code == "capacity_conflict"


async def test_missing_instance_returns_none(db):
    assert await start_class_instance(db, 999) is None
    assert await register_participant(db, 999, 1) is None


async def test_full_lifecycle(db, instance):
    started_at = datetime(2024, 1, 1, 18, 0, tzinfo=timezone.utc)

    started = await start_class_instance(db, instance.id, now=started_at)
    ended = await end_class_instance(db, instance.id, now=started_at + timedelta(minutes=50))

    assert started.ok
    assert ended.ok
    assert ended.value.status == "completed"
    assert ended.value.actual_duration == 50


async def test_rejected_transition_leaves_row_unchanged(db, instance):
    await start_class_instance(db, instance.id)

    outcome = await cancel_class_instance(db, instance.id, reason="Too late")

    stored = await get_class_instance_by_id(db, instance.id)
    assert not outcome.ok
    assert outcome.error_code == "invalid_transition"
    assert stored.status == "ongoing"
    assert stored.cancellation_reason is None


async def test_cancelled_instance_refuses_registration(db, instance):
    cancelled = await cancel_class_instance(db, instance.id, reason="Instructor sick")

    outcome = await register_participant(db, instance.id, 1)

    assert cancelled.value.cancellation_reason == "Instructor sick"
    assert outcome.error_code == "invalid_transition"


async def test_date_range_and_stats(db, instance):
    await register_participant(db, instance.id, 1)
    await start_class_instance(db, instance.id)
    await end_class_instance(db, instance.id, actual_duration=45)

    in_range = await get_instances_by_date_range(db, date(2024, 1, 1), date(2024, 1, 31))
    completed = await get_instances_by_date_range(db, date(2024, 1, 1), status="completed")
    stats = await get_class_stats(db, today=date(2024, 1, 2))

    assert [i.id for i in in_range] == [instance.id]
    assert [i.id for i in completed] == [instance.id]
    assert stats["completed_instances"] == 1
    assert stats["average_attendance"] == 100
