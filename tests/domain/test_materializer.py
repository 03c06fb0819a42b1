"""Tests for schedule materialization."""

from datetime import date

import pytest

from gymadmin.domain import materializer
from gymadmin.domain.entities import ClassStatus, RecurrencePattern
from gymadmin.domain.errors import DuplicateOccurrence, InvalidInput
from gymadmin.domain.outcome import attempt


def test_materialize_is_idempotent(make_schedule):
    schedule = make_schedule()

    first = materializer.materialize(schedule, horizon_days=14)
    second = materializer.materialize(schedule, first, horizon_days=14)

    assert [i.date for i in first] == [
        date(2024, 1, 1),
        date(2024, 1, 3),
        date(2024, 1, 8),
        date(2024, 1, 10),
        date(2024, 1, 15),
    ]
    assert second == []


def test_instances_snapshot_schedule_values(make_schedule):
    schedule = make_schedule(start_time="23:30", duration_min=60, location="Studio 2")

    instance = materializer.materialize(schedule, horizon_days=0)[0]

    assert instance.id is None
    assert instance.schedule_id == schedule.id
    assert instance.status == ClassStatus.SCHEDULED
    assert instance.end_time == "00:30"
    assert instance.capacity == schedule.capacity
    assert instance.location == "Studio 2"


def test_only_missing_dates_are_created(make_schedule):
    schedule = make_schedule()
    existing = materializer.materialize(schedule, horizon_days=14)[::2]

    created = materializer.materialize(schedule, existing, horizon_days=14)

    assert [i.date for i in created] == [date(2024, 1, 3), date(2024, 1, 10)]


def test_not_before_skips_past_occurrences(make_schedule):
    created = materializer.materialize(make_schedule(), horizon_days=14, not_before=date(2024, 1, 9))

    assert [i.date for i in created] == [date(2024, 1, 10), date(2024, 1, 15)]


def test_inactive_schedule_produces_nothing(make_schedule):
    assert materializer.materialize(make_schedule(is_active=False)) == []


def test_duplicate_existing_dates_are_reported(make_instance, make_schedule):
    duplicates = [make_instance(id=1), make_instance(id=2)]

    outcome = attempt(materializer.materialize, make_schedule(), duplicates, horizon_days=14)

    assert not outcome.ok
    assert isinstance(outcome.error, DuplicateOccurrence)
    assert outcome.error_code == "duplicate_occurrence"


@pytest.mark.parametrize("overrides", [{"capacity": 0}, {"duration_min": 0}])
def test_invalid_schedule_is_rejected(make_schedule, overrides):
    with pytest.raises(InvalidInput):
        materializer.materialize(make_schedule(**overrides))


def test_single_schedule_materializes_once(make_schedule):
    schedule = make_schedule(recurrence=RecurrencePattern(schedule_type="single"))

    assert len(materializer.materialize(schedule)) == 1


def test_coverage_report_lists_gaps(make_schedule):
    schedule = make_schedule()
    existing = materializer.materialize(schedule, horizon_days=14)[:3]

    report = materializer.coverage_report(schedule, existing, horizon_days=14)

    assert report["expected_instances"] == 5
    assert report["existing_instances"] == 3
    assert report["coverage_percentage"] == 60.0
    assert report["has_gaps"] is True
    assert report["next_missing_dates"] == ["2024-01-10", "2024-01-15"]


def test_instance_stats(make_instance):
    instances = [
        make_instance(id=1, date=date(2024, 1, 20)),
        make_instance(id=2, status=ClassStatus.CANCELLED),
        make_instance(id=3, status=ClassStatus.COMPLETED, registered_participants=(1, 2)),
        make_instance(id=4, status=ClassStatus.COMPLETED, registered_participants=(3,), class_type="hiit"),
    ]

    stats = materializer.instance_stats(instances, today=date(2024, 1, 10))

    assert stats["total_instances"] == 4
    assert stats["upcoming_instances"] == 1
    assert stats["cancelled_instances"] == 1
    assert stats["completed_instances"] == 2
    assert stats["total_participants"] == 3
    assert stats["average_attendance"] == 75
    assert stats["class_type_distribution"] == {"yoga": 1, "hiit": 1}
