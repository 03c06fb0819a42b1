"""Tests for the schedule materializer service."""

from datetime import date

from gymadmin.crud.classScheduleCrud import create_class_schedule, get_instances_by_schedule
from gymadmin.services.schedule_materializer import ScheduleMaterializerService


async def _create(db, name, **overrides):
    values = {
        "name": name,
        "class_type": "yoga",
        "instructor_id": 7,
        "capacity": 10,
        "duration_min": 60,
        "start_date": date(2024, 1, 1),
        "start_time": "09:00",
        "schedule_type": "recurring",
        "days_of_week": [1, 3],
    }
    values.update(overrides)
    return await create_class_schedule(db, **values)


async def test_materialize_schedule_reports_created_instances(db):
    schedule = await _create(db, "Morning Yoga")
    service = ScheduleMaterializerService(db, horizon_days=14)

    stats = await service.materialize_schedule(schedule.id)
    again = await service.materialize_schedule(schedule.id)

    assert stats["instances_created"] == 5
    assert stats["instances"][0] == {
        "id": stats["instances"][0]["id"],
        "date": "2024-01-01",
        "start_time": "09:00",
        "capacity": 10,
    }
    assert again["instances_created"] == 0


async def test_maintenance_covers_window_from_today(db):
    yoga = await _create(db, "Morning Yoga")
    await _create(db, "Boxing Basics", days_of_week=[5])
    service = ScheduleMaterializerService(db, horizon_days=7)

    stats = await service.maintain_schedule_window(today=date(2024, 2, 5))

    assert stats["schedules_processed"] == 2
    assert stats["failed_schedules"] == []
    dates = [i.date for i in await get_instances_by_schedule(db, yoga.id)]
    # nothing before today is back-filled
    assert dates == [date(2024, 2, 5), date(2024, 2, 7), date(2024, 2, 12)]
    assert stats["instances_created"] == 4
    assert stats["date_range"] == {"start": "2024-02-05", "end": "2024-02-12"}


async def test_coverage_report_summary(db):
    schedule = await _create(db, "Morning Yoga")
    service = ScheduleMaterializerService(db, horizon_days=7)
    await service.maintain_schedule_window(today=date(2024, 2, 5))

    report = await service.get_coverage_report(days_ahead=14, today=date(2024, 2, 5))

    coverage = report["schedules"][0]
    assert coverage["schedule_id"] == schedule.id
    assert coverage["expected_instances"] == 5
    assert coverage["existing_instances"] == 3
    assert report["summary"]["schedules_with_gaps"] == 1
    assert report["summary"]["overall_coverage_percentage"] == 60.0
    assert report["analysis_period"]["days"] == 14


async def test_maintenance_of_long_running_schedule_stays_within_horizon_cap(db):
    await _create(db, "Legacy Spin", start_date=date(2010, 1, 4))
    service = ScheduleMaterializerService(db, horizon_days=7)

    stats = await service.maintain_schedule_window(today=date(2024, 2, 5))
    report = await service.get_coverage_report(days_ahead=7, today=date(2024, 2, 5))

    assert stats["failed_schedules"] == []
    assert stats["schedules_processed"] == 1
    assert report["schedules"][0]["existing_instances"] == 0
