"""
Schedule materialization
Computes which class instances a schedule should have and builds the missing ones
"""
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Set

from gymadmin.core.conversions import add_minutes_hhmm
from gymadmin.domain.entities import ClassInstance, ClassSchedule, ClassStatus
from gymadmin.domain.errors import DuplicateOccurrence, InvalidInput
from gymadmin.domain.recurrence import DEFAULT_HORIZON_DAYS, expand


def build_instance(schedule: ClassSchedule, occurrence_date: date, start_time: str) -> ClassInstance:
    """Snapshot the schedule's current values into a new scheduled instance"""
    return ClassInstance(
        id=None,
        schedule_id=schedule.id,
        name=schedule.name,
        class_type=schedule.class_type,
        instructor_id=schedule.instructor_id,
        capacity=schedule.capacity,
        duration_min=schedule.duration_min,
        date=occurrence_date,
        start_time=start_time,
        end_time=add_minutes_hhmm(start_time, schedule.duration_min),
        status=ClassStatus.SCHEDULED,
        location=schedule.location,
        notes=schedule.notes,
    )


def existing_dates(schedule_id: Optional[int], existing: Iterable[ClassInstance]) -> Set[date]:
    """Dates already materialized for the schedule; a repeated date is a collaborator bug"""
    seen: Set[date] = set()
    for instance in existing:
        if instance.schedule_id != schedule_id:
            continue
        if instance.date in seen:
            raise DuplicateOccurrence(schedule_id, instance.date)
        seen.add(instance.date)
    return seen


def target_dates(
    schedule: ClassSchedule,
    horizon_days: int = DEFAULT_HORIZON_DAYS,
    not_before: Optional[date] = None
) -> List[date]:
    """Every date the schedule should have an instance on"""
    if schedule.capacity < 1:
        raise InvalidInput("Capacity must be at least 1")
    if schedule.duration_min < 1:
        raise InvalidInput("Duration must be at least 1 minute")
    if not schedule.is_active:
        return []

    occurrences = expand(schedule.recurrence, schedule.start_date, schedule.start_time, horizon_days)
    return [d for d, _ in occurrences if not_before is None or d >= not_before]


def materialize(
    schedule: ClassSchedule,
    existing: Iterable[ClassInstance] = (),
    horizon_days: int = DEFAULT_HORIZON_DAYS,
    not_before: Optional[date] = None
) -> List[ClassInstance]:
    """
    Return the instances to create so that the schedule's target set is covered.

    Existing instances are never touched or duplicated; re-running against a
    store that already holds them yields nothing new.
    """
    already = existing_dates(schedule.id, existing)
    return [
        build_instance(schedule, occurrence_date, schedule.start_time)
        for occurrence_date in target_dates(schedule, horizon_days, not_before)
        if occurrence_date not in already
    ]


def coverage_report(
    schedule: ClassSchedule,
    existing: Iterable[ClassInstance],
    horizon_days: int = DEFAULT_HORIZON_DAYS,
    not_before: Optional[date] = None,
    missing_limit: int = 5
) -> Dict[str, Any]:
    """Compare expected occurrences with what has been materialized"""
    existing = list(existing)
    expected = target_dates(schedule, horizon_days, not_before)
    already = existing_dates(schedule.id, existing)
    missing = [d for d in expected if d not in already]
    covered = len(expected) - len(missing)

    return {
        "schedule_id": schedule.id,
        "schedule_name": schedule.name,
        "start_time": schedule.start_time,
        "expected_instances": len(expected),
        "existing_instances": covered,
        "coverage_percentage": (covered / len(expected) * 100) if expected else 100.0,
        "has_gaps": bool(missing),
        "next_missing_dates": [d.isoformat() for d in missing[:missing_limit]],
    }


def instance_stats(instances: Iterable[ClassInstance], today: Optional[date] = None) -> Dict[str, Any]:
    """Aggregate counts over instances; attendance is measured on completed classes"""
    today = today or date.today()
    stats = {
        "total_instances": 0,
        "upcoming_instances": 0,
        "completed_instances": 0,
        "cancelled_instances": 0,
        "total_participants": 0,
        "average_attendance": 0,
        "class_type_distribution": {},
    }
    total_capacity = 0

    for instance in instances:
        stats["total_instances"] += 1
        if instance.status == ClassStatus.SCHEDULED and instance.date >= today:
            stats["upcoming_instances"] += 1
        elif instance.status == ClassStatus.CANCELLED:
            stats["cancelled_instances"] += 1
        elif instance.status == ClassStatus.COMPLETED:
            stats["completed_instances"] += 1
            stats["total_participants"] += len(instance.registered_participants)
            total_capacity += instance.capacity
            distribution = stats["class_type_distribution"]
            distribution[instance.class_type] = distribution.get(instance.class_type, 0) + 1

    if total_capacity > 0:
        stats["average_attendance"] = round(stats["total_participants"] / total_capacity * 100)
    return stats
