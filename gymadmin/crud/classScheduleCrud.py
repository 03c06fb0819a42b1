"""
CRUD operations for ClassSchedule management
Implements schedule creation/editing and materialization of class instances
"""
import logging
from datetime import datetime, date, timezone
from typing import List, Optional, Dict, Any
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from gymadmin.core.conversions import parse_hhmm
from gymadmin.domain import materializer
from gymadmin.domain.entities import ClassInstance, ClassSchedule, RecurrencePattern
from gymadmin.domain.errors import InvalidInput
from gymadmin.domain.recurrence import DEFAULT_HORIZON_DAYS, validate_pattern
from gymadmin.models.classModel import ClassScheduleRecord, ClassInstanceRecord

logger = logging.getLogger(__name__)

SCHEDULE_FIELDS = (
    "name", "class_type", "instructor_id", "capacity", "duration_min",
    "start_date", "start_time", "schedule_type", "days_of_week",
    "recurrence_end_date", "max_occurrences", "location", "notes", "is_active"
)

NULLABLE_SCHEDULE_FIELDS = frozenset({"recurrence_end_date", "max_occurrences", "location", "notes"})


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive timestamps coming back from the database"""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def schedule_to_domain(record: ClassScheduleRecord) -> ClassSchedule:
    """Map ClassScheduleRecord to the ClassSchedule snapshot."""
    return ClassSchedule(
        id=record.id,
        name=record.name,
        class_type=record.class_type,
        instructor_id=record.instructor_id,
        capacity=record.capacity,
        duration_min=record.duration_min,
        start_date=record.start_date,
        start_time=record.start_time,
        recurrence=RecurrencePattern(
            schedule_type=record.schedule_type,
            days_of_week=record.days_of_week or (),
            end_date=record.recurrence_end_date,
            max_occurrences=record.max_occurrences
        ),
        location=record.location,
        notes=record.notes,
        is_active=record.is_active
    )


def instance_to_domain(record: ClassInstanceRecord) -> ClassInstance:
    """Map ClassInstanceRecord to the ClassInstance snapshot."""
    return ClassInstance(
        id=record.id,
        schedule_id=record.schedule_id,
        name=record.name,
        class_type=record.class_type,
        instructor_id=record.instructor_id,
        capacity=record.capacity,
        duration_min=record.duration_min,
        date=record.date,
        start_time=record.start_time,
        end_time=record.end_time,
        status=record.status,
        registered_participants=record.registered_participants or (),
        waitlist=record.waitlist or (),
        location=record.location,
        notes=record.notes,
        started_at=_as_utc(record.started_at),
        actual_duration=record.actual_duration,
        cancellation_reason=record.cancellation_reason
    )


def apply_instance(record: ClassInstanceRecord, instance: ClassInstance) -> ClassInstanceRecord:
    """Copy a snapshot's mutable state onto its record."""
    record.status = instance.status.value
    record.registered_participants = list(instance.registered_participants)
    record.waitlist = list(instance.waitlist)
    record.started_at = instance.started_at
    record.actual_duration = instance.actual_duration
    record.cancellation_reason = instance.cancellation_reason
    record.updated_at = datetime.now(timezone.utc)
    return record


def instance_to_record(instance: ClassInstance) -> ClassInstanceRecord:
    """Build a new record from a freshly materialized snapshot."""
    return ClassInstanceRecord(
        schedule_id=instance.schedule_id,
        name=instance.name,
        class_type=instance.class_type,
        instructor_id=instance.instructor_id,
        capacity=instance.capacity,
        duration_min=instance.duration_min,
        date=instance.date,
        start_time=instance.start_time,
        end_time=instance.end_time,
        status=instance.status.value,
        registered_participants=list(instance.registered_participants),
        waitlist=list(instance.waitlist),
        location=instance.location,
        notes=instance.notes
    )


def validate_schedule(schedule: ClassSchedule) -> None:
    """Raise InvalidInput when the schedule cannot be saved"""
    if not schedule.name or len(schedule.name.strip()) < 3:
        raise InvalidInput("Class name must be at least 3 characters")
    if not 1 <= schedule.capacity <= 100:
        raise InvalidInput("Capacity must be between 1 and 100")
    if not 15 <= schedule.duration_min <= 240:
        raise InvalidInput("Duration must be between 15 and 240 minutes")
    if parse_hhmm(schedule.start_time) is None:
        raise InvalidInput(f"Invalid time '{schedule.start_time}', use HH:MM")
    validate_pattern(schedule.recurrence)


def _validate_record(record: ClassScheduleRecord) -> None:
    try:
        schedule = schedule_to_domain(record)
    except ValueError:
        raise InvalidInput("Schedule type must be either single or recurring") from None
    validate_schedule(schedule)


async def create_class_schedule(
    db: AsyncSession,
    name: str,
    class_type: str,
    instructor_id: int,
    capacity: int,
    duration_min: int,
    start_date: date,
    start_time: str,
    schedule_type: str = "single",
    days_of_week: Optional[List[int]] = None,
    recurrence_end_date: Optional[date] = None,
    max_occurrences: Optional[int] = None,
    location: Optional[str] = None,
    notes: Optional[str] = None
) -> ClassScheduleRecord:
    """Create a new class schedule; raises InvalidInput for malformed schedules"""
    record = ClassScheduleRecord(
        name=name.strip(),
        class_type=class_type.strip(),
        instructor_id=instructor_id,
        capacity=capacity,
        duration_min=duration_min,
        start_date=start_date,
        start_time=start_time,
        schedule_type=schedule_type,
        days_of_week=sorted(set(days_of_week or [])) if schedule_type == "recurring" else [],
        recurrence_end_date=recurrence_end_date,
        max_occurrences=max_occurrences,
        location=location,
        notes=notes,
        is_active=True
    )
    _validate_record(record)

    db.add(record)
    try:
        await db.commit()
        await db.refresh(record)
    except SQLAlchemyError:
        await db.rollback()
        raise

    logger.info("Created class schedule %s (%s)", record.id, record.schedule_type)
    return record


async def get_class_schedule_by_id(
    db: AsyncSession,
    schedule_id: int
) -> Optional[ClassScheduleRecord]:
    result = await db.execute(
        select(ClassScheduleRecord).where(ClassScheduleRecord.id == schedule_id)
    )
    return result.scalar_one_or_none()


async def list_class_schedules(
    db: AsyncSession,
    include_inactive: bool = False,
    instructor_id: Optional[int] = None
) -> List[ClassScheduleRecord]:
    query = select(ClassScheduleRecord)
    if not include_inactive:
        query = query.where(ClassScheduleRecord.is_active == True)
    if instructor_id:
        query = query.where(ClassScheduleRecord.instructor_id == instructor_id)

    query = query.order_by(ClassScheduleRecord.created_at.desc(), ClassScheduleRecord.id.desc())
    result = await db.execute(query)
    return result.scalars().all()


async def update_class_schedule(
    db: AsyncSession,
    schedule_id: int,
    **changes: Any
) -> Optional[ClassScheduleRecord]:
    """
    Update schedule fields.

    Existing instances keep their own copies of name/capacity/etc.; only
    future materialization runs see the new values.
    """
    record = await get_class_schedule_by_id(db, schedule_id)
    if not record:
        return None

    unknown = set(changes) - set(SCHEDULE_FIELDS)
    if unknown:
        raise InvalidInput(f"Unknown schedule fields: {sorted(unknown)}")
    cleared = sorted(
        field for field, value in changes.items()
        if value is None and field not in NULLABLE_SCHEDULE_FIELDS
    )
    if cleared:
        raise InvalidInput(f"Schedule fields cannot be cleared: {cleared}")

    previous = {field: getattr(record, field) for field in SCHEDULE_FIELDS}
    for field, value in changes.items():
        setattr(record, field, value)
    if record.schedule_type == "single":
        record.days_of_week = []
    elif "days_of_week" in changes:
        record.days_of_week = sorted(set(record.days_of_week or []))

    try:
        _validate_record(record)
    except InvalidInput:
        for field, value in previous.items():
            setattr(record, field, value)
        raise

    record.updated_at = datetime.now(timezone.utc)
    try:
        await db.commit()
        await db.refresh(record)
    except SQLAlchemyError:
        await db.rollback()
        raise

    logger.info("Updated class schedule %s fields=%s", schedule_id, sorted(changes))
    return record


async def delete_class_schedule(db: AsyncSession, schedule_id: int) -> bool:
    """Delete a schedule and every instance materialized from it"""
    record = await get_class_schedule_by_id(db, schedule_id)
    if not record:
        return False

    try:
        await db.execute(
            delete(ClassInstanceRecord).where(ClassInstanceRecord.schedule_id == schedule_id)
        )
        await db.delete(record)
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        raise

    logger.info("Deleted class schedule %s and its instances", schedule_id)
    return True


async def get_instances_by_schedule(
    db: AsyncSession,
    schedule_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None
) -> List[ClassInstanceRecord]:
    query = select(ClassInstanceRecord).where(ClassInstanceRecord.schedule_id == schedule_id)
    if start_date:
        query = query.where(ClassInstanceRecord.date >= start_date)
    if end_date:
        query = query.where(ClassInstanceRecord.date <= end_date)

    query = query.order_by(ClassInstanceRecord.date)
    result = await db.execute(query)
    return result.scalars().all()


async def materialize_schedule_instances(
    db: AsyncSession,
    schedule_id: int,
    horizon_days: int = DEFAULT_HORIZON_DAYS,
    not_before: Optional[date] = None
) -> List[ClassInstanceRecord]:
    """Create the instances a schedule is missing, keyed by (schedule_id, date)"""
    schedule_record = await get_class_schedule_by_id(db, schedule_id)
    if not schedule_record:
        return []

    existing = await get_instances_by_schedule(db, schedule_id)
    to_create = materializer.materialize(
        schedule_to_domain(schedule_record),
        [instance_to_domain(record) for record in existing],
        horizon_days=horizon_days,
        not_before=not_before
    )

    records = [instance_to_record(instance) for instance in to_create]
    if records:
        db.add_all(records)
        try:
            await db.commit()
            for record in records:
                await db.refresh(record)
        except SQLAlchemyError:
            await db.rollback()
            raise

    logger.info(
        "Materialized schedule %s: %s new instances (%s existing)",
        schedule_id, len(records), len(existing)
    )
    return records


async def get_schedule_coverage(
    db: AsyncSession,
    schedule_id: int,
    horizon_days: int = DEFAULT_HORIZON_DAYS,
    not_before: Optional[date] = None
) -> Optional[Dict[str, Any]]:
    schedule_record = await get_class_schedule_by_id(db, schedule_id)
    if not schedule_record:
        return None

    existing = await get_instances_by_schedule(db, schedule_id)
    return materializer.coverage_report(
        schedule_to_domain(schedule_record),
        [instance_to_domain(record) for record in existing],
        horizon_days=horizon_days,
        not_before=not_before
    )
