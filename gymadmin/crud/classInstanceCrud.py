"""
CRUD operations for ClassInstance management
Lifecycle transitions and registrations run through the pure core and are persisted here
"""
import logging
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from gymadmin.core.logging_config import log_rejected_operation, log_transition
from gymadmin.crud.classScheduleCrud import apply_instance, instance_to_domain
from gymadmin.domain import capacity, class_lifecycle, materializer
from gymadmin.domain.outcome import Outcome, attempt
from gymadmin.models.classModel import ClassInstanceRecord

logger = logging.getLogger(__name__)


async def get_class_instance_by_id(
    db: AsyncSession,
    instance_id: int
) -> Optional[ClassInstanceRecord]:
    result = await db.execute(
        select(ClassInstanceRecord).where(ClassInstanceRecord.id == instance_id)
    )
    return result.scalar_one_or_none()


async def get_instances_by_date_range(
    db: AsyncSession,
    start_date: date,
    end_date: Optional[date] = None,
    status: Optional[str] = None,
    instructor_id: Optional[int] = None
) -> List[ClassInstanceRecord]:
    """Get instances within date range with optional filters"""
    query = select(ClassInstanceRecord).where(ClassInstanceRecord.date >= start_date)

    if end_date:
        query = query.where(ClassInstanceRecord.date <= end_date)
    if status:
        query = query.where(ClassInstanceRecord.status == status)
    if instructor_id:
        query = query.where(ClassInstanceRecord.instructor_id == instructor_id)

    query = query.order_by(ClassInstanceRecord.date, ClassInstanceRecord.start_time)
    result = await db.execute(query)
    return result.scalars().all()


async def _apply_operation(
    db: AsyncSession,
    instance_id: int,
    operation: str,
    fn: Callable,
    *args: Any,
    **kwargs: Any
) -> Optional[Outcome]:
    """
    Load an instance, run a core operation on its snapshot and persist the result.

    Returns None when the instance does not exist, otherwise an Outcome whose
    value is the updated record. Rejected operations leave the row untouched.
    """
    record = await get_class_instance_by_id(db, instance_id)
    if not record:
        return None

    snapshot = instance_to_domain(record)
    outcome = attempt(fn, snapshot, *args, **kwargs)
    if not outcome.ok:
        log_rejected_operation("ClassInstance", instance_id, operation, outcome.error_code, outcome.message)
        return outcome

    apply_instance(record, outcome.value)
    try:
        await db.commit()
        await db.refresh(record)
    except SQLAlchemyError:
        await db.rollback()
        raise

    log_transition("ClassInstance", instance_id, operation, snapshot.status.value, record.status)
    return Outcome(ok=True, value=record)


async def start_class_instance(
    db: AsyncSession,
    instance_id: int,
    now: Optional[datetime] = None
) -> Optional[Outcome]:
    return await _apply_operation(db, instance_id, "start", class_lifecycle.start, now=now)


async def end_class_instance(
    db: AsyncSession,
    instance_id: int,
    actual_duration: Optional[int] = None,
    now: Optional[datetime] = None
) -> Optional[Outcome]:
    return await _apply_operation(
        db, instance_id, "end", class_lifecycle.end, now=now, actual_duration=actual_duration
    )


async def cancel_class_instance(
    db: AsyncSession,
    instance_id: int,
    reason: Optional[str] = None
) -> Optional[Outcome]:
    return await _apply_operation(db, instance_id, "cancel", class_lifecycle.cancel, reason)


async def register_participant(
    db: AsyncSession,
    instance_id: int,
    member_id: int
) -> Optional[Outcome]:
    """Register a member, waitlisting them when the class is full"""
    return await _apply_operation(db, instance_id, "register", capacity.register, member_id)


async def unregister_participant(
    db: AsyncSession,
    instance_id: int,
    member_id: int
) -> Optional[Outcome]:
    """Unregister a member, promoting the first waitlisted member into a freed slot"""
    return await _apply_operation(db, instance_id, "unregister", capacity.unregister, member_id)


async def get_class_stats(
    db: AsyncSession,
    today: Optional[date] = None
) -> Dict[str, Any]:
    """Aggregate class statistics over every stored instance"""
    result = await db.execute(select(ClassInstanceRecord))
    instances = [instance_to_domain(record) for record in result.scalars().all()]
    return materializer.instance_stats(instances, today=today)
