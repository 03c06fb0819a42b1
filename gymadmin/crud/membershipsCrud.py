import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Callable, List, Optional

from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from gymadmin.core.conversions import coerce_int
from gymadmin.core.logging_config import log_rejected_operation, log_transition
from gymadmin.domain import membership_lifecycle
from gymadmin.domain.entities import MemberMembership, MembershipStatus
from gymadmin.domain.errors import InvalidInput, InvalidTransition
from gymadmin.domain.outcome import Outcome, attempt
from gymadmin.models import MembershipPlan, MemberMembershipRecord

logger = logging.getLogger(__name__)

MEMBERSHIP_STATE_FIELDS = (
    "status", "start_date", "end_date", "payment_status",
    "freeze_start_date", "freeze_end_date", "freeze_reason", "original_end_date",
    "unfreeze_date", "unfreeze_reason", "cancellation_reason", "cancellation_date",
    "suspension_reason", "suspension_date", "amount", "payment_reference", "notes"
)


def membership_to_domain(record: MemberMembershipRecord) -> MemberMembership:
    """Map MemberMembershipRecord to the MemberMembership snapshot."""
    return MemberMembership(
        id=record.id,
        member_id=record.member_id,
        plan_id=record.plan_id,
        **{field: getattr(record, field) for field in MEMBERSHIP_STATE_FIELDS}
    )


def _apply_membership(record: MemberMembershipRecord, membership: MemberMembership) -> MemberMembershipRecord:
    """Copy a snapshot's state onto its record."""
    for field in MEMBERSHIP_STATE_FIELDS:
        value = getattr(membership, field)
        if field in ("status", "payment_status"):
            value = value.value
        setattr(record, field, value)
    record.updated_at = datetime.now(timezone.utc)
    return record


async def create_membership_plan(
    db: AsyncSession,
    name: str,
    price: float,
    duration_value: int,
    duration_unit: str,
    description: Optional[str] = None
) -> MembershipPlan:
    """Create a new membership plan"""
    if duration_unit not in ("day", "week", "month"):
        raise InvalidInput(f"Unsupported duration unit '{duration_unit}'")

    plan = MembershipPlan(
        name=name,
        description=description,
        price=Decimal(str(price)),
        duration_value=duration_value,
        duration_unit=duration_unit
    )

    db.add(plan)
    try:
        await db.commit()
        await db.refresh(plan)
    except SQLAlchemyError:
        await db.rollback()
        raise
    return plan


async def get_membership_plan_by_id(db: AsyncSession, plan_id: int) -> Optional[MembershipPlan]:
    plan_id = coerce_int(plan_id)
    if plan_id is None:
        return None

    result = await db.execute(select(MembershipPlan).where(MembershipPlan.id == plan_id))
    return result.scalar_one_or_none()


async def get_membership_plans(db: AsyncSession) -> List[MembershipPlan]:
    """Get all available membership plans"""
    result = await db.execute(select(MembershipPlan).order_by(MembershipPlan.price.asc()))
    return result.scalars().all()


async def get_membership_by_id(
    db: AsyncSession,
    membership_id: int
) -> Optional[MemberMembershipRecord]:
    membership_id = coerce_int(membership_id)
    if membership_id is None:
        return None

    result = await db.execute(
        select(MemberMembershipRecord).where(MemberMembershipRecord.id == membership_id)
    )
    return result.scalar_one_or_none()


async def get_member_memberships(
    db: AsyncSession,
    member_id: int,
    status: Optional[str] = None
) -> List[MemberMembershipRecord]:
    """Get a member's memberships, newest end date first"""
    query = select(MemberMembershipRecord).where(MemberMembershipRecord.member_id == member_id)
    if status:
        query = query.where(MemberMembershipRecord.status == status)

    query = query.order_by(MemberMembershipRecord.end_date.desc())
    result = await db.execute(query)
    return result.scalars().all()


async def _has_other_live_membership(
    db: AsyncSession,
    member_id: int,
    exclude_id: Optional[int] = None
) -> bool:
    """True when the member already holds an active or frozen membership"""
    query = select(MemberMembershipRecord.id).where(
        and_(
            MemberMembershipRecord.member_id == member_id,
            MemberMembershipRecord.status.in_(
                [MembershipStatus.ACTIVE.value, MembershipStatus.FROZEN.value]
            )
        )
    )
    if exclude_id is not None:
        query = query.where(MemberMembershipRecord.id != exclude_id)

    result = await db.execute(query)
    return result.first() is not None


async def assign_membership(
    db: AsyncSession,
    member_id: int,
    plan_id: int,
    start_date: Optional[date] = None,
    amount: Optional[Decimal | float] = None,
    payment_reference: Optional[str] = None,
    today: Optional[date] = None
) -> Optional[Outcome]:
    """Assign a plan to a member. Returns None when the plan does not exist."""
    plan = await get_membership_plan_by_id(db, plan_id)
    if not plan:
        return None

    if await _has_other_live_membership(db, member_id):
        error = InvalidTransition(
            "assign",
            MembershipStatus.ACTIVE.value,
            "Member already has an active or frozen membership"
        )
        log_rejected_operation("MemberMembership", None, "assign", error.code, error.message)
        return Outcome(ok=False, error=error)

    if amount is not None and not isinstance(amount, Decimal):
        amount = Decimal(str(amount))

    outcome = attempt(
        membership_lifecycle.assign_membership,
        member_id,
        plan.id,
        plan.duration_value,
        plan.duration_unit,
        start_date=start_date,
        amount=amount,
        payment_reference=payment_reference,
        today=today
    )
    if not outcome.ok:
        log_rejected_operation("MemberMembership", None, "assign", outcome.error_code, outcome.message)
        return outcome

    membership: MemberMembership = outcome.value
    record = MemberMembershipRecord(member_id=membership.member_id, plan_id=membership.plan_id)
    _apply_membership(record, membership)

    db.add(record)
    try:
        await db.commit()
        await db.refresh(record)
    except SQLAlchemyError:
        await db.rollback()
        raise

    logger.info("Assigned plan %s to member %s as membership %s", plan.id, member_id, record.id)
    return Outcome(ok=True, value=record)


async def _apply_operation(
    db: AsyncSession,
    membership_id: int,
    operation: str,
    fn: Callable,
    *args: Any,
    **kwargs: Any
) -> Optional[Outcome]:
    """
    Load a membership, run a lifecycle operation on its snapshot and persist the result.

    Returns None when the membership does not exist. A rejected operation is
    returned as a failed Outcome and leaves the row untouched.
    """
    record = await get_membership_by_id(db, membership_id)
    if not record:
        return None

    snapshot = membership_to_domain(record)
    outcome = attempt(fn, snapshot, *args, **kwargs)
    if not outcome.ok:
        log_rejected_operation("MemberMembership", membership_id, operation, outcome.error_code, outcome.message)
        return outcome

    _apply_membership(record, outcome.value)
    try:
        await db.commit()
        await db.refresh(record)
    except SQLAlchemyError:
        await db.rollback()
        raise

    log_transition("MemberMembership", membership_id, operation, snapshot.status.value, record.status)
    return Outcome(ok=True, value=record)


async def freeze_membership(
    db: AsyncSession,
    membership_id: int,
    reason: str,
    duration_days: Optional[int] = None,
    freeze_end_date: Optional[date] = None,
    today: Optional[date] = None
) -> Optional[Outcome]:
    return await _apply_operation(
        db, membership_id, "freeze", membership_lifecycle.freeze,
        reason, duration_days=duration_days, freeze_end_date=freeze_end_date, today=today
    )


async def unfreeze_membership(
    db: AsyncSession,
    membership_id: int,
    reason: str,
    today: Optional[date] = None
) -> Optional[Outcome]:
    return await _apply_operation(
        db, membership_id, "unfreeze", membership_lifecycle.unfreeze, reason, today=today
    )


async def cancel_membership(
    db: AsyncSession,
    membership_id: int,
    reason: str,
    today: Optional[date] = None
) -> Optional[Outcome]:
    return await _apply_operation(
        db, membership_id, "cancel", membership_lifecycle.cancel, reason, today=today
    )


async def suspend_membership(
    db: AsyncSession,
    membership_id: int,
    reason: str,
    today: Optional[date] = None
) -> Optional[Outcome]:
    return await _apply_operation(
        db, membership_id, "suspend", membership_lifecycle.suspend, reason, today=today
    )


async def reactivate_membership(
    db: AsyncSession,
    membership_id: int,
    reason: str,
    new_end_date: date,
    amount: Optional[Decimal | float] = None,
    payment_reference: Optional[str] = None,
    today: Optional[date] = None
) -> Optional[Outcome]:
    """
    Reactivate a cancelled, expired or suspended membership.
    A member may hold only one active or frozen membership at a time.
    """
    record = await get_membership_by_id(db, membership_id)
    if not record:
        return None

    if await _has_other_live_membership(db, record.member_id, exclude_id=record.id):
        error = InvalidTransition(
            "reactivate",
            record.status,
            "Member already has an active or frozen membership. "
            "Cancel or expire existing membership first."
        )
        log_rejected_operation("MemberMembership", membership_id, "reactivate", error.code, error.message)
        return Outcome(ok=False, error=error)

    if amount is not None and not isinstance(amount, Decimal):
        amount = Decimal(str(amount))

    return await _apply_operation(
        db, membership_id, "reactivate", membership_lifecycle.reactivate,
        reason, new_end_date, amount=amount, payment_reference=payment_reference, today=today
    )
