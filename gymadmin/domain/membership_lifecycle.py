"""
Membership subscription state machine

    active    -> frozen | cancelled | suspended
    frozen    -> active (unfreeze) | cancelled
    cancelled -> active (reactivate)
    expired   -> active (reactivate)
    suspended -> active (reactivate)

expired is set by an external time-based evaluation, never by these operations.
Freezing pushes end_date back by the frozen span; unfreezing early keeps that extension.
"""
from dataclasses import replace
from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, List, Optional

from dateutil.relativedelta import relativedelta

from gymadmin.domain.entities import MemberMembership, MembershipStatus, PaymentStatus
from gymadmin.domain.errors import InvalidInput, InvalidTransition

MAX_REASON_LENGTH = 500
MAX_PAYMENT_REFERENCE_LENGTH = 100
MAX_FREEZE_DAYS = 365

TRANSITIONS: Dict[str, Dict[MembershipStatus, MembershipStatus]] = {
    "freeze": {MembershipStatus.ACTIVE: MembershipStatus.FROZEN},
    "unfreeze": {MembershipStatus.FROZEN: MembershipStatus.ACTIVE},
    "cancel": {
        MembershipStatus.ACTIVE: MembershipStatus.CANCELLED,
        MembershipStatus.FROZEN: MembershipStatus.CANCELLED,
    },
    "suspend": {MembershipStatus.ACTIVE: MembershipStatus.SUSPENDED},
    "reactivate": {
        MembershipStatus.CANCELLED: MembershipStatus.ACTIVE,
        MembershipStatus.EXPIRED: MembershipStatus.ACTIVE,
        MembershipStatus.SUSPENDED: MembershipStatus.ACTIVE,
    },
}


def next_status(status: MembershipStatus, operation: str) -> MembershipStatus:
    status = MembershipStatus(status)
    try:
        return TRANSITIONS[operation][status]
    except KeyError:
        raise InvalidTransition(operation, status.value) from None


def can_freeze(status: MembershipStatus) -> bool:
    return MembershipStatus(status) in TRANSITIONS["freeze"]


def can_unfreeze(status: MembershipStatus) -> bool:
    return MembershipStatus(status) in TRANSITIONS["unfreeze"]


def can_cancel(status: MembershipStatus) -> bool:
    return MembershipStatus(status) in TRANSITIONS["cancel"]


def can_suspend(status: MembershipStatus) -> bool:
    return MembershipStatus(status) in TRANSITIONS["suspend"]


def can_reactivate(status: MembershipStatus) -> bool:
    return MembershipStatus(status) in TRANSITIONS["reactivate"]


def available_actions(status: MembershipStatus) -> List[str]:
    status = MembershipStatus(status)
    return [operation for operation, edges in TRANSITIONS.items() if status in edges]


def _require_reason(reason: Optional[str]) -> str:
    reason = (reason or "").strip()
    if not reason:
        raise InvalidInput("A reason is required")
    if len(reason) > MAX_REASON_LENGTH:
        raise InvalidInput(f"Reason must be less than {MAX_REASON_LENGTH} characters")
    return reason


def _append_note(notes: Optional[str], verb: str, on: date, reason: str) -> str:
    line = f"{verb} on {on.isoformat()}: {reason}"
    return f"{notes}\n\n{line}" if notes else line


def calculate_end_date(start_date: date, duration_value: int, duration_unit: str) -> date:
    """End date for a plan duration expressed in days, weeks or months"""
    if duration_value is None or duration_value < 1:
        raise InvalidInput("Plan duration must be at least 1")
    if duration_unit == "day":
        return start_date + timedelta(days=duration_value)
    if duration_unit == "week":
        return start_date + timedelta(weeks=duration_value)
    if duration_unit == "month":
        return start_date + relativedelta(months=duration_value)
    raise InvalidInput(f"Unsupported duration unit '{duration_unit}'")


def assign_membership(
    member_id: int,
    plan_id: Optional[int],
    duration_value: int,
    duration_unit: str,
    start_date: Optional[date] = None,
    amount: Optional[Decimal] = None,
    payment_reference: Optional[str] = None,
    today: Optional[date] = None
) -> MemberMembership:
    """Build the initial active membership created when a plan is assigned"""
    start_date = start_date or today or date.today()
    if amount is not None and amount < 0:
        raise InvalidInput("Amount must be non-negative")

    return MemberMembership(
        id=None,
        member_id=member_id,
        plan_id=plan_id,
        status=MembershipStatus.ACTIVE,
        start_date=start_date,
        end_date=calculate_end_date(start_date, duration_value, duration_unit),
        payment_status=PaymentStatus.PAID if amount is not None else PaymentStatus.PENDING,
        amount=amount,
        payment_reference=payment_reference.strip() if payment_reference else None,
    )


def freeze(
    membership: MemberMembership,
    reason: str,
    duration_days: Optional[int] = None,
    freeze_end_date: Optional[date] = None,
    today: Optional[date] = None
) -> MemberMembership:
    """
    Pause an active membership.

    Exactly one of duration_days or freeze_end_date must be given. The end date
    is pushed back by the whole freeze window; the pre-freeze end date is kept
    in original_end_date from the first freeze onwards.
    """
    status = next_status(membership.status, "freeze")
    reason = _require_reason(reason)
    today = today or date.today()

    if (duration_days is None) == (freeze_end_date is None):
        raise InvalidInput("Either freeze duration (in days) or freeze end date must be provided")

    if duration_days is not None:
        if not 1 <= duration_days <= MAX_FREEZE_DAYS:
            raise InvalidInput(f"Freeze duration must be between 1 and {MAX_FREEZE_DAYS} days")
        window_end = today + timedelta(days=duration_days)
    else:
        if freeze_end_date <= today:
            raise InvalidInput("Freeze end date must be in the future")
        window_end = freeze_end_date

    shift = window_end - today
    return replace(
        membership,
        status=status,
        freeze_start_date=today,
        freeze_end_date=window_end,
        freeze_reason=reason,
        original_end_date=membership.original_end_date or membership.end_date,
        end_date=membership.end_date + shift,
        notes=_append_note(membership.notes, "Frozen", today, reason),
    )


def unfreeze(
    membership: MemberMembership,
    reason: str,
    today: Optional[date] = None
) -> MemberMembership:
    """Return a frozen membership to active without touching end_date"""
    status = next_status(membership.status, "unfreeze")
    reason = _require_reason(reason)
    today = today or date.today()

    return replace(
        membership,
        status=status,
        freeze_start_date=None,
        freeze_end_date=None,
        freeze_reason=None,
        unfreeze_date=today,
        unfreeze_reason=reason,
        notes=_append_note(membership.notes, "Unfrozen", today, reason),
    )


def cancel(
    membership: MemberMembership,
    reason: str,
    today: Optional[date] = None
) -> MemberMembership:
    status = next_status(membership.status, "cancel")
    reason = _require_reason(reason)
    today = today or date.today()

    return replace(
        membership,
        status=status,
        cancellation_reason=reason,
        cancellation_date=today,
        notes=_append_note(membership.notes, "Cancelled", today, reason),
    )


def suspend(
    membership: MemberMembership,
    reason: str,
    today: Optional[date] = None
) -> MemberMembership:
    status = next_status(membership.status, "suspend")
    reason = _require_reason(reason)
    today = today or date.today()

    return replace(
        membership,
        status=status,
        suspension_reason=reason,
        suspension_date=today,
        notes=_append_note(membership.notes, "Suspended", today, reason),
    )


def reactivate(
    membership: MemberMembership,
    reason: str,
    new_end_date: date,
    amount: Optional[Decimal] = None,
    payment_reference: Optional[str] = None,
    today: Optional[date] = None
) -> MemberMembership:
    """
    Bring a cancelled, expired or suspended membership back to active.

    start_date is preserved; the new term starts without freeze history.
    Payment metadata is recorded as given; it is never validated against
    a payment provider.
    """
    status = next_status(membership.status, "reactivate")
    reason = _require_reason(reason)
    today = today or date.today()

    if new_end_date is None or new_end_date <= today:
        raise InvalidInput("New end date must be in the future")
    if amount is not None and amount < 0:
        raise InvalidInput("Amount must be non-negative")
    payment_reference = payment_reference.strip() if payment_reference else None
    if payment_reference and len(payment_reference) > MAX_PAYMENT_REFERENCE_LENGTH:
        raise InvalidInput(
            f"Payment reference must be less than {MAX_PAYMENT_REFERENCE_LENGTH} characters"
        )

    return replace(
        membership,
        status=status,
        end_date=new_end_date,
        payment_status=PaymentStatus.PAID if amount is not None else membership.payment_status,
        amount=amount if amount is not None else membership.amount,
        payment_reference=payment_reference or membership.payment_reference,
        cancellation_reason=None,
        cancellation_date=None,
        suspension_reason=None,
        suspension_date=None,
        freeze_start_date=None,
        freeze_end_date=None,
        freeze_reason=None,
        original_end_date=None,
        notes=_append_note(membership.notes, "Reactivated", today, reason),
    )
