from datetime import date, datetime
from typing import List, Optional

import strawberry

from gymadmin.domain import membership_lifecycle
from gymadmin.domain.entities import MembershipStatus
from gymadmin.models.membershipsModel import MembershipPlan as MembershipPlanModel
from gymadmin.models.membershipsModel import MemberMembershipRecord


@strawberry.type
class MembershipPlan:
    id: int
    name: str
    description: Optional[str]
    price: float
    duration_value: int
    duration_unit: str
    created_at: datetime

    @classmethod
    def from_model(cls, plan: MembershipPlanModel) -> "MembershipPlan":
        return cls(
            id=plan.id,
            name=plan.name,
            description=plan.description,
            price=float(plan.price),
            duration_value=plan.duration_value,
            duration_unit=plan.duration_unit,
            created_at=plan.created_at
        )


@strawberry.type
class MemberMembership:
    id: int
    member_id: int
    plan_id: Optional[int]
    status: str
    start_date: date
    end_date: date
    payment_status: str
    freeze_start_date: Optional[date]
    freeze_end_date: Optional[date]
    freeze_reason: Optional[str]
    original_end_date: Optional[date]
    unfreeze_date: Optional[date]
    unfreeze_reason: Optional[str]
    cancellation_reason: Optional[str]
    cancellation_date: Optional[date]
    suspension_reason: Optional[str]
    suspension_date: Optional[date]
    amount: Optional[float]
    payment_reference: Optional[str]
    notes: Optional[str]
    remaining_days: Optional[int]
    available_actions: List[str]

    @classmethod
    def from_model(cls, membership: MemberMembershipRecord) -> "MemberMembership":
        remaining_days = None
        if membership.status == MembershipStatus.ACTIVE.value:
            remaining_days = max(0, (membership.end_date - date.today()).days)

        return cls(
            id=membership.id,
            member_id=membership.member_id,
            plan_id=membership.plan_id,
            status=membership.status,
            start_date=membership.start_date,
            end_date=membership.end_date,
            payment_status=membership.payment_status,
            freeze_start_date=membership.freeze_start_date,
            freeze_end_date=membership.freeze_end_date,
            freeze_reason=membership.freeze_reason,
            original_end_date=membership.original_end_date,
            unfreeze_date=membership.unfreeze_date,
            unfreeze_reason=membership.unfreeze_reason,
            cancellation_reason=membership.cancellation_reason,
            cancellation_date=membership.cancellation_date,
            suspension_reason=membership.suspension_reason,
            suspension_date=membership.suspension_date,
            amount=float(membership.amount) if membership.amount is not None else None,
            payment_reference=membership.payment_reference,
            notes=membership.notes,
            remaining_days=remaining_days,
            available_actions=membership_lifecycle.available_actions(MembershipStatus(membership.status))
        )


@strawberry.input
class CreateMembershipPlanInput:
    name: str
    price: float
    duration_value: int
    duration_unit: str
    description: Optional[str] = None


@strawberry.input
class AssignMembershipInput:
    member_id: int
    plan_id: int
    start_date: Optional[date] = None
    amount: Optional[float] = None
    payment_reference: Optional[str] = None


@strawberry.input
class FreezeMembershipInput:
    membership_id: int
    reason: str
    duration_days: Optional[int] = None
    freeze_end_date: Optional[date] = None


@strawberry.input
class MembershipReasonInput:
    """Shared by unfreeze, cancel and suspend"""
    membership_id: int
    reason: str


@strawberry.input
class ReactivateMembershipInput:
    membership_id: int
    reason: str
    new_end_date: date
    amount: Optional[float] = None
    payment_reference: Optional[str] = None


@strawberry.type
class MembershipPlanResponse:
    success: bool
    plan: Optional[MembershipPlan]
    message: str
    error_code: Optional[str] = None


@strawberry.type
class MembershipResponse:
    success: bool
    membership: Optional[MemberMembership]
    message: str
    error_code: Optional[str] = None
