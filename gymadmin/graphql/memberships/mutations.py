import logging
from typing import Optional

import strawberry
from strawberry.types import Info
from sqlalchemy.ext.asyncio import AsyncSession

from gymadmin.crud.membershipsCrud import (
    create_membership_plan,
    assign_membership,
    freeze_membership,
    unfreeze_membership,
    cancel_membership,
    suspend_membership,
    reactivate_membership
)
from gymadmin.domain.errors import GymAdminError
from gymadmin.domain.outcome import Outcome
from gymadmin.graphql.memberships.types import (
    CreateMembershipPlanInput, AssignMembershipInput,
    FreezeMembershipInput, MembershipReasonInput, ReactivateMembershipInput,
    MembershipPlanResponse, MembershipResponse,
    MembershipPlan, MemberMembership
)

logger = logging.getLogger(__name__)


def _membership_response(outcome: Optional[Outcome], success_message: str, not_found: str) -> MembershipResponse:
    if outcome is None:
        return MembershipResponse(success=False, membership=None, message=not_found, error_code="not_found")
    if not outcome.ok:
        return MembershipResponse(
            success=False,
            membership=None,
            message=outcome.message,
            error_code=outcome.error_code
        )
    return MembershipResponse(
        success=True,
        membership=MemberMembership.from_model(outcome.value),
        message=success_message
    )


def _failed(action: str, error: Exception) -> MembershipResponse:
    logger.error("Error %s membership: %s", action, error)
    return MembershipResponse(
        success=False,
        membership=None,
        message=f"Error {action} membership: {str(error)}"
    )


@strawberry.type
class MembershipMutation:
    @strawberry.mutation
    async def create_membership_plan(self, info: Info, input: CreateMembershipPlanInput) -> MembershipPlanResponse:
        """Create a new membership plan"""
        db: AsyncSession = info.context.db

        try:
            plan = await create_membership_plan(
                db=db,
                name=input.name,
                price=input.price,
                duration_value=input.duration_value,
                duration_unit=input.duration_unit,
                description=input.description
            )
            return MembershipPlanResponse(
                success=True,
                plan=MembershipPlan.from_model(plan),
                message="Membership plan created successfully"
            )

        except GymAdminError as e:
            return MembershipPlanResponse(success=False, plan=None, message=e.message, error_code=e.code)
        except Exception as e:
            return MembershipPlanResponse(
                success=False,
                plan=None,
                message=f"Error creating membership plan: {str(e)}"
            )

    @strawberry.mutation
    async def assign_membership(self, info: Info, input: AssignMembershipInput) -> MembershipResponse:
        """Assign a plan to a member; the end date follows the plan's duration"""
        db: AsyncSession = info.context.db

        try:
            outcome = await assign_membership(
                db,
                member_id=input.member_id,
                plan_id=input.plan_id,
                start_date=input.start_date,
                amount=input.amount,
                payment_reference=input.payment_reference
            )
            return _membership_response(outcome, "Membership assigned successfully", "Membership plan not found")
        except Exception as e:
            return _failed("assigning", e)

    @strawberry.mutation
    async def freeze_membership(self, info: Info, input: FreezeMembershipInput) -> MembershipResponse:
        """Freeze an active membership, pushing its end date back by the frozen period"""
        db: AsyncSession = info.context.db

        try:
            outcome = await freeze_membership(
                db,
                input.membership_id,
                input.reason,
                duration_days=input.duration_days,
                freeze_end_date=input.freeze_end_date
            )
            return _membership_response(outcome, "Membership frozen successfully", "Membership not found")
        except Exception as e:
            return _failed("freezing", e)

    @strawberry.mutation
    async def unfreeze_membership(self, info: Info, input: MembershipReasonInput) -> MembershipResponse:
        db: AsyncSession = info.context.db

        try:
            outcome = await unfreeze_membership(db, input.membership_id, input.reason)
            return _membership_response(outcome, "Membership unfrozen successfully", "Membership not found")
        except Exception as e:
            return _failed("unfreezing", e)

    @strawberry.mutation
    async def cancel_membership(self, info: Info, input: MembershipReasonInput) -> MembershipResponse:
        db: AsyncSession = info.context.db

        try:
            outcome = await cancel_membership(db, input.membership_id, input.reason)
            return _membership_response(outcome, "Membership cancelled successfully", "Membership not found")
        except Exception as e:
            return _failed("cancelling", e)

    @strawberry.mutation
    async def suspend_membership(self, info: Info, input: MembershipReasonInput) -> MembershipResponse:
        db: AsyncSession = info.context.db

        try:
            outcome = await suspend_membership(db, input.membership_id, input.reason)
            return _membership_response(outcome, "Membership suspended successfully", "Membership not found")
        except Exception as e:
            return _failed("suspending", e)

    @strawberry.mutation
    async def reactivate_membership(self, info: Info, input: ReactivateMembershipInput) -> MembershipResponse:
        """Reactivate a cancelled, expired or suspended membership"""
        db: AsyncSession = info.context.db

        try:
            outcome = await reactivate_membership(
                db,
                input.membership_id,
                input.reason,
                input.new_end_date,
                amount=input.amount,
                payment_reference=input.payment_reference
            )
            return _membership_response(outcome, "Membership reactivated successfully", "Membership not found")
        except Exception as e:
            return _failed("reactivating", e)
