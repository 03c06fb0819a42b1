from typing import List, Optional

import strawberry
from strawberry.types import Info
from sqlalchemy.ext.asyncio import AsyncSession

from gymadmin.crud.membershipsCrud import (
    get_membership_plans,
    get_membership_by_id,
    get_member_memberships
)
from gymadmin.graphql.memberships.types import MembershipPlan, MemberMembership


@strawberry.type
class MembershipQuery:
    @strawberry.field
    async def membership_plans(self, info: Info) -> List[MembershipPlan]:
        """Get all available membership plans"""
        db: AsyncSession = info.context.db
        plans = await get_membership_plans(db)
        return [MembershipPlan.from_model(plan) for plan in plans]

    @strawberry.field
    async def membership(self, info: Info, membership_id: int) -> Optional[MemberMembership]:
        db: AsyncSession = info.context.db
        membership = await get_membership_by_id(db, membership_id)
        return MemberMembership.from_model(membership) if membership else None

    @strawberry.field
    async def member_memberships(
        self,
        info: Info,
        member_id: int,
        status: Optional[str] = None
    ) -> List[MemberMembership]:
        """Get a member's memberships, newest end date first"""
        db: AsyncSession = info.context.db
        memberships = await get_member_memberships(db, member_id, status=status)
        return [MemberMembership.from_model(membership) for membership in memberships]
