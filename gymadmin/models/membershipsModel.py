"""
Membership models
Memberships are never hard-deleted; every lifecycle change is kept on the row and in notes
"""
from datetime import datetime, date, timezone
from decimal import Decimal
from typing import Optional, List
from sqlalchemy import (
    Date, ForeignKey, Integer, BigInteger, Numeric, String, Text,
    CheckConstraint, Index
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import TIMESTAMP

from gymadmin.db.postgresql import Base


class MembershipPlan(Base):
    """Membership plan templates"""

    __tablename__ = "membership_plans"

    id: Mapped[int] = mapped_column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    duration_value: Mapped[int] = mapped_column(Integer, nullable=False)
    duration_unit: Mapped[str] = mapped_column(String(10), nullable=False)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    # Relationships
    memberships: Mapped[List["MemberMembershipRecord"]] = relationship(back_populates="plan")

    __table_args__ = (
        CheckConstraint("duration_unit IN ('day','week','month')", name="ck_duration_unit"),
    )


class MemberMembershipRecord(Base):
    """A member's subscription to a plan"""

    __tablename__ = "member_memberships"

    id: Mapped[int] = mapped_column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True)
    member_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    plan_id: Mapped[Optional[int]] = mapped_column(BigInteger, ForeignKey("membership_plans.id"))
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    payment_status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    freeze_start_date: Mapped[Optional[date]] = mapped_column(Date)
    freeze_end_date: Mapped[Optional[date]] = mapped_column(Date)
    freeze_reason: Mapped[Optional[str]] = mapped_column(Text)
    original_end_date: Mapped[Optional[date]] = mapped_column(Date)
    unfreeze_date: Mapped[Optional[date]] = mapped_column(Date)
    unfreeze_reason: Mapped[Optional[str]] = mapped_column(Text)
    cancellation_reason: Mapped[Optional[str]] = mapped_column(Text)
    cancellation_date: Mapped[Optional[date]] = mapped_column(Date)
    suspension_reason: Mapped[Optional[str]] = mapped_column(Text)
    suspension_date: Mapped[Optional[date]] = mapped_column(Date)
    amount: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2))
    payment_reference: Mapped[Optional[str]] = mapped_column(String(100))
    notes: Mapped[Optional[str]] = mapped_column(Text)
    version_id: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True))

    # Relationships
    plan: Mapped[Optional["MembershipPlan"]] = relationship(back_populates="memberships")

    __mapper_args__ = {"version_id_col": version_id}

    __table_args__ = (
        CheckConstraint(
            "status IN ('active','frozen','cancelled','expired','suspended')",
            name="ck_membership_status"
        ),
        CheckConstraint(
            "payment_status IN ('pending','paid','overdue','cancelled')",
            name="ck_membership_payment_status"
        ),
        Index("idx_memberships_member", "member_id", "status", "end_date"),
    )
