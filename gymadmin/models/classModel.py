"""
Class scheduling models
Schedules are recurring templates; instances are their dated, materialized occurrences
"""
from datetime import datetime, date, timezone
from typing import Optional, List
from sqlalchemy import (
    Date, ForeignKey, Integer, BigInteger, String, Text, Boolean, JSON,
    CheckConstraint, UniqueConstraint, Index
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import TIMESTAMP

from gymadmin.db.postgresql import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ClassScheduleRecord(Base):
    """Recurring class schedules"""

    __tablename__ = "class_schedules"

    id: Mapped[int] = mapped_column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    class_type: Mapped[str] = mapped_column(String(50), nullable=False)
    instructor_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    duration_min: Mapped[int] = mapped_column(Integer, nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)  # HH:MM
    schedule_type: Mapped[str] = mapped_column(String(10), nullable=False, default="single")
    days_of_week: Mapped[List[int]] = mapped_column(JSON, nullable=False, default=list)  # 0=Sunday
    recurrence_end_date: Mapped[Optional[date]] = mapped_column(Date)
    max_occurrences: Mapped[Optional[int]] = mapped_column(Integer)
    location: Mapped[Optional[str]] = mapped_column(String(100))
    notes: Mapped[Optional[str]] = mapped_column(Text)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False, default=_utcnow)

    # Relationships
    instances: Mapped[List["ClassInstanceRecord"]] = relationship(
        back_populates="schedule",
        cascade="all, delete-orphan",
        passive_deletes=True
    )

    __table_args__ = (
        CheckConstraint("capacity BETWEEN 1 AND 100", name="ck_schedule_capacity"),
        CheckConstraint("duration_min BETWEEN 15 AND 240", name="ck_schedule_duration"),
        CheckConstraint("schedule_type IN ('single','recurring')", name="ck_schedule_type"),
    )


class ClassInstanceRecord(Base):
    """Individual class occurrences"""

    __tablename__ = "class_instances"

    id: Mapped[int] = mapped_column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True)
    schedule_id: Mapped[Optional[int]] = mapped_column(
        BigInteger, ForeignKey("class_schedules.id", ondelete="CASCADE")
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    class_type: Mapped[str] = mapped_column(String(50), nullable=False)
    instructor_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    duration_min: Mapped[int] = mapped_column(Integer, nullable=False)
    date: Mapped[date] = mapped_column(Date, nullable=False)
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="scheduled")
    registered_participants: Mapped[List[int]] = mapped_column(JSON, nullable=False, default=list)
    waitlist: Mapped[List[int]] = mapped_column(JSON, nullable=False, default=list)
    location: Mapped[Optional[str]] = mapped_column(String(100))
    notes: Mapped[Optional[str]] = mapped_column(Text)
    started_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True))
    actual_duration: Mapped[Optional[int]] = mapped_column(Integer)
    cancellation_reason: Mapped[Optional[str]] = mapped_column(Text)
    version_id: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False, default=_utcnow)

    # Relationships
    schedule: Mapped[Optional["ClassScheduleRecord"]] = relationship(back_populates="instances")

    # Concurrent writers on the same instance fail with StaleDataError
    __mapper_args__ = {"version_id_col": version_id}

    __table_args__ = (
        UniqueConstraint("schedule_id", "date", name="uq_instance_schedule_date"),
        CheckConstraint("capacity > 0", name="ck_instance_capacity"),
        CheckConstraint(
            "status IN ('scheduled','ongoing','completed','cancelled')",
            name="ck_instance_status"
        ),
        Index("idx_instances_date", "date", "status"),
    )
