"""
Domain snapshots for class scheduling and memberships.
Every snapshot is immutable; lifecycle operations return a new one.
"""
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple


class ScheduleType(str, Enum):
    SINGLE = "single"
    RECURRING = "recurring"


class ClassStatus(str, Enum):
    SCHEDULED = "scheduled"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class MembershipStatus(str, Enum):
    ACTIVE = "active"
    FROZEN = "frozen"
    CANCELLED = "cancelled"
    EXPIRED = "expired"
    SUSPENDED = "suspended"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class RecurrencePattern:
    """How a schedule repeats. days_of_week uses 0=Sunday .. 6=Saturday."""

    schedule_type: ScheduleType = ScheduleType.SINGLE
    days_of_week: frozenset = field(default_factory=frozenset)
    end_date: Optional[date] = None
    max_occurrences: Optional[int] = None

    def __post_init__(self):
        # Accept plain strings/lists from the persistence and API layers
        object.__setattr__(self, "schedule_type", ScheduleType(self.schedule_type))
        object.__setattr__(self, "days_of_week", frozenset(self.days_of_week or ()))


@dataclass(frozen=True)
class ClassSchedule:
    """Recurring class template"""

    id: Optional[int]
    name: str
    class_type: str
    instructor_id: int
    capacity: int
    duration_min: int
    start_date: date
    start_time: str  # HH:MM
    recurrence: RecurrencePattern
    location: Optional[str] = None
    notes: Optional[str] = None
    is_active: bool = True


@dataclass(frozen=True)
class ClassInstance:
    """One concrete, dated occurrence of a schedule"""

    id: Optional[int]
    schedule_id: Optional[int]
    name: str
    class_type: str
    instructor_id: int
    capacity: int
    duration_min: int
    date: date
    start_time: str
    end_time: str
    status: ClassStatus = ClassStatus.SCHEDULED
    registered_participants: Tuple[int, ...] = ()
    waitlist: Tuple[int, ...] = ()
    location: Optional[str] = None
    notes: Optional[str] = None
    started_at: Optional[datetime] = None
    actual_duration: Optional[int] = None
    cancellation_reason: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "status", ClassStatus(self.status))
        object.__setattr__(self, "registered_participants", tuple(self.registered_participants))
        object.__setattr__(self, "waitlist", tuple(self.waitlist))

    @property
    def available_spots(self) -> int:
        return max(0, self.capacity - len(self.registered_participants))

    @property
    def is_full(self) -> bool:
        return len(self.registered_participants) >= self.capacity


@dataclass(frozen=True)
class MemberMembership:
    """A member's subscription to a plan, kept forever as an audit record"""

    id: Optional[int]
    member_id: int
    plan_id: Optional[int]
    status: MembershipStatus
    start_date: date
    end_date: date
    payment_status: PaymentStatus = PaymentStatus.PENDING
    freeze_start_date: Optional[date] = None
    freeze_end_date: Optional[date] = None
    freeze_reason: Optional[str] = None
    original_end_date: Optional[date] = None
    unfreeze_date: Optional[date] = None
    unfreeze_reason: Optional[str] = None
    cancellation_reason: Optional[str] = None
    cancellation_date: Optional[date] = None
    suspension_reason: Optional[str] = None
    suspension_date: Optional[date] = None
    amount: Optional[Decimal] = None
    payment_reference: Optional[str] = None
    notes: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "status", MembershipStatus(self.status))
        object.__setattr__(self, "payment_status", PaymentStatus(self.payment_status))
