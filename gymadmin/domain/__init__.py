# Scheduling and membership core - pure functions over immutable snapshots
from gymadmin.domain.entities import (
    ScheduleType, ClassStatus, MembershipStatus, PaymentStatus,
    RecurrencePattern, ClassSchedule, ClassInstance, MemberMembership
)
from gymadmin.domain.errors import (
    GymAdminError, InvalidInput, InvalidTransition, CapacityConflict,
    AlreadyRegistered, NotRegistered, DuplicateOccurrence
)
from gymadmin.domain.outcome import Outcome, attempt

__all__ = [
    "ScheduleType", "ClassStatus", "MembershipStatus", "PaymentStatus",
    "RecurrencePattern", "ClassSchedule", "ClassInstance", "MemberMembership",
    "GymAdminError", "InvalidInput", "InvalidTransition", "CapacityConflict",
    "AlreadyRegistered", "NotRegistered", "DuplicateOccurrence",
    "Outcome", "attempt"
]
