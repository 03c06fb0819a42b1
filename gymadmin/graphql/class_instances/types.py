"""
GraphQL types for Class Instances
"""
from datetime import datetime, date
from typing import Optional, List, Dict, Any
import strawberry

from gymadmin.domain import class_lifecycle
from gymadmin.domain.entities import ClassStatus
from gymadmin.models.classModel import ClassInstanceRecord


@strawberry.type
class ClassInstance:
    """Class Instance GraphQL type"""
    id: int
    schedule_id: Optional[int]
    name: str
    class_type: str
    instructor_id: int
    capacity: int
    duration_min: int
    date: date
    start_time: str
    end_time: str
    status: str
    registered_participants: List[int]
    waitlist: List[int]
    location: Optional[str]
    notes: Optional[str]
    started_at: Optional[datetime]
    actual_duration: Optional[int]
    cancellation_reason: Optional[str]
    created_at: datetime
    updated_at: datetime

    # Derived data
    available_spots: int
    is_full: bool
    available_actions: List[str]

    @classmethod
    def from_model(cls, instance: ClassInstanceRecord) -> "ClassInstance":
        participants = list(instance.registered_participants or [])
        return cls(
            id=instance.id,
            schedule_id=instance.schedule_id,
            name=instance.name,
            class_type=instance.class_type,
            instructor_id=instance.instructor_id,
            capacity=instance.capacity,
            duration_min=instance.duration_min,
            date=instance.date,
            start_time=instance.start_time,
            end_time=instance.end_time,
            status=instance.status,
            registered_participants=participants,
            waitlist=list(instance.waitlist or []),
            location=instance.location,
            notes=instance.notes,
            started_at=instance.started_at,
            actual_duration=instance.actual_duration,
            cancellation_reason=instance.cancellation_reason,
            created_at=instance.created_at,
            updated_at=instance.updated_at,
            available_spots=max(0, instance.capacity - len(participants)),
            is_full=len(participants) >= instance.capacity,
            available_actions=class_lifecycle.available_actions(ClassStatus(instance.status))
        )


@strawberry.type
class ClassTypeCount:
    class_type: str
    count: int


@strawberry.type
class ClassStats:
    """Aggregated class statistics"""
    total_instances: int
    upcoming_instances: int
    completed_instances: int
    cancelled_instances: int
    total_participants: int
    average_attendance: int
    class_type_distribution: List[ClassTypeCount]


@strawberry.input
class InstanceDateRangeInput:
    start_date: date
    end_date: Optional[date] = None
    status: Optional[str] = None
    instructor_id: Optional[int] = None


@strawberry.input
class EndClassInstanceInput:
    instance_id: int
    actual_duration: Optional[int] = None


@strawberry.input
class CancelClassInstanceInput:
    instance_id: int
    reason: Optional[str] = None


@strawberry.input
class RegistrationInput:
    instance_id: int
    member_id: int


@strawberry.type
class ClassInstanceResponse:
    """Response for class instance operations"""
    success: bool
    instance: Optional[ClassInstance]
    message: str
    error_code: Optional[str] = None


@strawberry.type
class ClassStatsResponse:
    success: bool
    stats: Optional[ClassStats]
    message: str


def convert_class_stats(stats_dict: Dict[str, Any]) -> ClassStats:
    """Convert class stats dictionary to GraphQL type"""
    return ClassStats(
        total_instances=stats_dict["total_instances"],
        upcoming_instances=stats_dict["upcoming_instances"],
        completed_instances=stats_dict["completed_instances"],
        cancelled_instances=stats_dict["cancelled_instances"],
        total_participants=stats_dict["total_participants"],
        average_attendance=stats_dict["average_attendance"],
        class_type_distribution=[
            ClassTypeCount(class_type=class_type, count=count)
            for class_type, count in sorted(stats_dict["class_type_distribution"].items())
        ]
    )
