"""
GraphQL types for Class Schedules
"""
from datetime import datetime, date
from typing import Optional, List, Dict, Any
import strawberry

from gymadmin.models.classModel import ClassScheduleRecord


@strawberry.type
class ClassSchedule:
    """Class Schedule GraphQL type"""
    id: int
    name: str
    class_type: str
    instructor_id: int
    capacity: int
    duration_min: int
    start_date: date
    start_time: str
    schedule_type: str
    days_of_week: List[int]
    recurrence_end_date: Optional[date]
    max_occurrences: Optional[int]
    location: Optional[str]
    notes: Optional[str]
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, schedule: ClassScheduleRecord) -> "ClassSchedule":
        return cls(
            id=schedule.id,
            name=schedule.name,
            class_type=schedule.class_type,
            instructor_id=schedule.instructor_id,
            capacity=schedule.capacity,
            duration_min=schedule.duration_min,
            start_date=schedule.start_date,
            start_time=schedule.start_time,
            schedule_type=schedule.schedule_type,
            days_of_week=list(schedule.days_of_week or []),
            recurrence_end_date=schedule.recurrence_end_date,
            max_occurrences=schedule.max_occurrences,
            location=schedule.location,
            notes=schedule.notes,
            is_active=schedule.is_active,
            created_at=schedule.created_at,
            updated_at=schedule.updated_at
        )


@strawberry.type
class Occurrence:
    """One expanded occurrence of a recurrence pattern"""
    date: date
    time: str


@strawberry.type
class ScheduleCoverage:
    """Coverage information for a schedule"""
    schedule_id: int
    schedule_name: Optional[str]
    start_time: str
    expected_instances: int
    existing_instances: int
    coverage_percentage: float
    has_gaps: bool
    next_missing_dates: List[str]


@strawberry.type
class CoverageSummary:
    """Overall coverage summary"""
    total_schedules: int
    schedules_with_gaps: int
    total_expected_instances: int
    total_existing_instances: int
    overall_coverage_percentage: float


@strawberry.type
class CoverageReport:
    """Coverage analysis over all active schedules"""
    start: date
    end: date
    days: int
    schedules: List[ScheduleCoverage]
    summary: CoverageSummary


# Input types for mutations and queries
@strawberry.input
class CreateClassScheduleInput:
    """Input for creating a class schedule"""
    name: str
    class_type: str
    instructor_id: int
    capacity: int
    duration_min: int
    start_date: date
    start_time: str
    schedule_type: str = "single"
    days_of_week: Optional[List[int]] = None
    recurrence_end_date: Optional[date] = None
    max_occurrences: Optional[int] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    materialize: bool = True


@strawberry.input
class UpdateClassScheduleInput:
    """Input for updating a class schedule; omitted fields are left unchanged, null clears optional fields"""
    schedule_id: int
    name: Optional[str] = strawberry.UNSET
    class_type: Optional[str] = strawberry.UNSET
    instructor_id: Optional[int] = strawberry.UNSET
    capacity: Optional[int] = strawberry.UNSET
    duration_min: Optional[int] = strawberry.UNSET
    start_date: Optional[date] = strawberry.UNSET
    start_time: Optional[str] = strawberry.UNSET
    schedule_type: Optional[str] = strawberry.UNSET
    days_of_week: Optional[List[int]] = strawberry.UNSET
    recurrence_end_date: Optional[date] = strawberry.UNSET
    max_occurrences: Optional[int] = strawberry.UNSET
    location: Optional[str] = strawberry.UNSET
    notes: Optional[str] = strawberry.UNSET
    is_active: Optional[bool] = strawberry.UNSET


@strawberry.input
class ExpandScheduleInput:
    """Input for previewing a recurrence without saving it"""
    start_date: date
    start_time: str
    schedule_type: str = "single"
    days_of_week: Optional[List[int]] = None
    recurrence_end_date: Optional[date] = None
    max_occurrences: Optional[int] = None
    horizon_days: int = 365


# Response types
@strawberry.type
class ClassScheduleResponse:
    """Response for class schedule operations"""
    success: bool
    schedule: Optional[ClassSchedule]
    message: str
    error_code: Optional[str] = None
    instances_created: int = 0


@strawberry.type
class ExpandScheduleResponse:
    success: bool
    occurrences: List[Occurrence]
    message: str
    error_code: Optional[str] = None


@strawberry.type
class MaterializationResponse:
    """Response for materialization operations"""
    success: bool
    schedule_id: Optional[int]
    instances_created: int
    message: str
    error_code: Optional[str] = None


@strawberry.type
class MaintenanceResponse:
    """Response for maintenance operations"""
    success: bool
    maintenance_stats_json: Optional[str]  # JSON string instead of Dict
    message: str


@strawberry.type
class CoverageReportResponse:
    success: bool
    report: Optional[CoverageReport]
    message: str


def convert_coverage_report(report_dict: Dict[str, Any]) -> CoverageReport:
    """Convert coverage report dictionary to GraphQL type"""
    schedules = [
        ScheduleCoverage(
            schedule_id=info["schedule_id"],
            schedule_name=info.get("schedule_name"),
            start_time=info["start_time"],
            expected_instances=info["expected_instances"],
            existing_instances=info["existing_instances"],
            coverage_percentage=info["coverage_percentage"],
            has_gaps=info["has_gaps"],
            next_missing_dates=info["next_missing_dates"]
        )
        for info in report_dict["schedules"]
    ]

    summary = report_dict["summary"]
    return CoverageReport(
        start=date.fromisoformat(report_dict["analysis_period"]["start"]),
        end=date.fromisoformat(report_dict["analysis_period"]["end"]),
        days=report_dict["analysis_period"]["days"],
        schedules=schedules,
        summary=CoverageSummary(
            total_schedules=summary["total_schedules"],
            schedules_with_gaps=summary["schedules_with_gaps"],
            total_expected_instances=summary["total_expected_instances"],
            total_existing_instances=summary["total_existing_instances"],
            overall_coverage_percentage=summary["overall_coverage_percentage"]
        )
    )
