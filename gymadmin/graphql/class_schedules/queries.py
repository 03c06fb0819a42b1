"""
GraphQL queries for Class Schedules
"""
from typing import List, Optional
import strawberry
from strawberry.types import Info

from gymadmin.crud.classScheduleCrud import get_class_schedule_by_id, list_class_schedules
from gymadmin.domain.entities import RecurrencePattern
from gymadmin.domain.errors import GymAdminError
from gymadmin.domain.recurrence import expand
from gymadmin.services.schedule_materializer import ScheduleMaterializerService
from .types import (
    ClassSchedule,
    Occurrence,
    ExpandScheduleInput,
    ExpandScheduleResponse,
    CoverageReportResponse,
    convert_coverage_report
)


@strawberry.type
class ClassScheduleQueries:
    """Class Schedule queries"""

    @strawberry.field
    async def class_schedule(
        self,
        info: Info,
        schedule_id: int
    ) -> Optional[ClassSchedule]:
        """Get a single class schedule by ID"""
        db = info.context.db

        schedule = await get_class_schedule_by_id(db, schedule_id)
        if schedule:
            return ClassSchedule.from_model(schedule)
        return None

    @strawberry.field
    async def class_schedules(
        self,
        info: Info,
        include_inactive: bool = False,
        instructor_id: Optional[int] = None
    ) -> List[ClassSchedule]:
        """Get class schedules, active only unless asked otherwise"""
        db = info.context.db

        schedules = await list_class_schedules(
            db, include_inactive=include_inactive, instructor_id=instructor_id
        )
        return [ClassSchedule.from_model(schedule) for schedule in schedules]

    @strawberry.field
    def expand_schedule(self, input: ExpandScheduleInput) -> ExpandScheduleResponse:
        """Preview the occurrences a recurrence would produce"""
        try:
            pattern = RecurrencePattern(
                schedule_type=input.schedule_type,
                days_of_week=input.days_of_week or (),
                end_date=input.recurrence_end_date,
                max_occurrences=input.max_occurrences
            )
            occurrences = expand(pattern, input.start_date, input.start_time, input.horizon_days)

            return ExpandScheduleResponse(
                success=True,
                occurrences=[Occurrence(date=d, time=t) for d, t in occurrences],
                message=f"{len(occurrences)} occurrences"
            )

        except GymAdminError as e:
            return ExpandScheduleResponse(
                success=False,
                occurrences=[],
                message=e.message,
                error_code=e.code
            )
        except ValueError:
            return ExpandScheduleResponse(
                success=False,
                occurrences=[],
                message="Schedule type must be either single or recurring",
                error_code="invalid_input"
            )

    @strawberry.field
    async def schedule_coverage_report(
        self,
        info: Info,
        days_ahead: int = 56
    ) -> CoverageReportResponse:
        """Expected vs. materialized instances for every active schedule"""
        db = info.context.db

        try:
            report = await ScheduleMaterializerService(db).get_coverage_report(days_ahead=days_ahead)

            return CoverageReportResponse(
                success=True,
                report=convert_coverage_report(report),
                message="Coverage report generated successfully"
            )

        except Exception as e:
            return CoverageReportResponse(
                success=False,
                report=None,
                message=f"Error generating coverage report: {str(e)}"
            )
