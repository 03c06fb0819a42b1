"""
GraphQL mutations for Class Schedules
"""
import json
import logging
import strawberry
from strawberry.types import Info

from gymadmin.crud.classScheduleCrud import (
    create_class_schedule,
    update_class_schedule,
    delete_class_schedule,
    get_class_schedule_by_id
)
from gymadmin.domain.errors import GymAdminError
from gymadmin.services.schedule_materializer import ScheduleMaterializerService
from .types import (
    ClassSchedule,
    ClassScheduleResponse,
    MaterializationResponse,
    MaintenanceResponse,
    CreateClassScheduleInput,
    UpdateClassScheduleInput
)

logger = logging.getLogger(__name__)


@strawberry.type
class ClassScheduleMutations:
    """Class Schedule mutations"""

    @strawberry.mutation
    async def create_class_schedule(
        self,
        info: Info,
        input: CreateClassScheduleInput
    ) -> ClassScheduleResponse:
        """Create a class schedule and optionally materialize its instances"""
        db = info.context.db

        try:
            schedule = await create_class_schedule(
                db=db,
                name=input.name,
                class_type=input.class_type,
                instructor_id=input.instructor_id,
                capacity=input.capacity,
                duration_min=input.duration_min,
                start_date=input.start_date,
                start_time=input.start_time,
                schedule_type=input.schedule_type,
                days_of_week=input.days_of_week,
                recurrence_end_date=input.recurrence_end_date,
                max_occurrences=input.max_occurrences,
                location=input.location,
                notes=input.notes
            )

            instances_created = 0
            if input.materialize:
                stats = await ScheduleMaterializerService(db).materialize_schedule(schedule.id)
                instances_created = stats["instances_created"]

            return ClassScheduleResponse(
                success=True,
                schedule=ClassSchedule.from_model(schedule),
                message="Class schedule created successfully",
                instances_created=instances_created
            )

        except GymAdminError as e:
            return ClassScheduleResponse(
                success=False,
                schedule=None,
                message=e.message,
                error_code=e.code
            )
        except Exception as e:
            logger.error("Error creating class schedule: %s", e)
            return ClassScheduleResponse(
                success=False,
                schedule=None,
                message=f"Error creating class schedule: {str(e)}"
            )

    @strawberry.mutation
    async def update_class_schedule(
        self,
        info: Info,
        input: UpdateClassScheduleInput
    ) -> ClassScheduleResponse:
        """Update a schedule; already materialized instances keep their values"""
        db = info.context.db

        changes = {
            field: value
            for field, value in vars(input).items()
            if field != "schedule_id" and value is not strawberry.UNSET
        }

        try:
            schedule = await update_class_schedule(db, input.schedule_id, **changes)

            if schedule:
                return ClassScheduleResponse(
                    success=True,
                    schedule=ClassSchedule.from_model(schedule),
                    message="Class schedule updated successfully"
                )
            else:
                return ClassScheduleResponse(
                    success=False,
                    schedule=None,
                    message="Class schedule not found",
                    error_code="not_found"
                )

        except GymAdminError as e:
            return ClassScheduleResponse(
                success=False,
                schedule=None,
                message=e.message,
                error_code=e.code
            )
        except Exception as e:
            return ClassScheduleResponse(
                success=False,
                schedule=None,
                message=f"Error updating class schedule: {str(e)}"
            )

    @strawberry.mutation
    async def delete_class_schedule(
        self,
        info: Info,
        schedule_id: int
    ) -> ClassScheduleResponse:
        """Delete a schedule together with its instances"""
        db = info.context.db

        try:
            deleted = await delete_class_schedule(db, schedule_id)
            return ClassScheduleResponse(
                success=deleted,
                schedule=None,
                message="Class schedule and associated instances deleted successfully"
                if deleted else "Class schedule not found",
                error_code=None if deleted else "not_found"
            )

        except Exception as e:
            return ClassScheduleResponse(
                success=False,
                schedule=None,
                message=f"Error deleting class schedule: {str(e)}"
            )

    @strawberry.mutation
    async def materialize_schedule(
        self,
        info: Info,
        schedule_id: int
    ) -> MaterializationResponse:
        """Create any instances the schedule is missing"""
        db = info.context.db

        try:
            if not await get_class_schedule_by_id(db, schedule_id):
                return MaterializationResponse(
                    success=False,
                    schedule_id=schedule_id,
                    instances_created=0,
                    message="Class schedule not found",
                    error_code="not_found"
                )

            stats = await ScheduleMaterializerService(db).materialize_schedule(schedule_id)

            return MaterializationResponse(
                success=True,
                schedule_id=schedule_id,
                instances_created=stats["instances_created"],
                message=f"Materialized {stats['instances_created']} instances successfully"
            )

        except GymAdminError as e:
            return MaterializationResponse(
                success=False,
                schedule_id=schedule_id,
                instances_created=0,
                message=e.message,
                error_code=e.code
            )
        except Exception as e:
            return MaterializationResponse(
                success=False,
                schedule_id=schedule_id,
                instances_created=0,
                message=f"Error materializing schedule: {str(e)}"
            )

    @strawberry.mutation
    async def maintain_schedule_window(
        self,
        info: Info,
        days_ahead: int = 365
    ) -> MaintenanceResponse:
        """Materialize all active schedules from today onwards"""
        db = info.context.db

        try:
            stats = await ScheduleMaterializerService(db).maintain_schedule_window(days_ahead=days_ahead)

            return MaintenanceResponse(
                success=True,
                maintenance_stats_json=json.dumps(stats),
                message="Schedule maintenance completed successfully"
            )

        except Exception as e:
            return MaintenanceResponse(
                success=False,
                maintenance_stats_json=None,
                message=f"Error in schedule maintenance: {str(e)}"
            )
