"""
GraphQL queries for Class Instances
"""
from typing import List, Optional
import strawberry
from strawberry.types import Info

from gymadmin.crud.classInstanceCrud import (
    get_class_instance_by_id,
    get_instances_by_date_range,
    get_class_stats
)
from gymadmin.crud.classScheduleCrud import get_instances_by_schedule
from .types import (
    ClassInstance,
    ClassStatsResponse,
    InstanceDateRangeInput,
    convert_class_stats
)


@strawberry.type
class ClassInstanceQueries:
    """Class Instance queries"""

    @strawberry.field
    async def class_instance(self, info: Info, instance_id: int) -> Optional[ClassInstance]:
        db = info.context.db

        instance = await get_class_instance_by_id(db, instance_id)
        if instance:
            return ClassInstance.from_model(instance)
        return None

    @strawberry.field
    async def class_instances(self, info: Info, input: InstanceDateRangeInput) -> List[ClassInstance]:
        """Get instances within a date range with optional filters"""
        db = info.context.db

        instances = await get_instances_by_date_range(
            db,
            start_date=input.start_date,
            end_date=input.end_date,
            status=input.status,
            instructor_id=input.instructor_id
        )
        return [ClassInstance.from_model(instance) for instance in instances]

    @strawberry.field
    async def schedule_instances(self, info: Info, schedule_id: int) -> List[ClassInstance]:
        """Get every materialized instance of a schedule"""
        db = info.context.db

        instances = await get_instances_by_schedule(db, schedule_id)
        return [ClassInstance.from_model(instance) for instance in instances]

    @strawberry.field
    async def class_stats(self, info: Info) -> ClassStatsResponse:
        db = info.context.db

        try:
            stats = await get_class_stats(db)
            return ClassStatsResponse(
                success=True,
                stats=convert_class_stats(stats),
                message="Class statistics generated successfully"
            )
        except Exception as e:
            return ClassStatsResponse(
                success=False,
                stats=None,
                message=f"Error generating class statistics: {str(e)}"
            )
