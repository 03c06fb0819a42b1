"""
Schedule Materializer Service
Automates the creation and maintenance of class instances from schedules
"""
from datetime import datetime, date, timedelta, timezone
from typing import Dict, Any, Optional
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from gymadmin.core.settings import get_app_config
from gymadmin.crud.classScheduleCrud import (
    get_schedule_coverage,
    list_class_schedules,
    materialize_schedule_instances
)
from gymadmin.domain.errors import GymAdminError
from gymadmin.domain.recurrence import MAX_HORIZON_DAYS

logger = logging.getLogger(__name__)


class ScheduleMaterializerService:
    """Service to manage instance materialization for class schedules"""

    def __init__(self, db: AsyncSession, horizon_days: Optional[int] = None):
        self.db = db
        self.horizon_days = horizon_days or get_app_config()["materialization_horizon_days"]

    async def materialize_schedule(
        self,
        schedule_id: int,
        not_before: Optional[date] = None
    ) -> Dict[str, Any]:
        """
        Materialize every missing instance for one schedule

        Args:
            schedule_id: Schedule to materialize
            not_before: Skip occurrences before this date

        Returns:
            Statistics about the created instances
        """
        logger.info(f"Materializing schedule {schedule_id} horizon={self.horizon_days} days")

        created = await materialize_schedule_instances(
            self.db, schedule_id, horizon_days=self.horizon_days, not_before=not_before
        )

        return {
            "schedule_id": schedule_id,
            "instances_created": len(created),
            "instances": [
                {
                    "id": instance.id,
                    "date": instance.date.isoformat(),
                    "start_time": instance.start_time,
                    "capacity": instance.capacity
                }
                for instance in created
            ]
        }

    async def maintain_schedule_window(
        self,
        days_ahead: Optional[int] = None,
        today: Optional[date] = None
    ) -> Dict[str, Any]:
        """
        Maintenance job keeping every active schedule materialized from today onwards

        Args:
            days_ahead: Horizon override for this run
            today: Reference date (defaults to today)

        Returns:
            Maintenance statistics
        """
        today = today or date.today()
        horizon = days_ahead or self.horizon_days
        logger.info(f"Starting schedule maintenance for {horizon} days ahead of {today}")

        schedules = await list_class_schedules(self.db)

        stats = {
            "maintenance_date": datetime.now(timezone.utc).isoformat(),
            "schedules_processed": 0,
            "instances_created": 0,
            "schedules_with_instances": [],
            "failed_schedules": []
        }

        for schedule in schedules:
            # Horizon counts from the schedule's anchor; keep today's window covered
            schedule_horizon = min(max(0, (today - schedule.start_date).days) + horizon, MAX_HORIZON_DAYS)
            try:
                created = await materialize_schedule_instances(
                    self.db, schedule.id, horizon_days=schedule_horizon, not_before=today
                )
            except GymAdminError as e:
                logger.error(f"Materialization failed for schedule {schedule.id}: {e.message}")
                stats["failed_schedules"].append({
                    "schedule_id": schedule.id,
                    "error_code": e.code,
                    "message": e.message
                })
                continue

            stats["schedules_processed"] += 1
            stats["instances_created"] += len(created)
            if created:
                stats["schedules_with_instances"].append({
                    "schedule_id": schedule.id,
                    "schedule_name": schedule.name,
                    "instances_created": len(created)
                })

        stats["date_range"] = {
            "start": today.isoformat(),
            "end": (today + timedelta(days=horizon)).isoformat()
        }
        logger.info("Schedule maintenance completed: %s instances created", stats["instances_created"])
        return stats

    async def get_coverage_report(
        self,
        days_ahead: Optional[int] = None,
        today: Optional[date] = None
    ) -> Dict[str, Any]:
        """
        Report of instance coverage for all active schedules

        Returns:
            Coverage report showing gaps per schedule
        """
        today = today or date.today()
        horizon = days_ahead or self.horizon_days

        schedules = await list_class_schedules(self.db)
        report = {
            "analysis_period": {
                "start": today.isoformat(),
                "end": (today + timedelta(days=horizon)).isoformat(),
                "days": horizon
            },
            "schedules": [],
            "summary": {
                "total_schedules": len(schedules),
                "schedules_with_gaps": 0,
                "total_expected_instances": 0,
                "total_existing_instances": 0
            }
        }

        for schedule in schedules:
            schedule_horizon = min(max(0, (today - schedule.start_date).days) + horizon, MAX_HORIZON_DAYS)
            coverage = await get_schedule_coverage(
                self.db, schedule.id, horizon_days=schedule_horizon, not_before=today
            )
            if coverage is None:
                continue

            if coverage["has_gaps"]:
                report["summary"]["schedules_with_gaps"] += 1
            report["schedules"].append(coverage)
            report["summary"]["total_expected_instances"] += coverage["expected_instances"]
            report["summary"]["total_existing_instances"] += coverage["existing_instances"]

        total_expected = report["summary"]["total_expected_instances"]
        total_existing = report["summary"]["total_existing_instances"]
        report["summary"]["overall_coverage_percentage"] = (
            (total_existing / total_expected * 100) if total_expected > 0 else 100
        )

        return report

