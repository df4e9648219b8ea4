"""Maintenance workflows on top of a repository.

The service owns the one piece of business logic that runs with a write:
recording a visit moves its schedule forward. Status classification uses
an injected clock so list views are reproducible in tests.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Optional, Union

from ..common.models import (
    Equipment,
    MaintenanceLog,
    MaintenanceSchedule,
    MaintenanceTask,
)
from .calculator import advance_date, classify_schedule, on_log_recorded
from .filters import (
    ScheduleFilter,
    filter_equipment,
    filter_logs,
    filter_schedules,
    filter_tasks,
    sort_schedules_by_due,
)
from .models import ScheduleRow, ScheduleSummary
from .repository import MaintenanceRepository

logger = logging.getLogger(__name__)

Today = Union[date, datetime]


class MaintenanceService:
    """Equipment, task, schedule and log workflows for one company.

    Usage:
        service = MaintenanceService(SQLiteMaintenanceRepository(path))
        service.record_log(MaintenanceLog(..., schedule_id=schedule.id))
        rows = service.list_schedules(status_filter="overdue")
    """

    def __init__(
        self,
        repository: MaintenanceRepository,
        clock: Callable[[], Today] = date.today,
    ) -> None:
        self.repository = repository
        self._clock = clock

    def today(self) -> Today:
        return self._clock()

    # --- equipment / tasks ---

    def save_equipment(self, equipment: Equipment) -> Equipment:
        return self.repository.save_equipment(equipment)

    def delete_equipment(self, equipment_id: str) -> None:
        logger.info("Deleting equipment %s and its schedules/logs", equipment_id)
        self.repository.delete_equipment(equipment_id)

    def search_equipment(self, search: str = "", status: str = "all") -> list[Equipment]:
        return filter_equipment(self.repository.list_equipment(), search, status)

    def save_task(self, task: MaintenanceTask) -> MaintenanceTask:
        return self.repository.save_task(task)

    def delete_task(self, task_id: str) -> None:
        logger.info("Deleting task %s and its schedules/logs", task_id)
        self.repository.delete_task(task_id)

    def search_tasks(self, search: str = "", status: str = "all") -> list[MaintenanceTask]:
        return filter_tasks(self.repository.list_tasks(), search, status)

    # --- schedules ---

    def save_schedule(self, schedule: MaintenanceSchedule) -> MaintenanceSchedule:
        """Create or edit a schedule.

        A schedule saved with a last performed date but no next due date gets
        one computed from its frequency.
        """
        if schedule.next_due_date is None and schedule.last_performed_date is not None:
            schedule = schedule.model_copy(update={
                "next_due_date": advance_date(schedule.last_performed_date, schedule.frequency),
            })
        return self.repository.save_schedule(schedule)

    def delete_schedule(self, schedule_id: str) -> None:
        self.repository.delete_schedule(schedule_id)

    def _names(self) -> tuple[dict[str, str], dict[str, str]]:
        equipment = {e.id: e.name for e in self.repository.list_equipment()}
        tasks = {t.id: t.name for t in self.repository.list_tasks()}
        return equipment, tasks

    def list_schedules(
        self,
        status_filter: Union[ScheduleFilter, str] = ScheduleFilter.ALL,
        search: str = "",
        today: Optional[Today] = None,
    ) -> list[ScheduleRow]:
        """Schedules with their status, filtered and ordered by due date."""
        today = today or self.today()
        equipment_names, task_names = self._names()
        schedules = filter_schedules(
            self.repository.list_schedules(),
            today,
            status_filter=status_filter,
            search=search,
            equipment_names=equipment_names,
            task_names=task_names,
        )
        return [
            ScheduleRow(
                schedule=s,
                status=classify_schedule(s.next_due_date, today),
                equipment_name=equipment_names.get(s.equipment_id, ""),
                task_name=task_names.get(s.task_id, ""),
            )
            for s in sort_schedules_by_due(schedules)
        ]

    def summary(self, today: Optional[Today] = None) -> ScheduleSummary:
        """Count schedules per status bucket."""
        today = today or self.today()
        summary = ScheduleSummary()
        for schedule in self.repository.list_schedules():
            bucket = classify_schedule(schedule.next_due_date, today).bucket
            summary.counts[bucket.value] += 1
            if schedule.last_performed_date is not None:
                summary.completed += 1
        return summary

    # --- logs ---

    def record_log(self, log: MaintenanceLog) -> MaintenanceLog:
        """Record a new visit and move its schedule forward.

        Raises:
            ValueError: log.schedule_id names no schedule.
            RepositoryError: nothing was stored.
            PartialWriteError: the log was stored but the schedule was not
                updated (only possible on stores without transactions).
        """
        if log.id:
            raise ValueError("record_log creates new logs; use update_log for edits")

        schedule = None
        if log.schedule_id:
            current = self.repository.get_schedule(log.schedule_id)
            if current is None:
                raise ValueError(f"Schedule not found: {log.schedule_id}")
            schedule = on_log_recorded(current, log.performed_date)
            logger.info(
                "Schedule %s: %s visit on %s, next due %s",
                current.id, current.frequency,
                log.performed_date, schedule.next_due_date,
            )

        return self.repository.record_log(log, schedule)

    def update_log(self, log: MaintenanceLog) -> MaintenanceLog:
        """Edit an existing log. Schedules are not recomputed on edits."""
        if not log.id:
            raise ValueError("update_log requires a stored log")
        return self.repository.save_log(log)

    def delete_log(self, log_id: str) -> None:
        self.repository.delete_log(log_id)

    def search_logs(self, search: str = "", status: str = "all") -> list[MaintenanceLog]:
        equipment_names, task_names = self._names()
        return filter_logs(
            self.repository.list_logs(),
            search,
            status,
            equipment_names=equipment_names,
            task_names=task_names,
        )
