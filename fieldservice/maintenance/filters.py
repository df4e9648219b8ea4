"""Search and status filters for the maintenance list views.

Schedule filters derive overdue/upcoming from ``classify_schedule`` so the
list views and the status labels always agree on boundaries.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Iterable, Optional, Union

from ..common.models import (
    Equipment,
    MaintenanceLog,
    MaintenanceSchedule,
    MaintenanceTask,
)
from .calculator import classify_schedule
from .models import ScheduleBucket

ALL = "all"


class ScheduleFilter(str, Enum):
    ALL = "all"
    OVERDUE = "overdue"
    UPCOMING = "upcoming"
    COMPLETED = "completed"


def _contains(value: Optional[str], term: str) -> bool:
    return bool(value) and term in value.lower()


def matches_schedule_filter(
    schedule: MaintenanceSchedule,
    status_filter: Union[ScheduleFilter, str],
    today: Union[date, datetime],
) -> bool:
    """Whether a schedule belongs in the given list filter.

    "completed" means the task has been performed at least once, regardless
    of its current due date. Unknown filters match everything.
    """
    value = getattr(status_filter, "value", status_filter)
    if value == ScheduleFilter.COMPLETED.value:
        return schedule.last_performed_date is not None
    if value == ScheduleFilter.OVERDUE.value:
        bucket = classify_schedule(schedule.next_due_date, today).bucket
        return bucket is ScheduleBucket.OVERDUE
    if value == ScheduleFilter.UPCOMING.value:
        bucket = classify_schedule(schedule.next_due_date, today).bucket
        return bucket is ScheduleBucket.UPCOMING
    return True


def filter_schedules(
    schedules: Iterable[MaintenanceSchedule],
    today: Union[date, datetime],
    status_filter: Union[ScheduleFilter, str] = ScheduleFilter.ALL,
    search: str = "",
    equipment_names: Optional[dict[str, str]] = None,
    task_names: Optional[dict[str, str]] = None,
) -> list[MaintenanceSchedule]:
    """Filter schedules by equipment/task name search and status filter."""
    term = search.strip().lower()
    equipment_names = equipment_names or {}
    task_names = task_names or {}

    result = []
    for schedule in schedules:
        if term and not (
            _contains(equipment_names.get(schedule.equipment_id), term)
            or _contains(task_names.get(schedule.task_id), term)
        ):
            continue
        if matches_schedule_filter(schedule, status_filter, today):
            result.append(schedule)
    return result


def sort_schedules_by_due(
    schedules: Iterable[MaintenanceSchedule],
) -> list[MaintenanceSchedule]:
    """Earliest due first; schedules without a due date go last."""
    return sorted(
        schedules,
        key=lambda s: (s.next_due_date is None, s.next_due_date or date.max),
    )


def filter_equipment(
    equipment: Iterable[Equipment],
    search: str = "",
    status: str = ALL,
) -> list[Equipment]:
    """Search name/model/serial/unit number; optionally restrict by status."""
    term = search.strip().lower()
    result = []
    for item in equipment:
        if term and not any(
            _contains(v, term)
            for v in (item.name, item.model_number, item.serial_number, item.unit_number)
        ):
            continue
        if status != ALL and item.status.value != status:
            continue
        result.append(item)
    return result


def filter_tasks(
    tasks: Iterable[MaintenanceTask],
    search: str = "",
    status: str = ALL,
) -> list[MaintenanceTask]:
    """Search name/description; status is "all", "active" or "inactive"."""
    term = search.strip().lower()
    result = []
    for task in tasks:
        if term and not (_contains(task.name, term) or _contains(task.description, term)):
            continue
        if status == "active" and not task.is_active:
            continue
        if status == "inactive" and task.is_active:
            continue
        result.append(task)
    return result


def filter_logs(
    logs: Iterable[MaintenanceLog],
    search: str = "",
    status: str = ALL,
    equipment_names: Optional[dict[str, str]] = None,
    task_names: Optional[dict[str, str]] = None,
) -> list[MaintenanceLog]:
    """Search equipment name, task name and notes; optionally by log status."""
    term = search.strip().lower()
    equipment_names = equipment_names or {}
    task_names = task_names or {}

    result = []
    for log in logs:
        if term and not (
            _contains(equipment_names.get(log.equipment_id), term)
            or _contains(task_names.get(log.task_id), term)
            or _contains(log.notes, term)
        ):
            continue
        if status != ALL and log.status.value != status:
            continue
        result.append(log)
    return result
