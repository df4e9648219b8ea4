"""Data models for maintenance schedule classification."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..common.models import MaintenanceSchedule


class Severity(str, Enum):
    """Presentation tier of a schedule status."""
    CRITICAL = "critical"
    WARNING = "warning"
    ON_TRACK = "on_track"
    NEUTRAL = "neutral"


class ScheduleBucket(str, Enum):
    """Filter/sort bucket derived from a schedule status."""
    OVERDUE = "overdue"
    UPCOMING = "upcoming"
    ON_TRACK = "on_track"
    UNSCHEDULED = "unscheduled"


@dataclass(frozen=True)
class ScheduleStatus:
    """Classification of one schedule relative to a given day.

    ``days_until_due`` is None when the schedule has no due date.
    """

    label: str
    severity: Severity
    days_until_due: Optional[int] = None

    @property
    def bucket(self) -> ScheduleBucket:
        if self.days_until_due is None:
            return ScheduleBucket.UNSCHEDULED
        if self.severity is Severity.CRITICAL:
            return ScheduleBucket.OVERDUE
        if self.severity is Severity.WARNING:
            return ScheduleBucket.UPCOMING
        return ScheduleBucket.ON_TRACK

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "severity": self.severity.value,
            "days_until_due": self.days_until_due,
            "bucket": self.bucket.value,
        }


@dataclass
class ScheduleRow:
    """A schedule paired with its status and display names for list views."""

    schedule: MaintenanceSchedule
    status: ScheduleStatus
    equipment_name: str = ""
    task_name: str = ""

    def to_dict(self) -> dict:
        return {
            **self.schedule.model_dump(mode="json"),
            "equipment_name": self.equipment_name,
            "task_name": self.task_name,
            "status": self.status.to_dict(),
        }


@dataclass
class ScheduleSummary:
    """Counts of schedules per bucket for a given day."""

    counts: dict[str, int] = field(
        default_factory=lambda: {b.value: 0 for b in ScheduleBucket}
    )
    completed: int = 0

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def to_dict(self) -> dict:
        return {"total": self.total, "completed": self.completed, **self.counts}
