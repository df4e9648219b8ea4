"""Maintenance Scheduling Module - due dates, status and visit logging."""

from .calculator import advance_date, classify_schedule, on_log_recorded
from .filters import ScheduleFilter, matches_schedule_filter
from .models import ScheduleBucket, ScheduleStatus, Severity
from .repository import (
    MaintenanceRepository,
    PartialWriteError,
    RepositoryError,
    SQLiteMaintenanceRepository,
)
from .service import MaintenanceService

__all__ = [
    "advance_date",
    "classify_schedule",
    "on_log_recorded",
    "ScheduleFilter",
    "matches_schedule_filter",
    "ScheduleBucket",
    "ScheduleStatus",
    "Severity",
    "MaintenanceRepository",
    "PartialWriteError",
    "RepositoryError",
    "SQLiteMaintenanceRepository",
    "MaintenanceService",
]
