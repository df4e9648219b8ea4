"""Maintenance scheduling calculator.

Pure functions for recurring maintenance:

- advance_date: next due date from a reference date and a frequency
- classify_schedule: human-readable status of a due date relative to today
- on_log_recorded: schedule after a visit has been logged

Nothing here reads the clock. Callers pass ``today`` explicitly.

Month arithmetic keeps the day-of-month and lets overflow roll into the
following month (2024-01-31 + 1 month -> 2024-03-02), matching how the
dashboard has always stored next due dates.
"""

from __future__ import annotations

import logging
import math
from datetime import date, datetime, time, timedelta
from typing import Optional, Union

from ..common.models import Frequency, MaintenanceSchedule
from .models import ScheduleStatus, Severity

logger = logging.getLogger(__name__)

# Frequency -> (days, months)
_STEPS: dict[Frequency, tuple[int, int]] = {
    Frequency.WEEKLY: (7, 0),
    Frequency.MONTHLY: (0, 1),
    Frequency.QUARTERLY: (0, 3),
    Frequency.BIANNUAL: (0, 6),
    Frequency.ANNUAL: (0, 12),
}

UPCOMING_WINDOW_DAYS = 7
WEEKS_WINDOW_DAYS = 30


def add_months(reference: date, months: int) -> date:
    """Add calendar months, rolling day overflow into the next month.

    >>> add_months(date(2024, 1, 31), 1)
    datetime.date(2024, 3, 2)
    """
    month_index = reference.month - 1 + months
    year = reference.year + month_index // 12
    month = month_index % 12 + 1
    return date(year, month, 1) + timedelta(days=reference.day - 1)


def advance_date(
    reference_date: date,
    frequency: Union[Frequency, str, None],
) -> date:
    """Compute the next due date.

    Args:
        reference_date: Date the task was last performed (or scheduled from).
        frequency: One of the Frequency values. Anything else is monthly.

    Returns:
        The next due date.
    """
    freq = Frequency.coerce(frequency)
    days, months = _STEPS.get(freq, _STEPS[Frequency.MONTHLY])
    if months:
        return add_months(reference_date, months)
    return reference_date + timedelta(days=days)


def days_until(due_date: date, today: Union[date, datetime]) -> int:
    """Whole days from today to due_date; partial days round up."""
    if isinstance(today, datetime):
        due = datetime.combine(due_date, time.min, tzinfo=today.tzinfo)
        return math.ceil((due - today).total_seconds() / 86400)
    return (due_date - today).days


def classify_schedule(
    next_due_date: Optional[date],
    today: Union[date, datetime],
) -> ScheduleStatus:
    """Classify a due date relative to today.

    Args:
        next_due_date: The schedule's next due date, or None.
        today: Current date (or datetime) supplied by the caller.

    Returns:
        ScheduleStatus with label, severity and day offset.
    """
    if next_due_date is None:
        return ScheduleStatus(label="Not scheduled", severity=Severity.NEUTRAL)

    d = days_until(next_due_date, today)

    if d < 0:
        return ScheduleStatus(f"Overdue by {abs(d)} days", Severity.CRITICAL, d)
    if d == 0:
        return ScheduleStatus("Due today", Severity.WARNING, d)
    if d == 1:
        return ScheduleStatus("Due tomorrow", Severity.WARNING, d)
    if d < UPCOMING_WINDOW_DAYS:
        return ScheduleStatus(f"Due in {d} days", Severity.WARNING, d)
    if d < WEEKS_WINDOW_DAYS:
        return ScheduleStatus(f"Due in {d // 7} weeks", Severity.ON_TRACK, d)
    return ScheduleStatus(f"Due in {d // 30} months", Severity.ON_TRACK, d)


def on_log_recorded(
    schedule: MaintenanceSchedule,
    performed_date: date,
) -> MaintenanceSchedule:
    """Return the schedule as it must be stored after a visit on performed_date.

    The input schedule is left untouched.
    """
    next_due = advance_date(performed_date, schedule.frequency)
    logger.debug(
        "Schedule %s (%s): performed %s, next due %s",
        schedule.id or "<new>", schedule.frequency, performed_date, next_due,
    )
    return schedule.model_copy(
        update={
            "last_performed_date": performed_date,
            "next_due_date": next_due,
        }
    )
