"""Tests for the maintenance scheduling calculator."""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from fieldservice.common.models import Frequency, MaintenanceSchedule
from fieldservice.maintenance.calculator import (
    add_months,
    advance_date,
    classify_schedule,
    days_until,
    on_log_recorded,
)
from fieldservice.maintenance.models import ScheduleBucket, Severity

TODAY = date(2024, 6, 15)


class TestAdvanceDate:
    """Next due date per frequency."""

    @pytest.mark.parametrize("reference", [
        date(2024, 6, 15),
        date(2024, 1, 28),    # month boundary
        date(2024, 12, 28),   # year boundary
        date(2024, 2, 25),    # leap February
    ])
    def test_weekly_adds_seven_days(self, reference):
        assert advance_date(reference, "weekly") == reference + timedelta(days=7)

    def test_weekly_across_year(self):
        assert advance_date(date(2024, 12, 28), Frequency.WEEKLY) == date(2025, 1, 4)

    def test_monthly_same_day(self):
        assert advance_date(date(2024, 3, 15), "monthly") == date(2024, 4, 15)

    def test_monthly_december_rolls_year(self):
        assert advance_date(date(2024, 12, 15), "monthly") == date(2025, 1, 15)

    def test_monthly_overflow_rolls_into_march(self):
        # Day 31 does not exist in February: the surplus days carry over.
        assert advance_date(date(2024, 1, 31), "monthly") == date(2024, 3, 2)
        assert advance_date(date(2023, 1, 31), "monthly") == date(2023, 3, 3)

    def test_quarterly(self):
        assert advance_date(date(2024, 3, 1), "quarterly") == date(2024, 6, 1)

    def test_biannual(self):
        assert advance_date(date(2024, 1, 10), "biannual") == date(2024, 7, 10)
        assert advance_date(date(2024, 8, 31), "biannual") == date(2025, 3, 3)

    def test_annual(self):
        assert advance_date(date(2024, 6, 15), "annual") == date(2025, 6, 15)

    def test_annual_from_leap_day(self):
        assert advance_date(date(2024, 2, 29), "annual") == date(2025, 3, 1)

    @pytest.mark.parametrize("frequency", ["fortnightly", "", None, "MONTHLY-ish", 42])
    def test_unknown_frequency_is_monthly(self, frequency):
        assert advance_date(date(2024, 3, 15), frequency) == date(2024, 4, 15)

    @pytest.mark.parametrize("frequency", ["Weekly", " weekly ", " ANNUAL ", "Quarterly"])
    def test_frequency_match_is_exact(self, frequency):
        assert advance_date(date(2024, 3, 15), frequency) == date(2024, 4, 15)

    def test_add_months_twelve_is_one_year(self):
        assert add_months(date(2023, 5, 20), 12) == date(2024, 5, 20)


class TestClassifySchedule:
    """Status label and severity relative to today."""

    def test_not_scheduled(self):
        status = classify_schedule(None, TODAY)
        assert status.label == "Not scheduled"
        assert status.severity is Severity.NEUTRAL
        assert status.days_until_due is None
        assert status.bucket is ScheduleBucket.UNSCHEDULED

    def test_overdue(self):
        status = classify_schedule(TODAY - timedelta(days=5), TODAY)
        assert status.label == "Overdue by 5 days"
        assert status.severity is Severity.CRITICAL
        assert status.days_until_due == -5
        assert status.bucket is ScheduleBucket.OVERDUE

    def test_due_today(self):
        status = classify_schedule(TODAY, TODAY)
        assert status.label == "Due today"
        assert status.severity is Severity.WARNING
        assert status.bucket is ScheduleBucket.UPCOMING

    def test_due_tomorrow(self):
        status = classify_schedule(TODAY + timedelta(days=1), TODAY)
        assert status.label == "Due tomorrow"
        assert status.severity is Severity.WARNING

    @pytest.mark.parametrize("days", [2, 3, 6])
    def test_due_in_days(self, days):
        status = classify_schedule(TODAY + timedelta(days=days), TODAY)
        assert status.label == f"Due in {days} days"
        assert status.severity is Severity.WARNING
        assert status.bucket is ScheduleBucket.UPCOMING

    @pytest.mark.parametrize("days, label", [
        (7, "Due in 1 weeks"),
        (10, "Due in 1 weeks"),
        (14, "Due in 2 weeks"),
        (29, "Due in 4 weeks"),
    ])
    def test_due_in_weeks(self, days, label):
        status = classify_schedule(TODAY + timedelta(days=days), TODAY)
        assert status.label == label
        assert status.severity is Severity.ON_TRACK
        assert status.bucket is ScheduleBucket.ON_TRACK

    @pytest.mark.parametrize("days, label", [
        (30, "Due in 1 months"),
        (59, "Due in 1 months"),
        (65, "Due in 2 months"),
        (400, "Due in 13 months"),
    ])
    def test_due_in_months(self, days, label):
        status = classify_schedule(TODAY + timedelta(days=days), TODAY)
        assert status.label == label
        assert status.severity is Severity.ON_TRACK

    def test_partial_day_rounds_up(self):
        now = datetime(2024, 6, 15, 9, 30)
        assert classify_schedule(date(2024, 6, 16), now).label == "Due tomorrow"
        assert classify_schedule(date(2024, 6, 15), now).label == "Due today"
        assert classify_schedule(date(2024, 6, 14), now).label == "Overdue by 1 days"

    def test_identical_inputs_identical_output(self):
        due = TODAY + timedelta(days=3)
        assert classify_schedule(due, TODAY) == classify_schedule(due, TODAY)

    def test_to_dict(self):
        d = classify_schedule(TODAY - timedelta(days=2), TODAY).to_dict()
        assert d == {
            "label": "Overdue by 2 days",
            "severity": "critical",
            "days_until_due": -2,
            "bucket": "overdue",
        }


class TestDaysUntil:
    def test_dates(self):
        assert days_until(date(2024, 7, 1), TODAY) == 16

    def test_datetime_exact_midnight(self):
        assert days_until(date(2024, 6, 20), datetime(2024, 6, 15)) == 5


class TestOnLogRecorded:
    """Schedule after a visit is logged."""

    def test_quarterly_never_performed(self):
        schedule = MaintenanceSchedule(
            id="s1", equipment_id="e1", task_id="t1", frequency="quarterly",
        )
        updated = on_log_recorded(schedule, date(2024, 3, 1))
        assert updated.last_performed_date == date(2024, 3, 1)
        assert updated.next_due_date == date(2024, 6, 1)

    def test_input_not_mutated(self):
        schedule = MaintenanceSchedule(
            id="s1", equipment_id="e1", task_id="t1", frequency="weekly",
            next_due_date=date(2024, 1, 1),
        )
        on_log_recorded(schedule, date(2024, 3, 1))
        assert schedule.last_performed_date is None
        assert schedule.next_due_date == date(2024, 1, 1)

    def test_malformed_frequency_falls_back_to_monthly(self):
        schedule = MaintenanceSchedule(
            id="s1", equipment_id="e1", task_id="t1", frequency="every-so-often",
        )
        updated = on_log_recorded(schedule, date(2024, 3, 1))
        assert updated.next_due_date == date(2024, 4, 1)
        assert updated.frequency == "every-so-often"

    def test_keeps_identity(self):
        schedule = MaintenanceSchedule(
            id="s1", company_id="acme", equipment_id="e1", task_id="t1",
        )
        updated = on_log_recorded(schedule, date(2024, 3, 1))
        assert (updated.id, updated.company_id, updated.equipment_id) == ("s1", "acme", "e1")
