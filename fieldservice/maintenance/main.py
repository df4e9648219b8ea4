"""CLI entry point for the maintenance scheduler.

Usage:
    python -m fieldservice.maintenance.main init-db
    python -m fieldservice.maintenance.main schedules --filter overdue
    python -m fieldservice.maintenance.main schedules --search "rooftop" --output schedules.json
    python -m fieldservice.maintenance.main log --schedule-id <id> --date 2024-03-01
    python -m fieldservice.maintenance.main advance --date 2024-01-31 --frequency monthly
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date

from ..common.config import Settings
from ..common.database import init_db
from ..common.logging import setup_logging
from ..common.models import Frequency, LogStatus, MaintenanceLog
from .calculator import advance_date
from .filters import ScheduleFilter
from .repository import (
    MaintenanceRepository,
    PartialWriteError,
    RepositoryError,
    SQLiteMaintenanceRepository,
)
from .service import MaintenanceService

setup_logging()
logger = logging.getLogger(__name__)


def create_repository(settings: Settings, db_path: str | None = None) -> MaintenanceRepository:
    """Build the repository selected by settings.backend."""
    if settings.backend == "supabase":
        from .supabase_repository import SupabaseMaintenanceRepository

        return SupabaseMaintenanceRepository(company_id=settings.company_id, settings=settings)
    return SQLiteMaintenanceRepository(
        db_path or settings.database.abs_path,
        company_id=settings.company_id,
    )


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"not an ISO date: {value}") from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Maintenance Scheduler")
    parser.add_argument("--config", type=str, help="Path to settings YAML")
    parser.add_argument("--db", type=str, help="SQLite database path (sqlite backend)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="Create the SQLite schema")

    p_list = sub.add_parser("schedules", help="List schedules with their status")
    p_list.add_argument(
        "--filter",
        choices=[f.value for f in ScheduleFilter],
        default=ScheduleFilter.ALL.value,
    )
    p_list.add_argument("--search", type=str, default="")
    p_list.add_argument("--today", type=_parse_date, help="Override today's date")
    p_list.add_argument("--output", type=str, help="Output JSON file path")

    p_log = sub.add_parser("log", help="Record a maintenance visit")
    p_log.add_argument("--schedule-id", required=True)
    p_log.add_argument("--date", type=_parse_date, default=date.today())
    p_log.add_argument("--performed-by", type=str)
    p_log.add_argument("--notes", type=str)
    p_log.add_argument(
        "--status",
        choices=[s.value for s in LogStatus],
        default=LogStatus.COMPLETED.value,
    )

    p_adv = sub.add_parser("advance", help="Print the next due date")
    p_adv.add_argument("--date", type=_parse_date, required=True)
    p_adv.add_argument("--frequency", type=str, default=Frequency.MONTHLY.value)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    settings = Settings.load(args.config)

    if args.command == "advance":
        print(advance_date(args.date, args.frequency).isoformat())
        return 0

    if args.command == "init-db":
        init_db(args.db or settings.database.abs_path)
        return 0

    try:
        service = MaintenanceService(create_repository(settings, args.db))

        if args.command == "schedules":
            rows = service.list_schedules(args.filter, args.search, today=args.today)
            for row in rows:
                logger.info(
                    "  %s / %s (%s): %s",
                    row.equipment_name or row.schedule.equipment_id,
                    row.task_name or row.schedule.task_id,
                    row.schedule.frequency,
                    row.status.label,
                )
            logger.info("%d schedules (%s)", len(rows), args.filter)
            if args.output:
                with open(args.output, "w", encoding="utf-8") as f:
                    json.dump([r.to_dict() for r in rows], f, ensure_ascii=False, indent=2)
                logger.info("Output written to %s", args.output)

        elif args.command == "log":
            schedule = service.repository.get_schedule(args.schedule_id)
            if schedule is None:
                parser.error(f"schedule not found: {args.schedule_id}")
            stored = service.record_log(MaintenanceLog(
                equipment_id=schedule.equipment_id,
                task_id=schedule.task_id,
                schedule_id=schedule.id,
                performed_by=args.performed_by,
                performed_date=args.date,
                notes=args.notes,
                status=args.status,
            ))
            logger.info("Recorded log %s", stored.id)

    except PartialWriteError as e:
        logger.error("Partial write: log %s stored, schedule %s stale", e.log.id, e.schedule_id)
        return 2
    except (RepositoryError, ValueError) as e:
        logger.error("%s", e)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
