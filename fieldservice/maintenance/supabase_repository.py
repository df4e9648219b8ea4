"""Supabase-backed maintenance repository.

Talks to the hosted project's PostgREST API through the ``supabase`` client.
Recording a log is a single call to the ``record_maintenance_log`` Postgres
function (see supabase/migrations/) so the log and the schedule update
commit together. With the RPC disabled the two writes are sent one after
the other and a failed second write surfaces as PartialWriteError.

Prerequisites:
    - SUPABASE_URL and SUPABASE_SERVICE_KEY in .env
    - supabase/migrations applied to the project

Usage:
    from fieldservice.maintenance.supabase_repository import SupabaseMaintenanceRepository

    repo = SupabaseMaintenanceRepository(company_id="...")
    schedules = repo.list_schedules()
"""

from __future__ import annotations

import logging
from typing import Optional

from ..common.config import Settings, get_supabase_credentials, settings as default_settings
from ..common.models import MaintenanceLog, MaintenanceSchedule
from .repository import (
    LOGS_TABLE,
    SCHEDULES_TABLE,
    MaintenanceRepository,
    PartialWriteError,
    RepositoryError,
    _ORDERING,
    _iso,
)

logger = logging.getLogger(__name__)


class SupabaseMaintenanceRepository(MaintenanceRepository):
    """Maintenance collections stored in a Supabase project."""

    def __init__(
        self,
        company_id: str = "",
        supabase_url: Optional[str] = None,
        supabase_key: Optional[str] = None,
        settings: Optional[Settings] = None,
        record_log_rpc: Optional[str] = None,
    ) -> None:
        # The service key bypasses row-level security; company_id is the only scope.
        if not company_id:
            raise ValueError("company_id must be set for the supabase backend")
        super().__init__(company_id)
        self._settings = settings or default_settings
        self._url = supabase_url
        self._key = supabase_key
        self._rpc = (
            record_log_rpc if record_log_rpc is not None
            else self._settings.supabase.record_log_rpc
        )
        self._client = None

    def _get_client(self):
        """Lazy-initialize Supabase client."""
        if self._client is not None:
            return self._client
        if self._url and self._key:
            url, key = self._url, self._key
        else:
            url, key = get_supabase_credentials(self._settings)
        from supabase import create_client

        self._client = create_client(url, key)
        logger.info("Connected to Supabase: %s", url)
        return self._client

    @staticmethod
    def _filtered(query, filters: dict[str, str]):
        for column, value in filters.items():
            query = query.eq(column, value)
        return query

    def _fetch(self, table: str, filters: dict[str, str]) -> list[dict]:
        client = self._get_client()
        column, desc = _ORDERING[table]
        try:
            query = self._filtered(client.table(table).select("*"), filters)
            result = query.order(column, desc=desc).execute()
        except Exception as e:
            raise RepositoryError(f"Failed to read {table}: {e}") from e
        return result.data or []

    def _insert(self, table: str, data: dict) -> dict:
        client = self._get_client()
        try:
            result = client.table(table).insert(data).execute()
        except Exception as e:
            logger.error("Supabase insert into %s failed: %s", table, e)
            raise RepositoryError(f"Insert into {table} failed: {e}") from e
        if not result.data:
            raise RepositoryError(f"Insert into {table} returned no row")
        return result.data[0]

    def _update(self, table: str, row_id: str, data: dict) -> Optional[dict]:
        client = self._get_client()
        fields = {k: v for k, v in data.items() if k != "id"}
        try:
            query = client.table(table).update(fields)
            result = self._filtered(query, self._scope({"id": row_id})).execute()
        except Exception as e:
            logger.error("Supabase update of %s %s failed: %s", table, row_id, e)
            raise RepositoryError(f"Update of {table} {row_id} failed: {e}") from e
        return result.data[0] if result.data else None

    def _delete(self, table: str, row_id: str) -> None:
        client = self._get_client()
        try:
            query = client.table(table).delete()
            self._filtered(query, self._scope({"id": row_id})).execute()
        except Exception as e:
            raise RepositoryError(f"Delete from {table} {row_id} failed: {e}") from e
        logger.info("Deleted %s %s", table, row_id)

    def record_log(
        self,
        log: MaintenanceLog,
        schedule: Optional[MaintenanceSchedule] = None,
    ) -> MaintenanceLog:
        data = self._prepare(log)
        if self._rpc and schedule is not None:
            return self._record_log_rpc(data, schedule)

        stored = MaintenanceLog(**self._insert(LOGS_TABLE, data))
        if schedule is None:
            return stored

        try:
            updated = self._update(
                SCHEDULES_TABLE,
                schedule.id,
                {
                    "last_performed_date": _iso(schedule.last_performed_date),
                    "next_due_date": _iso(schedule.next_due_date),
                },
            )
        except RepositoryError as e:
            logger.error(
                "Log %s stored but schedule %s not updated: %s",
                stored.id, schedule.id, e,
            )
            raise PartialWriteError(
                f"Log {stored.id} stored but schedule {schedule.id} was not updated: {e}",
                log=stored,
                schedule_id=schedule.id,
            ) from e
        if updated is None:
            logger.error("Log %s stored but schedule %s not found", stored.id, schedule.id)
            raise PartialWriteError(
                f"Log {stored.id} stored but schedule {schedule.id} was not found",
                log=stored,
                schedule_id=schedule.id,
            )
        logger.info("Recorded log %s (schedule %s)", stored.id, schedule.id)
        return stored

    def _record_log_rpc(self, data: dict, schedule: MaintenanceSchedule) -> MaintenanceLog:
        client = self._get_client()
        params = {
            "p_log": data,
            "p_schedule_id": schedule.id,
            "p_last_performed_date": _iso(schedule.last_performed_date),
            "p_next_due_date": _iso(schedule.next_due_date),
        }
        try:
            result = client.rpc(self._rpc, params).execute()
        except Exception as e:
            logger.error("RPC %s failed: %s", self._rpc, e)
            raise RepositoryError(f"Recording log failed: {e}") from e

        row = result.data
        if isinstance(row, list):
            row = row[0] if row else None
        if not row:
            raise RepositoryError(f"RPC {self._rpc} returned no row")
        logger.info("Recorded log %s (schedule %s) via %s", row.get("id"), schedule.id, self._rpc)
        return MaintenanceLog(**row)
