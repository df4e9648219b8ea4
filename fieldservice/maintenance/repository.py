"""Storage for the four maintenance collections.

``MaintenanceRepository`` implements the CRUD surface once on top of four
table primitives. Backends (SQLite here, Supabase in
``supabase_repository``) implement the primitives and ``record_log``, the
one write that must land together with its schedule update.
"""

from __future__ import annotations

import logging
import sqlite3
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, TypeVar

from ..common.database import get_connection
from ..common.models import (
    Equipment,
    MaintenanceLog,
    MaintenanceSchedule,
    MaintenanceTask,
    Row,
)

logger = logging.getLogger(__name__)

RowT = TypeVar("RowT", bound=Row)

EQUIPMENT_TABLE = "equipment"
TASKS_TABLE = "maintenance_tasks"
SCHEDULES_TABLE = "maintenance_schedules"
LOGS_TABLE = "maintenance_logs"

# table -> (column, descending)
_ORDERING: dict[str, tuple[str, bool]] = {
    EQUIPMENT_TABLE: ("name", False),
    TASKS_TABLE: ("name", False),
    SCHEDULES_TABLE: ("next_due_date", False),
    LOGS_TABLE: ("performed_date", True),
}


class RepositoryError(Exception):
    """A write or read failed and nothing was stored."""


class PartialWriteError(RepositoryError):
    """The log was stored but its schedule was not updated.

    Attributes:
        log: The stored log row.
        schedule_id: The schedule left with stale dates.
    """

    def __init__(self, message: str, log: MaintenanceLog, schedule_id: str) -> None:
        super().__init__(message)
        self.log = log
        self.schedule_id = schedule_id


class MaintenanceRepository(ABC):
    """Abstract store scoped to one company."""

    def __init__(self, company_id: str = "") -> None:
        self.company_id = company_id

    # --- primitives ---

    @abstractmethod
    def _fetch(self, table: str, filters: dict[str, str]) -> list[dict]:
        """Rows of table matching all equality filters, in _ORDERING order."""
        ...

    @abstractmethod
    def _insert(self, table: str, data: dict) -> dict:
        ...

    @abstractmethod
    def _update(self, table: str, row_id: str, data: dict) -> Optional[dict]:
        """Update one row; None when no row matched."""
        ...

    @abstractmethod
    def _delete(self, table: str, row_id: str) -> None:
        ...

    @abstractmethod
    def record_log(
        self,
        log: MaintenanceLog,
        schedule: Optional[MaintenanceSchedule] = None,
    ) -> MaintenanceLog:
        """Insert a new log and, if given, store the schedule's new dates.

        Both writes form one unit. Raises RepositoryError when nothing was
        stored and PartialWriteError when only the log was.
        """
        ...

    # --- helpers ---

    def _scope(self, extra: Optional[dict[str, str]] = None) -> dict[str, str]:
        filters = {"company_id": self.company_id} if self.company_id else {}
        filters.update(extra or {})
        return filters

    def _prepare(self, row: RowT) -> dict:
        data = row.to_row()
        if self.company_id:
            data["company_id"] = self.company_id
        return data

    def _list(self, table: str, model: type[RowT], **filters: str) -> list[RowT]:
        return [model(**r) for r in self._fetch(table, self._scope(filters))]

    def _get(self, table: str, model: type[RowT], row_id: str) -> Optional[RowT]:
        rows = self._fetch(table, self._scope({"id": row_id}))
        return model(**rows[0]) if rows else None

    def _save(self, table: str, row: RowT) -> RowT:
        data = self._prepare(row)
        if row.id:
            stored = self._update(table, row.id, data)
            if stored is None:
                raise RepositoryError(f"{table} row {row.id} not found")
            logger.info("Updated %s %s", table, row.id)
        else:
            stored = self._insert(table, data)
            logger.info("Inserted %s %s", table, stored.get("id"))
        return type(row)(**stored)

    # --- equipment ---

    def list_equipment(self) -> list[Equipment]:
        return self._list(EQUIPMENT_TABLE, Equipment)

    def get_equipment(self, equipment_id: str) -> Optional[Equipment]:
        return self._get(EQUIPMENT_TABLE, Equipment, equipment_id)

    def save_equipment(self, equipment: Equipment) -> Equipment:
        return self._save(EQUIPMENT_TABLE, equipment)

    def delete_equipment(self, equipment_id: str) -> None:
        """Delete equipment together with its schedules and logs."""
        self._delete(EQUIPMENT_TABLE, equipment_id)

    # --- tasks ---

    def list_tasks(self) -> list[MaintenanceTask]:
        return self._list(TASKS_TABLE, MaintenanceTask)

    def get_task(self, task_id: str) -> Optional[MaintenanceTask]:
        return self._get(TASKS_TABLE, MaintenanceTask, task_id)

    def save_task(self, task: MaintenanceTask) -> MaintenanceTask:
        return self._save(TASKS_TABLE, task)

    def delete_task(self, task_id: str) -> None:
        """Delete a task together with its schedules and logs."""
        self._delete(TASKS_TABLE, task_id)

    # --- schedules ---

    def list_schedules(self, **filters: str) -> list[MaintenanceSchedule]:
        return self._list(SCHEDULES_TABLE, MaintenanceSchedule, **filters)

    def get_schedule(self, schedule_id: str) -> Optional[MaintenanceSchedule]:
        return self._get(SCHEDULES_TABLE, MaintenanceSchedule, schedule_id)

    def save_schedule(self, schedule: MaintenanceSchedule) -> MaintenanceSchedule:
        return self._save(SCHEDULES_TABLE, schedule)

    def delete_schedule(self, schedule_id: str) -> None:
        self._delete(SCHEDULES_TABLE, schedule_id)

    # --- logs ---

    def list_logs(self, **filters: str) -> list[MaintenanceLog]:
        return self._list(LOGS_TABLE, MaintenanceLog, **filters)

    def get_log(self, log_id: str) -> Optional[MaintenanceLog]:
        return self._get(LOGS_TABLE, MaintenanceLog, log_id)

    def save_log(self, log: MaintenanceLog) -> MaintenanceLog:
        """Store a log without touching its schedule (used for edits)."""
        return self._save(LOGS_TABLE, log)

    def delete_log(self, log_id: str) -> None:
        self._delete(LOGS_TABLE, log_id)


class SQLiteMaintenanceRepository(MaintenanceRepository):
    """Local store backed by the SQLite schema from ``common.database``.

    Usage:
        init_db(path)
        repo = SQLiteMaintenanceRepository(path, company_id="acme")
        repo.save_equipment(Equipment(name="Rooftop unit 3"))
    """

    def __init__(
        self,
        db_path: str | Path | None = None,
        company_id: str = "",
    ) -> None:
        super().__init__(company_id)
        self._db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        return get_connection(self._db_path)

    @staticmethod
    def _where(filters: dict[str, str]) -> tuple[str, list]:
        if not filters:
            return "", []
        clause = " AND ".join(f"{col} = ?" for col in filters)
        return f" WHERE {clause}", list(filters.values())

    @staticmethod
    def _insert_sql(table: str, data: dict) -> tuple[str, list]:
        cols = ", ".join(data)
        marks = ", ".join("?" for _ in data)
        return f"INSERT INTO {table} ({cols}) VALUES ({marks})", list(data.values())

    def _fetch(self, table: str, filters: dict[str, str]) -> list[dict]:
        where, params = self._where(filters)
        column, desc = _ORDERING[table]
        # NULLs last for ascending due dates
        order = f" ORDER BY {column} IS NULL, {column} {'DESC' if desc else 'ASC'}"
        conn = self._connect()
        try:
            rows = conn.execute(f"SELECT * FROM {table}{where}{order}", params).fetchall()
            return [dict(r) for r in rows]
        except sqlite3.Error as e:
            raise RepositoryError(f"Failed to read {table}: {e}") from e
        finally:
            conn.close()

    def _insert(self, table: str, data: dict) -> dict:
        data = {**data, "id": data.get("id") or str(uuid.uuid4())}
        sql, params = self._insert_sql(table, data)
        conn = self._connect()
        try:
            conn.execute(sql, params)
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise RepositoryError(f"Insert into {table} failed: {e}") from e
        finally:
            conn.close()
        return data

    def _update(self, table: str, row_id: str, data: dict) -> Optional[dict]:
        fields = {k: v for k, v in data.items() if k != "id"}
        assignments = ", ".join(f"{col} = ?" for col in fields)
        where, params = self._where(self._scope({"id": row_id}))
        conn = self._connect()
        try:
            cursor = conn.execute(
                f"UPDATE {table} SET {assignments}{where}",
                list(fields.values()) + params,
            )
            updated = cursor.rowcount
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise RepositoryError(f"Update of {table} {row_id} failed: {e}") from e
        finally:
            conn.close()
        if updated == 0:
            return None
        return {**fields, "id": row_id}

    def _delete(self, table: str, row_id: str) -> None:
        where, params = self._where(self._scope({"id": row_id}))
        conn = self._connect()
        try:
            conn.execute(f"DELETE FROM {table}{where}", params)
            conn.commit()
            logger.info("Deleted %s %s", table, row_id)
        except sqlite3.Error as e:
            conn.rollback()
            raise RepositoryError(f"Delete from {table} {row_id} failed: {e}") from e
        finally:
            conn.close()

    def record_log(
        self,
        log: MaintenanceLog,
        schedule: Optional[MaintenanceSchedule] = None,
    ) -> MaintenanceLog:
        data = self._prepare(log)
        data["id"] = data.get("id") or str(uuid.uuid4())
        sql, params = self._insert_sql(LOGS_TABLE, data)

        conn = self._connect()
        try:
            conn.execute(sql, params)
            if schedule is not None:
                where, where_params = self._where(self._scope({"id": schedule.id}))
                cursor = conn.execute(
                    f"UPDATE {SCHEDULES_TABLE} "
                    f"SET last_performed_date = ?, next_due_date = ?{where}",
                    [
                        _iso(schedule.last_performed_date),
                        _iso(schedule.next_due_date),
                        *where_params,
                    ],
                )
                if cursor.rowcount == 0:
                    raise RepositoryError(f"Schedule {schedule.id} not found")
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise RepositoryError(f"Recording log failed: {e}") from e
        except RepositoryError:
            conn.rollback()
            raise
        finally:
            conn.close()

        logger.info(
            "Recorded log %s (schedule %s)",
            data["id"], schedule.id if schedule else "-",
        )
        return MaintenanceLog(**data)


def _iso(value) -> Optional[str]:
    return value.isoformat() if value is not None else None
