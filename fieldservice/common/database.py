"""SQLite database utilities for the field service back office.

Provides connection management and table initialization for the local
store. Mirrors the collections of the hosted Supabase project.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from .config import settings

logger = logging.getLogger(__name__)

_CREATE_TABLES_SQL = """
CREATE TABLE IF NOT EXISTS equipment (
    id TEXT PRIMARY KEY,
    company_id TEXT NOT NULL DEFAULT '',
    name TEXT NOT NULL,
    model_number TEXT,
    serial_number TEXT,
    unit_number TEXT,
    manufacturer TEXT,
    installation_date TEXT,
    location TEXT,
    status TEXT NOT NULL DEFAULT 'active',
    notes TEXT,
    customer_id TEXT,
    created_at TEXT DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS maintenance_tasks (
    id TEXT PRIMARY KEY,
    company_id TEXT NOT NULL DEFAULT '',
    name TEXT NOT NULL,
    description TEXT,
    estimated_duration_minutes INTEGER NOT NULL DEFAULT 60,
    is_active INTEGER NOT NULL DEFAULT 1,
    created_at TEXT DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS maintenance_schedules (
    id TEXT PRIMARY KEY,
    company_id TEXT NOT NULL DEFAULT '',
    equipment_id TEXT NOT NULL,
    task_id TEXT NOT NULL,
    frequency TEXT NOT NULL DEFAULT 'monthly',
    last_performed_date TEXT,
    next_due_date TEXT,
    created_at TEXT DEFAULT (datetime('now')),
    FOREIGN KEY (equipment_id) REFERENCES equipment(id) ON DELETE CASCADE,
    FOREIGN KEY (task_id) REFERENCES maintenance_tasks(id) ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS maintenance_logs (
    id TEXT PRIMARY KEY,
    company_id TEXT NOT NULL DEFAULT '',
    equipment_id TEXT NOT NULL,
    task_id TEXT NOT NULL,
    schedule_id TEXT,
    performed_by TEXT,
    performed_date TEXT NOT NULL,
    notes TEXT,
    status TEXT NOT NULL DEFAULT 'completed',
    created_at TEXT DEFAULT (datetime('now')),
    FOREIGN KEY (equipment_id) REFERENCES equipment(id) ON DELETE CASCADE,
    FOREIGN KEY (task_id) REFERENCES maintenance_tasks(id) ON DELETE CASCADE,
    FOREIGN KEY (schedule_id) REFERENCES maintenance_schedules(id) ON DELETE SET NULL
);

CREATE INDEX IF NOT EXISTS idx_schedules_company_due
    ON maintenance_schedules(company_id, next_due_date);
CREATE INDEX IF NOT EXISTS idx_logs_schedule ON maintenance_logs(schedule_id);
"""


def get_connection(db_path: str | Path | None = None) -> sqlite3.Connection:
    """Get a SQLite connection with row factory enabled.

    Args:
        db_path: Optional database file. Uses settings.database if not provided.

    Returns:
        sqlite3.Connection with Row factory and foreign keys on.
    """
    path = Path(db_path) if db_path else settings.database.abs_path
    path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    return conn


def init_db(db_path: str | Path | None = None) -> None:
    """Create all tables if they don't exist (idempotent)."""
    conn = get_connection(db_path)
    try:
        conn.executescript(_CREATE_TABLES_SQL)
        conn.commit()
        logger.info("Database schema initialized at %s", db_path or settings.database.abs_path)
    finally:
        conn.close()
