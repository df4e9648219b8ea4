"""Configuration, storage schema, row models and logging for fieldservice."""

from .config import DATA_DIR, PROJECT_ROOT, Settings, get_supabase_credentials, settings
from .database import get_connection, init_db
from .logging import LOG_FORMAT, setup_logging
from .models import (
    Equipment,
    EquipmentStatus,
    Frequency,
    LogStatus,
    MaintenanceLog,
    MaintenanceSchedule,
    MaintenanceTask,
)

__all__ = [
    "DATA_DIR",
    "PROJECT_ROOT",
    "Settings",
    "get_supabase_credentials",
    "settings",
    "get_connection",
    "init_db",
    "LOG_FORMAT",
    "setup_logging",
    "Equipment",
    "EquipmentStatus",
    "Frequency",
    "LogStatus",
    "MaintenanceLog",
    "MaintenanceSchedule",
    "MaintenanceTask",
]
