"""Shared Pydantic data models for the field service back office.

These models define the rows stored in the four maintenance collections
(equipment, maintenance_tasks, maintenance_schedules, maintenance_logs).
Every repository and the service layer import from here.
"""

from __future__ import annotations

import logging
from datetime import date
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


# === Enums ===

class Frequency(str, Enum):
    """Recurrence interval of a maintenance obligation."""
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    BIANNUAL = "biannual"
    ANNUAL = "annual"

    @classmethod
    def coerce(cls, value: Any) -> Frequency:
        """Map a persisted value onto a Frequency; unknown values mean monthly.

        Matching is exact, so "Weekly" or " annual " are unknown values.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            logger.warning("Unrecognized frequency %r, treating as monthly", value)
            return cls.MONTHLY


class EquipmentStatus(str, Enum):
    """Lifecycle status of an equipment unit."""
    ACTIVE = "active"
    INACTIVE = "inactive"
    MAINTENANCE = "maintenance"
    DECOMMISSIONED = "decommissioned"


class LogStatus(str, Enum):
    """Outcome of one maintenance visit."""
    COMPLETED = "completed"
    INCOMPLETE = "incomplete"
    NEEDS_FOLLOWUP = "needs_followup"


# === Rows ===

class Row(BaseModel):
    """Common columns. An empty id means the row has not been stored yet."""
    id: str = ""
    company_id: str = ""

    def to_row(self) -> dict:
        """Serialize for an insert/update, dates as ISO strings, no empty id."""
        data = self.model_dump(mode="json")
        if not data.get("id"):
            data.pop("id", None)
        return data


class Equipment(Row):
    """A serviceable unit installed at a customer site."""
    model_config = ConfigDict(protected_namespaces=())

    name: str
    model_number: Optional[str] = None
    serial_number: Optional[str] = None
    unit_number: Optional[str] = None
    manufacturer: Optional[str] = None
    installation_date: Optional[date] = None
    location: Optional[str] = None
    status: EquipmentStatus = EquipmentStatus.ACTIVE
    notes: Optional[str] = None
    customer_id: Optional[str] = None


class MaintenanceTask(Row):
    """A reusable maintenance procedure."""
    name: str
    description: Optional[str] = None
    estimated_duration_minutes: int = Field(default=60, ge=0)
    is_active: bool = True


class MaintenanceSchedule(Row):
    """One recurring obligation: equipment x task x frequency.

    ``frequency`` is kept as free text so malformed persisted values load
    without error; it is coerced only when a due date is computed.
    """
    equipment_id: str
    task_id: str
    frequency: str = Frequency.MONTHLY.value
    last_performed_date: Optional[date] = None
    next_due_date: Optional[date] = None

    @property
    def frequency_enum(self) -> Frequency:
        return Frequency.coerce(self.frequency)


class MaintenanceLog(Row):
    """Immutable record of one maintenance visit."""
    equipment_id: str
    task_id: str
    schedule_id: Optional[str] = None
    performed_by: Optional[str] = None
    performed_date: date
    notes: Optional[str] = None
    status: LogStatus = LogStatus.COMPLETED
