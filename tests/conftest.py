"""Shared test fixtures for the field service back office."""

import sys
from datetime import date
from pathlib import Path

import pytest

# Ensure the package is importable without installation
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from fieldservice.common.database import init_db
from fieldservice.common.models import Equipment, MaintenanceTask
from fieldservice.maintenance.repository import SQLiteMaintenanceRepository
from fieldservice.maintenance.service import MaintenanceService

TODAY = date(2024, 6, 15)


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def temp_db(tmp_path) -> Path:
    """Provide an initialized temporary SQLite database path."""
    db_file = tmp_path / "test_fieldservice.db"
    init_db(db_file)
    return db_file


@pytest.fixture
def repo(temp_db) -> SQLiteMaintenanceRepository:
    """SQLite repository scoped to a test company."""
    return SQLiteMaintenanceRepository(temp_db, company_id="acme")


@pytest.fixture
def service(repo) -> MaintenanceService:
    """Service with the clock pinned to TODAY."""
    return MaintenanceService(repo, clock=lambda: TODAY)


@pytest.fixture
def equipment(repo) -> Equipment:
    return repo.save_equipment(Equipment(
        name="Rooftop Unit 3",
        model_number="RTU-48",
        serial_number="SN-1001",
        unit_number="U3",
        manufacturer="Carrier",
        location="Building A roof",
    ))


@pytest.fixture
def task(repo) -> MaintenanceTask:
    return repo.save_task(MaintenanceTask(
        name="Filter replacement",
        description="Replace return air filters",
        estimated_duration_minutes=45,
    ))


@pytest.fixture
def sample_schedule_data(equipment, task) -> dict:
    """Return sample schedule data referencing stored equipment and task."""
    return {
        "equipment_id": equipment.id,
        "task_id": task.id,
        "frequency": "quarterly",
    }
