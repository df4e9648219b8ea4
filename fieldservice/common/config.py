"""Project configuration and paths.

Loads settings from config/settings.yaml and environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

# === Paths ===
PROJECT_ROOT = Path(__file__).parent.parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"
DATA_DIR = PROJECT_ROOT / "data"

# Load .env from project root
load_dotenv(PROJECT_ROOT / ".env")


class DatabaseSettings(BaseModel):
    """Local SQLite store settings."""
    db_path: str = str(DATA_DIR / "fieldservice.db")

    @property
    def abs_path(self) -> Path:
        """Resolve db_path relative to project root (DATABASE_PATH wins)."""
        p = Path(os.getenv("DATABASE_PATH") or self.db_path)
        if p.is_absolute():
            return p
        return PROJECT_ROOT / p


class SupabaseSettings(BaseModel):
    """Hosted backend settings. Credentials come from .env, never from YAML."""
    url_env: str = "SUPABASE_URL"
    key_env: str = "SUPABASE_SERVICE_KEY"
    # Name of the Postgres function that inserts a log and updates its
    # schedule in one transaction. Empty disables the RPC path.
    record_log_rpc: str = "record_maintenance_log"


class Settings(BaseModel):
    """Top-level application settings."""
    backend: str = "sqlite"  # "sqlite" or "supabase"
    company_id: str = ""
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    supabase: SupabaseSettings = Field(default_factory=SupabaseSettings)

    @classmethod
    def load(cls, path: str | Path | None = None) -> Settings:
        """Load settings from config/settings.yaml, falling back to defaults."""
        settings_path = Path(path) if path else CONFIG_DIR / "settings.yaml"
        if settings_path.exists():
            with open(settings_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            return cls(**data)
        return cls()


def get_supabase_credentials(settings: Settings | None = None) -> tuple[str, str]:
    """Get Supabase URL and service key from environment."""
    cfg = (settings or Settings()).supabase
    url = os.getenv(cfg.url_env, "")
    key = os.getenv(cfg.key_env, "")
    if not url or not key:
        raise ValueError(
            f"{cfg.url_env} / {cfg.key_env} must be set in .env"
        )
    return url, key


# Singleton settings instance
settings = Settings.load()
