"""
Configuration helpers for the complaint logger.

Settings are read from environment variables once per process so that the
storage layers and the console never touch os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os

DEFAULT_DATABASE_URL = "sqlite:///community_complaints.db"
DEFAULT_BACKUP_FILE = "complaint_data_backup.json"


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    database_url: str
    backup_file: Path
    log_level: str


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        database_url=(os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL).strip(),
        backup_file=Path(os.getenv("BACKUP_FILE") or DEFAULT_BACKUP_FILE),
        log_level=(os.getenv("LOG_LEVEL") or "WARNING").upper(),
    )
