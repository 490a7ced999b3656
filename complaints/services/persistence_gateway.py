"""
Keeps the relational table and the snapshot file in step with the in-memory
complaint list.

Startup trusts the database first and falls back to the snapshot only when
the table has no rows. Write failures are logged and reported as False; the
in-memory list stays authoritative for the rest of the session.

A database that could not be read at startup is left untouched for the whole
session, so a partly corrupt table is never replaced by a shorter list.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence
import logging

from complaints.core.config import Settings, get_settings
from complaints.domain import Complaint
from complaints.repositories.base import ComplaintBackend, StorageError
from complaints.repositories.json_storage import JsonSnapshotRepository
from complaints.repositories.sql_repository import SQLComplaintRepository

logger = logging.getLogger(__name__)

SOURCE_DATABASE = "database"
SOURCE_BACKUP = "backup"
SOURCE_EMPTY = "empty"


class StartupError(StorageError):
    """Raised when neither backend could be read at startup."""


@dataclass
class Hydration:
    complaints: list[Complaint]
    source: str


@dataclass
class ShutdownReport:
    database_saved: bool
    backup_saved: bool

    @property
    def ok(self) -> bool:
        return self.database_saved and self.backup_saved


class PersistenceGateway:
    """Ordered protocol over a primary (relational) and a backup (snapshot) backend."""

    def __init__(self, primary: ComplaintBackend, backup: ComplaintBackend) -> None:
        self.primary = primary
        self.backup = backup
        self.primary_writable = True

    def hydrate(self) -> Hydration:
        failures: list[StorageError] = []

        try:
            self.primary.prepare()
            rows = self.primary.load()
        except StorageError as exc:
            logger.error("%s", exc)
            failures.append(exc)
            rows = None
            self.primary_writable = False
            logger.warning("The %s will not be written until the next start", self.primary.name)
        if rows:
            logger.info("Loaded %d complaint(s) from the %s", len(rows), self.primary.name)
            return Hydration(list(rows), SOURCE_DATABASE)

        try:
            snapshot = self.backup.load()
        except StorageError as exc:
            logger.error("%s", exc)
            failures.append(exc)
            snapshot = None

        if len(failures) == 2:
            raise StartupError("No storage available: " + "; ".join(str(exc) for exc in failures))
        if snapshot is not None:
            logger.info("Loaded %d complaint(s) from the %s", len(snapshot), self.backup.name)
            return Hydration(list(snapshot), SOURCE_BACKUP)
        logger.info("No stored complaints found; starting empty")
        return Hydration([], SOURCE_EMPTY)

    def flush(self, complaints: Sequence[Complaint]) -> bool:
        """Replace the relational mirror with ``complaints``."""
        if not self.primary_writable:
            logger.warning("Skipping %s flush: it could not be read at startup", self.primary.name)
            return False
        return self._save(self.primary, complaints)

    def write_backup(self, complaints: Sequence[Complaint]) -> bool:
        return self._save(self.backup, complaints)

    def read_backup(self) -> Optional[list[Complaint]]:
        """Snapshot contents, or None when the file is absent or unreadable."""
        try:
            snapshot = self.backup.load()
        except StorageError as exc:
            logger.error("%s", exc)
            return None
        return list(snapshot) if snapshot is not None else None

    def shutdown(self, complaints: Sequence[Complaint]) -> ShutdownReport:
        database_saved = self.flush(complaints)
        backup_saved = self.write_backup(complaints)
        return ShutdownReport(database_saved=database_saved, backup_saved=backup_saved)

    def _save(self, backend: ComplaintBackend, complaints: Sequence[Complaint]) -> bool:
        try:
            backend.save(complaints)
        except StorageError as exc:
            logger.error("%s", exc)
            return False
        logger.debug("Flushed %d complaint(s) to the %s", len(complaints), backend.name)
        return True


def build_gateway(settings: Optional[Settings] = None) -> PersistenceGateway:
    """Wire the SQL mirror and the JSON snapshot from the current settings."""
    settings = settings or get_settings()
    return PersistenceGateway(SQLComplaintRepository(), JsonSnapshotRepository(settings.backup_file))
