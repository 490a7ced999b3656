"""Backend interface and storage errors shared by the persistence adapters."""
from __future__ import annotations

from typing import Optional, Protocol, Sequence

from complaints.domain import Complaint


class StorageError(Exception):
    """Base class for persistence failures."""


class DatabaseError(StorageError):
    """Raised when the relational store cannot be reached, read or written."""


class CorruptRecordError(StorageError):
    """Raised when a stored row cannot be turned back into a complaint."""


class CorruptSnapshotError(StorageError):
    """Raised when the snapshot file exists but cannot be read or decoded."""


class SnapshotWriteError(StorageError):
    """Raised when the snapshot file cannot be written."""


class ComplaintBackend(Protocol):
    """Whole-collection mirror of the in-memory complaint list."""

    name: str

    def prepare(self) -> None:
        """Make the backend ready for use (idempotent)."""

    def load(self) -> Optional[list[Complaint]]:
        """Return every stored complaint, or None when the backend holds no data."""

    def save(self, complaints: Sequence[Complaint]) -> None:
        """Replace the stored data with ``complaints``."""
