"""Bootstrap the COMPLAINTS table: python -m complaints.db.create_tables"""
from __future__ import annotations

from complaints.repositories.base import StorageError
from complaints.repositories.sql_repository import SQLComplaintRepository


def create_all() -> None:
    """Same idempotent schema routine the console runs at startup."""
    SQLComplaintRepository().prepare()


if __name__ == "__main__":
    try:
        create_all()
        print("COMPLAINTS table ready.")
    except StorageError as exc:
        raise SystemExit(str(exc)) from exc
