"""
JSON snapshot of the whole complaint list.

The file is rewritten in full on every save and read in full on load; a
missing file simply means there is no backup yet.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence
import json
import logging

from complaints.domain import Complaint, ComplaintStatus, IssueCategory, format_date, parse_date
from complaints.repositories.base import CorruptSnapshotError, SnapshotWriteError

SNAPSHOT_VERSION = 1

logger = logging.getLogger(__name__)


def to_dict(complaint: Complaint) -> dict:
    return {
        "tracking_id": complaint.tracking_id,
        "zone_number": complaint.zone_number,
        "details": complaint.details,
        "category": complaint.category.name,
        "status": complaint.status.name,
        "submission_date": format_date(complaint.submission_date),
    }


def from_dict(data: dict) -> Complaint:
    return Complaint(
        tracking_id=int(data["tracking_id"]),
        zone_number=int(data["zone_number"]),
        details=str(data["details"]),
        category=IssueCategory[data["category"]],
        status=ComplaintStatus[data["status"]],
        submission_date=parse_date(data["submission_date"]),
    )


class JsonSnapshotRepository:
    """Single-file backup of the complaint list."""

    name = "backup"

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def prepare(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def load(self) -> Optional[list[Complaint]]:
        if not self.path.exists():
            return None
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
            entries = data["complaints"] if isinstance(data, dict) else data
            complaints = [from_dict(entry) for entry in entries]
        except (OSError, ValueError, KeyError, TypeError) as exc:
            raise CorruptSnapshotError(f"Error reading backup file {self.path}: {exc}") from exc
        seen: set[int] = set()
        for complaint in complaints:
            if complaint.tracking_id in seen:
                raise CorruptSnapshotError(
                    f"Error reading backup file {self.path}: duplicate tracking id {complaint.tracking_id}"
                )
            seen.add(complaint.tracking_id)
        logger.debug("Loaded %d complaint(s) from %s", len(complaints), self.path)
        return complaints

    def save(self, complaints: Sequence[Complaint]) -> None:
        db = {"version": SNAPSHOT_VERSION, "complaints": [to_dict(c) for c in complaints]}
        try:
            self.prepare()
            self.path.write_text(json.dumps(db, ensure_ascii=False, indent=2), encoding="utf-8")
        except OSError as exc:
            raise SnapshotWriteError(f"Error writing backup file {self.path}: {exc}") from exc
        logger.debug("Saved %d complaint(s) to %s", len(complaints), self.path)
