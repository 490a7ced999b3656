"""
Authoritative in-memory complaint list.

Every mutation is flushed to the relational mirror right away; a failed
flush is logged by the gateway and the in-memory change is kept.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional, Sequence
import logging

from complaints.domain import Complaint, ComplaintStatus, IssueCategory
from complaints.domain.complaints import now
from complaints.services.persistence_gateway import PersistenceGateway, ShutdownReport

logger = logging.getLogger(__name__)


def _next_id_after(complaints: Sequence[Complaint]) -> int:
    return max((c.tracking_id for c in complaints), default=0) + 1


class ComplaintStore:
    """Owns the complaint list and the tracking-id counter."""

    def __init__(self, gateway: PersistenceGateway, clock: Optional[Callable[[], datetime]] = None) -> None:
        self.gateway = gateway
        self._clock = clock or now
        self._complaints: list[Complaint] = []
        self._next_id = 1

    @property
    def next_tracking_id(self) -> int:
        return self._next_id

    def start(self) -> str:
        """Load the stored complaints (database first, then backup file)."""
        hydration = self.gateway.hydrate()
        self._complaints = list(hydration.complaints)
        self._next_id = _next_id_after(self._complaints)
        return hydration.source

    # -------------------------- mutations --------------------------
    def log_complaint(self, zone_number: int, details: str, category: IssueCategory) -> int:
        complaint = Complaint(
            tracking_id=self._next_id,
            zone_number=zone_number,
            details=details,
            category=category,
            status=ComplaintStatus.SUBMITTED,
            submission_date=self._clock().replace(microsecond=0),
        )
        self._next_id += 1
        self._complaints.append(complaint)
        self.gateway.flush(self._complaints)
        logger.info("Logged complaint %d (%s)", complaint.tracking_id, category.name)
        return complaint.tracking_id

    def update_status(self, tracking_id: int, new_status: ComplaintStatus) -> bool:
        for complaint in self._complaints:
            if complaint.tracking_id == tracking_id:
                complaint.status = new_status
                self.gateway.flush(self._complaints)
                logger.info("Complaint %d moved to %s", tracking_id, new_status.name)
                return True
        return False

    # -------------------------- queries --------------------------
    def list_all(self) -> tuple[Complaint, ...]:
        return tuple(self._complaints)

    def get(self, tracking_id: int) -> Optional[Complaint]:
        for complaint in self._complaints:
            if complaint.tracking_id == tracking_id:
                return complaint
        return None

    def trend_report(self) -> dict[IssueCategory, int]:
        """Open (not CLOSED) complaints per category; empty categories are left out."""
        report: dict[IssueCategory, int] = {}
        for complaint in self._complaints:
            if complaint.is_open:
                report[complaint.category] = report.get(complaint.category, 0) + 1
        return report

    # -------------------------- backup --------------------------
    def save_backup(self) -> bool:
        return self.gateway.write_backup(self._complaints)

    def restore_backup(self) -> bool:
        snapshot = self.gateway.read_backup()
        if snapshot is None:
            return False
        self._complaints = snapshot
        # ids handed out earlier in the session stay retired
        self._next_id = max(self._next_id, _next_id_after(snapshot))
        self.gateway.flush(self._complaints)
        logger.info("Restored %d complaint(s) from backup", len(snapshot))
        return True

    def shutdown(self) -> ShutdownReport:
        return self.gateway.shutdown(self._complaints)
