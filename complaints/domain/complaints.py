"""Complaint entity and the closed category/status sets."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
SUMMARY_DETAILS_LENGTH = 30


class IssueCategory(str, Enum):
    TRASH_COLLECTION = "TRASH_COLLECTION"
    STREET_LIGHTING = "STREET_LIGHTING"
    WATER_OUTAGE = "WATER_OUTAGE"
    EXCESSIVE_NOISE = "EXCESSIVE_NOISE"
    OTHER_MUNICIPAL = "OTHER_MUNICIPAL"

    @property
    def label(self) -> str:
        return self.name.replace("_", " ").title()

    def __str__(self) -> str:
        return self.value


class ComplaintStatus(str, Enum):
    SUBMITTED = "SUBMITTED"
    IN_REVIEW = "IN_REVIEW"
    CLOSED = "CLOSED"

    @property
    def label(self) -> str:
        return self.name.replace("_", " ").title()

    @property
    def is_open(self) -> bool:
        return self is not ComplaintStatus.CLOSED

    def __str__(self) -> str:
        return self.value


def now() -> datetime:
    """Current local time truncated to whole seconds."""
    return datetime.now().replace(microsecond=0)


def format_date(value: datetime) -> str:
    return value.strftime(DATE_FORMAT)


def parse_date(value: str) -> datetime:
    """Parse a persisted submission date; raises ValueError when malformed."""
    return datetime.strptime(value, DATE_FORMAT)


@dataclass
class Complaint:
    tracking_id: int
    zone_number: int
    details: str
    category: IssueCategory
    status: ComplaintStatus = ComplaintStatus.SUBMITTED
    submission_date: datetime = field(default_factory=now)

    @property
    def formatted_date(self) -> str:
        return format_date(self.submission_date)

    @property
    def is_open(self) -> bool:
        return self.status.is_open

    def summary(self) -> str:
        """One-line rendering used by the console listing."""
        short = self.details[:SUMMARY_DETAILS_LENGTH] + "..."
        return (
            f"| ID: {self.tracking_id:<5d} | Zone: {self.zone_number:<4d} "
            f"| Category: {self.category.value:<18s} | Status: {self.status.value:<12s} "
            f"| Date: {self.formatted_date} | Details: {short}"
        )
