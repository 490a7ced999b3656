"""Domain types shared by the store, the backends and the console."""

from .complaints import (
    DATE_FORMAT,
    Complaint,
    ComplaintStatus,
    IssueCategory,
    format_date,
    parse_date,
)

__all__ = [
    "DATE_FORMAT",
    "Complaint",
    "ComplaintStatus",
    "IssueCategory",
    "format_date",
    "parse_date",
]
