"""Relational mirror of the complaint list backed by SQLAlchemy."""
from __future__ import annotations

import logging
from typing import Sequence

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from complaints.db.models import DETAILS_MAX_LENGTH, ComplaintRow
from complaints.db.session import Base, get_engine, get_session
from complaints.domain import Complaint, ComplaintStatus, IssueCategory, format_date, parse_date
from complaints.repositories.base import CorruptRecordError, DatabaseError

logger = logging.getLogger(__name__)


def _to_row(complaint: Complaint) -> ComplaintRow:
    return ComplaintRow(
        tracking_id=complaint.tracking_id,
        zone_number=complaint.zone_number,
        details=(complaint.details or "")[:DETAILS_MAX_LENGTH],
        submission_date=format_date(complaint.submission_date),
        category=complaint.category.name,
        status=complaint.status.name,
    )


def _from_row(row: ComplaintRow) -> Complaint:
    try:
        return Complaint(
            tracking_id=int(row.tracking_id),
            zone_number=int(row.zone_number),
            details=row.details or "",
            category=IssueCategory[row.category],
            status=ComplaintStatus[row.status],
            submission_date=parse_date(row.submission_date),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise CorruptRecordError(f"Invalid complaint row {row.tracking_id}: {exc}") from exc


class SQLComplaintRepository:
    """Full-table replace of the COMPLAINTS table on every save."""

    name = "database"

    def prepare(self) -> None:
        try:
            Base.metadata.create_all(bind=get_engine())
        except (SQLAlchemyError, RuntimeError) as exc:
            raise DatabaseError(f"Database setup failed: {exc}") from exc

    def load(self) -> list[Complaint]:
        self.prepare()
        try:
            with get_session() as session:
                rows = session.execute(select(ComplaintRow).order_by(ComplaintRow.tracking_id)).scalars().all()
                complaints = [_from_row(row) for row in rows]
        except SQLAlchemyError as exc:
            raise DatabaseError(f"Error loading data from database: {exc}") from exc
        logger.debug("Loaded %d complaint(s) from the database", len(complaints))
        return complaints

    def save(self, complaints: Sequence[Complaint]) -> None:
        self.prepare()
        rows = [_to_row(c) for c in complaints]
        try:
            with get_session() as session:
                try:
                    session.execute(delete(ComplaintRow))
                    session.add_all(rows)
                    session.commit()
                except SQLAlchemyError:
                    session.rollback()
                    raise
        except SQLAlchemyError as exc:
            raise DatabaseError(f"Error saving data to database: {exc}") from exc
        logger.debug("Saved %d complaint(s) to the database", len(rows))

