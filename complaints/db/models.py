"""SQLAlchemy model for the relational mirror of the complaint list."""
from __future__ import annotations

from sqlalchemy import Column, Integer, String

from .session import Base

DETAILS_MAX_LENGTH = 255


class ComplaintRow(Base):
    __tablename__ = "COMPLAINTS"

    tracking_id = Column("TRACKING_ID", Integer, primary_key=True, autoincrement=False)
    zone_number = Column("ZONE_NUMBER", Integer, nullable=False)
    details = Column("DETAILS", String(DETAILS_MAX_LENGTH), nullable=False)
    # stored as text in the fixed "YYYY-MM-DD HH:MM:SS" format
    submission_date = Column("SUBMISSION_DATE", String(50), nullable=False)
    category = Column("CATEGORY", String(50), nullable=False)
    status = Column("STATUS", String(50), nullable=False)

    def __repr__(self) -> str:
        return f"<ComplaintRow {self.tracking_id} {self.category} {self.status}>"
