"""
Database models.

Stores the history of assign/transfer commands sent to the portal backend.
The backend remains the owner of case assignment; these rows are an audit
trail only.
"""

from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class AssignmentRecord(Base):
    """One assign or transfer command and its outcome."""
    __tablename__ = "assignment_records"

    id = Column(Integer, primary_key=True)
    case_id = Column(String(255), nullable=False, index=True)
    action = Column(String(50), nullable=False)  # 'assign', 'transfer'
    from_agent_id = Column(String(255), nullable=True)
    to_agent_id = Column(String(255), nullable=False, index=True)
    reason = Column(String(50), nullable=True)
    handover_notes = Column(Text, nullable=True)
    requested_by = Column(String(255), nullable=True)
    outcome = Column(String(50), nullable=False)  # 'accepted', 'rejected'
    detail = Column(Text, nullable=True)
    created_at = Column(DateTime, default=func.now(), nullable=False, index=True)
