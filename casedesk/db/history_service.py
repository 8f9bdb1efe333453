"""
History service for assignment records.
"""

from typing import List, Optional
from sqlalchemy.orm import Session

from casedesk.db.models import AssignmentRecord


class HistoryService:
    """Reads and writes assignment history."""

    def __init__(self, db: Session):
        self.db = db

    def record(
        self,
        case_id: str,
        action: str,
        to_agent_id: str,
        outcome: str,
        from_agent_id: Optional[str] = None,
        reason: Optional[str] = None,
        handover_notes: Optional[str] = None,
        requested_by: Optional[str] = None,
        detail: Optional[str] = None
    ) -> AssignmentRecord:
        """Store one command outcome."""
        entry = AssignmentRecord(
            case_id=case_id,
            action=action,
            from_agent_id=from_agent_id,
            to_agent_id=to_agent_id,
            reason=reason,
            handover_notes=handover_notes,
            requested_by=requested_by,
            outcome=outcome,
            detail=detail
        )
        self.db.add(entry)
        self.db.commit()
        self.db.refresh(entry)
        return entry

    def history_for_case(self, case_id: str, limit: int = 50) -> List[AssignmentRecord]:
        """Most recent records for a case, newest first."""
        return (
            self.db.query(AssignmentRecord)
            .filter(AssignmentRecord.case_id == case_id)
            .order_by(AssignmentRecord.created_at.desc(), AssignmentRecord.id.desc())
            .limit(limit)
            .all()
        )
