"""Database package for assignment history."""

from casedesk.db.database import get_db, init_db, get_session
from casedesk.db.models import Base, AssignmentRecord
from casedesk.db.history_service import HistoryService

__all__ = [
    "get_db",
    "init_db",
    "get_session",
    "Base",
    "AssignmentRecord",
    "HistoryService",
]
