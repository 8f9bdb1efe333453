"""Data models for the assignment engine."""

from enum import Enum
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel


class Role(str, Enum):
    """Portal user roles."""
    ADMIN = "ADMIN"
    AGENT = "AGENT"
    CLIENT = "CLIENT"


CASE_HANDLING_ROLES = frozenset({Role.ADMIN, Role.AGENT})


class CaseStatus(str, Enum):
    """Case lifecycle status as reported by the backend."""
    SUBMITTED = "SUBMITTED"
    UNDER_REVIEW = "UNDER_REVIEW"
    DOCUMENTS_REQUIRED = "DOCUMENTS_REQUIRED"
    PROCESSING = "PROCESSING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CLOSED = "CLOSED"


# Cases in these statuses don't count toward an agent's active load
TERMINAL_STATUSES = frozenset({CaseStatus.APPROVED, CaseStatus.REJECTED, CaseStatus.CLOSED})


class Availability(str, Enum):
    """Availability label shown next to each agent."""
    UNAVAILABLE = "unavailable"  # at or over capacity
    LIMITED = "limited"  # has room but heavily loaded
    AVAILABLE = "available"


class TransferReason(str, Enum):
    """Why a case is moved to another agent."""
    REASSIGNMENT = "REASSIGNMENT"
    COVERAGE = "COVERAGE"
    SPECIALIZATION = "SPECIALIZATION"
    WORKLOAD = "WORKLOAD"
    OTHER = "OTHER"


class Agent(BaseModel):
    """A portal user able to handle cases."""
    id: str
    first_name: str = ""
    last_name: str = ""
    email: Optional[str] = None
    is_active: bool = True
    role: Role = Role.AGENT

    @property
    def display_name(self) -> str:
        name = " ".join(part for part in (self.first_name.strip(), self.last_name.strip()) if part)
        return name or self.email or self.id


class Case(BaseModel):
    """Read-only snapshot of an immigration case."""
    id: str
    reference_number: str
    status: CaseStatus
    assigned_agent_id: Optional[str] = None
    submission_date: Optional[datetime] = None
    last_updated: Optional[datetime] = None
    service_type: Optional[str] = None
    pending_documents: int = 0

    @property
    def is_active(self) -> bool:
        return self.status not in TERMINAL_STATUSES


class AgentMetrics(BaseModel):
    """Workload metrics derived from a case snapshot. Never persisted."""
    active_cases: int
    max_capacity: int
    utilization_rate: float  # percent, may exceed 100
    available_capacity: int  # may be negative
    is_available: bool
    approval_rate: int  # 0-100
    total_cases: int


class RankedAgent(BaseModel):
    """Agent with metrics, ready to be offered for assignment."""
    agent: Agent
    metrics: AgentMetrics
    availability: Availability
    reasoning: str


class WorkloadSnapshot(BaseModel):
    """Roster and case collection read together from the backend."""
    agents: List[Agent] = []
    cases: List[Case] = []

    model_config = {"frozen": True}

    def find_case(self, case_id: str) -> Optional[Case]:
        return next((c for c in self.cases if c.id == case_id), None)

    def find_agent(self, agent_id: str) -> Optional[Agent]:
        return next((a for a in self.agents if a.id == agent_id), None)


class AssignRequest(BaseModel):
    """Command to assign an unassigned case."""
    case_id: str
    agent_id: str


class TransferRequest(BaseModel):
    """Command to move an assigned case to another agent."""
    case_id: str
    new_agent_id: str
    reason: TransferReason
    handover_notes: Optional[str] = None
    notify_client: bool = True
    notify_agent: bool = True
