"""Data models for dashboard analytics."""

from typing import Dict, List
from pydantic import BaseModel


class MonthlyCount(BaseModel):
    month: str  # YYYY-MM
    count: int


class TeamOverview(BaseModel):
    """Portfolio-wide case statistics."""
    total_cases: int
    active_cases: int
    approved_cases: int
    success_rate: int  # % of all cases approved
    status_distribution: Dict[str, int]
    service_type_distribution: Dict[str, int]
    monthly_trend: List[MonthlyCount]


class AgentDashboardStats(BaseModel):
    """Numbers shown on an agent's (or admin's) dashboard."""
    assigned_cases: int
    active_cases: int
    completed_this_month: int
    pending_review: int
    documents_to_verify: int
    response_time: str
