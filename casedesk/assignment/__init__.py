"""Assignment engine for casedesk - Workload-based agent ranking and case assignment."""

from casedesk.assignment.workload import calculate_agent_metrics, calculate_workloads
from casedesk.assignment.availability import classify_availability
from casedesk.assignment.ranking import rank_agents, rank_roster, transfer_candidates
from casedesk.assignment.actions import assign_case, transfer_case, fetch_snapshot

__all__ = [
    "calculate_agent_metrics",
    "calculate_workloads",
    "classify_availability",
    "rank_agents",
    "rank_roster",
    "transfer_candidates",
    "assign_case",
    "transfer_case",
    "fetch_snapshot",
]
