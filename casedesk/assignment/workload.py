"""
Workload calculation.

Derives per-agent metrics from the full case collection:
- Active cases (anything not approved, rejected or closed)
- Utilization rate and remaining capacity
- Approval rate over every case ever assigned
"""

import math
from typing import List, Tuple
from casedesk.assignment.config import MAX_ACTIVE_CASES_PER_AGENT
from casedesk.assignment.models import Agent, AgentMetrics, Case, CaseStatus


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_agent_metrics(
    agent_id: str,
    cases: List[Case],
    max_capacity: int = MAX_ACTIVE_CASES_PER_AGENT
) -> AgentMetrics:
    """
    Calculate workload metrics for one agent.

    Utilization is not clamped: an over-assigned agent reports more than
    100% and a negative available capacity.
    """
    assigned = [c for c in cases if c.assigned_agent_id == agent_id]
    active = [c for c in assigned if c.is_active]
    approved = [c for c in assigned if c.status == CaseStatus.APPROVED]

    current_load = len(active)
    available_capacity = max_capacity - current_load

    approval_rate = 0
    if assigned:
        approval_rate = _round_half_up(len(approved) / len(assigned) * 100)

    return AgentMetrics(
        active_cases=current_load,
        max_capacity=max_capacity,
        utilization_rate=current_load / max_capacity * 100.0,
        available_capacity=available_capacity,
        is_available=available_capacity > 0,
        approval_rate=approval_rate,
        total_cases=len(assigned),
    )


def calculate_workloads(
    agents: List[Agent],
    cases: List[Case],
    max_capacity: int = MAX_ACTIVE_CASES_PER_AGENT
) -> List[Tuple[Agent, AgentMetrics]]:
    """Calculate metrics for every agent, keeping roster order."""
    return [
        (agent, calculate_agent_metrics(agent.id, cases, max_capacity))
        for agent in agents
    ]
