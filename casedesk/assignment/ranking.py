"""
Agent ranking for case assignment.

Agents are ordered by:
1. Availability (agents with room first, regardless of anything else)
2. Available capacity (more headroom first)
3. Approval rate (higher first)
Remaining ties keep roster order.
"""

import logging
from typing import List, Tuple
from casedesk.assignment.availability import classify_availability
from casedesk.assignment.config import MAX_ACTIVE_CASES_PER_AGENT
from casedesk.assignment.models import (
    Agent, AgentMetrics, Availability, Case, RankedAgent
)
from casedesk.assignment.workload import calculate_workloads

logger = logging.getLogger(__name__)


def _rank_key(item: Tuple[Agent, AgentMetrics]) -> tuple:
    _, metrics = item
    return (
        0 if metrics.is_available else 1,
        -metrics.available_capacity,
        -metrics.approval_rate,
    )


def _build_reasoning(metrics: AgentMetrics, availability: Availability) -> str:
    reasoning_parts = []
    if availability == Availability.UNAVAILABLE:
        reasoning_parts.append(
            f"At capacity ({metrics.active_cases}/{metrics.max_capacity} active cases)"
        )
    else:
        reasoning_parts.append(f"{metrics.available_capacity} slots free")
        if availability == Availability.LIMITED:
            reasoning_parts.append(f"Limited ({metrics.utilization_rate:.0f}% utilized)")
    if metrics.total_cases:
        reasoning_parts.append(f"Approval rate {metrics.approval_rate}%")
    return ". ".join(reasoning_parts)


def rank_agents(workloads: List[Tuple[Agent, AgentMetrics]]) -> List[RankedAgent]:
    """
    Rank agents for assignment.

    Args:
        workloads: (agent, metrics) pairs, typically from calculate_workloads

    Returns:
        RankedAgent list, best candidate first
    """
    # sorted() is stable, so equal keys keep input order
    ordered = sorted(workloads, key=_rank_key)

    ranked = []
    for agent, metrics in ordered:
        availability = classify_availability(metrics)
        ranked.append(RankedAgent(
            agent=agent,
            metrics=metrics,
            availability=availability,
            reasoning=_build_reasoning(metrics, availability)
        ))

    if ranked:
        best = ranked[0]
        logger.info(
            f"Ranked {len(ranked)} agents, top: {best.agent.display_name} "
            f"({best.metrics.available_capacity} free, {best.availability.value})"
        )
    return ranked


def rank_roster(
    agents: List[Agent],
    cases: List[Case],
    max_capacity: int = MAX_ACTIVE_CASES_PER_AGENT
) -> List[RankedAgent]:
    """Calculate workloads and rank in one step."""
    return rank_agents(calculate_workloads(agents, cases, max_capacity))


def transfer_candidates(ranked: List[RankedAgent], case: Case) -> List[RankedAgent]:
    """Agents a case may be transferred to: active, and not its current agent."""
    return [
        r for r in ranked
        if r.agent.id != case.assigned_agent_id and r.agent.is_active
    ]
