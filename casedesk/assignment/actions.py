"""
Assignment and transfer actions.

Both actions validate locally against the latest snapshot and then issue a
single backend call. There is no retry and no local state: after a
successful call the caller re-reads the snapshot to see the change.

`backend` is anything exposing the portal client's coroutines:
list_agents(), list_cases(), assign_case(AssignRequest) and
transfer_case(TransferRequest).
"""

import asyncio
import logging
from typing import Optional, Union
from casedesk.assignment.errors import (
    NoAgentSelected, UnknownAgent, CaseNotFound, CaseNotAssigned, AgentAtCapacity,
    SameAgentTransfer, InvalidReason, BackendRejected
)
from casedesk.assignment.models import (
    AssignRequest, TransferReason, TransferRequest, WorkloadSnapshot
)
from casedesk.assignment.workload import calculate_agent_metrics
from casedesk.assignment.config import MAX_ACTIVE_CASES_PER_AGENT

logger = logging.getLogger(__name__)


async def fetch_snapshot(backend) -> WorkloadSnapshot:
    """Read the agent roster and the case collection."""
    agents, cases = await asyncio.gather(backend.list_agents(), backend.list_cases())
    return WorkloadSnapshot(agents=agents, cases=cases)


async def assign_case(
    backend,
    snapshot: WorkloadSnapshot,
    case_id: str,
    agent_id: Optional[str],
    max_capacity: int = MAX_ACTIVE_CASES_PER_AGENT
):
    """
    Assign a case to an agent.

    The agent's availability is recomputed from `snapshot`, never taken
    from an earlier ranking.

    Raises:
        NoAgentSelected: agent_id is empty
        CaseNotFound: case_id is not in the snapshot
        UnknownAgent: agent_id is not in the roster
        AgentAtCapacity: the agent has no capacity left
        BackendRejected: the backend call failed

    Returns:
        Whatever the backend returned for the command
    """
    if not agent_id:
        raise NoAgentSelected()
    if snapshot.find_case(case_id) is None:
        raise CaseNotFound(case_id)
    if snapshot.find_agent(agent_id) is None:
        raise UnknownAgent(agent_id)

    metrics = calculate_agent_metrics(agent_id, snapshot.cases, max_capacity)
    if not metrics.is_available:
        logger.warning(
            f"Refusing to assign case {case_id}: agent {agent_id} at "
            f"{metrics.active_cases}/{metrics.max_capacity}"
        )
        raise AgentAtCapacity(agent_id, metrics.active_cases, metrics.max_capacity)

    request = AssignRequest(case_id=case_id, agent_id=agent_id)
    try:
        result = await backend.assign_case(request)
    except BackendRejected as e:
        logger.error(f"Backend rejected assignment of case {case_id}: {e.detail}", exc_info=True)
        raise

    logger.info(f"Case {case_id} assigned to agent {agent_id}")
    return result


def _parse_reason(reason: Union[str, TransferReason, None]) -> TransferReason:
    if isinstance(reason, TransferReason):
        return reason
    if not isinstance(reason, str):
        raise InvalidReason(reason)
    try:
        return TransferReason(reason.strip().upper())
    except ValueError:
        raise InvalidReason(reason)


async def transfer_case(
    backend,
    snapshot: WorkloadSnapshot,
    case_id: str,
    new_agent_id: Optional[str],
    reason: Union[str, TransferReason, None],
    handover_notes: Optional[str] = None,
    notify_client: bool = True,
    notify_agent: bool = True
):
    """
    Transfer an assigned case to a different agent.

    Raises:
        NoAgentSelected: new_agent_id is empty
        InvalidReason: reason is not a TransferReason
        CaseNotFound: case_id is not in the snapshot
        CaseNotAssigned: the case has no current agent
        UnknownAgent: new_agent_id is not in the roster
        SameAgentTransfer: the case already belongs to new_agent_id
        BackendRejected: the backend call failed
    """
    if not new_agent_id:
        raise NoAgentSelected()
    parsed_reason = _parse_reason(reason)

    case = snapshot.find_case(case_id)
    if case is None:
        raise CaseNotFound(case_id)
    if case.assigned_agent_id is None:
        raise CaseNotAssigned(case_id)
    if snapshot.find_agent(new_agent_id) is None:
        raise UnknownAgent(new_agent_id)
    if case.assigned_agent_id == new_agent_id:
        logger.warning(f"Refusing no-op transfer of case {case_id} to {new_agent_id}")
        raise SameAgentTransfer(new_agent_id)

    request = TransferRequest(
        case_id=case_id,
        new_agent_id=new_agent_id,
        reason=parsed_reason,
        handover_notes=handover_notes,
        notify_client=notify_client,
        notify_agent=notify_agent,
    )
    try:
        result = await backend.transfer_case(request)
    except BackendRejected as e:
        logger.error(f"Backend rejected transfer of case {case_id}: {e.detail}", exc_info=True)
        raise

    logger.info(
        f"Case {case_id} transferred from {case.assigned_agent_id} to {new_agent_id} "
        f"({parsed_reason.value})"
    )
    return result
