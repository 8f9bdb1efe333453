"""
Errors raised by assignment and transfer actions.

Everything except BackendRejected is a pre-flight check raised before any
network call. BackendRejected wraps the backend's own failure and is never
retried.
"""

from typing import Optional


class AssignmentError(Exception):
    """Base class for assignment/transfer failures."""


class NoAgentSelected(AssignmentError):
    def __init__(self):
        super().__init__("No target agent selected")


class UnknownAgent(AssignmentError):
    def __init__(self, agent_id: str):
        self.agent_id = agent_id
        super().__init__(f"Agent {agent_id} is not in the current roster")


class CaseNotFound(AssignmentError):
    def __init__(self, case_id: str):
        self.case_id = case_id
        super().__init__(f"Case {case_id} not found")


class CaseNotAssigned(AssignmentError):
    def __init__(self, case_id: str):
        self.case_id = case_id
        super().__init__(f"Case {case_id} has no agent to transfer from; assign it instead")


class AgentAtCapacity(AssignmentError):
    def __init__(self, agent_id: str, active_cases: int, max_capacity: int):
        self.agent_id = agent_id
        self.active_cases = active_cases
        self.max_capacity = max_capacity
        super().__init__(
            f"Agent {agent_id} is at capacity ({active_cases}/{max_capacity} active cases)"
        )


class SameAgentTransfer(AssignmentError):
    def __init__(self, agent_id: str):
        self.agent_id = agent_id
        super().__init__(f"Case is already assigned to agent {agent_id}")


class InvalidReason(AssignmentError):
    def __init__(self, reason):
        self.reason = reason
        super().__init__(f"Invalid transfer reason: {reason!r}")


class BackendRejected(AssignmentError):
    """The backend refused the command or could not be reached."""

    def __init__(self, detail: str, status_code: Optional[int] = None):
        self.detail = detail
        self.status_code = status_code
        super().__init__(detail)
