from datetime import datetime, timezone

import pytest

from casedesk.assignment.errors import BackendRejected
from casedesk.assignment.models import Agent, Case, CaseStatus, Role, WorkloadSnapshot
from casedesk.tools.session import PortalSession


def build_agent(agent_id, first_name="", last_name="", **kwargs):
    return Agent(
        id=agent_id,
        first_name=first_name or agent_id,
        last_name=last_name,
        email=kwargs.pop("email", f"{agent_id.lower()}@example.com"),
        **kwargs
    )


def build_cases(agent_id, count, status=CaseStatus.PROCESSING, prefix=None):
    prefix = prefix or f"{agent_id}-{status.value}"
    return [
        Case(
            id=f"{prefix}-{i}",
            reference_number=f"REF-{prefix}-{i}",
            status=status,
            assigned_agent_id=agent_id,
            submission_date=datetime(2026, 9, 1, tzinfo=timezone.utc),
            last_updated=datetime(2026, 9, 2, tzinfo=timezone.utc),
        )
        for i in range(count)
    ]


class FakeBackend:
    """Stands in for PortalClient and records every command it receives."""

    def __init__(self, agents, cases, fail_with=None, session=None):
        self.agents = list(agents)
        self.cases = list(cases)
        self.fail_with = fail_with
        self.session = session or PortalSession(user_id="admin-1", role=Role.ADMIN, access_token="token")
        self.assign_calls = []
        self.transfer_calls = []

    async def list_agents(self):
        return list(self.agents)

    async def list_cases(self):
        return list(self.cases)

    async def assign_case(self, request):
        self.assign_calls.append(request)
        if self.fail_with:
            raise self.fail_with
        return {"success": True}

    async def transfer_case(self, request):
        self.transfer_calls.append(request)
        if self.fail_with:
            raise self.fail_with
        return {"success": True}


@pytest.fixture
def agents():
    return [build_agent("A"), build_agent("B"), build_agent("C")]


@pytest.fixture
def example_cases():
    """A at 20 active, B at 5, C at 19; plus one unassigned case."""
    unassigned = Case(id="NEW-1", reference_number="REF-NEW-1", status=CaseStatus.SUBMITTED)
    return (
        build_cases("A", 20)
        + build_cases("B", 5)
        + build_cases("C", 19)
        + [unassigned]
    )


@pytest.fixture
def snapshot(agents, example_cases):
    return WorkloadSnapshot(agents=agents, cases=example_cases)


@pytest.fixture
def backend(agents, example_cases):
    return FakeBackend(agents, example_cases)


@pytest.fixture
def rejecting_backend(agents, example_cases):
    return FakeBackend(agents, example_cases, fail_with=BackendRejected("Portal API error: conflict", status_code=409))
