"""
Client for the case-management portal backend.

Reads the agent roster and case collection, and sends assign/transfer
commands. Records are validated into typed models at this boundary;
malformed records are logged and skipped.
"""

import os
import logging
from typing import Any, List, Optional
import httpx
from fastapi import HTTPException
from pydantic import ValidationError
from casedesk.assignment.errors import BackendRejected
from casedesk.assignment.models import (
    Agent, Case, AssignRequest, TransferRequest, CASE_HANDLING_ROLES
)
from casedesk.tools.session import PortalSession, auth_headers, require_case_handler

logger = logging.getLogger(__name__)


def _get_portal_base_url() -> str:
    """Get portal API base URL."""
    url = os.getenv("PORTAL_API_URL")
    if not url:
        raise HTTPException(
            status_code=500,
            detail="Portal API URL not configured. Set PORTAL_API_URL."
        )
    return url.rstrip("/")


def _unwrap(payload: Any, key: str) -> list:
    """Pull a collection out of a bare or {"data": ...} wrapped response."""
    if isinstance(payload, list):
        return payload
    if not isinstance(payload, dict):
        return []
    if isinstance(payload.get("data"), (dict, list)):
        payload = payload["data"]
        if isinstance(payload, list):
            return payload
    items = payload.get(key, [])
    return items if isinstance(items, list) else []


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict):
        return str(body.get("error") or body.get("message") or body)
    return str(body)


def parse_agent(record: dict) -> Agent:
    """Build an Agent from a backend user record."""
    return Agent(
        id=record["id"],
        first_name=record.get("firstName") or "",
        last_name=record.get("lastName") or "",
        email=record.get("email"),
        is_active=record.get("isActive", True),
        role=str(record.get("role", "AGENT")).upper(),
    )


def parse_case(record: dict) -> Case:
    """Build a Case from a backend case record."""
    documents = record.get("documents") or []
    pending = sum(1 for d in documents if isinstance(d, dict) and d.get("status") == "PENDING")
    return Case(
        id=record["id"],
        reference_number=record.get("referenceNumber", ""),
        status=str(record.get("status", "")).upper(),
        assigned_agent_id=record.get("assignedAgentId"),
        submission_date=record.get("submissionDate"),
        last_updated=record.get("lastUpdated"),
        service_type=record.get("serviceType"),
        pending_documents=pending,
    )


class PortalClient:
    """Async client bound to one session."""

    def __init__(
        self,
        session: PortalSession,
        base_url: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.session = session
        self.base_url = (base_url or _get_portal_base_url()).rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                response = await client.request(
                    method,
                    f"{self.base_url}{path}",
                    headers=auth_headers(self.session),
                    **kwargs
                )
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                raise BackendRejected(
                    f"Portal API error: {_error_detail(e.response)}",
                    status_code=e.response.status_code
                )
            except httpx.RequestError as e:
                raise BackendRejected(
                    f"Failed to connect to portal API: {str(e)}",
                    status_code=503
                )

        if not response.content:
            return {}
        return response.json()

    async def list_agents(self) -> List[Agent]:
        """Fetch the case-handling roster."""
        require_case_handler(self.session)
        data = await self._request("GET", "/api/users", params={"role": "AGENT"})

        agents = []
        for record in _unwrap(data, "users"):
            try:
                agent = parse_agent(record)
            except (KeyError, TypeError, ValidationError) as e:
                logger.warning(f"Skipping malformed user record: {record}, error: {e}")
                continue
            if agent.role not in CASE_HANDLING_ROLES:
                continue
            agents.append(agent)

        logger.info(f"Fetched {len(agents)} agents")
        return agents

    async def list_cases(self) -> List[Case]:
        """Fetch every case, unfiltered."""
        data = await self._request("GET", "/api/cases")

        cases = []
        for record in _unwrap(data, "cases"):
            try:
                cases.append(parse_case(record))
            except (KeyError, TypeError, ValidationError) as e:
                logger.warning(f"Skipping malformed case record: {record}, error: {e}")
                continue

        logger.info(f"Fetched {len(cases)} cases")
        return cases

    async def assign_case(self, request: AssignRequest) -> dict:
        """Send an assign command."""
        require_case_handler(self.session)
        return await self._request(
            "PATCH",
            f"/api/cases/{request.case_id}/assign",
            json={"agentId": request.agent_id}
        )

    async def transfer_case(self, request: TransferRequest) -> dict:
        """Send a transfer command."""
        require_case_handler(self.session)
        return await self._request(
            "POST",
            f"/api/cases/{request.case_id}/transfer",
            json={
                "newAgentId": request.new_agent_id,
                "reason": request.reason.value,
                "handoverNotes": request.handover_notes,
                "notifyClient": request.notify_client,
                "notifyAgent": request.notify_agent,
            }
        )
