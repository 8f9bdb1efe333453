"""
casedesk API

Ranks agents for case assignment and dispatches assign/transfer commands to
the portal backend.
"""

import os
import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from dotenv import load_dotenv

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

from casedesk.analytics import team_overview, agent_dashboard
from casedesk.assignment import (
    assign_case, transfer_case, fetch_snapshot, rank_roster, transfer_candidates
)
from casedesk.assignment.availability import utilization_band
from casedesk.assignment.errors import (
    AssignmentError, NoAgentSelected, InvalidReason, SameAgentTransfer,
    AgentAtCapacity, UnknownAgent, CaseNotFound, CaseNotAssigned, BackendRejected
)
from casedesk.assignment.models import RankedAgent, Role
from casedesk.db import HistoryService, get_db, init_db
from casedesk.tools.portal import PortalClient
from casedesk.tools.session import (
    PermissionDenied, PortalSession, require_case_handler, session_from_env
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


app = FastAPI(
    title="casedesk",
    description="Workload-based case assignment for the immigration portal",
    version="0.1.0",
    lifespan=lifespan
)

ERROR_STATUS = {
    NoAgentSelected: 400,
    InvalidReason: 400,
    SameAgentTransfer: 400,
    CaseNotAssigned: 400,
    AgentAtCapacity: 409,
    UnknownAgent: 404,
    CaseNotFound: 404,
}


@app.exception_handler(AssignmentError)
async def assignment_error_handler(request: Request, exc: AssignmentError):
    if isinstance(exc, BackendRejected):
        return JSONResponse(status_code=exc.status_code or 502, content={"detail": exc.detail})
    status_code = ERROR_STATUS.get(type(exc), 400)
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "error": type(exc).__name__}
    )


@app.exception_handler(PermissionDenied)
async def permission_denied_handler(request: Request, exc: PermissionDenied):
    return JSONResponse(status_code=403, content={"detail": str(exc)})


# =============================================================================
# Dependencies
# =============================================================================

def get_portal_session(
    authorization: Optional[str] = Header(None),
    x_user_id: Optional[str] = Header(None),
    x_user_role: Optional[str] = Header(None)
) -> PortalSession:
    """Session from the caller's bearer token, or the service session from .env."""
    if not authorization:
        try:
            return session_from_env()
        except ValueError:
            raise HTTPException(status_code=401, detail="Missing bearer token")

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise HTTPException(status_code=401, detail="Invalid authorization header")
    try:
        role = Role((x_user_role or "AGENT").upper())
    except ValueError:
        raise HTTPException(status_code=401, detail=f"Unknown role: {x_user_role}")
    return PortalSession(user_id=x_user_id or "anonymous", role=role, access_token=token)


def get_portal_client(session: PortalSession = Depends(get_portal_session)) -> PortalClient:
    """Portal client bound to the request's session."""
    require_case_handler(session)
    return PortalClient(session)


def _ranked_view(ranked: RankedAgent) -> dict:
    view = ranked.model_dump(mode="json")
    view["agent"]["display_name"] = ranked.agent.display_name
    view["utilization_band"] = utilization_band(ranked.metrics.utilization_rate)
    return view


def _record_history(db: Session, **fields):
    """History is an audit trail; failing to write it must not hide the backend outcome."""
    try:
        HistoryService(db).record(**fields)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to record assignment history: {e}", exc_info=True)


# =============================================================================
# Routes
# =============================================================================

@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok", "service": "casedesk"}


@app.get("/agents/workload")
async def list_agent_workload(client: PortalClient = Depends(get_portal_client)):
    """All agents with workload metrics, best candidate first."""
    snapshot = await fetch_snapshot(client)
    return [_ranked_view(r) for r in rank_roster(snapshot.agents, snapshot.cases)]


@app.get("/cases/{case_id}/agents/ranked")
async def rank_agents_for_case(
    case_id: str,
    transfer: bool = False,
    client: PortalClient = Depends(get_portal_client)
):
    """Ranked agents for a case. Use ?transfer=true for transfer candidates."""
    snapshot = await fetch_snapshot(client)
    case = snapshot.find_case(case_id)
    if case is None:
        raise CaseNotFound(case_id)

    ranked = rank_roster(snapshot.agents, snapshot.cases)
    if transfer:
        ranked = transfer_candidates(ranked, case)
    return {
        "case_id": case.id,
        "reference_number": case.reference_number,
        "assigned_agent_id": case.assigned_agent_id,
        "agents": [_ranked_view(r) for r in ranked],
    }


class AssignBody(BaseModel):
    agent_id: Optional[str] = None


class TransferBody(BaseModel):
    new_agent_id: Optional[str] = None
    reason: Optional[str] = "REASSIGNMENT"
    handover_notes: Optional[str] = None
    notify_client: bool = True
    notify_agent: bool = True


@app.post("/cases/{case_id}/assign")
async def assign_case_endpoint(
    case_id: str,
    body: AssignBody,
    client: PortalClient = Depends(get_portal_client),
    db: Session = Depends(get_db)
):
    """Assign an unassigned case. Availability is checked against a fresh snapshot."""
    snapshot = await fetch_snapshot(client)
    try:
        result = await assign_case(client, snapshot, case_id, body.agent_id)
    except BackendRejected as e:
        _record_history(
            db, case_id=case_id, action="assign", to_agent_id=body.agent_id,
            outcome="rejected", requested_by=client.session.user_id, detail=e.detail
        )
        raise

    _record_history(
        db, case_id=case_id, action="assign", to_agent_id=body.agent_id,
        outcome="accepted", requested_by=client.session.user_id
    )
    return {"success": True, "case_id": case_id, "agent_id": body.agent_id, "result": result}


@app.post("/cases/{case_id}/transfer")
async def transfer_case_endpoint(
    case_id: str,
    body: TransferBody,
    client: PortalClient = Depends(get_portal_client),
    db: Session = Depends(get_db)
):
    """Transfer an assigned case to another agent."""
    snapshot = await fetch_snapshot(client)
    case = snapshot.find_case(case_id)
    history = dict(
        case_id=case_id,
        action="transfer",
        from_agent_id=case.assigned_agent_id if case else None,
        to_agent_id=body.new_agent_id,
        reason=(body.reason or "").strip().upper() or None,
        handover_notes=body.handover_notes,
        requested_by=client.session.user_id,
    )
    try:
        result = await transfer_case(
            client, snapshot, case_id, body.new_agent_id, body.reason,
            handover_notes=body.handover_notes,
            notify_client=body.notify_client,
            notify_agent=body.notify_agent
        )
    except BackendRejected as e:
        _record_history(db, outcome="rejected", detail=e.detail, **history)
        raise

    _record_history(db, outcome="accepted", **history)
    return {"success": True, "case_id": case_id, "agent_id": body.new_agent_id, "result": result}


@app.get("/cases/{case_id}/history")
async def get_case_history(
    case_id: str,
    session: PortalSession = Depends(get_portal_session),
    db: Session = Depends(get_db)
):
    """Assign/transfer commands sent for a case, newest first."""
    require_case_handler(session)
    records = HistoryService(db).history_for_case(case_id)
    return [
        {
            "action": r.action,
            "from_agent_id": r.from_agent_id,
            "to_agent_id": r.to_agent_id,
            "reason": r.reason,
            "handover_notes": r.handover_notes,
            "requested_by": r.requested_by,
            "outcome": r.outcome,
            "detail": r.detail,
            "created_at": r.created_at.isoformat() if r.created_at else None,
        }
        for r in records
    ]


@app.get("/analytics/overview")
async def get_analytics_overview(client: PortalClient = Depends(get_portal_client)):
    """Portfolio-wide case statistics."""
    cases = await client.list_cases()
    return team_overview(cases)


@app.get("/agents/{agent_id}/dashboard")
async def get_agent_dashboard(
    agent_id: str,
    client: PortalClient = Depends(get_portal_client)
):
    """Dashboard numbers for an agent. Agents may only view their own."""
    session = client.session
    if session.role != Role.ADMIN and session.user_id != agent_id:
        raise PermissionDenied("Agents can only view their own dashboard")

    role = session.role if session.user_id == agent_id else Role.AGENT
    cases = await client.list_cases()
    return agent_dashboard(agent_id, role, cases)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("casedesk.main:app", host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
