"""
Explicit portal session.

Carries the caller's identity and bearer token to the portal client instead
of reading auth state from globals. Created when a request (or the service)
starts and dropped on logout.
"""

import os
from pydantic import BaseModel
from casedesk.assignment.models import Role, CASE_HANDLING_ROLES


class PermissionDenied(Exception):
    """The session may not perform case-handling operations."""


class PortalSession(BaseModel):
    """An authenticated portal user."""
    user_id: str
    role: Role
    access_token: str

    model_config = {"frozen": True}

    @property
    def can_handle_cases(self) -> bool:
        return self.role in CASE_HANDLING_ROLES


def require_case_handler(session: PortalSession) -> PortalSession:
    """Only ADMIN and AGENT sessions may read the roster or move cases."""
    if not session.access_token:
        raise PermissionDenied("Missing access token")
    if not session.can_handle_cases:
        raise PermissionDenied(f"Role {session.role.value} cannot handle cases")
    return session


def auth_headers(session: PortalSession) -> dict:
    """Authorization headers for backend calls."""
    return {
        "Authorization": f"Bearer {session.access_token}",
        "Content-Type": "application/json"
    }


def session_from_env() -> PortalSession:
    """Build a service session from PORTAL_API_TOKEN / PORTAL_USER_ID / PORTAL_USER_ROLE."""
    token = os.getenv("PORTAL_API_TOKEN")
    if not token:
        raise ValueError("PORTAL_API_TOKEN not configured")
    return PortalSession(
        user_id=os.getenv("PORTAL_USER_ID", "service"),
        role=Role(os.getenv("PORTAL_USER_ROLE", "ADMIN").upper()),
        access_token=token,
    )
