"""Dashboard analytics for casedesk."""

from casedesk.analytics.stats import team_overview, agent_dashboard
from casedesk.analytics.models import TeamOverview, AgentDashboardStats

__all__ = [
    "team_overview",
    "agent_dashboard",
    "TeamOverview",
    "AgentDashboardStats",
]
