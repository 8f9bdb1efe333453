"""
Dashboard statistics.

Computes:
- Team overview: totals, success rate, status / service-type breakdowns and
  the recent monthly submission trend
- Agent dashboard: workload and throughput for one portal user
"""

import math
from collections import Counter
from datetime import datetime, timezone
from typing import List, Optional
from casedesk.assignment.models import Case, CaseStatus, Role
from casedesk.analytics.models import AgentDashboardStats, MonthlyCount, TeamOverview

TREND_MONTHS = 6

# Cases updated within a minute of submission haven't been worked yet
MIN_RESPONSE_SECONDS = 60


def team_overview(cases: List[Case]) -> TeamOverview:
    """Calculate portfolio-wide statistics."""
    total = len(cases)
    active = sum(1 for c in cases if c.is_active)
    approved = sum(1 for c in cases if c.status == CaseStatus.APPROVED)
    success_rate = int(math.floor(approved / total * 100 + 0.5)) if total else 0

    status_counts = Counter(c.status.value for c in cases)
    type_counts = Counter(c.service_type or "UNKNOWN" for c in cases)

    month_counts = Counter(
        c.submission_date.strftime("%Y-%m") for c in cases if c.submission_date
    )
    trend = [
        MonthlyCount(month=month, count=count)
        for month, count in sorted(month_counts.items())
    ][-TREND_MONTHS:]

    return TeamOverview(
        total_cases=total,
        active_cases=active,
        approved_cases=approved,
        success_rate=success_rate,
        status_distribution=dict(status_counts),
        service_type_distribution=dict(type_counts),
        monthly_trend=trend,
    )


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_response_time(seconds: float) -> str:
    """Human-readable duration: minutes under an hour, hours under a day, else days."""
    hours = seconds / 3600
    if hours < 1:
        minutes = int(math.floor(seconds / 60 + 0.5))
        return f"{minutes} min{'s' if minutes != 1 else ''}"
    if hours < 24:
        return f"{hours:.1f} hrs"
    return f"{hours / 24:.1f} days"


def average_response_time(cases: List[Case]) -> str:
    """Mean time from submission to last update, over cases that have been worked."""
    gaps = []
    for c in cases:
        if not c.submission_date or not c.last_updated:
            continue
        gap = (_as_utc(c.last_updated) - _as_utc(c.submission_date)).total_seconds()
        if gap > MIN_RESPONSE_SECONDS:
            gaps.append(gap)

    if not gaps:
        return "N/A"
    return format_response_time(sum(gaps) / len(gaps))


def agent_dashboard(
    user_id: str,
    role: Role,
    cases: List[Case],
    now: Optional[datetime] = None
) -> AgentDashboardStats:
    """
    Dashboard numbers for a user.

    Admins see every case; agents see only cases assigned to them.
    """
    now = _as_utc(now or datetime.now(timezone.utc))

    if role == Role.ADMIN:
        visible = list(cases)
    else:
        visible = [c for c in cases if c.assigned_agent_id and c.assigned_agent_id == user_id]

    completed_this_month = 0
    for c in visible:
        if c.status != CaseStatus.APPROVED or not c.last_updated:
            continue
        # lastUpdated doubles as the completion timestamp
        completed = _as_utc(c.last_updated)
        if completed.year == now.year and completed.month == now.month:
            completed_this_month += 1

    return AgentDashboardStats(
        assigned_cases=len(visible),
        active_cases=sum(1 for c in visible if c.is_active),
        completed_this_month=completed_this_month,
        pending_review=sum(1 for c in visible if c.status == CaseStatus.UNDER_REVIEW),
        documents_to_verify=sum(c.pending_documents for c in visible),
        response_time=average_response_time(visible),
    )
