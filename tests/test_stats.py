from datetime import datetime, timedelta, timezone

import pytest

from casedesk.analytics.stats import (
    agent_dashboard, average_response_time, format_response_time, team_overview
)
from casedesk.assignment.models import Case, CaseStatus, Role

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def _case(case_id, status, agent_id=None, submitted=None, updated=None, service_type=None, pending=0):
    return Case(
        id=case_id,
        reference_number=f"REF-{case_id}",
        status=status,
        assigned_agent_id=agent_id,
        submission_date=submitted,
        last_updated=updated,
        service_type=service_type,
        pending_documents=pending,
    )


@pytest.fixture
def portfolio():
    return [
        _case("1", CaseStatus.APPROVED, "a1", datetime(2026, 10, 1, tzinfo=timezone.utc), datetime(2026, 10, 5, tzinfo=timezone.utc), "WORK_PERMIT"),
        _case("2", CaseStatus.APPROVED, "a1", datetime(2026, 8, 1, tzinfo=timezone.utc), datetime(2026, 9, 5, tzinfo=timezone.utc), "WORK_PERMIT"),
        _case("3", CaseStatus.UNDER_REVIEW, "a1", datetime(2026, 10, 10, tzinfo=timezone.utc), datetime(2026, 10, 10, tzinfo=timezone.utc), "FAMILY_REUNIFICATION", pending=2),
        _case("4", CaseStatus.REJECTED, "a2", datetime(2026, 3, 1, tzinfo=timezone.utc), None, "STUDY_PERMIT"),
        _case("5", CaseStatus.SUBMITTED, None, datetime(2026, 5, 1, tzinfo=timezone.utc), None),
    ]


def test_team_overview(portfolio):
    overview = team_overview(portfolio)

    assert overview.total_cases == 5
    assert overview.active_cases == 2
    assert overview.approved_cases == 2
    assert overview.success_rate == 40
    assert overview.status_distribution == {
        "APPROVED": 2, "UNDER_REVIEW": 1, "REJECTED": 1, "SUBMITTED": 1
    }
    assert overview.service_type_distribution["WORK_PERMIT"] == 2
    assert overview.service_type_distribution["UNKNOWN"] == 1
    assert [m.month for m in overview.monthly_trend] == ["2026-03", "2026-05", "2026-08", "2026-10"]
    assert overview.monthly_trend[-1].count == 2


def test_team_overview_trend_keeps_last_six_months():
    cases = [
        _case(str(month), CaseStatus.SUBMITTED, submitted=datetime(2026, month, 1, tzinfo=timezone.utc))
        for month in range(1, 10)
    ]
    trend = team_overview(cases).monthly_trend
    assert [m.month for m in trend] == ["2026-04", "2026-05", "2026-06", "2026-07", "2026-08", "2026-09"]


def test_team_overview_empty():
    overview = team_overview([])
    assert overview.total_cases == 0
    assert overview.success_rate == 0
    assert overview.monthly_trend == []


def test_agent_dashboard_only_counts_own_cases(portfolio):
    stats = agent_dashboard("a1", Role.AGENT, portfolio, now=NOW)

    assert stats.assigned_cases == 3
    assert stats.active_cases == 1
    assert stats.completed_this_month == 1
    assert stats.pending_review == 1
    assert stats.documents_to_verify == 2
    # case 3 was updated within a minute of submission, so only 1 and 2 count
    assert stats.response_time == format_response_time(
        ((timedelta(days=4) + timedelta(days=35)) / 2).total_seconds()
    )


def test_admin_dashboard_sees_everything(portfolio):
    stats = agent_dashboard("admin", Role.ADMIN, portfolio, now=NOW)
    assert stats.assigned_cases == 5
    assert stats.active_cases == 2


def test_agent_without_cases(portfolio):
    stats = agent_dashboard("nobody", Role.AGENT, portfolio, now=NOW)
    assert stats.assigned_cases == 0
    assert stats.response_time == "N/A"


@pytest.mark.parametrize("seconds, expected", [
    (60 * 1.2, "1 min"),
    (60 * 30, "30 mins"),
    (3600 * 5.25, "5.2 hrs"),
    (3600 * 36, "1.5 days"),
])
def test_format_response_time(seconds, expected):
    assert format_response_time(seconds) == expected


def test_response_time_accepts_naive_timestamps():
    cases = [_case("n", CaseStatus.PROCESSING, "a1", datetime(2026, 1, 1, 9, 0), datetime(2026, 1, 1, 11, 0))]
    assert average_response_time(cases) == "2.0 hrs"
