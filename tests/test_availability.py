import pytest

from casedesk.assignment.availability import classify_availability, utilization_band
from casedesk.assignment.models import Availability
from casedesk.assignment.workload import calculate_agent_metrics

from conftest import build_cases


@pytest.mark.parametrize("active, expected", [
    (0, Availability.AVAILABLE),
    (15, Availability.AVAILABLE),
    (16, Availability.LIMITED),   # 80%
    (19, Availability.LIMITED),   # 95%
    (20, Availability.UNAVAILABLE),
    (25, Availability.UNAVAILABLE),
])
def test_classify_availability(active, expected):
    metrics = calculate_agent_metrics("A", build_cases("A", active), max_capacity=20)
    assert classify_availability(metrics, limited_threshold=80) == expected


def test_custom_limited_threshold():
    metrics = calculate_agent_metrics("A", build_cases("A", 10), max_capacity=20)
    assert classify_availability(metrics, limited_threshold=50) == Availability.LIMITED
    assert classify_availability(metrics, limited_threshold=51) == Availability.AVAILABLE


@pytest.mark.parametrize("rate, band", [
    (0, "low"),
    (49.9, "low"),
    (50, "moderate"),
    (70, "high"),
    (89.9, "high"),
    (90, "critical"),
    (130, "critical"),
])
def test_utilization_band(rate, band):
    assert utilization_band(rate) == band
