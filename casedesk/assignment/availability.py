"""Availability classification for agent metrics."""

from casedesk.assignment.config import LIMITED_UTILIZATION_THRESHOLD
from casedesk.assignment.models import AgentMetrics, Availability


def classify_availability(
    metrics: AgentMetrics,
    limited_threshold: float = LIMITED_UTILIZATION_THRESHOLD
) -> Availability:
    """
    Map metrics to an availability label.

    - UNAVAILABLE: no capacity left (available_capacity <= 0)
    - LIMITED: has room, but utilization at or above the threshold
    - AVAILABLE: otherwise
    """
    if not metrics.is_available:
        return Availability.UNAVAILABLE
    if metrics.utilization_rate >= limited_threshold:
        return Availability.LIMITED
    return Availability.AVAILABLE


def utilization_band(rate: float) -> str:
    """Severity band for displaying a utilization rate."""
    if rate >= 90:
        return "critical"
    if rate >= 70:
        return "high"
    if rate >= 50:
        return "moderate"
    return "low"
