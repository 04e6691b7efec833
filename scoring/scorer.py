"""
Presentation helpers for 0-100 scores: labels, bands and colours shared by
the CLI and the dashboard.
"""
from __future__ import annotations

from typing import Optional

from models import MetricStatus


def score_band(score: float) -> str:
    """good (>= 90), average (>= 50) or poor."""
    if score >= 90:
        return "good"
    elif score >= 50:
        return "average"
    else:
        return "poor"


def score_label(score: float) -> str:
    if score >= 90:
        return "Excellent"
    elif score >= 75:
        return "Good"
    elif score >= 50:
        return "Needs Work"
    else:
        return "Poor"


def score_color(score: float) -> str:
    if score >= 90:
        return "#00C851"
    elif score >= 75:
        return "#FFD700"
    elif score >= 50:
        return "#FF8800"
    else:
        return "#FF4444"


# click.style colour names per band
TERMINAL_COLORS = {"good": "green", "average": "yellow", "poor": "red"}


def terminal_color(score: float) -> str:
    return TERMINAL_COLORS[score_band(score)]


_METRIC_COLORS = {
    MetricStatus.GOOD: "#00C851",
    MetricStatus.NEEDS_IMPROVEMENT: "#FF8800",
    MetricStatus.POOR: "#FF4444",
}


def metric_status_color(status: Optional[str]) -> str:
    return _METRIC_COLORS.get(status, "#888888")
