"""
Metric scorer for Core Web Vitals and the other Lighthouse timing metrics.

Scoring curve (three branches, per metric threshold pair {good, poor}):
- value <= good          → 90..100, approaching 100 as the value approaches 0
- good < value < poor    → linear 90 → 50
- value >= poor          → 49 → 0, falling with the overage ratio past `poor`
"""
from __future__ import annotations

from typing import Optional

from config import CWV_THRESHOLDS, LIGHTHOUSE_WEIGHTS
from models import (
    CoreWebVitalsData,
    DiagnosticSummary,
    MetricData,
    MetricStatus,
    PerformanceDiagnostics,
    PerformanceMetrics,
    PerformanceRecommendation,
)


METRIC_INFO: dict[str, tuple[str, str]] = {
    "lcp":  ("Largest Contentful Paint", "Time until the main content is visible"),
    "cls":  ("Cumulative Layout Shift", "How much the page layout shifts during loading"),
    "tbt":  ("Total Blocking Time", "Time the page is unresponsive to user input"),
    "fcp":  ("First Contentful Paint", "Time until first content appears"),
    "si":   ("Speed Index", "How quickly content is visually displayed"),
    "ttfb": ("Time to First Byte", "Server response time"),
    "tti":  ("Time to Interactive", "Time until the page is fully interactive"),
}

# Metrics that count towards the pass/fail tally
CORE_METRICS = ("lcp", "cls", "tbt")


def metric_status(metric: str, value: float) -> str:
    threshold = CWV_THRESHOLDS[metric]
    if value <= threshold["good"]:
        return MetricStatus.GOOD
    if value >= threshold["poor"]:
        return MetricStatus.POOR
    return MetricStatus.NEEDS_IMPROVEMENT


def metric_score(metric: str, value: float) -> int:
    threshold = CWV_THRESHOLDS[metric]
    good, poor = threshold["good"], threshold["poor"]

    if value <= good:
        return round(90 + (1 - value / good) * 10)
    if value >= poor:
        overage = (value - poor) / poor
        return max(0, round(49 - overage * 49))

    position = (value - good) / (poor - good)
    return round(90 - position * 40)


def format_metric_value(metric: str, value: float) -> str:
    if metric == "cls":
        return f"{value:.3f}"
    if value >= 1000:
        return f"{value / 1000:.1f}s"
    return f"{round(value)}ms"


def score_metric(metric: str, value: Optional[float]) -> Optional[MetricData]:
    """Build MetricData for one measured value; None when it was not measured."""
    if value is None:
        return None

    score = metric_score(metric, value)
    weight = LIGHTHOUSE_WEIGHTS[metric]
    label, description = METRIC_INFO[metric]

    return MetricData(
        value=value,
        score=score,
        weight=weight,
        weighted_score=round(score * weight * 100) / 100,
        status=metric_status(metric, value),
        threshold=dict(CWV_THRESHOLDS[metric]),
        display_value=format_metric_value(metric, value),
        label=label,
        description=description,
    )


# ── Recommendations ───────────────────────────────────────────────────────────

def _recommendation(
    data: MetricData,
    rec_id: str,
    metric: str,
    fallback_priority: int,
    title: str,
    description: str,
    how_to_fix: str,
    url: str,
    ratio: float,
) -> PerformanceRecommendation:
    poor = data.status == MetricStatus.POOR
    return PerformanceRecommendation(
        id=rec_id,
        metric=metric,
        priority=1 if poor else fallback_priority,
        impact="high" if poor else "medium",
        title=title,
        description=description,
        how_to_fix=how_to_fix,
        learn_more_url=url,
        ratio=ratio,
    )


def performance_recommendations(
    lcp: Optional[MetricData],
    cls: Optional[MetricData],
    tbt: Optional[MetricData],
) -> list[PerformanceRecommendation]:
    recs: list[PerformanceRecommendation] = []

    if cls and cls.status != MetricStatus.GOOD:
        ratio = cls.value / cls.threshold["good"]
        recs.append(_recommendation(
            cls, "fix-cls", "cls", 2,
            "Fix Layout Shifts",
            f"Your CLS of {cls.display_value} is {ratio:.1f}x the target threshold. "
            "Elements shift around as the page loads, frustrating users.",
            "Set explicit width and height on images, videos, and embeds. Avoid inserting "
            "content above existing content. Use CSS transform for animations.",
            "https://web.dev/cls/",
            ratio,
        ))

    if tbt and tbt.status != MetricStatus.GOOD:
        ratio = tbt.value / tbt.threshold["good"]
        recs.append(_recommendation(
            tbt, "fix-tbt", "tbt", 3,
            "Reduce Blocking Time",
            f"Your TBT of {tbt.display_value} makes the page feel sluggish. "
            "Users can't interact until JavaScript finishes executing.",
            "Break up long JavaScript tasks, defer non-critical scripts, remove unused code, "
            "and consider using a web worker for heavy computations.",
            "https://web.dev/tbt/",
            ratio,
        ))

    if lcp and lcp.status != MetricStatus.GOOD:
        ratio = lcp.value / lcp.threshold["good"]
        recs.append(_recommendation(
            lcp, "fix-lcp", "lcp", 4,
            "Speed Up Content Loading",
            f"Your LCP of {lcp.display_value} means users wait too long to see the main "
            "content. This increases bounce rates.",
            "Optimize and preload your largest image, use a CDN, enable caching, and reduce "
            "server response time (TTFB).",
            "https://web.dev/lcp/",
            ratio,
        ))

    recs.sort(key=lambda r: r.priority)
    return recs


# ── Diagnostics ───────────────────────────────────────────────────────────────

def _banded(value: float, poor_above: float, warn_above: float) -> str:
    if value > poor_above:
        return MetricStatus.POOR
    if value > warn_above:
        return MetricStatus.NEEDS_IMPROVEMENT
    return MetricStatus.GOOD


def diagnostic_summaries(diag: Optional[PerformanceDiagnostics]) -> list[DiagnosticSummary]:
    out: list[DiagnosticSummary] = []
    if diag is None:
        return out

    if diag.total_byte_weight:
        mb = diag.total_byte_weight / 1024 / 1024
        value = f"{mb:.1f} MB" if mb >= 1 else f"{diag.total_byte_weight / 1024:.0f} KB"
        out.append(DiagnosticSummary("Total Page Weight", value, _banded(mb, 3, 1.5)))

    if diag.main_thread_total_time:
        sec = diag.main_thread_total_time / 1000
        out.append(DiagnosticSummary("Main Thread Work", f"{sec:.1f}s", _banded(sec, 4, 2)))

    blocking = diag.third_party_total_blocking_time
    if blocking is not None and blocking > 0:
        out.append(DiagnosticSummary(
            "3rd Party Blocking", f"{round(blocking)}ms", _banded(blocking, 250, 150),
        ))

    if diag.network_total_requests:
        n = diag.network_total_requests
        out.append(DiagnosticSummary("Network Requests", str(n), _banded(n, 100, 50)))

    return out


def core_web_vitals(
    metrics: Optional[PerformanceMetrics],
    diagnostics: Optional[PerformanceDiagnostics] = None,
) -> CoreWebVitalsData:
    """Score every measured metric and summarise the core trio."""
    metrics = metrics or PerformanceMetrics()
    scored = {key: score_metric(key, getattr(metrics, key)) for key in METRIC_INFO}

    core = [scored[k] for k in CORE_METRICS if scored[k] is not None]
    passing = sum(1 for m in core if m.status == MetricStatus.GOOD)

    summaries = diagnostic_summaries(diagnostics)

    return CoreWebVitalsData(
        lcp=scored["lcp"],
        cls=scored["cls"],
        tbt=scored["tbt"],
        fcp=scored["fcp"],
        si=scored["si"],
        ttfb=scored["ttfb"],
        tti=scored["tti"],
        passing_count=passing,
        failing_count=len(core) - passing,
        recommendations=performance_recommendations(scored["lcp"], scored["cls"], scored["tbt"]),
        diagnostic_summaries=summaries or None,
    )
