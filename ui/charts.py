"""
Plotly chart builders for the page audit dashboard.
All functions return plotly Figure objects.
"""
from __future__ import annotations

import plotly.graph_objects as go

from models import AuditIssue, CoreWebVitalsData, NewAuditScores, ScoreBreakdown, Severity
from scoring.scorer import metric_status_color, score_color

_BG = "#1A1D27"
_PAPER = "#0E1117"
_GRID = "#2A2D3A"
_TEXT = "#FAFAFA"

_ISSUE_SEVERITIES = [Severity.CRITICAL, Severity.WARNING, Severity.INFO]


def _base_layout(**kwargs) -> dict:
    return {
        "paper_bgcolor": _PAPER,
        "plot_bgcolor":  _BG,
        "font": {"color": _TEXT, "family": "sans-serif"},
        "margin": {"l": 20, "r": 20, "t": 40, "b": 20},
        **kwargs,
    }


def _title(text: str) -> dict:
    return {"text": text, "x": 0.5, "xanchor": "center", "font": {"size": 14, "color": _TEXT}}


# ── Overall score gauge ────────────────────────────────────────────────────────

def overall_score_gauge(score: float, title: str = "Overall Score") -> go.Figure:
    color = score_color(score)
    fig = go.Figure(go.Indicator(
        mode="gauge+number",
        value=score,
        domain={"x": [0, 1], "y": [0, 1]},
        number={"font": {"size": 48, "color": color}},
        gauge={
            "axis": {"range": [0, 100], "tickcolor": _TEXT, "tickfont": {"color": _TEXT}},
            "bar": {"color": color, "thickness": 0.25},
            "bgcolor": _BG,
            "borderwidth": 2,
            "bordercolor": _GRID,
            "steps": [
                {"range": [0, 50],  "color": "#3A1A1A"},
                {"range": [50, 75], "color": "#3A2E1A"},
                {"range": [75, 90], "color": "#2A3A1A"},
                {"range": [90, 100], "color": "#1A3A1A"},
            ],
            "threshold": {
                "line": {"color": color, "width": 4},
                "thickness": 0.8,
                "value": score,
            },
        },
    ))
    fig.update_layout(**_base_layout(height=260), title=_title(title))
    return fig


# ── Category scores ────────────────────────────────────────────────────────────

def category_scores_bar(scores: NewAuditScores) -> go.Figure:
    cats = ["performance", "visibility", "security", "accessibility", "trust"]
    values = [getattr(scores, c) for c in cats]

    fig = go.Figure(go.Bar(
        x=[c.capitalize() for c in cats],
        y=values,
        marker_color=[score_color(v) for v in values],
        text=values,
        textposition="outside",
        hovertemplate="<b>%{x}</b>: %{y}/100<extra></extra>",
    ))
    fig.update_layout(
        **_base_layout(height=300),
        title=_title("Category Scores"),
        xaxis={"gridcolor": _GRID, "color": _TEXT},
        yaxis={"range": [0, 110], "gridcolor": _GRID, "color": _TEXT},
        showlegend=False,
    )
    return fig


# ── Issues by category (horizontal bar, stacked by severity) ──────────────────

def issues_by_category_bar(issues: list[AuditIssue]) -> go.Figure:
    counts: dict[str, dict[str, int]] = {}
    for issue in issues:
        counts.setdefault(issue.category, {s: 0 for s in _ISSUE_SEVERITIES})
        counts[issue.category][issue.severity] = counts[issue.category].get(issue.severity, 0) + 1

    if not counts:
        return _empty_chart("No issues found")

    cats = sorted(counts.keys(), key=lambda c: -(
        counts[c][Severity.CRITICAL] * 100 + counts[c][Severity.WARNING] * 10 + counts[c][Severity.INFO]
    ))

    fig = go.Figure()
    for sev in _ISSUE_SEVERITIES:
        fig.add_trace(go.Bar(
            y=cats,
            x=[counts[c].get(sev, 0) for c in cats],
            name=sev.capitalize(),
            orientation="h",
            marker_color=Severity.COLORS[sev],
            hovertemplate=f"<b>%{{y}}</b><br>{sev.capitalize()}: %{{x}}<extra></extra>",
        ))

    fig.update_layout(
        **_base_layout(height=max(300, len(cats) * 38 + 80)),
        title=_title("Issues by Category"),
        barmode="stack",
        legend={"orientation": "h", "y": -0.15, "font": {"color": _TEXT}},
        xaxis={"title": "Issue Count", "gridcolor": _GRID, "color": _TEXT},
        yaxis={"gridcolor": _GRID, "color": _TEXT, "automargin": True},
    )
    return fig


# ── Issues by severity donut ───────────────────────────────────────────────────

def issues_by_severity_donut(issues: list[AuditIssue]) -> go.Figure:
    counts = {s: 0 for s in _ISSUE_SEVERITIES}
    for issue in issues:
        if issue.severity in counts:
            counts[issue.severity] += 1

    values = [counts[s] for s in _ISSUE_SEVERITIES]
    fig = go.Figure(go.Pie(
        labels=[s.capitalize() for s in _ISSUE_SEVERITIES],
        values=values,
        hole=0.6,
        marker={"colors": [Severity.COLORS[s] for s in _ISSUE_SEVERITIES],
                "line": {"color": _BG, "width": 2}},
        hovertemplate="<b>%{label}</b>: %{value} issues<extra></extra>",
    ))
    fig.update_layout(
        **_base_layout(height=260),
        title=_title("Issues by Severity"),
        annotations=[{
            "text": f"<b>{sum(values)}</b><br>Total",
            "x": 0.5, "y": 0.5,
            "font_size": 18,
            "font_color": _TEXT,
            "showarrow": False,
        }],
        legend={"font": {"color": _TEXT}},
        showlegend=True,
    )
    return fig


# ── Core Web Vitals ────────────────────────────────────────────────────────────

def core_web_vitals_bar(cwv: CoreWebVitalsData) -> go.Figure:
    """Sub-score per metric, coloured by its good / needs-improvement / poor status."""
    metrics = [
        (name.upper(), getattr(cwv, name))
        for name in ("lcp", "cls", "tbt", "fcp", "si", "ttfb", "tti")
        if getattr(cwv, name) is not None
    ]
    if not metrics:
        return _empty_chart("No Core Web Vitals data")

    fig = go.Figure(go.Bar(
        x=[label for label, _ in metrics],
        y=[m.score for _, m in metrics],
        marker_color=[metric_status_color(m.status) for _, m in metrics],
        text=[m.display_value for _, m in metrics],
        textposition="outside",
        hovertemplate="<b>%{x}</b><br>%{text}<br>Score: %{y}<extra></extra>",
    ))
    fig.update_layout(
        **_base_layout(height=300),
        title=_title("Core Web Vitals"),
        xaxis={"gridcolor": _GRID, "color": _TEXT},
        yaxis={"title": "Metric score", "range": [0, 110], "gridcolor": _GRID, "color": _TEXT},
        showlegend=False,
    )
    return fig


# ── Score breakdown waterfall ──────────────────────────────────────────────────

def breakdown_waterfall(bd: ScoreBreakdown) -> go.Figure:
    """Base score, then each deduction and bonus, ending at the final score."""
    labels = ["Base"]
    values = [bd.base_score]
    measures = ["absolute"]
    for d in bd.deductions:
        labels.append(d.reason)
        values.append(-d.points)
        measures.append("relative")
    for b in bd.bonuses:
        labels.append(b.reason)
        values.append(b.points)
        measures.append("relative")
    labels.append("Score")
    values.append(bd.score)
    measures.append("total")

    fig = go.Figure(go.Waterfall(
        x=labels,
        y=values,
        measure=measures,
        decreasing={"marker": {"color": Severity.COLORS[Severity.CRITICAL]}},
        increasing={"marker": {"color": Severity.COLORS[Severity.SUCCESS]}},
        totals={"marker": {"color": score_color(bd.score)}},
        connector={"line": {"color": _GRID}},
    ))
    fig.update_layout(
        **_base_layout(height=320),
        title=_title(f"{bd.category_label} Breakdown"),
        xaxis={"gridcolor": _GRID, "color": _TEXT, "automargin": True},
        yaxis={"gridcolor": _GRID, "color": _TEXT},
        showlegend=False,
    )
    return fig


# ── Helper ─────────────────────────────────────────────────────────────────────

def _empty_chart(message: str) -> go.Figure:
    fig = go.Figure()
    fig.add_annotation(text=message, x=0.5, y=0.5, showarrow=False, font={"color": _TEXT, "size": 14})
    fig.update_layout(**_base_layout(height=260))
    return fig
