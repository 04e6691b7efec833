"""
Converts audit results to Pandas DataFrames and CSV bytes for export.
"""
from __future__ import annotations

import io

import pandas as pd

from models import AuditIssue, AuditResult, AuditSuggestions, ScoreBreakdowns, Severity
from reporting.summary import collect_all_issues


# ── Issues DataFrame ───────────────────────────────────────────────────────────

def issues_to_df(issues: list[AuditIssue]) -> pd.DataFrame:
    if not issues:
        return pd.DataFrame(columns=["Severity", "Category", "Issue", "Description", "Recommendation", "Effort"])

    rows = []
    for issue in issues:
        rows.append({
            "Severity":       issue.severity.upper(),
            "Category":       issue.category,
            "Issue":          issue.title,
            "Description":    issue.description,
            "Recommendation": issue.recommendation or "",
            "Effort":         issue.effort or "",
        })

    df = pd.DataFrame(rows)

    # Severity sort order
    df["_sev_order"] = df["Severity"].str.lower().map(Severity.ORDER)
    df = df.sort_values(["_sev_order", "Category"], kind="stable").drop(columns=["_sev_order"])
    return df.reset_index(drop=True)


def result_issues_df(result: AuditResult) -> pd.DataFrame:
    return issues_to_df(collect_all_issues(result.legacy.details))


# ── Suggestions ────────────────────────────────────────────────────────────────

def suggestions_to_df(suggestions: AuditSuggestions) -> pd.DataFrame:
    buckets = [
        ("Quick win",    suggestions.quick_wins),
        ("Priority fix", suggestions.priority_fixes),
        ("Nice to have", suggestions.nice_to_have),
    ]
    rows = []
    for bucket, items in buckets:
        for s in items:
            rows.append({
                "Bucket":      bucket,
                "Category":    s.category,
                "Suggestion":  s.title,
                "Impact":      s.impact,
                "Effort":      s.effort,
                "Description": s.description,
                "How to fix":  s.how_to_fix or "",
                "Related":     s.related_fact or "",
            })
    if not rows:
        return pd.DataFrame(columns=["Bucket", "Category", "Suggestion", "Impact", "Effort",
                                     "Description", "How to fix", "Related"])
    return pd.DataFrame(rows)


# ── Score breakdowns ───────────────────────────────────────────────────────────

def breakdowns_to_df(breakdowns: ScoreBreakdowns) -> pd.DataFrame:
    """One row per deduction or bonus across the five categories."""
    rows = []
    for key in ("performance", "visibility", "security", "accessibility", "trust"):
        bd = getattr(breakdowns, key)
        for d in bd.deductions:
            rows.append({
                "Category": bd.category_label,
                "Kind":     "Deduction",
                "Points":   -d.points,
                "Reason":   d.reason,
                "Detail":   d.explanation,
                "Fix":      d.how_to_fix or "",
            })
        for b in bd.bonuses:
            rows.append({
                "Category": bd.category_label,
                "Kind":     "Bonus",
                "Points":   b.points,
                "Reason":   b.reason,
                "Detail":   b.explanation,
                "Fix":      "",
            })
    if not rows:
        return pd.DataFrame(columns=["Category", "Kind", "Points", "Reason", "Detail", "Fix"])
    return pd.DataFrame(rows)


def scores_df(result: AuditResult) -> pd.DataFrame:
    s = result.new_scores
    return pd.DataFrame([
        {"Category": _humanize(k), "Score": getattr(s, k)}
        for k in ("overall", "performance", "visibility", "security", "accessibility", "trust")
    ])


# ── Summary table ──────────────────────────────────────────────────────────────

def issues_summary_df(issues: list[AuditIssue]) -> pd.DataFrame:
    """Grouped count of issues by category and severity."""
    if not issues:
        return pd.DataFrame()

    rows: dict[tuple, int] = {}
    for issue in issues:
        key = (issue.category, issue.severity.capitalize())
        rows[key] = rows.get(key, 0) + 1

    data = [{"Category": k[0], "Severity": k[1], "Count": v} for k, v in rows.items()]
    df = pd.DataFrame(data)
    df["_order"] = df["Severity"].str.lower().map(Severity.ORDER)
    df = df.sort_values(["_order", "Category"]).drop(columns=["_order"]).reset_index(drop=True)
    return df


# ── CSV export ─────────────────────────────────────────────────────────────────

def to_csv_bytes(df: pd.DataFrame) -> bytes:
    buf = io.StringIO()
    df.to_csv(buf, index=False)
    return buf.getvalue().encode("utf-8")


# ── Helpers ────────────────────────────────────────────────────────────────────

def _humanize(snake: str) -> str:
    """Convert snake_case to Title Case for display."""
    return snake.replace("_", " ").title()
