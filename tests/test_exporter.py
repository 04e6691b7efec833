"""
Tests for the DataFrame / CSV exporters and the score presentation helpers
"""
import pytest

from conftest import build_result

from models import AuditDetails, AuditIssue, MetricStatus, SeoData, Severity
from reporting.exporter import (
    breakdowns_to_df,
    issues_summary_df,
    issues_to_df,
    result_issues_df,
    scores_df,
    suggestions_to_df,
    to_csv_bytes,
)
from scoring.scorer import metric_status_color, score_band, score_color, score_label, terminal_color


def _issue(severity, category, title="Issue"):
    return AuditIssue(id=title.lower(), title=title, description="", severity=severity, category=category)


class TestIssuesFrame:
    def test_sorted_by_severity_then_category(self):
        df = issues_to_df([
            _issue(Severity.INFO, "seo", "Info"),
            _issue(Severity.WARNING, "social", "Warn social"),
            _issue(Severity.CRITICAL, "security", "Crit"),
            _issue(Severity.WARNING, "local", "Warn local"),
        ])

        assert list(df["Issue"]) == ["Crit", "Warn local", "Warn social", "Info"]
        assert list(df["Severity"]) == ["CRITICAL", "WARNING", "WARNING", "INFO"]
        assert df.loc[0, "Recommendation"] == ""

    def test_empty(self):
        df = issues_to_df([])
        assert df.empty
        assert "Severity" in df.columns

    def test_summary_counts(self):
        df = issues_summary_df([
            _issue(Severity.WARNING, "seo"),
            _issue(Severity.WARNING, "seo"),
            _issue(Severity.CRITICAL, "security"),
        ])

        assert df.to_dict("records") == [
            {"Category": "security", "Severity": "Critical", "Count": 1},
            {"Category": "seo", "Severity": "Warning", "Count": 2},
        ]

    def test_summary_empty(self):
        assert issues_summary_df([]).empty


class TestResultFrames:
    def test_scores(self, audit_result):
        df = scores_df(audit_result)

        assert list(df["Category"]) == [
            "Overall", "Performance", "Visibility", "Security", "Accessibility", "Trust",
        ]
        assert df.loc[0, "Score"] == audit_result.new_scores.overall

    def test_suggestion_buckets(self, audit_result):
        df = suggestions_to_df(audit_result.suggestions)
        expected = (
            len(audit_result.suggestions.quick_wins)
            + len(audit_result.suggestions.priority_fixes)
            + len(audit_result.suggestions.nice_to_have)
        )

        assert len(df) == expected
        assert set(df["Bucket"]) <= {"Quick win", "Priority fix", "Nice to have"}

    def test_breakdown_rows(self, audit_result):
        df = breakdowns_to_df(audit_result.score_breakdowns)

        assert set(df["Kind"]) <= {"Deduction", "Bonus"}
        assert (df[df["Kind"] == "Deduction"]["Points"] <= 0).all()

    def test_result_issues(self):
        details = AuditDetails(
            seo=SeoData(issues=[_issue(Severity.WARNING, "seo", "No title")]),
            scanner_issues=[_issue(Severity.INFO, "scanner failure", "Social scan failed")],
        )
        df = result_issues_df(build_result(details))

        assert list(df["Issue"]) == ["No title", "Social scan failed"]

    def test_csv(self):
        data = to_csv_bytes(issues_to_df([_issue(Severity.INFO, "seo", "Only")]))
        lines = data.decode("utf-8").splitlines()

        assert lines[0] == "Severity,Category,Issue,Description,Recommendation,Effort"
        assert lines[1].startswith("INFO,seo,Only")


class TestScorer:
    @pytest.mark.parametrize("score, band, label, color", [
        (95, "good", "Excellent", "#00C851"),
        (80, "average", "Good", "#FFD700"),
        (50, "average", "Needs Work", "#FF8800"),
        (49, "poor", "Poor", "#FF4444"),
    ])
    def test_bands(self, score, band, label, color):
        assert score_band(score) == band
        assert score_label(score) == label
        assert score_color(score) == color

    def test_terminal_color(self):
        assert terminal_color(90) == "green"
        assert terminal_color(0) == "red"

    def test_metric_status_color(self):
        assert metric_status_color(MetricStatus.NEEDS_IMPROVEMENT) == "#FF8800"
        assert metric_status_color(None) == "#888888"
