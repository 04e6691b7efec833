"""
Tests for the Core Web Vitals metric scorer
"""
import pytest

from models import MetricStatus, PerformanceDiagnostics, PerformanceMetrics
from scoring.metrics import (
    core_web_vitals,
    diagnostic_summaries,
    format_metric_value,
    metric_score,
    metric_status,
    score_metric,
)


class TestMetricScore:
    """Three-branch scoring curve"""

    def test_zero_value_scores_100(self):
        assert metric_score("lcp", 0) == 100

    def test_good_threshold_scores_90(self):
        assert metric_score("lcp", 2500) == 90
        assert metric_score("cls", 0.1) == 90

    def test_good_range_approaches_100(self):
        assert metric_score("cls", 0.05) == 95

    def test_middle_band_is_linear(self):
        # halfway between 2500 and 4000
        assert metric_score("lcp", 3250) == 70

    def test_poor_threshold_scores_49(self):
        assert metric_score("lcp", 4000) == 49

    def test_double_poor_bottoms_out(self):
        assert metric_score("lcp", 8000) == 0
        assert metric_score("tbt", 5000) == 0

    @pytest.mark.parametrize("metric", ["lcp", "cls", "tbt", "fcp", "si", "ttfb", "tti"])
    def test_scores_stay_in_range(self, metric):
        for value in (0, 1, 100, 1000, 10000, 100000):
            assert 0 <= metric_score(metric, value) <= 100


class TestMetricStatus:
    def test_status_bands(self):
        assert metric_status("tbt", 150) == MetricStatus.GOOD
        assert metric_status("tbt", 200) == MetricStatus.GOOD
        assert metric_status("tbt", 400) == MetricStatus.NEEDS_IMPROVEMENT
        assert metric_status("tbt", 600) == MetricStatus.POOR


class TestFormatting:
    def test_cls_has_three_decimals(self):
        assert format_metric_value("cls", 0.1234) == "0.123"

    def test_seconds_above_one_second(self):
        assert format_metric_value("lcp", 2500) == "2.5s"

    def test_milliseconds_below_one_second(self):
        assert format_metric_value("ttfb", 812.4) == "812ms"


class TestScoreMetric:
    def test_missing_value_returns_none(self):
        assert score_metric("lcp", None) is None

    def test_full_metric_data(self):
        data = score_metric("lcp", 2000)

        assert data.score == 92
        assert data.weight == 0.25
        assert data.weighted_score == 23.0
        assert data.status == MetricStatus.GOOD
        assert data.threshold == {"good": 2500, "poor": 4000}
        assert data.display_value == "2.0s"
        assert data.label == "Largest Contentful Paint"


class TestCoreWebVitals:
    def test_no_metrics(self):
        cwv = core_web_vitals(None)

        assert cwv.lcp is None
        assert cwv.passing_count == 0
        assert cwv.failing_count == 0
        assert cwv.recommendations == []
        assert cwv.diagnostic_summaries is None

    def test_pass_fail_tally_counts_core_trio_only(self):
        metrics = PerformanceMetrics(lcp=2000, cls=0.3, tbt=300, fcp=5000)
        cwv = core_web_vitals(metrics)

        assert cwv.passing_count == 1
        assert cwv.failing_count == 2
        assert cwv.fcp.status == MetricStatus.POOR

    def test_recommendations_sorted_by_priority(self):
        metrics = PerformanceMetrics(lcp=3000, cls=0.3, tbt=300)
        recs = core_web_vitals(metrics).recommendations

        assert [r.id for r in recs] == ["fix-cls", "fix-tbt", "fix-lcp"]
        assert recs[0].priority == 1
        assert recs[0].impact == "high"
        assert recs[1].priority == 3
        assert recs[1].impact == "medium"
        assert recs[0].ratio == pytest.approx(3.0)

    def test_good_metrics_have_no_recommendations(self):
        metrics = PerformanceMetrics(lcp=1000, cls=0.01, tbt=50)
        assert core_web_vitals(metrics).recommendations == []


class TestDiagnosticSummaries:
    def test_none(self):
        assert diagnostic_summaries(None) == []

    def test_bands(self):
        diag = PerformanceDiagnostics(
            total_byte_weight=2 * 1024 * 1024,
            main_thread_total_time=1500,
            third_party_total_blocking_time=300,
            network_total_requests=120,
        )
        summaries = {s.label: s for s in diagnostic_summaries(diag)}

        assert summaries["Total Page Weight"].value == "2.0 MB"
        assert summaries["Total Page Weight"].status == MetricStatus.NEEDS_IMPROVEMENT
        assert summaries["Main Thread Work"].value == "1.5s"
        assert summaries["Main Thread Work"].status == MetricStatus.GOOD
        assert summaries["3rd Party Blocking"].status == MetricStatus.POOR
        assert summaries["Network Requests"].value == "120"
        assert summaries["Network Requests"].status == MetricStatus.POOR

    def test_small_page_in_kilobytes(self):
        diag = PerformanceDiagnostics(total_byte_weight=512 * 1024)
        assert diagnostic_summaries(diag)[0].value == "512 KB"
