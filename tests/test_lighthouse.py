"""
Tests for the Lighthouse analyzer: report extraction and CLI error handling.
The CLI itself is never launched; subprocess.run is monkeypatched.
"""
import json
import subprocess

import pytest

from conftest import PAGE_URL

from analyzers import lighthouse
from analyzers.base import AnalyzerContext
from analyzers.lighthouse import (
    LighthouseAnalyzer,
    LighthouseError,
    extract_accessibility,
    extract_fundamentals,
    impact_for,
    lighthouse_command,
    run_lighthouse,
)


def _items(*items):
    return {"details": {"items": list(items)}}


LHR = {
    "categories": {
        "performance": {"score": 0.45},
        "accessibility": {"score": 0.82},
        "best-practices": {"score": 1},
        "seo": {"score": 0.95},
    },
    "audits": {
        "largest-contentful-paint": {"numericValue": 3200},
        "cumulative-layout-shift": {"numericValue": 0.25},
        "total-blocking-time": {"numericValue": 120},
        "interactive": {"numericValue": 6100},
        "first-contentful-paint": {"numericValue": 1500},
        "viewport": {"score": 1},
        "font-size": {"score": 1},
        "tap-targets": {"score": 0},
        "render-blocking-resources": {
            "score": 0.3,
            "title": "Eliminate render-blocking resources",
            "displayValue": "Potential savings of 850 ms",
            "details": {"overallSavingsMs": 850.4},
        },
        "unused-javascript": {
            "score": 0.1,
            "title": "Reduce unused JavaScript",
            "details": {"overallSavingsMs": 1200},
        },
        "unminified-css": {"score": 1, "details": {"overallSavingsMs": 0}},
        "redirects": {"score": 0, "title": "Avoid multiple page redirects"},
        "mainthread-work-breakdown": {
            "numericValue": 2400,
            **_items(
                {"groupLabel": "Style & Layout", "duration": 600},
                {"groupLabel": "Script Evaluation", "duration": 1500},
            ),
        },
        "bootup-time": {
            "numericValue": 1300,
            **_items({"url": "https://acme.test/app.js", "total": 900, "scripting": 700, "scriptParseCompile": 50}),
        },
        "third-party-summary": _items(
            {"entity": {"text": "Google Tag Manager"}, "transferSize": 90000, "blockingTime": 120, "mainThreadTime": 300},
            {"entity": "Hotjar", "transferSize": 10000, "blockingTime": 30, "mainThreadTime": 80},
        ),
        "layout-shifts": _items({"node": {"snippet": '<img class="hero">'}, "score": 0.2}),
        "network-requests": _items(
            {"resourceType": "Script", "transferSize": 3000},
            {"resourceType": "Image", "transferSize": 50000},
            {"resourceType": "Script", "transferSize": 2000},
        ),
        "total-byte-weight": {"numericValue": 55000.5},
        "largest-contentful-paint-element": _items(
            {"type": "table", "items": [{"node": {"snippet": "<h1>"}}]},
            {"type": "table", "items": [
                {"phase": "TTFB", "timing": 600},
                {"phase": "Load Delay", "timing": 100},
                {"phase": "Load Time", "timing": 400},
                {"phase": "Render Delay", "timing": 2100},
            ]},
        ),
        # accessibility
        "image-alt": {
            "score": 0,
            "title": "Image elements do not have [alt] attributes",
            **_items({}, {}, {}),
        },
        "bypass": {"score": None, "title": "The page does not contain a heading, skip link, or landmark region"},
        "html-has-lang": {"score": 1},
        "color-contrast": {"score": 0.6, "title": "Background and foreground colors do not have a sufficient contrast ratio"},
        "target-size": {"score": 1},
    },
}


class TestFundamentals:
    def test_scores_and_metrics(self):
        data = extract_fundamentals(LHR)

        assert (data.scores.performance, data.scores.accessibility) == (45, 82)
        assert (data.scores.best_practices, data.scores.seo) == (100, 95)
        assert data.metrics.lcp == 3200
        assert data.metrics.cls == 0.25
        assert data.metrics.ttfb is None

    def test_mobile(self):
        mobile = extract_fundamentals(LHR).mobile

        assert mobile.is_mobile_friendly is True
        assert mobile.viewport_configured is True
        assert mobile.font_size_ok is True
        assert mobile.tap_targets_ok is False

    def test_issues(self):
        issues = extract_fundamentals(LHR).issues

        assert [i.id for i in issues] == ["large_lcp", "high_cls", "slow_page_load"]
        assert issues[0].description == "LCP is 3.2s (target: under 2.5s)"
        assert issues[1].description == "CLS is 0.250 (target: under 0.1)"

    def test_opportunities_sorted_by_savings(self):
        opportunities = extract_fundamentals(LHR).opportunities

        assert [o.id for o in opportunities] == ["unused-javascript", "render-blocking-resources", "redirects"]
        assert opportunities[1].savings == 850
        assert opportunities[1].details == "Potential savings of 850 ms"
        assert opportunities[2].savings == 0

    def test_empty_report(self):
        data = extract_fundamentals({})

        assert data.scores.performance == 0
        assert data.metrics.lcp is None
        assert data.diagnostics is None
        assert [i.id for i in data.issues] == ["not_mobile_friendly"]
        assert data.issues[0].description.startswith("Page is not optimized for mobile devices")

    def test_missing_viewport_on_good_seo_page(self):
        lhr = {"categories": {"seo": {"score": 0.92}}, "audits": {"viewport": {"score": 0}}}
        issues = extract_fundamentals(lhr).issues

        assert [i.id for i in issues] == ["not_mobile_friendly"]
        assert issues[0].description == "The page is not optimized for mobile devices."


class TestDiagnostics:
    def test_main_thread_and_bootup(self):
        diag = extract_fundamentals(LHR).diagnostics

        assert [t.group for t in diag.main_thread_work] == ["Script Evaluation", "Style & Layout"]
        assert diag.main_thread_total_time == 2400
        assert diag.bootup_time[0].script_parse_compile == 50
        assert diag.bootup_total_time == 1300
        assert diag.total_byte_weight == 55000

    def test_third_parties(self):
        diag = extract_fundamentals(LHR).diagnostics

        assert [t.entity for t in diag.third_party_summary] == ["Google Tag Manager", "Hotjar"]
        assert diag.third_party_total_blocking_time == 150

    def test_layout_shifts_and_lcp_phases(self):
        diag = extract_fundamentals(LHR).diagnostics

        assert [(c.node, c.score) for c in diag.cls_culprits] == [('<img class="hero">', 0.2)]
        assert diag.lcp_breakdown.time_to_first_byte == 600
        assert diag.lcp_breakdown.element_render_delay == 2100

    def test_network_grouped_by_type(self):
        diag = extract_fundamentals(LHR).diagnostics

        assert [(s.resource_type, s.count, s.transfer_size) for s in diag.network_summary] == [
            ("Image", 1, 50000), ("Script", 2, 5000),
        ]
        assert diag.network_total_requests == 3
        assert diag.network_total_size == 55000


class TestAccessibility:
    def test_levels_and_violations(self):
        data = extract_accessibility(LHR)

        assert data.score == 82
        assert (data.level_a.passed, data.level_a.failed) == (1, 2)
        assert (data.level_aa.passed, data.level_aa.failed) == (0, 1)
        assert (data.level_aaa.passed, data.level_aaa.failed) == (1, 0)
        assert data.wcag_level is None

        assert [(v.id, v.impact) for v in data.violations] == [
            ("image-alt", "critical"), ("color-contrast", "moderate"),
        ]
        assert data.violations[0].nodes == 3
        assert data.violations[0].help_url == "https://web.dev/image-alt"
        assert data.violations[1].wcag_level == "AA"

    def test_issues(self):
        issues = extract_accessibility(LHR).issues

        assert [i.id for i in issues] == ["wcag_level_a_violations", "wcag_level_aa_violations"]
        assert issues[0].description == "2 WCAG Level A violations found"

    def test_only_aa_failures(self):
        lhr = {"audits": {"image-alt": {"score": 1}, "color-contrast": {"score": 0.3}}}
        data = extract_accessibility(lhr)

        assert data.wcag_level == "A"
        assert [(v.id, v.impact) for v in data.violations] == [("color-contrast", "serious")]

    def test_everything_passes(self):
        lhr = {"audits": {"image-alt": {"score": 1}, "color-contrast": {"score": 1}, "target-size": {"score": 1}}}
        data = extract_accessibility(lhr)

        assert data.wcag_level == "AAA"
        assert data.violations == []
        assert data.issues == []

    @pytest.mark.parametrize("score, impact", [
        (0, "critical"), (0.3, "serious"), (0.5, "moderate"), (0.95, "minor"),
    ])
    def test_impact_bands(self, score, impact):
        assert impact_for(score) == impact


class TestCli:
    def test_command(self, monkeypatch):
        monkeypatch.delenv("LIGHTHOUSE_BIN", raising=False)
        cmd = lighthouse_command(PAGE_URL, 9222)

        assert cmd[:3] == ["lighthouse", PAGE_URL, "--port=9222"]
        assert "--output=json" in cmd
        assert cmd[-1].startswith("--chrome-flags=--no-sandbox")

    def test_binary_from_environment(self, monkeypatch):
        monkeypatch.setenv("LIGHTHOUSE_BIN", "/opt/lh/bin/lighthouse")
        assert lighthouse_command(PAGE_URL, 1)[0] == "/opt/lh/bin/lighthouse"

    def _fake_run(self, monkeypatch, returncode=0, stdout="", stderr="", raises=None):
        def run(cmd, **kwargs):
            if raises is not None:
                raise raises
            return subprocess.CompletedProcess(cmd, returncode, stdout=stdout, stderr=stderr)

        monkeypatch.setattr(lighthouse.subprocess, "run", run)

    def test_parses_report(self, monkeypatch):
        self._fake_run(monkeypatch, stdout=json.dumps(LHR))
        assert run_lighthouse(PAGE_URL, 9222)["categories"]["seo"]["score"] == 0.95

    @pytest.mark.parametrize("kwargs, message", [
        ({"raises": FileNotFoundError("lighthouse")}, "Lighthouse binary not found"),
        ({"raises": subprocess.TimeoutExpired("lighthouse", 180)}, "Lighthouse timed out"),
        ({"returncode": 1, "stderr": "starting\nChrome crashed\n"}, "Lighthouse exited with code 1: Chrome crashed"),
        ({"stdout": "not json"}, "Lighthouse produced invalid JSON"),
        ({"stdout": "[1, 2]"}, "Lighthouse produced an unexpected report"),
    ])
    def test_errors(self, monkeypatch, kwargs, message):
        self._fake_run(monkeypatch, **kwargs)
        with pytest.raises(LighthouseError, match=message):
            run_lighthouse(PAGE_URL, 9222)

    def test_analyzer_reads_both_halves(self, monkeypatch):
        self._fake_run(monkeypatch, stdout=json.dumps(LHR))
        messages = []
        result = LighthouseAnalyzer().run(AnalyzerContext(PAGE_URL, "", port=9222, on_progress=messages.append))

        assert result.fundamentals.scores.performance == 45
        assert result.accessibility.wcag_level is None
        assert messages == ["Running Lighthouse audit..."]
