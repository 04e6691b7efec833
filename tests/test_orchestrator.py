"""
Tests for the audit engine. The browser, Lighthouse and the analyzers are
replaced by fakes so an audit runs without Chromium or network access.
"""
import pytest

from conftest import PAGE_URL, build_page

from analyzers.base import BaseAnalyzer
from analyzers.lighthouse import LighthouseResult
from analyzers.orchestrator import AnalyzerStep, AuditEngine, scanner_failure_issue, viewports_for
from analyzers.social import SocialAnalyzer
from crawler.browser import NetworkError
from models import (
    AuditConfig,
    FundamentalsData,
    LighthouseScores,
    ScannerToggles,
    Screenshot,
    SeoData,
    Severity,
    TechData,
)


class FakePage:
    def __init__(self):
        self.closed = False

    def close(self):
        self.closed = True


class FakeBrowser:
    def __init__(self, html=None, fail=None, resolved=PAGE_URL):
        self.html = html or build_page(body="<h1>Acme</h1>")
        self.fail = fail
        self.resolved = resolved
        self.requested = None
        self.page = FakePage()
        self.calls = []
        self.viewports = None

    def launch(self):
        self.calls.append("launch")

    def get_page(self, url, timeout):
        self.calls.append("get_page")
        self.requested = url
        if self.fail is not None:
            raise self.fail
        return self.page, self.resolved

    def get_html(self, page):
        return self.html

    def get_port(self):
        return 9333

    def capture_screenshot_buffers(self, page, url=None, viewports=None):
        self.viewports = viewports
        self.screenshot_url = url
        return [
            Screenshot(name=v["name"], width=v["width"], height=v["height"], data=v["name"].encode())
            for v in viewports
        ]

    def close(self):
        self.calls.append("close")


class FakeLighthouse(BaseAnalyzer):
    id = "lighthouse"
    name = "Core Fundamentals"

    def __init__(self):
        self.port = None
        self.url = None

    def run(self, context):
        self.port = context.port
        self.url = context.url
        return LighthouseResult(fundamentals=FundamentalsData(
            scores=LighthouseScores(performance=88, accessibility=90, best_practices=95, seo=92),
        ))

    def default(self):
        return LighthouseResult()


class FakeSeo(BaseAnalyzer):
    id = "seo"
    name = "SEO"

    def run(self, context):
        self.url = context.url
        context.progress("Checking links...")
        return SeoData()

    def default(self):
        return SeoData()


class Exploding(BaseAnalyzer):
    id = "tech"
    name = "Technology"

    def run(self, context):
        self.url = context.url
        raise ValueError("boom")

    def default(self):
        return TechData()


def _engine(browser=None, steps=None):
    steps = steps if steps is not None else [
        AnalyzerStep("seo", "seo", 50, "Analyzing SEO...", FakeSeo()),
        AnalyzerStep("social", "social", 60, "Checking social presence...", SocialAnalyzer()),
        AnalyzerStep("tech", "tech", 65, "Detecting technologies and platforms...", Exploding()),
    ]
    return AuditEngine(browser=browser or FakeBrowser(), lighthouse=FakeLighthouse(), steps=steps)


class TestAuditEngine:
    def test_full_run(self):
        browser = FakeBrowser()
        result = _engine(browser).run(AuditConfig(url="acme.test"))

        assert result.url == PAGE_URL
        assert [s.name for s in result.screenshots] == ["mobile", "tablet", "desktop"]
        assert result.legacy.screenshots == {"mobile": b"mobile", "desktop": b"desktop"}
        assert result.legacy.details.fundamentals.scores.performance == 88
        assert result.legacy.details.seo == SeoData()
        assert result.legacy.details.social is not None
        assert browser.page.closed is True
        assert browser.calls == ["launch", "get_page", "close"]

    def test_failed_analyzer_becomes_info_issue(self):
        details = _engine().run(AuditConfig(url=PAGE_URL)).legacy.details

        assert details.tech is not None
        assert details.tech.cms is None
        [issue] = details.scanner_issues
        assert issue.id == "scanner_failed_tech"
        assert issue.title == "Technology scan failed"
        assert issue.severity == Severity.INFO
        assert issue.category == "scanner failure"
        assert "boom" in issue.description

    def test_report_complete_after_analyzer_failure(self):
        result = _engine().run(AuditConfig(url=PAGE_URL))
        details = result.legacy.details

        assert result.facts.site.url == PAGE_URL
        assert result.facts.speed is not None
        assert result.facts.presence is not None
        for key in ("overall", "performance", "visibility", "security", "accessibility", "trust"):
            assert 0 <= getattr(result.new_scores, key) <= 100
        assert result.new_scores.performance == 88
        assert result.score_breakdowns.security is not None

        summary = result.legacy.summary
        assert summary.total_issues == len(details.social.issues) + 1
        assert "scanner_failed_tech" in [i.id for i in summary.top_issues]

    def test_resolved_url_reaches_every_stage(self):
        browser = FakeBrowser(resolved="http://acme.test/")
        seo, tech = FakeSeo(), Exploding()
        engine = _engine(browser, steps=[
            AnalyzerStep("seo", "seo", 50, "Analyzing SEO...", seo),
            AnalyzerStep("tech", "tech", 65, "Detecting technologies and platforms...", tech),
        ])
        result = engine.run(AuditConfig(url="acme.test"))

        assert browser.requested == "acme.test"
        assert engine.lighthouse.url == "http://acme.test/"
        assert seo.url == "http://acme.test/"
        assert tech.url == "http://acme.test/"
        assert browser.screenshot_url == "http://acme.test/"
        assert result.url == "http://acme.test/"
        assert result.facts.site.url == "http://acme.test/"

    def test_disabled_scanners_stay_empty(self):
        toggles = ScannerToggles(lighthouse=False, social=False, tech=False)
        details = _engine().run(AuditConfig(url=PAGE_URL, scanners=toggles)).legacy.details

        assert details.fundamentals is None
        assert details.accessibility is None
        assert details.social is None
        assert details.tech is None
        assert details.seo is not None
        assert details.scanner_issues == []

    def test_progress_milestones(self):
        seen = []
        _engine().run(AuditConfig(url=PAGE_URL), lambda pct, msg: seen.append((pct, msg)))
        pcts = [p for p, _ in seen]

        assert seen[0] == (5, "Launching browser...")
        assert seen[-1] == (100, "Complete")
        assert pcts == sorted(pcts)
        assert (50, "Checking links...") in seen
        assert [p for p in pcts if p in (5, 10, 15, 20, 35, 92, 100)] == [5, 10, 15, 20, 35, 92, 100]

    def test_broken_progress_callback_is_ignored(self):
        def explode(pct, msg):
            raise RuntimeError("display gone")

        result = _engine().run(AuditConfig(url=PAGE_URL), explode)
        assert result.url == PAGE_URL

    def test_lighthouse_gets_debugging_port(self):
        engine = _engine()
        engine.run(AuditConfig(url=PAGE_URL))
        assert engine.lighthouse.port == 9333

    def test_page_load_failure_closes_browser(self):
        browser = FakeBrowser(fail=NetworkError("Network error: Unable to reach https://acme.test/"))

        with pytest.raises(NetworkError):
            _engine(browser).run(AuditConfig(url=PAGE_URL))
        assert browser.calls == ["launch", "get_page", "close"]

    def test_device_selects_viewports(self):
        browser = FakeBrowser()
        _engine(browser).run(AuditConfig(url=PAGE_URL, device="desktop"))
        assert [v["name"] for v in browser.viewports] == ["desktop"]


class TestHelpers:
    @pytest.mark.parametrize("device, names", [
        ("desktop", ["desktop"]),
        ("mobile", ["mobile", "tablet"]),
        ("both", ["mobile", "tablet", "desktop"]),
    ])
    def test_viewports_for(self, device, names):
        assert [v["name"] for v in viewports_for(device)] == names

    def test_scanner_failure_issue(self):
        issue = scanner_failure_issue(SocialAnalyzer(), RuntimeError("parse error"))

        assert issue.id == "scanner_failed_social"
        assert issue.description.endswith("parse error")
