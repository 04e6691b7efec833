"""
Runs one audit end to end: load the page, measure it with Lighthouse, take
screenshots, run every analyzer over the rendered HTML, then score, extract
facts and build suggestions.

Only browser launch and page loading can fail an audit. An analyzer that
raises is replaced by its empty default and reported as an info issue.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

import requests

from analyzers.advertising import AdvertisingAnalyzer
from analyzers.base import AnalyzerContext, BaseAnalyzer
from analyzers.ecommerce import EcommerceAnalyzer
from analyzers.lighthouse import LighthouseAnalyzer
from analyzers.local import LocalAnalyzer
from analyzers.local_presence import LocalPresenceAnalyzer
from analyzers.reviews import ReviewsAnalyzer
from analyzers.seo import SeoAnalyzer
from analyzers.social import SocialAnalyzer
from analyzers.tech import TechAnalyzer
from analyzers.templates import create_issue
from config import DEFAULT_VIEWPORTS
from crawler import fetcher
from crawler.browser import BrowserManager
from models import (
    AuditConfig,
    AuditDetails,
    AuditIssue,
    AuditResult,
    LegacyAuditResult,
    Severity,
)
from reporting.facts import extract_facts
from reporting.suggestions import generate_suggestions
from reporting.summary import generate_summary
from scoring.categories import calculate_new_scores, generate_score_breakdowns
from scoring.legacy import score_audit


logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, str], None]


@dataclass
class AnalyzerStep:
    """One entry of the analyzer registry."""
    field: str              # AuditDetails attribute that receives the findings
    toggle: str             # ScannerToggles attribute that switches it on
    pct: int
    message: str
    analyzer: BaseAnalyzer


def default_steps(session: Optional[requests.Session] = None) -> list[AnalyzerStep]:
    """The HTML analyzers in run order."""
    return [
        AnalyzerStep("seo",            "seo",         50, "Analyzing SEO...",                        SeoAnalyzer(session)),
        AnalyzerStep("social",         "social",      60, "Checking social presence...",             SocialAnalyzer()),
        AnalyzerStep("tech",           "tech",        65, "Detecting technologies and platforms...", TechAnalyzer(session)),
        AnalyzerStep("advertising",    "advertising", 70, "Detecting advertising platforms...",      AdvertisingAnalyzer()),
        AnalyzerStep("ecommerce",      "ecommerce",   75, "Checking e-commerce features...",         EcommerceAnalyzer()),
        AnalyzerStep("local",          "local",       80, "Finding local business info...",          LocalAnalyzer()),
        AnalyzerStep("local_presence", "local",       83, "Analyzing local presence...",             LocalPresenceAnalyzer(session)),
        AnalyzerStep("reviews",        "local",       86, "Checking reviews...",                     ReviewsAnalyzer()),
    ]


def viewports_for(device: str) -> list[dict]:
    """Screenshot viewports for the requested device class."""
    if device == "desktop":
        return [v for v in DEFAULT_VIEWPORTS if v["name"] == "desktop"]
    if device == "mobile":
        return [v for v in DEFAULT_VIEWPORTS if v["name"] != "desktop"]
    return list(DEFAULT_VIEWPORTS)


def scanner_failure_issue(analyzer: BaseAnalyzer, exc: Exception) -> AuditIssue:
    return create_issue(
        f"scanner_failed_{analyzer.id}",
        title=f"{analyzer.name} scan failed",
        description=f"The {analyzer.name} scan could not complete: {exc}",
        severity=Severity.INFO,
        category="scanner failure",
        recommendation="Re-run the audit. Results for this area are empty in this report.",
    )


class AuditEngine:
    def __init__(
        self,
        browser: Optional[BrowserManager] = None,
        lighthouse: Optional[BaseAnalyzer] = None,
        steps: Optional[list[AnalyzerStep]] = None,
        session: Optional[requests.Session] = None,
    ):
        session = session or fetcher.make_session()
        self.browser = browser or BrowserManager()
        self.lighthouse = lighthouse or LighthouseAnalyzer()
        self.steps = default_steps(session) if steps is None else steps

    def run(self, config: AuditConfig, on_progress: Optional[ProgressCallback] = None) -> AuditResult:
        current = {"pct": 0}

        def report(pct: int, message: str) -> None:
            current["pct"] = pct
            _emit(on_progress, pct, message)

        toggles = config.scanners
        try:
            report(5, "Launching browser...")
            self.browser.launch()

            report(10, "Loading page...")
            page, resolved_url = self.browser.get_page(config.url, config.timeout)

            report(15, "Extracting HTML...")
            html = self.browser.get_html(page)

            context = AnalyzerContext(
                url=resolved_url,
                html=html,
                port=self.browser.get_port(),
                deep=config.deep,
                on_progress=lambda msg: report(current["pct"], msg),
            )
            details = AuditDetails()

            # Lighthouse attaches to the debugging port, so it goes before
            # anything else touches the browser
            if toggles.lighthouse:
                report(20, "Running Lighthouse audit...")
                measured = _guarded(self.lighthouse, context, details.scanner_issues)
                details.fundamentals = measured.fundamentals
                details.accessibility = measured.accessibility

            report(35, "Capturing screenshots...")
            screenshots = self.browser.capture_screenshot_buffers(
                page, resolved_url, viewports_for(config.device),
            )

            for step in self.steps:
                if not getattr(toggles, step.toggle):
                    continue
                report(step.pct, step.message)
                setattr(details, step.field, _guarded(step.analyzer, context, details.scanner_issues))

            page.close()

            report(92, "Calculating scores...")
            scores = score_audit(details)

            report(93, "Extracting facts...")
            facts = extract_facts(details, resolved_url)

            report(94, "Calculating new scores...")
            new_scores = calculate_new_scores(details)

            report(95, "Generating score breakdowns...")
            breakdowns = generate_score_breakdowns(details)

            report(96, "Generating suggestions...")
            suggestions = generate_suggestions(details, new_scores)

            report(97, "Generating legacy summary...")
            summary = generate_summary(details, scores)

            report(100, "Complete")

            by_name = {s.name: s.data for s in screenshots}
            return AuditResult(
                url=resolved_url,
                screenshots=screenshots,
                new_scores=new_scores,
                score_breakdowns=breakdowns,
                facts=facts,
                suggestions=suggestions,
                legacy=LegacyAuditResult(
                    screenshots={
                        "mobile": by_name.get("mobile", b""),
                        "desktop": by_name.get("desktop", b""),
                    },
                    scores=scores,
                    summary=summary,
                    details=details,
                ),
            )
        finally:
            self.browser.close()


def run_audit(config: AuditConfig, on_progress: Optional[ProgressCallback] = None) -> AuditResult:
    return AuditEngine().run(config, on_progress)


def _guarded(analyzer: BaseAnalyzer, context: AnalyzerContext, issues: list[AuditIssue]) -> Any:
    """Run an analyzer; on any error log it, record an issue and return its default."""
    try:
        return analyzer.run(context)
    except Exception as exc:
        logger.warning("%s failed on %s: %s", analyzer.name, context.url, exc, exc_info=True)
        issues.append(scanner_failure_issue(analyzer, exc))
        return analyzer.default()


def _emit(callback: Optional[ProgressCallback], pct: int, message: str) -> None:
    if callback:
        try:
            callback(pct, message)
        except Exception:
            # A broken progress display must not abort the audit
            logger.debug("Progress callback raised", exc_info=True)
