"""
Lighthouse measurement: runs the Lighthouse CLI against the browser that is
already showing the page (through its remote-debugging port) and turns the
JSON report into fundamentals (scores, Core Web Vitals, mobile checks,
opportunities, diagnostics) and WCAG accessibility findings.

Both halves are read from the same report, so Lighthouse runs once per audit.
"""
from __future__ import annotations

import json
import logging
import os
import subprocess
from dataclasses import dataclass, field
from typing import Any, Optional

import config
from analyzers.base import AnalyzerContext, BaseAnalyzer
from analyzers.templates import create_issue
from models import (
    AccessibilityData,
    AccessibilityLevelSummary,
    AccessibilityViolation,
    AuditIssue,
    CLSCulprit,
    FundamentalsData,
    LCPBreakdown,
    LighthouseScores,
    MainThreadTask,
    MobileInfo,
    NetworkRequestSummary,
    PerformanceDiagnostics,
    PerformanceMetrics,
    ScriptBootupItem,
    SpeedOpportunity,
    ThirdPartySummary,
)


logger = logging.getLogger(__name__)


class LighthouseError(RuntimeError):
    """The Lighthouse CLI could not produce a usable report."""


OPPORTUNITY_AUDITS = [
    "render-blocking-resources",
    "unused-css-rules",
    "unused-javascript",
    "modern-image-formats",
    "offscreen-images",
    "unminified-css",
    "unminified-javascript",
    "uses-responsive-images",
    "efficient-animated-content",
    "uses-optimized-images",
    "uses-text-compression",
    "server-response-time",
    "redirects",
    "uses-rel-preconnect",
    "uses-rel-preload",
    "font-display",
    "third-party-summary",
]

# audit id -> PerformanceMetrics field
METRIC_AUDITS = {
    "interactive":              "tti",
    "largest-contentful-paint": "lcp",
    "cumulative-layout-shift":  "cls",
    "first-contentful-paint":   "fcp",
    "speed-index":              "si",
    "total-blocking-time":      "tbt",
    "server-response-time":     "ttfb",
}

WCAG_MAPPING: dict[str, str] = {
    # Level A
    "button-name": "A",
    "document-title": "A",
    "html-has-lang": "A",
    "image-alt": "A",
    "input-image-alt": "A",
    "label": "A",
    "link-name": "A",
    "list": "A",
    "listitem": "A",
    "bypass": "A",
    "frame-title": "A",
    "aria-allowed-attr": "A",
    "aria-hidden-body": "A",
    "aria-hidden-focus": "A",
    "aria-required-attr": "A",
    "aria-valid-attr": "A",
    "aria-valid-attr-value": "A",
    "form-field-multiple-labels": "A",
    "duplicate-id-aria": "A",
    "tabindex": "A",
    "td-headers-attr": "A",
    "th-has-data-cells": "A",
    "valid-lang": "A",
    "video-caption": "A",
    "accesskeys": "A",
    "focus-traps": "A",
    "interactive-element-affordance": "A",
    "logical-tab-order": "A",
    "managed-focus": "A",
    "visual-order-follows-dom": "A",
    # Level AA
    "color-contrast": "AA",
    "meta-viewport": "AA",
    "heading-order": "AA",
    "use-landmarks": "AA",
    # Level AAA
    "target-size": "AAA",
}

IMPACT_ORDER = {"critical": 0, "serious": 1, "moderate": 2, "minor": 3}

# Lighthouse's LCP phase labels -> LCPBreakdown fields
LCP_PHASES = {
    "TTFB": "time_to_first_byte",
    "Load Delay": "resource_load_delay",
    "Load Time": "resource_load_duration",
    "Render Delay": "element_render_delay",
}


@dataclass
class LighthouseResult:
    fundamentals: FundamentalsData = field(default_factory=FundamentalsData)
    accessibility: AccessibilityData = field(default_factory=AccessibilityData)


class LighthouseAnalyzer(BaseAnalyzer):
    id = "lighthouse"
    name = "Core Fundamentals"

    def default(self) -> LighthouseResult:
        return LighthouseResult()

    def run(self, context: AnalyzerContext) -> LighthouseResult:
        context.progress("Running Lighthouse audit...")
        lhr = run_lighthouse(context.url, context.port)
        return LighthouseResult(
            fundamentals=extract_fundamentals(lhr),
            accessibility=extract_accessibility(lhr),
        )


# ── CLI ───────────────────────────────────────────────────────────────────────

def lighthouse_command(url: str, port: int) -> list[str]:
    binary = os.environ.get("LIGHTHOUSE_BIN", config.LIGHTHOUSE_BIN)
    return [
        binary,
        url,
        f"--port={port}",
        "--output=json",
        "--output-path=stdout",
        "--quiet",
        "--only-categories=performance,accessibility,best-practices,seo",
        f"--chrome-flags={' '.join(config.CHROMIUM_ARGS)}",
    ]


def run_lighthouse(url: str, port: int) -> dict:
    """Run the CLI and return the parsed report (the "lhr")."""
    cmd = lighthouse_command(url, port)
    logger.debug("Running %s", " ".join(cmd))
    try:
        proc = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=config.LIGHTHOUSE_TIMEOUT,
            check=False,
        )
    except FileNotFoundError as exc:
        raise LighthouseError(f"Lighthouse binary not found: {cmd[0]}") from exc
    except subprocess.TimeoutExpired as exc:
        raise LighthouseError(
            f"Lighthouse timed out after {config.LIGHTHOUSE_TIMEOUT}s"
        ) from exc

    if proc.returncode != 0:
        detail = (proc.stderr or "").strip().splitlines()
        raise LighthouseError(
            f"Lighthouse exited with code {proc.returncode}"
            + (f": {detail[-1]}" if detail else "")
        )

    try:
        lhr = json.loads(proc.stdout)
    except json.JSONDecodeError as exc:
        raise LighthouseError(f"Lighthouse produced invalid JSON: {exc}") from exc
    if not isinstance(lhr, dict):
        raise LighthouseError("Lighthouse produced an unexpected report")
    return lhr


# ── Report helpers ────────────────────────────────────────────────────────────

def _audits(lhr: dict) -> dict[str, dict]:
    return lhr.get("audits") or {}


def _category_score(lhr: dict, key: str) -> Optional[float]:
    return ((lhr.get("categories") or {}).get(key) or {}).get("score")


def _percent(score: Optional[float]) -> int:
    return round((score or 0) * 100)


def _items(audit: Optional[dict]) -> list[dict]:
    return ((audit or {}).get("details") or {}).get("items") or []


def _numeric(audits: dict, audit_id: str) -> Optional[float]:
    return (audits.get(audit_id) or {}).get("numericValue")


def _perfect(audits: dict, audit_id: str) -> bool:
    return (audits.get(audit_id) or {}).get("score") == 1


# ── Fundamentals ──────────────────────────────────────────────────────────────

def extract_fundamentals(lhr: dict) -> FundamentalsData:
    audits = _audits(lhr)

    scores = LighthouseScores(
        performance=_percent(_category_score(lhr, "performance")),
        accessibility=_percent(_category_score(lhr, "accessibility")),
        best_practices=_percent(_category_score(lhr, "best-practices")),
        seo=_percent(_category_score(lhr, "seo")),
    )
    metrics = PerformanceMetrics(**{
        name: _numeric(audits, audit_id) for audit_id, name in METRIC_AUDITS.items()
    })
    mobile = MobileInfo(
        is_mobile_friendly=(_category_score(lhr, "seo") or 0) >= 0.9,
        viewport_configured=_perfect(audits, "viewport"),
        font_size_ok=_perfect(audits, "font-size"),
        tap_targets_ok=_perfect(audits, "tap-targets"),
    )

    return FundamentalsData(
        scores=scores,
        metrics=metrics,
        mobile=mobile,
        opportunities=extract_opportunities(audits),
        diagnostics=extract_diagnostics(audits),
        issues=fundamentals_issues(lhr, metrics),
    )


def extract_opportunities(audits: dict) -> list[SpeedOpportunity]:
    opportunities = []
    for audit_id in OPPORTUNITY_AUDITS:
        audit = audits.get(audit_id)
        if not audit:
            continue
        savings = ((audit.get("details") or {}).get("overallSavingsMs")) or 0
        if savings > 0 or audit.get("score") == 0:
            opportunities.append(SpeedOpportunity(
                id=audit_id,
                title=audit.get("title") or audit_id,
                description=audit.get("description") or "",
                savings=round(savings),
                details=audit.get("displayValue"),
            ))
    opportunities.sort(key=lambda o: o.savings, reverse=True)
    return opportunities


def fundamentals_issues(lhr: dict, metrics: PerformanceMetrics) -> list[AuditIssue]:
    audits = _audits(lhr)
    issues: list[AuditIssue] = []

    if metrics.lcp and metrics.lcp > 2500:
        issues.append(create_issue(
            "large_lcp",
            description=f"LCP is {metrics.lcp / 1000:.1f}s (target: under 2.5s)",
        ))
    if metrics.cls and metrics.cls > 0.1:
        issues.append(create_issue(
            "high_cls",
            description=f"CLS is {metrics.cls:.3f} (target: under 0.1)",
        ))
    if metrics.tbt and metrics.tbt > 300:
        issues.append(create_issue(
            "high_tbt",
            description=f"TBT is {round(metrics.tbt)}ms (target: under 300ms)",
        ))
    if metrics.tti and metrics.tti > 5000:
        issues.append(create_issue(
            "slow_page_load",
            description=f"Time to Interactive is {metrics.tti / 1000:.1f}s (target: under 5s)",
        ))

    if not _perfect(audits, "viewport"):
        if (_category_score(lhr, "seo") or 0) < 0.9:
            issues.append(create_issue(
                "not_mobile_friendly",
                description="Page is not optimized for mobile devices. Configure viewport meta tag.",
            ))
        else:
            issues.append(create_issue("not_mobile_friendly"))

    return issues


# ── Diagnostics ───────────────────────────────────────────────────────────────

def _entity_name(entity: Any) -> str:
    if isinstance(entity, dict):
        return entity.get("text") or entity.get("url") or "Unknown"
    return str(entity or "Unknown")


def _lcp_breakdown(audits: dict) -> Optional[LCPBreakdown]:
    # Newer reports wrap the element and phase tables in a list
    rows: list[dict] = []
    for item in _items(audits.get("largest-contentful-paint-element")):
        if item.get("type") == "table":
            rows.extend(item.get("items") or [])
        else:
            rows.append(item)
    phases = {
        LCP_PHASES[r["phase"]]: r.get("timing") or 0
        for r in rows
        if r.get("phase") in LCP_PHASES
    }
    return LCPBreakdown(**phases) if phases else None


def extract_diagnostics(audits: dict) -> Optional[PerformanceDiagnostics]:
    if not audits:
        return None

    main_thread = [
        MainThreadTask(group=i.get("groupLabel") or i.get("group") or "Other", duration=i.get("duration") or 0)
        for i in _items(audits.get("mainthread-work-breakdown"))
    ]
    main_thread.sort(key=lambda t: t.duration, reverse=True)

    bootup = [
        ScriptBootupItem(
            url=str(i.get("url") or ""),
            total=i.get("total") or 0,
            scripting=i.get("scripting") or 0,
            script_parse_compile=i.get("scriptParseCompile") or 0,
        )
        for i in _items(audits.get("bootup-time"))
    ]

    third_parties = [
        ThirdPartySummary(
            entity=_entity_name(i.get("entity")),
            transfer_size=int(i.get("transferSize") or 0),
            blocking_time=i.get("blockingTime") or 0,
            main_thread_time=i.get("mainThreadTime") or 0,
        )
        for i in _items(audits.get("third-party-summary"))
    ]

    shifts = _items(audits.get("layout-shifts")) or _items(audits.get("layout-shift-elements"))
    culprits = [
        CLSCulprit(
            node=((i.get("node") or {}).get("snippet") or (i.get("node") or {}).get("selector") or "unknown"),
            score=i.get("score") or 0,
        )
        for i in shifts
    ]

    requests_ = _items(audits.get("network-requests"))
    by_type: dict[str, NetworkRequestSummary] = {}
    for req in requests_:
        kind = req.get("resourceType") or "Other"
        summary = by_type.setdefault(kind, NetworkRequestSummary(resource_type=kind, count=0, transfer_size=0))
        summary.count += 1
        summary.transfer_size += int(req.get("transferSize") or 0)
    network = sorted(by_type.values(), key=lambda s: s.transfer_size, reverse=True)

    byte_weight = _numeric(audits, "total-byte-weight")
    return PerformanceDiagnostics(
        main_thread_work=main_thread,
        main_thread_total_time=_numeric(audits, "mainthread-work-breakdown"),
        bootup_time=bootup,
        bootup_total_time=_numeric(audits, "bootup-time"),
        total_byte_weight=int(byte_weight) if byte_weight is not None else None,
        lcp_breakdown=_lcp_breakdown(audits),
        cls_culprits=culprits,
        third_party_summary=third_parties,
        third_party_total_blocking_time=(
            sum(t.blocking_time for t in third_parties) if third_parties else None
        ),
        network_summary=network,
        network_total_requests=len(requests_) if requests_ else None,
        network_total_size=sum(s.transfer_size for s in network) if requests_ else None,
    )


# ── Accessibility ─────────────────────────────────────────────────────────────

def impact_for(score: Optional[float]) -> str:
    if not score:
        return "critical"
    if score < 0.5:
        return "serious"
    if score < 0.9:
        return "moderate"
    return "minor"


def extract_accessibility(lhr: dict) -> AccessibilityData:
    audits = _audits(lhr)
    levels = {
        "A": AccessibilityLevelSummary(),
        "AA": AccessibilityLevelSummary(),
        "AAA": AccessibilityLevelSummary(),
    }
    violations: list[AccessibilityViolation] = []

    for audit_id, level in WCAG_MAPPING.items():
        audit = audits.get(audit_id)
        if not audit:
            continue
        score = audit.get("score")
        summary = levels[level]
        if score == 1:
            summary.passed += 1
            continue

        summary.failed += 1
        summary.violations.append(audit.get("title") or audit_id)
        if score is not None:
            violations.append(AccessibilityViolation(
                id=audit_id,
                impact=impact_for(score),
                description=audit.get("title") or audit_id,
                help_url=f"https://web.dev/{audit_id}",
                wcag_level=level,
                nodes=len(_items(audit)) or 1,
                recommendation=audit.get("description") or "",
            ))

    violations.sort(key=lambda v: IMPACT_ORDER[v.impact])

    level_a, level_aa, level_aaa = levels["A"], levels["AA"], levels["AAA"]
    if level_a.failed:
        wcag_level = None
    elif level_aa.failed:
        wcag_level = "A"
    elif level_aaa.failed:
        wcag_level = "AA"
    else:
        wcag_level = "AAA"

    issues: list[AuditIssue] = []
    if level_a.failed:
        issues.append(create_issue(
            "wcag_level_a_violations",
            description=f"{level_a.failed} WCAG Level A violations found",
        ))
    if level_aa.failed:
        issues.append(create_issue(
            "wcag_level_aa_violations",
            description=f"{level_aa.failed} WCAG Level AA violations found",
        ))

    return AccessibilityData(
        score=_percent(_category_score(lhr, "accessibility")),
        wcag_level=wcag_level,
        violations=violations,
        level_a=level_a,
        level_aa=level_aa,
        level_aaa=level_aaa,
        issues=issues,
    )
