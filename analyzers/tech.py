"""
Technology and security analyzer.

Fingerprints CMS, frameworks, libraries and CDNs from the page source, finds
analytics trackers, and checks HTTPS, mixed content, security headers (from
one HEAD probe) and privacy/cookie compliance signals.
"""
from __future__ import annotations

import logging
import re
from typing import Callable, Optional
from urllib.parse import urlparse

import requests
from bs4 import BeautifulSoup

from analyzers.base import AnalyzerContext, BaseAnalyzer
from analyzers.templates import create_issue
from config import EXPECTED_SECURITY_HEADERS, HEADER_PROBE_TIMEOUT
from crawler import fetcher, parser
from models import (
    AnalyticsData,
    AuditIssue,
    GdprCompliance,
    SecurityData,
    SecurityHeader,
    TechData,
    TechnologyItem,
)


logger = logging.getLogger(__name__)

Detector = Callable[[str, BeautifulSoup], bool]


def _sel(selector: str) -> Detector:
    return lambda html, soup: soup.select_one(selector) is not None


def _has(*needles: str) -> Detector:
    return lambda html, soup: any(n in html for n in needles)


# name, detector, category, confidence
TECH_SIGNATURES: list[tuple[str, Detector, str, int]] = [
    ("React",        _sel("[data-reactroot], [data-reactid]"),             "JavaScript Framework", 90),
    ("Next.js",      _sel('script[src*="_next"]'),                         "JavaScript Framework", 95),
    ("Vue",          _sel('[data-v-], script[src*="vue"]'),                "JavaScript Framework", 90),
    ("Nuxt",         _has("__nuxt", "_nuxt"),                              "JavaScript Framework", 95),
    ("Angular",      _sel("[ng-app], [ng-controller], [_ngcontent]"),      "JavaScript Framework", 90),
    ("Svelte",       _sel("[class*='svelte-']"),                           "JavaScript Framework", 85),
    ("jQuery",       _sel('script[src*="jquery"]'),                        "JavaScript Library",   95),
    ("WordPress",    _has("wp-content", "wp-includes"),                    "CMS",                  95),
    ("Drupal",       _has("drupal", "/sites/default/files"),               "CMS",                  90),
    ("Joomla",       _has("/media/jui/", "joomla"),                        "CMS",                  90),
    ("Shopify",      _has("cdn.shopify.com"),                              "E-commerce Platform",  95),
    ("WooCommerce",  _has("woocommerce", "wc-cart"),                       "E-commerce Platform",  95),
    ("Magento",      _has("mage-cache", "/static/version"),                "E-commerce Platform",  90),
    ("Webflow",      _has("webflow.com"),                                  "Website Builder",      95),
    ("Wix",          _has("wix.com", "parastorage.com"),                   "Website Builder",      95),
    ("Squarespace",  _has("squarespace.com"),                              "Website Builder",      95),
    ("Framer",       _has("framer.com", "framer-motion"),                  "Website Builder",      90),
    ("Bootstrap",    _sel('link[href*="bootstrap"], script[src*="bootstrap"]'), "CSS Framework",   90),
    ("Tailwind",     lambda html, soup: bool(re.search(r'class="[^"]*(?:flex|grid|p-\d|m-\d|text-\w+)', html)),
                                                                           "CSS Framework",        70),
    ("Material UI",  _sel("[class*='MuiBox'], [class*='MuiButton']"),      "UI Library",           90),
    ("Chakra",       _sel("[class*='chakra-']"),                           "UI Library",           90),
    ("Cloudflare",   _has("cloudflare", "cdnjs.cloudflare.com"),           "CDN",                  90),
    ("Vercel",       _has("vercel.com", "vercel-analytics"),               "Hosting",              85),
    ("Netlify",      _has("netlify"),                                      "Hosting",              85),
    ("Google Fonts", _sel('link[href*="fonts.googleapis.com"]'),           "Font Service",         95),
]

# CDN name -> page-source needles
CDN_SIGNATURES: list[tuple[str, tuple[str, ...]]] = [
    ("Cloudflare",     ("cloudflare",)),
    ("AWS CloudFront", ("amazonaws.com", "cloudfront.net")),
    ("Akamai",         ("akamaized.net", "akamai")),
    ("Fastly",         ("fastly.net",)),
    ("StackPath",      ("stackpath", "bootstrapcdn")),
    ("unpkg",          ("unpkg.com",)),
    ("jsDelivr",       ("jsdelivr.net",)),
]

OTHER_TRACKERS: list[tuple[str, tuple[str, ...]]] = [
    ("Microsoft Clarity", ("clarity.ms",)),
    ("Amplitude",         ("amplitude.com",)),
    ("Heap",              ("heap.io", "heapanalytics")),
    ("FullStory",         ("fullstory.com",)),
    ("LogRocket",         ("logrocket.com",)),
    ("PostHog",           ("posthog.com",)),
    ("Plausible",         ("plausible.io",)),
    ("Fathom",            ("fathom",)),
    ("Matomo",            ("matomo", "piwik")),
]

_MIXED_CONTENT_TAGS = ["img", "script", "link", "iframe", "video", "audio", "source"]


class TechAnalyzer(BaseAnalyzer):
    id = "tech"
    name = "Technology & Security"

    def __init__(self, session: Optional[requests.Session] = None):
        self.session = session

    def default(self) -> TechData:
        return TechData()

    def run(self, context: AnalyzerContext) -> TechData:
        context.progress("Detecting technologies...")

        html = context.html
        soup = parser.make_soup(html)
        issues: list[AuditIssue] = []

        scripts = [s.get("src") for s in soup.find_all("script", src=True) if s.get("src")]

        context.progress("Checking security...")
        headers = probe_headers(context.url, self.session)
        security = analyze_security(context.url, soup, html, headers, issues)

        analytics = detect_analytics(scripts, html)
        technologies = detect_technologies(html, soup)
        cdns = detect_cdns(html, soup)

        if not analytics.google_analytics and not analytics.google_analytics4:
            issues.append(create_issue("no_google_analytics"))

        return TechData(
            security=security,
            analytics=analytics,
            technologies=technologies,
            cms=next((t.name for t in technologies if t.category == "CMS"), None),
            framework=next((t.name for t in technologies if t.category == "JavaScript Framework"), None),
            server=headers.get("server") or None,
            cdns=cdns,
            issues=issues,
        )


# ── Security ──────────────────────────────────────────────────────────────────

def probe_headers(url: str, session: Optional[requests.Session] = None) -> dict[str, str]:
    """Headers of a HEAD request to the page; empty when the probe fails."""
    try:
        return fetcher.fetch_headers(url, HEADER_PROBE_TIMEOUT, session)
    except requests.RequestException as exc:
        logger.debug("header probe failed for %s: %s", url, exc)
        return {}


def check_security_headers(headers: dict[str, str]) -> list[SecurityHeader]:
    out = []
    for name, recommendation in EXPECTED_SECURITY_HEADERS:
        value = headers.get(name.lower())
        out.append(SecurityHeader(
            name=name,
            present=bool(value),
            value=value or None,
            recommendation=recommendation,
        ))
    return out


def detect_mixed_content(soup: BeautifulSoup, page_url: str) -> bool:
    if urlparse(page_url).scheme != "https":
        return False
    for el in soup.find_all(_MIXED_CONTENT_TAGS):
        src = el.get("src") or el.get("href") or el.get("data-src")
        if src and src.startswith("http://") and not src.startswith("http://localhost"):
            return True
    return False


def check_gdpr_compliance(soup: BeautifulSoup, html: str) -> GdprCompliance:
    has_privacy_policy = (
        soup.select_one('a[href*="privacy"], a[href*="datenschutz"]') is not None
        or "privacy policy" in html.lower()
    )
    has_cookie_banner = (
        soup.select_one('[class*="cookie"], [id*="cookie"], [class*="consent"], [id*="consent"]') is not None
        or any(n in html for n in ("onetrust", "cookiebot", "cookieconsent", "cookie-banner", "cookie_banner"))
    )
    has_cookie_policy = soup.select_one('a[href*="cookie-policy"], a[href*="cookies"]') is not None

    issues = []
    if not has_privacy_policy:
        issues.append("No privacy policy link found")
    if not has_cookie_banner:
        issues.append("No cookie consent mechanism detected")

    return GdprCompliance(
        has_privacy_policy=has_privacy_policy,
        has_cookie_banner=has_cookie_banner,
        has_cookie_policy=has_cookie_policy,
        issues=issues,
    )


def analyze_security(
    page_url: str,
    soup: BeautifulSoup,
    html: str,
    headers: dict[str, str],
    issues: list[AuditIssue],
) -> SecurityData:
    """Security findings; the issues go to the tech analyzer's own list."""
    is_https = urlparse(page_url).scheme == "https"
    mixed = detect_mixed_content(soup, page_url)
    security_headers = check_security_headers(headers)
    gdpr = check_gdpr_compliance(soup, html)

    if not is_https:
        issues.append(create_issue("not_https"))
    if mixed:
        issues.append(create_issue("mixed_content"))

    missing = [h.name for h in security_headers if not h.present]
    if missing:
        issues.append(create_issue("missing_security_headers", description=f"Missing: {', '.join(missing)}"))

    if not gdpr.has_privacy_policy:
        issues.append(create_issue("no_privacy_policy"))
    if not gdpr.has_cookie_banner:
        issues.append(create_issue("no_cookie_banner"))

    return SecurityData(
        is_https=is_https,
        has_hsts=any(h.name == "Strict-Transport-Security" and h.present for h in security_headers),
        mixed_content=mixed,
        security_headers=security_headers,
        gdpr_compliance=gdpr,
    )


# ── Analytics & fingerprints ──────────────────────────────────────────────────

def detect_analytics(scripts: list[str], html: str) -> AnalyticsData:
    src = " ".join(scripts) + " " + html

    return AnalyticsData(
        google_analytics=bool(re.search(r"UA-\d+-\d+", src)) or "google-analytics.com/analytics.js" in src,
        google_analytics4=(
            bool(re.search(r"G-[A-Z0-9]+", src))
            or "gtag/js" in src
            or "googletagmanager.com/gtag" in src
        ),
        google_tag_manager="googletagmanager.com/gtm.js" in src or bool(re.search(r"GTM-[A-Z0-9]+", src)),
        facebook_pixel=any(n in src for n in ("connect.facebook.net", "fbevents.js", "fbq(")),
        hotjar="hotjar.com" in src or "hj(" in src,
        mixpanel="mixpanel.com" in src,
        segment="segment.com" in src or "analytics.js" in src,
        other_trackers=[name for name, needles in OTHER_TRACKERS if any(n in src for n in needles)],
    )


def detect_technologies(html: str, soup: BeautifulSoup) -> list[TechnologyItem]:
    return [
        TechnologyItem(name=name, category=category, confidence=confidence)
        for name, detect, category, confidence in TECH_SIGNATURES
        if detect(html, soup)
    ]


def detect_cdns(html: str, soup: BeautifulSoup) -> list[str]:
    return [name for name, needles in CDN_SIGNATURES if any(n in html for n in needles)]
