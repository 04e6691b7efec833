"""
Local presence analyzer: business name, Google Business Profile, Google Maps,
directory listings and NAP (name, address, phone) consistency.

The Google Business Profile link, when found, is validated with a single
HEAD request; everything else is read from the page itself.
"""
from __future__ import annotations

import logging
import re
from typing import Optional

import requests
from bs4 import BeautifulSoup

from analyzers.base import AnalyzerContext, BaseAnalyzer
from analyzers.local import extract_contacts
from analyzers.templates import create_issue
from config import GBP_VALIDATION_TIMEOUT
from crawler import fetcher, parser
from models import (
    AuditIssue,
    DirectoryListing,
    GoogleBusinessProfile,
    ListingStatus,
    LocalPresenceData,
    NapConsistency,
    NapItem,
    Severity,
)


logger = logging.getLogger(__name__)

DIRECTORIES: list[tuple[str, str]] = [
    ("Yelp",         "yelp.com"),
    ("Yellow Pages", "yellowpages.com"),
    ("BBB",          "bbb.org"),
    ("TripAdvisor",  "tripadvisor.com"),
    ("Angi",         "angi.com"),
    ("Thumbtack",    "thumbtack.com"),
    ("Foursquare",   "foursquare.com"),
    ("Manta",        "manta.com"),
    ("Citysearch",   "citysearch.com"),
    ("MapQuest",     "mapquest.com"),
]

GBP_PATTERNS = [
    re.compile(r"maps\.google\.com.*\?cid=", re.I),
    re.compile(r"google\.com/maps/place", re.I),
    re.compile(r"g\.page/", re.I),
    re.compile(r"business\.google\.com", re.I),
]

MIN_DIRECTORY_LISTINGS = 3


class LocalPresenceAnalyzer(BaseAnalyzer):
    id = "local-presence"
    name = "Local Presence & NAP Consistency"

    def __init__(self, session: Optional[requests.Session] = None):
        self.session = session

    def default(self) -> LocalPresenceData:
        return LocalPresenceData()

    def run(self, context: AnalyzerContext) -> LocalPresenceData:
        context.progress("Analyzing local presence...")

        soup = parser.make_soup(context.html)
        issues: list[AuditIssue] = []

        phones, emails, addresses = extract_contacts(context.html)
        business_name = extract_business_name(soup, context.url)
        gbp = detect_google_business_profile(soup, self.session)
        directories = detect_directory_listings(soup)
        nap = analyze_nap_consistency(business_name, addresses, phones)

        if not gbp.exists:
            issues.append(_local_issue(
                "no_gbp", "No Google Business Profile Link",
                "No link to Google Business Profile found.",
                Severity.WARNING,
                "Claim your Google Business Profile at business.google.com and add a link to your website.",
                "Google Business Profile is critical for local SEO and appearing in local pack results.",
                "medium",
            ))
        if not phones:
            issues.append(_local_issue(
                "no_phone", "No Phone Number Found",
                "No phone number was detected on the page.",
                Severity.WARNING,
                "Add a clearly visible phone number with schema.org markup.",
                "Phone numbers are essential for local businesses and help with local SEO signals.",
                "low",
            ))
        if not addresses:
            issues.append(_local_issue(
                "no_address", "No Physical Address Found",
                "No physical address was detected on the page.",
                Severity.WARNING,
                "Add your business address with proper schema.org LocalBusiness markup.",
                "Physical addresses help establish local relevance for search engines.",
                "low",
            ))
        if not nap.consistent:
            issues.append(_local_issue(
                "nap_inconsistent", "NAP Consistency Issues",
                "Multiple variations of business name, address, or phone were found.",
                Severity.WARNING,
                "Ensure your Name, Address, and Phone (NAP) are exactly consistent across your website.",
                "Inconsistent NAP confuses search engines and can hurt local rankings.",
                "medium",
            ))

        listed = sum(1 for d in directories if d.listed)
        if listed < MIN_DIRECTORY_LISTINGS:
            issues.append(_local_issue(
                "few_directory_listings", "Few Directory Listings",
                f"Only {listed} business directory links found on the page.",
                Severity.INFO,
                "List your business on major directories (Yelp, Yellow Pages, BBB) and link to those profiles.",
                "Directory listings provide citation signals for local SEO.",
                "medium",
            ))

        return LocalPresenceData(
            business_name=business_name,
            google_business_profile=gbp,
            google_maps=detect_google_maps(soup),
            # Neither listing can be confirmed from the page alone
            bing_places=ListingStatus(issues=["Bing Places listing not detected from website"]),
            apple_business_connect=ListingStatus(
                issues=["Apple Business Connect listing not detected from website"],
            ),
            directories=directories,
            nap_consistency=nap,
            phones=phones,
            addresses=addresses,
            emails=emails,
            issues=issues,
        )


def _local_issue(issue_id, title, description, severity, recommendation, impact, effort) -> AuditIssue:
    return create_issue(
        issue_id,
        title=title,
        description=description,
        severity=severity,
        category="local",
        recommendation=recommendation,
        impact=impact,
        effort=effort,
    )


# ── Business name ─────────────────────────────────────────────────────────────

def extract_business_name(soup: BeautifulSoup, url: str) -> Optional[str]:
    """JSON-LD name, then og:site_name, then the registrable part of the host."""
    for obj in parser.json_ld_objects(soup):
        if obj.get("name"):
            return obj["name"]
        for item in obj.get("@graph") or []:
            if (
                isinstance(item, dict)
                and item.get("@type") in ("Organization", "LocalBusiness")
                and item.get("name")
            ):
                return item["name"]

    site_name = parser.meta_content(soup, prop="og:site_name")
    if site_name:
        return site_name

    return parser.site_label(url)


# ── Google ────────────────────────────────────────────────────────────────────

def detect_google_business_profile(
    soup: BeautifulSoup,
    session: Optional[requests.Session] = None,
) -> GoogleBusinessProfile:
    gbp = GoogleBusinessProfile()

    for href in parser.hrefs(soup):
        if href and any(p.search(href) for p in GBP_PATTERNS):
            gbp.exists = True
            gbp.url = href
            break

    if soup.select_one('iframe[src*="google.com/maps"]') is not None:
        gbp.exists = True

    if not gbp.exists:
        gbp.issues.append("No Google Business Profile link detected")
        return gbp

    if gbp.url:
        valid, error = validate_gbp_url(gbp.url, session)
        gbp.verified = valid
        if error:
            gbp.issues.append(error)

    return gbp


def validate_gbp_url(url: str, session: Optional[requests.Session] = None) -> tuple[bool, Optional[str]]:
    try:
        status, _ = fetcher.check_status(url, GBP_VALIDATION_TIMEOUT, session)
    except requests.Timeout:
        return False, "Link validation timed out"
    except requests.RequestException as exc:
        logger.debug("GBP link %s unreachable: %s", url, exc)
        return False, "Link could not be reached"

    if status >= 400:
        return False, f"Link returned HTTP {status}"
    return True, None


def detect_google_maps(soup: BeautifulSoup) -> ListingStatus:
    status = ListingStatus()
    if soup.select_one('iframe[src*="google.com/maps"]') is not None:
        status.listed = True
        status.accurate = True
    if soup.select_one('a[href*="google.com/maps"], a[href*="maps.google.com"]') is not None:
        status.listed = True
    if not status.listed:
        status.issues.append("No Google Maps embed or link found")
    return status


# ── Directories & NAP ─────────────────────────────────────────────────────────

def detect_directory_listings(soup: BeautifulSoup) -> list[DirectoryListing]:
    listings = []
    for name, domain in DIRECTORIES:
        link = soup.select_one(f'a[href*="{domain}"]')
        listed = link is not None
        listings.append(DirectoryListing(
            name=name,
            url=(link.get("href") or None) if listed else None,
            listed=listed,
            accurate=listed,
            issues=[] if listed else [f"No {name} listing link found"],
        ))
    return listings


def normalize_phone(phone: str) -> str:
    return re.sub(r"\D", "", phone)


def analyze_nap_consistency(
    business_name: Optional[str],
    addresses: list[str],
    phones: list[str],
) -> NapConsistency:
    name = NapItem(
        value=business_name,
        variations=[business_name] if business_name else [],
        is_consistent=True,
    )
    address = NapItem(
        value=addresses[0] if addresses else None,
        variations=list(addresses),
        is_consistent=len(addresses) <= 1,
    )
    normalized = [normalize_phone(p) for p in phones]
    phone = NapItem(
        value=phones[0] if phones else None,
        variations=normalized,
        is_consistent=len(set(normalized)) <= 1,
    )

    issues = []
    if not name.is_consistent:
        issues.append("Multiple business name variations")
    if not address.is_consistent:
        issues.append("Multiple address variations")
    if not phone.is_consistent:
        issues.append("Multiple phone number variations")

    return NapConsistency(
        consistent=name.is_consistent and address.is_consistent and phone.is_consistent,
        name=name,
        address=address,
        phone=phone,
        issues=issues,
    )
