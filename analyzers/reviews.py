"""
Reviews and reputation analyzer.

Finds links to review platforms, a testimonials page, on-site review widgets
and the business's average rating. The rating is taken from the first source
that yields a value in (0, 5]:

    1. JSON-LD aggregateRating (top level or inside @graph)
    2. schema.org microdata (itemprop="ratingValue")
    3. visible text ("4.8 stars", "4.5/5", "9/10", "rated 4.6")

Platform ratings and review counts are never scraped from the platforms
themselves; they stay empty.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from bs4 import BeautifulSoup, Tag

from analyzers.base import AnalyzerContext, BaseAnalyzer
from analyzers.templates import create_issue
from crawler import parser
from models import (
    AuditIssue,
    ReviewPlatform,
    ReviewsData,
    ReviewsOverall,
    Severity,
)


REVIEW_PLATFORMS: list[tuple[str, list[re.Pattern]]] = [
    ("Google",      [re.compile(r"google\.com/maps/place", re.I), re.compile(r"g\.page", re.I),
                     re.compile(r"maps\.google\.com", re.I)]),
    ("Yelp",        [re.compile(r"yelp\.com/biz", re.I)]),
    ("Facebook",    [re.compile(r"facebook\.com/", re.I)]),
    ("TripAdvisor", [re.compile(r"tripadvisor\.com", re.I)]),
    ("Trustpilot",  [re.compile(r"trustpilot\.com", re.I)]),
    ("BBB",         [re.compile(r"bbb\.org", re.I)]),
    ("Angi",        [re.compile(r"angi\.com", re.I), re.compile(r"angieslist\.com", re.I)]),
]

TESTIMONIAL_PATTERNS = [
    re.compile(p, re.I)
    for p in (r"testimonial", r"review", r"customer-stories", r"success-stories", r"what-.*say")
]

REVIEW_WIDGET_SELECTORS = [
    '[class*="review"]',
    '[class*="testimonial"]',
    '[id*="review"]',
    '[id*="testimonial"]',
    '[class*="star"]',
    '[class*="rating"]',
    ".elfsight-app",
    ".trustpilot-widget",
    ".yotpo",
    ".stamped-reviews",
    ".judge-me",
    ".loox-review",
    '[itemtype*="Review"]',
    '[typeof="Review"]',
]

REVIEW_PHRASES = [
    "customer reviews",
    "what our customers say",
    "testimonials",
    "5 stars",
    "4.5 stars",
    "rated",
    "reviews from",
]

_STARS = re.compile(r"(\d+(?:\.\d+)?)\s*(?:star|stars|★)", re.I)
_OUT_OF_5 = re.compile(r"(\d+(?:\.\d+)?)\s*/\s*5", re.I)
_OUT_OF_10 = re.compile(r"(\d+(?:\.\d+)?)\s*/\s*10", re.I)
_RATED = re.compile(r"rated\s+(\d+(?:\.\d+)?)", re.I)
_LEADING_FLOAT = re.compile(r"^\s*([+-]?\d+(?:\.\d+)?|[+-]?\.\d+)")
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


@dataclass
class ExtractedRating:
    rating: float
    count: int = 0


def _to_float(value) -> float:
    m = _LEADING_FLOAT.match(str(value)) if value is not None else None
    return float(m.group(1)) if m else 0.0


def _to_int(value) -> int:
    m = _LEADING_INT.match(str(value)) if value is not None else None
    return int(m.group(1)) if m else 0


def _in_range(rating: float) -> bool:
    return 0 < rating <= 5


class ReviewsAnalyzer(BaseAnalyzer):
    id = "reviews"
    name = "Reviews & Reputation"

    def default(self) -> ReviewsData:
        return ReviewsData()

    def run(self, context: AnalyzerContext) -> ReviewsData:
        context.progress("Analyzing reviews and reputation...")

        soup = parser.make_soup(context.html)
        issues: list[AuditIssue] = []

        platforms = detect_review_platforms(soup)
        testimonial_page = find_testimonial_page(soup, context.url)
        shows_reviews = detect_embedded_reviews(soup)
        extracted = extract_rating(soup)
        average = extracted.rating if extracted else 0

        if not any(p.url for p in platforms):
            issues.append(_reviews_issue(
                "no_review_profiles", "No Review Platform Links",
                "No links to review platforms (Google, Yelp, etc.) were found.",
                Severity.WARNING,
                "Add links to your Google Business Profile, Yelp, and other review sites.",
                "Review signals are important for local SEO and consumer trust.",
                "low",
            ))

        if not shows_reviews and not testimonial_page:
            issues.append(_reviews_issue(
                "no_reviews_displayed", "No Reviews/Testimonials Displayed",
                "The website does not appear to display customer reviews or testimonials.",
                Severity.INFO,
                "Add a testimonials section or embed reviews from Google/Yelp.",
                "Displaying reviews builds trust and can improve conversion rates by up to 270%.",
                "medium",
            ))

        google = next((p for p in platforms if p.name == "Google"), None)
        if not (google and google.url):
            issues.append(_reviews_issue(
                "no_google_reviews", "No Google Reviews Link",
                "No link to Google reviews or Google Business Profile.",
                Severity.WARNING,
                "Link to your Google Business Profile and encourage customers to leave Google reviews.",
                "Google reviews directly impact local pack rankings and click-through rates.",
                "low",
            ))

        return ReviewsData(
            overall=ReviewsOverall(
                average_rating=round(average * 10) / 10,
                total_reviews=sum(p.review_count for p in platforms),
                recent_reviews=0,
            ),
            platforms=platforms,
            website_shows_reviews=shows_reviews,
            testimonial_page=testimonial_page,
            issues=issues,
        )


def _reviews_issue(issue_id, title, description, severity, recommendation, impact, effort) -> AuditIssue:
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


# ── Platforms & testimonials ──────────────────────────────────────────────────

def detect_review_platforms(soup: BeautifulSoup) -> list[ReviewPlatform]:
    hrefs = parser.hrefs(soup)
    platforms = []
    for name, patterns in REVIEW_PLATFORMS:
        url = next((h for h in hrefs if h and any(p.search(h) for p in patterns)), None)
        platforms.append(ReviewPlatform(name=name, url=url, rating=None, review_count=0))
    return platforms


def find_testimonial_page(soup: BeautifulSoup, base_url: str) -> Optional[str]:
    for a in parser.anchors(soup):
        href = a.get("href") or ""
        text = a.get_text().lower()
        if any(p.search(href) or p.search(text) for p in TESTIMONIAL_PATTERNS):
            return parser.absolute(href, base_url) or href
    return None


def detect_embedded_reviews(soup: BeautifulSoup) -> bool:
    for selector in REVIEW_WIDGET_SELECTORS:
        el = soup.select_one(selector)
        if el is None:
            continue
        text = el.get_text().lower()
        if (
            "star" in text
            or "rating" in text
            or "review" in text
            or el.select_one('[class*="star"]') is not None
        ):
            return True

    body = soup.find("body")
    body_text = (body or soup).get_text().lower()
    return any(phrase in body_text for phrase in REVIEW_PHRASES)


# ── Rating extraction ─────────────────────────────────────────────────────────

def extract_rating(soup: BeautifulSoup) -> Optional[ExtractedRating]:
    return schema_rating(soup) or microdata_rating(soup) or visible_rating(soup)


def _aggregate(obj: dict) -> Optional[ExtractedRating]:
    agg = obj.get("aggregateRating")
    if not isinstance(agg, dict):
        return None
    rating = _to_float(agg.get("ratingValue"))
    if not _in_range(rating):
        return None
    return ExtractedRating(rating=rating, count=_to_int(agg.get("reviewCount")))


def schema_rating(soup: BeautifulSoup) -> Optional[ExtractedRating]:
    for data, ok in parser.json_ld_blocks(soup):
        if not ok or not isinstance(data, dict):
            continue
        found = _aggregate(data)
        if found:
            return found
        graph = data.get("@graph")
        if isinstance(graph, list):
            for item in graph:
                found = _aggregate(item) if isinstance(item, dict) else None
                if found:
                    return found
    return None


def _itemprop_value(el: Tag) -> str:
    return el.get("content") or el.get_text()


def microdata_rating(soup: BeautifulSoup) -> Optional[ExtractedRating]:
    value_el = soup.select_one('[itemprop="ratingValue"]')
    if value_el is not None:
        rating = _to_float(_itemprop_value(value_el))
        if _in_range(rating):
            count_el = soup.select_one('[itemprop="reviewCount"]')
            count = _to_int(_itemprop_value(count_el)) if count_el is not None else 0
            return ExtractedRating(rating=rating, count=count)

    container = soup.select_one('[itemprop="aggregateRating"]')
    if container is not None:
        value_el = container.select_one('[itemprop="ratingValue"]')
        if value_el is not None:
            rating = _to_float(_itemprop_value(value_el))
            if _in_range(rating):
                count_el = container.select_one('[itemprop="reviewCount"]')
                count = _to_int(_itemprop_value(count_el)) if count_el is not None else 0
                return ExtractedRating(rating=rating, count=count)
    return None


def visible_rating(soup: BeautifulSoup) -> Optional[ExtractedRating]:
    body = soup.find("body")
    text = (body or soup).get_text()

    for pattern, scale in ((_STARS, 1), (_OUT_OF_5, 1), (_OUT_OF_10, 2), (_RATED, 1)):
        m = pattern.search(text)
        if m:
            rating = float(m.group(1)) / scale
            if _in_range(rating):
                return ExtractedRating(rating=rating)
    return None
