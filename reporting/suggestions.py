"""
Suggestion generator for the five-category report.

Rules are evaluated in a fixed order; each one that fires yields a Suggestion.
The candidates are then partitioned into exactly one bucket each:
    quick wins      high impact, low effort
    priority fixes  high impact, medium/high effort
    nice to have    everything else
Bucket order follows rule order.
"""
from __future__ import annotations

from typing import Callable, Optional

from models import AuditDetails, AuditSuggestions, NewAuditScores, Suggestion


Rule = Callable[[AuditDetails, NewAuditScores], Optional[Suggestion]]


# ── Rules ─────────────────────────────────────────────────────────────────────

def _slow_page(details: AuditDetails, scores: NewAuditScores) -> Optional[Suggestion]:
    if scores.performance >= 50:
        return None
    return Suggestion(
        id="perf-critical",
        title="Improve page load speed",
        description=(
            "Your site loads slowly. Focus on optimizing images, reducing JavaScript, "
            "and enabling caching."
        ),
        category="performance",
        impact="high",
        effort="high",
        score_improvement=[{"category": "performance", "points": 20}],
        related_fact="speed.lcp",
        how_to_fix="Compress images, enable browser caching, and minify CSS/JavaScript files.",
    )


def _missing_alt(details: AuditDetails, scores: NewAuditScores) -> Optional[Suggestion]:
    missing = details.seo.images.missing_alt if details.seo else 0
    if missing <= 0:
        return None
    return Suggestion(
        id="seo-alt-text",
        title="Add descriptions to images",
        description=(
            f"{missing} images are missing alt text. This helps search engines and screen readers."
        ),
        category="visibility",
        impact="high",
        effort="low",
        score_improvement=[
            {"category": "visibility", "points": 5},
            {"category": "accessibility", "points": 3},
        ],
        related_fact="content.images.missing_alt",
        how_to_fix="Add descriptive alt text to each image explaining what it shows.",
    )


def _missing_title(details: AuditDetails, scores: NewAuditScores) -> Optional[Suggestion]:
    if details.seo and details.seo.meta.title:
        return None
    return Suggestion(
        id="seo-title",
        title="Add a page title",
        description="Your page has no title tag. This is essential for search engines and visitors.",
        category="visibility",
        impact="high",
        effort="low",
        score_improvement=[{"category": "visibility", "points": 15}],
        related_fact="content.title",
        how_to_fix="Add a descriptive title with 50-60 characters including your main keyword.",
    )


def _missing_sitemap(details: AuditDetails, scores: NewAuditScores) -> Optional[Suggestion]:
    if details.seo and details.seo.sitemap.exists:
        return None
    return Suggestion(
        id="seo-sitemap",
        title="Create an XML sitemap",
        description="A sitemap helps search engines find and index all your pages.",
        category="visibility",
        impact="medium",
        effort="low",
        score_improvement=[{"category": "visibility", "points": 5}],
        related_fact="content.sitemap",
        how_to_fix="Generate an XML sitemap and submit it to Google Search Console.",
    )


def _no_https(details: AuditDetails, scores: NewAuditScores) -> Optional[Suggestion]:
    if details.tech and details.tech.security.is_https:
        return None
    return Suggestion(
        id="sec-https",
        title="Enable HTTPS encryption",
        description="Your site is not secure. Visitors see warnings and Google ranks it lower.",
        category="security",
        impact="high",
        effort="medium",
        score_improvement=[{"category": "security", "points": 40}],
        related_fact="site.is_https",
        how_to_fix="Install an SSL certificate. Many hosts offer free certificates.",
    )


def _no_privacy_policy(details: AuditDetails, scores: NewAuditScores) -> Optional[Suggestion]:
    if details.tech and details.tech.security.gdpr_compliance.has_privacy_policy:
        return None
    return Suggestion(
        id="sec-privacy",
        title="Add a privacy policy",
        description="A privacy policy is legally required if you collect any user data.",
        category="security",
        impact="high",
        effort="medium",
        score_improvement=[{"category": "security", "points": 10}],
        related_fact="site.gdpr_compliance.has_privacy_policy",
        how_to_fix="Add a privacy policy page explaining what data you collect.",
    )


def _no_og_image(details: AuditDetails, scores: NewAuditScores) -> Optional[Suggestion]:
    if details.social and details.social.open_graph.has_image:
        return None
    return Suggestion(
        id="trust-og-image",
        title="Add a social sharing image",
        description="Posts without images get far fewer clicks on social media.",
        category="trust",
        impact="high",
        effort="low",
        score_improvement=[{"category": "trust", "points": 8}],
        related_fact="presence.open_graph.image",
        how_to_fix="Add an og:image meta tag with a 1200x630 pixel image.",
    )


def _no_reviews_shown(details: AuditDetails, scores: NewAuditScores) -> Optional[Suggestion]:
    if details.reviews and details.reviews.website_shows_reviews:
        return None
    return Suggestion(
        id="trust-reviews",
        title="Display customer reviews",
        description="Showing reviews builds trust and can increase conversions significantly.",
        category="trust",
        impact="medium",
        effort="medium",
        score_improvement=[{"category": "trust", "points": 15}],
        related_fact="presence.website_shows_reviews",
        how_to_fix="Add a testimonials section or embed reviews from Google/Yelp.",
    )


# Evaluation order is the order suggestions appear within each bucket.
RULES: list[Rule] = [
    _slow_page,
    _missing_alt,
    _missing_title,
    _missing_sitemap,
    _no_https,
    _no_privacy_policy,
    _no_og_image,
    _no_reviews_shown,
]


def partition(suggestions: list[Suggestion]) -> AuditSuggestions:
    out = AuditSuggestions()
    for s in suggestions:
        if s.impact == "high" and s.effort == "low":
            out.quick_wins.append(s)
        elif s.impact == "high":
            out.priority_fixes.append(s)
        else:
            out.nice_to_have.append(s)
    return out


def generate_suggestions(details: AuditDetails, scores: NewAuditScores) -> AuditSuggestions:
    candidates = [s for s in (rule(details, scores) for rule in RULES) if s is not None]
    return partition(candidates)
