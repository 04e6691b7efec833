"""
Five-category scoring: performance, visibility, security, accessibility, trust.

Visibility and trust recombine legacy category scores; the other three map
straight across. Everything here is computed from the same AuditDetails the
legacy scorer sees, so no analyzer ever runs twice.
"""
from __future__ import annotations

from config import NEW_SCORE_WEIGHTS, TRUST_MIX, VISIBILITY_MIX
from models import (
    AuditDetails,
    NewAuditScores,
    ScoreBonus,
    ScoreBreakdown,
    ScoreBreakdowns,
    ScoreDeduction,
)
from scoring import legacy


def visibility_score(seo: float, local: float) -> int:
    return round(seo * VISIBILITY_MIX["seo"] + local * VISIBILITY_MIX["localPresence"])


def trust_score(social: float, reviews: float) -> int:
    return round(social * TRUST_MIX["social"] + reviews * TRUST_MIX["reviews"])


def calculate_new_scores(details: AuditDetails) -> NewAuditScores:
    performance = legacy.lighthouse_performance(details)
    accessibility = legacy.lighthouse_accessibility(details)
    visibility = visibility_score(legacy.seo_score(details), legacy.local_presence_score(details))
    security = legacy.security_score(details)
    trust = trust_score(legacy.social_score(details), legacy.reviews_score(details))

    category = {
        "performance":   performance,
        "visibility":    visibility,
        "security":      security,
        "accessibility": accessibility,
        "trust":         trust,
    }
    overall = round(sum(category[k] * w for k, w in NEW_SCORE_WEIGHTS.items()))

    return NewAuditScores(overall=overall, **category)


# ── Breakdowns ────────────────────────────────────────────────────────────────

def visibility_breakdown(details: AuditDetails) -> ScoreBreakdown:
    seo = details.seo
    local = details.local_presence
    weight = NEW_SCORE_WEIGHTS["visibility"]
    description = (
        "How easily people can find your website through search engines and local directories."
    )

    if seo is None and local is None:
        return legacy.create_empty_breakdown("visibility", "Findability", description, weight)

    deductions: list[ScoreDeduction] = []
    bonuses: list[ScoreBonus] = []
    score = 100

    if seo is not None:
        meta = seo.meta
        if not meta.title:
            deductions.append(ScoreDeduction(
                15, "Missing page title",
                "Your page has no title. Search engines and visitors don't know what your page is about.",
                "Add a descriptive title tag with your main keyword.",
            ))
        elif not meta.title_length_ok:
            deductions.append(ScoreDeduction(
                5, "Title length not optimal",
                "Your title is too short to describe your page well."
                if meta.title_length < 30 else
                "Your title is too long and will be cut off in search results.",
                "Aim for 50-60 characters.",
            ))

        if not meta.description:
            deductions.append(ScoreDeduction(
                10, "Missing meta description",
                "No description helps search engines understand your page.",
                "Add a 150-160 character meta description.",
            ))

        h1 = seo.headings.h1_count
        if h1 == 0:
            deductions.append(ScoreDeduction(
                10, "No main heading",
                "Every page needs one main H1 heading.",
                "Add an H1 heading with your main topic.",
            ))
        elif h1 > 1:
            deductions.append(ScoreDeduction(
                5, f"Multiple H1 headings ({h1})",
                "Having multiple H1s confuses search engines.",
                "Keep only one H1, change others to H2 or H3.",
            ))

        if seo.content.is_thin_content:
            deductions.append(ScoreDeduction(
                10, f"Low word count ({seo.content.word_count} words)",
                "Search engines prefer pages with substantial content.",
                "Add more valuable content (300-500+ words).",
            ))

        broken = len(seo.links.broken)
        if broken > 0:
            deductions.append(ScoreDeduction(
                min(15, broken * 3), f"{broken} broken links",
                "Broken links hurt user experience and SEO.",
                "Fix or remove broken links.",
            ))

        if seo.sitemap.exists:
            bonuses.append(ScoreBonus(5, "Sitemap present", "Your sitemap helps search engines find all your pages."))
        else:
            # penalised without an itemised deduction
            score -= 5

    if local is not None:
        if local.google_business_profile.exists:
            bonuses.append(ScoreBonus(
                10, "Google Business Profile", "You appear in local searches and Google Maps.",
            ))
        else:
            deductions.append(ScoreDeduction(
                10, "No Google Business Profile",
                "You're missing the most important local listing.",
                "Claim your business at business.google.com",
            ))

        if local.phones or local.addresses:
            bonuses.append(ScoreBonus(5, "Contact info visible", "Visitors can easily find how to reach you."))

    # Bonuses explain strengths only; they never raise the score.
    score -= sum(d.points for d in deductions)

    return ScoreBreakdown(
        category="visibility",
        category_label="Findability",
        category_description=description,
        score=max(0, min(100, score)),
        max_score=100,
        weight=weight,
        weight_explanation="Findability accounts for 25% because being discovered is crucial for getting visitors.",
        base_score=100,
        deductions=deductions,
        bonuses=bonuses,
    )


def trust_breakdown(details: AuditDetails) -> ScoreBreakdown:
    social = details.social
    reviews = details.reviews
    weight = NEW_SCORE_WEIGHTS["trust"]
    description = "How trustworthy your website appears through social proof and customer reviews."

    if social is None and reviews is None:
        return legacy.create_empty_breakdown("trust", "Credibility", description, weight)

    bonuses: list[ScoreBonus] = []
    tips: list[str] = []

    if social is not None:
        og = social.open_graph
        if og.has_title:
            bonuses.append(ScoreBonus(6, "Social sharing title set", "Shared links show a proper title on social media."))
        if og.has_description:
            bonuses.append(ScoreBonus(6, "Social sharing description set", "Shared links have a compelling description."))
        if og.has_image:
            bonuses.append(ScoreBonus(8, "Social sharing image set", "Shared links show an eye-catching image."))

        count = len(social.profiles)
        if count > 0:
            bonuses.append(ScoreBonus(
                min(20, count * 4), f"{count} social profiles linked",
                "Visitors can find and follow you on social media.",
            ))

    if reviews is not None:
        linked = sum(1 for p in reviews.platforms if p.url is not None)
        if linked > 0:
            bonuses.append(ScoreBonus(
                min(24, linked * 8), f"{linked} review platforms linked",
                "Customers can find and leave reviews.",
            ))

        if reviews.website_shows_reviews:
            bonuses.append(ScoreBonus(15, "Reviews displayed on site", "Showing reviews builds trust with visitors."))

        rating = reviews.overall.average_rating
        if rating > 0:
            bonuses.append(ScoreBonus(
                round(min(12, rating * 2.4)), f"{rating:.1f}★ average rating",
                "Good ratings boost credibility.",
            ))

    score = sum(b.points for b in bonuses)
    if score < 50:
        tips.append("Add links to your review profiles to make it easy for customers to leave feedback.")
        tips.append(
            "Display testimonials on your website - 88% of people trust reviews as much as "
            "personal recommendations."
        )

    return ScoreBreakdown(
        category="trust",
        category_label="Credibility",
        category_description=description,
        score=min(100, score),
        max_score=100,
        weight=weight,
        weight_explanation="Credibility accounts for 15% because trust signals influence visitor decisions.",
        base_score=0,
        bonuses=bonuses,
        tips=tips,
    )


def generate_score_breakdowns(details: AuditDetails) -> ScoreBreakdowns:
    return ScoreBreakdowns(
        performance=legacy.performance_breakdown(details),
        visibility=visibility_breakdown(details),
        security=legacy.security_breakdown(details),
        accessibility=legacy.accessibility_breakdown(details),
        trust=trust_breakdown(details),
    )
