"""
Legacy nine-category scoring.

Two disciplines are used:
- deduction-based (seo): start at 100 and subtract per problem found
- bonus-based (social, security, local presence, reviews, advertising,
  e-commerce): start at 0 and add per positive signal

Performance and accessibility come straight from Lighthouse.
Every breakdown keeps the exact wording of its deductions and bonuses, the
suggestion generator and the dashboard both display them verbatim.
"""
from __future__ import annotations

from typing import Optional

from config import SCORE_WEIGHTS
from models import (
    AuditDetails,
    AuditScores,
    DetailedScores,
    ScoreBonus,
    ScoreBreakdown,
    ScoreDeduction,
)
from scoring.metrics import core_web_vitals


def _clamp(score: float) -> float:
    return max(0, min(100, score))


# ── Category calculators ──────────────────────────────────────────────────────

def seo_score(details: AuditDetails) -> int:
    seo = details.seo
    if seo is None:
        return 0

    score = 100

    if not seo.meta.title:
        score -= 15
    elif not seo.meta.title_length_ok:
        score -= 5

    if not seo.meta.description:
        score -= 10
    elif not seo.meta.description_length_ok:
        score -= 3

    if seo.headings.h1_count == 0:
        score -= 10
    elif seo.headings.h1_count > 1:
        score -= 5

    if not seo.headings.structure_ok:
        score -= 5

    if seo.content.is_thin_content:
        score -= 10

    if seo.images.missing_alt > 0:
        score -= min(10, seo.images.missing_alt * 2)

    if seo.links.broken:
        score -= min(15, len(seo.links.broken) * 3)

    if not seo.sitemap.exists:
        score -= 5
    if not seo.robots.exists:
        score -= 3

    return _clamp(score)


def social_score(details: AuditDetails) -> int:
    social = details.social
    if social is None:
        return 0

    score = 0
    if social.open_graph.has_title:
        score += 15
    if social.open_graph.has_description:
        score += 15
    if social.open_graph.has_image:
        score += 20
    if social.twitter.has_card:
        score += 15

    score += min(35, len(social.profiles) * 7)
    return min(100, score)


def security_score(details: AuditDetails) -> int:
    if details.tech is None:
        return 0
    security = details.tech.security

    score = 0
    if security.is_https:
        score += 40
    if security.has_hsts:
        score += 10
    if not security.mixed_content:
        score += 10

    present = sum(1 for h in security.security_headers if h.present)
    score += min(20, present * 4)

    if security.gdpr_compliance.has_privacy_policy:
        score += 10
    if security.gdpr_compliance.has_cookie_banner:
        score += 10

    return min(100, score)


def local_presence_score(details: AuditDetails) -> int:
    presence = details.local_presence
    local = details.local
    if presence is None and local is None:
        return 0

    score = 0
    if presence is not None:
        if presence.google_business_profile.exists:
            score += 25
        if presence.google_maps.listed:
            score += 15
        if presence.nap_consistency.consistent:
            score += 20
        listed = sum(1 for d in presence.directories if d.listed)
        score += min(20, listed * 4)
        if presence.phones:
            score += 10
        if presence.addresses:
            score += 10
    else:
        if local.phones:
            score += 30
        if local.emails:
            score += 30
        if local.addresses:
            score += 40

    return min(100, score)


def reviews_score(details: AuditDetails) -> float:
    reviews = details.reviews
    if reviews is None:
        return 0

    score = 0
    linked = sum(1 for p in reviews.platforms if p.url is not None)
    score += min(40, linked * 10)

    if reviews.website_shows_reviews:
        score += 25
    if reviews.testimonial_page:
        score += 15

    if reviews.overall.average_rating > 0:
        score += min(20, reviews.overall.average_rating * 4)

    return min(100, score)


def advertising_score(details: AuditDetails) -> int:
    ads = details.advertising
    if ads is None:
        return 0

    score = 0
    if ads.retargeting.detected:
        score += 40
    if ads.paid_search.detected:
        score += 30
    if ads.social_ads.detected:
        score += 30
    return min(100, score)


def ecommerce_score(details: AuditDetails) -> int:
    shop = details.ecommerce
    if shop is None or not shop.has_ecommerce:
        return 0

    score = 0
    if shop.platform.detected:
        score += 20
    if shop.payment_processors:
        score += 30
    if shop.ssl_on_checkout:
        score += 30
    if shop.product_schema:
        score += 20
    return min(100, score)


def lighthouse_performance(details: AuditDetails) -> int:
    return details.fundamentals.scores.performance if details.fundamentals else 0


def lighthouse_accessibility(details: AuditDetails) -> int:
    return details.fundamentals.scores.accessibility if details.fundamentals else 0


def calculate_category_scores(details: AuditDetails) -> AuditScores:
    """
    Score every category. A category whose analyzer was switched off is left
    as None so the overall average skips it.
    """
    def present(value, *sources) -> Optional[float]:
        return value if any(s is not None for s in sources) else None

    return AuditScores(
        overall=0,
        performance=present(lighthouse_performance(details), details.fundamentals),
        seo=present(seo_score(details), details.seo),
        social=present(social_score(details), details.social),
        accessibility=present(lighthouse_accessibility(details), details.fundamentals),
        local_presence=present(local_presence_score(details), details.local_presence, details.local),
        reviews=present(reviews_score(details), details.reviews),
        advertising=present(advertising_score(details), details.advertising),
        ecommerce=present(ecommerce_score(details), details.ecommerce),
        security=present(security_score(details), details.tech),
    )


_SCORE_FIELDS = {
    "performance":   "performance",
    "seo":           "seo",
    "accessibility": "accessibility",
    "social":        "social",
    "security":      "security",
    "localPresence": "local_presence",
    "reviews":       "reviews",
    "advertising":   "advertising",
    "ecommerce":     "ecommerce",
}


def calculate_overall_score(scores: AuditScores) -> int:
    """
    Weighted average over the categories that were scored. The weight table
    does not sum to 1; dividing by the weights present keeps the result on a
    0-100 scale when categories are skipped.
    """
    total_weight = 0.0
    weighted_sum = 0.0

    for key, weight in SCORE_WEIGHTS.items():
        value = getattr(scores, _SCORE_FIELDS[key])
        if value is None:
            continue
        weighted_sum += value * weight
        total_weight += weight

    if total_weight == 0:
        return 0
    return round(weighted_sum / total_weight)


def score_audit(details: AuditDetails) -> AuditScores:
    scores = calculate_category_scores(details)
    scores.overall = calculate_overall_score(scores)
    return scores


# ── Breakdowns ────────────────────────────────────────────────────────────────

def create_empty_breakdown(category: str, label: str, description: str, weight: float) -> ScoreBreakdown:
    return ScoreBreakdown(
        category=category,
        category_label=label,
        category_description=description,
        score=0,
        max_score=100,
        weight=weight,
        weight_explanation=f"This category accounts for {round(weight * 100)}% of your overall score.",
        base_score=0,
        tips=["No data available for this category."],
    )


def performance_breakdown(details: AuditDetails) -> ScoreBreakdown:
    fundamentals = details.fundamentals
    score = lighthouse_performance(details)
    tips: list[str] = []

    cwv = core_web_vitals(
        fundamentals.metrics if fundamentals else None,
        fundamentals.diagnostics if fundamentals else None,
    )

    if score < 50:
        tips.append("Consider using a Content Delivery Network (CDN) to serve your content faster worldwide.")
        tips.append("Compress and resize images before uploading them to your website.")
    elif score < 80:
        tips.append("Enable browser caching so returning visitors load your site faster.")

    return ScoreBreakdown(
        category="performance",
        category_label="Performance",
        category_description=(
            "How fast your website loads and responds. Fast sites keep visitors happy "
            "and rank better in Google."
        ),
        score=score,
        max_score=100,
        weight=SCORE_WEIGHTS["performance"],
        weight_explanation=(
            "Performance accounts for 25% of your overall score because speed directly "
            "impacts visitor satisfaction and search rankings."
        ),
        base_score=100,
        tips=tips,
        core_web_vitals=cwv,
    )


def seo_breakdown(details: AuditDetails) -> ScoreBreakdown:
    seo = details.seo
    if seo is None:
        return create_empty_breakdown(
            "seo", "SEO",
            "Search Engine Optimization - how well search engines can find and understand your website.",
            SCORE_WEIGHTS["seo"],
        )

    deductions: list[ScoreDeduction] = []
    bonuses: list[ScoreBonus] = []
    tips: list[str] = []
    meta = seo.meta

    if not meta.title:
        deductions.append(ScoreDeduction(
            15, "Missing page title",
            "Your page has no title tag. This is like a book without a cover - search engines "
            "and visitors don't know what your page is about.",
            "Add a <title> tag in your page's HTML head section. Make it descriptive and "
            "include your main keyword.",
        ))
    elif not meta.title_length_ok:
        deductions.append(ScoreDeduction(
            5, f"Title length not optimal ({meta.title_length} characters)",
            "Your title is too short. You're missing an opportunity to describe your page and include keywords."
            if meta.title_length < 30 else
            "Your title is too long and will be cut off in search results, hiding important information.",
            "Aim for 50-60 characters. Put the most important words first.",
        ))
    else:
        bonuses.append(ScoreBonus(
            5, "Well-optimized title tag",
            "Your page title is the right length and will display properly in search results.",
        ))

    if not meta.description:
        deductions.append(ScoreDeduction(
            10, "Missing meta description",
            "No description tells search engines what your page is about. Google may show "
            "random text from your page instead.",
            "Add a meta description tag with 150-160 characters describing your page content.",
        ))
    elif not meta.description_length_ok:
        deductions.append(ScoreDeduction(
            3, f"Description length not optimal ({meta.description_length} characters)",
            "Your description is too short to fully explain what your page offers."
            if meta.description_length < 120 else
            "Your description will be cut off in search results.",
            "Aim for 150-160 characters with a clear call-to-action.",
        ))

    h1 = seo.headings.h1_count
    if h1 == 0:
        deductions.append(ScoreDeduction(
            10, "No main heading (H1) found",
            "Every page needs one main heading. It tells visitors and search engines what the page is about.",
            "Add one H1 heading at the top of your content with your main topic or keyword.",
        ))
    elif h1 > 1:
        deductions.append(ScoreDeduction(
            5, f"Multiple main headings found ({h1})",
            "Having multiple H1 headings confuses search engines about what your page is mainly about.",
            "Keep only one H1 heading. Change others to H2 or H3.",
        ))

    if not seo.headings.structure_ok:
        deductions.append(ScoreDeduction(
            5, "Heading hierarchy issues",
            "Your headings skip levels (like going from H1 to H3). This makes your content harder to navigate.",
            "Use headings in order: H1, then H2, then H3. Don't skip levels.",
        ))

    if seo.content.is_thin_content:
        deductions.append(ScoreDeduction(
            10, f"Low word count ({seo.content.word_count} words)",
            "Your page has very little text. Search engines prefer pages with substantial, helpful content.",
            "Add more valuable content. Aim for at least 300-500 words on important pages.",
        ))

    missing_alt = seo.images.missing_alt
    if missing_alt > 0:
        deductions.append(ScoreDeduction(
            min(10, missing_alt * 2), f"{missing_alt} images missing descriptions",
            "Images without alt text can't be understood by search engines or screen readers "
            "used by visually impaired visitors.",
            "Add descriptive alt text to each image explaining what it shows.",
        ))

    broken = len(seo.links.broken)
    if broken > 0:
        deductions.append(ScoreDeduction(
            min(15, broken * 3), f"{broken} broken links found",
            "Broken links frustrate visitors and make your site look unmaintained. Search "
            "engines may lower your ranking.",
            "Fix or remove the broken links. Use a link checker tool regularly.",
        ))

    if not seo.sitemap.exists:
        deductions.append(ScoreDeduction(
            5, "No sitemap found",
            "A sitemap helps search engines find all your pages. Without one, some pages might not get indexed.",
            "Create an XML sitemap and submit it to Google Search Console.",
        ))
    else:
        bonuses.append(ScoreBonus(
            5, "Sitemap present",
            "Your sitemap helps search engines discover and index your pages efficiently.",
        ))

    if not seo.robots.exists:
        deductions.append(ScoreDeduction(
            3, "No robots.txt file",
            "This file tells search engines which pages to crawl. Without it, you have less control over indexing.",
            "Create a robots.txt file in your website's root directory.",
        ))

    if seo.content.spelling_errors:
        tips.append(
            f"We found {len(seo.content.spelling_errors)} potential spelling errors. "
            "Proofread your content to maintain professionalism."
        )

    # Bonuses are informational; the score itself is purely deduction-based.
    score = _clamp(100 - sum(d.points for d in deductions))

    return ScoreBreakdown(
        category="seo",
        category_label="SEO",
        category_description=(
            "Search Engine Optimization - how easily people can find your website through "
            "Google and other search engines."
        ),
        score=score,
        max_score=100,
        weight=SCORE_WEIGHTS["seo"],
        weight_explanation=(
            "SEO accounts for 20% of your overall score because being found in search "
            "results is crucial for getting visitors."
        ),
        base_score=100,
        deductions=deductions,
        bonuses=bonuses,
        tips=tips,
    )


def accessibility_breakdown(details: AuditDetails) -> ScoreBreakdown:
    score = lighthouse_accessibility(details)
    access = details.accessibility
    deductions: list[ScoreDeduction] = []
    bonuses: list[ScoreBonus] = []

    if access is not None and access.level_a.failed > 0:
        failed = access.level_a.failed
        first = ", ".join(access.level_a.violations[:3]) or "Check accessibility audit details."
        deductions.append(ScoreDeduction(
            failed * 5, f"{failed} basic accessibility issues",
            "These are fundamental problems that prevent some people from using your website "
            "at all, including those using screen readers.",
            "Address these issues first: " + first,
        ))

    if access is not None and access.level_aa.failed > 0:
        failed = access.level_aa.failed
        deductions.append(ScoreDeduction(
            failed * 3, f"{failed} intermediate accessibility issues",
            "These issues make your site harder to use for people with disabilities.",
            "Common fixes include improving color contrast and adding proper form labels.",
        ))

    if score >= 90:
        bonuses.append(ScoreBonus(
            10, "Excellent accessibility",
            "Your site is usable by people with various disabilities, including those using screen readers.",
        ))

    return ScoreBreakdown(
        category="accessibility",
        category_label="Accessibility",
        category_description=(
            "How usable your website is for people with disabilities, including visual, "
            "hearing, and motor impairments."
        ),
        score=score,
        max_score=100,
        weight=SCORE_WEIGHTS["accessibility"],
        weight_explanation=(
            "Accessibility accounts for 15% because an accessible site reaches more people "
            "and may be legally required."
        ),
        base_score=100,
        deductions=deductions,
        bonuses=bonuses,
        tips=[
            "Test your site using a screen reader to experience how visually impaired users navigate it.",
            "Ensure all interactive elements can be used with keyboard only (no mouse required).",
        ],
    )


def security_breakdown(details: AuditDetails) -> ScoreBreakdown:
    if details.tech is None:
        return create_empty_breakdown(
            "security", "Security",
            "How well your website protects visitor data and privacy.",
            SCORE_WEIGHTS["security"],
        )

    security = details.tech.security
    deductions: list[ScoreDeduction] = []
    bonuses: list[ScoreBonus] = []
    tips: list[str] = []

    if security.is_https:
        bonuses.append(ScoreBonus(
            40, "HTTPS encryption enabled",
            "Your site uses secure encryption. Visitors see a padlock icon and their data is protected.",
        ))
    else:
        deductions.append(ScoreDeduction(
            40, "No HTTPS encryption",
            "Your site is not secure. Browsers show warnings, visitors don't trust it, and Google ranks it lower.",
            "Install an SSL certificate. Many hosts offer free certificates through Let's Encrypt.",
        ))

    if security.has_hsts:
        bonuses.append(ScoreBonus(
            10, "HSTS enabled",
            "Your site forces secure connections, preventing certain types of attacks.",
        ))

    if not security.mixed_content:
        bonuses.append(ScoreBonus(10, "No mixed content", "All your page resources load securely."))
    else:
        deductions.append(ScoreDeduction(
            10, "Mixed content detected",
            "Some images or scripts load over insecure HTTP, which can trigger browser warnings.",
            "Update all resource URLs to use https:// instead of http://",
        ))

    present = [h for h in security.security_headers if h.present]
    missing = [h for h in security.security_headers if not h.present]
    if present:
        bonuses.append(ScoreBonus(
            min(20, len(present) * 4), f"{len(present)} security headers configured",
            "Security headers help protect against common web attacks.",
        ))
    if missing:
        tips.append(f"Consider adding these security headers: {', '.join(h.name for h in missing[:3])}")

    if security.gdpr_compliance.has_privacy_policy:
        bonuses.append(ScoreBonus(
            10, "Privacy policy present",
            "You have a privacy policy, which is required by law in most regions.",
        ))
    else:
        deductions.append(ScoreDeduction(
            10, "No privacy policy found",
            "A privacy policy is legally required if you collect any user data (including through analytics).",
            "Add a privacy policy page explaining what data you collect and how you use it.",
        ))

    if security.gdpr_compliance.has_cookie_banner:
        bonuses.append(ScoreBonus(
            10, "Cookie consent present",
            "You ask visitors for consent before setting cookies, as required by privacy laws.",
        ))

    return ScoreBreakdown(
        category="security",
        category_label="Security",
        category_description=(
            "How well your website protects visitors and their data from threats and privacy violations."
        ),
        score=min(100, sum(b.points for b in bonuses)),
        max_score=100,
        weight=SCORE_WEIGHTS["security"],
        weight_explanation=(
            "Security accounts for 15% because it affects visitor trust and is required for "
            "handling sensitive data."
        ),
        base_score=0,
        deductions=deductions,
        bonuses=bonuses,
        tips=tips,
    )


def social_breakdown(details: AuditDetails) -> ScoreBreakdown:
    social = details.social
    if social is None:
        return create_empty_breakdown(
            "social", "Social Media",
            "How well your content appears when shared on social media platforms.",
            SCORE_WEIGHTS["social"],
        )

    deductions: list[ScoreDeduction] = []
    bonuses: list[ScoreBonus] = []
    tips: list[str] = []
    og = social.open_graph

    if og.has_title:
        bonuses.append(ScoreBonus(
            15, "Social sharing title set",
            "When someone shares your page on Facebook or LinkedIn, it shows a proper title.",
        ))
    else:
        deductions.append(ScoreDeduction(
            15, "No social sharing title",
            "Without this, shared links may show incorrect or missing titles on social media.",
            "Add an og:title meta tag with an engaging title for social shares.",
        ))

    if og.has_description:
        bonuses.append(ScoreBonus(
            15, "Social sharing description set",
            "Shared links show a compelling description that encourages clicks.",
        ))
    else:
        deductions.append(ScoreDeduction(
            15, "No social sharing description",
            "Shared links won't have a description, making them less appealing to click.",
            "Add an og:description meta tag with a compelling summary.",
        ))

    if og.has_image:
        bonuses.append(ScoreBonus(
            20, "Social sharing image set",
            "Your shared links show an eye-catching image, which dramatically increases engagement.",
        ))
    else:
        deductions.append(ScoreDeduction(
            20, "No social sharing image",
            "Posts without images get far fewer clicks. This is the most important social tag.",
            "Add an og:image meta tag with a 1200x630 pixel image.",
        ))

    if social.twitter.has_card:
        bonuses.append(ScoreBonus(
            15, "Twitter Card configured",
            "Your links display beautifully when shared on Twitter/X.",
        ))
    else:
        tips.append("Add Twitter Card meta tags to improve how your links appear on Twitter/X.")

    count = len(social.profiles)
    if count > 0:
        plural = "s" if count > 1 else ""
        bonuses.append(ScoreBonus(
            min(35, count * 7), f"{count} social profiles linked",
            f"You're connected to {count} social platform{plural}, helping visitors find and follow you.",
        ))
    else:
        tips.append("Add links to your social media profiles to help visitors connect with you.")

    return ScoreBreakdown(
        category="social",
        category_label="Social Media",
        category_description=(
            "How well your content appears and performs when shared on social media platforms "
            "like Facebook, Twitter, and LinkedIn."
        ),
        score=min(100, sum(b.points for b in bonuses)),
        max_score=100,
        weight=SCORE_WEIGHTS["social"],
        weight_explanation=(
            "Social accounts for 10% because social sharing can significantly increase your "
            "reach and traffic."
        ),
        base_score=0,
        deductions=deductions,
        bonuses=bonuses,
        tips=tips,
    )


def local_presence_breakdown(details: AuditDetails) -> ScoreBreakdown:
    presence = details.local_presence
    local = details.local
    if presence is None and local is None:
        return create_empty_breakdown(
            "localPresence", "Local Presence",
            "How well your business appears in local searches and directories.",
            SCORE_WEIGHTS["localPresence"],
        )

    deductions: list[ScoreDeduction] = []
    bonuses: list[ScoreBonus] = []
    tips: list[str] = []

    if presence is not None:
        if presence.google_business_profile.exists:
            bonuses.append(ScoreBonus(
                25, "Google Business Profile linked",
                "Your Google Business listing is connected, helping you appear in local searches and Google Maps.",
            ))
        else:
            deductions.append(ScoreDeduction(
                25, "No Google Business Profile found",
                "You're missing the most important local listing. This is free and crucial for "
                "appearing in local searches.",
                "Claim your business at business.google.com and link to it from your website.",
            ))

        if presence.google_maps.listed:
            bonuses.append(ScoreBonus(15, "Google Maps presence", "Visitors can find your location on Google Maps."))

        if presence.nap_consistency.consistent:
            bonuses.append(ScoreBonus(
                20, "Consistent business information",
                "Your name, address, and phone number are consistent across your site.",
            ))
        else:
            deductions.append(ScoreDeduction(
                20, "Inconsistent business information",
                "Your business name, address, or phone number varies across your site, which "
                "confuses search engines.",
                "Ensure your NAP (Name, Address, Phone) is exactly the same everywhere it appears.",
            ))

        listed = sum(1 for d in presence.directories if d.listed)
        if listed > 0:
            bonuses.append(ScoreBonus(
                min(20, listed * 4), f"Listed in {listed} directories",
                "You're listed in business directories, which helps with local SEO.",
            ))
        else:
            tips.append("Get listed on Yelp, Yellow Pages, and other directories to improve local visibility.")

        if presence.phones:
            bonuses.append(ScoreBonus(10, "Phone number displayed", "Visitors can easily find your phone number to contact you."))
        if presence.addresses:
            bonuses.append(ScoreBonus(
                10, "Address displayed",
                "Your physical location is visible, building trust with local customers.",
            ))
    else:
        if local.phones:
            bonuses.append(ScoreBonus(30, "Phone number found", "Contact information is available."))
        if local.addresses:
            bonuses.append(ScoreBonus(40, "Address found", "Physical location is displayed."))

    return ScoreBreakdown(
        category="localPresence",
        category_label="Local Presence",
        category_description="How visible your business is in local searches, maps, and business directories.",
        score=min(100, sum(b.points for b in bonuses)),
        max_score=100,
        weight=SCORE_WEIGHTS["localPresence"],
        weight_explanation=(
            "Local Presence accounts for 5% and is especially important for businesses serving local customers."
        ),
        base_score=0,
        deductions=deductions,
        bonuses=bonuses,
        tips=tips,
    )


def reviews_breakdown(details: AuditDetails) -> ScoreBreakdown:
    reviews = details.reviews
    if reviews is None:
        return create_empty_breakdown(
            "reviews", "Reviews & Reputation",
            "How well you showcase customer reviews and testimonials.",
            SCORE_WEIGHTS["reviews"],
        )

    deductions: list[ScoreDeduction] = []
    bonuses: list[ScoreBonus] = []
    tips: list[str] = []

    linked = sum(1 for p in reviews.platforms if p.url is not None)
    if linked > 0:
        plural = "s" if linked > 1 else ""
        bonuses.append(ScoreBonus(
            min(40, linked * 10), f"{linked} review platform{plural} linked",
            "You're connected to review platforms where customers can leave feedback.",
        ))
    else:
        deductions.append(ScoreDeduction(
            40, "No review platforms linked",
            "Visitors can't easily find or leave reviews, which reduces trust.",
            "Add links to your Google, Yelp, or Facebook review pages.",
        ))

    if reviews.website_shows_reviews:
        bonuses.append(ScoreBonus(
            25, "Reviews displayed on site",
            "Showing reviews builds trust and can increase conversions by up to 270%.",
        ))
    else:
        tips.append("Display customer reviews or testimonials on your website to build trust.")

    if reviews.testimonial_page:
        bonuses.append(ScoreBonus(15, "Testimonials page found", "You have a dedicated page for customer testimonials."))

    rating = reviews.overall.average_rating
    if rating > 0:
        bonuses.append(ScoreBonus(
            min(20, rating * 4), f"{rating:.1f} star average rating",
            f"Your reviews show a {rating:.1f}/5 rating.",
        ))

    tips.append(
        "Encourage satisfied customers to leave reviews - 88% of people trust online reviews "
        "as much as personal recommendations."
    )

    return ScoreBreakdown(
        category="reviews",
        category_label="Reviews & Reputation",
        category_description="How well you collect and display customer reviews and testimonials to build trust.",
        score=min(100, sum(b.points for b in bonuses)),
        max_score=100,
        weight=SCORE_WEIGHTS["reviews"],
        weight_explanation="Reviews account for 5% because social proof significantly influences buying decisions.",
        base_score=0,
        deductions=deductions,
        bonuses=bonuses,
        tips=tips,
    )


OVERALL_EXPLANATION = (
    "Your overall score is calculated by combining all category scores. Performance (25%), "
    "SEO (20%), Security (15%), Accessibility (15%), Social (10%), Local Presence (5%), and "
    "Reviews (5%) are weighted based on their impact on your online success."
)


def detailed_scores(details: AuditDetails, scores: AuditScores) -> DetailedScores:
    return DetailedScores(
        overall=scores.overall or 0,
        overall_explanation=OVERALL_EXPLANATION,
        breakdown=[
            performance_breakdown(details),
            seo_breakdown(details),
            accessibility_breakdown(details),
            security_breakdown(details),
            social_breakdown(details),
            local_presence_breakdown(details),
            reviews_breakdown(details),
        ],
    )
