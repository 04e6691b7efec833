"""
Legacy report summary: issue roll-up, strengths, improvement list and the
seven-category detailed score breakdown.
"""
from __future__ import annotations

from analyzers.templates import count_by_severity, sort_issues_by_severity
from models import (
    AuditDetails,
    AuditIssue,
    AuditScores,
    ImprovementSuggestion,
    ReportSummary,
    Severity,
)
from scoring.legacy import detailed_scores


MAX_TOP_ISSUES = 10
MAX_STRENGTHS = 8
MAX_IMPROVEMENTS = 10


def collect_all_issues(details: AuditDetails) -> list[AuditIssue]:
    issues: list[AuditIssue] = []

    if details.fundamentals:
        issues.extend(details.fundamentals.issues)
    if details.seo:
        issues.extend(details.seo.issues)
    if details.social:
        issues.extend(details.social.issues)
    if details.tech:
        issues.extend(details.tech.issues)
        issues.extend(details.tech.security.issues)
    if details.advertising:
        issues.extend(details.advertising.issues)
    if details.ecommerce:
        issues.extend(details.ecommerce.issues)
    if details.accessibility:
        issues.extend(details.accessibility.issues)
    if details.local_presence:
        issues.extend(details.local_presence.issues)
    if details.reviews:
        issues.extend(details.reviews.issues)

    issues.extend(details.scanner_issues)
    return issues


def identify_strengths(details: AuditDetails, scores: AuditScores) -> list[str]:
    strengths: list[str] = []
    tech, seo, social = details.tech, details.seo, details.social

    if (scores.performance or 0) >= 90:
        strengths.append("Excellent page performance and load times")
    if (scores.accessibility or 0) >= 90:
        strengths.append("Strong accessibility compliance")
    if (scores.seo or 0) >= 90:
        strengths.append("Well-optimized for search engines")
    if (scores.social or 0) >= 90:
        strengths.append("Complete social media presence and sharing optimization")

    if tech and tech.security.is_https:
        strengths.append("Site secured with HTTPS encryption")
    if tech and (tech.analytics.google_analytics or tech.analytics.google_analytics4):
        strengths.append("Analytics tracking properly configured")

    if seo:
        if seo.sitemap.exists:
            strengths.append("XML sitemap in place for search engine crawling")
        if seo.robots.exists:
            strengths.append("Robots.txt properly configured")
        if seo.meta.title_length_ok:
            strengths.append("Title tag optimized for search")
        if seo.meta.description_length_ok:
            strengths.append("Meta description well-crafted")
        if seo.headings.h1_count == 1:
            strengths.append("Proper heading hierarchy with single H1")
    if not (seo and seo.content.is_thin_content):
        strengths.append("Adequate content depth for SEO")

    profiles = list(social.profiles) if social else []
    if len(profiles) >= 3:
        strengths.append(f"Active on {len(profiles)} social platforms: {', '.join(profiles)}")
    if social and social.open_graph.is_complete:
        strengths.append("Open Graph tags fully configured for social sharing")

    if tech and tech.security.gdpr_compliance.has_cookie_banner:
        strengths.append("Cookie consent mechanism in place")
    if tech and tech.security.gdpr_compliance.has_privacy_policy:
        strengths.append("Privacy policy present")

    return strengths[:MAX_STRENGTHS]


def improvement_suggestions(
    details: AuditDetails,
    scores: AuditScores,
    issues: list[AuditIssue],
) -> list[ImprovementSuggestion]:
    out: list[ImprovementSuggestion] = []
    tech, seo, social = details.tech, details.seo, details.social
    analytics = tech.analytics if tech else None
    performance = scores.performance or 0

    if performance < 50:
        out.append(ImprovementSuggestion(
            "Performance", "Improve Page Load Speed",
            "Your page performance score is below 50. Focus on optimizing images, reducing "
            "JavaScript, and enabling caching to improve user experience and SEO rankings.",
            "high", "high", 1,
        ))
    elif performance < 75:
        out.append(ImprovementSuggestion(
            "Performance", "Optimize Core Web Vitals",
            "Your performance score is moderate. Review the speed opportunities identified to "
            "boost your Core Web Vitals scores.",
            "medium", "medium", 3,
        ))

    if not (tech and tech.security.is_https):
        out.append(ImprovementSuggestion(
            "Security", "Enable HTTPS",
            "Your site is not using HTTPS. Install an SSL certificate to secure user data and "
            "improve SEO rankings.",
            "high", "medium", 1,
        ))

    critical_seo = [i for i in issues if i.category == "seo" and i.severity == Severity.CRITICAL]
    if critical_seo:
        out.append(ImprovementSuggestion(
            "SEO", "Fix Critical SEO Issues",
            f"You have {len(critical_seo)} critical SEO issues including: "
            f"{', '.join(i.title for i in critical_seo)}",
            "high", "low", 2,
        ))

    if seo and seo.links.broken:
        out.append(ImprovementSuggestion(
            "SEO", "Fix Broken Links",
            f"Found {len(seo.links.broken)} broken links on your site. These hurt user experience "
            "and waste crawl budget. Update or remove broken links.",
            "medium", "low", 4,
        ))

    if (scores.accessibility or 0) < 70:
        out.append(ImprovementSuggestion(
            "Accessibility", "Improve Accessibility Compliance",
            "Your accessibility score indicates significant issues. Focus on WCAG Level A "
            "violations first, then address Level AA issues.",
            "high", "high", 2,
        ))

    if not (social and social.open_graph.is_complete):
        out.append(ImprovementSuggestion(
            "Social", "Complete Open Graph Setup",
            "Your Open Graph tags are incomplete. Add og:title, og:description, and og:image to "
            "improve how your content appears when shared on social media.",
            "medium", "low", 5,
        ))

    if not (analytics and (analytics.google_analytics or analytics.google_analytics4)):
        out.append(ImprovementSuggestion(
            "Marketing", "Install Analytics Tracking",
            "No analytics tracking detected. Install Google Analytics 4 to measure traffic, user "
            "behavior, and marketing effectiveness.",
            "high", "low", 3,
        ))

    if seo and seo.content.is_thin_content:
        out.append(ImprovementSuggestion(
            "Content", "Add More Content",
            f"Your page has only {seo.content.word_count} words. Add more substantive content "
            "(target 500+ words) to improve SEO and provide value to visitors.",
            "medium", "medium", 4,
        ))

    if seo and seo.content.reading_ease and seo.content.reading_ease < 50:
        out.append(ImprovementSuggestion(
            "Content", "Improve Content Readability",
            "Your content is difficult to read. Use shorter sentences, simpler words, and break "
            "up long paragraphs to improve engagement.",
            "medium", "medium", 6,
        ))

    if seo and seo.images.missing_alt > 0:
        out.append(ImprovementSuggestion(
            "Accessibility", "Add Alt Text to Images",
            f"{seo.images.missing_alt} images are missing alt text. Add descriptive alt text to "
            "improve accessibility and image SEO.",
            "medium", "low", 5,
        ))

    if not (seo and seo.sitemap.exists):
        out.append(ImprovementSuggestion(
            "SEO", "Create XML Sitemap",
            "No XML sitemap found. Create and submit a sitemap to help search engines discover "
            "and index your pages more efficiently.",
            "medium", "low", 5,
        ))

    has_banner = bool(tech and tech.security.gdpr_compliance.has_cookie_banner)
    tracks = bool(analytics and (analytics.google_analytics or analytics.facebook_pixel))
    if not has_banner and tracks:
        out.append(ImprovementSuggestion(
            "Compliance", "Add Cookie Consent Banner",
            "You use tracking cookies but have no cookie consent mechanism. Implement a cookie "
            "banner to comply with GDPR and CCPA regulations.",
            "high", "medium", 3,
        ))

    out.sort(key=lambda s: s.priority)
    return out


def generate_summary(details: AuditDetails, scores: AuditScores) -> ReportSummary:
    issues = collect_all_issues(details)
    counts = count_by_severity(issues)

    return ReportSummary(
        total_issues=len(issues),
        critical_issues=counts[Severity.CRITICAL],
        warning_issues=counts[Severity.WARNING],
        top_issues=sort_issues_by_severity(issues)[:MAX_TOP_ISSUES],
        strengths=identify_strengths(details, scores),
        improvements=improvement_suggestions(details, scores, issues)[:MAX_IMPROVEMENTS],
        detailed_scores=detailed_scores(details, scores),
    )
