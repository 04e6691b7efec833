"""
Issue registry: fixed templates keyed by issue id.

Analyzers call create_issue("missing_title") and get a fully populated
AuditIssue; keyword overrides replace individual template fields.
"""
from __future__ import annotations

from typing import Optional

from models import AuditIssue, Severity


def _t(title, description, severity, category, recommendation, impact, effort, learn_more_url=None) -> dict:
    return {
        "title": title,
        "description": description,
        "severity": severity,
        "category": category,
        "recommendation": recommendation,
        "learn_more_url": learn_more_url,
        "impact": impact,
        "effort": effort,
    }


ISSUE_TEMPLATES: dict[str, dict] = {
    # ── SEO / content ─────────────────────────────────────────────────────────
    "missing_title": _t(
        "Missing Page Title",
        "The page does not have a title tag defined.",
        Severity.CRITICAL, "seo",
        "Add a unique, descriptive title tag between 50-60 characters. Include your primary keyword "
        "near the beginning. Format: 'Primary Keyword - Secondary Keyword | Brand Name'",
        "Title tags are the most important on-page SEO element and directly impact search rankings "
        "and click-through rates.",
        "low",
        "https://moz.com/learn/seo/title-tag",
    ),
    "title_too_short": _t(
        "Title Tag Too Short",
        "The title tag is shorter than the recommended 50 characters.",
        Severity.WARNING, "seo",
        "Expand your title to 50-60 characters. Include relevant keywords and make it compelling for "
        "users to click. Consider adding your brand name at the end.",
        "Short titles may not fully convey your page content and miss keyword opportunities.",
        "low",
    ),
    "title_too_long": _t(
        "Title Tag Too Long",
        "The title tag exceeds 60 characters and will be truncated in search results.",
        Severity.WARNING, "seo",
        "Shorten your title to 60 characters or less. Put the most important keywords and information "
        "at the beginning since the end may be cut off.",
        "Truncated titles in search results look unprofessional and may hide important information.",
        "low",
    ),
    "missing_description": _t(
        "Missing Meta Description",
        "The page does not have a meta description defined.",
        Severity.CRITICAL, "seo",
        "Add a compelling meta description between 150-160 characters. Include a call-to-action and "
        "your target keyword. Make it unique for each page.",
        "Without a meta description, search engines will auto-generate one from page content, which "
        "may not be optimized for clicks.",
        "low",
        "https://moz.com/learn/seo/meta-description",
    ),
    "description_too_short": _t(
        "Meta Description Too Short",
        "The meta description is shorter than the recommended 120 characters.",
        Severity.WARNING, "seo",
        "Expand your meta description to 150-160 characters. Include a value proposition, target "
        "keyword, and clear call-to-action.",
        "Short descriptions miss the opportunity to fully sell the page content to searchers.",
        "low",
    ),
    "description_too_long": _t(
        "Meta Description Too Long",
        "The meta description exceeds 160 characters and will be truncated.",
        Severity.INFO, "seo",
        "Shorten your meta description to 160 characters. Front-load the most important information "
        "and call-to-action.",
        "Truncated descriptions may lose their call-to-action or key selling points.",
        "low",
    ),
    "missing_h1": _t(
        "Missing H1 Heading",
        "The page does not have an H1 heading tag.",
        Severity.CRITICAL, "seo",
        "Add a single H1 heading that clearly describes the page content and includes your primary "
        "keyword. This should be the main headline visible on the page.",
        "H1 tags help search engines understand page structure and topic. Missing H1 hurts SEO and "
        "accessibility.",
        "low",
    ),
    "multiple_h1": _t(
        "Multiple H1 Headings",
        "The page has more than one H1 heading tag.",
        Severity.WARNING, "seo",
        "Use only one H1 tag per page for your main headline. Convert other H1 tags to H2 or "
        "appropriate heading levels based on content hierarchy.",
        "Multiple H1s dilute the importance signal and can confuse search engines about the main topic.",
        "low",
    ),
    "heading_hierarchy": _t(
        "Heading Hierarchy Issues",
        "Headings skip levels (e.g., H1 to H3 without H2).",
        Severity.WARNING, "seo",
        "Restructure headings to follow proper hierarchy: H1 → H2 → H3. Never skip levels. Use "
        "headings to create a logical document outline.",
        "Proper heading structure improves accessibility for screen readers and helps search engines "
        "understand content organization.",
        "medium",
    ),
    "thin_content": _t(
        "Thin Content Detected",
        "The page has less than 300 words of content.",
        Severity.WARNING, "content",
        "Expand page content to at least 500-1000 words for informational pages. Add valuable, unique "
        "content that addresses user intent. Include relevant keywords naturally.",
        "Thin content pages may not rank well and provide less value to users. Google prefers "
        "comprehensive content.",
        "high",
    ),
    "poor_readability": _t(
        "Content Difficult to Read",
        "The content has a low Flesch Reading Ease score, making it hard for many users to understand.",
        Severity.WARNING, "content",
        "Simplify your writing: use shorter sentences (15-20 words), simpler words, and active voice. "
        "Break up long paragraphs. Aim for a reading level around 8th grade.",
        "Difficult-to-read content has higher bounce rates and lower engagement.",
        "medium",
    ),
    "spelling_errors": _t(
        "Spelling Errors Detected",
        "The page contains spelling mistakes that may hurt credibility.",
        Severity.WARNING, "content",
        "Review and correct all spelling errors. Use a spell-checker tool and have content proofread "
        "before publishing. Consider using Grammarly or similar tools.",
        "Spelling errors reduce trust and professionalism. They may also hurt SEO as Google may see "
        "low-quality signals.",
        "low",
    ),
    "images_missing_alt": _t(
        "Images Missing Alt Text",
        "Some images on the page do not have alt attributes.",
        Severity.WARNING, "accessibility",
        "Add descriptive alt text to all images. Describe what the image shows in 125 characters or "
        "less. For decorative images, use alt=\"\".",
        "Missing alt text hurts accessibility (screen readers can't describe images) and loses SEO "
        "value from image search.",
        "medium",
        "https://moz.com/learn/seo/alt-text",
    ),
    "broken_links": _t(
        "Broken Links Detected",
        "Some links on the page return 404 or other error status codes.",
        Severity.CRITICAL, "seo",
        "Fix or remove all broken links. Update URLs to working destinations, set up 301 redirects for "
        "moved pages, or remove links to deleted content entirely.",
        "Broken links hurt user experience, waste crawl budget, and can negatively impact SEO rankings.",
        "medium",
    ),
    "missing_sitemap": _t(
        "No XML Sitemap Found",
        "No XML sitemap was detected at common locations.",
        Severity.WARNING, "seo",
        "Create an XML sitemap and submit it to Google Search Console and Bing Webmaster Tools. Most "
        "CMS platforms can generate this automatically.",
        "Sitemaps help search engines discover and index your pages more efficiently.",
        "medium",
        "https://developers.google.com/search/docs/crawling-indexing/sitemaps/overview",
    ),
    "missing_robots": _t(
        "No robots.txt Found",
        "No robots.txt file was found at the root of the domain.",
        Severity.INFO, "seo",
        "Create a robots.txt file to guide search engine crawlers. At minimum, include your sitemap "
        "URL. Block any pages you don't want indexed.",
        "Without robots.txt, you can't control crawler access or direct them to your sitemap.",
        "low",
    ),

    # ── Social ────────────────────────────────────────────────────────────────
    "missing_og_title": _t(
        "Missing Open Graph Title",
        "The page lacks an og:title meta tag for social sharing.",
        Severity.WARNING, "social",
        "Add an og:title meta tag with a compelling title for social shares. It can be the same as "
        "your page title or a more engaging version.",
        "Without OG tags, social platforms may display incorrect or unappealing previews when your "
        "page is shared.",
        "low",
    ),
    "missing_og_description": _t(
        "Missing Open Graph Description",
        "The page lacks an og:description meta tag for social sharing.",
        Severity.WARNING, "social",
        "Add an og:description meta tag with a compelling summary of the page content. Make it "
        "engaging and include a call-to-action.",
        "Social shares without descriptions look incomplete and get fewer clicks.",
        "low",
    ),
    "missing_og_image": _t(
        "Missing Open Graph Image",
        "The page lacks an og:image meta tag for social sharing.",
        Severity.CRITICAL, "social",
        "Add an og:image meta tag with a high-quality image (minimum 1200x630 pixels for Facebook). "
        "Use branded images that stand out in social feeds.",
        "Posts without images get significantly less engagement. Visual content is crucial for social "
        "sharing.",
        "medium",
    ),
    "missing_twitter_card": _t(
        "Missing Twitter Card",
        "The page lacks Twitter Card meta tags.",
        Severity.WARNING, "social",
        "Add Twitter Card meta tags: twitter:card, twitter:title, twitter:description, and "
        "twitter:image. Use 'summary_large_image' card type for maximum impact.",
        "Without Twitter Cards, your shared links will appear as plain text URLs with no preview.",
        "low",
        "https://developer.twitter.com/en/docs/twitter-for-websites/cards/overview/abouts-cards",
    ),
    "no_social_profiles": _t(
        "No Social Profile Links Found",
        "The website does not link to any social media profiles.",
        Severity.INFO, "social",
        "Add links to your active social media profiles in the header, footer, or contact page. "
        "Include schema.org markup for social profiles.",
        "Social links help users connect with your brand across platforms and can contribute to local "
        "SEO signals.",
        "low",
    ),

    # ── Security ──────────────────────────────────────────────────────────────
    "not_https": _t(
        "Site Not Using HTTPS",
        "The website is not served over a secure HTTPS connection.",
        Severity.CRITICAL, "security",
        "Install an SSL certificate and redirect all HTTP traffic to HTTPS. Most hosting providers "
        "offer free SSL via Let's Encrypt. Update all internal links to use HTTPS.",
        "HTTPS is a confirmed ranking factor. Without it, browsers show security warnings, hurting "
        "trust and conversions.",
        "medium",
        "https://web.dev/why-https-matters/",
    ),
    "mixed_content": _t(
        "Mixed Content Detected",
        "The HTTPS page loads some resources over insecure HTTP.",
        Severity.WARNING, "security",
        "Update all resource URLs (images, scripts, stylesheets) to use HTTPS. Check embedded content "
        "and third-party resources.",
        "Mixed content triggers browser warnings and can block some resources from loading.",
        "medium",
    ),
    "missing_security_headers": _t(
        "Missing Security Headers",
        "Important security headers are not configured.",
        Severity.WARNING, "security",
        "Configure security headers: X-Content-Type-Options, X-Frame-Options, Content-Security-Policy, "
        "and Strict-Transport-Security (HSTS).",
        "Missing headers leave your site vulnerable to clickjacking, XSS, and other attacks.",
        "medium",
        "https://owasp.org/www-project-secure-headers/",
    ),
    "no_privacy_policy": _t(
        "No Privacy Policy Found",
        "The website does not appear to have a privacy policy page.",
        Severity.CRITICAL, "security",
        "Create a privacy policy page that explains how you collect, use, and protect user data. This "
        "is legally required in most jurisdictions if you collect any user data.",
        "Missing privacy policy can result in legal issues and hurts user trust. Required for GDPR, "
        "CCPA compliance.",
        "medium",
    ),
    "no_cookie_banner": _t(
        "No Cookie Consent Banner",
        "No cookie consent mechanism was detected.",
        Severity.WARNING, "security",
        "Implement a cookie consent banner that allows users to accept or reject non-essential "
        "cookies. Use tools like Cookiebot, OneTrust, or a custom solution.",
        "Cookie consent is required by GDPR for EU visitors and CCPA for California residents.",
        "medium",
    ),

    # ── Performance ───────────────────────────────────────────────────────────
    "slow_page_load": _t(
        "Slow Page Load Time",
        "The page takes longer than 3 seconds to become interactive.",
        Severity.CRITICAL, "performance",
        "Optimize images (use WebP format, lazy loading), minify CSS/JS, enable browser caching, use a "
        "CDN, and reduce server response time. Consider code splitting for large JavaScript bundles.",
        "53% of mobile users abandon sites that take over 3 seconds to load. Speed is a confirmed "
        "ranking factor.",
        "high",
        "https://web.dev/performance/",
    ),
    "large_lcp": _t(
        "Large Contentful Paint Too Slow",
        "The largest visible content takes too long to appear (over 2.5 seconds).",
        Severity.CRITICAL, "performance",
        "Optimize your largest content element: preload hero images, use proper image formats, ensure "
        "fast server response. Consider using a CDN for static assets.",
        "LCP is a Core Web Vital. Poor scores negatively impact search rankings and user experience.",
        "high",
        "https://web.dev/lcp/",
    ),
    "high_cls": _t(
        "High Cumulative Layout Shift",
        "Page elements shift unexpectedly during loading (CLS over 0.1).",
        Severity.WARNING, "performance",
        "Set explicit width/height on images and videos, avoid inserting content above existing "
        "content, and use CSS transform for animations instead of layout-changing properties.",
        "Layout shifts are frustrating for users and CLS is a Core Web Vital affecting rankings.",
        "medium",
        "https://web.dev/cls/",
    ),
    "high_tbt": _t(
        "High Total Blocking Time",
        "JavaScript execution blocks the main thread for too long.",
        Severity.WARNING, "performance",
        "Reduce JavaScript execution time: break up long tasks, use web workers, defer non-critical "
        "scripts, remove unused code, and consider using lighter libraries.",
        "High TBT makes the page feel unresponsive. It correlates with poor First Input Delay (FID).",
        "high",
        "https://web.dev/tbt/",
    ),
    "not_mobile_friendly": _t(
        "Page Not Mobile-Friendly",
        "The page is not optimized for mobile devices.",
        Severity.CRITICAL, "performance",
        "Implement responsive design with a viewport meta tag, flexible layouts, and mobile-appropriate "
        "font sizes. Ensure touch targets are at least 48x48 pixels.",
        "Mobile-first indexing means Google primarily uses mobile version for ranking. "
        "Non-mobile-friendly sites rank poorly.",
        "high",
        "https://web.dev/responsive-web-design-basics/",
    ),

    # ── Accessibility ─────────────────────────────────────────────────────────
    "wcag_level_a_violations": _t(
        "WCAG Level A Violations",
        "Critical accessibility issues prevent some users from accessing content.",
        Severity.CRITICAL, "accessibility",
        "Fix Level A violations immediately: add alt text to images, ensure form labels, fix color "
        "contrast, enable keyboard navigation, and add skip links.",
        "Level A is the minimum accessibility standard. Violations may violate ADA/accessibility laws "
        "and exclude users.",
        "high",
        "https://www.w3.org/WAI/WCAG21/quickref/",
    ),
    "wcag_level_aa_violations": _t(
        "WCAG Level AA Violations",
        "Accessibility issues may create barriers for some users.",
        Severity.WARNING, "accessibility",
        "Address Level AA issues: improve color contrast ratios (4.5:1 for text), add captions to "
        "videos, ensure focus indicators are visible, and provide text alternatives for non-text content.",
        "Level AA is the target standard for most organizations and required for many government sites.",
        "medium",
    ),

    # ── Marketing / e-commerce ────────────────────────────────────────────────
    "no_google_analytics": _t(
        "No Analytics Tracking Detected",
        "No Google Analytics or similar tracking was found.",
        Severity.INFO, "advertising",
        "Install Google Analytics 4 to track website traffic, user behavior, and conversions. Also set "
        "up Google Search Console to monitor search performance.",
        "Without analytics, you can't measure marketing effectiveness or understand user behavior.",
        "low",
    ),
    "no_retargeting": _t(
        "No Retargeting Pixels Detected",
        "No Facebook Pixel, Google Remarketing, or similar retargeting was found.",
        Severity.INFO, "advertising",
        "Install retargeting pixels for platforms where you advertise. This allows you to show ads to "
        "past visitors who didn't convert.",
        "Retargeting typically has 2-3x higher conversion rates than standard display ads.",
        "low",
    ),
    "ecommerce_no_ssl": _t(
        "E-commerce Site Without SSL",
        "Payment pages are not secured with HTTPS.",
        Severity.CRITICAL, "ecommerce",
        "Immediately secure your checkout process with HTTPS. This is required by payment processors "
        "and essential for customer trust.",
        "Customers will not enter payment information on insecure pages. Major browsers block insecure "
        "payment forms.",
        "medium",
    ),
    "no_product_schema": _t(
        "Missing Product Schema",
        "Product pages lack structured data markup.",
        Severity.WARNING, "ecommerce",
        "Add Product schema markup (JSON-LD) with price, availability, reviews, and images. This "
        "enables rich snippets in search results.",
        "Product schema can significantly improve click-through rates with rich search result displays.",
        "medium",
        "https://developers.google.com/search/docs/data-types/product",
    ),
}


def create_issue(template_id: str, **overrides) -> AuditIssue:
    """
    Materialise an issue from its template. Unknown ids produce a bare
    warning-level SEO issue built from the overrides alone.
    """
    template = get_issue_template(template_id)
    if template is None:
        return AuditIssue(
            id=template_id,
            title=overrides.get("title") or "Unknown Issue",
            description=overrides.get("description") or "",
            severity=overrides.get("severity") or Severity.WARNING,
            category=overrides.get("category") or "seo",
            recommendation=overrides.get("recommendation"),
            impact=overrides.get("impact"),
            effort=overrides.get("effort"),
        )
    return AuditIssue(**{"id": template_id, **template, **overrides})


def get_issue_template(template_id: str) -> Optional[dict]:
    return ISSUE_TEMPLATES.get(template_id)


def categorize_issues(issues: list[AuditIssue]) -> dict[str, list[AuditIssue]]:
    out: dict[str, list[AuditIssue]] = {}
    for issue in issues:
        out.setdefault(issue.category, []).append(issue)
    return out


def sort_issues_by_severity(issues: list[AuditIssue]) -> list[AuditIssue]:
    # stable: issues of equal severity keep their collection order
    return sorted(issues, key=lambda i: Severity.ORDER.get(i.severity, len(Severity.ORDER)))


def get_top_issues(issues: list[AuditIssue], limit: int = 5) -> list[AuditIssue]:
    return sort_issues_by_severity(issues)[:limit]


def count_by_severity(issues: list[AuditIssue]) -> dict[str, int]:
    counts = {s: 0 for s in Severity.ALL}
    for issue in issues:
        counts[issue.severity] = counts.get(issue.severity, 0) + 1
    return counts
