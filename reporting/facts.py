"""
Facts extractor: a judgment-free projection of analyzer findings.

No thresholds and no scores live here, only observed values. Every field
falls back to an empty value when its analyzer was off or failed.
"""
from __future__ import annotations

from models import (
    AuditDetails,
    AuditFacts,
    ContentFacts,
    MobileInfo,
    OpenGraphData,
    PresenceFacts,
    SiteFacts,
    SpeedFacts,
    TwitterCardData,
)


def extract_facts(details: AuditDetails, url: str) -> AuditFacts:
    return AuditFacts(
        site=extract_site_facts(details, url),
        speed=extract_speed_facts(details),
        content=extract_content_facts(details),
        presence=extract_presence_facts(details),
    )


def extract_site_facts(details: AuditDetails, url: str) -> SiteFacts:
    tech = details.tech
    if tech is None:
        facts = SiteFacts(url=url)
        security = analytics = None
    else:
        security, analytics = tech.security, tech.analytics
        facts = SiteFacts(
            url=url,
            cms=tech.cms,
            server=tech.server,
            is_https=security.is_https,
            has_hsts=security.has_hsts,
            mixed_content=security.mixed_content,
            technologies=list(tech.technologies),
            cdns=list(tech.cdns),
            security_headers=list(security.security_headers),
        )

    gdpr = security.gdpr_compliance if security else None
    facts.gdpr_compliance = {
        "has_privacy_policy": bool(gdpr and gdpr.has_privacy_policy),
        "has_cookie_banner":  bool(gdpr and gdpr.has_cookie_banner),
        "has_cookie_policy":  bool(gdpr and gdpr.has_cookie_policy),
    }

    facts.analytics = {
        "google_analytics":   bool(analytics and analytics.google_analytics),
        "google_analytics4":  bool(analytics and analytics.google_analytics4),
        "google_tag_manager": bool(analytics and analytics.google_tag_manager),
        "facebook_pixel":     bool(analytics and analytics.facebook_pixel),
        "hotjar":             bool(analytics and analytics.hotjar),
        "other_trackers":     list(analytics.other_trackers) if analytics else [],
    }

    ads = details.advertising
    facts.advertising = {
        "google_ads":   bool(ads and ads.paid_search.google_ads),
        "bing_ads":     bool(ads and ads.paid_search.bing_ads),
        "facebook_ads": bool(ads and ads.social_ads.facebook_ads),
        "linkedin_ads": bool(ads and ads.social_ads.linkedin_ads),
        "retargeting":  list(ads.retargeting.other_pixels) if ads else [],
    }

    shop = details.ecommerce
    facts.ecommerce = {
        "detected":            bool(shop and shop.has_ecommerce),
        "platform":            (shop.platform.name or None) if shop else None,
        "payment_processors":  [p.name for p in shop.payment_processors] if shop else [],
        "has_cart":            bool(shop and shop.cart_functionality),
        "has_product_schema":  bool(shop and shop.product_schema),
    }
    return facts


def extract_speed_facts(details: AuditDetails) -> SpeedFacts:
    fundamentals = details.fundamentals
    if fundamentals is None:
        return SpeedFacts()

    metrics = fundamentals.metrics
    mobile = fundamentals.mobile
    return SpeedFacts(
        lcp=metrics.lcp,
        cls=metrics.cls,
        fcp=metrics.fcp,
        tbt=metrics.tbt,
        ttfb=metrics.ttfb,
        si=metrics.si,
        tti=metrics.tti,
        lighthouse_score=fundamentals.scores.performance,
        mobile=MobileInfo(
            is_mobile_friendly=mobile.is_mobile_friendly,
            viewport_configured=mobile.viewport_configured,
            font_size_ok=mobile.font_size_ok,
            tap_targets_ok=mobile.tap_targets_ok,
        ),
        opportunities=list(fundamentals.opportunities),
        diagnostics=fundamentals.diagnostics,
    )


def extract_content_facts(details: AuditDetails) -> ContentFacts:
    seo = details.seo
    if seo is None:
        return ContentFacts(
            images={"total": 0, "missing_alt": 0, "list": [], "oversized": []},
            links={"internal": 0, "external": 0, "broken": [], "nofollow": 0},
            sitemap={"exists": False, "url": None, "url_count": None},
            robots={"exists": False, "allows_indexing": False, "sitemap_urls": []},
        )

    meta, headings, content = seo.meta, seo.headings, seo.content
    return ContentFacts(
        title=meta.title or None,
        title_length=meta.title_length,
        description=meta.description or None,
        description_length=meta.description_length,
        canonical=meta.canonical or None,
        language=meta.language or None,
        h1_count=headings.h1_count,
        heading_structure=list(headings.structure),
        word_count=content.word_count,
        reading_ease=content.reading_ease,
        reading_level=content.reading_level,
        paragraph_count=content.paragraph_count,
        avg_sentence_length=content.avg_sentence_length,
        images={
            "total": seo.images.total,
            "missing_alt": seo.images.missing_alt,
            "list": [{"src": img.src, "alt": img.alt} for img in seo.images.images],
            "oversized": list(seo.images.oversized_images),
        },
        links={
            "internal": len(seo.links.internal),
            "external": len(seo.links.external),
            "broken": list(seo.links.broken),
            "nofollow": len(seo.links.nofollow),
        },
        sitemap={
            "exists": seo.sitemap.exists,
            "url": seo.sitemap.url,
            "url_count": seo.sitemap.url_count,
        },
        robots={
            "exists": seo.robots.exists,
            "allows_indexing": seo.robots.allows_indexing,
            "sitemap_urls": list(seo.robots.sitemap_urls),
        },
        structured_data=[{"type": sd.type, "is_valid": sd.is_valid} for sd in seo.structured_data],
        spelling_errors=list(content.spelling_errors),
    )


def _nap(item) -> dict:
    if item is None:
        return {"value": None, "variations": []}
    return {"value": item.value or None, "variations": list(item.variations)}


def extract_presence_facts(details: AuditDetails) -> PresenceFacts:
    presence = details.local_presence
    contact = presence or details.local
    social = details.social
    reviews = details.reviews

    gbp = presence.google_business_profile if presence else None
    nap = presence.nap_consistency if presence else None

    return PresenceFacts(
        business_name=presence.business_name if presence else None,
        phones=list(contact.phones) if contact else [],
        addresses=list(contact.addresses) if contact else [],
        emails=list(contact.emails) if contact else [],
        google_business={
            "exists": bool(gbp and gbp.exists),
            "url": gbp.url if gbp else None,
            "verified": gbp.verified if gbp else None,
            "rating": gbp.rating if gbp else None,
            "review_count": gbp.review_count if gbp else None,
            "category": gbp.category if gbp else None,
        },
        google_maps={"listed": bool(presence and presence.google_maps.listed)},
        directories=[
            {"name": d.name, "listed": d.listed, "url": d.url}
            for d in (presence.directories if presence else [])
        ],
        nap_consistency={
            "name": _nap(nap.name if nap else None),
            "address": _nap(nap.address if nap else None),
            "phone": _nap(nap.phone if nap else None),
        },
        open_graph=social.open_graph.data if social else OpenGraphData(),
        twitter_card=social.twitter.data if social else TwitterCardData(),
        social_profiles=dict(social.profiles) if social else {},
        reviews={
            "average_rating": reviews.overall.average_rating if reviews else 0,
            "total_count": reviews.overall.total_reviews if reviews else 0,
            "recent_count": reviews.overall.recent_reviews if reviews else 0,
            "platforms": [
                {"name": p.name, "url": p.url, "rating": p.rating, "count": p.review_count}
                for p in (reviews.platforms if reviews else [])
            ],
        },
        website_shows_reviews=bool(reviews and reviews.website_shows_reviews),
        testimonial_page=reviews.testimonial_page if reviews else None,
    )
