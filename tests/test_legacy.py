"""
Tests for the legacy nine-category scorer and its breakdowns
"""
import pytest

from models import (
    AuditDetails,
    AuditScores,
    BrokenLink,
    FundamentalsData,
    GdprCompliance,
    LighthouseScores,
    LocalData,
    LocalPresenceData,
    MetaData,
    OpenGraphInfo,
    ReviewPlatform,
    ReviewsData,
    ReviewsOverall,
    SecurityData,
    SecurityHeader,
    SeoData,
    SitemapInfo,
    SocialData,
    TechData,
    TwitterInfo,
)
from scoring.legacy import (
    calculate_category_scores,
    calculate_overall_score,
    detailed_scores,
    local_presence_score,
    performance_breakdown,
    reviews_score,
    score_audit,
    security_breakdown,
    security_score,
    seo_breakdown,
    seo_score,
    social_score,
)


def _good_social():
    return SocialData(
        open_graph=OpenGraphInfo(has_title=True, has_description=True, has_image=True, is_complete=True),
        twitter=TwitterInfo(has_card=True),
        profiles={"facebook": "https://facebook.com/acme", "instagram": "https://instagram.com/acme"},
    )


def _secure_tech():
    headers = [
        SecurityHeader("Strict-Transport-Security", True),
        SecurityHeader("X-Frame-Options", True),
        SecurityHeader("Referrer-Policy", True),
        SecurityHeader("Content-Security-Policy", False),
    ]
    return TechData(security=SecurityData(
        is_https=True,
        has_hsts=True,
        mixed_content=False,
        security_headers=headers,
        gdpr_compliance=GdprCompliance(has_privacy_policy=True),
    ))


class TestSeoScore:
    def test_empty_page_deductions(self):
        # title 15, description 10, h1 10, sitemap 5, robots 3
        details = AuditDetails(seo=SeoData())
        assert seo_score(details) == 57

    def test_broken_links_capped_at_15(self):
        seo = SeoData()
        seo.links.broken = [BrokenLink(f"https://x.test/{i}", 404, "Not Found", "https://x.test") for i in range(10)]
        assert seo_score(AuditDetails(seo=seo)) == 57 - 15

    def test_deductions_stack(self):
        seo = SeoData()
        seo.images.missing_alt = 50
        seo.headings.structure_ok = False
        seo.content.is_thin_content = True
        seo.links.broken = [BrokenLink("https://x.test/a", 500, "Server Error", "https://x.test")] * 10
        assert seo_score(AuditDetails(seo=seo)) == 17

    def test_disabled_scores_zero(self):
        assert seo_score(AuditDetails()) == 0


class TestBonusScores:
    def test_social(self):
        assert social_score(AuditDetails(social=_good_social())) == 79

    def test_security(self):
        # https 40, hsts 10, no mixed content 10, three headers 12, privacy 10
        assert security_score(AuditDetails(tech=_secure_tech())) == 82

    def test_local_presence_prefers_presence_data(self):
        presence = LocalPresenceData(phones=["(555) 123-4567"], addresses=["1 Main St"])
        presence.google_business_profile.exists = True
        assert local_presence_score(AuditDetails(local_presence=presence)) == 45

    def test_local_presence_falls_back_to_contact_data(self):
        local = LocalData(phones=["555-123-4567"], emails=["hi@acme.test"])
        assert local_presence_score(AuditDetails(local=local)) == 60

    def test_reviews(self):
        reviews = ReviewsData(
            overall=ReviewsOverall(average_rating=4.5),
            platforms=[ReviewPlatform("Google", url="https://g.page/acme"), ReviewPlatform("Yelp")],
            website_shows_reviews=True,
        )
        # one linked platform 10, shown 25, rating 18
        assert reviews_score(AuditDetails(reviews=reviews)) == 53

    def test_fractional_rating_bonus_is_kept(self):
        reviews = ReviewsData(
            overall=ReviewsOverall(average_rating=4.3),
            platforms=[ReviewPlatform("Google", url="https://g.page/acme")],
            website_shows_reviews=True,
        )
        details = AuditDetails(reviews=reviews)

        assert reviews_score(details) == pytest.approx(52.2)
        assert calculate_category_scores(details).reviews == pytest.approx(52.2)


class TestOverallScore:
    def test_disabled_categories_are_none(self):
        scores = calculate_category_scores(AuditDetails())

        assert scores.performance is None
        assert scores.seo is None
        assert scores.security is None
        assert calculate_overall_score(scores) == 0

    def test_renormalises_over_present_categories(self):
        scores = score_audit(AuditDetails(seo=SeoData()))
        assert scores.seo == 57
        assert scores.overall == 57

    def test_weighted_average(self):
        scores = AuditScores(performance=100, seo=0)
        # 0.25 * 100 / (0.25 + 0.20)
        assert calculate_overall_score(scores) == 56

    def test_lighthouse_categories_from_fundamentals(self):
        fundamentals = FundamentalsData(scores=LighthouseScores(performance=88, accessibility=71))
        scores = calculate_category_scores(AuditDetails(fundamentals=fundamentals))
        assert scores.performance == 88
        assert scores.accessibility == 71


class TestBreakdowns:
    def test_seo_breakdown_matches_score(self):
        seo = SeoData(
            meta=MetaData(title="Acme Plumbing", title_length=13, description="Fix pipes"),
            sitemap=SitemapInfo(exists=True),
        )
        details = AuditDetails(seo=seo)
        bd = seo_breakdown(details)

        assert bd.score == seo_score(details)
        assert bd.base_score == 100
        reasons = [d.reason for d in bd.deductions]
        assert "Title length not optimal (13 characters)" in reasons
        assert "Sitemap present" in [b.reason for b in bd.bonuses]

    def test_security_breakdown_matches_score(self):
        details = AuditDetails(tech=_secure_tech())
        bd = security_breakdown(details)

        assert bd.score == security_score(details)
        assert bd.tips == ["Consider adding these security headers: Content-Security-Policy"]

    def test_security_breakdown_without_https(self):
        bd = security_breakdown(AuditDetails(tech=TechData()))
        assert bd.deductions[0].reason == "No HTTPS encryption"
        assert bd.deductions[0].points == 40

    def test_empty_breakdown_when_disabled(self):
        bd = security_breakdown(AuditDetails())
        assert bd.score == 0
        assert bd.tips == ["No data available for this category."]

    def test_performance_breakdown_carries_core_web_vitals(self):
        fundamentals = FundamentalsData(scores=LighthouseScores(performance=45))
        fundamentals.metrics.lcp = 5000
        bd = performance_breakdown(AuditDetails(fundamentals=fundamentals))

        assert bd.score == 45
        assert bd.core_web_vitals is not None
        assert bd.core_web_vitals.lcp.display_value == "5.0s"
        assert len(bd.tips) == 2

    def test_detailed_scores_has_seven_breakdowns(self):
        details = AuditDetails(seo=SeoData())
        detailed = detailed_scores(details, score_audit(details))

        assert [b.category for b in detailed.breakdown] == [
            "performance", "seo", "accessibility", "security", "social", "localPresence", "reviews",
        ]
        assert detailed.overall == 57
