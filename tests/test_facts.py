"""
Tests for the facts extractor
"""
from models import (
    AuditDetails,
    FundamentalsData,
    LighthouseScores,
    LocalData,
    LocalPresenceData,
    OpenGraphData,
    OpenGraphInfo,
    ReviewPlatform,
    ReviewsData,
    ReviewsOverall,
    SeoData,
    SocialData,
    TechData,
    TechnologyItem,
)
from reporting.facts import extract_facts


URL = "https://acme.test/"


class TestEmptyAudit:
    def test_everything_falls_back(self):
        facts = extract_facts(AuditDetails(), URL)

        assert facts.site.url == URL
        assert facts.site.cms is None
        assert facts.site.gdpr_compliance == {
            "has_privacy_policy": False, "has_cookie_banner": False, "has_cookie_policy": False,
        }
        assert facts.site.ecommerce["payment_processors"] == []
        assert facts.speed.lcp is None
        assert facts.speed.lighthouse_score is None
        assert facts.content.title is None
        assert facts.content.images["total"] == 0
        assert facts.presence.phones == []
        assert facts.presence.google_business["exists"] is False
        assert facts.presence.reviews["average_rating"] == 0


class TestSiteFacts:
    def test_tech_projection(self):
        tech = TechData(
            cms="WordPress",
            server="nginx",
            cdns=["Cloudflare"],
            technologies=[TechnologyItem("WordPress", "CMS")],
        )
        tech.security.is_https = True
        tech.analytics.google_analytics4 = True
        facts = extract_facts(AuditDetails(tech=tech), URL)

        assert facts.site.cms == "WordPress"
        assert facts.site.server == "nginx"
        assert facts.site.is_https is True
        assert facts.site.cdns == ["Cloudflare"]
        assert facts.site.analytics["google_analytics4"] is True


class TestSpeedFacts:
    def test_metrics_copied(self):
        fundamentals = FundamentalsData(scores=LighthouseScores(performance=72))
        fundamentals.metrics.lcp = 2100
        fundamentals.metrics.cls = 0.02
        fundamentals.mobile.viewport_configured = True
        facts = extract_facts(AuditDetails(fundamentals=fundamentals), URL)

        assert facts.speed.lcp == 2100
        assert facts.speed.cls == 0.02
        assert facts.speed.lighthouse_score == 72
        assert facts.speed.mobile.viewport_configured is True


class TestContentFacts:
    def test_blank_strings_become_none(self):
        seo = SeoData()
        seo.meta.title = ""
        seo.meta.description = "Plumbing in Springfield"
        seo.links.internal = ["https://acme.test/a", "https://acme.test/b"]
        facts = extract_facts(AuditDetails(seo=seo), URL)

        assert facts.content.title is None
        assert facts.content.description == "Plumbing in Springfield"
        assert facts.content.links["internal"] == 2


class TestPresenceFacts:
    def test_contact_falls_back_to_local(self):
        local = LocalData(phones=["555-123-4567"], emails=["hi@acme.test"])
        facts = extract_facts(AuditDetails(local=local), URL)

        assert facts.presence.phones == ["555-123-4567"]
        assert facts.presence.emails == ["hi@acme.test"]
        assert facts.presence.business_name is None

    def test_presence_takes_precedence(self):
        presence = LocalPresenceData(business_name="Acme", phones=["(555) 987-6543"])
        local = LocalData(phones=["555-123-4567"])
        facts = extract_facts(AuditDetails(local=local, local_presence=presence), URL)

        assert facts.presence.business_name == "Acme"
        assert facts.presence.phones == ["(555) 987-6543"]

    def test_social_and_reviews(self):
        social = SocialData(
            open_graph=OpenGraphInfo(data=OpenGraphData(title="Acme")),
            profiles={"facebook": "https://facebook.com/acme"},
        )
        reviews = ReviewsData(
            overall=ReviewsOverall(average_rating=4.7, total_reviews=12),
            platforms=[ReviewPlatform("Yelp", url="https://www.yelp.com/biz/acme")],
            website_shows_reviews=True,
        )
        facts = extract_facts(AuditDetails(social=social, reviews=reviews), URL)

        assert facts.presence.open_graph.title == "Acme"
        assert facts.presence.social_profiles == {"facebook": "https://facebook.com/acme"}
        assert facts.presence.reviews["total_count"] == 12
        assert facts.presence.reviews["platforms"][0]["name"] == "Yelp"
        assert facts.presence.website_shows_reviews is True
