"""
Tests for the five-category suggestion generator
"""
from models import (
    AuditDetails,
    NewAuditScores,
    OpenGraphInfo,
    ReviewsData,
    SeoData,
    SocialData,
    Suggestion,
    TechData,
)
from reporting.suggestions import generate_suggestions, partition


def _scores(performance=90):
    return NewAuditScores(overall=0, performance=performance, visibility=0, security=0,
                          accessibility=0, trust=0)


class TestGenerateSuggestions:
    def test_empty_audit(self):
        out = generate_suggestions(AuditDetails(), _scores(performance=0))

        assert [s.id for s in out.quick_wins] == ["seo-title", "trust-og-image"]
        assert [s.id for s in out.priority_fixes] == ["perf-critical", "sec-https", "sec-privacy"]
        assert [s.id for s in out.nice_to_have] == ["seo-sitemap", "trust-reviews"]

    def test_each_suggestion_lands_in_one_bucket(self):
        out = generate_suggestions(AuditDetails(), _scores(performance=0))
        ids = [s.id for s in out.all]
        assert len(ids) == len(set(ids))

    def test_fast_page_has_no_speed_suggestion(self):
        out = generate_suggestions(AuditDetails(), _scores(performance=50))
        assert "perf-critical" not in [s.id for s in out.all]

    def test_missing_alt_counts_images(self):
        seo = SeoData()
        seo.images.missing_alt = 4
        out = generate_suggestions(AuditDetails(seo=seo), _scores())

        alt = next(s for s in out.quick_wins if s.id == "seo-alt-text")
        assert alt.description.startswith("4 images are missing alt text")
        assert alt.related_fact == "content.images.missing_alt"

    def test_satisfied_rules_are_quiet(self):
        seo = SeoData()
        seo.meta.title = "Acme"
        seo.sitemap.exists = True
        tech = TechData()
        tech.security.is_https = True
        tech.security.gdpr_compliance.has_privacy_policy = True
        details = AuditDetails(
            seo=seo,
            tech=tech,
            social=SocialData(open_graph=OpenGraphInfo(has_image=True)),
            reviews=ReviewsData(website_shows_reviews=True),
        )
        assert generate_suggestions(details, _scores()).all == []


class TestPartition:
    def _suggestion(self, sid, impact, effort):
        return Suggestion(id=sid, title=sid, description="", category="trust", impact=impact, effort=effort)

    def test_rules(self):
        out = partition([
            self._suggestion("a", "high", "low"),
            self._suggestion("b", "high", "high"),
            self._suggestion("c", "low", "low"),
            self._suggestion("d", "medium", "medium"),
            self._suggestion("e", "high", "medium"),
        ])
        assert [s.id for s in out.quick_wins] == ["a"]
        assert [s.id for s in out.priority_fixes] == ["b", "e"]
        assert [s.id for s in out.nice_to_have] == ["c", "d"]
