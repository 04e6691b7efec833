"""
Tests for the social analyzer
"""
from conftest import PAGE_URL, build_page

from analyzers.base import AnalyzerContext
from analyzers.social import SocialAnalyzer, extract_handle, find_social_profiles
from crawler import parser


FULL_HEAD = (
    '<meta property="og:title" content="Acme Plumbing">'
    '<meta property="og:description" content="24/7 plumbing">'
    '<meta property="og:image" content="https://acme.test/og.png">'
    '<meta property="og:site_name" content="Acme">'
    '<meta name="twitter:card" content="summary_large_image">'
    '<meta name="twitter:site" content="@acme">'
)


class TestSocialAnalyzer:
    def test_complete_tags(self):
        body = '<a href="https://www.facebook.com/acmeplumbing">FB</a><a href="https://x.com/acme">X</a>'
        data = SocialAnalyzer().run(AnalyzerContext(PAGE_URL, build_page(FULL_HEAD, body)))

        assert data.open_graph.is_complete is True
        assert data.open_graph.data.site_name == "Acme"
        assert data.twitter.has_card is True
        assert data.twitter.data.site == "@acme"
        assert data.profiles == {
            "facebook": "https://www.facebook.com/acmeplumbing",
            "twitter": "https://x.com/acme",
        }
        assert [(p.platform, p.handle) for p in data.profile_details] == [
            ("facebook", "acmeplumbing"), ("twitter", "@acme"),
        ]
        assert data.issues == []

    def test_bare_page(self):
        data = SocialAnalyzer().run(AnalyzerContext(PAGE_URL, build_page()))

        assert data.open_graph.is_complete is False
        assert data.profiles == {}
        assert [i.id for i in data.issues] == [
            "missing_og_title", "missing_og_description", "missing_og_image",
            "missing_twitter_card", "no_social_profiles",
        ]

    def test_partial_open_graph(self):
        head = '<meta property="og:title" content="Acme">'
        data = SocialAnalyzer().run(AnalyzerContext(PAGE_URL, build_page(head)))
        assert data.open_graph.has_title is True
        assert data.open_graph.has_image is False
        assert data.open_graph.is_complete is False


class TestProfiles:
    def test_first_link_per_platform_in_page_order(self):
        soup = parser.make_soup(build_page(body=(
            '<a href="https://instagram.com/acme">IG</a>'
            '<a href="https://facebook.com/first">FB</a>'
            '<a href="https://facebook.com/second">FB</a>'
            '<a href="https://www.yelp.com/biz/acme-springfield">Yelp</a>'
        )))
        profiles = find_social_profiles(soup)

        assert list(profiles) == ["instagram", "facebook", "yelp"]
        assert profiles["facebook"] == "https://facebook.com/first"

    def test_handles(self):
        assert extract_handle("https://facebook.com/pages/acme", "facebook") is None
        assert extract_handle("https://youtube.com/channel/UC123", "youtube") is None
        assert extract_handle("https://twitter.com/acme/status/1", "twitter") == "@acme"
        assert extract_handle("https://linkedin.com/", "linkedin") is None
