"""
Tests for the local presence analyzer. The Google Business Profile probe is
monkeypatched.
"""
import pytest
import requests

from conftest import PAGE_URL, build_page

from analyzers.base import AnalyzerContext
from analyzers.local import LocalAnalyzer, extract_contacts
from analyzers.local_presence import (
    LocalPresenceAnalyzer,
    analyze_nap_consistency,
    detect_directory_listings,
    extract_business_name,
)
from crawler import fetcher, parser


def _status(result):
    """check_status stand-in returning a fixed status or raising."""
    def check_status(url, timeout, session=None):
        if isinstance(result, Exception):
            raise result
        return result
    return check_status


@pytest.fixture
def gbp_ok(monkeypatch):
    monkeypatch.setattr(fetcher, "check_status", _status((200, "OK")))


def _run(body: str, head: str = ""):
    return LocalPresenceAnalyzer().run(AnalyzerContext(PAGE_URL, build_page(head, body)))


class TestGoogleBusinessProfile:
    @pytest.mark.parametrize("href", [
        "https://g.page/acme-plumbing",
        "https://www.google.com/maps/place/Acme+Plumbing/@40.7,-74.0",
        "https://maps.google.com/?cid=1234567890",
    ])
    def test_link_patterns(self, gbp_ok, href):
        gbp = _run(f'<a href="{href}">Find us</a>').google_business_profile

        assert gbp.exists is True
        assert gbp.url == href
        assert gbp.verified is True
        assert gbp.issues == []

    def test_iframe_only(self, gbp_ok):
        data = _run('<iframe src="https://www.google.com/maps/embed?pb=abc"></iframe>')

        assert data.google_business_profile.exists is True
        assert data.google_business_profile.url is None
        assert data.google_business_profile.verified is False
        assert data.google_maps.listed is True
        assert data.google_maps.accurate is True

    def test_missing(self):
        data = _run("<p>Hello</p>")

        assert data.google_business_profile.exists is False
        assert data.google_business_profile.issues == ["No Google Business Profile link detected"]
        assert "no_gbp" in [i.id for i in data.issues]
        assert data.google_maps.issues == ["No Google Maps embed or link found"]


class TestValidation:
    @pytest.mark.parametrize("result, message", [
        ((404, "Not Found"), "Link returned HTTP 404"),
        ((500, "Internal Server Error"), "Link returned HTTP 500"),
        (requests.ConnectionError("refused"), "Link could not be reached"),
        (requests.Timeout("slow"), "Link validation timed out"),
    ])
    def test_failures(self, monkeypatch, result, message):
        monkeypatch.setattr(fetcher, "check_status", _status(result))
        gbp = _run('<a href="https://g.page/acme">Google</a>').google_business_profile

        assert gbp.exists is True
        assert gbp.verified is False
        assert gbp.issues == [message]

    def test_redirect_counts_as_verified(self, monkeypatch):
        monkeypatch.setattr(fetcher, "check_status", _status((301, "Moved Permanently")))
        assert _run('<a href="https://g.page/acme">Google</a>').google_business_profile.verified is True


class TestContacts:
    def test_phone_and_email(self, gbp_ok):
        data = _run("<p>Call (555) 123-4567</p><p>Email: contact@example.com</p>")

        assert data.phones == ["(555) 123-4567"]
        assert data.emails == ["contact@example.com"]
        ids = [i.id for i in data.issues]
        assert "no_phone" not in ids
        assert "no_address" in ids

    def test_address(self):
        _, _, addresses = extract_contacts(build_page(
            body="<p>Visit us at 123 Main Street, Springfield, IL 62701</p>"
        ))
        assert addresses == ["123 Main Street, Springfield, IL 62701"]

    def test_duplicates_collapse(self):
        phones, emails, _ = extract_contacts(build_page(
            body="<p>Call 555-123-4567 today.</p><p>Call 555-123-4567 today.</p>"
                 "<p>Mail hi@acme.test or hi@acme.test</p>"
        ))
        assert phones == ["555-123-4567"]
        assert emails == ["hi@acme.test"]

    def test_script_text_ignored(self):
        phones, _, _ = extract_contacts(build_page(body="<script>var n = '555-123-4567';</script>"))
        assert phones == []

    def test_local_analyzer(self):
        html = build_page(body="<p>Call 555.123.4567</p>")
        assert LocalAnalyzer().run(AnalyzerContext(PAGE_URL, html)).phones == ["555.123.4567"]


class TestDirectories:
    def test_yelp_listed(self, gbp_ok):
        data = _run('<a href="https://www.yelp.com/biz/acme-plumbing-springfield">Yelp</a>')
        yelp = next(d for d in data.directories if d.name == "Yelp")

        assert yelp.listed is True
        assert yelp.url == "https://www.yelp.com/biz/acme-plumbing-springfield"
        assert "few_directory_listings" in [i.id for i in data.issues]

    def test_three_listings_are_enough(self):
        soup = parser.make_soup(build_page(body=(
            '<a href="https://yelp.com/biz/a">Y</a>'
            '<a href="https://www.bbb.org/us/a">B</a>'
            '<a href="https://www.yellowpages.com/a">YP</a>'
        )))
        assert sum(1 for d in detect_directory_listings(soup) if d.listed) == 3


class TestBusinessName:
    def test_json_ld_name(self):
        soup = parser.make_soup(build_page(
            '<script type="application/ld+json">{"@type": "LocalBusiness", "name": "Acme Plumbing"}</script>'
            '<meta property="og:site_name" content="Acme">'
        ))
        assert extract_business_name(soup, PAGE_URL) == "Acme Plumbing"

    def test_graph_organization(self):
        soup = parser.make_soup(build_page(
            '<script type="application/ld+json">'
            '{"@graph": [{"@type": "WebPage"}, {"@type": "Organization", "name": "Acme Co"}]}'
            "</script>"
        ))
        assert extract_business_name(soup, PAGE_URL) == "Acme Co"

    def test_site_name(self):
        soup = parser.make_soup(build_page('<meta property="og:site_name" content="Acme">'))
        assert extract_business_name(soup, PAGE_URL) == "Acme"

    def test_domain_fallback(self):
        soup = parser.make_soup(build_page())
        assert extract_business_name(soup, "https://www.acmeplumbing.co.uk/") == "acmeplumbing"


class TestNap:
    def test_consistent(self):
        nap = analyze_nap_consistency("Acme", ["1 Main St"], ["(555) 123-4567", "555-123-4567"])

        assert nap.consistent is True
        assert nap.phone.variations == ["5551234567", "5551234567"]
        assert nap.issues == []

    def test_multiple_addresses_and_phones(self):
        nap = analyze_nap_consistency("Acme", ["1 Main St", "9 Oak Ave"], ["555-123-4567", "555-987-6543"])

        assert nap.consistent is False
        assert nap.issues == ["Multiple address variations", "Multiple phone number variations"]

    def test_empty(self):
        nap = analyze_nap_consistency(None, [], [])
        assert nap.consistent is True
        assert nap.name.value is None
