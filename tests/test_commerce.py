"""
Tests for the e-commerce and advertising analyzers
"""
from conftest import PAGE_URL, build_page

from analyzers.advertising import AdvertisingAnalyzer
from analyzers.base import AnalyzerContext
from analyzers.ecommerce import EcommerceAnalyzer, detect_cart, has_product_schema
from crawler import parser


SHOPIFY_PAGE = build_page(
    '<link rel="stylesheet" href="https://cdn.shopify.com/s/files/theme.css">'
    '<script src="https://js.stripe.com/v3/"></script>',
    '<a href="/cart">Cart (0)</a><a href="https://www.paypal.com/checkout">PayPal</a>'
    '<script type="application/ld+json">{"@type": "Product", "name": "Widget"}</script>',
)


class TestEcommerce:
    def test_shopify_store(self):
        data = EcommerceAnalyzer().run(AnalyzerContext(PAGE_URL, SHOPIFY_PAGE))

        assert data.has_ecommerce is True
        assert data.platform.name == "Shopify"
        assert [p.name for p in data.payment_processors] == ["Stripe", "PayPal"]
        assert data.cart_functionality is True
        assert data.ssl_on_checkout is True
        assert data.product_schema is True
        assert data.issues == []

    def test_store_over_http_without_schema(self):
        html = build_page(body='<button class="add-to-cart">Buy</button>')
        data = EcommerceAnalyzer().run(AnalyzerContext("http://acme.test/", html))

        assert data.has_ecommerce is True
        assert data.platform.detected is False
        assert [i.id for i in data.issues] == ["ecommerce_no_ssl", "no_product_schema"]

    def test_brochure_site(self):
        data = EcommerceAnalyzer().run(AnalyzerContext(PAGE_URL, build_page(body="<p>We fix pipes.</p>")))

        assert data.has_ecommerce is False
        assert data.payment_processors == []
        assert data.issues == []

    def test_product_in_graph(self):
        soup = parser.make_soup(build_page(
            '<script type="application/ld+json">'
            '{"@context": "https://schema.org", "@graph": [{"@type": "WebPage"}, {"@type": "Product"}]}'
            "</script>"
        ))
        assert has_product_schema(soup) is True

    def test_checkout_and_cart_words(self):
        html = "<p>proceed to checkout from your cart</p>"
        assert detect_cart(html, parser.make_soup(html)) is True


class TestAdvertising:
    def test_pixels(self):
        html = build_page(body=(
            "<script>fbq('init', '123'); fbq('track', 'PageView');</script>"
            '<script src="https://snap.licdn.com/li.lms-analytics/insight.min.js"></script>'
            '<script src="https://static.criteo.net/js/ld/publishertag.js"></script>'
            '<script src="https://www.googleadservices.com/pagead/conversion.js"></script>'
        ))
        data = AdvertisingAnalyzer().run(AnalyzerContext(PAGE_URL, html))

        assert data.paid_search.google_ads is True
        assert data.paid_search.detected is True
        assert data.social_ads.facebook_ads is True
        assert data.social_ads.instagram_ads is True
        assert data.social_ads.linkedin_ads is True
        assert data.retargeting.google_remarketing is True
        assert data.retargeting.other_pixels == ["Criteo"]
        assert data.issues == []

    def test_display_networks(self):
        html = build_page(body=(
            '<script async src="https://pagead2.googlesyndication.com/pagead/js/adsbygoogle.js"></script>'
            '<script src="https://c.amazon-adsystem.com/aax2/apstag.js"></script>'
        ))
        display = AdvertisingAnalyzer().run(AnalyzerContext(PAGE_URL, html)).display_ads

        assert display.google_display_network is True
        assert display.other_networks == ["Amazon Ads"]
        assert display.detected is True

    def test_no_ads(self):
        data = AdvertisingAnalyzer().run(AnalyzerContext(PAGE_URL, build_page(body="<p>Hi</p>")))

        assert data.paid_search.detected is False
        assert data.social_ads.detected is False
        assert data.retargeting.detected is False
        assert [i.id for i in data.issues] == ["no_retargeting"]
