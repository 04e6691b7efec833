"""
E-commerce analyzer: store platform, payment processors, cart features and
Product structured data.
"""
from __future__ import annotations

from bs4 import BeautifulSoup

from analyzers.base import AnalyzerContext, BaseAnalyzer
from analyzers.templates import create_issue
from crawler import parser
from models import AuditIssue, EcommerceData, EcommercePlatform, PaymentProcessor


# name, lower-cased source needles, CSS selectors
PLATFORMS: list[tuple[str, tuple[str, ...], tuple[str, ...]]] = [
    ("Shopify",              ("shopify.com", "cdn.shopify.com", "myshopify.com"), ('link[href*="cdn.shopify.com"]',)),
    ("WooCommerce",          ("woocommerce", "wc-cart", "wc-checkout"),           ("body.woocommerce", ".woocommerce-cart")),
    ("Magento",              ("mage-cache-sessid", "magento", "/pub/static/version"), ('input[name="form_key"]',)),
    ("BigCommerce",          ("bigcommerce.com", "bigcommerce"),                  ('script[src*="bigcommerce"]',)),
    ("PrestaShop",           ("prestashop", "modules/ps_"),                       ()),
    ("OpenCart",             ("opencart", "catalog/view/theme"),                  ()),
    ("Squarespace Commerce", ("squarespace.com",),                                (".squarespace-commerce",)),
    ("Wix Stores",           ("wix.com", "wixstores"),                            ('script[src*="wixstatic.com"]',)),
    ("Square Online",        ("squareup.com", "square.site"),                     ()),
    ("Ecwid",                ("ecwid.com", "ecwidcdn.com"),                       ()),
    ("Volusion",             ("volusion.com",),                                   ()),
    ("3dcart",               ("3dcart.com", "3dcartstores.com"),                  ()),
]

PAYMENT_PROCESSORS: list[tuple[str, tuple[str, ...], tuple[str, ...]]] = [
    ("Stripe",        ("stripe.com", "js.stripe.com", "stripecdn"),  ('script[src*="stripe.com"]',)),
    ("PayPal",        ("paypal.com", "paypalobjects.com"),           ('script[src*="paypal.com"]', 'a[href*="paypal.com"]')),
    ("Square",        ("squareup.com", "squareupsandbox.com"),       ('script[src*="squareup.com"]',)),
    ("Braintree",     ("braintreegateway.com", "braintree-api.com"), ('script[src*="braintree"]',)),
    ("Authorize.net", ("authorize.net", "authorizenet"),             ()),
    ("Apple Pay",     ("apple-pay", "applepay"),                     ('meta[name="apple-pay-enabled"]',)),
    ("Google Pay",    ("google.com/pay", "googlepay"),               ()),
    ("Klarna",        ("klarna.com", "klarnacdn.net"),               ()),
    ("Afterpay",      ("afterpay.com", "afterpay-frontend"),         ()),
    ("Affirm",        ("affirm.com", "affirm-js"),                   ()),
    ("Shop Pay",      ("shop.app", "shop-pay"),                      ()),
    ("Amazon Pay",    ("amazonpay", "amazon-pay", "amazonservices.com"), ()),
]

_CART_SELECTORS = (
    '[class*="cart"]',
    '[id*="cart"]',
    'a[href*="/cart"]',
    "button[data-add-to-cart]",
    'form[action*="cart"]',
)


def _matches(html: str, soup: BeautifulSoup, needles, selectors) -> bool:
    return any(n in html for n in needles) or any(soup.select_one(s) is not None for s in selectors)


class EcommerceAnalyzer(BaseAnalyzer):
    id = "ecommerce"
    name = "E-commerce Detection"

    def default(self) -> EcommerceData:
        return EcommerceData()

    def run(self, context: AnalyzerContext) -> EcommerceData:
        context.progress("Detecting e-commerce platforms...")

        soup = parser.make_soup(context.html)
        html = context.html.lower()
        issues: list[AuditIssue] = []

        platform = detect_platform(html, soup)
        processors = detect_payment_processors(html, soup)
        cart = detect_cart(html, soup)
        product_schema = has_product_schema(soup)

        has_ecommerce = platform.detected or bool(processors) or cart
        is_https = context.url.startswith("https://")

        if has_ecommerce and not is_https:
            issues.append(create_issue("ecommerce_no_ssl"))
        if has_ecommerce and not product_schema:
            issues.append(create_issue("no_product_schema"))

        return EcommerceData(
            has_ecommerce=has_ecommerce,
            platform=platform,
            payment_processors=processors,
            cart_functionality=cart,
            ssl_on_checkout=is_https,
            product_schema=product_schema,
            issues=issues,
        )


def detect_platform(html: str, soup: BeautifulSoup) -> EcommercePlatform:
    for name, needles, selectors in PLATFORMS:
        if _matches(html, soup, needles, selectors):
            return EcommercePlatform(name=name, detected=True)
    return EcommercePlatform()


def detect_payment_processors(html: str, soup: BeautifulSoup) -> list[PaymentProcessor]:
    """Only the processors found on the page."""
    return [
        PaymentProcessor(name=name, detected=True, secure=True)
        for name, needles, selectors in PAYMENT_PROCESSORS
        if _matches(html, soup, needles, selectors)
    ]


def detect_cart(html: str, soup: BeautifulSoup) -> bool:
    if any(n in html for n in ("add-to-cart", "addtocart", "shopping-cart", "shoppingcart",
                               "cart-icon", "cart_icon")):
        return True
    if "checkout" in html and "cart" in html:
        return True
    return any(soup.select_one(s) is not None for s in _CART_SELECTORS)


def has_product_schema(soup: BeautifulSoup) -> bool:
    for obj in parser.json_ld_objects(soup):
        kind = obj.get("@type")
        if kind == "Product" or (isinstance(kind, list) and "Product" in kind):
            return True
        for item in obj.get("@graph") or []:
            if isinstance(item, dict) and item.get("@type") == "Product":
                return True
    return False
