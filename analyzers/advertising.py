"""
Advertising analyzer: paid search, social ads, retargeting pixels and display
ad networks, detected from tags and script sources in the page.
"""
from __future__ import annotations

from bs4 import BeautifulSoup

from analyzers.base import AnalyzerContext, BaseAnalyzer
from analyzers.templates import create_issue
from crawler import parser
from models import AdvertisingData, AuditIssue, DisplayAds, PaidSearch, Retargeting, SocialAds


RETARGETING_PIXELS: list[tuple[str, tuple[str, ...]]] = [
    ("Criteo",    ("criteo.com", "criteo.net")),
    ("AdRoll",    ("adroll.com",)),
    ("Taboola",   ("taboola.com",)),
    ("Outbrain",  ("outbrain.com",)),
    ("Pinterest", ("pinterest.com/ct.js", "pintrk")),
    ("TikTok",    ("tiktok.com/i18n", "ttq.load")),
    ("Quora",     ("quora.com/_lc",)),
    ("Snapchat",  ("snapchat.com/scevent",)),
]

DISPLAY_NETWORKS: list[tuple[str, tuple[str, ...]]] = [
    ("Media.net",       ("media.net",)),
    ("Amazon Ads",      ("amazon-adsystem.com",)),
    ("PubMatic",        ("ads.pubmatic.com",)),
    ("Rubicon Project", ("rubiconproject.com",)),
    ("OpenX",           ("openx.net",)),
    ("Adform",          ("adform.net",)),
    ("Moat",            ("moatads.com",)),
]


def _any(html: str, *needles: str) -> bool:
    return any(n in html for n in needles)


def _sel(soup: BeautifulSoup, selector: str) -> bool:
    return soup.select_one(selector) is not None


class AdvertisingAnalyzer(BaseAnalyzer):
    id = "advertising"
    name = "Advertising Detection"

    def default(self) -> AdvertisingData:
        return AdvertisingData()

    def run(self, context: AnalyzerContext) -> AdvertisingData:
        context.progress("Detecting advertising platforms...")

        soup = parser.make_soup(context.html)
        html = context.html.lower()
        issues: list[AuditIssue] = []

        retargeting = detect_retargeting(html, soup)
        if not retargeting.detected:
            issues.append(create_issue("no_retargeting"))

        return AdvertisingData(
            paid_search=detect_paid_search(html, soup),
            social_ads=detect_social_ads(html, soup),
            retargeting=retargeting,
            display_ads=detect_display_ads(html, soup),
            issues=issues,
        )


def detect_paid_search(html: str, soup: BeautifulSoup) -> PaidSearch:
    google_ads = (
        _any(html, "googleads.g.doubleclick.net", "google_conversion",
             "google-analytics.com/collect", "www.googleadservices.com")
        or _sel(soup, 'script[src*="googleadservices"], script[src*="google_ads"]')
    )
    bing_ads = _any(html, "bat.bing.com", "uetag") or _sel(soup, 'script[src*="bat.bing.com"]')
    return PaidSearch(google_ads=google_ads, bing_ads=bing_ads, detected=google_ads or bing_ads)


def detect_social_ads(html: str, soup: BeautifulSoup) -> SocialAds:
    facebook = (
        _any(html, "facebook.com/tr", "connect.facebook.net", "fbevents.js", "fbq(")
        or _sel(soup, 'script[src*="facebook.net"]')
    )
    linkedin = (
        _any(html, "snap.licdn.com", "linkedin.com/px", "_linkedin_partner_id")
        or _sel(soup, 'script[src*="snap.licdn.com"]')
    )
    twitter = (
        _any(html, "static.ads-twitter.com", "analytics.twitter.com", "twq(")
        or _sel(soup, 'script[src*="ads-twitter.com"]')
    )
    return SocialAds(
        facebook_ads=facebook,
        instagram_ads=facebook,             # Instagram ads run through the Meta pixel
        linkedin_ads=linkedin,
        twitter_ads=twitter,
        detected=facebook or linkedin or twitter,
    )


def detect_retargeting(html: str, soup: BeautifulSoup) -> Retargeting:
    google = (
        _any(html, "googleads.g.doubleclick.net", "google_remarketing_only",
             "www.googleadservices.com/pagead/conversion")
        or _sel(soup, 'script[src*="doubleclick.net"]')
    )
    facebook = (
        _any(html, "fbq(", "facebook.com/tr", "fbevents.js")
        or _sel(soup, 'script[src*="connect.facebook.net"]')
    )
    others = [name for name, needles in RETARGETING_PIXELS if _any(html, *needles)]
    return Retargeting(
        google_remarketing=google,
        facebook_pixel=facebook,
        other_pixels=others,
        detected=google or facebook or bool(others),
    )


def detect_display_ads(html: str, soup: BeautifulSoup) -> DisplayAds:
    google = (
        _any(html, "googlesyndication.com", "pagead2.googlesyndication.com", "adsbygoogle")
        or _sel(soup, 'script[src*="googlesyndication"], ins.adsbygoogle')
    )
    others = [name for name, needles in DISPLAY_NETWORKS if _any(html, *needles)]
    if "Media.net" not in others and _sel(soup, 'script[src*="media.net"]'):
        others.insert(0, "Media.net")
    return DisplayAds(google_display_network=google, other_networks=others, detected=google or bool(others))
