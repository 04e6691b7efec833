"""
Social analyzer: Open Graph and Twitter Card tags plus links to the
business's social profiles.
"""
from __future__ import annotations

import re
from typing import Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from analyzers.base import AnalyzerContext, BaseAnalyzer
from analyzers.templates import create_issue
from crawler import parser
from models import (
    AuditIssue,
    OpenGraphData,
    OpenGraphInfo,
    SocialData,
    SocialProfile,
    TwitterCardData,
    TwitterInfo,
)


SOCIAL_PATTERNS: dict[str, re.Pattern] = {
    "facebook":  re.compile(r"facebook\.com", re.I),
    "instagram": re.compile(r"instagram\.com", re.I),
    "twitter":   re.compile(r"twitter\.com|x\.com", re.I),
    "youtube":   re.compile(r"youtube\.com", re.I),
    "linkedin":  re.compile(r"linkedin\.com", re.I),
    "tiktok":    re.compile(r"tiktok\.com", re.I),
    "pinterest": re.compile(r"pinterest\.com", re.I),
    "yelp":      re.compile(r"yelp\.com", re.I),
}

# First path segments that are not a handle
_NOT_HANDLES = {"pages", "channel"}


class SocialAnalyzer(BaseAnalyzer):
    id = "social"
    name = "Social & Local Presence"

    def default(self) -> SocialData:
        return SocialData()

    def run(self, context: AnalyzerContext) -> SocialData:
        context.progress("Analyzing social presence...")

        soup = parser.make_soup(context.html)
        issues: list[AuditIssue] = []

        open_graph = extract_open_graph(soup, issues)
        twitter = extract_twitter_card(soup, issues)
        profiles = find_social_profiles(soup)

        if not profiles:
            issues.append(create_issue("no_social_profiles"))

        return SocialData(
            open_graph=open_graph,
            twitter=twitter,
            profiles=profiles,
            profile_details=[
                SocialProfile(platform=p, url=url, handle=extract_handle(url, p))
                for p, url in profiles.items()
            ],
            issues=issues,
        )


def extract_open_graph(soup: BeautifulSoup, issues: list[AuditIssue]) -> OpenGraphInfo:
    def og(prop: str) -> Optional[str]:
        return parser.meta_content(soup, prop=f"og:{prop}")

    data = OpenGraphData(
        title=og("title"),
        description=og("description"),
        image=og("image"),
        url=og("url"),
        type=og("type"),
        site_name=og("site_name"),
    )

    has_title, has_description, has_image = bool(data.title), bool(data.description), bool(data.image)
    if not has_title:
        issues.append(create_issue("missing_og_title"))
    if not has_description:
        issues.append(create_issue("missing_og_description"))
    if not has_image:
        issues.append(create_issue("missing_og_image"))

    return OpenGraphInfo(
        has_title=has_title,
        has_description=has_description,
        has_image=has_image,
        is_complete=has_title and has_description and has_image,
        data=data,
    )


def extract_twitter_card(soup: BeautifulSoup, issues: list[AuditIssue]) -> TwitterInfo:
    def tw(name: str) -> Optional[str]:
        return parser.meta_content(soup, name=f"twitter:{name}")

    data = TwitterCardData(
        card=tw("card"),
        title=tw("title"),
        description=tw("description"),
        image=tw("image"),
        site=tw("site"),
    )
    if not data.card:
        issues.append(create_issue("missing_twitter_card"))

    return TwitterInfo(has_card=bool(data.card), data=data)


def find_social_profiles(soup: BeautifulSoup) -> dict[str, str]:
    """First matching link per platform, in page order."""
    found: dict[str, str] = {}
    for href in parser.hrefs(soup):
        for platform, pattern in SOCIAL_PATTERNS.items():
            if platform not in found and href and pattern.search(href):
                found[platform] = href
    return found


def extract_handle(url: str, platform: str) -> Optional[str]:
    try:
        path = urlparse(url).path
    except ValueError:
        return None
    segment = path.lstrip("/").split("/")[0]
    if not segment or segment in _NOT_HANDLES:
        return None
    return f"@{segment}" if platform == "twitter" else segment
