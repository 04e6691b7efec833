"""
Sitemap discovery. Probes the common sitemap locations of the audited origin
and counts the entries of the first one that answers.
"""
from __future__ import annotations

import gzip
import logging
from typing import Optional
from urllib.parse import urljoin

import requests
from lxml import etree

from config import SITEMAP_CANDIDATES, SITEMAP_TIMEOUT
from crawler import fetcher
from models import SitemapInfo


logger = logging.getLogger(__name__)

_NS = "{http://www.sitemaps.org/schemas/sitemap/0.9}"
_ACCEPT = {"Accept": "application/xml, text/xml"}


def candidate_urls(page_url: str) -> list[str]:
    return [urljoin(page_url, path) for path in SITEMAP_CANDIDATES]


def check_sitemap(
    page_url: str,
    session: Optional[requests.Session] = None,
    timeout: float = SITEMAP_TIMEOUT,
) -> SitemapInfo:
    """Return the first reachable sitemap among the candidate locations."""
    for sitemap_url in candidate_urls(page_url):
        try:
            resp = fetcher.fetch_response(sitemap_url, timeout, session, headers=_ACCEPT)
        except requests.RequestException as exc:
            logger.debug("sitemap probe failed for %s: %s", sitemap_url, exc)
            continue
        if resp is None:
            continue

        url_count, last_modified = parse_sitemap(_body(resp))
        return SitemapInfo(
            exists=True,
            url=sitemap_url,
            url_count=url_count,
            last_modified=last_modified,
            issues=[],
        )

    return SitemapInfo(
        exists=False,
        url=None,
        issues=["No sitemap found at common locations"],
    )


def parse_sitemap(raw: str) -> tuple[int, Optional[str]]:
    """
    Count <loc> entries of a urlset or sitemapindex and return the newest
    <lastmod>. Unparsable XML falls back to a plain <loc> tag count.
    """
    try:
        root = etree.fromstring(raw.encode("utf-8"))
    except (etree.XMLSyntaxError, ValueError):
        return raw.count("<loc>"), None

    locs = [el for el in root.iter(f"{_NS}loc", "loc")]
    lastmods = sorted(
        (el.text.strip() for el in root.iter(f"{_NS}lastmod", "lastmod") if el.text),
        reverse=True,
    )
    return len(locs), (lastmods[0] if lastmods else None)


def _body(resp: requests.Response) -> str:
    """Response body as text, decompressing gzip sitemaps."""
    if resp.url.endswith(".gz") or "gzip" in resp.headers.get("content-type", ""):
        try:
            return gzip.decompress(resp.content).decode("utf-8", errors="replace")
        except OSError:
            pass  # served uncompressed despite the name
    return resp.text
