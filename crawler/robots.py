"""
Fetches and parses robots.txt for the audited origin.
"""
from __future__ import annotations

import logging
import re
from typing import Optional
from urllib.parse import urljoin

import requests

from config import ROBOTS_TIMEOUT
from crawler import fetcher
from models import RobotsInfo


logger = logging.getLogger(__name__)

_SITEMAP_LINE = re.compile(r"Sitemap:\s*(.+)", re.IGNORECASE)


def check_robots(
    page_url: str,
    session: Optional[requests.Session] = None,
    timeout: float = ROBOTS_TIMEOUT,
) -> RobotsInfo:
    """Fetch /robots.txt next to page_url and return a populated RobotsInfo."""
    robots_url = urljoin(page_url, "/robots.txt")

    try:
        content = fetcher.fetch_text(robots_url, timeout, session)
    except requests.RequestException as exc:
        logger.debug("robots.txt fetch failed for %s: %s", robots_url, exc)
        content = None

    if content is None:
        return RobotsInfo(
            exists=False,
            content=None,
            allows_indexing=True,
            sitemap_urls=[],
            issues=["No robots.txt found"],
        )
    return parse_robots(content)


def parse_robots(content: str) -> RobotsInfo:
    sitemap_urls = [m.group(1).strip() for m in _SITEMAP_LINE.finditer(content)]

    # Only a bare "Disallow: /" line blocks the whole site
    disallow_all = "Disallow: /\n" in content or "Disallow: /\r" in content
    issues = ["Site blocks all crawlers"] if disallow_all else []

    return RobotsInfo(
        exists=True,
        content=content,
        allows_indexing=not disallow_all,
        sitemap_urls=sitemap_urls,
        issues=issues,
    )
