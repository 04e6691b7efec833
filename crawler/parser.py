"""
HTML parsing helpers shared by the analyzers. Everything here works on a
BeautifulSoup tree built with the lxml parser.
"""
from __future__ import annotations

import json
import re
from typing import Iterator, Optional
from urllib.parse import urljoin, urlparse

import tldextract
from bs4 import BeautifulSoup, Tag


_WS = re.compile(r"\s+")


def make_soup(html: str) -> BeautifulSoup:
    try:
        return BeautifulSoup(html or "", "lxml")
    except Exception:
        return BeautifulSoup(html or "", "html.parser")


# ── Text ──────────────────────────────────────────────────────────────────────

def collapse_ws(text: str) -> str:
    return _WS.sub(" ", text or "").strip()


def body_text(html: str, drop: tuple[str, ...] = ("script", "style", "noscript")) -> str:
    """
    Raw text of <body> with the given tags removed. Parses a fresh tree so
    callers holding a soup of the same page are not mutated.
    """
    soup = make_soup(html)
    for tag in soup(list(drop)):
        tag.decompose()
    body = soup.find("body")
    return (body or soup).get_text()


def element_text(el: Optional[Tag]) -> str:
    return el.get_text().strip() if el is not None else ""


# ── Meta ──────────────────────────────────────────────────────────────────────

def meta_content(
    soup: BeautifulSoup,
    name: Optional[str] = None,
    prop: Optional[str] = None,
) -> Optional[str]:
    """content= of the first <meta name=...> or <meta property=...>; None when empty."""
    attrs = {"name": name} if name else {"property": prop}
    tag = soup.find("meta", attrs=attrs)
    if tag is None:
        return None
    return tag.get("content") or None


def link_href(soup: BeautifulSoup, rel: str) -> Optional[str]:
    tag = soup.find("link", rel=lambda r: r and rel in (r if isinstance(r, list) else [r]))
    if tag is None:
        return None
    return tag.get("href") or None


# ── Links ─────────────────────────────────────────────────────────────────────

def anchors(soup: BeautifulSoup) -> list[Tag]:
    return soup.find_all("a", href=True)


def hrefs(soup: BeautifulSoup) -> list[str]:
    return [a.get("href", "") for a in anchors(soup)]


def rel_of(tag: Tag) -> str:
    rel = tag.get("rel", "")
    return " ".join(rel) if isinstance(rel, list) else str(rel)


def absolute(href: str, base_url: str) -> Optional[str]:
    try:
        return urljoin(base_url, href)
    except ValueError:
        return None


def hostname(url: str) -> str:
    try:
        return urlparse(url).hostname or ""
    except ValueError:
        return ""


def site_label(url: str) -> Optional[str]:
    """Registrable name of a URL's host: https://www.acme.co.uk -> 'acme'."""
    host = hostname(url)
    if not host:
        return None
    return tldextract.extract(host).domain or None


# ── Structured data ───────────────────────────────────────────────────────────

def json_ld_blocks(soup: BeautifulSoup) -> Iterator[tuple[Optional[object], bool]]:
    """
    Yield (parsed, ok) for each <script type="application/ld+json">.
    Blocks that fail to parse yield (None, False); empty blocks are skipped.
    """
    for script in soup.find_all("script", type="application/ld+json"):
        text = script.string or script.get_text() or ""
        if not text.strip():
            continue
        try:
            yield json.loads(text), True
        except json.JSONDecodeError:
            yield None, False


def json_ld_objects(soup: BeautifulSoup) -> Iterator[dict]:
    """Every successfully parsed top-level JSON-LD object, lists flattened."""
    for data, ok in json_ld_blocks(soup):
        if not ok:
            continue
        for item in data if isinstance(data, list) else [data]:
            if isinstance(item, dict):
                yield item
