"""
On-page SEO analyzer: meta tags, headings, content quality, images, links,
structured data, sitemap and robots.txt.
"""
from __future__ import annotations

import logging
import re
from typing import Optional
from urllib.parse import urlparse

import requests
from bs4 import BeautifulSoup

from analyzers.base import AnalyzerContext, BaseAnalyzer
from analyzers.spellcheck import check_spelling
from analyzers.templates import create_issue
from config import (
    DESCRIPTION_MAX_CHARS,
    DESCRIPTION_MIN_CHARS,
    IMAGE_CHECK_TIMEOUT,
    LINK_CHECK_TIMEOUT,
    MAX_LINKS_CHECKED,
    OVERSIZED_IMAGE_BYTES,
    POOR_READING_EASE,
    THIN_CONTENT_WORD_COUNT,
    TITLE_MAX_CHARS,
    TITLE_MIN_CHARS,
)
from crawler import fetcher, parser, robots, sitemap
from models import (
    AuditIssue,
    BrokenLink,
    ContentData,
    HeadingData,
    ImageInfo,
    ImagesData,
    LinksData,
    MetaData,
    OversizedImage,
    SeoData,
    Severity,
    StructuredDataInfo,
)


logger = logging.getLogger(__name__)

_SENTENCE_END = re.compile(r"[.!?]+")
_SILENT_SUFFIX = re.compile(r"(?:[^laeiouy]es|ed|[^laeiouy]e)$")
_VOWEL_GROUP = re.compile(r"[aeiouy]{1,2}")
_LEGACY_FORMAT = re.compile(r"\.(jpg|jpeg|png|gif)$", re.IGNORECASE)
_MODERN_FORMAT = re.compile(r"\.(webp|avif)$", re.IGNORECASE)

_NON_CONTENT_TAGS = ["script", "style", "nav", "footer", "header", "noscript"]


class SeoAnalyzer(BaseAnalyzer):
    id = "seo"
    name = "On-Page SEO"

    def __init__(self, session: Optional[requests.Session] = None):
        self.session = session

    def default(self) -> SeoData:
        return SeoData()

    def run(self, context: AnalyzerContext) -> SeoData:
        context.progress("Analyzing SEO elements...")

        session = self.session or fetcher.make_session()
        soup = parser.make_soup(context.html)
        issues: list[AuditIssue] = []

        meta = extract_meta(soup, issues)
        headings = extract_headings(soup, issues)
        content = analyze_content(context.html, issues, context.url)
        images = analyze_images(soup, context.url, issues, session)
        links = extract_links(soup, context.url, issues, session, context)
        structured = extract_structured_data(soup)

        context.progress("Checking sitemap...")
        sitemap_info = sitemap.check_sitemap(context.url, session)
        context.progress("Checking robots.txt...")
        robots_info = robots.check_robots(context.url, session)

        if not sitemap_info.exists:
            issues.append(create_issue("missing_sitemap"))
        if not robots_info.exists:
            issues.append(create_issue("missing_robots"))

        return SeoData(
            meta=meta,
            headings=headings,
            content=content,
            images=images,
            links=links,
            structured_data=structured,
            sitemap=sitemap_info,
            robots=robots_info,
            issues=issues,
        )


# ── Meta ──────────────────────────────────────────────────────────────────────

def extract_meta(soup: BeautifulSoup, issues: list[AuditIssue]) -> MetaData:
    title_tag = soup.find("title")
    title = title_tag.get_text().strip() if title_tag else ""
    title = title or None

    description = (parser.meta_content(soup, name="description") or "").strip() or None

    html_tag = soup.find("html")
    content_language = soup.find("meta", attrs={"http-equiv": "content-language"})
    language = (
        (html_tag.get("lang") if html_tag else None)
        or (content_language.get("content") if content_language else None)
        or None
    )

    title_length = len(title) if title else 0
    description_length = len(description) if description else 0

    if not title:
        issues.append(create_issue("missing_title"))
    elif title_length < TITLE_MIN_CHARS:
        issues.append(create_issue(
            "title_too_short",
            description=f"Title is {title_length} characters "
                        f"(recommended: {TITLE_MIN_CHARS}-{TITLE_MAX_CHARS})",
        ))
    elif title_length > TITLE_MAX_CHARS:
        issues.append(create_issue(
            "title_too_long",
            description=f"Title is {title_length} characters "
                        f"(recommended: {TITLE_MIN_CHARS}-{TITLE_MAX_CHARS})",
        ))

    if not description:
        issues.append(create_issue("missing_description"))
    elif description_length < DESCRIPTION_MIN_CHARS:
        issues.append(create_issue(
            "description_too_short",
            description=f"Description is {description_length} characters "
                        f"(recommended: {DESCRIPTION_MIN_CHARS}-{DESCRIPTION_MAX_CHARS})",
        ))
    elif description_length > DESCRIPTION_MAX_CHARS:
        issues.append(create_issue(
            "description_too_long",
            description=f"Description is {description_length} characters "
                        f"(recommended: {DESCRIPTION_MIN_CHARS}-{DESCRIPTION_MAX_CHARS})",
        ))

    return MetaData(
        title=title,
        description=description,
        canonical=parser.link_href(soup, "canonical"),
        robots=parser.meta_content(soup, name="robots"),
        title_length=title_length,
        description_length=description_length,
        title_length_ok=TITLE_MIN_CHARS <= title_length <= TITLE_MAX_CHARS,
        description_length_ok=DESCRIPTION_MIN_CHARS <= description_length <= DESCRIPTION_MAX_CHARS,
        has_hreflang=soup.find("link", hreflang=True, rel="alternate") is not None,
        language=language,
    )


# ── Headings ──────────────────────────────────────────────────────────────────

def extract_headings(soup: BeautifulSoup, issues: list[AuditIssue]) -> HeadingData:
    structure = [
        {"level": int(tag.name[1]), "text": tag.get_text().strip()}
        for tag in soup.find_all(["h1", "h2", "h3", "h4", "h5", "h6"])
    ]
    notes: list[str] = []

    h1_count = sum(1 for h in structure if h["level"] == 1)
    if h1_count == 0:
        notes.append("Missing H1 tag")
        issues.append(create_issue("missing_h1"))
    elif h1_count > 1:
        notes.append(f"Multiple H1 tags found ({h1_count})")
        issues.append(create_issue(
            "multiple_h1", description=f"Found {h1_count} H1 tags instead of one.",
        ))

    structure_ok = h1_count == 1
    for prev, cur in zip(structure, structure[1:]):
        if cur["level"] > prev["level"] + 1:
            structure_ok = False
            notes.append(f"Heading hierarchy skip: H{prev['level']} to H{cur['level']}")

    if not structure_ok and h1_count == 1:
        issues.append(create_issue("heading_hierarchy"))

    return HeadingData(h1_count=h1_count, structure=structure, structure_ok=structure_ok, issues=notes)


# ── Content ───────────────────────────────────────────────────────────────────

def count_syllables(text: str) -> int:
    total = 0
    for word in text.lower().split():
        cleaned = re.sub(r"[^a-z]", "", word)
        if not cleaned:
            continue
        stem = _SILENT_SUFFIX.sub("", cleaned)
        stem = re.sub(r"^y", "", stem)
        total += len(_VOWEL_GROUP.findall(stem)) or 1
    return total


def flesch_reading_ease(words: int, sentences: int, syllables: int) -> float:
    if words == 0 or sentences == 0:
        return 0
    return 206.835 - 1.015 * (words / sentences) - 84.6 * (syllables / words)


def flesch_kincaid_grade(words: int, sentences: int, syllables: int) -> float:
    if words == 0 or sentences == 0:
        return 0
    return 0.39 * (words / sentences) + 11.8 * (syllables / words) - 15.59


def reading_ease_label(score: float) -> str:
    if score >= 90:
        return "Very Easy"
    if score >= 80:
        return "Easy"
    if score >= 70:
        return "Fairly Easy"
    if score >= 60:
        return "Standard"
    if score >= 50:
        return "Fairly Difficult"
    if score >= 30:
        return "Difficult"
    return "Very Difficult"


def analyze_content(html: str, issues: list[AuditIssue], page_url: Optional[str] = None) -> ContentData:
    # Work on a private tree: chrome and scripts are stripped before counting
    soup = parser.make_soup(html)
    for tag in soup(_NON_CONTENT_TAGS):
        tag.decompose()

    body = soup.find("body")
    text = parser.collapse_ws(body.get_text() if body else "")
    words = text.split(" ") if text else []
    word_count = len(words)
    sentences = [s for s in _SENTENCE_END.split(text) if s.strip()]
    paragraphs = len(soup.find_all("p"))
    avg_sentence_length = word_count / len(sentences) if sentences else 0

    syllables = count_syllables(text)
    ease = flesch_reading_ease(word_count, len(sentences), syllables)
    grade = flesch_kincaid_grade(word_count, len(sentences), syllables)

    spelling_errors = check_spelling(html, page_url=page_url) if html else []
    if spelling_errors:
        issues.append(create_issue(
            "spelling_errors", description=f"Found {len(spelling_errors)} potential spelling errors",
        ))

    is_thin = word_count < THIN_CONTENT_WORD_COUNT
    if is_thin:
        issues.append(create_issue(
            "thin_content",
            description=f"Page has only {word_count} words "
                        f"(minimum recommended: {THIN_CONTENT_WORD_COUNT})",
        ))

    if ease < POOR_READING_EASE:
        issues.append(create_issue(
            "poor_readability",
            description=f"Content has a Flesch Reading Ease score of {ease:.0f} (very difficult to read)",
        ))

    return ContentData(
        word_count=word_count,
        is_thin_content=is_thin,
        reading_level=round(grade, 1),
        reading_ease=round(ease),
        reading_ease_label=reading_ease_label(ease),
        spelling_errors=spelling_errors,
        paragraph_count=paragraphs,
        avg_sentence_length=round(avg_sentence_length, 1),
    )


# ── Images ────────────────────────────────────────────────────────────────────

def analyze_images(
    soup: BeautifulSoup,
    base_url: str,
    issues: list[AuditIssue],
    session: Optional[requests.Session] = None,
) -> ImagesData:
    images: list[ImageInfo] = []
    to_probe: list[str] = []
    unoptimized = 0

    for img in soup.find_all("img"):
        src = img.get("src") or ""
        alt = img.get("alt")
        images.append(ImageInfo(src=src, alt=alt, has_missing_alt=alt is None or not alt.strip()))

        if not src or src.startswith("data:"):
            continue
        absolute = parser.absolute(src, base_url)
        if not absolute:
            continue
        if not _MODERN_FORMAT.search(absolute) and _LEGACY_FORMAT.search(absolute):
            unoptimized += 1
        to_probe.append(absolute)

    def probe(url: str) -> Optional[OversizedImage]:
        try:
            size = fetcher.content_length(url, IMAGE_CHECK_TIMEOUT, session)
        except requests.RequestException:
            return None
        if size is None or size <= OVERSIZED_IMAGE_BYTES:
            return None
        kb = size / 1024
        return OversizedImage(src=url, size=round(kb), suggested_size=round(kb * 0.3))

    oversized = [o for o in fetcher.fan_out(probe, to_probe) if o is not None]
    missing_alt = sum(1 for img in images if img.has_missing_alt)

    if missing_alt > 0:
        issues.append(create_issue(
            "images_missing_alt",
            description=f"{missing_alt} of {len(images)} images are missing alt text",
        ))

    if oversized:
        issues.append(create_issue(
            "oversized_images",
            title="Oversized Images Detected",
            description=f"{len(oversized)} images are larger than 200KB and should be optimized",
            severity=Severity.WARNING,
            category="performance",
            recommendation="Compress images using tools like TinyPNG or Squoosh. Consider using WebP "
                           "format for better compression.",
            impact="Large images slow down page load and hurt Core Web Vitals scores.",
            effort="medium",
        ))

    if unoptimized > 0:
        issues.append(create_issue(
            "unoptimized_images",
            title="Images Not Using Modern Formats",
            description=f"{unoptimized} images could use WebP or AVIF format for better compression",
            severity=Severity.INFO,
            category="performance",
            recommendation="Convert images to WebP format which provides 25-35% smaller file sizes "
                           "compared to JPEG/PNG.",
            impact="Modern image formats improve page load speed with no quality loss.",
            effort="medium",
        ))

    return ImagesData(
        total=len(images),
        missing_alt=missing_alt,
        images=images,
        oversized_images=oversized,
        unoptimized_count=unoptimized,
    )


# ── Links ─────────────────────────────────────────────────────────────────────

def extract_links(
    soup: BeautifulSoup,
    base_url: str,
    issues: list[AuditIssue],
    session: Optional[requests.Session] = None,
    context: Optional[AnalyzerContext] = None,
) -> LinksData:
    internal: list[str] = []
    external: list[str] = []
    nofollow: list[str] = []
    anchor_text: dict[str, str] = {}
    base_host = parser.hostname(base_url)

    for a in parser.anchors(soup):
        href = a.get("href", "")
        if not href or href.startswith(("#", "javascript:", "mailto:", "tel:")):
            continue
        absolute = parser.absolute(href, base_url)
        if not absolute:
            continue

        if "nofollow" in parser.rel_of(a):
            nofollow.append(absolute)

        bucket = internal if parser.hostname(absolute) == base_host else external
        if absolute not in bucket:
            bucket.append(absolute)
        anchor_text.setdefault(absolute, a.get_text().strip())

    if context:
        context.progress("Checking for broken links...")
    to_check = [u for u in internal + external if urlparse(u).scheme in ("http", "https")]
    # deep audits check every link
    limit = None if context and context.deep else MAX_LINKS_CHECKED
    broken = check_broken_links(to_check[:limit], base_url, anchor_text, session)

    if broken:
        issues.append(create_issue(
            "broken_links", description=f"Found {len(broken)} broken links on the page",
        ))

    return LinksData(
        internal=internal,
        external=external,
        broken=broken,
        total=len(internal) + len(external),
        nofollow=nofollow,
    )


def check_broken_links(
    urls: list[str],
    page_url: str,
    anchor_text: Optional[dict[str, str]] = None,
    session: Optional[requests.Session] = None,
) -> list[BrokenLink]:
    """
    HEAD every URL concurrently. A status of 400 or above is broken, an
    unreachable host is broken with status 0, a timeout is not counted.
    """
    anchor_text = anchor_text or {}

    def check(url: str) -> Optional[BrokenLink]:
        try:
            status, reason = fetcher.check_status(url, LINK_CHECK_TIMEOUT, session)
        except requests.Timeout:
            return None
        except requests.RequestException:
            return BrokenLink(url=url, status_code=0, status_text="Connection failed", found_on=page_url)
        if status < 400:
            return None
        return BrokenLink(
            url=url,
            status_code=status,
            status_text=reason,
            found_on=page_url,
            anchor_text=anchor_text.get(url) or None,
        )

    return [b for b in fetcher.fan_out(check, urls) if b is not None]


# ── Structured data ───────────────────────────────────────────────────────────

def extract_structured_data(soup: BeautifulSoup) -> list[StructuredDataInfo]:
    found: list[StructuredDataInfo] = []
    for data, ok in parser.json_ld_blocks(soup):
        if not ok:
            found.append(StructuredDataInfo(
                type="Invalid JSON-LD", is_valid=False, errors=["Failed to parse JSON-LD"],
            ))
            continue
        kind = data.get("@type") if isinstance(data, dict) else None
        if isinstance(kind, list):
            kind = ", ".join(str(k) for k in kind)
        found.append(StructuredDataInfo(type=kind or "Unknown", is_valid=True))
    return found
