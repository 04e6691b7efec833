"""
Local business contact details: phone numbers, e-mail addresses and street
addresses found in the page text.
"""
from __future__ import annotations

import re

from analyzers.base import AnalyzerContext, BaseAnalyzer
from crawler import parser
from models import LocalData


PHONE_RE = re.compile(r"(?:\+?1[-.\s]?)?\(?[2-9]\d{2}\)?[-.\s]?\d{3}[-.\s]?\d{4}")
EMAIL_RE = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
ADDRESS_RE = re.compile(
    r"\d+\s+[\w\s]+(?:Street|St|Avenue|Ave|Road|Rd|Boulevard|Blvd|Drive|Dr|Lane|Ln|Way|Court|Ct|Place|Pl)"
    r"\.?(?:\s*#?\d+)?(?:,\s*[\w\s]+)?(?:,\s*[A-Z]{2}\s+\d{5}(?:-\d{4})?)?",
    re.IGNORECASE,
)


def unique(matches: list[str]) -> list[str]:
    """Trimmed matches, first occurrence wins."""
    return list(dict.fromkeys(m.strip() for m in matches))


def extract_contacts(html: str) -> tuple[list[str], list[str], list[str]]:
    """(phones, emails, addresses) from the visible body text."""
    text = parser.body_text(html)
    return (
        unique(PHONE_RE.findall(text)),
        unique(EMAIL_RE.findall(text)),
        unique(ADDRESS_RE.findall(text)),
    )


class LocalAnalyzer(BaseAnalyzer):
    id = "local"
    name = "Local Presence"

    def default(self) -> LocalData:
        return LocalData()

    def run(self, context: AnalyzerContext) -> LocalData:
        context.progress("Detecting local business info...")
        phones, emails, addresses = extract_contacts(context.html)
        return LocalData(phones=phones, addresses=addresses, emails=emails)
