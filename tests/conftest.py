"""
Shared fixtures for the test suite
"""
import pytest

from models import (
    AuditDetails,
    AuditResult,
    LegacyAuditResult,
    Screenshot,
    SeoData,
)
from reporting.facts import extract_facts
from reporting.suggestions import generate_suggestions
from reporting.summary import generate_summary
from scoring.categories import calculate_new_scores, generate_score_breakdowns
from scoring.legacy import score_audit


PAGE_URL = "https://acme.test/"


def build_page(head: str = "", body: str = "", lang: str = "en") -> str:
    return f'<!DOCTYPE html><html lang="{lang}"><head>{head}</head><body>{body}</body></html>'


def build_result(details: AuditDetails, url: str = PAGE_URL, screenshots=None) -> AuditResult:
    """Run the scoring and reporting stages over ready-made details."""
    scores = score_audit(details)
    new_scores = calculate_new_scores(details)
    return AuditResult(
        url=url,
        screenshots=screenshots or [],
        new_scores=new_scores,
        score_breakdowns=generate_score_breakdowns(details),
        facts=extract_facts(details, url),
        suggestions=generate_suggestions(details, new_scores),
        legacy=LegacyAuditResult(
            screenshots={"mobile": b"", "desktop": b""},
            scores=scores,
            summary=generate_summary(details, scores),
            details=details,
        ),
    )


@pytest.fixture
def audit_result():
    shots = [
        Screenshot("mobile", 390, 844, b"\x89PNG-mobile"),
        Screenshot("desktop", 1920, 1080, b"\x89PNG-desktop"),
    ]
    return build_result(AuditDetails(seo=SeoData()), screenshots=shots)
