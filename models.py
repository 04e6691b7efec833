"""
Core data models for the page audit engine.
All modules import from here; nothing else is cross-imported at this level.

NOTE: `from __future__ import annotations` is intentionally omitted here.
Python 3.13.0 has a regression (bpo-121814) where that import causes a crash
in the dataclasses decorator when the module is not yet fully registered in
sys.modules. Python 3.9+ supports generic aliases (list[str], dict[str, Any])
natively, so the future import is unnecessary.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Optional

import config


# ── Severity ──────────────────────────────────────────────────────────────────
class Severity:
    CRITICAL = "critical"
    WARNING  = "warning"
    INFO     = "info"
    SUCCESS  = "success"

    ALL = [CRITICAL, WARNING, INFO, SUCCESS]

    # Sort rank, most urgent first
    ORDER = {
        CRITICAL: 0,
        WARNING:  1,
        INFO:     2,
        SUCCESS:  3,
    }

    COLORS = {
        CRITICAL: "#FF4B4B",
        WARNING:  "#FFA500",
        INFO:     "#4B9EFF",
        SUCCESS:  "#00C851",
    }

    ICONS = {
        CRITICAL: "🔴",
        WARNING:  "🟡",
        INFO:     "🔵",
        SUCCESS:  "🟢",
    }


class MetricStatus:
    GOOD = "good"
    NEEDS_IMPROVEMENT = "needs-improvement"
    POOR = "poor"


# ── Issues ────────────────────────────────────────────────────────────────────
@dataclass
class AuditIssue:
    id: str
    title: str
    description: str
    severity: str                     # Severity.*
    category: str
    recommendation: Optional[str] = None
    learn_more_url: Optional[str] = None
    impact: Optional[str] = None
    effort: Optional[str] = None      # low / medium / high


# ── Score breakdowns ──────────────────────────────────────────────────────────
@dataclass
class ScoreDeduction:
    points: int
    reason: str
    explanation: str
    how_to_fix: Optional[str] = None
    learn_more_url: Optional[str] = None


@dataclass
class ScoreBonus:
    points: int
    reason: str
    explanation: str


@dataclass
class MetricData:
    value: float
    score: int
    weight: float
    weighted_score: float
    status: str                       # MetricStatus.*
    threshold: dict[str, float]       # {good, poor}
    display_value: str
    label: str
    description: str


@dataclass
class DiagnosticSummary:
    label: str
    value: str
    status: Optional[str] = None


@dataclass
class PerformanceRecommendation:
    id: str
    metric: str
    priority: int
    impact: str
    title: str
    description: str
    how_to_fix: str
    learn_more_url: Optional[str] = None
    ratio: Optional[float] = None     # times over the "good" threshold


@dataclass
class CoreWebVitalsData:
    lcp: Optional[MetricData] = None
    cls: Optional[MetricData] = None
    tbt: Optional[MetricData] = None
    fcp: Optional[MetricData] = None
    si: Optional[MetricData] = None
    ttfb: Optional[MetricData] = None
    tti: Optional[MetricData] = None
    passing_count: int = 0
    failing_count: int = 0
    recommendations: list[PerformanceRecommendation] = field(default_factory=list)
    diagnostic_summaries: Optional[list[DiagnosticSummary]] = None


@dataclass
class ScoreBreakdown:
    category: str
    category_label: str
    category_description: str
    score: int
    max_score: int
    weight: float
    weight_explanation: str
    base_score: int
    deductions: list[ScoreDeduction] = field(default_factory=list)
    bonuses: list[ScoreBonus] = field(default_factory=list)
    tips: list[str] = field(default_factory=list)
    core_web_vitals: Optional[CoreWebVitalsData] = None


@dataclass
class DetailedScores:
    overall: int
    overall_explanation: str
    breakdown: list[ScoreBreakdown] = field(default_factory=list)


# ── Fundamentals (Lighthouse) ─────────────────────────────────────────────────
@dataclass
class LighthouseScores:
    performance: int = 0
    accessibility: int = 0
    best_practices: int = 0
    seo: int = 0


@dataclass
class PerformanceMetrics:
    tti: Optional[float] = None       # ms
    lcp: Optional[float] = None       # ms
    cls: Optional[float] = None       # unitless
    fcp: Optional[float] = None       # ms
    si: Optional[float] = None        # ms
    tbt: Optional[float] = None       # ms
    ttfb: Optional[float] = None      # ms


@dataclass
class MobileInfo:
    is_mobile_friendly: bool = False
    viewport_configured: bool = False
    font_size_ok: bool = False
    tap_targets_ok: bool = False


@dataclass
class SpeedOpportunity:
    id: str
    title: str
    description: str
    savings: float                    # estimated ms
    details: Optional[str] = None


@dataclass
class MainThreadTask:
    group: str
    duration: float


@dataclass
class ScriptBootupItem:
    url: str
    total: float
    scripting: float
    script_parse_compile: float


@dataclass
class LCPBreakdown:
    time_to_first_byte: float = 0
    resource_load_delay: float = 0
    resource_load_duration: float = 0
    element_render_delay: float = 0


@dataclass
class CLSCulprit:
    node: str
    score: float


@dataclass
class ThirdPartySummary:
    entity: str
    transfer_size: int
    blocking_time: float
    main_thread_time: float


@dataclass
class NetworkRequestSummary:
    resource_type: str
    count: int
    transfer_size: int


@dataclass
class PerformanceDiagnostics:
    main_thread_work: list[MainThreadTask] = field(default_factory=list)
    main_thread_total_time: Optional[float] = None
    bootup_time: list[ScriptBootupItem] = field(default_factory=list)
    bootup_total_time: Optional[float] = None
    total_byte_weight: Optional[int] = None
    lcp_breakdown: Optional[LCPBreakdown] = None
    cls_culprits: list[CLSCulprit] = field(default_factory=list)
    third_party_summary: list[ThirdPartySummary] = field(default_factory=list)
    third_party_total_blocking_time: Optional[float] = None
    network_summary: list[NetworkRequestSummary] = field(default_factory=list)
    network_total_requests: Optional[int] = None
    network_total_size: Optional[int] = None


@dataclass
class FundamentalsData:
    scores: LighthouseScores = field(default_factory=LighthouseScores)
    metrics: PerformanceMetrics = field(default_factory=PerformanceMetrics)
    mobile: MobileInfo = field(default_factory=MobileInfo)
    opportunities: list[SpeedOpportunity] = field(default_factory=list)
    diagnostics: Optional[PerformanceDiagnostics] = None
    issues: list[AuditIssue] = field(default_factory=list)


# ── SEO ───────────────────────────────────────────────────────────────────────
@dataclass
class MetaData:
    title: Optional[str] = None
    description: Optional[str] = None
    canonical: Optional[str] = None
    robots: Optional[str] = None
    title_length: int = 0
    description_length: int = 0
    title_length_ok: bool = False
    description_length_ok: bool = False
    has_hreflang: bool = False
    language: Optional[str] = None


@dataclass
class HeadingData:
    h1_count: int = 0
    structure: list[dict] = field(default_factory=list)   # [{level, text}]
    structure_ok: bool = True
    issues: list[str] = field(default_factory=list)


@dataclass
class SpellingError:
    word: str
    suggestions: list[str] = field(default_factory=list)
    context: str = ""
    page_url: Optional[str] = None


@dataclass
class ContentData:
    word_count: int = 0
    is_thin_content: bool = False
    reading_level: float = 0          # Flesch-Kincaid grade
    reading_ease: float = 0           # Flesch reading ease, 0-100
    reading_ease_label: str = ""
    spelling_errors: list[SpellingError] = field(default_factory=list)
    paragraph_count: int = 0
    avg_sentence_length: float = 0


@dataclass
class ImageInfo:
    src: str
    alt: Optional[str] = None
    has_missing_alt: bool = False


@dataclass
class OversizedImage:
    src: str
    size: int
    suggested_size: int


@dataclass
class ImagesData:
    total: int = 0
    missing_alt: int = 0
    images: list[ImageInfo] = field(default_factory=list)
    oversized_images: list[OversizedImage] = field(default_factory=list)
    unoptimized_count: int = 0


@dataclass
class BrokenLink:
    url: str
    status_code: int
    status_text: str
    found_on: str
    anchor_text: Optional[str] = None


@dataclass
class LinksData:
    internal: list[str] = field(default_factory=list)
    external: list[str] = field(default_factory=list)
    broken: list[BrokenLink] = field(default_factory=list)
    total: int = 0
    nofollow: list[str] = field(default_factory=list)


@dataclass
class StructuredDataInfo:
    type: str
    is_valid: bool
    errors: list[str] = field(default_factory=list)


@dataclass
class SitemapInfo:
    exists: bool = False
    url: Optional[str] = None
    url_count: Optional[int] = None
    last_modified: Optional[str] = None
    issues: list[str] = field(default_factory=list)


@dataclass
class RobotsInfo:
    exists: bool = False
    content: Optional[str] = None
    allows_indexing: bool = True
    sitemap_urls: list[str] = field(default_factory=list)
    issues: list[str] = field(default_factory=list)


@dataclass
class SeoData:
    meta: MetaData = field(default_factory=MetaData)
    headings: HeadingData = field(default_factory=HeadingData)
    content: ContentData = field(default_factory=ContentData)
    images: ImagesData = field(default_factory=ImagesData)
    links: LinksData = field(default_factory=LinksData)
    structured_data: list[StructuredDataInfo] = field(default_factory=list)
    sitemap: SitemapInfo = field(default_factory=SitemapInfo)
    robots: RobotsInfo = field(default_factory=RobotsInfo)
    issues: list[AuditIssue] = field(default_factory=list)


# ── Social ────────────────────────────────────────────────────────────────────
@dataclass
class OpenGraphData:
    title: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    url: Optional[str] = None
    type: Optional[str] = None
    site_name: Optional[str] = None


@dataclass
class TwitterCardData:
    card: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    site: Optional[str] = None


@dataclass
class OpenGraphInfo:
    has_title: bool = False
    has_description: bool = False
    has_image: bool = False
    is_complete: bool = False
    data: OpenGraphData = field(default_factory=OpenGraphData)


@dataclass
class TwitterInfo:
    has_card: bool = False
    data: TwitterCardData = field(default_factory=TwitterCardData)


@dataclass
class SocialProfile:
    platform: str
    url: str
    handle: Optional[str] = None


@dataclass
class SocialData:
    open_graph: OpenGraphInfo = field(default_factory=OpenGraphInfo)
    twitter: TwitterInfo = field(default_factory=TwitterInfo)
    profiles: dict[str, str] = field(default_factory=dict)       # platform -> url
    profile_details: list[SocialProfile] = field(default_factory=list)
    issues: list[AuditIssue] = field(default_factory=list)


# ── Security / technology ─────────────────────────────────────────────────────
@dataclass
class SecurityHeader:
    name: str
    present: bool
    value: Optional[str] = None
    recommendation: Optional[str] = None


@dataclass
class GdprCompliance:
    has_privacy_policy: bool = False
    has_cookie_banner: bool = False
    has_cookie_policy: bool = False
    issues: list[str] = field(default_factory=list)


@dataclass
class SecurityData:
    is_https: bool = False
    has_hsts: bool = False
    mixed_content: bool = False
    security_headers: list[SecurityHeader] = field(default_factory=list)
    gdpr_compliance: GdprCompliance = field(default_factory=GdprCompliance)
    issues: list[AuditIssue] = field(default_factory=list)


@dataclass
class AnalyticsData:
    google_analytics: bool = False
    google_analytics4: bool = False
    google_tag_manager: bool = False
    facebook_pixel: bool = False
    hotjar: bool = False
    mixpanel: bool = False
    segment: bool = False
    other_trackers: list[str] = field(default_factory=list)


@dataclass
class TechnologyItem:
    name: str
    category: str
    version: Optional[str] = None
    confidence: int = 100


@dataclass
class TechData:
    security: SecurityData = field(default_factory=SecurityData)
    analytics: AnalyticsData = field(default_factory=AnalyticsData)
    technologies: list[TechnologyItem] = field(default_factory=list)
    cms: Optional[str] = None
    framework: Optional[str] = None
    server: Optional[str] = None
    cdns: list[str] = field(default_factory=list)
    issues: list[AuditIssue] = field(default_factory=list)


# ── Advertising ───────────────────────────────────────────────────────────────
@dataclass
class PaidSearch:
    google_ads: bool = False
    bing_ads: bool = False
    detected: bool = False
    issues: list[str] = field(default_factory=list)


@dataclass
class SocialAds:
    facebook_ads: bool = False
    instagram_ads: bool = False
    linkedin_ads: bool = False
    twitter_ads: bool = False
    detected: bool = False


@dataclass
class Retargeting:
    google_remarketing: bool = False
    facebook_pixel: bool = False
    other_pixels: list[str] = field(default_factory=list)
    detected: bool = False


@dataclass
class DisplayAds:
    google_display_network: bool = False
    other_networks: list[str] = field(default_factory=list)
    detected: bool = False


@dataclass
class AdvertisingData:
    paid_search: PaidSearch = field(default_factory=PaidSearch)
    social_ads: SocialAds = field(default_factory=SocialAds)
    retargeting: Retargeting = field(default_factory=Retargeting)
    display_ads: DisplayAds = field(default_factory=DisplayAds)
    issues: list[AuditIssue] = field(default_factory=list)


# ── E-commerce ────────────────────────────────────────────────────────────────
@dataclass
class EcommercePlatform:
    name: Optional[str] = None
    detected: bool = False


@dataclass
class PaymentProcessor:
    name: str
    detected: bool
    secure: bool


@dataclass
class EcommerceData:
    has_ecommerce: bool = False
    platform: EcommercePlatform = field(default_factory=EcommercePlatform)
    payment_processors: list[PaymentProcessor] = field(default_factory=list)
    cart_functionality: bool = False
    ssl_on_checkout: bool = False
    product_schema: bool = False
    issues: list[AuditIssue] = field(default_factory=list)


# ── Local business ────────────────────────────────────────────────────────────
@dataclass
class LocalData:
    phones: list[str] = field(default_factory=list)
    addresses: list[str] = field(default_factory=list)
    emails: list[str] = field(default_factory=list)


@dataclass
class GoogleBusinessProfile:
    exists: bool = False
    url: Optional[str] = None
    verified: bool = False
    complete: bool = False
    category: Optional[str] = None
    rating: Optional[float] = None
    review_count: Optional[int] = None
    issues: list[str] = field(default_factory=list)


@dataclass
class ListingStatus:
    listed: bool = False
    accurate: bool = False
    issues: list[str] = field(default_factory=list)


@dataclass
class DirectoryListing:
    name: str
    url: Optional[str] = None
    listed: bool = False
    accurate: bool = False
    issues: list[str] = field(default_factory=list)


@dataclass
class NapItem:
    value: Optional[str] = None
    variations: list[str] = field(default_factory=list)
    is_consistent: bool = True


@dataclass
class NapConsistency:
    consistent: bool = False
    name: NapItem = field(default_factory=NapItem)
    address: NapItem = field(default_factory=NapItem)
    phone: NapItem = field(default_factory=NapItem)
    issues: list[str] = field(default_factory=list)


@dataclass
class LocalPresenceData:
    business_name: Optional[str] = None
    google_business_profile: GoogleBusinessProfile = field(default_factory=GoogleBusinessProfile)
    google_maps: ListingStatus = field(default_factory=ListingStatus)
    bing_places: ListingStatus = field(default_factory=ListingStatus)
    apple_business_connect: ListingStatus = field(default_factory=ListingStatus)
    directories: list[DirectoryListing] = field(default_factory=list)
    nap_consistency: NapConsistency = field(default_factory=NapConsistency)
    phones: list[str] = field(default_factory=list)
    addresses: list[str] = field(default_factory=list)
    emails: list[str] = field(default_factory=list)
    issues: list[AuditIssue] = field(default_factory=list)


# ── Reviews ───────────────────────────────────────────────────────────────────
@dataclass
class ReviewPlatform:
    name: str
    url: Optional[str] = None
    rating: Optional[float] = None
    review_count: int = 0


@dataclass
class ReviewsOverall:
    average_rating: float = 0
    total_reviews: int = 0
    recent_reviews: int = 0           # last 30 days


@dataclass
class ReviewsData:
    overall: ReviewsOverall = field(default_factory=ReviewsOverall)
    platforms: list[ReviewPlatform] = field(default_factory=list)
    website_shows_reviews: bool = False
    testimonial_page: Optional[str] = None
    issues: list[AuditIssue] = field(default_factory=list)


# ── Accessibility ─────────────────────────────────────────────────────────────
@dataclass
class AccessibilityViolation:
    id: str
    impact: str                       # critical / serious / moderate / minor
    description: str
    help_url: str
    wcag_level: str                   # A / AA / AAA
    nodes: int
    recommendation: str


@dataclass
class AccessibilityLevelSummary:
    passed: int = 0
    failed: int = 0
    violations: list[str] = field(default_factory=list)


@dataclass
class AccessibilityData:
    score: int = 0
    wcag_level: Optional[str] = None  # A / AA / AAA, None when level A fails
    violations: list[AccessibilityViolation] = field(default_factory=list)
    level_a: AccessibilityLevelSummary = field(default_factory=AccessibilityLevelSummary)
    level_aa: AccessibilityLevelSummary = field(default_factory=AccessibilityLevelSummary)
    level_aaa: AccessibilityLevelSummary = field(default_factory=AccessibilityLevelSummary)
    issues: list[AuditIssue] = field(default_factory=list)


# ── Raw findings container ────────────────────────────────────────────────────
@dataclass
class AuditDetails:
    """
    Everything the analyzers produced for one page. A field is None only when
    its analyzer was switched off; a failed analyzer leaves its empty default.
    """
    fundamentals: Optional[FundamentalsData] = None
    seo: Optional[SeoData] = None
    social: Optional[SocialData] = None
    tech: Optional[TechData] = None
    local: Optional[LocalData] = None
    local_presence: Optional[LocalPresenceData] = None
    reviews: Optional[ReviewsData] = None
    advertising: Optional[AdvertisingData] = None
    ecommerce: Optional[EcommerceData] = None
    accessibility: Optional[AccessibilityData] = None
    scanner_issues: list[AuditIssue] = field(default_factory=list)


# ── Scores ────────────────────────────────────────────────────────────────────
@dataclass
class AuditScores:
    """Legacy nine-category scores. None marks a category that was not scanned."""
    overall: int = 0
    performance: Optional[int] = None
    seo: Optional[int] = None
    social: Optional[int] = None
    accessibility: Optional[int] = None
    local_presence: Optional[int] = None
    reviews: Optional[float] = None   # rating bonus is fractional
    advertising: Optional[int] = None
    ecommerce: Optional[int] = None
    security: Optional[int] = None


@dataclass
class NewAuditScores:
    overall: int
    performance: int
    visibility: int
    security: int
    accessibility: int
    trust: int


@dataclass
class ScoreBreakdowns:
    performance: ScoreBreakdown
    visibility: ScoreBreakdown
    security: ScoreBreakdown
    accessibility: ScoreBreakdown
    trust: ScoreBreakdown


# ── Facts ─────────────────────────────────────────────────────────────────────
@dataclass
class SiteFacts:
    url: str
    cms: Optional[str] = None
    server: Optional[str] = None
    is_https: bool = False
    has_hsts: bool = False
    mixed_content: bool = False
    technologies: list[TechnologyItem] = field(default_factory=list)
    cdns: list[str] = field(default_factory=list)
    security_headers: list[SecurityHeader] = field(default_factory=list)
    gdpr_compliance: dict[str, bool] = field(default_factory=dict)
    analytics: dict[str, Any] = field(default_factory=dict)
    advertising: dict[str, Any] = field(default_factory=dict)
    ecommerce: dict[str, Any] = field(default_factory=dict)


@dataclass
class SpeedFacts:
    lcp: Optional[float] = None
    cls: Optional[float] = None
    fcp: Optional[float] = None
    tbt: Optional[float] = None
    ttfb: Optional[float] = None
    si: Optional[float] = None
    tti: Optional[float] = None
    lighthouse_score: Optional[int] = None
    mobile: MobileInfo = field(default_factory=MobileInfo)
    opportunities: list[SpeedOpportunity] = field(default_factory=list)
    diagnostics: Optional[PerformanceDiagnostics] = None


@dataclass
class ContentFacts:
    title: Optional[str] = None
    title_length: int = 0
    description: Optional[str] = None
    description_length: int = 0
    canonical: Optional[str] = None
    language: Optional[str] = None
    h1_count: int = 0
    heading_structure: list[dict] = field(default_factory=list)
    word_count: int = 0
    reading_ease: float = 0
    reading_level: float = 0
    paragraph_count: int = 0
    avg_sentence_length: float = 0
    images: dict[str, Any] = field(default_factory=dict)
    links: dict[str, Any] = field(default_factory=dict)
    sitemap: dict[str, Any] = field(default_factory=dict)
    robots: dict[str, Any] = field(default_factory=dict)
    structured_data: list[dict] = field(default_factory=list)
    spelling_errors: list[SpellingError] = field(default_factory=list)


@dataclass
class PresenceFacts:
    business_name: Optional[str] = None
    phones: list[str] = field(default_factory=list)
    addresses: list[str] = field(default_factory=list)
    emails: list[str] = field(default_factory=list)
    google_business: dict[str, Any] = field(default_factory=dict)
    google_maps: dict[str, bool] = field(default_factory=dict)
    directories: list[dict] = field(default_factory=list)
    nap_consistency: dict[str, dict] = field(default_factory=dict)
    open_graph: OpenGraphData = field(default_factory=OpenGraphData)
    twitter_card: TwitterCardData = field(default_factory=TwitterCardData)
    social_profiles: dict[str, str] = field(default_factory=dict)
    reviews: dict[str, Any] = field(default_factory=dict)
    website_shows_reviews: bool = False
    testimonial_page: Optional[str] = None


@dataclass
class AuditFacts:
    site: SiteFacts
    speed: SpeedFacts
    content: ContentFacts
    presence: PresenceFacts


# ── Suggestions ───────────────────────────────────────────────────────────────
@dataclass
class Suggestion:
    id: str
    title: str
    description: str
    category: str                     # performance / visibility / security / accessibility / trust
    impact: str                       # high / medium / low
    effort: str                       # low / medium / high
    score_improvement: list[dict] = field(default_factory=list)   # [{category, points}]
    related_fact: Optional[str] = None    # dotted path into AuditFacts
    how_to_fix: Optional[str] = None


@dataclass
class AuditSuggestions:
    quick_wins: list[Suggestion] = field(default_factory=list)
    priority_fixes: list[Suggestion] = field(default_factory=list)
    nice_to_have: list[Suggestion] = field(default_factory=list)

    @property
    def all(self) -> list[Suggestion]:
        return self.quick_wins + self.priority_fixes + self.nice_to_have


@dataclass
class ImprovementSuggestion:
    category: str
    title: str
    description: str
    impact: str
    effort: str
    priority: int


@dataclass
class ReportSummary:
    total_issues: int
    critical_issues: int
    warning_issues: int
    top_issues: list[AuditIssue] = field(default_factory=list)
    strengths: list[str] = field(default_factory=list)
    improvements: list[ImprovementSuggestion] = field(default_factory=list)
    detailed_scores: Optional[DetailedScores] = None


# ── Screenshots ───────────────────────────────────────────────────────────────
@dataclass
class Screenshot:
    name: str
    width: int
    height: int
    data: bytes = field(repr=False, default=b"")


# ── Audit configuration ───────────────────────────────────────────────────────
@dataclass
class ScannerToggles:
    lighthouse: bool = True
    seo: bool = True
    social: bool = True
    tech: bool = True
    local: bool = True                # also gates local presence and reviews
    advertising: bool = True
    ecommerce: bool = True


@dataclass
class AuditConfig:
    url: str
    output: str = config.DEFAULT_OUTPUT_DIR
    formats: list[str] = field(default_factory=lambda: ["json"])
    device: str = "both"
    timeout: int = config.DEFAULT_NAVIGATION_TIMEOUT_MS
    deep: bool = False
    scanners: ScannerToggles = field(default_factory=ScannerToggles)

    def __post_init__(self):
        self.url = (self.url or "").strip()
        if not self.url:
            raise ValueError("URL is required")
        unknown = [f for f in self.formats if f not in config.OUTPUT_FORMATS]
        if unknown:
            raise ValueError(f"Unsupported format(s): {', '.join(unknown)}")
        if self.device not in config.DEVICE_CHOICES:
            raise ValueError(f"Unsupported device: {self.device}")


# ── Top-level audit result ────────────────────────────────────────────────────
@dataclass
class LegacyAuditResult:
    screenshots: dict[str, bytes]     # mobile / desktop
    scores: AuditScores
    summary: ReportSummary
    details: AuditDetails


@dataclass
class AuditResult:
    url: str
    screenshots: list[Screenshot]
    new_scores: NewAuditScores
    score_breakdowns: ScoreBreakdowns
    facts: AuditFacts
    suggestions: AuditSuggestions
    legacy: LegacyAuditResult


def _strip_bytes(value):
    # asdict copies plain dicts and lists without going through dict_factory
    if isinstance(value, dict):
        return {k: _strip_bytes(v) for k, v in value.items() if not isinstance(v, (bytes, bytearray))}
    if isinstance(value, list):
        return [_strip_bytes(v) for v in value if not isinstance(v, (bytes, bytearray))]
    return value


def to_dict(obj) -> dict:
    """dataclass -> plain dict, dropping raw screenshot bytes at any depth."""
    def _factory(items):
        return {k: _strip_bytes(v) for k, v in items if not isinstance(v, (bytes, bytearray))}
    return asdict(obj, dict_factory=_factory)
