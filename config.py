"""
Global configuration constants for the page audit engine.
All tunable thresholds and weight tables live here.
"""

# ── Meta thresholds ───────────────────────────────────────────────────────────
TITLE_MIN_CHARS = 30
TITLE_MAX_CHARS = 60
DESCRIPTION_MIN_CHARS = 120
DESCRIPTION_MAX_CHARS = 160

# ── Content thresholds ────────────────────────────────────────────────────────
THIN_CONTENT_WORD_COUNT = 300
MAX_SPELLING_ERRORS = 20
POOR_READING_EASE = 30

# ── Image / link checks ───────────────────────────────────────────────────────
OVERSIZED_IMAGE_BYTES = 200 * 1024       # 200 KB
IMAGE_CHECK_TIMEOUT = 5                  # seconds
LINK_CHECK_TIMEOUT = 10                  # seconds
MAX_LINKS_CHECKED = 50
HEADER_PROBE_TIMEOUT = 10                # seconds
GBP_VALIDATION_TIMEOUT = 5               # seconds
ROBOTS_TIMEOUT = 10                      # seconds
SITEMAP_TIMEOUT = 10                     # seconds
MAX_CHECK_WORKERS = 10

SITEMAP_CANDIDATES = [
    "/sitemap.xml",
    "/sitemap_index.xml",
    "/sitemap/sitemap.xml",
]

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (compatible; PageAuditBot/1.0; +https://github.com/page-audit)"
)

# ── Browser ───────────────────────────────────────────────────────────────────
DEFAULT_DEBUGGING_PORT = 9222
DEFAULT_NAVIGATION_TIMEOUT_MS = 60000
EMULATION_NAVIGATION_TIMEOUT_MS = 30000
EMULATION_SETTLE_MS = 500
RESIZE_SETTLE_MS = 300
EMULATION_SCALE_FACTOR = 2

CHROMIUM_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
]

# name, width, height, device emulation, playwright device descriptor
DEFAULT_VIEWPORTS: list[dict] = [
    {"name": "mobile",  "width": 390,  "height": 844,  "emulate": True,  "device": "iPhone 14 Pro"},
    {"name": "tablet",  "width": 834,  "height": 1194, "emulate": True,  "device": "iPad Pro 11"},
    {"name": "desktop", "width": 1920, "height": 1080, "emulate": False, "device": None},
]

# ── Lighthouse ────────────────────────────────────────────────────────────────
LIGHTHOUSE_BIN = "lighthouse"
LIGHTHOUSE_TIMEOUT = 180                 # seconds

# ── Core Web Vitals (official Google thresholds) ──────────────────────────────
CWV_THRESHOLDS: dict[str, dict[str, float]] = {
    "lcp":  {"good": 2500, "poor": 4000},
    "cls":  {"good": 0.1,  "poor": 0.25},
    "tbt":  {"good": 200,  "poor": 600},
    "fcp":  {"good": 1800, "poor": 3000},
    "si":   {"good": 3400, "poor": 5800},
    "ttfb": {"good": 800,  "poor": 1800},
    "tti":  {"good": 3800, "poor": 7300},
}

# Share of the Lighthouse performance score each metric carries
LIGHTHOUSE_WEIGHTS: dict[str, float] = {
    "tbt":  0.30,
    "lcp":  0.25,
    "cls":  0.25,
    "fcp":  0.10,
    "si":   0.10,
    "ttfb": 0.0,
    "tti":  0.0,
}

# ── Scoring weights ───────────────────────────────────────────────────────────
# Legacy nine-category table. Does not sum to 1; the overall score divides
# by the weights of the categories actually present.
SCORE_WEIGHTS: dict[str, float] = {
    "performance":   0.25,
    "seo":           0.20,
    "accessibility": 0.15,
    "social":        0.10,
    "security":      0.15,
    "localPresence": 0.05,
    "reviews":       0.05,
    "advertising":   0.025,
    "ecommerce":     0.025,
}

# Five-category table (sums to exactly 1.0)
NEW_SCORE_WEIGHTS: dict[str, float] = {
    "performance":   0.25,
    "visibility":    0.25,
    "security":      0.20,
    "accessibility": 0.15,
    "trust":         0.15,
}

VISIBILITY_MIX = {"seo": 0.7, "localPresence": 0.3}
TRUST_MIX = {"social": 0.4, "reviews": 0.6}

# ── Security headers expected ─────────────────────────────────────────────────
EXPECTED_SECURITY_HEADERS: list[tuple[str, str]] = [
    ("Strict-Transport-Security", "Add HSTS header to enforce HTTPS"),
    ("X-Content-Type-Options",    "Add 'nosniff' to prevent MIME sniffing"),
    ("X-Frame-Options",           "Add 'DENY' or 'SAMEORIGIN' to prevent clickjacking"),
    ("Content-Security-Policy",   "Configure CSP to prevent XSS attacks"),
    ("X-XSS-Protection",          "Add '1; mode=block' for legacy browser XSS protection"),
    ("Referrer-Policy",           "Control referrer information sent with requests"),
]

# ── Output ────────────────────────────────────────────────────────────────────
DEFAULT_OUTPUT_DIR = "./reports"
REPORT_VERSION = 1
OUTPUT_FORMATS = ["json", "html", "pdf"]
DEVICE_CHOICES = ["mobile", "desktop", "both"]
SCANNER_NAMES = ["lighthouse", "seo", "social", "tech", "local", "advertising", "ecommerce"]
