"""
Tests for the browser manager's URL handling and screenshot ordering. No
Chromium is started; pages are faked.
"""
import pytest
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from crawler.browser import (
    BrowserManager,
    BrowserNotLaunchedError,
    InvalidUrlError,
    NetworkError,
    PageLoadTimeout,
    _map_navigation_error,
    normalize_url,
)


class FakePage:
    """Records navigation and screenshot calls; `fail` maps URL -> error."""

    def __init__(self, fail=None):
        self.fail = fail or {}
        self.visited = []
        self.sizes = []
        self.url = "https://acme.test/"

    def goto(self, url, wait_until=None, timeout=None):
        self.visited.append(url)
        if url in self.fail:
            raise self.fail[url]

    def set_viewport_size(self, size):
        self.sizes.append(size)

    def wait_for_timeout(self, ms):
        pass

    def screenshot(self, full_page=False):
        return f"png-{self.sizes[-1]['width']}".encode()


class TestNormalizeUrl:
    @pytest.mark.parametrize("raw, expected", [
        ("example.com", "https://example.com"),
        ("  example.com/path  ", "https://example.com/path"),
        ("http://example.com", "http://example.com"),
        ("HTTPS://Example.com", "HTTPS://Example.com"),
        ("", ""),
    ])
    def test_normalize(self, raw, expected):
        assert normalize_url(raw) == expected


class TestNavigationErrors:
    def test_timeout(self):
        err = _map_navigation_error(PlaywrightTimeoutError("Timeout 60000ms exceeded"), "https://a.test", 60000)

        assert isinstance(err, PageLoadTimeout)
        assert str(err) == "Page load timeout: https://a.test took longer than 60s to load"

    def test_network(self):
        err = _map_navigation_error(PlaywrightError("net::ERR_NAME_NOT_RESOLVED"), "https://a.test", 1000)

        assert isinstance(err, NetworkError)
        assert str(err) == "Network error: Unable to reach https://a.test"

    def test_invalid_url(self):
        err = _map_navigation_error(PlaywrightError("Protocol error: Invalid URL"), "x", 1000)
        assert isinstance(err, InvalidUrlError)

    def test_other_errors_pass_through(self):
        original = PlaywrightError("Target closed")
        assert _map_navigation_error(original, "https://a.test", 1000) is original


class TestPageLoading:
    def test_requires_launch(self):
        with pytest.raises(BrowserNotLaunchedError):
            BrowserManager().get_page("example.com")

    def test_https_success(self):
        page = FakePage()
        assert BrowserManager()._resolve_url(page, "https://acme.test", 1000) == "https://acme.test"
        assert page.visited == ["https://acme.test"]

    def test_http_fallback(self):
        page = FakePage(fail={"https://acme.test": PlaywrightError("net::ERR_CONNECTION_REFUSED")})

        assert BrowserManager()._resolve_url(page, "https://acme.test", 1000) == "http://acme.test"
        assert page.visited == ["https://acme.test", "http://acme.test"]

    def test_both_fail_raises_first_error(self):
        page = FakePage(fail={
            "https://acme.test": PlaywrightError("net::ERR_CONNECTION_REFUSED"),
            "http://acme.test": PlaywrightTimeoutError("Timeout 1000ms exceeded"),
        })
        with pytest.raises(NetworkError):
            BrowserManager()._resolve_url(page, "https://acme.test", 1000)

    def test_http_url_is_not_retried(self):
        page = FakePage(fail={"http://acme.test": PlaywrightTimeoutError("Timeout 1000ms exceeded")})

        with pytest.raises(PageLoadTimeout):
            BrowserManager()._resolve_url(page, "http://acme.test", 1000)
        assert page.visited == ["http://acme.test"]

    def test_rejects_non_web_scheme(self):
        with pytest.raises(InvalidUrlError):
            BrowserManager()._resolve_url(FakePage(), "ftp://acme.test", 1000)


class TestScreenshots:
    VIEWPORTS = [
        {"name": "desktop", "width": 1920, "height": 1080, "emulate": False, "device": None},
        {"name": "mobile", "width": 390, "height": 844, "emulate": True, "device": "iPhone 14 Pro"},
        {"name": "small", "width": 600, "height": 800, "emulate": False, "device": None},
    ]

    def test_sorted_by_width(self, monkeypatch):
        browser = BrowserManager()
        monkeypatch.setattr(browser, "_capture_emulated", lambda url, vp: f"emulated-{vp['name']}".encode())

        shots = browser.capture_screenshot_buffers(FakePage(), "https://acme.test/", self.VIEWPORTS)

        assert [(s.name, s.width) for s in shots] == [("mobile", 390), ("small", 600), ("desktop", 1920)]
        assert shots[0].data == b"emulated-mobile"
        assert shots[2].data == b"png-1920"

    def test_page_url_used_by_default(self, monkeypatch):
        browser = BrowserManager()
        seen = []
        monkeypatch.setattr(browser, "_capture_emulated", lambda url, vp: seen.append(url) or b"")

        browser.capture_screenshot_buffers(FakePage(), viewports=self.VIEWPORTS[1:2])
        assert seen == ["https://acme.test/"]
