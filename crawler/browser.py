"""
Headless Chromium session used by one audit: page loading with https -> http
fallback, rendered HTML, and screenshots at several viewport sizes.

Chromium is started with a fixed remote-debugging port so Lighthouse can
attach to the same browser.
"""
from __future__ import annotations

import logging
import os
import re
from typing import Optional
from urllib.parse import urlparse

from playwright.sync_api import Browser, Error as PlaywrightError, Page, Playwright
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from config import (
    CHROMIUM_ARGS,
    DEFAULT_DEBUGGING_PORT,
    DEFAULT_NAVIGATION_TIMEOUT_MS,
    DEFAULT_VIEWPORTS,
    EMULATION_NAVIGATION_TIMEOUT_MS,
    EMULATION_SCALE_FACTOR,
    EMULATION_SETTLE_MS,
    RESIZE_SETTLE_MS,
)
from models import Screenshot


logger = logging.getLogger(__name__)

_HAS_SCHEME = re.compile(r"^https?://", re.I)


# ── Errors ────────────────────────────────────────────────────────────────────

class BrowserNotLaunchedError(RuntimeError):
    def __init__(self):
        super().__init__("Browser not launched. Call launch() first.")


class NavigationError(RuntimeError):
    """The page could not be loaded."""


class PageLoadTimeout(NavigationError):
    pass


class NetworkError(NavigationError):
    pass


class InvalidUrlError(NavigationError):
    pass


def normalize_url(url: str) -> str:
    """Trim and add https:// when no scheme is given."""
    trimmed = (url or "").strip()
    if not trimmed or _HAS_SCHEME.match(trimmed):
        return trimmed
    return f"https://{trimmed}"


def _validate(url: str) -> str:
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidUrlError(f"Invalid URL format: {url}")
    return url


def _map_navigation_error(exc: Exception, url: str, timeout: int) -> Exception:
    message = str(exc)
    if isinstance(exc, PlaywrightTimeoutError) or "timeout" in message.lower():
        return PageLoadTimeout(
            f"Page load timeout: {url} took longer than {timeout / 1000:g}s to load"
        )
    if "net::ERR" in message:
        return NetworkError(f"Network error: Unable to reach {url}")
    if "invalid url" in message.lower():
        return InvalidUrlError(f"Invalid URL format: {url}")
    return exc


# ── Browser manager ───────────────────────────────────────────────────────────

class BrowserManager:
    def __init__(self, port: int = DEFAULT_DEBUGGING_PORT, headless: bool = True):
        self.port = port
        self.headless = headless
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None

    def launch(self) -> None:
        self._playwright = sync_playwright().start()
        self._browser = self._playwright.chromium.launch(
            headless=self.headless,
            executable_path=os.environ.get("PLAYWRIGHT_CHROMIUM_EXECUTABLE_PATH") or None,
            args=[f"--remote-debugging-port={self.port}", *CHROMIUM_ARGS],
        )
        logger.debug("Chromium launched on debugging port %d", self.port)

    def get_port(self) -> int:
        return self.port

    def get_page(self, url: str, timeout: int = DEFAULT_NAVIGATION_TIMEOUT_MS) -> tuple[Page, str]:
        """
        Open a new page and load `url`. If the https:// load fails the http://
        variant is tried once; when both fail the first error is raised.
        Returns the page and the URL that actually loaded.
        """
        if self._browser is None:
            raise BrowserNotLaunchedError()

        normalized = normalize_url(url)
        logger.debug("get_page(%r) normalized to %r", url, normalized)

        page = self._browser.new_page()
        resolved = self._resolve_url(page, normalized, timeout)
        logger.debug("Resolved URL: %s", resolved)
        return page, resolved

    def _resolve_url(self, page: Page, url: str, timeout: int) -> str:
        try:
            self._navigate(page, url, timeout)
            return url
        except Exception as first:
            if not url.lower().startswith("https://"):
                raise
            http_url = "http://" + url[len("https://"):]
            logger.debug("https load failed (%s), retrying %s", first, http_url)
            try:
                self._navigate(page, http_url, timeout)
            except Exception:
                raise first
            return http_url

    @staticmethod
    def _navigate(page: Page, url: str, timeout: int) -> None:
        _validate(url)
        try:
            page.goto(url, wait_until="networkidle", timeout=timeout)
        except PlaywrightError as exc:
            mapped = _map_navigation_error(exc, url, timeout)
            if mapped is exc:
                raise
            raise mapped from exc

    def get_html(self, page: Page) -> str:
        return page.content()

    # ── Screenshots ───────────────────────────────────────────────────────────

    def capture_screenshot_buffers(
        self,
        page: Page,
        url: Optional[str] = None,
        viewports: Optional[list[dict]] = None,
    ) -> list[Screenshot]:
        """
        Full-page PNGs at each viewport, smallest width first. Emulated devices
        get a fresh context and page load; the others resize the current page.
        """
        current_url = url or page.url
        viewports = DEFAULT_VIEWPORTS if viewports is None else viewports
        screenshots: list[Screenshot] = []

        for vp in viewports:
            if vp.get("emulate"):
                continue
            page.set_viewport_size({"width": vp["width"], "height": vp["height"]})
            page.wait_for_timeout(RESIZE_SETTLE_MS)
            screenshots.append(Screenshot(
                name=vp["name"],
                width=vp["width"],
                height=vp["height"],
                data=page.screenshot(full_page=True),
            ))

        for vp in viewports:
            if vp.get("emulate"):
                screenshots.append(Screenshot(
                    name=vp["name"],
                    width=vp["width"],
                    height=vp["height"],
                    data=self._capture_emulated(current_url, vp),
                ))

        screenshots.sort(key=lambda s: s.width)
        return screenshots

    def _capture_emulated(self, url: str, viewport: dict) -> bytes:
        if self._browser is None or self._playwright is None:
            raise BrowserNotLaunchedError()

        device = self._playwright.devices[viewport["device"]] if viewport.get("device") else {}
        context = self._browser.new_context(**{
            **device,
            "viewport": {"width": viewport["width"], "height": viewport["height"]},
            "device_scale_factor": EMULATION_SCALE_FACTOR,
        })
        try:
            emulated = context.new_page()
            emulated.goto(url, wait_until="networkidle", timeout=EMULATION_NAVIGATION_TIMEOUT_MS)
            emulated.wait_for_timeout(EMULATION_SETTLE_MS)
            return emulated.screenshot(full_page=True)
        finally:
            context.close()

    def close(self) -> None:
        if self._browser is not None:
            self._browser.close()
            self._browser = None
        if self._playwright is not None:
            self._playwright.stop()
            self._playwright = None
