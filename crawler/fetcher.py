"""
Low-level HTTP helpers shared by the analyzers. Every helper takes an optional
requests.Session; failures surface as requests.RequestException and callers
decide what a failed probe means.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, Optional, TypeVar

import requests

from config import DEFAULT_USER_AGENT, MAX_CHECK_WORKERS


logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


def make_session(user_agent: str = DEFAULT_USER_AGENT) -> requests.Session:
    session = requests.Session()
    session.headers.update({"User-Agent": user_agent})
    return session


def _session(session: Optional[requests.Session]) -> requests.Session:
    return session if session is not None else make_session()


def head(
    url: str,
    timeout: float,
    session: Optional[requests.Session] = None,
) -> requests.Response:
    """
    HEAD request following redirects. Falls back to a streamed GET if the
    server answers 405 Method Not Allowed.
    """
    s = _session(session)
    resp = s.head(url, timeout=timeout, allow_redirects=True)
    if resp.status_code == 405:
        # HEAD not allowed, retry with GET
        resp = s.get(url, timeout=timeout, allow_redirects=True, stream=True)
        resp.close()
    return resp


def fetch_response(
    url: str,
    timeout: float,
    session: Optional[requests.Session] = None,
    headers: Optional[dict] = None,
) -> Optional[requests.Response]:
    """GET a URL; None on a 4xx/5xx answer."""
    resp = _session(session).get(url, timeout=timeout, headers=headers, allow_redirects=True)
    if not resp.ok:
        logger.debug("GET %s -> HTTP %s", url, resp.status_code)
        return None
    return resp


def fetch_text(
    url: str,
    timeout: float,
    session: Optional[requests.Session] = None,
    headers: Optional[dict] = None,
) -> Optional[str]:
    resp = fetch_response(url, timeout, session, headers)
    return resp.text if resp is not None else None


def fetch_headers(
    url: str,
    timeout: float,
    session: Optional[requests.Session] = None,
) -> dict[str, str]:
    """Response headers of a HEAD probe, lower-cased keys."""
    resp = head(url, timeout, session)
    return {k.lower(): v for k, v in resp.headers.items()}


def content_length(
    url: str,
    timeout: float,
    session: Optional[requests.Session] = None,
) -> Optional[int]:
    """Content-Length reported by a HEAD probe, None when absent or unparsable."""
    value = head(url, timeout, session).headers.get("content-length")
    try:
        return int(value) if value else None
    except ValueError:
        return None


def check_status(
    url: str,
    timeout: float,
    session: Optional[requests.Session] = None,
) -> tuple[int, str]:
    """
    Lightweight status probe for links.
    Returns (status_code, reason); connection failures raise.
    """
    resp = head(url, timeout, session)
    return resp.status_code, resp.reason or ""


def fan_out(
    func: Callable[[T], R],
    items: Iterable[T],
    max_workers: int = MAX_CHECK_WORKERS,
) -> list[R]:
    """
    Run func over items on a bounded thread pool and return results in input
    order. func is expected to handle its own exceptions.
    """
    items = list(items)
    if not items:
        return []
    with ThreadPoolExecutor(max_workers=min(max_workers, len(items))) as pool:
        return list(pool.map(func, items))
