"""
Fetcher — raw page retrieval for the crawler.

Static pages go through a requests.Session; JavaScript-heavy pages are
rendered in a per-call headless browser. Both paths retry transient failures
with exponential backoff and end in FetchError when retries run out.
"""

import logging
import random
import threading
import time
from typing import Callable, Optional

import requests
from playwright.sync_api import Error as PlaywrightError

from job_extractor import config
from job_extractor.exceptions import FetchError, FetchErrorKind
from job_extractor.models import RawDocument
from job_extractor.scrapers import browser
from job_extractor.scrapers.base import IdentityPool, browser_headers, default_identity_pool

logger = logging.getLogger(__name__)


class _Retryable(Exception):
    def __init__(self, reason: str, status: Optional[int] = None):
        super().__init__(reason)
        self.status = status


class _Fatal(_Retryable):
    """Failure that another attempt cannot fix (e.g. HTTP 404)."""

    def __init__(self, reason: str, kind: FetchErrorKind, status: Optional[int] = None):
        super().__init__(reason, status)
        self.kind = kind


class Fetcher:
    """Retrieves pages with retries; safe to share between detail workers.

    Without an injected session each thread gets its own requests.Session;
    an injected session is used as-is by every thread.
    Identity picks from the shared rng are serialized.
    """

    def __init__(self, session: Optional[requests.Session] = None,
                 identities: Optional[IdentityPool] = None,
                 timeout: float = None, max_retries: int = None,
                 backoff_base: float = None,
                 sleep: Callable[[float], None] = time.sleep,
                 rng: Optional[random.Random] = None,
                 renderer: Callable[[str, str], str] = None):
        self._session = session
        self._local = threading.local()
        self._lock = threading.Lock()
        self._identities = identities
        self.timeout = config.REQUEST_TIMEOUT if timeout is None else timeout
        self.max_retries = max(1, config.MAX_RETRIES if max_retries is None else max_retries)
        self.backoff_base = config.BACKOFF_BASE if backoff_base is None else backoff_base
        self._sleep = sleep
        self._rng = rng or random.Random()
        self._render = renderer or browser.render

    @property
    def identities(self) -> IdentityPool:
        if self._identities is None:
            with self._lock:
                if self._identities is None:
                    self._identities = default_identity_pool()
        return self._identities

    @property
    def session(self) -> requests.Session:
        if self._session is not None:
            return self._session
        session = getattr(self._local, "session", None)
        if session is None:
            session = self._local.session = requests.Session()
        return session

    def _pick_identity(self) -> str:
        pool = self.identities
        with self._lock:
            return pool.pick(self._rng)

    # ------------------------------------------------------------------
    def fetch(self, url: str, needs_dynamic_render: bool = False) -> RawDocument:
        if needs_dynamic_render:
            return self._with_retries(url, self._fetch_rendered, FetchErrorKind.BROWSER)
        return self._with_retries(url, self._fetch_static, FetchErrorKind.NETWORK)

    def backoff_delay(self, attempt: int) -> float:
        return self.backoff_base * (2 ** (attempt - 1))

    # ------------------------------------------------------------------
    def _with_retries(self, url: str, attempt_fn, kind: FetchErrorKind) -> RawDocument:
        last: Optional[_Retryable] = None
        for attempt in range(1, self.max_retries + 1):
            user_agent = self._pick_identity()
            try:
                return attempt_fn(url, user_agent)
            except _Fatal as exc:
                raise FetchError(url, exc.kind, attempt, status=exc.status, reason=str(exc)) from exc
            except _Retryable as exc:
                last = exc
                if attempt < self.max_retries:
                    delay = self.backoff_delay(attempt)
                    logger.warning(
                        "GET %s attempt %d/%d failed (%s); retrying in %.1fs",
                        url[:80], attempt, self.max_retries, exc, delay,
                    )
                    self._sleep(delay)
        logger.warning("GET %s gave up after %d attempts: %s", url[:80], self.max_retries, last)
        raise FetchError(url, kind, self.max_retries,
                         status=last.status if last else None,
                         reason=str(last) if last else "")

    def _fetch_static(self, url: str, user_agent: str) -> RawDocument:
        try:
            r = self.session.get(url, headers=browser_headers(user_agent), timeout=self.timeout)
        except (requests.Timeout, requests.ConnectionError) as exc:
            raise _Retryable(type(exc).__name__) from exc
        except requests.RequestException as exc:
            raise _Fatal(str(exc), FetchErrorKind.NETWORK) from exc

        if r.status_code in config.RETRYABLE_STATUSES:
            raise _Retryable(f"HTTP {r.status_code}", status=r.status_code)
        if not 200 <= r.status_code < 300:
            raise _Fatal(f"HTTP {r.status_code}", FetchErrorKind.HTTP, status=r.status_code)
        return RawDocument(url=r.url or url, html=r.text, status=r.status_code,
                           user_agent=user_agent)

    def _fetch_rendered(self, url: str, user_agent: str) -> RawDocument:
        try:
            html = self._render(url, user_agent)
        except PlaywrightError as exc:
            raise _Retryable(str(exc).splitlines()[0] if str(exc) else type(exc).__name__) from exc
        return RawDocument(url=url, html=html, user_agent=user_agent, rendered=True)
