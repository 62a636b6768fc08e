"""
Headless browser rendering — Playwright + playwright-stealth.

Each render owns its own browser process; browser_session() closes it on
every exit path, including KeyboardInterrupt.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from playwright.sync_api import sync_playwright
from playwright_stealth import Stealth

from job_extractor import config

logger = logging.getLogger(__name__)

_HEIGHT_JS = "document.body.scrollHeight"
_SCROLL_JS = "window.scrollTo(0, document.body.scrollHeight)"


@contextmanager
def browser_session(user_agent: str, headless: bool = None) -> Iterator:
    """Yield a fresh stealth-patched page; the browser is always closed."""
    headless = config.HEADLESS_BROWSER if headless is None else headless
    with sync_playwright() as pw:
        browser = pw.chromium.launch(headless=headless)
        try:
            context = browser.new_context(
                user_agent=user_agent,
                viewport={"width": 1280, "height": 800},
                locale="en-US",
            )
            Stealth().apply_stealth_sync(context)
            yield context.new_page()
        finally:
            browser.close()
            logger.debug("Browser session closed")


def scroll_until_stable(page, settle_ms: int = None, stable_rounds: int = None,
                        max_iterations: int = None) -> int:
    """Scroll to the bottom until the page height stops growing.

    Stops after ``stable_rounds`` consecutive iterations without growth or after
    ``max_iterations`` scrolls. Returns the number of scrolls performed.
    """
    settle_ms = config.SCROLL_SETTLE_MS if settle_ms is None else settle_ms
    stable_rounds = config.SCROLL_STABLE_ROUNDS if stable_rounds is None else stable_rounds
    max_iterations = config.SCROLL_MAX_ITERATIONS if max_iterations is None else max_iterations

    height = page.evaluate(_HEIGHT_JS)
    unchanged = 0
    iterations = 0
    while iterations < max_iterations and unchanged < stable_rounds:
        page.evaluate(_SCROLL_JS)
        page.wait_for_timeout(settle_ms)
        iterations += 1
        new_height = page.evaluate(_HEIGHT_JS)
        if new_height > height:
            unchanged = 0
            height = new_height
        else:
            unchanged += 1
    logger.debug("Scrolled %d time(s), final height %s", iterations, height)
    return iterations


def render(url: str, user_agent: str, timeout_ms: int = None, headless: bool = None) -> str:
    """Load url in a headless browser, trigger lazy loading, return the final HTML."""
    timeout_ms = config.PLAYWRIGHT_TIMEOUT if timeout_ms is None else timeout_ms
    with browser_session(user_agent, headless=headless) as page:
        page.goto(url, timeout=timeout_ms, wait_until="domcontentloaded")
        scroll_until_stable(page)
        return page.content()
