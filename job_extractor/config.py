"""
Central configuration for the job extraction engine.
All user-facing settings live here; most can be overridden from the environment.
"""

import os
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


# ── Portals ────────────────────────────────────────────────────────────────────
# portal id → base search URL (used by build_search_url)
PORTAL_SEARCH_URLS = {
    "linkedin": os.getenv("LINKEDIN_SEARCH_URL", "https://www.linkedin.com/jobs/search"),
    "indeed":   os.getenv("INDEED_SEARCH_URL", "https://www.indeed.com/jobs"),
}

# Portals whose result pages lazy-load cards and need a headless browser
DYNAMIC_PORTALS = [
    p.strip() for p in os.getenv("DYNAMIC_PORTALS", "linkedin").split(",") if p.strip()
]

# ── Identity rotation ──────────────────────────────────────────────────────────
# Seed pool; extended with fake-useragent samples when the pool is built
USER_AGENTS = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.2 Safari/605.1.15",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:122.0) Gecko/20100101 Firefox/122.0",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36 Edg/120.0.2210.91",
]
IDENTITY_POOL_SIZE = int(os.getenv("IDENTITY_POOL_SIZE", "12"))

# ── Fetch Behaviour ────────────────────────────────────────────────────────────
REQUEST_TIMEOUT    = float(os.getenv("REQUEST_TIMEOUT", "15"))   # seconds
MAX_RETRIES        = int(os.getenv("MAX_RETRIES", "3"))          # total attempts
BACKOFF_BASE       = float(os.getenv("BACKOFF_BASE", "1.0"))     # seconds, doubled per attempt
RETRYABLE_STATUSES = (429, 500, 502, 503, 504)

HEADLESS_BROWSER      = _env_bool("HEADLESS_BROWSER", True)
PLAYWRIGHT_TIMEOUT    = 30_000   # ms
SCROLL_SETTLE_MS      = 1_500    # wait after each scroll
SCROLL_STABLE_ROUNDS  = 3        # no-growth iterations before we stop
SCROLL_MAX_ITERATIONS = 20       # hard cap for infinite scroll

# ── Crawl Behaviour ────────────────────────────────────────────────────────────
REQUEST_DELAY_MIN    = float(os.getenv("REQUEST_DELAY_MIN", "1.5"))     # seconds between requests
REQUEST_DELAY_JITTER = float(os.getenv("REQUEST_DELAY_JITTER", "2.0"))  # random extra on top
PAGE_SIZE            = 10     # offset step when a URL has no page parameter
ENRICH_DETAILS       = _env_bool("ENRICH_DETAILS", True)
DETAIL_WORKERS       = int(os.getenv("DETAIL_WORKERS", "1"))  # 1 = strictly sequential

# ── Logging ────────────────────────────────────────────────────────────────────
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE  = os.getenv("LOG_FILE", "")
