"""
Portal strategy table — portal id → SelectorStrategy.

Unknown portal ids resolve to the generic strategy; that is the table's
default entry, not an error.
"""

from typing import Dict, Optional
from urllib.parse import urlsplit

from job_extractor.scrapers.base import SelectorStrategy
from job_extractor.scrapers.generic import GENERIC
from job_extractor.scrapers.indeed import INDEED
from job_extractor.scrapers.linkedin import LINKEDIN

STRATEGIES: Dict[str, SelectorStrategy] = {
    "linkedin": LINKEDIN,
    "indeed":   INDEED,
    "generic":  GENERIC,
}

_HOST_HINTS = (
    ("linkedin.", "linkedin"),
    ("indeed.", "indeed"),
)


def resolve_portal(portal_id: Optional[str]) -> str:
    key = (portal_id or "").strip().lower()
    return key if key in STRATEGIES else "generic"


def get_strategy(portal_id: Optional[str]) -> SelectorStrategy:
    return STRATEGIES[resolve_portal(portal_id)]


def portal_for_url(url: str) -> str:
    """Guess the portal id from a URL's host; generic when nothing matches."""
    host = urlsplit(url).netloc.lower()
    for hint, portal in _HOST_HINTS:
        if hint in host:
            return portal
    return "generic"
