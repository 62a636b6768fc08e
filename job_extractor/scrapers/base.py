"""
Shared scraping primitives — identity rotation, politeness delays and the
SelectorStrategy type every portal module fills in.
"""

import logging
import random
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from fake_useragent import UserAgent

from job_extractor import config

logger = logging.getLogger(__name__)

# Fields extracted from a search-results card
CARD_FIELDS = (
    "title", "company", "location", "salary", "description",
    "employment_type", "workplace_type", "posted_date",
)
# Fields extracted from a listing's own page
DETAIL_FIELDS = (
    "title", "company", "location", "salary", "description", "required_skills",
    "benefits", "experience_level", "employment_type", "workplace_type",
    "posted_date", "application_deadline", "company_description",
)


# ── Identity rotation ─────────────────────────────────────────────────────────
class IdentityPool:
    """Fixed, read-only set of user-agent strings; safe to share across threads."""

    def __init__(self, agents: Sequence[str]):
        agents = tuple(dict.fromkeys(a for a in agents if a))
        if not agents:
            raise ValueError("identity pool needs at least one user agent")
        self._agents: Tuple[str, ...] = agents

    def __len__(self) -> int:
        return len(self._agents)

    def __iter__(self):
        return iter(self._agents)

    def pick(self, rng: Optional[random.Random] = None) -> str:
        return (rng or random).choice(self._agents)


def build_identity_pool(size: int = None) -> IdentityPool:
    """Seed pool from config plus desktop agents sampled from fake-useragent."""
    size = config.IDENTITY_POOL_SIZE if size is None else size
    agents: List[str] = list(config.USER_AGENTS)
    ua = UserAgent(platforms="desktop")
    for _ in range(max(0, size - len(agents))):
        agents.append(ua.random)
    pool = IdentityPool(agents)
    logger.debug("Identity pool built with %d user agents", len(pool))
    return pool


_default_pool: Optional[IdentityPool] = None


def default_identity_pool() -> IdentityPool:
    global _default_pool
    if _default_pool is None:
        _default_pool = build_identity_pool()
    return _default_pool


def browser_headers(user_agent: str) -> Dict[str, str]:
    return {
        "User-Agent":      user_agent,
        "Accept":          "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.9",
    }


# ── Politeness ────────────────────────────────────────────────────────────────
class PolitenessDelay:
    """Base delay plus random jitter, slept through an injectable sleeper.

    Waits are serialized, so concurrent callers still start their requests at
    least one delay apart.
    """

    def __init__(self, base: float = None, jitter: float = None,
                 sleep: Callable[[float], None] = time.sleep,
                 rng: Optional[random.Random] = None):
        self.base = config.REQUEST_DELAY_MIN if base is None else base
        self.jitter = config.REQUEST_DELAY_JITTER if jitter is None else jitter
        self._sleep = sleep
        self._rng = rng or random.Random()
        self._lock = threading.Lock()

    def next_delay(self) -> float:
        return self.base + self._rng.uniform(0, self.jitter)

    def wait(self) -> float:
        with self._lock:
            delay = self.next_delay()
            if delay > 0:
                self._sleep(delay)
        return delay


# ── Selector strategies ───────────────────────────────────────────────────────
@dataclass(frozen=True)
class SelectorStrategy:
    """Ordered selector candidates for one portal.

    Field lists are already merged portal-first, generic-last; a candidate of
    the form ``"selector@attr"`` reads the attribute instead of the text.
    """

    portal: str
    card_groups: Tuple[Tuple[str, ...], ...]
    fields: Dict[str, Tuple[str, ...]]
    url_selectors: Tuple[str, ...] = ()
    detail_fields: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    job_link_hints: Tuple[str, ...] = ()

    def candidates(self, field_name: str) -> Tuple[str, ...]:
        return self.fields.get(field_name, ())

    def detail_candidates(self, field_name: str) -> Tuple[str, ...]:
        return self.detail_fields.get(field_name, ())


def make_strategy(portal: str, base: Optional[SelectorStrategy] = None,
                  card_groups: Sequence[Sequence[str]] = (),
                  fields: Dict[str, Sequence[str]] = None,
                  url_selectors: Sequence[str] = (),
                  detail_fields: Dict[str, Sequence[str]] = None,
                  job_link_hints: Sequence[str] = ()) -> SelectorStrategy:
    """Build a strategy whose candidates come before those of ``base``."""

    def merged(own: Dict[str, Sequence[str]], inherited: Dict[str, Tuple[str, ...]],
               names: Sequence[str]) -> Dict[str, Tuple[str, ...]]:
        own = own or {}
        out = {}
        for name in names:
            seq = list(own.get(name, ()))
            seq += [s for s in inherited.get(name, ()) if s not in seq]
            out[name] = tuple(seq)
        return out

    inherited_cards = base.card_groups if base else ()
    inherited_fields = base.fields if base else {}
    inherited_detail = base.detail_fields if base else {}
    inherited_urls = base.url_selectors if base else ()
    inherited_hints = base.job_link_hints if base else ()

    return SelectorStrategy(
        portal=portal,
        card_groups=tuple(tuple(g) for g in card_groups) + inherited_cards,
        fields=merged(fields, inherited_fields, CARD_FIELDS),
        url_selectors=tuple(url_selectors) + tuple(
            s for s in inherited_urls if s not in url_selectors),
        detail_fields=merged(detail_fields, inherited_detail, DETAIL_FIELDS),
        job_link_hints=tuple(job_link_hints) + tuple(
            h for h in inherited_hints if h not in job_link_hints),
    )
