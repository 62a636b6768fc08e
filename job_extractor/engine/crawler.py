"""
Crawler — pagination and detail-enrichment orchestrator.

Per crawl:
  IDLE → FETCHING_LIST → EXTRACTING_CARDS → ENRICHING_DETAILS → (next page …) → DONE
                                                                     ↘ FAILED (configuration only)
                                                                     ↘ CANCELLED (cancel() honoured)

  1. Fetch results page p (page parameter rewritten or offset appended)
  2. Locate cards, extract + normalize fields, build partial JobRecords
  3. Fetch each record's detail page and merge the detail fields
  4. Politeness delay between every page fetch and every detail fetch

Fetch failures skip the page/detail they belong to; only ConfigurationError
and CrawlCancelled reach the caller.
"""

import logging
import random
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from typing import Callable, List, Optional
from urllib.parse import parse_qsl, quote_plus, urlencode, urlsplit, urlunsplit

from job_extractor import config
from job_extractor.engine.card_locator import CardLocator
from job_extractor.engine.deduplicator import Deduplicator
from job_extractor.engine.extractor import FieldExtractor, parse_html
from job_extractor.exceptions import (
    ConfigurationError, CrawlCancelled, FetchError, InvalidRecordError,
)
from job_extractor.models import ExtractionContext, JobRecord, RawDocument
from job_extractor.scrapers import get_strategy, portal_for_url, resolve_portal
from job_extractor.scrapers.base import PolitenessDelay
from job_extractor.scrapers.fetcher import Fetcher

logger = logging.getLogger(__name__)

_PAGE_PARAMS = ("page", "p")
_OFFSET_PARAM = "start"


class CrawlState(str, Enum):
    IDLE              = "idle"
    FETCHING_LIST     = "fetching_list"
    EXTRACTING_CARDS  = "extracting_cards"
    ENRICHING_DETAILS = "enriching_details"
    DONE              = "done"
    FAILED            = "failed"
    CANCELLED         = "cancelled"


# ── URL helpers ───────────────────────────────────────────────────────────────
def validate_target_url(url: str) -> str:
    """Return a usable absolute http(s) URL or raise ConfigurationError."""
    url = (url or "").strip()
    if not url:
        raise ConfigurationError("target URL is empty")
    if "://" not in url:
        url = "https://" + url
    try:
        parts = urlsplit(url)
    except ValueError as exc:
        raise ConfigurationError(f"invalid target URL {url!r}: {exc}") from exc
    if parts.scheme not in ("http", "https") or not parts.netloc or " " in parts.netloc:
        raise ConfigurationError(f"invalid target URL {url!r}")
    return url


def build_page_url(base_url: str, page: int, page_size: int = None) -> str:
    """URL of results page ``page`` (1-based)."""
    page_size = config.PAGE_SIZE if page_size is None else page_size
    parts = urlsplit(base_url)
    query = parse_qsl(parts.query, keep_blank_values=True)
    names = [k for k, _ in query]

    page_param = next((p for p in _PAGE_PARAMS if p in names), None)
    if page_param:
        query = [(k, str(page) if k == page_param else v) for k, v in query]
    elif _OFFSET_PARAM in names:
        offset = str((page - 1) * page_size)
        query = [(k, offset if k == _OFFSET_PARAM else v) for k, v in query]
    else:
        query.append((_OFFSET_PARAM, str((page - 1) * page_size)))
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(query), parts.fragment))


def build_search_url(portal_id: str, keywords: str, location: str = "") -> str:
    portal = (portal_id or "").strip().lower()
    base = config.PORTAL_SEARCH_URLS.get(portal)
    if not base:
        raise ConfigurationError(f"no search URL configured for portal {portal_id!r}")
    if portal == "indeed":
        params = f"q={quote_plus(keywords)}&l={quote_plus(location)}"
    else:
        params = f"keywords={quote_plus(keywords)}&location={quote_plus(location)}"
    return base + ("&" if "?" in base else "?") + params


# ── Crawler ───────────────────────────────────────────────────────────────────
class Crawler:
    def __init__(self, fetcher: Optional[Fetcher] = None,
                 delay_min: float = None, delay_jitter: float = None,
                 sleep: Callable[[float], None] = time.sleep,
                 rng: Optional[random.Random] = None,
                 enrich_details: bool = None, detail_workers: int = None,
                 dynamic: Optional[bool] = None):
        self._rng = rng or random.Random()
        self.fetcher = fetcher or Fetcher(sleep=sleep, rng=random.Random(self._rng.random()))
        self.politeness = PolitenessDelay(delay_min, delay_jitter, sleep=sleep, rng=self._rng)
        self.enrich_details = config.ENRICH_DETAILS if enrich_details is None else enrich_details
        self.detail_workers = max(1, config.DETAIL_WORKERS if detail_workers is None else detail_workers)
        self.dynamic = dynamic
        self.state = CrawlState.IDLE
        self._cancel = threading.Event()

    # ── Public API ────────────────────────────────────────────────────────────
    def cancel(self) -> None:
        self._cancel.set()

    def scrape(self, portal_id: str, url: str) -> List[JobRecord]:
        """Extract (and enrich) the listings of a single results page."""
        return self._crawl(portal_id, url, pages=None)

    def scrape_multiple_pages(self, base_url: str, page_count: int,
                              portal_id: str = None) -> List[JobRecord]:
        if not isinstance(page_count, int) or page_count < 1:
            self.state = CrawlState.FAILED
            raise ConfigurationError(f"page_count must be >= 1, got {page_count!r}")
        return self._crawl(portal_id, base_url, pages=page_count)

    # ── State machine ─────────────────────────────────────────────────────────
    def _crawl(self, portal_id: Optional[str], url: str, pages: Optional[int]) -> List[JobRecord]:
        self._cancel.clear()
        try:
            url = validate_target_url(url)
        except ConfigurationError:
            self.state = CrawlState.FAILED
            raise
        portal = resolve_portal(portal_id) if portal_id else portal_for_url(url)
        strategy = get_strategy(portal)
        dynamic = self.dynamic if self.dynamic is not None else portal in config.DYNAMIC_PORTALS

        page_urls = [url] if pages is None else [build_page_url(url, p) for p in range(1, pages + 1)]
        records: List[JobRecord] = []
        try:
            for i, page_url in enumerate(page_urls, start=1):
                self._check_cancelled()
                if i > 1:
                    self.politeness.wait()
                logger.info("%s: page %d/%d %s", portal, i, len(page_urls), page_url[:100])
                records.extend(self._crawl_page(portal, strategy, page_url, dynamic))
        except CrawlCancelled:
            self.state = CrawlState.CANCELLED
            raise

        if pages is not None:
            records = Deduplicator().deduplicate(records)
        self.state = CrawlState.DONE
        logger.info("%s: crawl finished with %d records", portal, len(records))
        return records

    def _crawl_page(self, portal, strategy, page_url: str, dynamic: bool) -> List[JobRecord]:
        self.state = CrawlState.FETCHING_LIST
        try:
            doc = self.fetcher.fetch(page_url, needs_dynamic_render=dynamic)
        except FetchError as exc:
            logger.warning("%s: skipping page %s — %s", portal, page_url[:100], exc)
            return []

        self.state = CrawlState.EXTRACTING_CARDS
        partial = self.extract_records(portal, doc)
        logger.info("%s: %d records on %s", portal, len(partial), page_url[:100])

        if not self.enrich_details or not partial:
            return partial
        self.state = CrawlState.ENRICHING_DETAILS
        return self._enrich_all(portal, strategy, partial)

    # ── Extraction ────────────────────────────────────────────────────────────
    def extract_records(self, portal_id: str, doc: RawDocument) -> List[JobRecord]:
        """Cards → normalized fields → valid JobRecords (invalid cards dropped)."""
        portal = resolve_portal(portal_id)
        strategy = get_strategy(portal)
        context = ExtractionContext(url=doc.url, portal=portal, base_uri=doc.url,
                                    user_agent=doc.user_agent)
        extractor = FieldExtractor(strategy)
        soup = parse_html(doc.html)
        records = []
        for card in CardLocator(strategy, extractor).locate(soup):
            fields = extractor.extract_card(card, context)
            try:
                records.append(JobRecord.from_fields(fields))
            except InvalidRecordError as exc:
                logger.debug("%s: dropped card (%s)", portal, exc)
        return records

    # ── Enrichment ────────────────────────────────────────────────────────────
    def _enrich_all(self, portal, strategy, partial: List[JobRecord]) -> List[JobRecord]:
        if self.detail_workers == 1:
            return [self._enrich(portal, strategy, record) for record in partial]
        with ThreadPoolExecutor(max_workers=self.detail_workers) as pool:
            return list(pool.map(lambda r: self._enrich(portal, strategy, r), partial))

    def _enrich(self, portal, strategy, record: JobRecord) -> JobRecord:
        if not record.url:
            return record
        self._check_cancelled()
        self.politeness.wait()
        try:
            doc = self.fetcher.fetch(record.url)
        except FetchError as exc:
            logger.warning("%s: detail fetch failed for '%s': %s", portal, record.title, exc)
            return record
        context = ExtractionContext(url=doc.url, portal=portal, base_uri=doc.url,
                                    user_agent=doc.user_agent)
        detail = FieldExtractor(strategy).extract_detail(parse_html(doc.html), context)
        return record.merge_detail(detail)

    def _check_cancelled(self) -> None:
        if self._cancel.is_set():
            logger.info("Crawl cancelled")
            raise CrawlCancelled("crawl cancelled")
