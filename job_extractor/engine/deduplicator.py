"""
Deduplicator — removes repeated job cards within a page and repeated
records across the pages of one crawl.

  Cards:   signature = normalized "title|company", or the first 100 chars of
           the card text when both are missing; first occurrence wins.
  Records: MD5 of (title + company + url); first occurrence wins.
"""

import hashlib
import logging
import re
from typing import Dict, List, Sequence

from bs4 import Tag

from job_extractor.engine.extractor import FieldExtractor
from job_extractor.engine.normalizer import clean_text
from job_extractor.models import JobRecord

logger = logging.getLogger(__name__)

_SIGNATURE_TEXT_LEN = 100
_SPACE_RE = re.compile(r"\s+")


def _norm(text: str) -> str:
    return _SPACE_RE.sub(" ", clean_text(text)).lower().strip()


def card_signature(card: Tag, extractor: FieldExtractor) -> str:
    title = _norm(extractor.extract_field(card, "title"))
    company = _norm(extractor.extract_field(card, "company"))
    if title or company:
        return f"{title}|{company}"
    return _norm(card.get_text(" ", strip=True))[:_SIGNATURE_TEXT_LEN]


class Deduplicator:
    def __init__(self, extractor: FieldExtractor = None):
        self._extractor = extractor

    # ── Cards ─────────────────────────────────────────────────────────────────
    def unique_cards(self, cards: Sequence[Tag]) -> List[Tag]:
        seen: Dict[str, Tag] = {}
        for card in cards:
            sig = card_signature(card, self._extractor)
            if sig not in seen:
                seen[sig] = card
        if len(seen) != len(cards):
            logger.debug("Card dedup: %d → %d", len(cards), len(seen))
        return list(seen.values())

    # ── Records ───────────────────────────────────────────────────────────────
    def deduplicate(self, records: Sequence[JobRecord]) -> List[JobRecord]:
        seen: Dict[str, JobRecord] = {}
        for record in records:
            key = self._make_key(record)
            if key not in seen:
                seen[key] = record
        unique = list(seen.values())
        if len(unique) != len(records):
            logger.info("Dedup: %d → %d records", len(records), len(unique))
        return unique

    @staticmethod
    def _make_key(record: JobRecord) -> str:
        raw = "|".join([
            record.title.lower().strip(),
            record.company.lower().strip(),
            record.url.lower().strip(),
        ])
        return hashlib.md5(raw.encode()).hexdigest()
