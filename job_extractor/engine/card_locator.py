"""
Card Locator — finds the repeating "job card" elements of a results page.

All container-selector groups of the strategy are applied and their matches
unioned in document order. Overlapping matches are then merged:

  1. list wrappers go: a match whose direct child matches include two
     alike listings (same tag, a shared class, each with a title plus a
     company or link);
  2. of nested matches only the outermost survives;
  3. cards sharing a signature collapse to the first one seen.
"""

import logging
from typing import Dict, List

from bs4 import BeautifulSoup, Tag

from job_extractor.engine.deduplicator import Deduplicator
from job_extractor.engine.extractor import FieldExtractor, select
from job_extractor.exceptions import ParseError
from job_extractor.scrapers.base import SelectorStrategy

logger = logging.getLogger(__name__)


class CardLocator:
    def __init__(self, strategy: SelectorStrategy, extractor: FieldExtractor = None):
        self.strategy = strategy
        self.extractor = extractor or FieldExtractor(strategy)
        self._dedup = Deduplicator(self.extractor)

    def locate(self, soup: BeautifulSoup) -> List[Tag]:
        matches = self._union(soup)
        cards = self._merge_overlaps(matches)
        cards = self._dedup.unique_cards(cards)
        logger.debug("%s: %d raw matches → %d cards",
                     self.strategy.portal, len(matches), len(cards))
        return cards

    # ------------------------------------------------------------------
    def _union(self, soup: BeautifulSoup) -> List[Tag]:
        found: Dict[int, Tag] = {}
        for group in self.strategy.card_groups:
            for selector in group:
                try:
                    for el in select(soup, selector):
                        found.setdefault(id(el), el)
                except ParseError as exc:
                    logger.debug("%s: %s", self.strategy.portal, exc)
        order = {id(el): i for i, el in enumerate(soup.find_all(True))}
        return sorted(found.values(), key=lambda el: order.get(id(el), 0))

    def _merge_overlaps(self, matches: List[Tag]) -> List[Tag]:
        current = list(matches)
        while True:
            ancestors = _matched_ancestors(current)
            wrappers = {id(el) for el in current if self._is_wrapper(el, current, ancestors)}
            if not wrappers:
                break
            current = [el for el in current if id(el) not in wrappers]
        return [el for el in current if not ancestors[id(el)]]

    def _is_wrapper(self, el: Tag, matches: List[Tag], ancestors) -> bool:
        children = [m for m in matches if ancestors[id(m)] and ancestors[id(m)][0] is el]
        listings = [m for m in children if self._is_listing(m)]
        for i, a in enumerate(listings):
            for b in listings[i + 1:]:
                if _alike(a, b):
                    return True
        return False

    def _is_listing(self, el: Tag) -> bool:
        title = self.extractor.extract_field(el, "title")
        if not title:
            return False
        return bool(self.extractor.extract_field(el, "company")
                    or self.extractor.extract_url(el, title))


def _alike(a: Tag, b: Tag) -> bool:
    """Repeated cards share a tag and at least one class (or both have none)."""
    if a.name != b.name:
        return False
    classes_a, classes_b = set(a.get("class", [])), set(b.get("class", []))
    if not classes_a and not classes_b:
        return True
    return bool(classes_a & classes_b)


def _matched_ancestors(matches: List[Tag]):
    """id(match) → matched ancestors, nearest first."""
    ids = {id(el) for el in matches}
    return {id(el): [p for p in el.parents if id(p) in ids] for el in matches}
