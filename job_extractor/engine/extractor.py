"""
Field Extractor — ordered selector candidates, first non-empty match wins.

Candidate lists come from the portal's SelectorStrategy (portal-specific
selectors first, generic ones last). A selector that blows up on odd markup
only costs that one candidate; the field falls through to the next one and
ultimately to "".
"""

import logging
import re
from typing import Dict, Iterable, List, Optional

from bs4 import BeautifulSoup, Tag

from job_extractor.engine.normalizer import (
    clean_text, normalize_experience, normalize_url, parse_salary_range,
)
from job_extractor.exceptions import ParseError
from job_extractor.models import ExtractionContext
from job_extractor.scrapers.base import CARD_FIELDS, DETAIL_FIELDS, SelectorStrategy

logger = logging.getLogger(__name__)

_PLACEHOLDER_RE = re.compile(r"^[\s*•·]*$")
_WORD_RE        = re.compile(r"[a-z0-9]{3,}")
_SKIP_HREFS     = ("javascript:", "mailto:", "tel:", "#")
_ATTR_SUFFIX_RE = re.compile(r"(.+)@([\w-]+)")
_CANONICAL_SELECTORS = ("link[rel=canonical]@href", "meta[property='og:url']@content")


def is_placeholder(text: str) -> bool:
    return bool(_PLACEHOLDER_RE.match(text or ""))


def select(node: Tag, selector: str) -> List[Tag]:
    try:
        return node.select(selector)
    except Exception as exc:
        raise ParseError(f"selector {selector!r} failed: {exc}") from exc


def _split_candidate(candidate: str):
    m = _ATTR_SUFFIX_RE.fullmatch(candidate)
    if m:
        return m.group(1), m.group(2)
    return candidate, None


def _node_text(el: Tag, attr: Optional[str]) -> str:
    if attr:
        value = el.get(attr, "")
        if isinstance(value, list):
            value = " ".join(value)
        return (value or "").strip()
    return el.get_text(" ", strip=True)


class FieldExtractor:
    def __init__(self, strategy: SelectorStrategy):
        self.strategy = strategy

    # ------------------------------------------------------------------
    def first_non_empty(self, node: Tag, candidates: Iterable[str]) -> str:
        for candidate in candidates:
            selector, attr = _split_candidate(candidate)
            try:
                for el in select(node, selector)[:1]:
                    text = _node_text(el, attr)
                    if text and not is_placeholder(text):
                        return text
            except ParseError as exc:
                logger.debug("%s: %s", self.strategy.portal, exc)
        return ""

    def extract_field(self, node: Tag, field_name: str) -> str:
        return self.first_non_empty(node, self.strategy.candidates(field_name))

    def extract_detail_field(self, node: Tag, field_name: str) -> str:
        return self.first_non_empty(node, self.strategy.detail_candidates(field_name))

    # ------------------------------------------------------------------
    def extract_url(self, card: Tag, title: str = "") -> str:
        """Pick the card's listing link (un-normalized)."""
        href = self._href_from(card, self.strategy.url_selectors)
        if href:
            return href

        links = self._links(card)
        for a in links:
            if any(hint in a["href"].lower() for hint in self.strategy.job_link_hints):
                return a["href"].strip()

        title_words = set(_WORD_RE.findall(title.lower()))
        if title_words:
            for a in links:
                text = a.get_text(" ", strip=True).lower()
                if title.lower() in text or title_words & set(_WORD_RE.findall(text)):
                    return a["href"].strip()

        return links[0]["href"].strip() if links else ""

    def _href_from(self, card: Tag, selectors: Iterable[str]) -> str:
        for selector in selectors:
            try:
                for a in select(card, selector):
                    href = (a.get("href") or "").strip()
                    if _usable_href(href):
                        return href
            except ParseError as exc:
                logger.debug("%s: %s", self.strategy.portal, exc)
        return ""

    @staticmethod
    def _links(card: Tag) -> List[Tag]:
        links = [card] if card.name == "a" and card.get("href") else []
        links += card.find_all("a", href=True)
        return [a for a in links if _usable_href(a["href"].strip())]

    # ------------------------------------------------------------------
    def extract_card(self, card: Tag, context: ExtractionContext) -> Dict[str, str]:
        """Normalized list-page fields for one card."""
        raw = {name: self._safe(self.extract_field, card, name) for name in CARD_FIELDS}
        fields = _normalize(raw)
        fields["url"] = normalize_url(self.extract_url(card, fields["title"]), context.base_uri)
        return fields

    def extract_detail(self, soup: Tag, context: ExtractionContext) -> Dict[str, str]:
        """Normalized fields from a listing's own page."""
        raw = {name: self._safe(self.extract_detail_field, soup, name) for name in DETAIL_FIELDS}
        fields = _normalize(raw)
        canonical = self.first_non_empty(soup, _CANONICAL_SELECTORS)
        fields["url"] = normalize_url(canonical, context.base_uri) if canonical else ""
        return fields

    def _safe(self, fn, node: Tag, name: str) -> str:
        try:
            return fn(node, name)
        except Exception as exc:
            logger.debug("%s: field '%s' failed: %s", self.strategy.portal, name, exc)
            return ""


def _usable_href(href: str) -> bool:
    return bool(href) and not href.lower().startswith(_SKIP_HREFS)


def _normalize(raw: Dict[str, str]) -> Dict[str, str]:
    out = {name: clean_text(value) for name, value in raw.items()}
    if out.get("salary"):
        out["salary"] = parse_salary_range(out["salary"])
    if raw.get("experience_level"):
        out["experience_level"] = normalize_experience(raw["experience_level"])
    return out


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "lxml")
