"""
Normalizer — pure text/URL helpers applied to every extracted field.

  clean_text            strip tags, collapse whitespace, drop boilerplate
  normalize_url         make hrefs absolute against the page they came from
  parse_salary_range    "$80k-$100k/yr" → "80,000 - 100,000 per year"
  categorize_experience years → one of five fixed bands
"""

import re
from typing import Optional
from urllib.parse import urljoin, urlsplit, urlunsplit

from bs4 import BeautifulSoup

_TAG_RE        = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"[\s\u00a0\u200b]+")

# Longest first so "Show more Show less" goes before "Show more"
_BOILERPLATE = (
    "Show more Show less",
    "Show more",
    "Show less",
    "See more",
    "Read more",
)
_BOILERPLATE_RE = re.compile(
    "|".join(re.escape(p) for p in _BOILERPLATE), re.IGNORECASE
)


def clean_text(text: Optional[str]) -> str:
    if not text:
        return ""
    if "<" in text:
        text = BeautifulSoup(text, "lxml").get_text(" ")
        # entity-encoded tags come back as real brackets after get_text
        text = _TAG_RE.sub(" ", text)
    text = _WHITESPACE_RE.sub(" ", text)
    text = _BOILERPLATE_RE.sub(" ", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


# ── URLs ──────────────────────────────────────────────────────────────────────
def normalize_url(url: Optional[str], base_uri: str) -> str:
    url = (url or "").strip()
    if not url:
        return ""
    base_uri = (base_uri or "").strip()
    try:
        parts = urlsplit(url)
        if parts.scheme and (parts.netloc or parts.scheme not in ("http", "https")):
            return url
        base = urlsplit(base_uri)
        if url.startswith("//"):
            return f"{base.scheme or 'https'}:{url}"
        if url.startswith("/"):
            return urlunsplit((base.scheme or "https", base.netloc, "", "", "")) + url
        if url.startswith(("?", "#")):
            return urljoin(base_uri, url)
        root = urlunsplit((base.scheme, base.netloc, base.path, "", ""))
        return _join(root, url)
    except ValueError:
        return _join(base_uri, url)


def _join(base: str, path: str) -> str:
    return base.rstrip("/") + "/" + path.lstrip("/")


# ── Salary ────────────────────────────────────────────────────────────────────
# figures followed by "(k)" (401(k) plans) are not amounts
_NUMBER = (
    r"[$€£¥₹]?\s*(?<![\d,.])(\d[\d,]*(?:\.\d+)?)(?![\d,]*(?:\.\d+)?\s*\([kK]\))"
    r"\s*(?:([kK])\b)?"
)
_SALARY_RE = re.compile(
    _NUMBER
    + r"(?:\s*(?:-|–|—|to)\s*" + _NUMBER + r")?"
    + r"(?:\s*(?:(?:/|per|an|a)\s*(year|yr|annum|month|mo|week|wk|day|hour|hr)\b"
    + r"|(hourly|monthly|weekly|daily|annually|yearly)\b))?",
    re.IGNORECASE,
)
_PERIODS = {
    "year": "year", "yr": "year", "annum": "year",
    "month": "month", "mo": "month",
    "week": "week", "wk": "week",
    "day": "day",
    "hour": "hour", "hr": "hour",
    "hourly": "hour", "daily": "day", "weekly": "week",
    "monthly": "month", "annually": "year", "yearly": "year",
}


def _format_amount(digits: str, k_suffix: Optional[str]) -> str:
    value = float(digits.replace(",", ""))
    if k_suffix:
        value *= 1000
    if value.is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}"


def parse_salary_range(text: Optional[str]) -> str:
    """Canonicalize a free-text salary; unrecognised text comes back unchanged."""
    if not text:
        return text or ""
    m = _SALARY_RE.search(text)
    if not m:
        return text
    low_digits, low_k, high_digits, high_k, period, adverb = m.groups()
    # "80 - 100k" means 80k - 100k
    if high_k and not low_k and high_digits:
        low_k = high_k
    unit = _PERIODS.get((period or adverb or "year").lower(), "year")
    try:
        low = _format_amount(low_digits, low_k)
        if high_digits:
            return f"{low} - {_format_amount(high_digits, high_k)} per {unit}"
        return f"{low}+ per {unit}"
    except ValueError:
        return text


# ── Experience ────────────────────────────────────────────────────────────────
_EXPERIENCE_BANDS = (
    (1, "Entry Level (0-1 years)"),
    (3, "Junior (1-3 years)"),
    (5, "Mid-Level (3-5 years)"),
    (8, "Senior (5-8 years)"),
)
_EXPERT = "Expert (8+ years)"

_YEARS_RE = re.compile(
    r"(\d+(?:\.\d+)?)\s*(?:\+|-\s*\d+(?:\.\d+)?)?\s*(?:years?|yrs?)\b", re.IGNORECASE
)


def categorize_experience(years: float) -> str:
    if years < 0:
        raise ValueError(f"years of experience cannot be negative: {years}")
    for upper, label in _EXPERIENCE_BANDS:
        if years <= upper:
            return label
    return _EXPERT


def extract_years(text: Optional[str]) -> Optional[float]:
    """First year count mentioned in text ("3+ years", "2-4 yrs"), if any."""
    if not text:
        return None
    m = _YEARS_RE.search(text)
    return float(m.group(1)) if m else None


def normalize_experience(text: Optional[str]) -> str:
    cleaned = clean_text(text)
    years = extract_years(cleaned)
    if years is None:
        return cleaned
    return categorize_experience(years)
