"""
Error taxonomy for the extraction engine.

Only ConfigurationError (and CrawlCancelled, when the caller asked for it)
ever escapes the crawler; everything else is logged and degrades output.
"""

from enum import Enum
from typing import Optional


class JobExtractorError(Exception):
    """Base class for all engine errors."""


class FetchErrorKind(str, Enum):
    NETWORK = "network"   # timeouts, connection failures, retryable statuses
    HTTP    = "http"      # non-retryable HTTP status
    BROWSER = "browser"   # headless browser could not render the page


class FetchError(JobExtractorError):
    def __init__(self, url: str, kind: FetchErrorKind, attempts: int,
                 status: Optional[int] = None, reason: str = ""):
        self.url = url
        self.kind = kind
        self.attempts = attempts
        self.status = status
        self.reason = reason
        msg = f"{kind.value} error fetching {url} after {attempts} attempt(s)"
        if status is not None:
            msg += f" (HTTP {status})"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class ParseError(JobExtractorError):
    """A selector could not be applied to the document."""


class ConfigurationError(JobExtractorError):
    """Invalid crawl target or portal configuration; the crawl never starts."""


class InvalidRecordError(JobExtractorError, ValueError):
    """Extracted fields do not form an emittable JobRecord."""


class CrawlCancelled(JobExtractorError):
    """The crawl was cancelled at a page or detail boundary."""
