"""
job_extractor — extracts normalized job-listing records from job portals.

    >>> from job_extractor import scrape, scrape_multiple_pages
    >>> jobs = scrape("indeed", "https://www.indeed.com/jobs?q=python&l=Remote")
"""

from typing import List

from job_extractor.engine.crawler import Crawler, CrawlState, build_search_url
from job_extractor.exceptions import (
    ConfigurationError, CrawlCancelled, FetchError, JobExtractorError, ParseError,
)
from job_extractor.models import ExtractionContext, JobRecord

__version__ = "0.1.0"

__all__ = [
    "Crawler", "CrawlState", "JobRecord", "ExtractionContext",
    "ConfigurationError", "CrawlCancelled", "FetchError", "JobExtractorError", "ParseError",
    "build_search_url", "scrape", "scrape_multiple_pages",
]


def scrape(portal_id: str, url: str) -> List[JobRecord]:
    return Crawler().scrape(portal_id, url)


def scrape_multiple_pages(base_url: str, page_count: int, portal_id: str = None) -> List[JobRecord]:
    return Crawler().scrape_multiple_pages(base_url, page_count, portal_id=portal_id)
