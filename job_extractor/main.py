"""
main.py — command-line entry point for the extraction engine.

Examples:
  python -m job_extractor.main --portal indeed --keywords "python developer" --location Remote --pages 2
  python -m job_extractor.main --url https://example.com/careers --no-details
"""

import argparse
import logging
import sys
import time
from typing import List, Optional

from job_extractor import config
from job_extractor.engine.crawler import Crawler, build_search_url
from job_extractor.exceptions import ConfigurationError, CrawlCancelled
from job_extractor.models import JobRecord

logger = logging.getLogger("job_extractor")


def _configure_logging() -> None:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if config.LOG_FILE:
        handlers.append(logging.FileHandler(config.LOG_FILE, encoding="utf-8"))
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Extract job listings from a job portal")
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--url", help="search-results URL to crawl")
    target.add_argument("--keywords", help="search keywords (requires --portal)")
    parser.add_argument("--portal", default=None,
                        help="linkedin | indeed | anything else → generic")
    parser.add_argument("--location", default="", help="search location")
    parser.add_argument("--pages", type=int, default=1, help="number of result pages")
    parser.add_argument("--no-details", action="store_true",
                        help="skip detail-page enrichment")
    parser.add_argument("--dynamic", action="store_true",
                        help="render pages in a headless browser")
    return parser.parse_args(argv)


def print_summary(records: List[JobRecord], elapsed: float) -> None:
    print(f"\n{'='*80}")
    print("  JOB EXTRACTION SUMMARY")
    print(f"{'='*80}")
    print(f"  {'Title':<32} {'Company':<20} {'Location':<14} {'Salary':<10}")
    print(f"  {'-'*32} {'-'*20} {'-'*14} {'-'*10}")
    for job in records:
        print(
            f"  {job.title[:31]:<32} "
            f"{job.company[:19]:<20} "
            f"{job.location[:13]:<14} "
            f"{job.salary[:10]:<10}"
        )
    print(f"  {'-'*32} {'-'*20} {'-'*14} {'-'*10}")
    print(f"  {'TOTAL':<32} {len(records):>6}")
    print(f"{'='*80}")
    print(f"  Completed in {elapsed:.1f}s")
    print(f"{'='*80}\n")


def run(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    _configure_logging()
    t0 = time.time()

    crawler = Crawler(
        enrich_details=False if args.no_details else None,
        dynamic=True if args.dynamic else None,
    )
    try:
        if args.keywords is not None:
            url = build_search_url(args.portal or "", args.keywords, args.location)
        else:
            url = args.url
        if args.pages > 1:
            records = crawler.scrape_multiple_pages(url, args.pages, portal_id=args.portal)
        else:
            records = crawler.scrape(args.portal, url)
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        return 2
    except (CrawlCancelled, KeyboardInterrupt):
        logger.warning("Interrupted")
        return 130

    print_summary(records, time.time() - t0)
    return 0


if __name__ == "__main__":
    sys.exit(run())
