"""
LinkedIn strategy — guest job-search markup (base-search-card family).
Result pages lazy-load more cards while scrolling (see config.DYNAMIC_PORTALS).
"""

from job_extractor.scrapers.base import make_strategy
from job_extractor.scrapers.generic import GENERIC

LINKEDIN = make_strategy(
    "linkedin",
    base=GENERIC,
    card_groups=[
        [".jobs-search__results-list > li", ".jobs-search-results__list-item"],
        ["div.base-card", "div[class*=base-card]", "div[class*=job-search-card]",
         "div[class*=job-result-card]", "div[class*=job-card]"],
        ["[data-entity-urn*=jobPosting]", "[data-job-id]"],
    ],
    fields={
        "title": [
            ".base-search-card__title", ".job-card-list__title",
            ".jobs-search-result-item__title", "h3[class*=base-search]",
            "h3[class*=title]",
        ],
        "company": [
            ".base-search-card__subtitle", ".job-card-container__company-name",
            ".job-result-card__subtitle", "h4[class*=company]",
            "[class*=company-name]", "a[class*=company]",
        ],
        "location": [
            ".job-search-card__location", ".job-result-card__location",
            ".job-card-container__metadata-item", "span[class*=location]",
        ],
        "salary": [".job-search-card__salary-info", "[class*=salary]"],
        "employment_type": [".job-search-card__job-type", "[class*=job-type]"],
        "workplace_type": ["[class*=workplace-type]", "span[class*=remote]"],
        "posted_date": [
            "time.job-search-card__listdate@datetime",
            "time.job-search-card__listdate--new@datetime",
            "time@datetime",
        ],
    },
    url_selectors=[
        "a.base-card__full-link", "a[class*=job-card]",
        "a[class*=result-card]", "a[href*='/jobs/view/']",
    ],
    detail_fields={
        "title": [".top-card-layout__title", "h1[class*=topcard__title]"],
        "company": [".topcard__org-name-link", "[class*=topcard__flavor]"],
        "location": [".topcard__flavor--bullet"],
        "description": [
            ".show-more-less-html__markup", ".description__text",
            "[class*=jobs-description]",
        ],
        "experience_level": [
            ".description__job-criteria-item:nth-of-type(1) .description__job-criteria-text",
        ],
        "employment_type": [
            ".description__job-criteria-item:nth-of-type(2) .description__job-criteria-text",
        ],
        "posted_date": [".posted-time-ago__text"],
        "salary": [".salary.compensation__salary", ".compensation__salary"],
    },
    job_link_hints=["/jobs/view/"],
)
