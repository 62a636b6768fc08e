"""
Indeed strategy — job_seen_beacon / tapItem result cards and viewjob pages.
"""

from job_extractor.scrapers.base import make_strategy
from job_extractor.scrapers.generic import GENERIC

INDEED = make_strategy(
    "indeed",
    base=GENERIC,
    card_groups=[
        ["div.job_seen_beacon", "div[class*=job_seen_beacon]", "td.resultContent"],
        [".jobsearch-ResultsList > li", "div[class*=tapItem]",
         "div[class*=desktop-job-card]", "div.jobsearch-SerpJobCard"],
        ["div[data-jk]", "a[data-jk]"],
    ],
    fields={
        "title": [
            "h2.jobTitle span[title]", ".jobTitle", "h2.title", "a[data-jk]",
            "a[id^=job_]", "h2[class*=jobTitle]", "h2[class*=title]",
            "a[class*=jobtitle]", "span[title]",
        ],
        "company": [
            "[data-testid=company-name]", ".companyName", "span.company",
            "[data-company-name]", "span[class*=companyName]",
            "a[data-tn-element='companyName']",
        ],
        "location": [
            "[data-testid=text-location]", ".companyLocation",
            "div[class*=location]", "span[class*=location]",
        ],
        "salary": [
            ".salary-snippet-container", ".salary-snippet", ".estimated-salary",
            ".salaryText", "div[class*=salary]", "span[class*=salary]",
        ],
        "description": [
            ".job-snippet", ".summary", "li[class*=description]",
            ".jobDescriptionText", "div[class*=snippet]",
        ],
        "employment_type": ["[class*=jobTypes]", "[class*=employmentType]"],
        "posted_date": ["span.date", "span[class*=date]", "div[class*=posted]"],
    },
    url_selectors=[
        "a[id^=job_]", "a[data-jk]", "a.jcs-JobTitle", "a[class*=title]",
        "a[href*=viewjob]", "a[href*='/rc/clk']",
    ],
    detail_fields={
        "title": [".jobsearch-JobInfoHeader-title", "h1[class*=JobInfoHeader]"],
        "company": [
            "[data-testid=inlineHeader-companyName]",
            "[data-company-name]", ".jobsearch-CompanyInfoContainer a",
        ],
        "location": ["[data-testid=inlineHeader-companyLocation]", "[data-testid=job-location]"],
        "salary": ["#salaryInfoAndJobType span", "[class*=salary]"],
        "description": ["#jobDescriptionText", ".jobsearch-jobDescriptionText"],
        "benefits": ["#benefits", "[data-testid=benefits-test]"],
        "employment_type": ["#salaryInfoAndJobType span:nth-of-type(2)", "[class*=jobType]"],
        "posted_date": [".jobsearch-JobMetadataFooter span", "[data-testid=myJobsStateDate]"],
    },
    job_link_hints=["viewjob", "/rc/clk", "jk="],
)
