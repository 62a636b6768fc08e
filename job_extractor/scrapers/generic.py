"""
Generic strategy — the safety net for portals without dedicated selectors.
Every portal strategy ends with these candidates.
"""

from job_extractor.scrapers.base import make_strategy

GENERIC = make_strategy(
    "generic",
    card_groups=[
        # semantic attributes
        ["[itemtype*='JobPosting']", "article[class*=job]", "li[class*=job]"],
        # common class-name substrings
        ["div[class*=job-card]", "div[class*=jobCard]", "div[class*=job-listing]",
         "div[class*=vacancy]", "div[class*=position]"],
        # data attributes
        ["div[data-job-id]", "li[data-job-id]", "[data-jobid]"],
        # broad job-related patterns
        ["div[class*=job]", "div[class*=listing]", "article"],
    ],
    fields={
        "title": [
            "[itemprop=title]", "[class*=job-title]", "[class*=jobTitle]",
            "h1", "h2", "h3", "h4", "[class*=title]",
            "a[class*=job]", "a[class*=position]",
        ],
        "company": [
            "[itemprop=hiringOrganization]", "[class*=company]",
            "[class*=employer]", "[class*=organization]",
        ],
        "location": [
            "[itemprop=jobLocation]", "[class*=location]",
            "[class*=address]", "[class*=city]",
        ],
        "salary": [
            "[itemprop=baseSalary]", "[class*=salary]",
            "[class*=compensation]", "[class*=pay]",
        ],
        "description": [
            "[itemprop=description]", "[class*=description]",
            "[class*=summary]", "[class*=snippet]", "p",
        ],
        "employment_type": [
            "[itemprop=employmentType]", "[class*=employment-type]",
            "[class*=job-type]", "[class*=contract]",
        ],
        "workplace_type": ["[class*=workplace]", "[class*=remote]"],
        "posted_date": [
            "time@datetime", "time", "[itemprop=datePosted]",
            "[class*=posted]", "[class*=date]",
        ],
    },
    url_selectors=["a[itemprop=url]"],
    detail_fields={
        "title": ["h1", "[itemprop=title]", "[class*=job-title]", "[class*=jobTitle]"],
        "company": [
            "[itemprop=hiringOrganization]", "[class*=company-name]",
            "[class*=companyName]", "[class*=employer]",
        ],
        "location": ["[itemprop=jobLocation]", "[class*=job-location]", "[class*=location]"],
        "salary": ["[itemprop=baseSalary]", "[class*=salary]", "[class*=compensation]"],
        "description": [
            "[itemprop=description]", "[class*=job-description]",
            "[class*=jobDescription]", "[id*=description]", "[class*=description]",
        ],
        "required_skills": [
            "[itemprop=skills]", "[class*=requirement]", "[id*=requirement]",
            "[class*=qualification]", "[class*=skills]",
        ],
        "benefits": ["[itemprop=jobBenefits]", "[class*=benefit]", "[id*=benefit]"],
        "experience_level": [
            "[itemprop=experienceRequirements]", "[class*=experience]",
            "[class*=seniority]",
        ],
        "employment_type": [
            "[itemprop=employmentType]", "[class*=employment-type]", "[class*=job-type]",
        ],
        "workplace_type": ["[class*=workplace]", "[class*=remote]"],
        "posted_date": [
            "[itemprop=datePosted]", "time@datetime", "time",
            "[class*=posted]", "[class*=date]",
        ],
        "application_deadline": [
            "[itemprop=validThrough]", "[class*=deadline]", "[class*=closing]",
            "[class*=expir]",
        ],
        "company_description": [
            "[class*=about-company]", "[class*=company-description]",
            "[class*=companyDescription]", "[id*=about]",
        ],
    },
    job_link_hints=[
        "/job", "/jobs/", "viewjob", "/career", "/position", "/vacanc",
        "/opening", "/offre", "/emploi", "jk=", "jobid", "job_id",
    ],
)
