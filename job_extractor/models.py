"""
Value types shared by every stage of the extraction engine.
"""

from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Tuple

from job_extractor.exceptions import InvalidRecordError

# Detail-page values win over list-page values whenever they are non-empty
DETAIL_PREFERRED = (
    "description", "required_skills", "benefits", "experience_level",
    "posted_date", "application_deadline",
    "title", "company", "location", "url", "employment_type",
)
# Detail-page values only fill gaps left by the list page
DETAIL_FILL_ONLY = ("salary", "workplace_type", "company_description")


@dataclass(frozen=True)
class JobRecord:
    """One job listing. Absent fields are empty strings, never None.

    A record only exists if it has a title and at least one of company/url;
    the constructor raises InvalidRecordError otherwise.
    """

    title:                str = ""
    company:              str = ""
    location:             str = ""
    description:          str = ""
    required_skills:      str = ""
    salary:               str = ""
    url:                  str = ""
    employment_type:      str = ""
    experience_level:     str = ""
    workplace_type:       str = ""
    posted_date:          str = ""
    application_deadline: str = ""
    benefits:             str = ""
    company_description:  str = ""

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                object.__setattr__(self, f.name, "")
            elif not isinstance(value, str):
                object.__setattr__(self, f.name, str(value))
        if not self.title.strip():
            raise InvalidRecordError("record has no title")
        if not (self.company.strip() or self.url.strip()):
            raise InvalidRecordError(f"record '{self.title}' has neither company nor url")

    @classmethod
    def field_names(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    @classmethod
    def from_fields(cls, values: Mapping[str, Any]) -> "JobRecord":
        known = set(cls.field_names())
        return cls(**{k: v for k, v in values.items() if k in known})

    def merge_detail(self, detail: Mapping[str, Any]) -> "JobRecord":
        """Return the enriched copy of this record built from detail-page fields."""
        changes: Dict[str, str] = {}
        for name in DETAIL_PREFERRED:
            value = detail.get(name) or ""
            if value:
                changes[name] = value
        for name in DETAIL_FILL_ONLY:
            value = detail.get(name) or ""
            if value and not getattr(self, name):
                changes[name] = value
        if not changes:
            return self
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, str]:
        return {name: getattr(self, name) for name in self.field_names()}


@dataclass(frozen=True)
class ExtractionContext:
    """Per-fetch state: where the document came from and who fetched it."""

    url: str
    portal: str
    base_uri: str
    user_agent: str = ""


@dataclass(frozen=True)
class RawDocument:
    url: str
    html: str
    status: int = 200
    user_agent: str = ""
    rendered: bool = False
