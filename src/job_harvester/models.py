from enum import StrEnum
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class JobRecord(BaseModel):
    """
    Normalized job record extracted from a listing item or a detail page.
    Every field is a string and defaults to "", so consumers always see the
    same field set. Records are frozen once built.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    job_title: str = ""
    company_name: str = ""
    location: str = ""
    employment_type: str = ""
    salary_range: str = ""
    job_description: str = ""
    required_skills: str = ""
    experience_requirements: str = ""
    education_requirements: str = ""
    benefits: str = ""
    application_deadline: str = ""
    posted_date: str = ""
    job_url: str = ""
    source_website: str = ""
    last_updated: str = ""

    @field_validator("job_url")
    @classmethod
    def _absolute_url(cls, value: str) -> str:
        if not value:
            return value
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"job_url must be an absolute http(s) URL, got '{value}'")
        return value

    def with_missing(self, values: dict[str, str]) -> "JobRecord":
        """Return a copy where only the currently empty fields take values from `values`."""
        updates = {
            name: value
            for name, value in values.items()
            if value and name in type(self).model_fields and not getattr(self, name)
        }
        if not updates:
            return self
        return self.model_copy(update=updates)

    def to_export_dict(self) -> dict[str, str]:
        """Field mapping using the camelCase names consumers expect (jobTitle, ...)."""
        return self.model_dump(by_alias=True)


class PageType(StrEnum):
    LISTING = "listing"
    DETAIL = "detail"
    UNKNOWN = "unknown"


class SessionState(StrEnum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"


class SessionStatus(BaseModel):
    """Snapshot returned by CrawlSession.status()."""

    state: SessionState
    current_page: int
    total_pages: int
    record_count: int
    error: str | None = None
