"""Job scraping Pydantic schemas (Single Responsibility).

Field names are snake_case in Python and camelCase on the wire and in MongoDB,
matching the documents the search history has always stored.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SearchStatus(str, Enum):
    """Lifecycle status of a search request."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


def _split_comma_separated(value: Any) -> Any:
    """Split "a, b,,c" into ["a", "b", "c"]; lists are trimmed the same way."""
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    if isinstance(value, (list, tuple)):
        return [str(item).strip() for item in value if str(item).strip()]
    return value


class ScrapeRequest(CamelModel):
    """Scrape submission as received from a client.

    `location` and `rows` are optional here so the orchestrator can report a
    missing value as a validation error instead of a schema error.
    """

    title: str | None = None
    location: str | None = None
    company_name: list[str] = []
    company_id: list[str] = []
    published_at: str | None = None
    work_type: str | None = None
    contract_type: str | None = None
    experience_level: str | None = None
    rows: Any = None

    @field_validator("company_name", "company_id", mode="before")
    @classmethod
    def split_companies(cls, value: Any) -> Any:
        return _split_comma_separated(value)


class SearchParams(CamelModel):
    """Immutable snapshot of a submission, stored on the search request."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    title: str = ""
    location: str
    company_name: list[str] = []
    company_id: list[str] = []
    published_at: str = ""
    work_type: str = ""
    contract_type: str = ""
    experience_level: str = ""
    rows: int


class Job(CamelModel):
    """Canonical job record embedded in a search request."""

    title: str
    company_name: str
    location: str
    published_at: str
    job_link: str = ""
    contract_type: str = ""
    poster_profile_link: str = ""
    description: str = ""
    scraped_at: datetime


class SearchRequestSummary(CamelModel):
    """A search request without its embedded jobs (history listing)."""

    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    search_params: SearchParams
    status: SearchStatus
    job_count: int = 0
    error_message: str | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None
    duration: int | None = None  # milliseconds
    created_at: datetime | None = None
    updated_at: datetime | None = None


class SearchRequestDetail(SearchRequestSummary):
    """A search request including its embedded jobs."""

    jobs: list[Job] = []


class Pagination(BaseModel):
    """Pagination block shared by the listing endpoints."""

    page: int
    limit: int
    total: int
    pages: int


class ScrapeResponse(CamelModel):
    """Response after a successful scrape."""

    success: bool = True
    message: str
    search_request_id: str
    job_count: int
    duration: int
    jobs: list[Job]


class SearchHistoryResponse(CamelModel):
    """Paginated search history."""

    success: bool = True
    searches: list[SearchRequestSummary]
    pagination: Pagination


class SearchRequestResponse(CamelModel):
    """A single search request with its jobs."""

    success: bool = True
    search_request: SearchRequestDetail
    jobs: list[Job]
    job_count: int


class JobListResponse(CamelModel):
    """Paginated jobs across all stored search requests."""

    success: bool = True
    jobs: list[Job]
    pagination: Pagination


class ErrorResponse(BaseModel):
    """Uniform error body."""

    success: bool = False
    error: str
