"""Conversion of raw actor records into canonical jobs.

The actor's output schema is not stable across versions, so this module is
the only place that reads raw record keys. Everything downstream works with
`Job`.
"""

from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from typing import Any

from jobscraper.jobs.constants import (
    DEFAULT_COMPANY_NAME,
    DEFAULT_LOCATION,
    DEFAULT_TITLE,
    JOB_ID_FIELDS,
    LINK_FIELDS,
    LINKEDIN_JOB_VIEW_URL,
)
from jobscraper.jobs.schemas import Job


def _text(raw: Mapping[str, Any], key: str, default: str = "") -> str:
    """Return raw[key] as a string, or default when missing or empty."""
    value = raw.get(key)
    if value is None or value == "":
        return default
    return str(value)


def _isoformat(moment: datetime) -> str:
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def resolve_job_link(raw: Mapping[str, Any]) -> str:
    """Find the job URL, synthesizing a LinkedIn link from an id if needed.

    Returns an empty string when the record carries neither a link nor an id.
    """
    for field in LINK_FIELDS:
        link = _text(raw, field)
        if link:
            return link

    for field in JOB_ID_FIELDS:
        job_id = _text(raw, field)
        if job_id:
            return LINKEDIN_JOB_VIEW_URL.format(job_id=job_id)

    return ""


def normalize_job(raw: Mapping[str, Any], now: datetime | None = None) -> Job:
    """Build a canonical job from one raw record. Never raises."""
    if now is None:
        now = datetime.now(timezone.utc)
    if not isinstance(raw, Mapping):
        raw = {}

    return Job(
        title=_text(raw, "title", DEFAULT_TITLE),
        company_name=_text(raw, "companyName", DEFAULT_COMPANY_NAME),
        location=_text(raw, "location", DEFAULT_LOCATION),
        # Approximation: the posting time is unknown, so use processing time
        published_at=_text(raw, "publishedAt", _isoformat(now)),
        job_link=resolve_job_link(raw),
        contract_type=_text(raw, "contractType"),
        poster_profile_link=_text(raw, "posterProfileLink"),
        description=_text(raw, "description"),
        scraped_at=now,
    )


def normalize_jobs(
    raw_records: Iterable[Mapping[str, Any]],
    now: datetime | None = None,
) -> list[Job]:
    """Normalize records in order, stamping them all with the same time."""
    if now is None:
        now = datetime.now(timezone.utc)
    return [normalize_job(raw, now) for raw in raw_records]
