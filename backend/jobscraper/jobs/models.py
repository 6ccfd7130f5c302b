"""Search request MongoDB document factories."""

from datetime import datetime, timezone
from typing import Any
import uuid

from jobscraper.jobs.schemas import Job, SearchParams, SearchStatus


def create_search_request_document(
    params: SearchParams,
    started_at: datetime | None = None,
) -> dict[str, Any]:
    """Create a pending search request document for MongoDB insertion."""
    now = started_at or datetime.now(timezone.utc)

    return {
        "_id": str(uuid.uuid4()),
        "searchParams": params.model_dump(by_alias=True),
        "jobs": [],
        "jobCount": 0,
        "status": SearchStatus.PENDING.value,
        "startedAt": now,
        "createdAt": now,
        "updatedAt": now,
    }


def completed_fields(jobs: list[Job], completed_at: datetime, duration: int) -> dict[str, Any]:
    """Fields set by the transition to completed."""
    return {
        "jobs": [job.model_dump(by_alias=True) for job in jobs],
        "jobCount": len(jobs),
        "status": SearchStatus.COMPLETED.value,
        "completedAt": completed_at,
        "duration": duration,
        "updatedAt": completed_at,
    }


def failed_fields(error_message: str, completed_at: datetime, duration: int) -> dict[str, Any]:
    """Fields set by the transition to failed."""
    return {
        "jobs": [],
        "jobCount": 0,
        "status": SearchStatus.FAILED.value,
        "errorMessage": error_message,
        "completedAt": completed_at,
        "duration": duration,
        "updatedAt": completed_at,
    }
