"""Scrape orchestration - business logic (Single Responsibility).

A search request is persisted as pending before the actor runs and is moved
to completed or failed exactly once afterwards, whatever the actor does.
"""

import copy
import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from jobscraper.jobs.constants import (
    OPTIONAL_LIST_PARAMS,
    OPTIONAL_TEXT_PARAMS,
    RESIDENTIAL_PROXY,
)
from jobscraper.jobs.exceptions import (
    ScrapeOperationError,
    ScrapeValidationError,
    SearchRequestAlreadyTerminalError,
)
from jobscraper.jobs.interfaces import IJobScraper, ISearchRequestRepository
from jobscraper.jobs.normalizer import normalize_jobs
from jobscraper.jobs.schemas import ScrapeRequest, ScrapeResponse, SearchParams

logger = logging.getLogger(__name__)

STALE_REQUEST_MESSAGE = "Scrape did not finish; the server stopped before the request completed"


def _ensure_utc_aware(dt: datetime) -> datetime:
    """Treat naive datetimes read back from MongoDB as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _elapsed_ms(started_at: datetime, finished_at: datetime) -> int:
    return int((finished_at - started_at) / timedelta(milliseconds=1))


def parse_rows(value: Any) -> int | None:
    """Parse a row limit, returning None unless it is a positive integer."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        rows = value
    elif isinstance(value, float) and value.is_integer():
        rows = int(value)
    elif isinstance(value, str) and value.strip().isdigit():
        rows = int(value.strip())
    else:
        return None
    return rows if rows > 0 else None


def validate_scrape_request(request: ScrapeRequest) -> SearchParams:
    """Check preconditions and snapshot the submission.

    Raises:
        ScrapeValidationError: if location is empty or rows is not a
            positive integer.
    """
    location = (request.location or "").strip()
    rows = parse_rows(request.rows)

    if not location or rows is None:
        raise ScrapeValidationError()

    return SearchParams(
        title=request.title or "",
        location=location,
        company_name=request.company_name,
        company_id=request.company_id,
        published_at=request.published_at or "",
        work_type=request.work_type or "",
        contract_type=request.contract_type or "",
        experience_level=request.experience_level or "",
        rows=rows,
    )


def build_actor_input(params: SearchParams) -> dict[str, Any]:
    """Derive the actor input: only filters that were set, plus the proxy."""
    snapshot = params.model_dump(by_alias=True)
    actor_input: dict[str, Any] = {}

    for key in OPTIONAL_TEXT_PARAMS:
        if snapshot[key]:
            actor_input[key] = snapshot[key]

    for key in OPTIONAL_LIST_PARAMS:
        if snapshot[key]:
            actor_input[key] = list(snapshot[key])

    actor_input["rows"] = int(params.rows)
    actor_input["proxy"] = copy.deepcopy(RESIDENTIAL_PROXY)
    return actor_input


class ScrapeService:
    """Owns the search request lifecycle (Dependency Inversion)."""

    def __init__(
        self,
        repository: ISearchRequestRepository,
        scraper: IJobScraper,
    ) -> None:
        """Initialize with dependencies."""
        self._repository = repository
        self._scraper = scraper

    async def submit_scrape(self, request: ScrapeRequest) -> ScrapeResponse:
        """Run one scrape from validation to a terminal search request.

        Raises:
            ScrapeValidationError: before anything is persisted.
            ScrapeOperationError: after the request has been marked failed.
        """
        params = validate_scrape_request(request)

        started_at = datetime.now(timezone.utc)
        document = await self._repository.create(params, started_at)
        search_request_id = document["_id"]

        actor_input = build_actor_input(params)
        logger.info(f"Starting job scraping for {search_request_id} with config {actor_input}")

        try:
            raw_records = await self._scraper.run_actor(actor_input)
            jobs = normalize_jobs(raw_records or [])

            completed_at = datetime.now(timezone.utc)
            duration = _elapsed_ms(started_at, completed_at)
            await self._repository.mark_completed(
                search_request_id,
                jobs=jobs,
                completed_at=completed_at,
                duration=duration,
            )
        except SearchRequestAlreadyTerminalError:
            raise
        except Exception as e:
            message = getattr(e, "message", None) or str(e) or e.__class__.__name__
            logger.error(f"Scraping failed for {search_request_id}: {message}")

            completed_at = datetime.now(timezone.utc)
            await self._repository.mark_failed(
                search_request_id,
                error_message=message,
                completed_at=completed_at,
                duration=_elapsed_ms(started_at, completed_at),
            )
            raise ScrapeOperationError(message, search_request_id=search_request_id) from e

        if jobs:
            message = f"Successfully scraped {len(jobs)} jobs"
            logger.info(f"Successfully scraped and saved {len(jobs)} jobs in search request {search_request_id}")
        else:
            message = "No jobs found matching your criteria"
            logger.warning(f"No jobs found for search request {search_request_id}")

        return ScrapeResponse(
            message=message,
            search_request_id=search_request_id,
            job_count=len(jobs),
            duration=duration,
            jobs=jobs,
        )

    async def reconcile_stale_requests(self, older_than: timedelta) -> int:
        """Mark pending requests started more than `older_than` ago as failed.

        A request only stays pending if the process died mid-scrape, so these
        can never complete. Returns the number of requests failed.
        """
        now = datetime.now(timezone.utc)
        stale = await self._repository.find_pending_before(now - older_than)

        failed = 0
        for document in stale:
            started_at = _ensure_utc_aware(document["startedAt"])
            try:
                await self._repository.mark_failed(
                    document["_id"],
                    error_message=STALE_REQUEST_MESSAGE,
                    completed_at=now,
                    duration=_elapsed_ms(started_at, now),
                )
            except SearchRequestAlreadyTerminalError:
                # Finished between the query and the update
                continue
            failed += 1

        if failed:
            logger.warning(f"Marked {failed} stale pending search requests as failed")
        return failed
