"""Job scraping API router (Single Responsibility)."""

import logging
from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from jobscraper.jobs.dependencies import get_history_service, get_scrape_service
from jobscraper.jobs.exceptions import (
    InvalidPaginationError,
    JobScraperError,
    ScrapeOperationError,
    ScrapeValidationError,
    SearchRequestNotFoundError,
)
from jobscraper.jobs.history import SearchHistoryService
from jobscraper.jobs.schemas import (
    ErrorResponse,
    JobListResponse,
    ScrapeRequest,
    ScrapeResponse,
    SearchHistoryResponse,
    SearchRequestResponse,
)
from jobscraper.jobs.service import ScrapeService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["jobs"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.post("/scrape", response_model=ScrapeResponse, responses=ERROR_RESPONSES)
async def scrape_jobs(
    request: ScrapeRequest,
    service: Annotated[ScrapeService, Depends(get_scrape_service)],
) -> ScrapeResponse:
    """
    Scrape LinkedIn jobs and store them as a search request.

    The call returns once the actor run has finished, which can take
    tens of seconds.

    **Required:**
    - `location`: Location to search in (e.g., "Berlin")
    - `rows`: Maximum number of jobs to scrape
    """
    logger.info(f"Received scrape request: {request.model_dump(by_alias=True, exclude_none=True)}")

    try:
        return await service.submit_scrape(request)
    except ScrapeValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )
    except ScrapeOperationError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=e.message,
        )
    except JobScraperError as e:
        logger.error(f"Scrape failed: {e.message}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=e.message,
        )


@router.get(
    "/searches",
    response_model=SearchHistoryResponse,
    response_model_exclude_none=True,
    responses=ERROR_RESPONSES,
)
async def get_search_history(
    service: Annotated[SearchHistoryService, Depends(get_history_service)],
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1, le=100),
) -> SearchHistoryResponse:
    """Get search history, most recent first, without the scraped jobs."""
    try:
        return await service.list_requests(page=page, limit=limit)
    except InvalidPaginationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )


@router.get(
    "/searches/{search_request_id}",
    response_model=SearchRequestResponse,
    response_model_exclude_none=True,
    responses=ERROR_RESPONSES,
)
async def get_search_by_id(
    search_request_id: str,
    service: Annotated[SearchHistoryService, Depends(get_history_service)],
) -> SearchRequestResponse:
    """Get a search request with all of its jobs."""
    try:
        return await service.get_request(search_request_id)
    except SearchRequestNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=e.message,
        )


@router.get("/jobs", response_model=JobListResponse, responses=ERROR_RESPONSES)
async def get_all_jobs(
    service: Annotated[SearchHistoryService, Depends(get_history_service)],
    company: str | None = None,
    location: str | None = None,
    title: str | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
) -> JobListResponse:
    """
    Get jobs from all completed searches, most recently scraped first.

    `company`, `location` and `title` filter by case-insensitive substring.
    """
    try:
        return await service.search_jobs(
            company=company,
            location=location,
            title=title,
            page=page,
            limit=limit,
        )
    except InvalidPaginationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )


@router.get("/health")
def health() -> dict:
    return {
        "status": "OK",
        "message": "Job Scraper API is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
