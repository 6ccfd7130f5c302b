"""Job scraping module dependencies (Dependency Injection)."""

from datetime import timedelta
from typing import Annotated

from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from jobscraper.config import get_settings
from jobscraper.database import get_database
from jobscraper.jobs.clients import get_apify_client
from jobscraper.jobs.history import SearchHistoryService
from jobscraper.jobs.interfaces import IJobScraper
from jobscraper.jobs.repository import SearchRequestRepository
from jobscraper.jobs.service import ScrapeService

settings = get_settings()


def get_search_request_repository(
    db: Annotated[AsyncIOMotorDatabase, Depends(get_database)],
) -> SearchRequestRepository:
    """Get search request repository."""
    return SearchRequestRepository(db)


def get_job_scraper() -> IJobScraper:
    """Get the scraping actor client (singleton)."""
    return get_apify_client()


def get_scrape_service(
    repository: Annotated[SearchRequestRepository, Depends(get_search_request_repository)],
    scraper: Annotated[IJobScraper, Depends(get_job_scraper)],
) -> ScrapeService:
    """Get scrape service."""
    return ScrapeService(repository=repository, scraper=scraper)


def get_history_service(
    repository: Annotated[SearchRequestRepository, Depends(get_search_request_repository)],
) -> SearchHistoryService:
    """Get search history service."""
    return SearchHistoryService(repository, default_limit=settings.history_default_limit)


async def reconcile_stale_search_requests(db: AsyncIOMotorDatabase) -> int:
    """Fail search requests left pending by a previous process (for startup)."""
    service = ScrapeService(
        repository=SearchRequestRepository(db),
        scraper=get_job_scraper(),
    )
    return await service.reconcile_stale_requests(
        timedelta(minutes=settings.stale_pending_minutes)
    )
