"""Search request repository for MongoDB operations."""

import logging
import re
from datetime import datetime, timezone
from typing import Any

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING, ReturnDocument

from jobscraper.jobs.constants import SEARCH_REQUESTS_COLLECTION
from jobscraper.jobs.exceptions import (
    SearchRequestAlreadyTerminalError,
    SearchRequestNotFoundError,
)
from jobscraper.jobs.interfaces import ISearchRequestRepository
from jobscraper.jobs.models import (
    completed_fields,
    create_search_request_document,
    failed_fields,
)
from jobscraper.jobs.schemas import Job, SearchParams, SearchStatus

logger = logging.getLogger(__name__)


class SearchRequestRepository(ISearchRequestRepository):
    """MongoDB repository for search requests and their embedded jobs."""

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._collection = db[SEARCH_REQUESTS_COLLECTION]

    async def create(self, params: SearchParams, started_at: datetime) -> dict[str, Any]:
        document = create_search_request_document(params, started_at)
        await self._collection.insert_one(document)
        logger.info(f"Created search request {document['_id']}")
        return document

    async def _finish(self, search_request_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        """Apply a terminal transition; only a pending document may match."""
        updated = await self._collection.find_one_and_update(
            {"_id": search_request_id, "status": SearchStatus.PENDING.value},
            {"$set": fields},
            return_document=ReturnDocument.AFTER,
        )
        if updated is not None:
            return updated

        if await self._collection.find_one({"_id": search_request_id}, {"_id": 1}) is None:
            raise SearchRequestNotFoundError(search_request_id)
        raise SearchRequestAlreadyTerminalError(search_request_id)

    async def mark_completed(
        self, search_request_id: str, jobs: list[Job], completed_at: datetime, duration: int
    ) -> dict[str, Any]:
        return await self._finish(search_request_id, completed_fields(jobs, completed_at, duration))

    async def mark_failed(
        self, search_request_id: str, error_message: str, completed_at: datetime, duration: int
    ) -> dict[str, Any]:
        return await self._finish(
            search_request_id, failed_fields(error_message, completed_at, duration)
        )

    async def get_by_id(self, search_request_id: str) -> dict[str, Any] | None:
        return await self._collection.find_one({"_id": search_request_id})

    async def list_summaries(self, skip: int, limit: int) -> list[dict[str, Any]]:
        cursor = self._collection.find(
            {},
            {"jobs": 0},  # Exclude jobs for listing
            sort=[("createdAt", DESCENDING)],
            skip=skip,
            limit=limit,
        )
        return await cursor.to_list(length=limit)

    async def count(self) -> int:
        return await self._collection.count_documents({})

    async def find_pending_before(self, started_before: datetime) -> list[dict[str, Any]]:
        # Compare as naive UTC, the form BSON dates take in queries
        if started_before.tzinfo is not None:
            started_before = started_before.astimezone(timezone.utc).replace(tzinfo=None)

        cursor = self._collection.find(
            {"status": SearchStatus.PENDING.value, "startedAt": {"$lt": started_before}},
            {"jobs": 0},
        )
        return await cursor.to_list(length=None)

    async def find_jobs(
        self,
        company: str | None = None,
        location: str | None = None,
        title: str | None = None,
    ) -> list[dict[str, Any]]:
        """Collect embedded jobs of completed requests matching all given filters.

        Filters are case-insensitive substring matches. Results are ordered
        newest first by scrape time.
        """
        filters = {
            "companyName": company,
            "location": location,
            "title": title,
        }
        patterns = {
            key: re.compile(re.escape(value), re.IGNORECASE)
            for key, value in filters.items()
            if value
        }

        cursor = self._collection.find(
            {"status": SearchStatus.COMPLETED.value, "jobCount": {"$gt": 0}},
            {"jobs": 1},
        )

        matches = []
        async for document in cursor:
            for job in document.get("jobs", []):
                if "scrapedAt" not in job:
                    continue
                if all(pattern.search(str(job.get(key) or "")) for key, pattern in patterns.items()):
                    matches.append(job)

        matches.sort(key=lambda job: job["scrapedAt"], reverse=True)
        return matches
