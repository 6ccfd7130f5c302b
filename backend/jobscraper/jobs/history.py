"""Search history queries."""

import math

from jobscraper.jobs.exceptions import InvalidPaginationError, SearchRequestNotFoundError
from jobscraper.jobs.interfaces import ISearchRequestRepository
from jobscraper.jobs.schemas import (
    Job,
    JobListResponse,
    Pagination,
    SearchHistoryResponse,
    SearchRequestDetail,
    SearchRequestResponse,
    SearchRequestSummary,
)


def _pagination(page: int, limit: int, total: int) -> Pagination:
    return Pagination(page=page, limit=limit, total=total, pages=math.ceil(total / limit))


class SearchHistoryService:
    """Read side of the search requests collection."""

    def __init__(self, repository: ISearchRequestRepository, default_limit: int = 20) -> None:
        self._repository = repository
        self._default_limit = default_limit

    def _check_page(self, page: int, limit: int | None) -> int:
        if limit is None:
            limit = self._default_limit
        if page < 1 or limit < 1:
            raise InvalidPaginationError()
        return limit

    async def list_requests(self, page: int = 1, limit: int | None = None) -> SearchHistoryResponse:
        """List search requests newest first, without their jobs."""
        limit = self._check_page(page, limit)

        documents = await self._repository.list_summaries(skip=(page - 1) * limit, limit=limit)
        total = await self._repository.count()

        return SearchHistoryResponse(
            searches=[SearchRequestSummary.model_validate(d) for d in documents],
            pagination=_pagination(page, limit, total),
        )

    async def get_request(self, search_request_id: str) -> SearchRequestResponse:
        """Get a search request with its jobs.

        Raises:
            SearchRequestNotFoundError: if no request has this id.
        """
        document = await self._repository.get_by_id(search_request_id)
        if document is None:
            raise SearchRequestNotFoundError(search_request_id)

        search_request = SearchRequestDetail.model_validate(document)
        return SearchRequestResponse(
            search_request=search_request,
            jobs=search_request.jobs,
            job_count=search_request.job_count,
        )

    async def search_jobs(
        self,
        company: str | None = None,
        location: str | None = None,
        title: str | None = None,
        page: int = 1,
        limit: int | None = None,
    ) -> JobListResponse:
        """Page through jobs of completed searches, newest scrape first."""
        limit = self._check_page(page, limit)

        matches = await self._repository.find_jobs(company=company, location=location, title=title)
        start = (page - 1) * limit

        return JobListResponse(
            jobs=[Job.model_validate(job) for job in matches[start:start + limit]],
            pagination=_pagination(page, limit, len(matches)),
        )
