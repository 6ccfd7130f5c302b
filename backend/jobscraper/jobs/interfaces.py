"""Job scraping module interfaces (Interface Segregation Principle)."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from jobscraper.jobs.schemas import Job, SearchParams


class ISearchRequestRepository(ABC):
    """Interface for search request storage."""

    @abstractmethod
    async def create(self, params: SearchParams, started_at: datetime) -> dict[str, Any]:
        """Persist a new pending search request and return the document."""
        pass

    @abstractmethod
    async def mark_completed(
        self, search_request_id: str, jobs: list[Job], completed_at: datetime, duration: int
    ) -> dict[str, Any]:
        """Move a pending search request to completed."""
        pass

    @abstractmethod
    async def mark_failed(
        self, search_request_id: str, error_message: str, completed_at: datetime, duration: int
    ) -> dict[str, Any]:
        """Move a pending search request to failed."""
        pass

    @abstractmethod
    async def get_by_id(self, search_request_id: str) -> dict[str, Any] | None:
        """Get a search request with its jobs."""
        pass

    @abstractmethod
    async def list_summaries(self, skip: int, limit: int) -> list[dict[str, Any]]:
        """List search requests newest first, without their jobs."""
        pass

    @abstractmethod
    async def count(self) -> int:
        """Count stored search requests."""
        pass

    @abstractmethod
    async def find_pending_before(self, started_before: datetime) -> list[dict[str, Any]]:
        """Find pending search requests started before a moment."""
        pass

    @abstractmethod
    async def find_jobs(
        self,
        company: str | None = None,
        location: str | None = None,
        title: str | None = None,
    ) -> list[dict[str, Any]]:
        """Find embedded jobs of completed search requests."""
        pass


class IJobScraper(ABC):
    """Interface for the external scraping actor."""

    @abstractmethod
    async def run_actor(self, actor_input: dict[str, Any]) -> list[dict[str, Any]]:
        """Run the actor with the given input and return its raw records."""
        pass
