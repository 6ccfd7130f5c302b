"""Apify API client for running the LinkedIn jobs actor.

Apify API documentation: https://docs.apify.com/api/v2
"""

import logging
from typing import Any

import httpx

from jobscraper.config import get_settings
from jobscraper.jobs.exceptions import ScraperError
from jobscraper.jobs.interfaces import IJobScraper

logger = logging.getLogger(__name__)


class ApifyClient(IJobScraper):
    """Client for Apify actor runs and their datasets."""

    RUNNING_STATUSES = {"READY", "RUNNING", "TIMING-OUT", "ABORTING"}
    SUCCEEDED = "SUCCEEDED"

    def __init__(
        self,
        api_token: str,
        actor_id: str,
        base_url: str = "https://api.apify.com/v2",
        timeout: float = 120.0,
        wait_for_finish: int = 60,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize Apify client.

        Args:
            api_token: Apify API token
            actor_id: Actor ID or "username/actor-name"
            base_url: Apify API base URL
            timeout: HTTP timeout for a single request, in seconds
            wait_for_finish: Seconds Apify holds each run status request open
            transport: Optional transport (tests)
        """
        self._api_token = api_token
        # The API expects "username~actor-name" in paths
        self._actor_id = actor_id.replace("/", "~")
        self._base_url = base_url
        self._timeout = timeout
        self._wait_for_finish = wait_for_finish
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
                headers={
                    "Accept": "application/json",
                    "Authorization": f"Bearer {self._api_token}",
                },
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        """Send a request and return the decoded JSON body."""
        client = await self._get_client()

        try:
            response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise ScraperError(f"Apify request failed: {e}") from e

        if response.status_code == 401:
            raise ScraperError("Apify API: Invalid API token")

        if response.status_code == 429:
            raise ScraperError("Apify API: Rate limit exceeded")

        if response.status_code >= 400:
            raise ScraperError(f"Apify API error: {response.status_code} - {response.text}")

        try:
            return response.json()
        except ValueError as e:
            raise ScraperError("Apify API returned a malformed response") from e

    async def start_run(self, actor_input: dict[str, Any]) -> dict[str, Any]:
        """Start an actor run and return its run object."""
        data = await self._request(
            "POST",
            f"/acts/{self._actor_id}/runs",
            params={"waitForFinish": self._wait_for_finish},
            json=actor_input,
        )
        return data["data"]

    async def wait_for_run(self, run: dict[str, Any]) -> dict[str, Any]:
        """Wait until a run leaves the running states."""
        while run.get("status") in self.RUNNING_STATUSES:
            logger.info(f"Apify run {run['id']} is {run['status']}, waiting...")
            data = await self._request(
                "GET",
                f"/actor-runs/{run['id']}",
                params={"waitForFinish": self._wait_for_finish},
            )
            run = data["data"]
        return run

    async def list_dataset_items(self, dataset_id: str) -> list[dict[str, Any]]:
        """Fetch all items of a dataset."""
        items = await self._request(
            "GET",
            f"/datasets/{dataset_id}/items",
            params={"format": "json", "clean": "true"},
        )
        if not isinstance(items, list):
            raise ScraperError("Apify API returned a malformed dataset")
        return items

    async def run_actor(self, actor_input: dict[str, Any]) -> list[dict[str, Any]]:
        """Run the actor to completion and return the items it produced.

        Raises:
            ScraperError: if the token is missing, a request fails, or the
                run ends in any status other than SUCCEEDED.
        """
        if not self._api_token:
            raise ScraperError("Apify API token not configured")

        logger.info(f"Running Apify actor {self._actor_id}")
        run = await self.start_run(actor_input)
        run = await self.wait_for_run(run)

        if run.get("status") != self.SUCCEEDED:
            raise ScraperError(f"Apify actor run {run.get('id')} finished with status {run.get('status')}")

        logger.info("Fetching job results from the dataset...")
        items = await self.list_dataset_items(run["defaultDatasetId"])
        logger.info(f"Successfully fetched {len(items)} jobs")

        if items and isinstance(items[0], dict):
            logger.debug(f"Raw job fields: {sorted(items[0])}")

        return items


# =============================================================================
# Singleton instance
# =============================================================================

_apify_client: ApifyClient | None = None


def get_apify_client() -> ApifyClient:
    """Get singleton Apify client instance."""
    global _apify_client
    if _apify_client is None:
        settings = get_settings()
        _apify_client = ApifyClient(
            api_token=settings.apify_api_token,
            actor_id=settings.apify_actor_id,
            base_url=settings.apify_base_url,
            timeout=settings.apify_timeout_seconds,
            wait_for_finish=settings.apify_wait_for_finish_seconds,
        )
    return _apify_client


async def close_apify_client() -> None:
    """Close the singleton Apify client (for shutdown)."""
    global _apify_client
    if _apify_client is not None:
        await _apify_client.close()
        _apify_client = None
