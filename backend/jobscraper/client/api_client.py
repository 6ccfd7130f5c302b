"""HTTP client for the job scraper API.

Scrape submissions go through a `SubmissionGuard`, so one client never has
two scrapes outstanding at the same time.
"""

import logging
from collections.abc import Mapping
from datetime import timedelta
from typing import Any

import httpx

from jobscraper.client.exceptions import ClientTransportError
from jobscraper.client.guard import SubmissionGuard
from jobscraper.config import get_settings

logger = logging.getLogger(__name__)

LIST_FIELDS = ("companyName", "companyId")


def build_scrape_payload(form: Mapping[str, Any]) -> dict[str, Any]:
    """Turn raw form input into a scrape request body.

    Empty fields are dropped, company fields are split on commas and `rows`
    is sent as an integer when it parses as one.
    """
    payload: dict[str, Any] = {}

    for key, value in form.items():
        if value is None or value == "" or value == []:
            continue

        if key in LIST_FIELDS:
            if isinstance(value, str):
                items = value.split(",")
            elif isinstance(value, (list, tuple)):
                items = value
            else:
                items = [value]
            items = [str(item).strip() for item in items if str(item).strip()]
            if items:
                payload[key] = items
        elif key == "rows":
            try:
                payload[key] = int(value)
            except (TypeError, ValueError):
                # Let the server report it as a validation error
                payload[key] = value
        else:
            payload[key] = value

    return payload


class JobScraperClient:
    """Async client for the /api endpoints."""

    def __init__(
        self,
        base_url: str,
        guard: SubmissionGuard,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client and recover an abandoned guard flag.

        Args:
            base_url: API root, e.g. "http://localhost:3000/api"
            guard: Single-flight guard for scrape submissions
            timeout: HTTP timeout in seconds; None waits for long scrapes
            transport: Optional transport (tests)
        """
        self._base_url = base_url.rstrip("/")
        self._guard = guard
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

        self._guard.recover_stale()

    @property
    def guard(self) -> SubmissionGuard:
        return self._guard

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
                headers={"Accept": "application/json"},
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "JobScraperClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def _request(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        """Send a request and decode the JSON envelope.

        Application errors come back as {"success": false, "error": ...}
        and are returned as-is.
        """
        client = await self._get_client()

        try:
            response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Request to {url} failed: {e}")
            raise ClientTransportError(f"Failed to reach the job scraper API: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise ClientTransportError(
                f"Malformed response from the job scraper API ({response.status_code})"
            ) from e

        if not isinstance(data, dict):
            raise ClientTransportError(
                f"Malformed response from the job scraper API ({response.status_code})"
            )
        return data

    async def submit_scrape(self, form: Mapping[str, Any]) -> dict[str, Any]:
        """Submit a scrape while holding the guard.

        Raises:
            SubmissionInProgressError: if another submission is outstanding.
            ClientTransportError: on network failure or a malformed response.
        """
        payload = build_scrape_payload(form)

        with self._guard.hold():
            logger.info(f"Sending scrape request: {payload}")
            return await self._request("POST", "/scrape", json=payload)

    async def list_searches(self, page: int = 1, limit: int = 10) -> dict[str, Any]:
        """Get one page of search history."""
        return await self._request("GET", "/searches", params={"page": page, "limit": limit})

    async def get_search(self, search_request_id: str) -> dict[str, Any]:
        """Get one search request with its jobs."""
        return await self._request("GET", f"/searches/{search_request_id}")


def create_client() -> JobScraperClient:
    """Build a client from settings."""
    settings = get_settings()
    guard = SubmissionGuard(
        settings.client_state_path,
        stale_after=timedelta(minutes=settings.client_guard_stale_minutes),
    )
    return JobScraperClient(settings.api_url, guard)
