"""Tests for the job scraper API client."""

from datetime import datetime, timedelta, timezone

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport

from jobscraper.client.api_client import JobScraperClient, build_scrape_payload
from jobscraper.client.exceptions import ClientTransportError, SubmissionInProgressError
from jobscraper.client.guard import SubmissionGuard
from jobscraper.database import get_database
from jobscraper.jobs.dependencies import get_job_scraper
from jobscraper.jobs.exceptions import ScraperError
from jobscraper.main import app


@pytest.fixture
def guard(tmp_path):
    return SubmissionGuard(tmp_path / "guard.json")


@pytest_asyncio.fixture
async def client(mock_db, mock_scraper, guard):
    """Provide a client talking to the app in-process."""
    app.dependency_overrides[get_database] = lambda: mock_db
    app.dependency_overrides[get_job_scraper] = lambda: mock_scraper

    async with JobScraperClient(
        "http://test/api", guard, transport=ASGITransport(app=app)
    ) as client:
        yield client

    app.dependency_overrides.clear()


class TestBuildScrapePayload:
    """Test form parsing."""

    def test_drops_empty_fields_and_splits_companies(self):
        payload = build_scrape_payload(
            {
                "title": "",
                "location": "Berlin",
                "companyName": " ACME , ,Globex ",
                "companyId": "",
                "workType": "2",
                "rows": "25",
            }
        )

        assert payload == {
            "location": "Berlin",
            "companyName": ["ACME", "Globex"],
            "workType": "2",
            "rows": 25,
        }

    def test_wraps_scalar_company_values(self):
        payload = build_scrape_payload({"location": "Berlin", "companyId": 1035, "companyName": ["ACME "]})

        assert payload["companyId"] == ["1035"]
        assert payload["companyName"] == ["ACME"]

    def test_keeps_unparseable_rows_for_the_server(self):
        assert build_scrape_payload({"location": "Berlin", "rows": "lots"})["rows"] == "lots"


class TestSubmitScrape:
    """Test submit_scrape."""

    async def test_success_releases_guard(self, client, guard, mock_scraper):
        mock_scraper.run_actor.return_value = [{"title": "Dev", "id": "1"}]

        result = await client.submit_scrape({"location": "Berlin", "rows": "5"})

        assert result["success"] is True
        assert result["jobCount"] == 1
        assert not guard.is_held()

    async def test_application_error_releases_guard(self, client, guard):
        result = await client.submit_scrape({"rows": "5"})

        assert result == {"success": False, "error": "Location and rows are required fields"}
        assert not guard.is_held()

    async def test_operational_error_releases_guard(self, client, guard, mock_scraper):
        mock_scraper.run_actor.side_effect = ScraperError("Apify actor run r finished with status ABORTED")

        result = await client.submit_scrape({"location": "Berlin", "rows": 5})

        assert result["success"] is False
        assert "ABORTED" in result["error"]
        assert not guard.is_held()

    async def test_rejects_while_in_progress(self, client, guard, mock_scraper):
        guard.acquire()

        with pytest.raises(SubmissionInProgressError):
            await client.submit_scrape({"location": "Berlin", "rows": 5})

        mock_scraper.run_actor.assert_not_called()
        assert guard.is_held()

    async def test_transport_error_releases_guard(self, guard):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = JobScraperClient("http://test/api", guard, transport=httpx.MockTransport(handler))

        with pytest.raises(ClientTransportError):
            await client.submit_scrape({"location": "Berlin", "rows": 5})

        await client.close()
        assert not guard.is_held()

    async def test_malformed_response_is_transport_error(self, guard):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, text="<html>Bad Gateway</html>")

        client = JobScraperClient("http://test/api", guard, transport=httpx.MockTransport(handler))

        with pytest.raises(ClientTransportError, match="Malformed"):
            await client.submit_scrape({"location": "Berlin", "rows": 5})

        await client.close()
        assert not guard.is_held()


class TestStaleRecoveryOnLoad:
    """Test that a new client clears an abandoned flag."""

    def test_stale_flag_cleared_on_load(self, tmp_path):
        now = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
        path = tmp_path / "guard.json"
        SubmissionGuard(path, clock=lambda: now - timedelta(minutes=6)).acquire()

        guard = SubmissionGuard(path, clock=lambda: now)
        JobScraperClient("http://test/api", guard)

        assert not guard.is_held()

    def test_recent_flag_kept_on_load(self, tmp_path):
        now = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
        path = tmp_path / "guard.json"
        SubmissionGuard(path, clock=lambda: now - timedelta(minutes=2)).acquire()

        guard = SubmissionGuard(path, clock=lambda: now)
        JobScraperClient("http://test/api", guard)

        assert guard.is_held()


class TestHistory:
    """Test history calls."""

    async def test_list_and_get(self, client, mock_scraper):
        mock_scraper.run_actor.return_value = [{"title": "Dev"}]
        submitted = await client.submit_scrape({"location": "Berlin", "rows": 1})

        history = await client.list_searches(limit=10)
        detail = await client.get_search(submitted["searchRequestId"])

        assert history["pagination"]["total"] == 1
        assert history["searches"][0]["id"] == submitted["searchRequestId"]
        assert detail["jobs"][0]["title"] == "Dev"

    async def test_get_unknown_returns_error_envelope(self, client):
        result = await client.get_search("nope")

        assert result == {"success": False, "error": "Search request not found"}
