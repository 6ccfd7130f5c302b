import pytest
import pytest_asyncio
from unittest.mock import AsyncMock
from mongomock_motor import AsyncMongoMockClient
from httpx import AsyncClient, ASGITransport

from jobscraper.main import app
from jobscraper.database import get_database
from jobscraper.jobs.dependencies import get_job_scraper


@pytest_asyncio.fixture
async def mock_db():
    """Provide a mock MongoDB database for testing."""
    client = AsyncMongoMockClient()
    db = client["test_db"]
    yield db
    client.close()


@pytest.fixture
def mock_scraper():
    """Provide a scraping actor that returns no records."""
    scraper = AsyncMock()
    scraper.run_actor.return_value = []
    return scraper


@pytest_asyncio.fixture
async def test_client(mock_db, mock_scraper):
    """Provide an async test client with mocked database and actor."""
    app.dependency_overrides[get_database] = lambda: mock_db
    app.dependency_overrides[get_job_scraper] = lambda: mock_scraper

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
