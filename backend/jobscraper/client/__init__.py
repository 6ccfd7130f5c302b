"""Client for the job scraper API: submission guard and exports."""

from jobscraper.client.api_client import JobScraperClient, build_scrape_payload, create_client
from jobscraper.client.exceptions import (
    ClientTransportError,
    JobScraperClientError,
    SubmissionInProgressError,
)
from jobscraper.client.export import jobs_to_csv, jobs_to_json
from jobscraper.client.guard import SubmissionGuard

__all__ = [
    "JobScraperClient",
    "build_scrape_payload",
    "create_client",
    "ClientTransportError",
    "JobScraperClientError",
    "SubmissionInProgressError",
    "jobs_to_csv",
    "jobs_to_json",
    "SubmissionGuard",
]
