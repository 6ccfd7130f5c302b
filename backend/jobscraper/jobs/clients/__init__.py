"""External API clients for job scraping."""

from jobscraper.jobs.clients.apify import ApifyClient, get_apify_client, close_apify_client

__all__ = [
    "ApifyClient",
    "get_apify_client",
    "close_apify_client",
]
