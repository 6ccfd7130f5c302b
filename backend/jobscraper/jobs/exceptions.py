"""Job scraping module exceptions (Single Responsibility)."""


class JobScraperError(Exception):
    """Base exception for job scraping operations."""

    def __init__(self, message: str = "Job scraping error occurred"):
        self.message = message
        super().__init__(self.message)


class ScrapeValidationError(JobScraperError):
    """Raised when a scrape submission is missing required fields."""

    def __init__(self, message: str = "Location and rows are required fields"):
        super().__init__(message)


class ScrapeOperationError(JobScraperError):
    """Raised when the scraping collaborator fails for a submitted request."""

    def __init__(self, message: str = "Failed to scrape jobs", search_request_id: str | None = None):
        self.search_request_id = search_request_id
        super().__init__(message)


class ScraperError(JobScraperError):
    """Raised by the Apify client when an actor run cannot deliver items."""

    def __init__(self, message: str = "Apify actor run failed"):
        super().__init__(message)


class SearchRequestNotFoundError(JobScraperError):
    """Raised when no search request matches an identifier."""

    def __init__(self, search_request_id: str):
        self.search_request_id = search_request_id
        super().__init__("Search request not found")


class SearchRequestAlreadyTerminalError(JobScraperError):
    """Raised when a completed or failed search request would be modified."""

    def __init__(self, search_request_id: str):
        self.search_request_id = search_request_id
        super().__init__(f"Search request {search_request_id} is no longer pending")


class InvalidPaginationError(JobScraperError):
    """Raised when page or limit is not a positive integer."""

    def __init__(self):
        super().__init__("page and limit must be positive integers")
