"""Client-side exceptions."""


class JobScraperClientError(Exception):
    """Base exception for the job scraper client."""

    def __init__(self, message: str = "Job scraper client error"):
        self.message = message
        super().__init__(self.message)


class SubmissionInProgressError(JobScraperClientError):
    """Raised when a scrape is submitted while another one is outstanding."""

    def __init__(self):
        super().__init__(
            "A scraping request is already in progress. Please wait for it to complete."
        )


class ClientTransportError(JobScraperClientError):
    """Raised when the API cannot be reached or answers with something unreadable."""

    def __init__(self, message: str = "Failed to reach the job scraper API"):
        super().__init__(message)
