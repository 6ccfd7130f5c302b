"""Default values used when normalizing jobs and building actor input."""

# Placeholders for fields missing from a raw scraped record
DEFAULT_TITLE = "No Title"
DEFAULT_COMPANY_NAME = "Unknown Company"
DEFAULT_LOCATION = "Not specified"

# Raw fields that may carry the job URL, checked in this order
LINK_FIELDS = (
    "jobLink",
    "link",
    "url",
    "jobUrl",
    "linkedInUrl",
    "applyUrl",
)

# Raw fields that may carry the LinkedIn job id, checked in this order
JOB_ID_FIELDS = ("id", "jobId")

LINKEDIN_JOB_VIEW_URL = "https://www.linkedin.com/jobs/view/{job_id}"

# Always attached to the actor input
RESIDENTIAL_PROXY = {
    "useApifyProxy": True,
    "apifyProxyGroups": ["RESIDENTIAL"],
}

# Optional text filters forwarded to the actor only when set
OPTIONAL_TEXT_PARAMS = (
    "title",
    "location",
    "publishedAt",
    "workType",
    "contractType",
    "experienceLevel",
)

# Optional list filters forwarded to the actor only when non-empty
OPTIONAL_LIST_PARAMS = ("companyName", "companyId")

SEARCH_REQUESTS_COLLECTION = "search_requests"
