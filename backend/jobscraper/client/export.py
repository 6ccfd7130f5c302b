"""JSON and CSV export of scraped jobs."""

import csv
import io
import json
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any

CSV_COLUMNS = (
    ("Title", "title"),
    ("Company", "companyName"),
    ("Location", "location"),
    ("Published Date", "publishedAt"),
    ("Contract Type", "contractType"),
    ("Job Link", "jobLink"),
    ("Description", "description"),
    ("Scraped At", "scrapedAt"),
)


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def jobs_to_json(jobs: Sequence[Mapping[str, Any]]) -> str:
    """Pretty-print the job array."""
    return json.dumps(list(jobs), indent=2, default=_cell, ensure_ascii=False)


def jobs_to_csv(jobs: Sequence[Mapping[str, Any]]) -> str:
    """Render jobs as CSV with a fixed header row.

    Fields containing a comma, double quote or line break are quoted, with
    inner quotes doubled. Missing values render as empty strings.
    """
    if not jobs:
        return ""

    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow([header for header, _ in CSV_COLUMNS])
    for job in jobs:
        writer.writerow([_cell(job.get(key)) for _, key in CSV_COLUMNS])

    return buffer.getvalue().rstrip("\n")


def export_filename(extension: str, today: datetime | None = None) -> str:
    """Default download name, e.g. jobs-2024-05-01.csv."""
    today = today or datetime.now()
    return f"jobs-{today.date().isoformat()}.{extension}"
