"""Tests for job exports."""

import csv
import io
import json
from datetime import datetime

from jobscraper.client.export import export_filename, jobs_to_csv, jobs_to_json

JOB = {
    "title": "Backend Engineer",
    "companyName": "ACME",
    "location": "Berlin",
    "publishedAt": "2024-04-30",
    "jobLink": "https://www.linkedin.com/jobs/view/1",
    "contractType": "F",
    "posterProfileLink": "",
    "description": "Build APIs",
    "scrapedAt": "2024-05-01T12:00:00Z",
}


class TestJobsToCsv:
    """Test CSV export."""

    def test_header_row_order(self):
        header = jobs_to_csv([JOB]).splitlines()[0]

        assert header == (
            "Title,Company,Location,Published Date,Contract Type,Job Link,Description,Scraped At"
        )

    def test_plain_row(self):
        row = jobs_to_csv([JOB]).splitlines()[1]

        assert row == (
            "Backend Engineer,ACME,Berlin,2024-04-30,F,"
            "https://www.linkedin.com/jobs/view/1,Build APIs,2024-05-01T12:00:00Z"
        )

    def test_quotes_commas_and_quotes(self):
        """Should wrap the field and double inner quotes."""
        job = dict(JOB, title='Senior, "Staff" Engineer')

        row = jobs_to_csv([job]).splitlines()[1]

        assert row.startswith('"Senior, ""Staff"" Engineer",ACME,')

    def test_round_trips_through_csv_reader(self):
        job = dict(JOB, title='Senior, "Staff" Engineer', description="Line one\nLine two")

        rows = list(csv.reader(io.StringIO(jobs_to_csv([job]))))

        assert rows[1][0] == 'Senior, "Staff" Engineer'
        assert rows[1][6] == "Line one\nLine two"

    def test_missing_and_none_fields_are_empty(self):
        job = {"title": "Dev", "companyName": None}

        rows = list(csv.reader(io.StringIO(jobs_to_csv([job]))))

        assert rows[1] == ["Dev", "", "", "", "", "", "", ""]

    def test_datetimes_are_iso_formatted(self):
        job = dict(JOB, scrapedAt=datetime(2024, 5, 1, 12, 0, 0))

        rows = list(csv.reader(io.StringIO(jobs_to_csv([job]))))

        assert rows[1][7] == "2024-05-01T12:00:00"

    def test_no_jobs(self):
        assert jobs_to_csv([]) == ""


class TestJobsToJson:
    """Test JSON export."""

    def test_pretty_prints_job_array(self):
        output = jobs_to_json([JOB])

        assert json.loads(output) == [JOB]
        assert output.startswith("[\n  {\n")

    def test_serializes_datetimes(self):
        output = jobs_to_json([{"scrapedAt": datetime(2024, 5, 1, 12, 0, 0)}])

        assert json.loads(output) == [{"scrapedAt": "2024-05-01T12:00:00"}]


def test_export_filename():
    assert export_filename("csv", datetime(2024, 5, 1, 8, 0)) == "jobs-2024-05-01.csv"
