import os
from unittest.mock import AsyncMock, patch

import pytest

# Set environment variables for tests before any imports happen
os.environ["INTER_STEP_DELAY_MS"] = "0"
os.environ["MAX_LOAD_RETRIES"] = "2"
os.environ["DB_PATH"] = ":memory:"

from job_harvester.config import CrawlConfig  # noqa: E402
from job_harvester.models import JobRecord  # noqa: E402


@pytest.fixture
def fast_config():
    """Session config with no delays and a small load-retry budget."""
    return CrawlConfig(inter_step_delay_ms=0, max_load_retries=1)


@pytest.fixture
def no_sleep():
    """Skip the settle delays while waiting for pages."""
    with patch("job_harvester.polling.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
        yield mock_sleep


@pytest.fixture
def sample_record():
    """A reusable sample JobRecord for tests."""
    return JobRecord(
        job_title="Senior Python Developer",
        company_name="Acme Corp",
        location="Paris, France",
        employment_type="CDI",
        job_url="https://jobs.example.com/jobs/123",
        source_website="jobs.example.com",
        posted_date="2025-03-01",
    )
