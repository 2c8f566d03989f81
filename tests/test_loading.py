from unittest.mock import AsyncMock, MagicMock

import pytest

from job_harvester.config import CrawlConfig
from job_harvester.loading import load_policy, wait_for_page
from job_harvester.sites.base import SiteId
from job_harvester.sites.registry import get_profile
from tests.fakes import FakePage

CONFIG = CrawlConfig(inter_step_delay_ms=1000, max_load_retries=3)


def test_load_policy_generic():
    """Test the readiness polling policy for ordinary sites."""
    policy = load_policy(get_profile(SiteId.INDEED), CONFIG)
    assert policy.interval == 0.5
    assert policy.max_attempts == 3
    assert policy.settle_delay == 0.5


def test_load_policy_client_rendered_doubles_retries():
    """Test that client-rendered sites get a larger retry budget."""
    policy = load_policy(get_profile(SiteId.WELCOME_TO_THE_JUNGLE), CONFIG)
    assert policy.max_attempts == 6
    assert policy.settle_delay == 1.0


@pytest.mark.asyncio
async def test_wait_for_ready_state(no_sleep):
    """Test waiting for document readiness."""
    page = MagicMock()
    page.evaluate = AsyncMock(side_effect=["loading", "interactive", "complete"])

    assert await wait_for_page(page, get_profile(SiteId.GENERIC), CONFIG) is True
    assert page.evaluate.await_count == 3


@pytest.mark.asyncio
async def test_wait_for_ready_state_times_out(no_sleep):
    """Test that a page that never finishes loading is not an error."""
    page = MagicMock()
    page.evaluate = AsyncMock(return_value="loading")

    assert await wait_for_page(page, get_profile(SiteId.GENERIC), CONFIG) is False
    assert page.evaluate.await_count == 4


@pytest.mark.asyncio
async def test_wait_for_rendered_items(no_sleep):
    """Test that client-rendered sites are polled for enough listing items."""
    items = "".join(
        f'<li data-testid="search-results-list-item-wrapper">Job {n}</li>' for n in range(6)
    )
    page = FakePage([f"<ul>{items}</ul>"])

    profile = get_profile(SiteId.WELCOME_TO_THE_JUNGLE)
    assert await wait_for_page(page, profile, CONFIG) is True


@pytest.mark.asyncio
async def test_wait_for_rendered_items_too_few(no_sleep):
    """Test that too few rendered items exhausts the larger retry budget."""
    page = FakePage(['<ul><li data-testid="search-results-list-item-wrapper">Job</li></ul>'])
    page.query_selector_all = AsyncMock(wraps=page.query_selector_all)

    profile = get_profile(SiteId.WELCOME_TO_THE_JUNGLE)
    assert await wait_for_page(page, profile, CONFIG) is False
    assert page.query_selector_all.await_count == 7
