import logging

from playwright.async_api import Page

from job_harvester.config import CrawlConfig
from job_harvester.polling import RetryPolicy, poll_until
from job_harvester.sites.base import SiteProfile

logger = logging.getLogger(__name__)

READY_SETTLE_DELAY = 0.5  # seconds after readyState is "complete"
RENDERED_SETTLE_DELAY = 1.0  # seconds after client-rendered items appear


def load_policy(profile: SiteProfile, config: CrawlConfig) -> RetryPolicy:
    """Polling policy for a page load; client-rendered sites get twice the retries."""
    interval = config.step_delay / 2
    if profile.navigation.client_rendered:
        return RetryPolicy(
            interval=interval,
            max_attempts=config.max_load_retries * 2,
            settle_delay=RENDERED_SETTLE_DELAY,
        )
    return RetryPolicy(
        interval=interval,
        max_attempts=config.max_load_retries,
        settle_delay=READY_SETTLE_DELAY,
    )


async def wait_for_page(page: Page, profile: SiteProfile, config: CrawlConfig) -> bool:
    """
    Wait until a freshly navigated page can be read.

    Ordinary sites are polled for document.readyState == "complete"; sites that
    render listings client-side are polled until enough listing items exist.
    Returns False when the retry budget runs out; the caller continues anyway.
    """
    policy = load_policy(profile, config)

    if profile.navigation.client_rendered and profile.item_selectors:
        minimum = profile.navigation.min_rendered_items

        async def items_rendered() -> bool:
            items = await page.query_selector_all(profile.item_selector)
            return len(items) > minimum

        loaded = await poll_until(items_rendered, policy, f"{profile.site} listing items")
    else:

        async def document_ready() -> bool:
            return await page.evaluate("document.readyState") == "complete"

        loaded = await poll_until(document_ready, policy, "document ready state")

    if loaded:
        logger.info("Page loaded successfully")
    else:
        logger.warning("Page load timed out; continuing with the current content")
    return loaded
