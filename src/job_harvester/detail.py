import asyncio
import logging
from datetime import datetime

from bs4 import BeautifulSoup, Tag
from playwright.async_api import BrowserContext, Page, Route
from playwright.async_api import Error as PlaywrightError

from job_harvester.extractor import extract_detail_fields
from job_harvester.models import JobRecord
from job_harvester.sites.base import SiteProfile

logger = logging.getLogger(__name__)

DETAIL_TIMEOUT = 10.0  # seconds for the whole detail fetch
DESCRIPTION_MARKERS = ".job-description, [data-job-description]"
BLOCKED_RESOURCE_TYPES = {"image", "font", "media", "stylesheet"}


def should_augment(listing: Tag, profile: SiteProfile, record: JobRecord) -> bool:
    """
    Whether a listing record is worth a detail fetch. The site must allow a
    secondary context and the record needs a link but no description yet.
    Listing pages that already show descriptions are never augmented.
    """
    if not profile.allows_detail_context or not record.job_url or record.job_description:
        return False
    return listing.select_one(DESCRIPTION_MARKERS) is None


async def _block_heavy_resources(route: Route) -> None:
    if route.request.resource_type in BLOCKED_RESOURCE_TYPES:
        await route.abort()
    else:
        await route.continue_()


async def _load_detail(
    detail_page: Page, url: str, timeout: float, now: datetime | None
) -> dict[str, str]:
    await detail_page.route("**/*", _block_heavy_resources)
    await detail_page.goto(url, wait_until="domcontentloaded", timeout=timeout * 1000)
    html = await detail_page.content()
    return extract_detail_fields(BeautifulSoup(html, "html.parser"), now)


async def augment(
    context: BrowserContext,
    url: str,
    profile: SiteProfile,
    timeout: float = DETAIL_TIMEOUT,
    now: datetime | None = None,
) -> dict[str, str]:
    """
    Load a job's detail page in a separate page of the browser context and read
    the fields a listing card usually lacks.

    Returns {} on timeout, on any browser error, or when the site does not allow
    a secondary context. The secondary page is always closed before returning.
    """
    if not profile.allows_detail_context:
        logger.debug(f"Skipping detail fetch on {profile.site}: secondary context not allowed")
        return {}

    try:
        detail_page = await context.new_page()
    except PlaywrightError as e:
        logger.warning(f"Could not open a page for detail fetch of {url}: {e}")
        return {}

    try:
        return await asyncio.wait_for(_load_detail(detail_page, url, timeout, now), timeout)
    except TimeoutError:
        logger.warning(f"Detail fetch timed out after {timeout}s: {url}")
        return {}
    except PlaywrightError as e:
        logger.warning(f"Detail fetch failed for {url}: {e}")
        return {}
    finally:
        try:
            await detail_page.close()
        except PlaywrightError as e:
            logger.debug(f"Failed to close detail page for {url}: {e}")
