import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable

from bs4 import BeautifulSoup, Tag
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from job_harvester.classifier import classify_page
from job_harvester.collector import RecordCollector
from job_harvester.config import CrawlConfig
from job_harvester.detail import augment, should_augment
from job_harvester.exceptions import BrowsingContextLost
from job_harvester.extractor import extract_detail_record, extract_record, find_listing_items
from job_harvester.loading import wait_for_page
from job_harvester.models import JobRecord, PageType, SessionState, SessionStatus
from job_harvester.pagination import advance, estimate_total_pages
from job_harvester.sites.base import SiteProfile
from job_harvester.sites.registry import profile_for_url

logger = logging.getLogger(__name__)

BATCH_SIZE = 10  # records buffered before they are handed to the collector

ProgressCallback = Callable[[int, int], Awaitable[None] | None]


class CrawlSession:
    """
    Walks the result pages of one browser page and hands extracted job records
    to a collector.

    A session owns its counters and its buffer of unemitted records. It is
    driven by start(), which runs the whole crawl, and stop(), which requests
    cancellation; the request takes effect at the next item or page boundary.
    Records are emitted in page order and, within a page, in document order.
    """

    def __init__(
        self,
        page: Page,
        collector: RecordCollector,
        config: CrawlConfig | None = None,
        *,
        progress: ProgressCallback | None = None,
        augment_details: bool = True,
        batch_size: int = BATCH_SIZE,
    ) -> None:
        self.page = page
        self.collector = collector
        self.config = config or CrawlConfig()
        self.augment_details = augment_details
        self.batch_size = batch_size
        self._progress = progress

        self.state = SessionState.IDLE
        self.current_page = 0
        self.total_pages = 0
        self.record_count = 0
        self.error: str | None = None
        self._pending: list[JobRecord] = []

    @property
    def running(self) -> bool:
        return self.state is SessionState.RUNNING

    def status(self) -> SessionStatus:
        return SessionStatus(
            state=self.state,
            current_page=self.current_page,
            total_pages=self.total_pages,
            record_count=self.record_count,
            error=self.error,
        )

    def stop(self) -> None:
        """Request cancellation. Buffered records are still emitted before the session stops."""
        if self.state is SessionState.RUNNING:
            logger.info(f"Stop requested on page {self.current_page}/{self.total_pages}")
            self.state = SessionState.STOPPING

    async def start(self) -> None:
        """
        Run the crawl to completion, cancellation or context loss.

        Does nothing if the session is already running. Losing the browsing
        context is the only failure that ends the crawl early; it is reported
        through status().error rather than raised.
        """
        if self.state in (SessionState.RUNNING, SessionState.STOPPING):
            logger.info("Session already running; ignoring start request")
            return

        self.state = SessionState.RUNNING
        self.current_page = 0
        self.total_pages = 0
        self.record_count = 0
        self.error = None
        self._pending = []

        try:
            await self._crawl()
        except BrowsingContextLost as e:
            logger.error(f"Browsing context lost, stopping crawl: {e}")
            self.error = str(e)
        finally:
            try:
                self._flush()
            finally:
                self.state = SessionState.STOPPED
                logger.info(
                    f"Crawl finished. Pages: {self.current_page}/{self.total_pages}, "
                    f"Records: {self.record_count}"
                )

    async def _crawl(self) -> None:
        profile = profile_for_url(self.page.url)
        logger.info(f"Crawling {self.page.url} as {profile.site}")
        soup = await self._snapshot(profile)
        if soup is None:
            return

        self.total_pages = estimate_total_pages(soup, profile)
        self.current_page = 1
        logger.info(f"Found {self.total_pages} page(s) of results")
        await self._report_progress()

        while self.running and self.current_page <= self.total_pages:
            page_type = classify_page(soup, self.page.url, profile)

            if page_type is PageType.DETAIL:
                self._extract_detail(soup, profile)
                return
            if page_type is PageType.UNKNOWN:
                logger.info(f"Page {self.current_page} is not a job page; nothing to extract")
                return

            try:
                found = await self._extract_listing(soup, profile)
            except BrowsingContextLost:
                raise
            except Exception as e:
                logger.error(f"Extraction failed on page {self.current_page}: {e}")
                found = True
            self._flush()

            if not found:
                logger.info(f"No job items on page {self.current_page}; ending crawl")
                return
            if not self.running or self.current_page >= self.total_pages:
                return

            next_page = self.current_page + 1
            if not await advance(self.page, profile, next_page):
                logger.warning(f"Could not navigate to page {next_page}; ending crawl")
                return

            self.current_page = next_page
            await wait_for_page(self.page, profile, self.config)
            await self._report_progress()
            soup = await self._snapshot(profile)
            if soup is None:
                logger.warning(f"Page {self.current_page} could not be read; ending crawl")
                return

    async def _snapshot(self, profile: SiteProfile) -> BeautifulSoup | None:
        """
        Parse the page's current DOM.

        A page that is still navigating gets one more load wait and a second
        read. Returns None when the DOM still cannot be read.
        """
        for attempt in (1, 2):
            if self.page.is_closed():
                raise BrowsingContextLost("Page was closed")
            try:
                html = await self.page.content()
                return BeautifulSoup(html, "html.parser")
            except PlaywrightError as e:
                if self.page.is_closed():
                    raise BrowsingContextLost(str(e)) from e
                if attempt == 2:
                    logger.warning(f"Could not read page {self.current_page}: {e}")
                    return None
                logger.info(f"Page {self.current_page} not readable yet, waiting again: {e}")
                await wait_for_page(self.page, profile, self.config)
        return None

    async def _extract_listing(self, soup: BeautifulSoup, profile: SiteProfile) -> bool:
        """Extract every item on a listing page. Returns False when the page has no items."""
        items = find_listing_items(soup, profile)
        if not items:
            return False

        logger.info(f"Found {len(items)} job items on page {self.current_page}/{self.total_pages}")
        for index, item in enumerate(items):
            if not self.running:
                logger.info(f"Crawl cancelled before item {index + 1} on page {self.current_page}")
                break

            try:
                record = await self._extract_item(soup, item, profile)
            except BrowsingContextLost:
                raise
            except Exception as e:
                logger.warning(f"Skipping item {index + 1} on page {self.current_page}: {e}")
                record = None

            if record is not None:
                self._add(record)

            if index < len(items) - 1:
                await asyncio.sleep(self.config.step_delay / 2)
        return True

    async def _extract_item(
        self, soup: BeautifulSoup, item: Tag, profile: SiteProfile
    ) -> JobRecord | None:
        record = extract_record(item, profile, self.page.url)
        if not record.job_title:
            logger.debug("Item has no job title; skipped")
            return None

        if self.augment_details and should_augment(soup, profile, record):
            extra = await augment(self.page.context, record.job_url, profile)
            if extra:
                record = record.with_missing(extra)
        return record

    def _extract_detail(self, soup: BeautifulSoup, profile: SiteProfile) -> None:
        try:
            record = extract_detail_record(soup, profile, self.page.url)
        except Exception as e:
            logger.error(f"Extraction failed on detail page {self.page.url}: {e}")
            return
        if record.job_title:
            self._add(record)
        else:
            logger.info("Detail page has no job title; nothing to extract")

    def _add(self, record: JobRecord) -> None:
        self._pending.append(record)
        self.record_count += 1
        if len(self._pending) >= self.batch_size:
            self._flush()

    def _flush(self) -> None:
        if not self._pending:
            return
        batch, self._pending = self._pending, []
        self.collector.submit_records(batch)
        logger.info(f"Emitted batch of {len(batch)} records ({self.record_count} total)")

    async def _report_progress(self) -> None:
        if self._progress is None:
            return
        try:
            result = self._progress(self.current_page, self.total_pages)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.warning(f"Progress callback failed: {e}")
