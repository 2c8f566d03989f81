import argparse
import asyncio
import logging
import signal
import sys

from playwright.async_api import Page, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright_stealth import Stealth

from job_harvester.config import DB_PATH, INTER_STEP_DELAY_MS, MAX_LOAD_RETRIES, CrawlConfig
from job_harvester.db import Database
from job_harvester.session import CrawlSession

# Set up logging once, in the application entry point only
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", level=logging.INFO
)
logger = logging.getLogger(__name__)

MAX_RETRIES = 3
INITIAL_BACKOFF = 2  # seconds
PAGE_TIMEOUT = 60000  # milliseconds


async def open_target(
    page: Page,
    url: str,
    max_retries: int = MAX_RETRIES,
    initial_backoff: float = INITIAL_BACKOFF,
) -> bool:
    """
    Navigate to the crawl's starting URL with retry logic.
    Returns False if every attempt failed.
    """
    for attempt in range(1, max_retries + 1):
        try:
            response = await page.goto(url, timeout=PAGE_TIMEOUT, wait_until="domcontentloaded")
            if response and response.status >= 400:
                raise PlaywrightError(f"HTTP {response.status} for {url}")
            return True
        except PlaywrightError as e:
            if attempt == max_retries:
                logger.error(f"Failed after {max_retries} attempts opening {url}: {e}")
            else:
                backoff = initial_backoff * (2 ** (attempt - 1))
                logger.warning(
                    f"Open attempt {attempt}/{max_retries} failed for {url}: {e}. "
                    f"Retrying in {backoff}s..."
                )
                await asyncio.sleep(backoff)

    return False


def _log_progress(current_page: int, total_pages: int) -> None:
    logger.info(f"Progress: page {current_page}/{total_pages}")


async def run_session(
    url: str,
    crawl_config: CrawlConfig,
    db_path: str,
    augment_details: bool = True,
    headless: bool = True,
) -> int:
    """
    Open `url` in a stealth browser, crawl it, and store the records in SQLite.

    SIGINT/SIGTERM request a graceful stop: records already extracted are
    still stored. Returns the number of records extracted.
    """
    logger.info(f"Starting Job Harvester on {url}")

    with Database(db_path=db_path) as db:
        async with Stealth().use_async(async_playwright()) as pw:
            browser = await pw.chromium.launch(headless=headless)
            context = await browser.new_context(
                user_agent=(
                    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
                    "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
                ),
                viewport={"width": 1920, "height": 1080},
                locale="en-US",
            )
            page = await context.new_page()

            try:
                if not await open_target(page, url):
                    return 0

                session = CrawlSession(
                    page,
                    db,
                    crawl_config,
                    progress=_log_progress,
                    augment_details=augment_details,
                )

                def _signal_handler() -> None:
                    logger.info("Shutdown signal received. Finishing current item...")
                    session.stop()

                # Register signal handlers on the running event loop
                loop = asyncio.get_running_loop()
                for sig in (signal.SIGINT, signal.SIGTERM):
                    loop.add_signal_handler(sig, _signal_handler)

                try:
                    await session.start()
                finally:
                    for sig in (signal.SIGINT, signal.SIGTERM):
                        loop.remove_signal_handler(sig)
            finally:
                await context.close()
                await browser.close()

        status = session.status()
        logger.info(
            f"Harvest finished. "
            f"Pages: {status.current_page}/{status.total_pages}, "
            f"Records: {status.record_count}, "
            f"Stored in database: {db.count_records()}"
        )
        if status.error:
            logger.error(f"Crawl stopped early: {status.error}")
        return status.record_count


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="job-harvester",
        description="Extract job postings from a job board's result pages into SQLite.",
    )
    parser.add_argument("url", help="Listing or job page to start from.")
    parser.add_argument(
        "--delay-ms",
        type=int,
        default=None,
        metavar="MS",
        help="Delay between crawl steps in milliseconds (overrides INTER_STEP_DELAY_MS).",
    )
    parser.add_argument(
        "--max-retries",
        type=int,
        default=None,
        metavar="N",
        help="Polling attempts while waiting for a page (overrides MAX_LOAD_RETRIES).",
    )
    parser.add_argument(
        "--db",
        default=None,
        metavar="PATH",
        help="SQLite database file (overrides DB_PATH).",
    )
    parser.add_argument(
        "--no-details",
        action="store_true",
        help="Do not open job detail pages to fill in missing fields.",
    )
    parser.add_argument(
        "--headed",
        action="store_true",
        help="Show the browser window.",
    )
    return parser.parse_args(argv)


def build_crawl_config(args: argparse.Namespace) -> CrawlConfig:
    """CLI flags take precedence over environment settings."""
    return CrawlConfig(
        inter_step_delay_ms=args.delay_ms if args.delay_ms is not None else INTER_STEP_DELAY_MS,
        max_load_retries=args.max_retries if args.max_retries is not None else MAX_LOAD_RETRIES,
    )


def cli(argv: list[str] | None = None) -> None:
    """CLI entry point for the package."""
    args = parse_args(argv)

    if args.delay_ms is not None and args.delay_ms < 0:
        logger.error("--delay-ms must be a non-negative integer.")
        sys.exit(1)
    if args.max_retries is not None and args.max_retries < 0:
        logger.error("--max-retries must be a non-negative integer.")
        sys.exit(1)

    asyncio.run(
        run_session(
            args.url,
            build_crawl_config(args),
            args.db or DB_PATH,
            augment_details=not args.no_details,
            headless=not args.headed,
        )
    )


if __name__ == "__main__":
    cli()
