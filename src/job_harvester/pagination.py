import logging
import re
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse

from bs4 import Tag
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page
from soupsieve import SelectorSyntaxError

from job_harvester.exceptions import BrowsingContextLost
from job_harvester.sites.base import Pagination, SiteProfile

logger = logging.getLogger(__name__)

NAVIGATION_TIMEOUT = 30000  # milliseconds

# Assumed page count when generic page links exist but none is numbered above 1
GENERIC_FALLBACK_PAGES = 5

GENERIC_CONTAINERS = (
    ".pagination, .page-number, [data-pagination], nav[role='navigation'], .pager, .ais-Pagination"
)
GENERIC_LAST_PAGE = (
    ".pagination__last-page, .last-page, [data-last-page], .ais-Pagination-item--lastPage, "
    "[aria-label='Last Page'], [aria-label='Dernière page']"
)
GENERIC_PAGE_LINKS = (
    ".page-link, .page-number, [data-page], .ais-Pagination-link, .pagination li a, .pager-item a"
)

GENERIC_NEXT_SELECTORS = [
    ".pagination__next",
    ".next-page",
    "[data-next-page]",
    "a.next",
    ".pagination-next",
    "li.next a",
    "a[rel='next']",
    "button.next",
    "[aria-label='Next']",
    "[aria-label='Next Page']",
    "[aria-label='Suivant']",
    "[aria-label='Page suivante']",
    ".ais-Pagination-item--next a",
    "[data-testid='pagination-page-next']",
    "a.pagination-next",
    ".navNext",
    "a.right",
    "a.nextLink",
    ".pager-next a",
    "nav a:last-child",
]


def _leading_int(text: str) -> int | None:
    match = re.match(r"\s*(\d+)", text or "")
    return int(match.group(1)) if match else None


def _select(soup: Tag, selector: str) -> list[Tag]:
    try:
        return soup.select(selector)
    except SelectorSyntaxError as e:
        logger.debug(f"Skipping invalid selector '{selector}': {e}")
        return []


def _site_page_count(soup: Tag, pagination: Pagination) -> int | None:
    if not pagination.selector:
        return None
    controls = _select(soup, pagination.selector)
    if not controls:
        return None

    numbers: list[int] = []
    for control in controls:
        if pagination.aria_label_pattern:
            match = re.search(pagination.aria_label_pattern, str(control.get("aria-label") or ""))
            number = int(match.group(1)) if match else None
        else:
            number = _leading_int(control.get_text())
        if number is not None:
            numbers.append(number)

    max_page = max(numbers, default=1)
    return max_page if max_page > 1 else pagination.fallback_pages


def _generic_page_count(soup: Tag) -> int | None:
    if not _select(soup, GENERIC_CONTAINERS):
        return None

    for element in _select(soup, GENERIC_LAST_PAGE):
        last_page = _leading_int(element.get_text())
        if last_page is not None:
            return last_page

    links = _select(soup, GENERIC_PAGE_LINKS)
    if not links:
        return None
    numbers = [n for n in (_leading_int(link.get_text()) for link in links) if n is not None]
    max_page = max(numbers, default=1)
    return max_page if max_page > 1 else GENERIC_FALLBACK_PAGES


def estimate_total_pages(soup: Tag, profile: SiteProfile) -> int:
    """
    Best-effort count of result pages: the site's own pagination controls
    first, then generic pagination markup, else 1. May undercount.
    """
    pages = _site_page_count(soup, profile.pagination)
    if pages is None:
        pages = _generic_page_count(soup)
    return max(pages or 1, 1)


def rewrite_page_param(url: str, param: str, page_number: int, add_missing: bool) -> str | None:
    """Set `param` to `page_number` in the URL's query; None when absent and not to be added."""
    parsed = urlparse(url)
    query = parse_qsl(parsed.query, keep_blank_values=True)
    if any(key == param for key, _ in query):
        query = [(key, str(page_number) if key == param else value) for key, value in query]
    elif add_missing:
        query.append((param, str(page_number)))
    else:
        return None
    return urlunparse(parsed._replace(query=urlencode(query)))


async def _click(page: Page, selector: str) -> bool:
    try:
        element = await page.query_selector(selector)
        if element is None:
            return False
        await element.click()
        return True
    except PlaywrightError as e:
        logger.debug(f"Click on '{selector}' failed: {e}")
        return False


async def _goto(page: Page, url: str) -> bool:
    try:
        await page.goto(url, wait_until="domcontentloaded", timeout=NAVIGATION_TIMEOUT)
        return True
    except PlaywrightError as e:
        logger.debug(f"Navigation to {url} failed: {e}")
        return False


async def _click_page_number(page: Page, selector: str, page_number: int) -> bool:
    try:
        links = await page.query_selector_all(selector)
        for link in links:
            text = (await link.text_content() or "").strip()
            if text == str(page_number):
                await link.click()
                return True
    except PlaywrightError as e:
        logger.debug(f"Numbered page link click failed: {e}")
    return False


async def advance(page: Page, profile: SiteProfile, page_number: int) -> bool:
    """
    Move the browser to result page `page_number`.

    Tries the site's "next" controls, the site's page URL parameter, the
    generic "next" controls, and finally a numbered page link. Returns whether
    a navigation was triggered; False means no further page could be reached.
    """
    if page.is_closed():
        raise BrowsingContextLost("Page was closed before navigating to the next page")

    navigation = profile.navigation

    for selector in navigation.next_selectors:
        if await _click(page, selector):
            logger.info(f"Navigating to page {page_number} via {profile.site} next control")
            return True

    if navigation.page_param:
        new_url = rewrite_page_param(
            page.url, navigation.page_param, page_number, navigation.add_missing_param
        )
        if new_url and await _goto(page, new_url):
            logger.info(f"Navigating to page {page_number} at {new_url}")
            return True

    for selector in GENERIC_NEXT_SELECTORS:
        if await _click(page, selector):
            logger.info(f"Navigating to page {page_number} via next control '{selector}'")
            return True

    link_selector = navigation.page_link_selector or GENERIC_PAGE_LINKS
    if await _click_page_number(page, link_selector, page_number):
        logger.info(f"Navigating to page {page_number} via numbered page link")
        return True

    logger.info(f"No navigation method found for page {page_number}")
    return False
