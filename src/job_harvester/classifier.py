import logging

from bs4 import Tag
from soupsieve import SelectorSyntaxError

from job_harvester.models import PageType
from job_harvester.sites.base import SiteProfile

logger = logging.getLogger(__name__)

LISTING_MARKERS = ".job-card, .job-listing, [data-job-id], .job-result-card"
DETAIL_MARKERS = ".job-description, [data-job-detail], #job-description, .jobsearch-JobComponent"
LISTING_URL_WORDS = ("jobs", "careers", "vacancies")
DETAIL_URL_SEGMENTS = ("job/", "position/", "posting/")


def _count(soup: Tag, selector: str) -> int:
    try:
        return len(soup.select(selector))
    except SelectorSyntaxError as e:
        logger.debug(f"Skipping invalid selector '{selector}': {e}")
        return 0


def classify_page(soup: Tag, url: str, profile: SiteProfile | None = None) -> PageType:
    """
    Decide whether a page lists several jobs, describes one job, or neither.

    More than one listing-item element means a listing; otherwise a detail
    marker means a detail page; otherwise the URL decides.
    """
    listing_selector = LISTING_MARKERS
    if profile is not None and profile.item_selectors:
        listing_selector = f"{LISTING_MARKERS}, {profile.item_selector}"

    if _count(soup, listing_selector) > 1:
        return PageType.LISTING

    if _count(soup, DETAIL_MARKERS) > 0:
        return PageType.DETAIL

    lowered = url.lower()
    if any(word in lowered for word in LISTING_URL_WORDS):
        if any(segment in lowered for segment in DETAIL_URL_SEGMENTS):
            return PageType.DETAIL
        return PageType.LISTING

    return PageType.UNKNOWN
