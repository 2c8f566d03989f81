from types import MappingProxyType
from urllib.parse import urlparse

from job_harvester.sites import apec, generic, hellowork, indeed, linkedin, welcometothejungle
from job_harvester.sites.base import SiteId, SiteProfile

# Detection order; the first profile whose markers appear in the URL wins.
KNOWN_PROFILES: tuple[SiteProfile, ...] = (
    indeed.PROFILE,
    welcometothejungle.PROFILE,
    apec.PROFILE,
    hellowork.PROFILE,
    linkedin.PROFILE,
    generic.MONSTER,
    generic.GLASSDOOR,
    generic.POLE_EMPLOI,
)

PROFILES = MappingProxyType(
    {profile.site: profile for profile in (*KNOWN_PROFILES, generic.PROFILE)}
)


def detect_site(url: str) -> SiteId:
    """Map a page URL to a known site by hostname/URL substrings, or GENERIC."""
    hostname = urlparse(url).hostname or ""
    for profile in KNOWN_PROFILES:
        if profile.matches(hostname, url):
            return profile.site
    return SiteId.GENERIC


def get_profile(site: SiteId) -> SiteProfile:
    return PROFILES.get(site, generic.PROFILE)


def profile_for_url(url: str) -> SiteProfile:
    return get_profile(detect_site(url))
