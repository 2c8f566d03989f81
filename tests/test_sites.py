import pytest

from job_harvester.sites.base import SiteId
from job_harvester.sites.registry import PROFILES, detect_site, get_profile, profile_for_url


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://fr.indeed.com/jobs?q=python", SiteId.INDEED),
        ("https://www.welcometothejungle.com/fr/jobs?page=2", SiteId.WELCOME_TO_THE_JUNGLE),
        ("https://www.apec.fr/candidat/recherche-emploi.html", SiteId.APEC),
        ("https://www.hellowork.com/fr-fr/emploi/recherche.html", SiteId.HELLOWORK),
        ("https://www.linkedin.com/jobs/search/?keywords=python", SiteId.LINKEDIN),
        ("https://www.monster.fr/emploi/recherche", SiteId.MONSTER),
        ("https://www.glassdoor.fr/Emploi/index.htm", SiteId.GLASSDOOR),
        ("https://candidat.pole-emploi.fr/offres/recherche", SiteId.POLE_EMPLOI),
        ("https://careers.example.com/jobs", SiteId.GENERIC),
        ("not a url", SiteId.GENERIC),
    ],
)
def test_detect_site(url, expected):
    """Test site detection from hostnames and URL substrings."""
    assert detect_site(url) == expected


def test_every_site_has_a_profile():
    """Test that each site identifier resolves to its own profile."""
    for site in SiteId:
        assert PROFILES[site].site == site
        assert get_profile(site) is PROFILES[site]


def test_profile_for_url():
    """Test looking up the profile for a page URL."""
    profile = profile_for_url("https://www.welcometothejungle.com/fr/jobs")
    assert profile.navigation.client_rendered is True
    assert profile.allows_detail_context is False
    assert profile.pagination.fallback_pages == 10


def test_item_selector_joins_group():
    """Test that item selectors are joined into one selector group."""
    profile = get_profile(SiteId.LINKEDIN)
    assert profile.item_selector == (
        ".job-search-card, .jobs-search-results__list-item, .scaffold-layout__list-item"
    )


def test_profiles_are_read_only():
    """Test that profile rule tables cannot be modified."""
    profile = get_profile(SiteId.INDEED)
    with pytest.raises(TypeError):
        profile.field_rules["job_title"] = ()


def test_page_count_fallbacks_per_site():
    """Test the assumed page counts when pagination shows no number above 1."""
    assert get_profile(SiteId.INDEED).pagination.fallback_pages == 10
    assert get_profile(SiteId.APEC).pagination.fallback_pages == 5
    assert get_profile(SiteId.HELLOWORK).pagination.fallback_pages == 5
