from job_harvester.sites.base import SiteId, SiteProfile

# No site-specific rules: extraction and pagination rely on the generic cascades.
PROFILE = SiteProfile(site=SiteId.GENERIC)

# Recognized job boards without dedicated rule tables yet.
MONSTER = SiteProfile(site=SiteId.MONSTER, host_markers=("monster",), url_markers=("monster",))
GLASSDOOR = SiteProfile(
    site=SiteId.GLASSDOOR, host_markers=("glassdoor",), url_markers=("glassdoor",)
)
POLE_EMPLOI = SiteProfile(
    site=SiteId.POLE_EMPLOI, host_markers=("pole-emploi",), url_markers=("pole-emploi",)
)
