from job_harvester.sites.base import Rule, SiteId, SiteProfile, rules

PROFILE = SiteProfile(
    site=SiteId.LINKEDIN,
    host_markers=("linkedin",),
    url_markers=("linkedin",),
    item_selectors=(
        ".job-search-card",
        ".jobs-search-results__list-item",
        ".scaffold-layout__list-item",
    ),
    field_rules=rules(
        job_title=(
            Rule(".job-card-list__title, .base-search-card__title, h3.base-result-card__title"),
        ),
        company_name=(
            Rule(
                ".job-card-container__company-name, .base-search-card__subtitle, "
                "h4.base-result-card__subtitle"
            ),
        ),
        # "Paris, France · Remote" -> "Paris, France"
        location=(
            Rule(
                ".job-card-container__metadata-wrapper, .job-search-card__location, "
                ".base-search-card__metadata",
                split="·",
            ),
        ),
        posted_date=(
            Rule(
                ".job-card-container__footer-time-ago, .job-search-card__listdate, "
                ".base-result-card__metadata-info"
            ),
        ),
        job_url=(Rule("a", attr="href"),),
    ),
)
