from job_harvester.sites.base import Navigation, Pagination, Rule, SiteId, SiteProfile, rules

PROFILE = SiteProfile(
    site=SiteId.INDEED,
    host_markers=("indeed",),
    url_markers=("indeed.",),
    item_selectors=(
        "li.css-1ac2h1w.eu4oa1w0",
        ".jobsearch-ResultsList > div",
        ".jobCard",
        "div[data-testid='job-card']",
        "[class*='job_']",
    ),
    field_rules=rules(
        job_title=(Rule(".jobTitle span[id^='jobTitle-'], span[title], h2.jobTitle span"),),
        company_name=(Rule("[data-testid='company-name'], .companyName"),),
        location=(Rule("[data-testid='text-location'], .companyLocation"),),
        salary_range=(
            Rule(
                ".salary-snippet-container, [class*='salarySnippet'], "
                "[data-testid='attribute_snippet_testid']:first-of-type"
            ),
        ),
        # "Full-time +1" -> "Full-time"
        employment_type=(
            Rule("[data-testid='attribute_snippet_testid']:nth-of-type(2)", split="+"),
        ),
        job_description=(Rule("[data-testid='jobsnippet_footer'] ul, .job-snippet, .summary"),),
        posted_date=(Rule("[data-testid='myJobsStateDate'], .date"),),
        job_url=(Rule("a[id^='sj_'], a[data-jk], h2.jobTitle a", attr="href"),),
    ),
    pagination=Pagination(
        selector=(
            "[data-testid='pagination-page-number'], .css-tvvxwd, "
            "nav[role='navigation'] a, .pagination > *"
        ),
        fallback_pages=10,
    ),
    navigation=Navigation(
        next_selectors=(
            "[data-testid='pagination-page-next']",
            "[aria-label='Next Page']",
            "nav[role='navigation'] a:last-child",
        ),
    ),
)
