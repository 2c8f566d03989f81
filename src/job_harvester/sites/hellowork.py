from job_harvester.sites.base import Navigation, Pagination, Rule, SiteId, SiteProfile, rules

# Result cards list their tags in a fixed order: location, contract, salary.
TAGS = ".tw-readonly, .tw-tag-secondary-s, .tw-tag-attractive-s"

PROFILE = SiteProfile(
    site=SiteId.HELLOWORK,
    host_markers=("hellowork",),
    url_markers=("hellowork",),
    item_selectors=("li[data-id-storage-target='item']", ".tw-group"),
    field_rules=rules(
        job_title=(Rule("p.tw-typo-l, p.tw-typo-xl, h3 p"),),
        company_name=(Rule("p.tw-typo-s, h3 p:last-child"),),
        location=(Rule(TAGS, index=0),),
        employment_type=(Rule(TAGS, index=1),),
        salary_range=(Rule(TAGS, index=2),),
        job_description=(Rule("div.tw-typo-s p"),),
        posted_date=(Rule(".tw-typo-s.tw-text-grey"),),
        job_url=(Rule("a[href], a[data-turbo='false']", attr="href"),),
    ),
    pagination=Pagination(
        selector="[data-cy='pagination'] [aria-label^='Page']",
        aria_label_pattern=r"Page\s+(\d+)",
        fallback_pages=5,
    ),
    navigation=Navigation(
        next_selectors=("[data-cy='pagination-next']", "[aria-label='Suivant']", "a[rel='next']"),
    ),
)
