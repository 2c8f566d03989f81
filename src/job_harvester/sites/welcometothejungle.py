from job_harvester.sites.base import Navigation, Pagination, Rule, SiteId, SiteProfile, rules

PAGINATION_LINKS = "nav[aria-label='Pagination'] ul li a"

# Client-rendered listing with hashed class names; selectors are tried in order.
PROFILE = SiteProfile(
    site=SiteId.WELCOME_TO_THE_JUNGLE,
    host_markers=("welcometothejungle",),
    url_markers=("welcometothejungle",),
    item_selectors=(
        "li[data-testid='search-results-list-item-wrapper']",
        "div.sc-guWVcn",
        "[data-object-id]",
    ),
    field_rules=rules(
        job_title=(
            Rule("h4 div[role='mark']"),
            Rule("div[class*='mark']"),
            Rule("[class*='sc-dkkA']"),
            Rule("h4.sc-lizKOf"),
            Rule("a[href*='/jobs/'] h4"),
            Rule("a h4"),
        ),
        company_name=(
            Rule("span.sc-lizKOf"),
            Rule("span.wui-text"),
            Rule("[class*='sc-eRdibt']"),
            # Company logo
            Rule("img[alt]", attr="alt"),
        ),
        location=(
            Rule("p.sc-lizKOf span"),
            Rule("[name='location']"),
            Rule("span.sc-foEvvu"),
            Rule("i[name='location'] + p"),
        ),
        employment_type=(
            Rule("div[class*='kbdlSk'] span"),
            Rule("[name='contract']"),
            Rule("i[name='contract'] + span"),
        ),
        salary_range=(
            Rule("div[class*='kbdlSk']:nth-of-type(3) span"),
            Rule("[name='salary']"),
            Rule("i[name='salary'] + span"),
        ),
        job_url=(
            Rule("a.sc-gHCuMn", attr="href"),
            Rule("a[href*='/jobs/']", attr="href"),
            Rule("a[href]", attr="href"),
        ),
    ),
    pagination=Pagination(selector=PAGINATION_LINKS, fallback_pages=10),
    navigation=Navigation(
        next_selectors=("nav[aria-label='Pagination'] a:has(svg[alt='Right'])",),
        page_param="page",
        add_missing_param=True,
        page_link_selector=PAGINATION_LINKS,
        client_rendered=True,
        min_rendered_items=5,
    ),
    allows_detail_context=False,
    text_line_fallback=True,
    description_placeholder="Visit the job URL for complete description",
)
