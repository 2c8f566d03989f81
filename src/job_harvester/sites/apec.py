from job_harvester.sites.base import Navigation, Pagination, Rule, SiteId, SiteProfile, rules

# Each entry of the offer's detail list is labelled by its icon's alt text.
DETAILS = "ul.details-offer li"


def _detail(*alt_keywords: str) -> Rule:
    return Rule(", ".join(f"{DETAILS}:has(img[alt*='{kw}' i])" for kw in alt_keywords))


PROFILE = SiteProfile(
    site=SiteId.APEC,
    host_markers=("apec",),
    url_markers=("apec.",),
    item_selectors=("apec-recherche-resultat", ".card.card-offer", "[class*='card-offer']"),
    field_rules=rules(
        job_title=(Rule("h2.card-title"),),
        company_name=(Rule("p.card-offer__company"),),
        job_description=(Rule("p.card-offer__description"),),
        salary_range=(_detail("salaire"), Rule(f"{DETAILS}:-soup-contains('k€')")),
        employment_type=(_detail("contrat", "bag"),),
        location=(_detail("localisation", "map"),),
        posted_date=(_detail("date", "watch"),),
        # Result cards are wrapped in the offer link
        job_url=(Rule("a[href]", attr="href", closest=True),),
    ),
    pagination=Pagination(selector=".pagination-item, [id^='pagination']", fallback_pages=5),
    navigation=Navigation(
        next_selectors=(
            ".pagination a[rel='next']",
            ".pagination-nav .next",
            ".pagination-nav [aria-label='Page suivante']",
        ),
        page_param="page",
        add_missing_param=False,
    ),
)
