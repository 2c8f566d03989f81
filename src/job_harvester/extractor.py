import json
import logging
from datetime import UTC, datetime
from typing import Any
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup, Tag
from pydantic import ValidationError
from soupsieve import SelectorSyntaxError

from job_harvester.dates import normalize_date
from job_harvester.heuristics import FIELD_PATTERNS, PatternKind
from job_harvester.models import JobRecord
from job_harvester.resolver import HEADING_TAGS, FieldSpec, element_text, resolve_field
from job_harvester.sites.base import Rule, SiteProfile

logger = logging.getLogger(__name__)

FIELD_NAMES = [name for name in JobRecord.model_fields]
DATE_FIELDS = ("posted_date", "application_deadline")
URL_ATTRIBUTES = ("data-job-url", "data-url", "data-href")

MIN_ITEM_TEXT = 20
MAX_ITEM_TEXT = 3000
TITLE_LINE_WORDS = ("Data", "Engineer", "Developer", "Manager", "Designer")

GENERIC_ITEM_SELECTORS = [
    ".job-card",
    ".job-listing",
    "[data-job-id]",
    ".job-result-card",
    ".results-list .result",
    ".vacancy-item",
    ".job-search-card",
    ".jobsearch-ResultsList > div",
    ".job-card-container",
    "li.search-result",
    "article.job-item",
    "div.job-offer",
    "[class*='job-card']",
    "[class*='jobCard']",
    "[class*='CardJob']",
    "[class*='card-offer']",
    "[class*='JobCard']",
    "[class*='job_listing']",
    "[class*='job-listing']",
    "[class*='jobListing']",
]

LISTING_FIELDS = (
    FieldSpec(
        "job_title",
        (
            ".job-title",
            "h1",
            "h2",
            "h3",
            "h4",
            ".title",
            "[data-job-title]",
            ".jobTitle",
            "span[title]",
            "[class*='title']",
            "[class*='card-title']",
            "[class*='job-title']",
            "[class*='jobTitle']",
            ".css-1psdjh5 span",
            "div[role='mark']",
            "p.tw-typo-l",
            "p[class*='typo-l']",
            "p[class*='typo-xl']",
        ),
        PatternKind.TITLE,
    ),
    FieldSpec(
        "company_name",
        (
            ".company-name",
            ".employer",
            "[data-company]",
            ".companyName",
            ".company",
            "[data-testid='company-name']",
            ".card-offer__company",
            "span[class*='companyName']",
            "p.tw-typo-s",
            "[class*='company']",
            "span.css-1h7lukg",
            "span.wui-text",
            "p[class*='company']",
        ),
        PatternKind.COMPANY,
    ),
    FieldSpec(
        "location",
        (
            ".location",
            ".job-location",
            "[data-location]",
            ".companyLocation",
            ".workplace",
            "[data-testid='text-location']",
            "div[class*='location']",
            "div[class*='Location']",
            "div.tw-readonly:first-of-type",
            ".tw-tag-secondary-s:first-of-type",
            "[class*='tag'][class*='location']",
            ".css-1restlb",
        ),
        PatternKind.LOCATION,
    ),
    FieldSpec(
        "employment_type",
        (
            ".employment-type",
            ".job-type",
            "[data-job-type]",
            ".metadata-employment-type",
            ".contract-type",
            "div[class*='contract']",
            ".tw-readonly:nth-of-type(2)",
            ".tw-tag-secondary-s:nth-of-type(2)",
            "[class*='contract']",
            "[class*='tag'][class*='contract']",
            "[name='contract']",
        ),
        PatternKind.EMPLOYMENT,
    ),
    FieldSpec(
        "salary_range",
        (
            ".salary",
            ".salary-range",
            "[data-salary]",
            ".metadata-salary-snippet",
            "[class*='salary']",
            "[class*='Salary']",
            ".tw-tag-attractive-s",
            "[class*='tag'][class*='attractive']",
            "[name='salary']",
            ".css-18z4q2i.eu4oa1w0:first-of-type",
        ),
        PatternKind.SALARY,
    ),
    FieldSpec(
        "posted_date",
        (
            ".date",
            ".posted-date",
            "[data-posted-date]",
            ".date-posted",
            ".post-date",
            "[class*='date']",
            "[class*='Date']",
            ".tw-typo-s.tw-text-grey",
            "span[title*='date']",
            "span[title*='Date']",
            "[class*='jobMetadataFooter']",
        ),
    ),
    FieldSpec(
        "job_description",
        (
            ".job-description",
            ".description",
            "[data-job-description]",
            ".card-offer__description",
            "ul[style*='list-style-type:circle']",
            "div[class*='snippet']",
            "p.tw-typo-s",
        ),
    ),
)

# Fields a detail page (or a fetched detail document) can add to a listing record
AUGMENT_FIELDS = (
    FieldSpec(
        "job_description",
        (
            ".job-description",
            "#job-description",
            "[data-job-description]",
            ".jobsearch-JobComponent-description",
        ),
    ),
    FieldSpec("required_skills", (".skills", "#skills", "[data-skills]")),
    FieldSpec("experience_requirements", (".experience", "#experience", "[data-experience]")),
    FieldSpec("education_requirements", (".education", "#education", "[data-education]")),
    FieldSpec("benefits", (".benefits", "#benefits", "[data-benefits]")),
    FieldSpec("application_deadline", (".deadline", "#deadline", "[data-deadline]")),
)

DETAIL_FIELDS = (
    FieldSpec(
        "job_title",
        ("h1", ".job-title", "#job-title", "[data-job-title]", ".jobsearch-JobInfoHeader-title"),
        PatternKind.TITLE,
    ),
    FieldSpec(
        "company_name",
        (".company-name", "#company-name", "[data-company]", ".jobsearch-InlineCompanyRating"),
        PatternKind.COMPANY,
    ),
    FieldSpec(
        "location",
        (
            ".location",
            "#location",
            "[data-location]",
            ".jobsearch-JobInfoHeader-subtitle .jobsearch-JobInfoHeader-subtitle-location",
        ),
        PatternKind.LOCATION,
    ),
    FieldSpec(
        "employment_type",
        (".employment-type", "#job-type", "[data-job-type]", ".metadata-employment-type"),
        PatternKind.EMPLOYMENT,
    ),
    FieldSpec(
        "salary_range",
        (".salary", "#salary", "[data-salary]", ".metadata-salary-snippet"),
        PatternKind.SALARY,
    ),
    *AUGMENT_FIELDS,
    FieldSpec(
        "posted_date",
        (".date", "#posted-date", "[data-posted-date]", ".jobsearch-JobMetadataFooter"),
    ),
)


def _select(root: Tag, selector: str) -> list[Tag]:
    try:
        return root.select(selector)
    except SelectorSyntaxError as e:
        logger.debug(f"Skipping invalid selector '{selector}': {e}")
        return []


def _outermost(elements: list[Tag]) -> list[Tag]:
    """Drop elements nested inside another element of the list."""
    ids = {id(el) for el in elements}
    return [el for el in elements if not any(id(parent) in ids for parent in el.parents)]


def _innermost(elements: list[Tag]) -> list[Tag]:
    """Drop elements that contain another element of the list."""
    containers = {id(parent) for el in elements for parent in el.parents}
    return [el for el in elements if id(el) not in containers]


def find_listing_items(soup: Tag, profile: SiteProfile) -> list[Tag]:
    """
    Find the job summary elements of a listing page, in document order.

    Tries the site's item selectors, then the generic item selectors (first one
    with matches wins), then a structural scan for blocks that read like a job card.
    """
    if profile.item_selectors:
        items = _select(soup, profile.item_selector)
        if items:
            return _outermost(items)

    for selector in GENERIC_ITEM_SELECTORS:
        items = _select(soup, selector)
        if items:
            return _outermost(items)

    candidates = []
    for element in soup.find_all(["div", "li", "article"]):
        text = element_text(element)
        if not MIN_ITEM_TEXT <= len(text) <= MAX_ITEM_TEXT:
            continue
        has_heading = element.find(list(HEADING_TAGS)) is not None
        if FIELD_PATTERNS.looks_like_listing_item(text, has_heading):
            candidates.append(element)
    return _innermost(candidates)


def apply_rule(item: Tag, rule: Rule) -> str:
    """Evaluate one site rule against an item; "" when it matches nothing."""
    if rule.closest:
        element = item.css.closest(rule.selector)
    else:
        matches = item.select(rule.selector)
        element = matches[rule.index] if len(matches) > rule.index else None

    if element is None:
        return ""

    if rule.attr:
        raw = element.get(rule.attr)
        value = " ".join(raw) if isinstance(raw, list) else str(raw or "")
    else:
        value = element_text(element)

    if rule.split and value:
        value = value.split(rule.split)[0]
    return value.strip()


def apply_site_rules(item: Tag, profile: SiteProfile) -> dict[str, str]:
    """Run the profile's field rules; each field takes the first rule that yields text."""
    values: dict[str, str] = {}
    for field_name, field_rules in profile.field_rules.items():
        for rule in field_rules:
            try:
                value = apply_rule(item, rule)
            except Exception as e:
                logger.debug(f"{profile.site} rule '{rule.selector}' failed for {field_name}: {e}")
                continue
            if value:
                values[field_name] = value
                break
    return values


def _text_lines(item: Tag) -> list[str]:
    return [line.strip() for line in item.get_text("\n").split("\n") if line.strip()]


def _apply_text_line_fallback(item: Tag, values: dict[str, str]) -> None:
    """Take the title (and company) from the item's raw text lines."""
    lines = _text_lines(item)
    if not values.get("job_title"):
        for line in lines:
            if any(word in line for word in TITLE_LINE_WORDS) or 5 < len(line) < 50:
                values["job_title"] = line
                break
    if not values.get("job_title") and not values.get("company_name") and len(lines) >= 2:
        values["job_title"] = lines[0]
        values["company_name"] = lines[1]


def _as_text(value: Any) -> str:
    """Flatten a JSON-LD value (string, number, list or object) to display text."""
    if value is None:
        return ""
    if isinstance(value, str):
        return " ".join(value.split())
    if isinstance(value, int | float):
        return str(value)
    if isinstance(value, list):
        return ", ".join(text for text in (_as_text(v) for v in value) if text)
    if isinstance(value, dict):
        for key in ("name", "description", "credentialCategory", "addressLocality"):
            if value.get(key):
                return _as_text(value[key])
    return ""


def _salary_text(base_salary: Any) -> str:
    if not isinstance(base_salary, dict):
        return _as_text(base_salary)
    currency = _as_text(base_salary.get("currency"))
    amount = base_salary.get("value")
    if isinstance(amount, dict):
        low, high = amount.get("minValue"), amount.get("maxValue")
        if low is not None and high is not None:
            text = f"{_as_text(low)} - {_as_text(high)}"
        else:
            text = _as_text(amount.get("value", low if low is not None else high))
        unit = _as_text(amount.get("unitText"))
    else:
        text, unit = _as_text(amount), ""
    return " ".join(part for part in (text, currency, unit and f"/ {unit}") if part)


def _location_text(job_location: Any) -> str:
    locations = job_location if isinstance(job_location, list) else [job_location]
    for location in locations:
        if not isinstance(location, dict):
            continue
        address = location.get("address", {})
        if isinstance(address, dict):
            for key in ("addressLocality", "addressRegion", "addressCountry"):
                text = _as_text(address.get(key))
                if text:
                    return text
        elif address:
            return _as_text(address)
    return ""


def _find_job_posting(data: Any) -> dict[str, Any] | None:
    if isinstance(data, list):
        for entry in data:
            found = _find_job_posting(entry)
            if found:
                return found
        return None
    if not isinstance(data, dict):
        return None
    types = data.get("@type")
    if types == "JobPosting" or (isinstance(types, list) and "JobPosting" in types):
        return data
    if "@graph" in data:
        return _find_job_posting(data["@graph"])
    return None


def extract_structured_data(soup: Tag) -> dict[str, str]:
    """
    Read a schema.org JobPosting from the page's JSON-LD scripts.
    Returns raw field values (dates not yet normalized); {} when there is none.
    """
    for script in soup.find_all("script", type="application/ld+json"):
        raw = script.string or script.get_text()
        if not raw:
            continue
        try:
            posting = _find_job_posting(json.loads(raw))
        except json.JSONDecodeError as e:
            logger.debug(f"Failed to parse JSON-LD: {e}")
            continue
        if not posting:
            continue

        description_html = _as_text(posting.get("description"))
        description = (
            element_text(BeautifulSoup(description_html, "html.parser"))
            if description_html
            else ""
        )
        fields = {
            "job_title": _as_text(posting.get("title")),
            "company_name": _as_text(posting.get("hiringOrganization")),
            "location": _location_text(posting.get("jobLocation")),
            "employment_type": _as_text(posting.get("employmentType")),
            "salary_range": _salary_text(posting.get("baseSalary")),
            "job_description": description,
            "required_skills": _as_text(posting.get("skills")),
            "experience_requirements": _as_text(posting.get("experienceRequirements")),
            "education_requirements": _as_text(posting.get("educationRequirements")),
            "benefits": _as_text(posting.get("jobBenefits")),
            "posted_date": _as_text(posting.get("datePosted")),
            "application_deadline": _as_text(posting.get("validThrough")),
        }
        return {name: value for name, value in fields.items() if value}
    return {}


def resolve_url(href: str, page_url: str) -> str:
    """Make `href` absolute against the page's origin; "" if it is not an http(s) URL."""
    href = (href or "").strip()
    if not href:
        return ""
    try:
        parsed_page = urlparse(page_url)
        origin = f"{parsed_page.scheme}://{parsed_page.netloc}/" if parsed_page.netloc else page_url
        absolute = urljoin(origin, href)
        parsed = urlparse(absolute)
    except ValueError as e:
        logger.debug(f"Unusable link '{href}': {e}")
        return ""
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return ""
    return absolute


def find_item_url(item: Tag) -> str:
    """Raw link of a listing item: the item's own href, its first link, or a data attribute."""
    if item.name == "a" and item.get("href"):
        return str(item["href"])
    anchor = item.select_one("a[href]")
    if anchor is not None:
        return str(anchor["href"])
    for attr in URL_ATTRIBUTES:
        if item.get(attr):
            return str(item[attr])
    return ""


def _fill_with_cascade(root: Tag, specs: tuple[FieldSpec, ...], values: dict[str, str]) -> None:
    for spec in specs:
        if values.get(spec.name):
            continue
        try:
            values[spec.name] = resolve_field(root, spec)
        except Exception as e:
            logger.debug(f"Generic resolution failed for {spec.name}: {e}")


def _build_record(values: dict[str, str], page_url: str, now: datetime) -> JobRecord:
    fields = {name: values.get(name, "") or "" for name in FIELD_NAMES}
    for name in DATE_FIELDS:
        if fields[name]:
            fields[name] = normalize_date(fields[name], now)
    fields["job_url"] = resolve_url(fields["job_url"], page_url)
    fields["source_website"] = urlparse(page_url).hostname or ""
    fields["last_updated"] = now.isoformat(timespec="seconds")
    try:
        return JobRecord(**fields)
    except ValidationError as e:
        logger.debug(f"Dropping invalid job URL '{fields['job_url']}': {e}")
        fields["job_url"] = ""
        return JobRecord(**fields)


def extract_record(
    item: Tag,
    profile: SiteProfile,
    page_url: str,
    now: datetime | None = None,
) -> JobRecord:
    """
    Build a JobRecord from one listing item. The record may lack a title;
    the caller decides whether to keep it.

    Each field tries the site rules first, then the generic resolver cascade.
    Dates are normalized and the job URL is made absolute. A field that cannot
    be read stays empty.
    """
    reference = now or datetime.now(tz=UTC)
    values: dict[str, str] = {}

    try:
        values.update(apply_site_rules(item, profile))
        if profile.text_line_fallback:
            _apply_text_line_fallback(item, values)
    except Exception as e:
        logger.debug(f"Site-specific extraction failed on {profile.site}: {e}")

    _fill_with_cascade(item, LISTING_FIELDS, values)

    if not values.get("job_url"):
        try:
            values["job_url"] = find_item_url(item)
        except Exception as e:
            logger.debug(f"Could not read item link: {e}")

    if profile.description_placeholder and not values.get("job_description"):
        values["job_description"] = profile.description_placeholder

    return _build_record(values, page_url, reference)


def extract_detail_fields(soup: Tag, now: datetime | None = None) -> dict[str, str]:
    """
    Read the supplementary fields (description, skills, experience, education,
    benefits, deadline) from a detail document. Only non-empty values are returned.
    """
    reference = now or datetime.now(tz=UTC)
    names = {spec.name for spec in AUGMENT_FIELDS}
    try:
        values = {k: v for k, v in extract_structured_data(soup).items() if k in names}
    except Exception as e:
        logger.debug(f"Structured data extraction failed: {e}")
        values = {}

    _fill_with_cascade(soup, AUGMENT_FIELDS, values)

    if values.get("application_deadline"):
        values["application_deadline"] = normalize_date(values["application_deadline"], reference)
    return {name: value for name, value in values.items() if value}


def extract_detail_record(
    soup: Tag,
    profile: SiteProfile,
    page_url: str,
    now: datetime | None = None,
) -> JobRecord:
    """
    Build a JobRecord from a page describing a single job. Schema.org
    JobPosting data is consulted between the site rules and the generic cascade.
    """
    reference = now or datetime.now(tz=UTC)
    values: dict[str, str] = {}

    try:
        values.update(apply_site_rules(soup, profile))
    except Exception as e:
        logger.debug(f"Site-specific extraction failed on {profile.site}: {e}")

    try:
        for name, value in extract_structured_data(soup).items():
            values.setdefault(name, value)
    except Exception as e:
        logger.debug(f"Structured data extraction failed: {e}")

    _fill_with_cascade(soup, DETAIL_FIELDS, values)

    # A detail page is its own job URL
    values["job_url"] = page_url
    return _build_record(values, page_url, reference)
