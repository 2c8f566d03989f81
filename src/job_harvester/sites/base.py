from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType


class SiteId(StrEnum):
    INDEED = "indeed"
    WELCOME_TO_THE_JUNGLE = "welcometothejungle"
    APEC = "apec"
    HELLOWORK = "hellowork"
    LINKEDIN = "linkedin"
    MONSTER = "monster"
    GLASSDOOR = "glassdoor"
    POLE_EMPLOI = "pole-emploi"
    GENERIC = "generic"


@dataclass(frozen=True)
class Rule:
    """
    One site-specific lookup for a field.

    `selector` is evaluated against the listing item (or, with `closest`,
    against the item and its ancestors). The value is the matched element's
    text, or its `attr` attribute when given. `index` picks the n-th match
    instead of the first, and `split` keeps only the text before a separator.
    """

    selector: str
    attr: str | None = None
    split: str | None = None
    index: int = 0
    closest: bool = False


@dataclass(frozen=True)
class Pagination:
    """
    How a site exposes its page count.

    `fallback_pages` is the page count assumed when the controls exist but
    no page number above 1 is visible. It is a tuning guess for sites known
    to paginate deeply, not something read from the page.
    """

    selector: str | None = None
    aria_label_pattern: str | None = None
    fallback_pages: int = 1


@dataclass(frozen=True)
class Navigation:
    """How to move to the next results page on a site."""

    next_selectors: tuple[str, ...] = ()
    page_param: str | None = None
    # Add the page parameter when the current URL lacks it (otherwise only rewrite it)
    add_missing_param: bool = False
    page_link_selector: str | None = None
    # Listing content is rendered client-side; readiness alone does not mean it is there
    client_rendered: bool = False
    min_rendered_items: int = 5


@dataclass(frozen=True)
class SiteProfile:
    """Immutable bundle of extraction and pagination rules for one site."""

    site: SiteId
    host_markers: tuple[str, ...] = ()
    url_markers: tuple[str, ...] = ()
    item_selectors: tuple[str, ...] = ()
    field_rules: Mapping[str, tuple[Rule, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    pagination: Pagination = Pagination()
    navigation: Navigation = Navigation()
    # Whether detail pages may be loaded in a secondary browsing context
    allows_detail_context: bool = True
    # Use the item's text lines when the title (and company) rules find nothing
    text_line_fallback: bool = False
    description_placeholder: str = ""

    def matches(self, hostname: str, url: str) -> bool:
        hostname = hostname.lower()
        url = url.lower()
        return any(marker in hostname for marker in self.host_markers) or any(
            marker in url for marker in self.url_markers
        )

    @property
    def item_selector(self) -> str:
        """All item selectors joined into one selector group."""
        return ", ".join(self.item_selectors)


def rules(**fields: tuple[Rule, ...]) -> Mapping[str, tuple[Rule, ...]]:
    """Build a read-only field -> rules mapping."""
    return MappingProxyType(dict(fields))
