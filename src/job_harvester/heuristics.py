import re
import unicodedata
from enum import StrEnum


class PatternKind(StrEnum):
    """Field families that have a free-text recognition pattern."""

    TITLE = "title"
    COMPANY = "company"
    LOCATION = "location"
    SALARY = "salary"
    EMPLOYMENT = "employment"


def normalize_text(text: str) -> str:
    """
    Normalize Unicode text to NFKC form so stylized characters
    (e.g. mathematical bold letters, non-breaking spaces) compare as plain text.
    """
    return unicodedata.normalize("NFKC", text)


class FieldPatterns:
    """
    Recognizes what kind of job field a short piece of text looks like,
    using English and French keyword and shape patterns.
    """

    TITLE_KEYWORDS = [
        "engineer",
        "developer",
        "analyst",
        "manager",
        "director",
        "specialist",
        "consultant",
        "designer",
        "développeur",
        "ingénieur",
        "h/f",
        "f/h",
        "m/f",
    ]

    EMPLOYMENT_KEYWORDS = [
        "cdi",
        "cdd",
        "ctt",
        "interim",
        "intérim",
        "full-time",
        "full time",
        "fulltime",
        "part-time",
        "part time",
        "parttime",
        "temps plein",
        "temps partiel",
        "contrat",
        "freelance",
        "internship",
        "stage",
        "alternance",
    ]

    # Words that mark a block of text as a job summary card
    ITEM_TITLE_HINTS = [
        "job title",
        "développeur",
        "engineer",
        "developer",
        "manager",
        "director",
        "analyst",
        "h/f",
        "f/h",
    ]
    ITEM_COMPANY_HINTS = ["company", "employer", "recruteur", "entreprise"]
    ITEM_LOCATION_HINTS = [
        "location",
        "city",
        "remote",
        "télétravail",
        "paris",
        "lyon",
        "marseille",
        "bordeaux",
        "toulouse",
    ]
    ITEM_CONTRACT_HINTS = [
        "cdi",
        "cdd",
        "full-time",
        "part-time",
        "temps plein",
        "temps partiel",
        "contrat",
    ]

    def __init__(self) -> None:
        # Title keywords are matched as substrings: "h/f" has no word boundary
        # and "engineers" or "développeuse" should still count.
        self.title_regex = re.compile(
            "|".join(re.escape(kw) for kw in self.TITLE_KEYWORDS), re.IGNORECASE
        )
        self.employment_regex = re.compile(
            r"\b(?:" + "|".join(re.escape(kw) for kw in self.EMPLOYMENT_KEYWORDS) + r")\b",
            re.IGNORECASE,
        )
        self.location_regex = re.compile(r"[A-Z][a-z]+ -|\d{5}|[A-Z][a-z]+,")
        self.salary_regex = re.compile(r"€|£|\$|USD|EUR|GBP|\d+[kK]\b|\d+,\d+|\d+ - \d+")
        self.company_regex = re.compile(r"^[A-Z]")

    def matches(self, kind: PatternKind, text: str) -> bool:
        """Check whether `text` has the shape of a value for the given field family."""
        if not text:
            return False

        normalized = normalize_text(text)
        if kind is PatternKind.TITLE:
            return bool(self.title_regex.search(normalized))
        if kind is PatternKind.COMPANY:
            return (
                len(normalized) < 50
                and bool(self.company_regex.match(normalized))
                and "salary" not in normalized.lower()
                and not self.salary_regex.search(normalized)
            )
        if kind is PatternKind.LOCATION:
            return bool(self.location_regex.search(normalized))
        if kind is PatternKind.SALARY:
            return bool(self.salary_regex.search(normalized))
        if kind is PatternKind.EMPLOYMENT:
            return bool(self.employment_regex.search(normalized))
        return False

    def looks_like_listing_item(self, text: str, has_heading: bool) -> bool:
        """
        Check whether a block of text reads like a single job summary:
        a title indicator plus at least one company, location or contract hint.
        """
        lowered = normalize_text(text).lower()
        has_title = has_heading or any(hint in lowered for hint in self.ITEM_TITLE_HINTS)
        if not has_title:
            return False
        return (
            any(hint in lowered for hint in self.ITEM_COMPANY_HINTS)
            or any(hint in lowered for hint in self.ITEM_LOCATION_HINTS)
            or any(hint in lowered for hint in self.ITEM_CONTRACT_HINTS)
        )


FIELD_PATTERNS = FieldPatterns()
