import logging
import re
from collections.abc import Callable
from datetime import date, datetime, timedelta

from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta

logger = logging.getLogger(__name__)

LABEL_PREFIX = re.compile(
    r"^(?:posted|date|published|publié|publiée|posté|postée|mise à jour|employer actif)"
    r"(?:\s*:\s*|\s+)(?:(?:on|le)\s+)?",
    re.IGNORECASE,
)

ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}(?:[T ][0-9:.+\-Z]*)?$")

ENGLISH_RELATIVE = re.compile(
    r"\b(\d+|an?)\+?\s*(minute|min|hour|hr|day|week|month|year)s?\b.*?\bago\b",
    re.IGNORECASE,
)
FRENCH_RELATIVE = re.compile(
    r"\bil y a\s+(\d+|une?)\s*(minute|min|heure|jour|semaine|mois|an)s?\b",
    re.IGNORECASE,
)
TODAY = re.compile(r"\b(?:today|just posted|aujourd[’']hui|à l[’']instant)\b", re.IGNORECASE)
YESTERDAY = re.compile(r"\b(?:yesterday|hier)\b", re.IGNORECASE)

NUMERIC_DATE = re.compile(r"(?<!\d)(\d{1,2})[/.-](\d{1,2})[/.-](\d{2,4})(?!\d)")

DAY_MONTH_YEAR = re.compile(
    r"(?<!\d)(\d{1,2})(?:st|nd|rd|th|er)?,?\s+([a-z]+)\.?,?\s+(\d{4})(?!\d)", re.IGNORECASE
)
MONTH_DAY_YEAR = re.compile(
    r"\b([a-z]+)\.?\s+(\d{1,2})(?:st|nd|rd|th)?,?\s+(\d{4})(?!\d)", re.IGNORECASE
)
DAY_MONTH = re.compile(r"(?<!\d)(\d{1,2}),?\s+([a-z]+)\.?$", re.IGNORECASE)

FRENCH_MONTHS = {
    "janvier": "january",
    "janv": "january",
    "février": "february",
    "fevrier": "february",
    "févr": "february",
    "fevr": "february",
    "mars": "march",
    "avril": "april",
    "avr": "april",
    "mai": "may",
    "juin": "june",
    "juillet": "july",
    "juil": "july",
    "août": "august",
    "aout": "august",
    "septembre": "september",
    "octobre": "october",
    "novembre": "november",
    "décembre": "december",
    "decembre": "december",
    "déc": "december",
}

ENGLISH_MONTHS = {
    "january": 1,
    "february": 2,
    "march": 3,
    "april": 4,
    "may": 5,
    "june": 6,
    "july": 7,
    "august": 8,
    "september": 9,
    "october": 10,
    "november": 11,
    "december": 12,
}


def _month_number(name: str) -> int | None:
    name = name.lower()
    if name in ENGLISH_MONTHS:
        return ENGLISH_MONTHS[name]
    # Abbreviations: "Feb", "Sept", "Dec."
    if len(name) >= 3:
        for full, number in ENGLISH_MONTHS.items():
            if full.startswith(name):
                return number
    return None


def _translate_french_months(text: str) -> str:
    """Replace French month names (whole words) with their English names."""

    def _replace(match: re.Match[str]) -> str:
        word = match.group(0)
        return FRENCH_MONTHS.get(word.lower(), word)

    return re.sub(r"[a-zA-Zéèûô]+", _replace, text)


def _subtract(now: datetime, amount: int, unit: str) -> date:
    unit = unit.lower()
    if unit.startswith("min"):
        return (now - timedelta(minutes=amount)).date()
    if unit in ("hour", "hr", "heure"):
        return (now - timedelta(hours=amount)).date()
    if unit in ("day", "jour"):
        return (now - timedelta(days=amount)).date()
    if unit in ("week", "semaine"):
        return (now - timedelta(days=amount * 7)).date()
    if unit in ("month", "mois"):
        return (now - relativedelta(months=amount)).date()
    return (now - relativedelta(years=amount)).date()


def _amount(raw: str) -> int:
    return 1 if raw.lower() in ("a", "an", "un", "une") else int(raw)


def _parse_iso(text: str, now: datetime) -> date | None:
    if not ISO_DATE.match(text):
        return None
    return isoparse(text).date()


def _parse_relative(text: str, now: datetime) -> date | None:
    match = ENGLISH_RELATIVE.search(text) or FRENCH_RELATIVE.search(text)
    if match:
        return _subtract(now, _amount(match.group(1)), match.group(2))
    if YESTERDAY.search(text):
        return (now - timedelta(days=1)).date()
    if TODAY.search(text):
        return now.date()
    return None


def _parse_numeric(text: str, now: datetime) -> date | None:
    match = NUMERIC_DATE.search(text)
    if not match:
        return None
    day, month, year = (int(part) for part in match.groups())
    if year < 100:
        year += 2000
    if year < 1000:
        return None
    # Day-first, always
    return date(year, month, day)


def _parse_month_name(text: str, now: datetime) -> date | None:
    text = _translate_french_months(text)

    match = DAY_MONTH_YEAR.search(text)
    if match:
        month = _month_number(match.group(2))
        if month:
            return date(int(match.group(3)), month, int(match.group(1)))

    match = MONTH_DAY_YEAR.search(text)
    if match:
        month = _month_number(match.group(1))
        if month:
            return date(int(match.group(3)), month, int(match.group(2)))

    match = DAY_MONTH.search(text)
    if match:
        month = _month_number(match.group(2))
        if month:
            return date(now.year, month, int(match.group(1)))

    return None


STRATEGIES: list[Callable[[str, datetime], date | None]] = [
    _parse_iso,
    _parse_relative,
    _parse_numeric,
    _parse_month_name,
]


def clean_date_text(text: str) -> str:
    """Collapse whitespace and strip a leading label such as "Posted:" or "Publié le"."""
    collapsed = " ".join(text.split())
    return LABEL_PREFIX.sub("", collapsed).strip()


def normalize_date(text: str, now: datetime | None = None) -> str:
    """
    Convert date text to "YYYY-MM-DD" when it can be understood, otherwise
    return the cleaned text unchanged. Never raises, and never returns ""
    for non-empty input.

    Understood forms: English and French relative dates ("3 days ago",
    "il y a 2 semaines"), day-first numeric dates ("03/04/2025"), month-name
    dates in both languages ("3 avril 2025", "April 3, 2025", "24, Feb") and
    ISO dates.
    """
    if not text:
        return ""
    if not text.strip():
        return text

    cleaned = clean_date_text(text) or " ".join(text.split())
    reference = now or datetime.now()

    for strategy in STRATEGIES:
        try:
            parsed = strategy(cleaned, reference)
        except (ValueError, OverflowError) as e:
            logger.debug(f"{strategy.__name__} rejected date '{cleaned}': {e}")
            continue
        if parsed:
            return parsed.isoformat()

    return cleaned
