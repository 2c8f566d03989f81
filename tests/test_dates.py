from datetime import datetime

import pytest

from job_harvester.dates import clean_date_text, normalize_date

NOW = datetime(2025, 3, 2, 12, 0)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("3 days ago", "2025-02-27"),
        ("Posted 3 days ago", "2025-02-27"),
        ("30+ days ago", "2025-01-31"),
        ("a week ago", "2025-02-23"),
        ("2 months ago", "2025-01-02"),
        ("5 hours ago", "2025-03-02"),
        ("il y a 2 jours", "2025-02-28"),
        ("Publié il y a une semaine", "2025-02-23"),
        ("il y a 1 mois", "2025-02-02"),
        ("Today", "2025-03-02"),
        ("Just posted", "2025-03-02"),
        ("aujourd'hui", "2025-03-02"),
        ("Yesterday", "2025-03-01"),
        ("hier", "2025-03-01"),
    ],
)
def test_relative_dates(text, expected):
    """Test English and French relative dates against a fixed reference date."""
    assert normalize_date(text, NOW) == expected


def test_relative_date_crosses_month_and_year_boundaries():
    """Test that subtracting days crosses month and year boundaries correctly."""
    assert normalize_date("3 days ago", datetime(2025, 3, 1)) == "2025-02-26"
    assert normalize_date("2 days ago", datetime(2025, 1, 1)) == "2024-12-30"
    assert normalize_date("1 day ago", datetime(2024, 3, 1)) == "2024-02-29"


def test_numeric_dates_are_day_first():
    """Test that numeric dates are read day-first."""
    assert normalize_date("03/04/2025", NOW) == "2025-04-03"
    assert normalize_date("Posted: 15.01.2025", NOW) == "2025-01-15"
    assert normalize_date("1-2-25", NOW) == "2025-02-01"


@pytest.mark.parametrize(
    "text, expected",
    [
        ("3 April 2025", "2025-04-03"),
        ("April 3, 2025", "2025-04-03"),
        ("3 avril 2025", "2025-04-03"),
        ("Publié le 12 février 2025", "2025-02-12"),
        ("1er mars 2025", "2025-03-01"),
        ("16, Nov, 2024", "2024-11-16"),
        ("24, Feb", "2025-02-24"),
        ("Sept 5, 2024", "2024-09-05"),
    ],
)
def test_month_name_dates(text, expected):
    """Test English and French month-name dates."""
    assert normalize_date(text, NOW) == expected


def test_iso_dates():
    """Test that ISO dates and timestamps are reduced to the calendar date."""
    assert normalize_date("2025-02-14", NOW) == "2025-02-14"
    assert normalize_date("2025-02-14T09:30:00Z", NOW) == "2025-02-14"


def test_unparseable_text_is_returned_cleaned():
    """Test that text that is not a date comes back cleaned, never empty."""
    assert normalize_date("Posted:   recently", NOW) == "recently"
    assert normalize_date("Employer active", NOW) == "Employer active"


def test_invalid_calendar_date_falls_back_to_text():
    """Test that impossible dates do not raise."""
    assert normalize_date("31/02/2025", NOW) == "31/02/2025"


def test_empty_input():
    """Test that empty input stays empty and blank input is not turned into ''."""
    assert normalize_date("", NOW) == ""
    assert normalize_date("   ", NOW) == "   "


def test_label_only_input_is_not_emptied():
    """Test that a bare label is returned rather than an empty string."""
    assert normalize_date("Posted", NOW) == "Posted"


def test_clean_date_text():
    """Test label stripping and whitespace collapsing."""
    assert clean_date_text("  Posted on\n 3 days ago ") == "3 days ago"
    assert clean_date_text("Publiée le 12/01/2025") == "12/01/2025"
    assert clean_date_text("Mise à jour : hier") == "hier"
