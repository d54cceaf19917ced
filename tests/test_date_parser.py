"""Tests for date parser with relative dates."""

import pytest
from datetime import date

from journalkit.utils.date_parser import parse_date, get_date_range

TODAY = date(2025, 3, 15)


def test_parse_absolute_date():
    """Test parsing absolute dates."""
    assert parse_date("2024-01-15") == date(2024, 1, 15)


def test_parse_invalid_iso_date():
    """Test that impossible ISO dates are rejected rather than guessed."""
    with pytest.raises(ValueError):
        parse_date("2024-02-30")


@pytest.mark.parametrize(
    "text,expected",
    [
        ("today", date(2025, 3, 15)),
        ("Yesterday", date(2025, 3, 14)),
        ("tomorrow", date(2025, 3, 16)),
        ("this month", date(2025, 3, 1)),
        ("last month", date(2025, 2, 1)),
        ("this year", date(2025, 1, 1)),
        ("last year", date(2024, 1, 1)),
    ],
)
def test_parse_relative(text, expected):
    assert parse_date(text, today=TODAY) == expected


def test_parse_last_month_in_january():
    assert parse_date("last month", today=date(2025, 1, 10)) == date(2024, 12, 1)


def test_parse_today_default():
    assert parse_date("today") == date.today()


def test_parse_invalid_relative():
    """Test parsing invalid relative date."""
    with pytest.raises(ValueError):
        parse_date("last invalid")


def test_parse_standard_formats():
    """Test parsing various standard date formats."""
    # These should all work via dateutil parser
    assert parse_date("January 15, 2024") == date(2024, 1, 15)
    assert parse_date("15/01/2024") == date(2024, 1, 15)
    assert parse_date("15.01.2024") == date(2024, 1, 15)


def test_get_date_range_this_month():
    assert get_date_range("this-month", today=TODAY) == (date(2025, 3, 1), TODAY)


def test_get_date_range_this_year():
    assert get_date_range("this-year", today=TODAY) == (date(2025, 1, 1), TODAY)


def test_get_date_range_last_month():
    assert get_date_range("last-month", today=TODAY) == (date(2025, 2, 1), date(2025, 2, 28))


def test_get_date_range_last_month_across_year():
    start, end = get_date_range("last-month", today=date(2025, 1, 1))
    assert (start, end) == (date(2024, 12, 1), date(2024, 12, 31))


def test_get_date_range_last_year():
    assert get_date_range("last-year", today=TODAY) == (date(2024, 1, 1), date(2024, 12, 31))


def test_get_date_range_invalid_period():
    """Test get_date_range with invalid period."""
    with pytest.raises(ValueError, match="Unknown period"):
        get_date_range("invalid-period")
