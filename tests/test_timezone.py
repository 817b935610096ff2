"""Tests for event date helpers."""
from datetime import date

from app.utils.timezone import is_concluded, parse_event_date


def test_parse_event_date_formats():
    assert parse_event_date("June 07, 2025") == date(2025, 6, 7)
    assert parse_event_date("2025-06-07") == date(2025, 6, 7)
    assert parse_event_date("Sat, Jun 7 2025") == date(2025, 6, 7)


def test_parse_event_date_unreadable():
    assert parse_event_date("TBD") is None
    assert parse_event_date("") is None
    assert parse_event_date(None) is None


def test_is_concluded_is_strictly_before_today():
    today = date(2025, 6, 8)

    assert is_concluded(date(2025, 6, 7), today) is True
    assert is_concluded(date(2025, 6, 8), today) is False
    assert is_concluded(date(2025, 6, 9), today) is False
    assert is_concluded(None, today) is False
