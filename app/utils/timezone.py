"""
Date and time helpers.

Timestamps are stored in UTC. Event dates arrive as free text from the
schedule and results feeds ("June 07, 2025", "2025-06-07", "Sat, Jun 7 2025")
and are parsed best-effort into calendar dates for ordering and for deciding
whether an event has already taken place.
"""
from datetime import date, datetime, timezone
from typing import Optional

from dateutil import parser as date_parser

# UTC timezone for Python < 3.11 compatibility
try:
    from datetime import UTC
except ImportError:
    UTC = timezone.utc


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


def parse_event_date(text: Optional[str]) -> Optional[date]:
    """
    Parse a free-text event date into a calendar date.

    Missing components default to the first month/day of the current year,
    so "June 2025" becomes 2025-06-01.

    Returns:
        The parsed date, or None when the text cannot be read as a date

    Examples:
        >>> parse_event_date("June 07, 2025")
        datetime.date(2025, 6, 7)
        >>> parse_event_date("2025-06-07")
        datetime.date(2025, 6, 7)
        >>> parse_event_date("TBD") is None
        True
    """
    if not text or not text.strip():
        return None

    default = datetime(datetime.now().year, 1, 1)
    try:
        return date_parser.parse(text.strip(), default=default).date()
    except (ValueError, OverflowError):
        return None


def is_concluded(event_date: Optional[date], today: Optional[date] = None) -> bool:
    """
    Whether an event dated ``event_date`` is strictly before the start of ``today``.

    Events without a readable date are never considered concluded.
    """
    if event_date is None:
        return False
    return event_date < (today or date.today())
