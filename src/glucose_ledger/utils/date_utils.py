"""
Date utilities.

Provides calendar parsing and formatting of record dates, and the date
windows used by the statistics reports.
"""

from datetime import date, datetime, timedelta
from typing import Any

from dateutil import parser
from dateutil.relativedelta import relativedelta

DATE_FORMAT = "%Y-%m-%d"

# Parts missing from a partial date ("May 2023", "2024") fall back to these.
PARTIAL_DATE_DEFAULT = datetime(2000, 1, 1)

REPORT_RANGES: dict[str, relativedelta] = {
    "1m": relativedelta(months=1),
    "3m": relativedelta(months=3),
    "6m": relativedelta(months=6),
    "1y": relativedelta(years=1),
}


def format_date(value: Any) -> str:
    """
    Parse a date-like value and format it as YYYY-MM-DD.

    Args:
        value: Date string (various formats supported), date, datetime or
            pandas Timestamp as produced by spreadsheet decoders. A partial
            date takes the first month and day of its period.

    Returns:
        Date string in YYYY-MM-DD format.

    Raises:
        ValueError: If the value cannot be parsed into a calendar date.
    """
    if isinstance(value, datetime):
        return value.strftime(DATE_FORMAT)

    if isinstance(value, date):
        return value.strftime(DATE_FORMAT)

    try:
        parsed = parser.parse(str(value).strip(), default=PARTIAL_DATE_DEFAULT)
    except (ValueError, OverflowError) as e:
        raise ValueError("Invalid date format") from e

    return parsed.strftime(DATE_FORMAT)


def today_and_yesterday(today: date | None = None) -> tuple[str, str]:
    """
    Get today's and yesterday's dates as YYYY-MM-DD strings.

    Args:
        today: Reference day. Defaults to the current local date.

    Returns:
        Tuple of (today, yesterday).
    """
    reference = today or date.today()
    return format_date(reference), format_date(reference - timedelta(days=1))


def current_week(today: date | None = None) -> tuple[date, date]:
    """Sunday-to-Saturday week containing the reference day."""
    reference = today or date.today()
    start = reference - timedelta(days=(reference.weekday() + 1) % 7)
    return start, start + timedelta(days=6)


def current_month(today: date | None = None) -> tuple[date, date]:
    """First and last day of the reference day's month."""
    reference = today or date.today()
    start = reference.replace(day=1)
    return start, start + relativedelta(months=1, days=-1)


def current_year(today: date | None = None) -> tuple[date, date]:
    """First and last day of the reference day's year."""
    reference = today or date.today()
    return date(reference.year, 1, 1), date(reference.year, 12, 31)


def range_start(range_key: str, today: date | None = None) -> str:
    """
    First day covered by a report range, as YYYY-MM-DD.

    Args:
        range_key: One of "1m", "3m", "6m" or "1y".
        today: Reference day. Defaults to the current local date.

    Raises:
        ValueError: If the range key is unknown.
    """
    if range_key not in REPORT_RANGES:
        raise ValueError(f"Unknown range '{range_key}', expected one of {list(REPORT_RANGES)}")

    reference = today or date.today()
    return format_date(reference - REPORT_RANGES[range_key])
