"""Date parsing utilities."""

from datetime import date, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "January 15, 2024", etc.
    - Relative dates: "today", "yesterday", "last month", "this month", etc.

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    # Handle relative dates
    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    # Handle "last/this/next" + month
    if date_str == "last month":
        return (today - relativedelta(months=1)).replace(day=1)
    if date_str == "this month":
        return today.replace(day=1)
    if date_str == "next month":
        return (today + relativedelta(months=1)).replace(day=1)

    # Try parsing as absolute date
    try:
        dt = date_parser.parse(date_str)
        return dt.date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_month(month_str: str) -> date:
    """Parse a salary month into the first day of that month.

    Accepts "2024-03", "March 2024", "2024-03-15" and the relative forms
    understood by ``parse_date`` ("this month", "last month").

    Raises:
        ValueError: If month string cannot be parsed
    """
    if not month_str or not month_str.strip():
        raise ValueError("Empty month string")

    text = month_str.strip()
    parts = text.split("-")
    if len(parts) == 2 and all(part.isdigit() for part in parts):
        year, month = int(parts[0]), int(parts[1])
        try:
            return date(year, month, 1)
        except ValueError as e:
            raise ValueError(f"Could not parse month '{month_str}': {e}")

    return first_of_month(parse_date(text))


def first_of_month(day: date) -> date:
    """Return the first day of the month containing ``day``."""
    return day.replace(day=1)
