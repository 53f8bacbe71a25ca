"""Fallible parsers for raw URL parameter values.

Each parser returns ``None`` (or an empty list) instead of raising, so a
filter can treat a bad value as "not applicable".
"""

import re
from datetime import date, timedelta

DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)
DAYS_PATTERN = re.compile(r"[+-]?\d{1,32}", re.ASCII)

MAX_DAYS = timedelta.max.days


def parse_days(value: str | None) -> int | None:
    """Parse a positive day count of at most ``MAX_DAYS``.

    Only plain ASCII decimal digits with an optional sign are accepted.
    Returns None for anything else.
    """
    if value is None:
        return None
    value = value.strip()
    if not DAYS_PATTERN.fullmatch(value):
        return None
    days = int(value)
    return days if 0 < days <= MAX_DAYS else None


def parse_date(value: str | None) -> date | None:
    """Parse a ``YYYY-MM-DD`` date.

    The string must match the four-two-two digit shape exactly before a
    calendar parse is attempted; ``2024-13-40`` passes the shape check but
    fails the calendar check, and both give None.
    """
    if value is None:
        return None
    value = value.strip()
    if not DATE_PATTERN.fullmatch(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def split_list(value: str | None) -> list[str]:
    """Split a comma-separated parameter, dropping blanks and duplicates."""
    if not value:
        return []
    items: list[str] = []
    for item in value.split(","):
        item = item.strip()
        if item and item not in items:
            items.append(item)
    return items
