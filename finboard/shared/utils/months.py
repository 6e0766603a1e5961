"""Month key helpers. A month key is the string YYYY-MM."""

import re
from datetime import date

from finboard.core.constants import MONTH_KEY_PATTERN

_MONTH_KEY_RE = re.compile(MONTH_KEY_PATTERN)


def is_month_key(value: str) -> bool:
    """Return True if value is a well-formed YYYY-MM key."""
    return bool(_MONTH_KEY_RE.fullmatch(value))


def parse_month_key(month_key: str) -> date:
    """Return the first day of the month named by month_key.

    Raises:
        ValueError: If month_key is not YYYY-MM.
    """
    if not is_month_key(month_key):
        raise ValueError(f"month must be in YYYY-MM format, got {month_key!r}")
    year, month = month_key.split("-")
    return date(int(year), int(month), 1)


def month_key_for(day: date) -> str:
    """Return the YYYY-MM key of the month containing day."""
    return f"{day.year:04d}-{day.month:02d}"


def month_start(day: date) -> date:
    """Return the first day of the month containing day."""
    return day.replace(day=1)


def shift_month(first_of_month: date, months: int) -> date:
    """Return the first day of the month `months` away (negative goes back)."""
    index = first_of_month.year * 12 + (first_of_month.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)
