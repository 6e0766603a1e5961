"""UTC clock helpers.

Stored timestamps (cache fetched_at, created_at) are timezone-aware UTC;
read paths normalize through ensure_utc before comparing against utc_now().
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Current time as an aware UTC datetime. Default clock of the dashboard cache."""
    return datetime.now(UTC)


def ensure_utc(value: datetime | None) -> datetime | None:
    """Return value in UTC; naive values are taken to already be UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
