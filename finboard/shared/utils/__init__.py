"""Shared utilities: datetime, month keys, generators."""

from finboard.shared.utils.datetime import ensure_utc, utc_now
from finboard.shared.utils.generators import generate_cuid
from finboard.shared.utils.months import (
    month_key_for,
    month_start,
    parse_month_key,
    shift_month,
)

__all__ = [
    "ensure_utc",
    "generate_cuid",
    "month_key_for",
    "month_start",
    "parse_month_key",
    "shift_month",
    "utc_now",
]
