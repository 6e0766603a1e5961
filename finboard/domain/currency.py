"""Money helpers: two-decimal rounding and static FX conversion.

Rates are expressed as target currency per 1 USD. Conversion goes through
USD so every pair is covered by one table.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

from finboard.domain.enums import Currency

TWO_PLACES = Decimal("0.01")

DEFAULT_RATES: dict[Currency, Decimal] = {
    Currency.USD: Decimal("1"),
    Currency.EUR: Decimal("0.92"),
    Currency.ILS: Decimal("3.70"),
}


def round_money(value: Decimal) -> Decimal:
    """Round to cents, half away from zero."""
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class CurrencyConverter:
    """Deterministic in-memory FX conversion."""

    rates: Mapping[Currency, Decimal] = field(default_factory=lambda: dict(DEFAULT_RATES))

    def rate(self, currency: Currency) -> Decimal:
        """Return units of currency per 1 USD; ValueError if unsupported."""
        try:
            return self.rates[Currency(currency)]
        except KeyError as exc:
            raise ValueError(f"Unsupported currency: {currency}") from exc

    def convert(self, amount: Decimal, source: Currency, target: Currency) -> Decimal:
        """Convert amount from source to target currency, rounded to cents."""
        if Currency(source) == Currency(target):
            return round_money(amount)
        in_usd = amount / self.rate(source)
        return round_money(in_usd * self.rate(target))
