"""Domain enumerations for finboard.

Enums represent fixed sets of domain values (currencies, transaction kinds).
"""

from enum import Enum


class Currency(str, Enum):
    """Supported ISO 4217 currencies."""

    USD = "USD"
    EUR = "EUR"
    ILS = "ILS"

    @classmethod
    def values(cls) -> list[str]:
        """Return all supported currency codes."""
        return [currency.value for currency in cls]


class TransactionType(str, Enum):
    """Direction of a transaction. Categories carry the same type."""

    INCOME = "INCOME"
    EXPENSE = "EXPENSE"
