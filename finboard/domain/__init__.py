"""Domain layer: enums, money helpers, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from finboard.domain.currency import CurrencyConverter, round_money
from finboard.domain.enums import Currency, TransactionType
from finboard.domain.exceptions import (
    AuthorizationException,
    FinboardException,
    ResourceNotFoundException,
    SqlNotConfiguredException,
    ValidationException,
)

__all__ = [
    "AuthorizationException",
    "Currency",
    "CurrencyConverter",
    "FinboardException",
    "ResourceNotFoundException",
    "SqlNotConfiguredException",
    "TransactionType",
    "ValidationException",
    "round_money",
]
