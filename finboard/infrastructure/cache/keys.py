"""Dashboard cache key builder. Single place for key format.

The key is a structured value: the in-flight table is keyed by the object
itself, so invalidation compares fields instead of splitting strings. Only
the persisted cache_key column uses the delimited string form, with each
component percent-escaped so a component containing the separator cannot
produce the same string as a different tuple.
"""

from dataclasses import dataclass
from urllib.parse import quote

from finboard.core.constants import (
    CACHE_KEY_SEP,
    CACHE_PREFIX_DASHBOARD,
    CACHE_SCOPE_ALL_ACCOUNTS,
    CACHE_SCOPE_ANONYMOUS,
    CACHE_SCOPE_DEFAULT_CURRENCY,
)
from finboard.domain.enums import Currency


def _escape(component: str) -> str:
    """Percent-escape the separator (and '%') so joined keys stay unambiguous."""
    return quote(component, safe="-_.~")


@dataclass(frozen=True)
class DashboardCacheKey:
    """Identity of one cacheable dashboard snapshot."""

    user_scope: str
    month_key: str
    account_scope: str
    currency_scope: str

    @property
    def is_all_accounts(self) -> bool:
        return self.account_scope == CACHE_SCOPE_ALL_ACCOUNTS

    def matches(self, month_key: str | None, account_id: str | None) -> bool:
        """True if an invalidation for (month_key, account_id) covers this key.

        A missing filter matches everything. An account filter also matches
        the all-accounts scope, whose totals include every account.
        """
        if month_key and self.month_key != month_key:
            return False
        if account_id and not (self.account_scope == account_id or self.is_all_accounts):
            return False
        return True

    def to_storage_key(self) -> str:
        """Render the persisted cache_key: dashboard:{user}:{month}:{account}:{currency}."""
        return CACHE_KEY_SEP.join(
            [
                CACHE_PREFIX_DASHBOARD,
                _escape(self.user_scope),
                _escape(self.month_key),
                _escape(self.account_scope),
                _escape(self.currency_scope),
            ]
        )

    def __str__(self) -> str:
        return self.to_storage_key()


def build_dashboard_cache_key(
    month_key: str,
    account_id: str | None = None,
    preferred_currency: Currency | str | None = None,
    user_id: str | None = None,
) -> DashboardCacheKey:
    """Build the cache key for a dashboard query. Pure; never fails.

    Missing (or empty) parts map to sentinels: account → ALL,
    currency → DEFAULT, user → ANON.
    """
    if isinstance(preferred_currency, Currency):
        currency = preferred_currency.value
    else:
        currency = preferred_currency or CACHE_SCOPE_DEFAULT_CURRENCY
    return DashboardCacheKey(
        user_scope=user_id or CACHE_SCOPE_ANONYMOUS,
        month_key=month_key,
        account_scope=account_id or CACHE_SCOPE_ALL_ACCOUNTS,
        currency_scope=currency,
    )
