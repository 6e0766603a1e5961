"""Core constants: dashboard cache key layout and shared literal values.

Single source of truth for the persisted cache key format and its
sentinels. Used by infrastructure.cache.keys and the invalidation gateway.
"""

# Persisted key: dashboard:{user}:{month}:{account}:{currency}
CACHE_PREFIX_DASHBOARD = "dashboard"
CACHE_KEY_SEP = ":"

# Scopes used when a key component is not supplied.
CACHE_SCOPE_ALL_ACCOUNTS = "ALL"
CACHE_SCOPE_DEFAULT_CURRENCY = "DEFAULT"
CACHE_SCOPE_ANONYMOUS = "ANON"

DEFAULT_DASHBOARD_CACHE_TTL_SECONDS = 5 * 60
DEFAULT_DASHBOARD_CACHE_MAX_PAYLOAD_BYTES = 512 * 1024

# YYYY-MM
MONTH_KEY_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"
