"""Rate limiter instance for SlowAPI.

Shared so both main (app.state.limiter) and route modules use the same
instance without circular imports.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from finboard.core.config import get_settings

limiter = Limiter(key_func=get_remote_address)

WRITE_ENDPOINT_LIMIT = "120/minute"

limit_dashboard = limiter.limit(lambda: get_settings().dashboard_rate_limit)
limit_writes = limiter.limit(WRITE_ENDPOINT_LIMIT)
