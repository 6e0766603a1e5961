"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Nothing is required at import time: the database URL
is checked when the engine is first built, so unit tests run without one.
"""

from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from finboard.core.constants import (
    DEFAULT_DASHBOARD_CACHE_MAX_PAYLOAD_BYTES,
    DEFAULT_DASHBOARD_CACHE_TTL_SECONDS,
)

_TELEMETRY_EXPORTERS = frozenset({"console", "otlp", "none"})


class Settings(BaseSettings):
    """Application settings loaded from environment and .env."""

    # App
    app_name: str = "finboard"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database (PostgreSQL via asyncpg; schema managed by Alembic)
    database_url: str = ""
    database_echo: bool = False
    db_pool_size: int | None = None
    db_max_overflow: int | None = None
    db_command_timeout: int | None = None

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:8081"

    # Dashboard cache
    dashboard_cache_ttl_seconds: int = DEFAULT_DASHBOARD_CACHE_TTL_SECONDS
    dashboard_cache_max_payload_bytes: int = DEFAULT_DASHBOARD_CACHE_MAX_PAYLOAD_BYTES

    # Dashboard aggregation
    dashboard_recent_transactions: int = 5
    dashboard_history_months: int = 6

    # Request / middleware
    request_timeout_seconds: int = 60
    request_id_header: str = "X-Request-ID"
    # Identity is resolved upstream (gateway / mobile auth); we only read the header.
    user_id_header: str = "X-User-ID"
    dashboard_rate_limit: str = "60/minute"

    # OpenTelemetry
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_cache_and_telemetry(self) -> "Settings":
        """Reject non-positive cache limits and unknown telemetry exporters."""
        if self.dashboard_cache_ttl_seconds <= 0:
            raise ValueError(
                f"DASHBOARD_CACHE_TTL_SECONDS must be positive, got {self.dashboard_cache_ttl_seconds}"
            )
        if self.dashboard_cache_max_payload_bytes <= 0:
            raise ValueError(
                "DASHBOARD_CACHE_MAX_PAYLOAD_BYTES must be positive, "
                f"got {self.dashboard_cache_max_payload_bytes}"
            )
        if self.dashboard_history_months < 1:
            raise ValueError("DASHBOARD_HISTORY_MONTHS must be at least 1")
        if self.telemetry_exporter not in _TELEMETRY_EXPORTERS:
            raise ValueError(
                f"telemetry_exporter must be one of {sorted(_TELEMETRY_EXPORTERS)}, "
                f"got: {self.telemetry_exporter!r}"
            )
        if not 0.0 <= self.telemetry_sample_rate <= 1.0:
            raise ValueError("telemetry_sample_rate must be between 0.0 and 1.0")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    In tests, call get_settings.cache_clear() before overriding env vars so
    the next get_settings() uses the new values.
    """
    return Settings()
