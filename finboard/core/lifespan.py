"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic. Used by main.py; no business
logic here, only wiring of infrastructure (logging, dashboard cache,
telemetry, DB engine dispose).
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from finboard.application.services.dashboard_aggregation import DashboardAggregator
from finboard.core.config import Settings, get_settings
from finboard.domain.currency import CurrencyConverter
from finboard.domain.exceptions import SqlNotConfiguredException
from finboard.infrastructure.cache import DashboardCacheService
from finboard.infrastructure.persistence import database
from finboard.infrastructure.persistence.repositories import DashboardCacheRepository
from finboard.shared.telemetry import setup_logging

logger = logging.getLogger(__name__)


def build_dashboard_cache(
    settings: Settings, session_factory: async_sessionmaker[AsyncSession]
) -> DashboardCacheService:
    """Wire the process-wide dashboard cache: Postgres store plus ledger aggregation."""
    return DashboardCacheService(
        DashboardCacheRepository(session_factory),
        DashboardAggregator(
            session_factory,
            CurrencyConverter(),
            history_months=settings.dashboard_history_months,
        ),
        ttl_seconds=settings.dashboard_cache_ttl_seconds,
        max_payload_bytes=settings.dashboard_cache_max_payload_bytes,
    )


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: logging, dashboard cache (if DATABASE_URL is set),
    telemetry (if enabled). Shutdown order: telemetry shutdown, SQL engine
    dispose.
    """
    settings = get_settings()
    setup_logging()

    # ---- Startup ----
    try:
        session_factory = database.get_session_factory()
    except SqlNotConfiguredException:
        app.state.dashboard_cache = None
        logger.warning("Dashboard cache disabled: no database configured")
    else:
        app.state.dashboard_cache = build_dashboard_cache(settings, session_factory)
        logger.info(
            "Dashboard cache ready (ttl=%ss, max payload=%d bytes)",
            settings.dashboard_cache_ttl_seconds,
            settings.dashboard_cache_max_payload_bytes,
        )

    if settings.telemetry_enabled:
        from finboard.shared.telemetry.telemetry import TelemetryConfig, set_telemetry

        telemetry = TelemetryConfig(
            service_name=settings.app_name,
            service_version=settings.app_version,
            environment=settings.telemetry_environment,
        )
        telemetry.setup_telemetry(
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )
        set_telemetry(telemetry)
        telemetry.instrument_fastapi(app)
        if database.engine is not None:
            telemetry.instrument_sqlalchemy(database.engine)
        logger.info("Telemetry initialized")

    yield

    # ---- Shutdown ----
    from finboard.shared.telemetry.telemetry import get_telemetry, set_telemetry

    telemetry_instance = get_telemetry()
    if telemetry_instance is not None:
        telemetry_instance.shutdown()
        set_telemetry(None)

    app.state.dashboard_cache = None
    await database.dispose_engine()
