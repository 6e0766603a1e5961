"""Shared telemetry: logging setup, OpenTelemetry config, and tracing helpers."""

from finboard.shared.telemetry.logging import RequestContextFilter, setup_logging
from finboard.shared.telemetry.telemetry import (
    TelemetryConfig,
    get_telemetry,
    set_telemetry,
)
from finboard.shared.telemetry.tracing import add_span_attributes, traced

__all__ = [
    "RequestContextFilter",
    "TelemetryConfig",
    "add_span_attributes",
    "get_telemetry",
    "set_telemetry",
    "setup_logging",
    "traced",
]
