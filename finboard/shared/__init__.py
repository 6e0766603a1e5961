"""Shared utilities and cross-cutting concerns (request context, telemetry)."""
