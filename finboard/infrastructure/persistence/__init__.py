"""Persistence: engine/session management, ORM models, repositories."""
