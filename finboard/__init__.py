"""finboard: personal-finance dashboard service with a persisted, single-flight dashboard cache."""

__version__ = "1.0.0"
