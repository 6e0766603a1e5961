"""Infrastructure: persistence (SQLAlchemy) and the dashboard cache."""
