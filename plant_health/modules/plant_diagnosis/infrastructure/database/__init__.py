"""SQLAlchemy models and the plant repository implementation."""
