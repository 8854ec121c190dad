"""Persistence: SQLAlchemy engine/session, ORM models, repositories and unit of work."""
