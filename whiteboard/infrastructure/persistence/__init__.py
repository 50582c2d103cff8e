"""Persistence: SQLAlchemy engine, Base and models for the sql storage backend."""
