"""ORM models."""

from whiteboard.infrastructure.persistence.models.kv_entry import KeyValueEntry

__all__ = ["KeyValueEntry"]
