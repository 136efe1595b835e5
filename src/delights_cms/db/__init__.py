"""Database models backing the SQLAlchemy document store."""

from .models import Base, StoredDocument

__all__ = ["Base", "StoredDocument"]
