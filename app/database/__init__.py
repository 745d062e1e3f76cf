"""
Database package: declarative base and async session management.
"""

from app.database.async_db import get_async_db, get_async_db_context
from app.database.base import Base, TimestampMixin

__all__ = [
    "Base",
    "TimestampMixin",
    "get_async_db",
    "get_async_db_context",
]
