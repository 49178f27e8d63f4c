"""Database module for SQLite persistence.

Provides:
- Database connection management
- Schema initialization
- Key/value table backing the sqlite progress storage
"""

from companion.db.database import get_db, init_db

__all__ = ["get_db", "init_db"]
