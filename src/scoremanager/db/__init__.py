"""Database module for the students document store.

Provides:
- Database connection management
- Schema initialization
- StudentStore repository for the students collection
"""

from scoremanager.db.database import get_db, init_db
from scoremanager.db.students_repository import (
    DocumentNotFoundError,
    StoreError,
    StudentStore,
)

__all__ = [
    "DocumentNotFoundError",
    "StoreError",
    "StudentStore",
    "get_db",
    "init_db",
]
