"""SQLite connection and schema management.

The students collection is stored as one JSON document per row.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

import structlog

logger = structlog.get_logger(__name__)

# Default database location
DEFAULT_DB_PATH = Path("data/db/scores.db")


def init_db(db_path: Path | None = None) -> Path:
    """Initialize database with schema.

    Creates the database file and the students table if they don't exist.

    Args:
        db_path: Path to database file. Defaults to data/db/scores.db

    Returns:
        The path that was initialized
    """
    db_path = db_path or DEFAULT_DB_PATH

    with get_db(db_path) as conn:
        _create_schema(conn)

    logger.info("database.initialized", path=str(db_path))
    return db_path


@contextmanager
def get_db(db_path: Path | None = None) -> Generator[sqlite3.Connection, None, None]:
    """Get database connection as context manager.

    Commits on success, rolls back and re-raises on error.

    Example:
        with get_db(path) as conn:
            rows = conn.execute("SELECT id, data FROM students").fetchall()
    """
    db_path = db_path or DEFAULT_DB_PATH

    # Ensure directory exists
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row

    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def _create_schema(conn: sqlite3.Connection) -> None:
    """Create database schema. Uses IF NOT EXISTS for idempotency."""
    conn.executescript(
        """
        -- students: one JSON document per student, scores embedded
        CREATE TABLE IF NOT EXISTS students (
            id TEXT PRIMARY KEY,
            data TEXT NOT NULL,
            created_at TEXT NOT NULL DEFAULT (datetime('now'))
        );

        CREATE INDEX IF NOT EXISTS idx_students_created ON students(created_at);
        """
    )
