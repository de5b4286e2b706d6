"""
SQLite database integration and simple migration system.

This module provides functions for obtaining a database connection
(``get_connection``), a cursor context manager (``get_cursor``) and
``init_db`` which applies schema migrations.  Applied migration
versions are stored in the ``migrations`` table and new migrations are
executed in order.

Habit records are grouped by ``(owner, date)``: the composite index is
the only access path used for direct lookups.  The record ``id`` is an
ordinary column; its UNIQUE constraint only guarantees that an id is
never stored twice.
"""

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from .config import settings


MIGRATIONS: list[tuple[int, str]] = [
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS habit_records (
            id TEXT NOT NULL UNIQUE,
            owner TEXT NOT NULL,
            date TEXT NOT NULL,
            name TEXT NOT NULL,
            note TEXT,
            completed INTEGER NOT NULL DEFAULT 1,
            created_at TEXT NOT NULL
        );

        CREATE INDEX IF NOT EXISTS idx_habit_records_owner_date
            ON habit_records(owner, date);
        """,
    ),
]


def get_database_path(db_url: Optional[str] = None) -> str:
    """Compute the path to the SQLite database file.

    Absolute paths are returned as is; relative paths are resolved
    against the project root.
    """
    db_url = db_url or settings.database_url
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent  # habit_ledger/
    return str((base_dir / db_url).resolve())


def get_connection(db_path: Optional[str] = None) -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` so columns can be accessed by
    name.  Values come back exactly as stored (dates and timestamps are
    ISO strings).
    """
    conn = sqlite3.connect(db_path or get_database_path())
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def get_cursor(db_path: Optional[str] = None) -> Iterator[sqlite3.Cursor]:
    """Yield a cursor, commit on success and always close the connection."""
    conn = get_connection(db_path)
    try:
        yield conn.cursor()
        conn.commit()
    finally:
        conn.close()


def init_db(db_path: Optional[str] = None) -> int:
    """Apply pending migrations and return the resulting schema version.

    If you add a new migration, append it to ``MIGRATIONS`` with an
    incremented version number.
    """
    with get_cursor(db_path) as cursor:
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        cursor.execute("SELECT MAX(version) as version FROM migrations")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                cursor.executescript(sql)
                cursor.execute(
                    "INSERT INTO migrations (version) VALUES (?)", (version,)
                )
                current_version = version
    return current_version
