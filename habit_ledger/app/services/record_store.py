"""
Record store for habit completion records.

Records are physically grouped by the storage key ``(owner, date)``.
The record ``id`` is carried inside the record but is not an access
path: a record can be fetched directly only through its key, and
finding a record by id requires a scan of the owner's records (see
``LedgerService.delete_habit``).

Two backends implement the same contract:

* ``SQLiteRecordStore`` persists records in the ``habit_records``
  table created by ``core.db.init_db``.  Every primitive runs on its
  own short-lived connection, so a ``put`` or ``delete`` is applied in
  full or not at all, but nothing spans more than one primitive.
* ``MemoryRecordStore`` keeps records in a dictionary guarded by a
  lock.  It is used for local development (``STORE_BACKEND=memory``)
  and in tests.

``get_record_store`` returns the process-wide store selected by
configuration and doubles as a FastAPI dependency.
"""

from __future__ import annotations

import itertools
import logging
import sqlite3
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Tuple

from habit_ledger.app.core.config import settings
from habit_ledger.app.core.db import get_cursor, get_database_path, init_db
from habit_ledger.app.core.errors import DuplicateRecord, NotFound, StoreUnavailable
from habit_ledger.app.schemas.habit import HabitRecord

logger = logging.getLogger(__name__)


class RecordStore:
    """Interface shared by the store backends."""

    def put(self, record: HabitRecord) -> None:
        """Insert ``record`` under ``(record.owner, record.date)``.

        Raises ``DuplicateRecord`` if a record with the same id exists.
        """
        raise NotImplementedError

    def get_by_owner_date(self, owner: str, date: str) -> List[HabitRecord]:
        """Return every record stored under ``(owner, date)``."""
        raise NotImplementedError

    def get_by_owner(self, owner: str) -> List[HabitRecord]:
        """Return all of the owner's records in creation order."""
        raise NotImplementedError

    def get_by_owner_range(self, owner: str, start: str, end: str) -> List[HabitRecord]:
        """Return the owner's records with ``start <= date <= end``."""
        raise NotImplementedError

    def delete(self, owner: str, date: str, record_id: str) -> None:
        """Remove the record matching all three values or raise ``NotFound``."""
        raise NotImplementedError


class SQLiteRecordStore(RecordStore):
    """Record store backed by a SQLite database file."""

    def __init__(self, db_path: Optional[str] = None) -> None:
        self.db_path = db_path or get_database_path()
        try:
            init_db(self.db_path)
        except sqlite3.Error as exc:
            raise StoreUnavailable(f"Record store unavailable: {exc}") from exc

    @contextmanager
    def _cursor(self) -> Iterator[sqlite3.Cursor]:
        try:
            with get_cursor(self.db_path) as cursor:
                yield cursor
        except sqlite3.IntegrityError:
            raise
        except sqlite3.Error as exc:
            logger.error("SQLite store %s unavailable: %s", self.db_path, exc)
            raise StoreUnavailable(f"Record store unavailable: {exc}") from exc

    def put(self, record: HabitRecord) -> None:
        try:
            with self._cursor() as cursor:
                cursor.execute(
                    """
                    INSERT INTO habit_records (id, owner, date, name, note, completed, created_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        record.id,
                        record.owner,
                        record.date,
                        record.name,
                        record.note,
                        1 if record.completed else 0,
                        record.created_at,
                    ),
                )
        except sqlite3.IntegrityError as exc:
            raise DuplicateRecord(f"Record {record.id} already exists") from exc

    def get_by_owner_date(self, owner: str, date: str) -> List[HabitRecord]:
        with self._cursor() as cursor:
            rows = cursor.execute(
                "SELECT * FROM habit_records WHERE owner = ? AND date = ? ORDER BY rowid",
                (owner, date),
            ).fetchall()
        return [self._row_to_record(row) for row in rows]

    def get_by_owner(self, owner: str) -> List[HabitRecord]:
        with self._cursor() as cursor:
            rows = cursor.execute(
                "SELECT * FROM habit_records WHERE owner = ? ORDER BY rowid",
                (owner,),
            ).fetchall()
        return [self._row_to_record(row) for row in rows]

    def get_by_owner_range(self, owner: str, start: str, end: str) -> List[HabitRecord]:
        with self._cursor() as cursor:
            rows = cursor.execute(
                """
                SELECT * FROM habit_records
                WHERE owner = ? AND date BETWEEN ? AND ?
                ORDER BY date, rowid
                """,
                (owner, start, end),
            ).fetchall()
        return [self._row_to_record(row) for row in rows]

    def delete(self, owner: str, date: str, record_id: str) -> None:
        with self._cursor() as cursor:
            cursor.execute(
                "DELETE FROM habit_records WHERE owner = ? AND date = ? AND id = ?",
                (owner, date, record_id),
            )
            if cursor.rowcount == 0:
                raise NotFound(f"Habit {record_id} not found")

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> HabitRecord:
        return HabitRecord(
            id=row["id"],
            owner=row["owner"],
            date=row["date"],
            name=row["name"],
            note=row["note"],
            completed=bool(row["completed"]),
            created_at=row["created_at"],
        )


class MemoryRecordStore(RecordStore):
    """In-process record store.

    Each partition holds ``(sequence, record)`` pairs; the global
    sequence number preserves creation order across partitions.  All
    primitives take the same lock and hand out copies, so callers never
    observe a partially written record.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._partitions: Dict[Tuple[str, str], List[Tuple[int, HabitRecord]]] = {}
        self._ids: set[str] = set()
        self._sequence = itertools.count()

    def put(self, record: HabitRecord) -> None:
        with self._lock:
            if record.id in self._ids:
                raise DuplicateRecord(f"Record {record.id} already exists")
            partition = self._partitions.setdefault((record.owner, record.date), [])
            partition.append((next(self._sequence), record.model_copy()))
            self._ids.add(record.id)

    def get_by_owner_date(self, owner: str, date: str) -> List[HabitRecord]:
        with self._lock:
            partition = self._partitions.get((owner, date), [])
            return [record.model_copy() for _, record in partition]

    def get_by_owner(self, owner: str) -> List[HabitRecord]:
        with self._lock:
            entries = [
                entry
                for (key_owner, _), partition in self._partitions.items()
                if key_owner == owner
                for entry in partition
            ]
        entries.sort(key=lambda entry: entry[0])
        return [record.model_copy() for _, record in entries]

    def get_by_owner_range(self, owner: str, start: str, end: str) -> List[HabitRecord]:
        with self._lock:
            entries = [
                entry
                for (key_owner, key_date), partition in self._partitions.items()
                if key_owner == owner and start <= key_date <= end
                for entry in partition
            ]
        entries.sort(key=lambda entry: (entry[1].date, entry[0]))
        return [record.model_copy() for _, record in entries]

    def delete(self, owner: str, date: str, record_id: str) -> None:
        with self._lock:
            partition = self._partitions.get((owner, date), [])
            for index, (_, record) in enumerate(partition):
                if record.id == record_id:
                    del partition[index]
                    self._ids.discard(record_id)
                    if not partition:
                        del self._partitions[(owner, date)]
                    return
        raise NotFound(f"Habit {record_id} not found")


def create_record_store(backend: Optional[str] = None, db_url: Optional[str] = None) -> RecordStore:
    """Build a store for ``backend`` (``sqlite`` or ``memory``)."""
    backend = (backend or settings.store_backend).lower()
    if backend == "memory":
        logger.info("Using in-memory record store")
        return MemoryRecordStore()
    if backend == "sqlite":
        db_path = get_database_path(db_url)
        logger.info("Using SQLite record store at %s", db_path)
        return SQLiteRecordStore(db_path)
    raise ValueError(f"Unknown store backend: {backend!r}")


_store: Optional[RecordStore] = None
_store_lock = threading.Lock()


def get_record_store() -> RecordStore:
    """Return the process-wide record store, creating it on first use."""
    global _store
    with _store_lock:
        if _store is None:
            _store = create_record_store()
        return _store


def reset_record_store() -> None:
    """Forget the process-wide store so the next call rebuilds it."""
    global _store
    with _store_lock:
        _store = None
