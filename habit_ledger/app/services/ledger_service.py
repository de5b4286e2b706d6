"""
Service layer for the habit ledger.

``LedgerService`` records, lists and deletes habit completion records
for one owner at a time.  It sits directly on a ``RecordStore``; the
owner is passed explicitly to every call.

Deleting by id is a two-step protocol because the id is not part of
the storage key: the owner's records are scanned to find the record's
date, then the store deletes by ``(owner, date, id)``.  The two steps
are not atomic.  If another caller removes the same record in between,
the store raises ``NotFound`` and that error is propagated unchanged.
"""

from __future__ import annotations

import logging
import re
import uuid
from datetime import date as date_type
from datetime import datetime, timezone
from typing import List, Optional

from habit_ledger.app.core.errors import NotFound, ValidationError
from habit_ledger.app.schemas.habit import HabitRecord
from habit_ledger.app.services.record_store import RecordStore

logger = logging.getLogger(__name__)

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def validate_date(value: str, field: str = "date") -> str:
    """Return ``value`` if it is a real calendar day in ``YYYY-MM-DD`` form.

    Raises ``ValidationError`` otherwise (including impossible days such
    as ``2023-02-30``).
    """
    if not isinstance(value, str) or not _DATE_RE.match(value):
        raise ValidationError(f"{field} must be formatted as YYYY-MM-DD")
    try:
        date_type.fromisoformat(value)
    except ValueError:
        raise ValidationError(f"{field} is not a valid calendar date: {value}") from None
    return value


class LedgerService:
    """Create, list and delete habit completion records."""

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    async def create_habit(
        self,
        owner: str,
        date: str,
        name: str,
        note: Optional[str] = None,
        completed: bool = True,
    ) -> str:
        """Store a new record and return its id.

        The name is stored exactly as given.  Records with the same name
        on the same date are distinct; nothing is deduplicated here.
        """
        validate_date(date)
        if not name or not name.strip():
            raise ValidationError("name must not be empty")

        record = HabitRecord(
            id=str(uuid.uuid4()),
            owner=owner,
            date=date,
            name=name,
            note=note,
            completed=completed,
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        self.store.put(record)
        logger.info("Created habit %s for %s on %s", record.id, owner, date)
        return record.id

    async def list_habits(self, owner: str, date: str) -> List[HabitRecord]:
        """Return the owner's records for one date."""
        return self.store.get_by_owner_date(owner, date)

    async def list_habits_range(self, owner: str, start: str, end: str) -> List[HabitRecord]:
        """Return the owner's records for every date from ``start`` to ``end`` inclusive."""
        validate_date(start, "start")
        validate_date(end, "end")
        if start > end:
            raise ValidationError("start must not be after end")
        return self.store.get_by_owner_range(owner, start, end)

    async def delete_habit(self, owner: str, habit_id: str) -> None:
        """Delete the owner's record with ``habit_id``.

        Raises ``NotFound`` when no such record exists, including when a
        concurrent delete removed it after it was located.
        """
        habit_date = self._resolve_date(owner, habit_id)
        if habit_date is None:
            raise NotFound(f"Habit {habit_id} not found")
        self.store.delete(owner, habit_date, habit_id)
        logger.info("Deleted habit %s for %s on %s", habit_id, owner, habit_date)

    def _resolve_date(self, owner: str, habit_id: str) -> Optional[str]:
        for record in self.store.get_by_owner(owner):
            if record.id == habit_id:
                return record.date
        return None
