"""
Read-only aggregations over an owner's habit records.

Both views scan the owner's full record set through
``RecordStore.get_by_owner`` and compute their result in Python.  They
never write.  A ``StoreUnavailable`` raised by the scan aborts the
computation and reaches the caller unchanged.
"""

from __future__ import annotations

from collections import Counter
from typing import Dict, List

from habit_ledger.app.core.config import settings
from habit_ledger.app.schemas.habit import Suggestion, TrendPoint
from habit_ledger.app.services.record_store import RecordStore


class AggregationService:
    """Trend and suggestion views for one owner."""

    def __init__(self, store: RecordStore, trend_window: int | None = None) -> None:
        self.store = store
        self.trend_window = trend_window if trend_window is not None else settings.trend_window

    async def trends(self, owner: str) -> List[TrendPoint]:
        """Return completed-record counts per date, most recent first.

        Only dates with at least one completed record appear, and at
        most ``trend_window`` dates are returned.  ISO dates sort
        chronologically as plain strings.
        """
        counts = Counter(
            record.date for record in self.store.get_by_owner(owner) if record.completed
        )
        ordered = sorted(counts.items(), key=lambda item: item[0], reverse=True)
        return [TrendPoint(date=day, count=count) for day, count in ordered[: self.trend_window]]

    async def suggestions(self, owner: str) -> List[Suggestion]:
        """Return one entry per distinct habit name, sorted by name.

        Names are compared lowercased and trimmed.  The first record seen
        for a name supplies both the displayed name and the note; later
        records with the same name are ignored.
        """
        catalog: Dict[str, Suggestion] = {}
        for record in self.store.get_by_owner(owner):
            key = record.name.strip().lower()
            if key not in catalog:
                catalog[key] = Suggestion(name=record.name, note=record.note)
        return sorted(catalog.values(), key=lambda suggestion: suggestion.name)
