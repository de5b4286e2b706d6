"""Assemble multi-date views from single-date lookups.

The ledger API answers one date per request.  A calendar month or the
trailing year is therefore built by issuing one lookup per date,
dispatching them concurrently on a thread pool and merging the answers
once every lookup has finished.

A lookup that fails counts as "no records" for its date.  The failure
is logged and never raised; other dates are unaffected.  The result is
a :class:`RangeView` holding every requested date, so a degraded fetch
simply shows fewer dates with data.

Typical use with the HTTP client::

    api = HabitLedgerAPI(base_url=..., api_key=token)
    view = RangeFetcher.for_client(api).fetch_month(2024, 1)
    view.dates_with_data   # dates to highlight
    view.by_date["2024-01-05"]
"""

from __future__ import annotations

import calendar
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import date as date_type
from datetime import timedelta
from typing import Any, Callable, Dict, Iterable, List, Optional, Set

from habit_ledger.client import HabitLedgerAPI

logger = logging.getLogger(__name__)

Lookup = Callable[[str], List[Any]]

DEFAULT_MAX_WORKERS = 16
TRAILING_DAYS = 365


def month_dates(year: int, month: int) -> List[str]:
    """Return every date of the given month as ``YYYY-MM-DD``."""
    days = calendar.monthrange(year, month)[1]
    return [date_type(year, month, day).isoformat() for day in range(1, days + 1)]


def trailing_dates(today: Optional[date_type] = None, days: int = TRAILING_DAYS) -> List[str]:
    """Return ``days`` dates ending at ``today``, most recent first."""
    today = today or date_type.today()
    return [(today - timedelta(days=offset)).isoformat() for offset in range(days)]


@dataclass
class RangeView:
    """Merged result of a range fetch."""

    by_date: Dict[str, List[Any]] = field(default_factory=dict)
    dates_with_data: Set[str] = field(default_factory=set)
    failed_dates: Set[str] = field(default_factory=set)

    def records(self) -> List[Any]:
        """All records in the view, in date order."""
        return [record for day in sorted(self.by_date) for record in self.by_date[day]]


class RangeFetcher:
    """Fan out one lookup per date and merge the results."""

    def __init__(self, lookup: Lookup, max_workers: int = DEFAULT_MAX_WORKERS) -> None:
        self.lookup = lookup
        self.max_workers = max_workers

    @classmethod
    def for_client(cls, api: HabitLedgerAPI, max_workers: int = DEFAULT_MAX_WORKERS) -> "RangeFetcher":
        """Build a fetcher whose lookups go through ``api.list_habits``."""
        api.widen_pool(max_workers)

        def lookup(day: str) -> List[Any]:
            records, error = api.list_habits(day)
            api.raise_for_error(error)
            return records

        return cls(lookup, max_workers=max_workers)

    def _safe_lookup(self, day: str) -> Optional[List[Any]]:
        try:
            return list(self.lookup(day))
        except Exception as exc:
            logger.warning("Lookup for %s failed, treating it as empty: %s", day, exc)
            return None

    def fetch(self, dates: Iterable[str]) -> RangeView:
        """Look up every date in ``dates`` and merge the answers."""
        days = list(dict.fromkeys(dates))
        view = RangeView()
        if not days:
            return view

        workers = max(1, min(self.max_workers, len(days)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            results = list(executor.map(self._safe_lookup, days))

        for day, records in zip(days, results):
            if records is None:
                view.failed_dates.add(day)
                records = []
            view.by_date[day] = records
            if records:
                view.dates_with_data.add(day)
        return view

    def fetch_month(self, year: int, month: int) -> RangeView:
        return self.fetch(month_dates(year, month))

    def fetch_trailing_year(self, today: Optional[date_type] = None) -> RangeView:
        return self.fetch(trailing_dates(today))
