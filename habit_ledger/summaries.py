"""Client-side statistics derived from API data.

These helpers work on the plain dictionaries returned by
:class:`~habit_ledger.client.HabitLedgerAPI` and hold no state.

* :func:`trend_stats` summarises the trend view (streak, totals).
* :func:`summarize_habits` groups fetched records per habit name.
* :func:`filter_suggestions` narrows the suggestion catalog while the
  user types a habit name.
"""

from __future__ import annotations

from datetime import date as date_type
from datetime import timedelta
from typing import Any, Dict, Iterable, List, Optional

SORT_KEYS = ("name", "count", "recent")


def trend_stats(points: Iterable[Dict[str, Any]]) -> Dict[str, int]:
    """Summarise trend points.

    ``streak`` counts consecutive calendar days, walking back from the
    most recent date in ``points``, that have a positive count.
    """
    points = list(points)
    active = sorted({p["date"] for p in points if p.get("count", 0) > 0}, reverse=True)
    counts = [p.get("count", 0) for p in points]

    streak = 0
    expected: Optional[date_type] = None
    for day in active:
        current = date_type.fromisoformat(day)
        if expected is not None and current != expected:
            break
        streak += 1
        expected = current - timedelta(days=1)

    return {
        "streak": streak,
        "total": sum(counts),
        "best_day": max(counts, default=0),
        "active_days": len(active),
    }


def summarize_habits(
    records: Iterable[Dict[str, Any]],
    search: Optional[str] = None,
    sort_by: str = "count",
) -> List[Dict[str, Any]]:
    """Group records by habit name.

    Names are matched lowercased and trimmed; the first spelling seen is
    kept.  Each summary carries the number of records, the latest date
    (``last_used``) and a note, which is replaced whenever a later-dated
    record has a non-empty one.
    """
    if sort_by not in SORT_KEYS:
        raise ValueError(f"sort_by must be one of {', '.join(SORT_KEYS)}")

    summaries: Dict[str, Dict[str, Any]] = {}
    for record in records:
        key = record["name"].strip().lower()
        summary = summaries.get(key)
        if summary is None:
            summaries[key] = {
                "name": record["name"],
                "count": 1,
                "last_used": record["date"],
                "note": record.get("note"),
            }
            continue
        summary["count"] += 1
        if record["date"] > summary["last_used"]:
            summary["last_used"] = record["date"]
            if record.get("note"):
                summary["note"] = record["note"]

    result = list(summaries.values())
    if search:
        needle = search.lower()
        result = [s for s in result if needle in s["name"].lower()]

    if sort_by == "name":
        result.sort(key=lambda s: s["name"])
    elif sort_by == "count":
        result.sort(key=lambda s: s["count"], reverse=True)
    else:
        result.sort(key=lambda s: s["last_used"], reverse=True)
    return result


def filter_suggestions(
    suggestions: Iterable[Dict[str, Any]],
    typed: str,
    limit: int = 5,
) -> List[Dict[str, Any]]:
    """Return suggestions containing ``typed``, excluding an exact match."""
    if not typed:
        return []
    needle = typed.lower()
    matches = [
        s for s in suggestions
        if needle in s["name"].lower() and s["name"].lower() != needle
    ]
    return matches[:limit]
