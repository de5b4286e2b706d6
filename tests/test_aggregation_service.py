from datetime import date, timedelta

import pytest

from conftest import run
from habit_ledger.app.core.errors import StoreUnavailable
from habit_ledger.app.services.aggregation_service import AggregationService
from habit_ledger.app.services.ledger_service import LedgerService
from habit_ledger.app.services.record_store import MemoryRecordStore


def test_same_day_case_variants_count_twice_but_suggest_once(ledger, aggregation):
    run(ledger.create_habit("alice", "2024-01-05", "Run", note="first"))
    run(ledger.create_habit("alice", "2024-01-05", "run ", note="second"))

    trends = run(aggregation.trends("alice"))
    suggestions = run(aggregation.suggestions("alice"))

    assert {"date": "2024-01-05", "count": 2} in [t.model_dump() for t in trends]
    assert [s.model_dump() for s in suggestions] == [{"name": "Run", "note": "first"}]


def test_trends_count_only_completed_records(ledger, aggregation):
    run(ledger.create_habit("alice", "2024-01-05", "Run"))
    run(ledger.create_habit("alice", "2024-01-05", "Read", completed=False))
    run(ledger.create_habit("alice", "2024-01-06", "Read", completed=False))

    trends = run(aggregation.trends("alice"))

    assert [(t.date, t.count) for t in trends] == [("2024-01-05", 1)]


def test_trends_are_most_recent_first_and_capped(ledger, aggregation):
    start = date(2024, 1, 1)
    for offset in range(35):
        run(ledger.create_habit("alice", (start + timedelta(days=offset)).isoformat(), "Run"))

    trends = run(aggregation.trends("alice"))

    assert len(trends) == 30
    assert trends[0].date == "2024-02-04"
    assert trends[-1].date == "2024-01-06"
    assert all(trends[i].date >= trends[i + 1].date for i in range(len(trends) - 1))


def test_trends_are_scoped_to_owner(ledger, aggregation):
    run(ledger.create_habit("bob", "2024-01-05", "Run"))

    assert run(aggregation.trends("alice")) == []


def test_trend_window_is_configurable(store):
    ledger = LedgerService(store)
    for day in ["2024-01-01", "2024-01-02", "2024-01-03"]:
        run(ledger.create_habit("alice", day, "Run"))

    trends = run(AggregationService(store, trend_window=2).trends("alice"))

    assert [t.date for t in trends] == ["2024-01-03", "2024-01-02"]


def test_suggestions_keep_first_note_and_sort_by_name(ledger, aggregation):
    run(ledger.create_habit("alice", "2024-03-01", "walk", note="old"))
    run(ledger.create_habit("alice", "2024-01-01", "Zazen", note=None))
    run(ledger.create_habit("alice", "2024-04-01", "  WALK  ", note="new"))
    run(ledger.create_habit("alice", "2024-02-01", "Apple", note="fruit", completed=False))

    suggestions = run(aggregation.suggestions("alice"))

    assert [(s.name, s.note) for s in suggestions] == [
        ("Apple", "fruit"),
        ("Zazen", None),
        ("walk", "old"),
    ]


class UnavailableStore(MemoryRecordStore):
    def get_by_owner(self, owner):
        raise StoreUnavailable("down")


def test_store_failure_aborts_aggregation():
    aggregation = AggregationService(UnavailableStore())

    with pytest.raises(StoreUnavailable):
        run(aggregation.trends("alice"))
    with pytest.raises(StoreUnavailable):
        run(aggregation.suggestions("alice"))
