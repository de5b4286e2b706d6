"""
FastAPI dependencies that build services on top of the record store.

Tests replace ``get_record_store`` through ``app.dependency_overrides``
to run the API against an isolated store.
"""

from fastapi import Depends

from habit_ledger.app.services.aggregation_service import AggregationService
from habit_ledger.app.services.ledger_service import LedgerService
from habit_ledger.app.services.record_store import RecordStore, get_record_store


def get_ledger_service(store: RecordStore = Depends(get_record_store)) -> LedgerService:
    return LedgerService(store)


def get_aggregation_service(store: RecordStore = Depends(get_record_store)) -> AggregationService:
    return AggregationService(store)
