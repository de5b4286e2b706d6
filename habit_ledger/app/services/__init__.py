"""
Service layer.

Each service encapsulates business logic for one concern.  The ledger
and aggregation services receive their ``RecordStore`` at construction
so the backend can be swapped without touching API handlers.
"""
