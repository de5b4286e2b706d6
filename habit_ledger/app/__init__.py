"""
Application package initializer.

The API is organised into ``core`` (configuration, logging, database
and security), ``services`` (record store, ledger and aggregations),
``schemas`` (pydantic payloads) and ``api`` (versioned routers).
"""
