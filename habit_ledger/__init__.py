"""
Top-level package for the Habit Ledger.

The server lives in ``app``.  The modules next to it are the client
side: ``client`` wraps the HTTP API, ``range_fetcher`` assembles
multi-date views from single-date lookups, ``summaries`` derives
statistics for display and ``cli`` is the command line front end.
"""

__all__ = []
