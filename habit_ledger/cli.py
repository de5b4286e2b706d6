"""Command line front end for the Habit Ledger API.

Usage examples::

    habit-ledger --username admin --password admin123 month
    habit-ledger --token "$HABIT_LEDGER_TOKEN" add 2024-01-05 Run --note "5k"
    habit-ledger year --search run --sort recent
    habit-ledger trends
    habit-ledger suggestions --filter ru
    habit-ledger delete 0b9d...

The base URL and credentials can also be provided through the
``HABIT_LEDGER_BASE_URL``, ``HABIT_LEDGER_TOKEN``,
``HABIT_LEDGER_USERNAME`` and ``HABIT_LEDGER_PASSWORD`` environment
variables.
"""

from __future__ import annotations

import argparse
import calendar
import os
import sys
from datetime import MAXYEAR, MINYEAR
from datetime import date as date_type
from typing import List, Optional

from habit_ledger.app.core.logging_config import setup_logging
from habit_ledger.client import HabitLedgerAPI
from habit_ledger.range_fetcher import RangeFetcher
from habit_ledger.summaries import SORT_KEYS, filter_suggestions, summarize_habits, trend_stats

DEFAULT_BASE_URL = "http://localhost:8000/api/v1"
PREVIEW_NAMES = 3


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="habit-ledger", description="Record and review daily habits.")
    ap.add_argument("--base-url", default=os.getenv("HABIT_LEDGER_BASE_URL", DEFAULT_BASE_URL))
    ap.add_argument("--token", default=os.getenv("HABIT_LEDGER_TOKEN"), help="Bearer token")
    ap.add_argument("--username", default=os.getenv("HABIT_LEDGER_USERNAME"))
    ap.add_argument("--password", default=os.getenv("HABIT_LEDGER_PASSWORD"))
    ap.add_argument("--log-level", default="WARNING")
    sub = ap.add_subparsers(dest="command", required=True)

    month = sub.add_parser("month", help="Show a month calendar with recorded habits")
    today = date_type.today()
    month.add_argument("--year", type=int, default=today.year)
    month.add_argument("--month", type=int, default=today.month, help="1-12")

    year = sub.add_parser("year", help="Summarise habits over the trailing year")
    year.add_argument("--search")
    year.add_argument("--sort", choices=SORT_KEYS, default="count")

    sub.add_parser("trends", help="Show completed habits per day")

    suggestions = sub.add_parser("suggestions", help="List previously used habit names")
    suggestions.add_argument("--filter", help="Only names containing this text")

    add = sub.add_parser("add", help="Record a habit for a date")
    add.add_argument("date", help="YYYY-MM-DD")
    add.add_argument("name")
    add.add_argument("--note")
    add.add_argument("--not-completed", action="store_true")

    delete = sub.add_parser("delete", help="Delete a record by id")
    delete.add_argument("habit_id")
    return ap


def render_month(year: int, month: int, by_date: dict) -> List[str]:
    """Render a month grid; days with records are marked with ``*``."""
    lines = [calendar.month_name[month] + f" {year}", " Mo  Tu  We  Th  Fr  Sa  Su"]
    for week in calendar.monthcalendar(year, month):
        cells = []
        for day in week:
            if day == 0:
                cells.append("    ")
                continue
            marker = "*" if by_date.get(date_type(year, month, day).isoformat()) else " "
            cells.append(f"{day:3d}{marker}")
        lines.append("".join(cells).rstrip())

    for day in sorted(by_date):
        records = by_date[day]
        if not records:
            continue
        names = [r["name"] for r in records[:PREVIEW_NAMES]]
        more = len(records) - PREVIEW_NAMES
        suffix = f" (+{more} more)" if more > 0 else ""
        lines.append(f"{day}: {', '.join(names)}{suffix}")
    return lines


def _fail(message: str) -> int:
    print(f"[!] {message}", file=sys.stderr)
    return 1


def main(argv: Optional[List[str]] = None, api: Optional[HabitLedgerAPI] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    api = api or HabitLedgerAPI(base_url=args.base_url, api_key=args.token)
    if not api.api_key:
        if not (args.username and args.password):
            return _fail("Provide --token or --username/--password")
        _, error = api.login(args.username, args.password)
        if error:
            return _fail(f"Login failed: {error['message']}")

    if args.command == "month":
        if not 1 <= args.month <= 12:
            return _fail(f"--month must be between 1 and 12, got {args.month}")
        if not MINYEAR <= args.year <= MAXYEAR:
            return _fail(f"--year must be between {MINYEAR} and {MAXYEAR}, got {args.year}")
        view = RangeFetcher.for_client(api).fetch_month(args.year, args.month)
        print("\n".join(render_month(args.year, args.month, view.by_date)))
    elif args.command == "year":
        view = RangeFetcher.for_client(api).fetch_trailing_year()
        summaries = summarize_habits(view.records(), search=args.search, sort_by=args.sort)
        for s in summaries:
            note = f" - {s['note']}" if s.get("note") else ""
            print(f"{s['name']}: {s['count']}x, last {s['last_used']}{note}")
    elif args.command == "trends":
        points, error = api.get_trends()
        if error:
            return _fail(f"Could not load trends: {error['message']}")
        for p in points:
            print(f"{p['date']}  {'#' * p['count']} {p['count']}")
        stats = trend_stats(points)
        print(
            f"Streak: {stats['streak']}  Total: {stats['total']}  "
            f"Best day: {stats['best_day']}  Active days: {stats['active_days']}"
        )
    elif args.command == "suggestions":
        items, error = api.get_suggestions()
        if error:
            return _fail(f"Could not load suggestions: {error['message']}")
        if args.filter:
            items = filter_suggestions(items, args.filter)
        for s in items:
            print(s["name"] + (f" - {s['note']}" if s.get("note") else ""))
    elif args.command == "add":
        habit_id, error = api.create_habit(
            args.date, args.name, note=args.note, completed=not args.not_completed
        )
        if error:
            return _fail(f"Could not add habit: {error['message']}")
        print(habit_id)
    elif args.command == "delete":
        _, error = api.delete_habit(args.habit_id)
        if error:
            return _fail(f"Could not delete habit: {error['message']}")
        print(f"Deleted {args.habit_id}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
