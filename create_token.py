#!/usr/bin/env python3
"""
Issue a long-lived bearer token for an owner without logging in.

The token is signed with the current ``SECRET_KEY`` and can be passed
to the CLI via ``--token`` or ``HABIT_LEDGER_TOKEN``.

Usage:
    SECRET_KEY=... python create_token.py --owner admin --days 365
"""

import argparse

from habit_ledger.app.core.config import settings
from habit_ledger.app.core.security import create_access_token


def main():
    ap = argparse.ArgumentParser(description="Create a Habit Ledger access token.")
    ap.add_argument("--owner", default=settings.owner_username, help="Owner identity (token subject)")
    ap.add_argument("--days", type=int, default=365, help="Token lifetime in days")
    args = ap.parse_args()

    print(create_access_token({"sub": args.owner}, expires_delta=args.days * 24 * 60 * 60))


if __name__ == "__main__":
    main()
