#!/usr/bin/env python3
"""
Produce a password hash for the ``OWNER_PASSWORD_HASH`` setting.

This script does not store anything.  It prints a PBKDF2-HMAC-SHA256
hash (format "salthex$hashhex") which you then export before starting
the API.

Usage:
    python hash_password.py --password "NewStrongPass!234"

If --password is omitted, you will be prompted to enter it securely.
"""

import argparse
import getpass
import sys

from habit_ledger.app.core.security import hash_password


def main():
    ap = argparse.ArgumentParser(description="Hash the Habit Ledger owner password.")
    ap.add_argument("--password", help="New password. If omitted, you'll be prompted securely.")
    args = ap.parse_args()

    new_password = args.password or getpass.getpass("Enter NEW password: ")
    if not new_password:
        print("[!] Empty password is not allowed.", file=sys.stderr)
        sys.exit(1)

    print(f"OWNER_PASSWORD_HASH={hash_password(new_password)}")


if __name__ == "__main__":
    main()
