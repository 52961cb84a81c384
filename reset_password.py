#!/usr/bin/env python3
"""
Reset a user's password in the Task List SQLite database.

This script does not read or reveal the existing password.  It stores
a new PBKDF2 hash (format "salthex$hashhex") for the given e-mail.

Usage:
    python reset_password.py --db ./task_list_api/task_list.db --email user@example.com --password "NewStrongPass!234"

If --password is omitted, you will be prompted to enter it securely.
"""

import argparse
import getpass
import os
import sqlite3
import sys
from datetime import datetime, timezone

from task_list_api.app.core.security import hash_password


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Reset a Task List user's password (SQLite).")
    ap.add_argument("--db", required=True, help="Path to SQLite DB file (e.g., ./task_list_api/task_list.db)")
    ap.add_argument("--email", required=True, help="User email to update")
    ap.add_argument("--password", help="New password. If omitted, you'll be prompted securely.")
    args = ap.parse_args(argv)

    if not os.path.exists(args.db):
        print(f"[!] DB not found: {args.db}", file=sys.stderr)
        return 1

    new_password = args.password or getpass.getpass("Enter NEW password: ")
    if not new_password:
        print("[!] Empty password is not allowed.", file=sys.stderr)
        return 1

    email = args.email.strip().lower()
    conn = sqlite3.connect(args.db)
    try:
        cur = conn.cursor()
        cur.execute("SELECT id FROM users WHERE email = ?", (email,))
        if not cur.fetchone():
            print(f"[!] No user found with email: {email}", file=sys.stderr)
            return 2

        cur.execute(
            "UPDATE users SET password = ?, updated_at = ? WHERE email = ?",
            (hash_password(new_password), datetime.now(timezone.utc).isoformat(), email),
        )
        conn.commit()
        print(f"[+] Password updated for user: {email}")
    finally:
        conn.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
