#!/usr/bin/env python3
"""
Print an access token for an existing user.

Usage:
    python create_token.py --email user@example.com --days 365
"""

import argparse
import asyncio
import sys

from task_list_api.app.core.db import init_db
from task_list_api.app.core.security import create_access_token
from task_list_api.app.services.user_service import UserService


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Issue an access token for a user")
    parser.add_argument("--email", required=True, help="E-mail of the user")
    parser.add_argument("--days", type=int, default=1, help="Token lifetime in days")
    args = parser.parse_args(argv)

    init_db()
    user = asyncio.run(UserService.get_user_by_email(args.email))
    if user is None:
        print(f"User not found: {args.email}", file=sys.stderr)
        return 1
    print(create_access_token({"sub": user.email}, expires_delta=args.days * 24 * 60 * 60))
    return 0


if __name__ == "__main__":
    sys.exit(main())
