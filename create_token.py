#!/usr/bin/env python3
"""
Issue an access token for an existing Trip Planner user.

Handy for calling the API from curl or scripts without going through
``/api/login``.  The token is signed with ``SECRET_KEY`` from the
environment, so run this with the same settings as the server.

Usage:
    python create_token.py --email user@example.com [--db ./trip_planner.db] [--days 7]
"""

import argparse
import os
import sys

from trip_planner_api.app.core.db import connect, get_database_path
from trip_planner_api.app.core.security import create_access_token


def main() -> None:
    ap = argparse.ArgumentParser(description="Issue a Trip Planner access token.")
    ap.add_argument("--email", required=True, help="E-mail of the user the token is for")
    ap.add_argument("--db", help="Path to the SQLite DB file (defaults to DATABASE_URL)")
    ap.add_argument("--days", type=int, default=7, help="Token lifetime in days")
    args = ap.parse_args()

    db_path = get_database_path(args.db)
    if not os.path.exists(db_path):
        print(f"[!] DB not found: {db_path}", file=sys.stderr)
        sys.exit(1)

    conn = connect(db_path)
    try:
        row = conn.execute(
            "SELECT id, email FROM users WHERE email = ?", (args.email.strip().lower(),)
        ).fetchone()
    finally:
        conn.close()
    if not row:
        print(f"[!] No user found with email: {args.email}", file=sys.stderr)
        sys.exit(2)

    token = create_access_token(
        {"user_id": row["id"], "email": row["email"]}, expires_delta=args.days * 24 * 60 * 60
    )
    print(token)


if __name__ == "__main__":
    main()
