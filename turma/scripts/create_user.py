"""Create a Turma user.

Usage:
    python -m turma.scripts.create_user --name "Ana Souza" --email ana@example.com --password <password>
"""

from __future__ import annotations

import argparse
import sys

from turma.db.session import SessionLocal
from turma.services.auth import create_user, get_user_by_email


def main() -> None:
    parser = argparse.ArgumentParser(description="Create a Turma user")
    parser.add_argument("--name", required=True, help="Display name for the new user")
    parser.add_argument("--email", required=True, help="Login email for the new user")
    parser.add_argument("--password", required=True, help="Password for the new user")
    args = parser.parse_args()

    db = SessionLocal()
    try:
        if get_user_by_email(db, args.email) is not None:
            print(f"User '{args.email}' already exists.")
            sys.exit(1)

        user = create_user(db, args.name, args.email, args.password)
        print(f"User '{user.email}' created successfully (id={user.id}).")
    finally:
        db.close()


if __name__ == "__main__":
    main()
