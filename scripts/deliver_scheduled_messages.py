#!/usr/bin/env python3
"""Deliver scheduled channel messages whose time has come.

Usage:
    python scripts/deliver_scheduled_messages.py

Meant to run every minute from cron. Exits 0 on success, 1 on failure.
"""

from __future__ import annotations

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from turma.db.session import SessionLocal
from turma.services.message_service import deliver_scheduled_messages


def main() -> int:
    db = SessionLocal()
    try:
        delivered = deliver_scheduled_messages(db)
        print(f"status=completed messages_delivered={delivered}")
        return 0
    except Exception as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
