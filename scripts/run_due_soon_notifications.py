#!/usr/bin/env python3
"""Notify assignees of incomplete tasks that are due soon.

Usage:
    python scripts/run_due_soon_notifications.py

The window is TASK_DUE_SOON_HOURS (default 24). Exits 0 on success, 1 on failure.
"""

from __future__ import annotations

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from turma.db.session import SessionLocal
from turma.services.notification_service import notify_tasks_due_soon


def main() -> int:
    db = SessionLocal()
    try:
        notifications = notify_tasks_due_soon(db)
        print(f"status=completed notifications_created={len(notifications)}")
        return 0
    except Exception as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
