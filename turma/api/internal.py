"""Internal job endpoints for cron/scripts.

These endpoints are secured with a static token (X-Internal-Token header),
NOT cookie-based auth.  They are meant for automated triggers only.
"""

from __future__ import annotations

import logging
import secrets

from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.orm import Session

from turma.config import get_settings
from turma.db.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/internal", include_in_schema=False)


# ── Token dependency ────────────────────────────────────────────────


def _require_internal_token(x_internal_token: str = Header(...)) -> None:
    """Validate the internal job token from the request header.

    Uses constant-time comparison to prevent timing attacks.
    Raises 403 if the token is empty or does not match the configured value.
    """
    expected = get_settings().internal_job_token
    if not expected or not secrets.compare_digest(x_internal_token, expected):
        logger.warning("Internal endpoint auth failed: invalid or missing token")
        raise HTTPException(status_code=403, detail="Invalid internal token")


# ── Endpoints ───────────────────────────────────────────────────────


@router.post("/deliver_scheduled_messages")
def deliver_scheduled(
    db: Session = Depends(get_db),
    _token: None = Depends(_require_internal_token),
):
    """Publish scheduled messages whose time has come."""
    from turma.services.message_service import deliver_scheduled_messages

    try:
        delivered = deliver_scheduled_messages(db)
        return {"status": "completed", "messages_delivered": delivered}
    except Exception as exc:
        logger.exception("Scheduled message delivery failed")
        return {"status": "failed", "error": str(exc)}


@router.post("/notify_tasks_due_soon")
def notify_due_soon(
    db: Session = Depends(get_db),
    _token: None = Depends(_require_internal_token),
):
    """Notify assignees of incomplete tasks due within the configured window."""
    from turma.services.notification_service import notify_tasks_due_soon

    try:
        notifications = notify_tasks_due_soon(db)
        return {"status": "completed", "notifications_created": len(notifications)}
    except Exception as exc:
        logger.exception("Due-soon notification job failed")
        return {"status": "failed", "error": str(exc)}
