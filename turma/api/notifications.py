"""Notification API routes. Every route acts on the caller's own inbox."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from turma.api.deps import get_db, require_auth
from turma.models.user import User
from turma.schemas.notification import NotificationList, NotificationRead
from turma.services.notification_service import (
    delete_notification,
    list_notifications,
    mark_all_as_read,
    mark_as_read,
)

router = APIRouter()


@router.get("", response_model=NotificationList)
def api_list_notifications(
    limit: int | None = Query(None, ge=1, le=100),
    offset: int = Query(0, ge=0),
    unread_only: bool = Query(False),
    types: list[str] | None = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_auth),
) -> NotificationList:
    items, total, unread_count = list_notifications(
        db,
        current_user.id,
        limit=limit,
        offset=offset,
        unread_only=unread_only,
        types=types,
    )
    return NotificationList(
        notifications=[NotificationRead.model_validate(n) for n in items],
        total=total,
        unread_count=unread_count,
    )


@router.put("/read-all")
def api_mark_all_read(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_auth),
) -> dict:
    return {"updated": mark_all_as_read(db, current_user.id)}


@router.put("/{notification_id}/read", response_model=NotificationRead)
def api_mark_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_auth),
) -> NotificationRead:
    return NotificationRead.model_validate(mark_as_read(db, notification_id, current_user.id))


@router.delete("/{notification_id}", status_code=204)
def api_delete_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_auth),
) -> None:
    delete_notification(db, notification_id, current_user.id)
