"""Notification schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class NotificationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    type: str
    content: str
    is_read: bool
    created_at: datetime


class NotificationList(BaseModel):
    notifications: list[NotificationRead]
    total: int
    unread_count: int
