"""Notification service: per-user inbox plus the event hooks that fill it."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta, timezone

from sqlalchemy import func
from sqlalchemy.orm import Session

from turma.config import get_settings
from turma.models import Message, Notification, Project, Task, Team, TeamMember, User
from turma.services.authorization import authorize_by_ownership

logger = logging.getLogger(__name__)


# ── Inbox ───────────────────────────────────────────────────────────


def create_notifications(
    db: Session,
    user_ids: Iterable[int],
    notification_type: str,
    content: str,
) -> list[Notification]:
    """Create one notification per recipient and commit them together."""
    notifications = [
        Notification(user_id=user_id, type=notification_type, content=content)
        for user_id in user_ids
    ]
    if not notifications:
        return []
    db.add_all(notifications)
    db.commit()
    logger.info(
        "notifications created: type=%s recipients=%d",
        notification_type,
        len(notifications),
    )
    return notifications


def list_notifications(
    db: Session,
    user_id: int,
    *,
    limit: int | None = None,
    offset: int = 0,
    unread_only: bool = False,
    types: Sequence[str] | None = None,
) -> tuple[list[Notification], int, int]:
    """Return (page, total matching, unread count) for user_id, newest first."""
    if limit is None:
        limit = get_settings().notification_page_size

    query = db.query(Notification).filter(Notification.user_id == user_id)
    if unread_only:
        query = query.filter(Notification.is_read == False)  # noqa: E712
    if types:
        query = query.filter(Notification.type.in_(list(types)))

    total = query.count()
    items = (
        query.order_by(Notification.created_at.desc(), Notification.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    unread_count = (
        db.query(func.count(Notification.id))
        .filter(Notification.user_id == user_id, Notification.is_read == False)  # noqa: E712
        .scalar()
        or 0
    )
    return items, total, unread_count


def mark_as_read(db: Session, notification_id: int, user_id: int) -> Notification:
    """Mark one notification read. Only its recipient may do this."""
    notification = db.get(Notification, notification_id)
    authorize_by_ownership(notification, user_id).enforce()
    notification.is_read = True
    db.commit()
    db.refresh(notification)
    return notification


def mark_all_as_read(db: Session, user_id: int) -> int:
    """Mark every unread notification of user_id read. Returns how many changed."""
    updated = (
        db.query(Notification)
        .filter(Notification.user_id == user_id, Notification.is_read == False)  # noqa: E712
        .update({Notification.is_read: True}, synchronize_session=False)
    )
    db.commit()
    return updated


def delete_notification(db: Session, notification_id: int, user_id: int) -> None:
    notification = db.get(Notification, notification_id)
    authorize_by_ownership(notification, user_id).enforce()
    db.delete(notification)
    db.commit()


# ── Event hooks ─────────────────────────────────────────────────────


def _team_member_ids(db: Session, team_id: int, exclude: Iterable[int] = ()) -> list[int]:
    excluded = set(exclude)
    rows = db.query(TeamMember.user_id).filter(TeamMember.team_id == team_id).all()
    return [user_id for (user_id,) in rows if user_id not in excluded]


def notify_task_assigned(db: Session, task: Task, assigned_by: User) -> list[Notification]:
    if task.assigned_to_id is None or task.assigned_to_id == assigned_by.id:
        return []
    content = f'{assigned_by.name} assigned you the task "{task.title}"'
    return create_notifications(db, [task.assigned_to_id], "task_assigned", content)


def notify_task_updated(db: Session, task: Task) -> list[Notification]:
    """Tell the assignee about an update, unless they created the task themselves."""
    if task.assigned_to_id is None or task.assigned_to_id == task.created_by_id:
        return []
    content = f'The task "{task.title}" has been updated'
    return create_notifications(db, [task.assigned_to_id], "task_updated", content)


def notify_tasks_due_soon(db: Session, now: datetime | None = None) -> list[Notification]:
    """Notify assignees of incomplete tasks due within the configured window."""
    now = now or datetime.now(timezone.utc)
    horizon = now + timedelta(hours=get_settings().task_due_soon_hours)
    tasks = (
        db.query(Task)
        .filter(
            Task.due_date >= now,
            Task.due_date <= horizon,
            Task.status != "completed",
            Task.assigned_to_id.isnot(None),
        )
        .all()
    )
    notifications: list[Notification] = []
    for task in tasks:
        notifications.extend(
            create_notifications(
                db, [task.assigned_to_id], "task_due_soon", f'Your task "{task.title}" is due soon'
            )
        )
    logger.info("due-soon scan: tasks=%d notifications=%d", len(tasks), len(notifications))
    return notifications


def notify_message_received(db: Session, message: Message) -> list[Notification]:
    channel = message.channel
    recipients = _team_member_ids(db, channel.team_id, exclude=[message.sender_id])
    content = f"{message.sender.name} sent a message in #{channel.name}"
    return create_notifications(db, recipients, "message_received", content)


def notify_project_updated(db: Session, project: Project, updated_by_id: int) -> list[Notification]:
    recipients = _team_member_ids(db, project.team_id, exclude=[updated_by_id])
    content = f'The project "{project.name}" has been updated'
    return create_notifications(db, recipients, "project_updated", content)


def notify_team_joined(db: Session, team: Team, user: User, added_by_id: int) -> list[Notification]:
    """Welcome the new member and tell everyone else except whoever added them."""
    notifications = create_notifications(
        db, [user.id], "team_joined", f'You have been added to the team "{team.name}"'
    )
    others = _team_member_ids(db, team.id, exclude=[user.id, added_by_id])
    notifications.extend(
        create_notifications(db, others, "team_joined", f"{user.name} has joined the team")
    )
    return notifications


def notify_team_left(db: Session, team: Team, user: User) -> list[Notification]:
    recipients = _team_member_ids(db, team.id, exclude=[user.id])
    content = f'{user.name} has left the team "{team.name}"'
    return create_notifications(db, recipients, "team_left", content)
