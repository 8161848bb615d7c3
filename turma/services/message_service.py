"""Channel and message service (team-scoped chat)."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import func
from sqlalchemy.orm import Session

from turma.config import get_settings
from turma.models import Channel, Message, User
from turma.schemas.message import ChannelCreate, ChannelUpdate, MessageCreate
from turma.services.authorization import (
    ADMIN_ONLY,
    ANY_MEMBER,
    ResourceNotFoundError,
    SqlMembershipStore,
    authorize_by_ownership,
    require_membership,
)
from turma.services.notification_service import notify_message_received

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


def _load_channel(db: Session, channel_id: int) -> Channel:
    channel = db.get(Channel, channel_id)
    if channel is None:
        raise ResourceNotFoundError("Channel not found")
    return channel


# ── Channels ────────────────────────────────────────────────────────


def list_channels(db: Session, team_id: int, user_id: int) -> list[tuple[Channel, int]]:
    """Channels of a team with their message counts."""
    require_membership(SqlMembershipStore(db), team_id, user_id, ANY_MEMBER)
    rows = (
        db.query(Channel, func.count(Message.id))
        .outerjoin(Message, Message.channel_id == Channel.id)
        .filter(Channel.team_id == team_id)
        .group_by(Channel.id)
        .order_by(Channel.created_at, Channel.id)
        .all()
    )
    return [(channel, count) for channel, count in rows]


def create_channel(db: Session, data: ChannelCreate, user_id: int) -> Channel:
    require_membership(SqlMembershipStore(db), data.team_id, user_id, ANY_MEMBER)
    channel = Channel(**data.model_dump())
    db.add(channel)
    db.commit()
    db.refresh(channel)
    return channel


def update_channel(db: Session, channel_id: int, data: ChannelUpdate, user_id: int) -> Channel:
    channel = _load_channel(db, channel_id)
    require_membership(SqlMembershipStore(db), channel.team_id, user_id, ADMIN_ONLY)
    for field, value in data.model_dump(exclude_unset=True).items():
        if value is not None or field == "description":
            setattr(channel, field, value)
    db.commit()
    db.refresh(channel)
    return channel


def delete_channel(db: Session, channel_id: int, user_id: int) -> None:
    channel = _load_channel(db, channel_id)
    require_membership(SqlMembershipStore(db), channel.team_id, user_id, ADMIN_ONLY)
    db.delete(channel)
    db.commit()
    logger.info("channel deleted: id=%s by=%s", channel_id, user_id)


# ── Messages ────────────────────────────────────────────────────────


def list_messages(
    db: Session,
    channel_id: int,
    user_id: int,
    *,
    limit: int | None = None,
    before: int | None = None,
    after: int | None = None,
) -> list[Message]:
    """A page of delivered messages in chronological order.

    ``before`` returns the page immediately preceding that message id,
    ``after`` the page immediately following it. Without a cursor, the most
    recent page is returned.
    """
    channel = _load_channel(db, channel_id)
    require_membership(SqlMembershipStore(db), channel.team_id, user_id, ANY_MEMBER)
    limit = min(limit or get_settings().message_page_size, MAX_PAGE_SIZE)

    query = db.query(Message).filter(
        Message.channel_id == channel_id,
        Message.is_temporary == False,  # noqa: E712
    )
    if after is not None:
        return query.filter(Message.id > after).order_by(Message.id).limit(limit).all()
    if before is not None:
        query = query.filter(Message.id < before)
    page = query.order_by(Message.id.desc()).limit(limit).all()
    page.reverse()
    return page


def create_message(db: Session, data: MessageCreate, sender: User) -> Message:
    """Post a message. Immediate messages notify the rest of the team."""
    channel = _load_channel(db, data.channel_id)
    require_membership(SqlMembershipStore(db), channel.team_id, sender.id, ANY_MEMBER)
    message = Message(
        channel_id=channel.id,
        sender_id=sender.id,
        content=data.content,
        is_temporary=data.is_temporary,
        scheduled_for=data.scheduled_for,
    )
    db.add(message)
    db.commit()
    db.refresh(message)
    if not message.is_temporary:
        notify_message_received(db, message)
    return message


def update_message(db: Session, message_id: int, content: str, user_id: int) -> Message:
    """Edit a message. Only its author may."""
    message = db.get(Message, message_id)
    authorize_by_ownership(message, user_id).enforce()
    message.content = content
    db.commit()
    db.refresh(message)
    return message


def delete_message(db: Session, message_id: int, user_id: int) -> None:
    """Delete a message. Its author or an admin of the channel's team may."""
    message = db.get(Message, message_id)
    team_id = message.channel.team_id if message is not None else None
    authorize_by_ownership(
        message,
        user_id,
        store=SqlMembershipStore(db),
        fallback_roles=ADMIN_ONLY,
        team_id=team_id,
    ).enforce()
    db.delete(message)
    db.commit()


def deliver_scheduled_messages(db: Session, now: datetime | None = None) -> int:
    """Publish temporary messages whose scheduled time has passed. Returns the count."""
    now = now or datetime.now(timezone.utc)
    due = (
        db.query(Message)
        .filter(
            Message.is_temporary == True,  # noqa: E712
            Message.scheduled_for.isnot(None),
            Message.scheduled_for <= now,
        )
        .order_by(Message.scheduled_for, Message.id)
        .all()
    )
    for message in due:
        message.is_temporary = False
    db.commit()
    for message in due:
        notify_message_received(db, message)
    logger.info("scheduled messages delivered: %d", len(due))
    return len(due)
