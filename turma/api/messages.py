"""Channel and message API routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from turma.api.deps import get_db, require_auth
from turma.models.user import User
from turma.schemas.message import (
    ChannelCreate,
    ChannelRead,
    ChannelUpdate,
    MessageCreate,
    MessageRead,
    MessageUpdate,
)
from turma.services.message_service import (
    MAX_PAGE_SIZE,
    create_channel,
    create_message,
    delete_channel,
    delete_message,
    list_channels,
    list_messages,
    update_channel,
    update_message,
)

channels_router = APIRouter()
messages_router = APIRouter()


# ── Channels ────────────────────────────────────────────────────────


@channels_router.get("", response_model=list[ChannelRead])
def api_list_channels(
    team_id: int = Query(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_auth),
) -> list[ChannelRead]:
    """List a team's channels with message counts."""
    result = []
    for channel, count in list_channels(db, team_id, current_user.id):
        read = ChannelRead.model_validate(channel)
        read.message_count = count
        result.append(read)
    return result


@channels_router.post("", response_model=ChannelRead, status_code=201)
def api_create_channel(
    data: ChannelCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_auth),
) -> ChannelRead:
    return ChannelRead.model_validate(create_channel(db, data, current_user.id))


@channels_router.put("/{channel_id}", response_model=ChannelRead)
def api_update_channel(
    channel_id: int,
    data: ChannelUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_auth),
) -> ChannelRead:
    return ChannelRead.model_validate(update_channel(db, channel_id, data, current_user.id))


@channels_router.delete("/{channel_id}", status_code=204)
def api_delete_channel(
    channel_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_auth),
) -> None:
    delete_channel(db, channel_id, current_user.id)


@channels_router.get("/{channel_id}/messages", response_model=list[MessageRead])
def api_list_messages(
    channel_id: int,
    limit: int | None = Query(None, ge=1, le=MAX_PAGE_SIZE),
    before: int | None = Query(None),
    after: int | None = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_auth),
) -> list[MessageRead]:
    """Page through a channel's messages (chronological order)."""
    messages = list_messages(
        db, channel_id, current_user.id, limit=limit, before=before, after=after
    )
    return [MessageRead.model_validate(m) for m in messages]


# ── Messages ────────────────────────────────────────────────────────


@messages_router.post("", response_model=MessageRead, status_code=201)
def api_create_message(
    data: MessageCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_auth),
) -> MessageRead:
    return MessageRead.model_validate(create_message(db, data, current_user))


@messages_router.put("/{message_id}", response_model=MessageRead)
def api_update_message(
    message_id: int,
    data: MessageUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_auth),
) -> MessageRead:
    """Edit a message (author only)."""
    message = update_message(db, message_id, data.content, current_user.id)
    return MessageRead.model_validate(message)


@messages_router.delete("/{message_id}", status_code=204)
def api_delete_message(
    message_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_auth),
) -> None:
    """Delete a message (author or team admin)."""
    delete_message(db, message_id, current_user.id)
