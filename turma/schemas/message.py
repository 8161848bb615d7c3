"""Channel and message schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from turma.schemas.auth import UserRead

ChannelType = Literal["direct", "group", "project"]


class ChannelCreate(BaseModel):
    team_id: int = Field(..., gt=0)
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    type: ChannelType = "group"


class ChannelUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    type: ChannelType | None = None


class ChannelRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    team_id: int
    name: str
    description: str | None
    type: str
    created_at: datetime
    message_count: int | None = None


class MessageCreate(BaseModel):
    channel_id: int = Field(..., gt=0)
    content: str = Field(..., min_length=1)
    is_temporary: bool = False
    scheduled_for: datetime | None = None

    @model_validator(mode="after")
    def schedule_required_when_temporary(self) -> MessageCreate:
        """A held-back message needs a delivery time or it would never be published."""
        if self.is_temporary and self.scheduled_for is None:
            raise ValueError("scheduled_for is required when is_temporary is true")
        return self


class MessageUpdate(BaseModel):
    content: str = Field(..., min_length=1)


class MessageRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    channel_id: int
    sender_id: int
    content: str
    is_temporary: bool
    scheduled_for: datetime | None
    created_at: datetime
    updated_at: datetime
    sender: UserRead
