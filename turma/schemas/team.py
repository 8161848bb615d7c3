"""Team and membership schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from turma.schemas.auth import UserRead


class TeamCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None


class TeamUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None


class TeamMemberCreate(BaseModel):
    """Role is validated by the role policy so an unknown role maps to the same
    error on every endpoint."""

    user_id: int = Field(..., gt=0)
    role: str = "member"


class TeamMemberUpdate(BaseModel):
    role: str


class TeamMemberRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    team_id: int
    user_id: int
    role: str
    joined_at: datetime
    user: UserRead


class TeamRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None
    created_at: datetime
    updated_at: datetime


class TeamDetail(TeamRead):
    members: list[TeamMemberRead] = []
