"""Team model: a collaboration group with a role-gated membership list."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from turma.db.session import Base

if TYPE_CHECKING:
    from turma.models.channel import Channel
    from turma.models.project import Project
    from turma.models.team_member import TeamMember


class Team(Base):
    """Team. Deleting a team cascades to memberships, projects and channels."""

    __tablename__ = "teams"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    members: Mapped[list[TeamMember]] = relationship(
        "TeamMember",
        back_populates="team",
        cascade="all",
        passive_deletes=True,
    )
    projects: Mapped[list[Project]] = relationship(
        "Project",
        back_populates="team",
        cascade="all",
        passive_deletes=True,
    )
    channels: Mapped[list[Channel]] = relationship(
        "Channel",
        back_populates="team",
        cascade="all",
        passive_deletes=True,
    )
