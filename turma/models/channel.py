"""Channel model (team-scoped)."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from turma.db.session import Base

if TYPE_CHECKING:
    from turma.models.message import Message
    from turma.models.team import Team

CHANNEL_TYPES = ("direct", "group", "project")


class Channel(Base):
    """Chat channel belonging to one team."""

    __tablename__ = "channels"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    team_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False, default="group")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    team: Mapped[Team] = relationship("Team", back_populates="channels")
    messages: Mapped[list[Message]] = relationship(
        "Message",
        back_populates="channel",
        cascade="all",
        passive_deletes=True,
    )
