"""Task model. Tasks inside a project are team-scoped; tasks without one are personal."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from turma.db.session import Base

if TYPE_CHECKING:
    from turma.models.project import Project, ProjectPhase
    from turma.models.user import User

TASK_PRIORITIES = ("high", "medium", "low")
TASK_STATUSES = ("todo", "in-progress", "completed", "blocked")


class Task(Base):
    """Task created by one user and optionally assigned to another."""

    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    priority: Mapped[str] = mapped_column(String(20), nullable=False, default="medium")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="todo")
    due_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    project_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=True, index=True
    )
    phase_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("project_phases.id", ondelete="SET NULL"), nullable=True
    )
    assigned_to_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    created_by_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    parent_task_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=True
    )
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

    project: Mapped[Project | None] = relationship("Project", back_populates="tasks")
    phase: Mapped[ProjectPhase | None] = relationship("ProjectPhase")
    assigned_to: Mapped[User | None] = relationship("User", foreign_keys=[assigned_to_id])
    created_by: Mapped[User] = relationship("User", foreign_keys=[created_by_id])
    parent_task: Mapped[Task | None] = relationship(
        "Task", remote_side=[id], back_populates="subtasks"
    )
    subtasks: Mapped[list[Task]] = relationship(
        "Task",
        back_populates="parent_task",
        cascade="all",
        passive_deletes=True,
    )

    @property
    def owner_id(self) -> int:
        return self.created_by_id
