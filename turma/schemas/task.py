"""Task schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from turma.schemas.auth import UserRead

TaskPriority = Literal["high", "medium", "low"]
TaskStatus = Literal["todo", "in-progress", "completed", "blocked"]


class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    priority: TaskPriority = "medium"
    status: TaskStatus = "todo"
    due_date: datetime | None = None
    project_id: int | None = None
    phase_id: int | None = None
    assigned_to_id: int | None = None
    parent_task_id: int | None = None


class SubtaskCreate(BaseModel):
    """Subtasks inherit project and phase from their parent."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    priority: TaskPriority = "medium"
    status: TaskStatus = "todo"
    due_date: datetime | None = None
    assigned_to_id: int | None = None


class TaskUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    priority: TaskPriority | None = None
    status: TaskStatus | None = None
    due_date: datetime | None = None
    phase_id: int | None = None
    assigned_to_id: int | None = None


class TaskRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str | None
    priority: str
    status: str
    due_date: datetime | None
    project_id: int | None
    phase_id: int | None
    assigned_to_id: int | None
    created_by_id: int
    parent_task_id: int | None
    created_at: datetime
    updated_at: datetime
    assigned_to: UserRead | None = None
