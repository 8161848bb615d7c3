"""Task API routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from turma.api.deps import get_db, require_auth
from turma.models.user import User
from turma.schemas.task import (
    SubtaskCreate,
    TaskCreate,
    TaskPriority,
    TaskRead,
    TaskStatus,
    TaskUpdate,
)
from turma.services.task_service import (
    TaskValidationError,
    add_subtask,
    create_task,
    delete_task,
    get_task,
    list_subtasks,
    list_tasks,
    update_task,
)

router = APIRouter()


@router.get("", response_model=list[TaskRead])
def api_list_tasks(
    created_by_me: bool = Query(False),
    assigned_to_id: int | None = Query(None),
    project_id: int | None = Query(None),
    team_id: int | None = Query(None),
    status: TaskStatus | None = Query(None),
    priority: TaskPriority | None = Query(None),
    search: str | None = Query(None, max_length=255),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_auth),
) -> list[TaskRead]:
    """List tasks visible to the caller, with optional filters."""
    tasks = list_tasks(
        db,
        current_user.id,
        created_by_me=created_by_me,
        assigned_to_id=assigned_to_id,
        project_id=project_id,
        team_id=team_id,
        status=status,
        priority=priority,
        search=search,
    )
    return [TaskRead.model_validate(t) for t in tasks]


@router.post("", response_model=TaskRead, status_code=201)
def api_create_task(
    data: TaskCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_auth),
) -> TaskRead:
    try:
        task = create_task(db, data, current_user)
    except TaskValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return TaskRead.model_validate(task)


@router.get("/{task_id}", response_model=TaskRead)
def api_get_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_auth),
) -> TaskRead:
    return TaskRead.model_validate(get_task(db, task_id, current_user.id))


@router.put("/{task_id}", response_model=TaskRead)
def api_update_task(
    task_id: int,
    data: TaskUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_auth),
) -> TaskRead:
    try:
        task = update_task(db, task_id, data, current_user)
    except TaskValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return TaskRead.model_validate(task)


@router.delete("/{task_id}", status_code=204)
def api_delete_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_auth),
) -> None:
    """Delete a task (its creator, or a team admin for project tasks)."""
    delete_task(db, task_id, current_user.id)


@router.get("/{task_id}/subtasks", response_model=list[TaskRead])
def api_list_subtasks(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_auth),
) -> list[TaskRead]:
    return [TaskRead.model_validate(t) for t in list_subtasks(db, task_id, current_user.id)]


@router.post("/{task_id}/subtasks", response_model=TaskRead, status_code=201)
def api_add_subtask(
    task_id: int,
    data: SubtaskCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_auth),
) -> TaskRead:
    try:
        task = add_subtask(db, task_id, data, current_user)
    except TaskValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return TaskRead.model_validate(task)
