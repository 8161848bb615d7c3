"""Task service.

Tasks inside a project are team-scoped: any member reads them, admins and
members create and edit them, and the creator or a team admin deletes them.
Tasks without a project are personal: visible to their creator and assignee,
editable by the creator only.
"""

from __future__ import annotations

import logging

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from turma.models import Project, ProjectPhase, Task, TeamMember, User
from turma.schemas.task import SubtaskCreate, TaskCreate, TaskUpdate
from turma.services.authorization import (
    ADMIN_ONLY,
    ADMIN_OR_MEMBER,
    ANY_MEMBER,
    ForbiddenError,
    ResourceNotFoundError,
    SqlMembershipStore,
    authorize_by_ownership,
    require_membership,
)
from turma.services.notification_service import notify_task_assigned, notify_task_updated

logger = logging.getLogger(__name__)

# Columns that cannot be cleared through a partial update
_REQUIRED_FIELDS = ("title", "priority", "status")


class TaskValidationError(ValueError):
    """Raised when a task references a phase, parent or assignee it cannot use."""

    pass


def _load_task(db: Session, task_id: int) -> Task:
    task = db.get(Task, task_id)
    if task is None:
        raise ResourceNotFoundError("Task not found")
    return task


def _load_project(db: Session, project_id: int) -> Project:
    project = db.get(Project, project_id)
    if project is None:
        raise ResourceNotFoundError("Project not found")
    return project


def _authorize_read(db: Session, task: Task, user_id: int) -> None:
    if task.project_id is not None:
        require_membership(SqlMembershipStore(db), task.project.team_id, user_id, ANY_MEMBER)
    elif user_id not in (task.created_by_id, task.assigned_to_id):
        raise ForbiddenError("You do not have permission to access this resource")


def _authorize_write(db: Session, task: Task, user_id: int) -> None:
    if task.project_id is not None:
        require_membership(SqlMembershipStore(db), task.project.team_id, user_id, ADMIN_OR_MEMBER)
    else:
        authorize_by_ownership(task, user_id).enforce()


def _validate_links(
    db: Session,
    project: Project | None,
    phase_id: int | None,
    assigned_to_id: int | None,
) -> None:
    if phase_id is not None:
        if project is None:
            raise TaskValidationError("A phase can only be set on a project task")
        phase = db.get(ProjectPhase, phase_id)
        if phase is None or phase.project_id != project.id:
            raise TaskValidationError("Phase does not belong to the task's project")
    if assigned_to_id is not None:
        if project is not None:
            membership = SqlMembershipStore(db).find_membership(project.team_id, assigned_to_id)
            if membership is None:
                raise TaskValidationError("Assignee must be a member of the project's team")
        elif db.get(User, assigned_to_id) is None:
            raise ResourceNotFoundError("User not found")


def get_task(db: Session, task_id: int, user_id: int) -> Task:
    task = _load_task(db, task_id)
    _authorize_read(db, task, user_id)
    return task


def list_tasks(
    db: Session,
    user_id: int,
    *,
    created_by_me: bool = False,
    assigned_to_id: int | None = None,
    project_id: int | None = None,
    team_id: int | None = None,
    status: str | None = None,
    priority: str | None = None,
    search: str | None = None,
) -> list[Task]:
    """Tasks visible to the user, soonest due first.

    Visible means: any task in a project of one of the user's teams, plus
    personal tasks the user created or is assigned to.
    """
    store = SqlMembershipStore(db)
    if project_id is not None:
        project = _load_project(db, project_id)
        require_membership(store, project.team_id, user_id, ANY_MEMBER)
    if team_id is not None:
        require_membership(store, team_id, user_id, ANY_MEMBER)

    my_teams = select(TeamMember.team_id).where(TeamMember.user_id == user_id)
    my_projects = select(Project.id).where(Project.team_id.in_(my_teams))
    query = db.query(Task).filter(
        or_(
            Task.project_id.in_(my_projects),
            (Task.project_id.is_(None))
            & or_(Task.created_by_id == user_id, Task.assigned_to_id == user_id),
        )
    )

    if created_by_me:
        query = query.filter(Task.created_by_id == user_id)
    if assigned_to_id is not None:
        query = query.filter(Task.assigned_to_id == assigned_to_id)
    if project_id is not None:
        query = query.filter(Task.project_id == project_id)
    if team_id is not None:
        query = query.filter(
            Task.project_id.in_(select(Project.id).where(Project.team_id == team_id))
        )
    if status:
        query = query.filter(Task.status == status)
    if priority:
        query = query.filter(Task.priority == priority)
    if search:
        pattern = f"%{search}%"
        query = query.filter(Task.title.ilike(pattern) | Task.description.ilike(pattern))

    return query.order_by(Task.due_date.is_(None), Task.due_date, Task.id.desc()).all()


def create_task(db: Session, data: TaskCreate, user: User) -> Task:
    """Create a task and notify its assignee."""
    project: Project | None = None
    if data.project_id is not None:
        project = _load_project(db, data.project_id)
        require_membership(SqlMembershipStore(db), project.team_id, user.id, ADMIN_OR_MEMBER)

    if data.parent_task_id is not None:
        parent = get_task(db, data.parent_task_id, user.id)
        if parent.project_id != data.project_id:
            raise TaskValidationError("A subtask must belong to its parent's project")

    _validate_links(db, project, data.phase_id, data.assigned_to_id)

    task = Task(**data.model_dump(), created_by_id=user.id)
    db.add(task)
    db.commit()
    db.refresh(task)
    logger.info("task created: id=%s project=%s by=%s", task.id, task.project_id, user.id)
    notify_task_assigned(db, task, user)
    return task


def add_subtask(db: Session, parent_id: int, data: SubtaskCreate, user: User) -> Task:
    """Create a subtask that inherits project and phase from its parent."""
    parent = _load_task(db, parent_id)
    _authorize_write(db, parent, user.id)
    _validate_links(db, parent.project, None, data.assigned_to_id)

    task = Task(
        **data.model_dump(),
        project_id=parent.project_id,
        phase_id=parent.phase_id,
        parent_task_id=parent.id,
        created_by_id=user.id,
    )
    db.add(task)
    db.commit()
    db.refresh(task)
    notify_task_assigned(db, task, user)
    return task


def list_subtasks(db: Session, task_id: int, user_id: int) -> list[Task]:
    parent = get_task(db, task_id, user_id)
    return list(parent.subtasks)


def update_task(db: Session, task_id: int, data: TaskUpdate, user: User) -> Task:
    """Apply a partial update.

    A new assignee gets task_assigned; otherwise the assignee gets
    task_updated (unless they created the task).
    """
    task = _load_task(db, task_id)
    _authorize_write(db, task, user.id)

    changes = data.model_dump(exclude_unset=True)
    for field in _REQUIRED_FIELDS:
        if field in changes and changes[field] is None:
            del changes[field]
    _validate_links(db, task.project, changes.get("phase_id"), changes.get("assigned_to_id"))

    previous_assignee = task.assigned_to_id
    for field, value in changes.items():
        setattr(task, field, value)
    db.commit()
    db.refresh(task)

    if task.assigned_to_id is not None and task.assigned_to_id != previous_assignee:
        notify_task_assigned(db, task, user)
    else:
        notify_task_updated(db, task)
    return task


def delete_task(db: Session, task_id: int, user_id: int) -> None:
    """Delete a task. The creator may always; team admins may for project tasks."""
    task = _load_task(db, task_id)
    team_id = task.project.team_id if task.project_id is not None else None
    authorize_by_ownership(
        task,
        user_id,
        store=SqlMembershipStore(db),
        fallback_roles=ADMIN_ONLY if team_id is not None else None,
        team_id=team_id,
    ).enforce()
    db.delete(task)
    db.commit()
    logger.info("task deleted: id=%s by=%s", task_id, user_id)
