"""Project service: team-scoped projects and their phases."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from turma.models import Project, ProjectPhase, TeamMember
from turma.schemas.project import (
    PhaseCreate,
    PhaseUpdate,
    ProjectCreate,
    ProjectUpdate,
)
from turma.services.authorization import (
    ADMIN_ONLY,
    ADMIN_OR_MEMBER,
    ANY_MEMBER,
    ResourceNotFoundError,
    SqlMembershipStore,
    require_membership,
)
from turma.services.notification_service import notify_project_updated

logger = logging.getLogger(__name__)

# NOT NULL columns; an explicit null in a partial update leaves them unchanged
_REQUIRED_PROJECT_FIELDS = ("name", "status")
_REQUIRED_PHASE_FIELDS = ("name", "order")


def _load_project(db: Session, project_id: int) -> Project:
    project = db.get(Project, project_id)
    if project is None:
        raise ResourceNotFoundError("Project not found")
    return project


def _load_phase(db: Session, project: Project, phase_id: int) -> ProjectPhase:
    phase = db.get(ProjectPhase, phase_id)
    if phase is None or phase.project_id != project.id:
        raise ResourceNotFoundError("Phase not found")
    return phase


def list_projects(
    db: Session,
    user_id: int,
    *,
    team_id: int | None = None,
    status: str | None = None,
    search: str | None = None,
) -> list[Project]:
    """Projects of the teams the user belongs to, newest first.

    Filtering by a team the user is not in returns the guard's denial rather
    than an empty list.
    """
    if team_id is not None:
        require_membership(SqlMembershipStore(db), team_id, user_id, ANY_MEMBER)

    my_teams = select(TeamMember.team_id).where(TeamMember.user_id == user_id)
    query = db.query(Project).filter(Project.team_id.in_(my_teams))
    if team_id is not None:
        query = query.filter(Project.team_id == team_id)
    if status:
        query = query.filter(Project.status == status)
    if search:
        pattern = f"%{search}%"
        query = query.filter(Project.name.ilike(pattern) | Project.description.ilike(pattern))
    return query.order_by(Project.created_at.desc(), Project.id.desc()).all()


def get_project(db: Session, project_id: int, user_id: int) -> Project:
    project = _load_project(db, project_id)
    require_membership(SqlMembershipStore(db), project.team_id, user_id, ANY_MEMBER)
    return project


def create_project(db: Session, data: ProjectCreate, user_id: int) -> Project:
    require_membership(SqlMembershipStore(db), data.team_id, user_id, ADMIN_OR_MEMBER)
    project = Project(**data.model_dump())
    db.add(project)
    db.commit()
    db.refresh(project)
    logger.info("project created: id=%s team=%s by=%s", project.id, project.team_id, user_id)
    return project


def update_project(db: Session, project_id: int, data: ProjectUpdate, user_id: int) -> Project:
    """Apply a partial update and tell the rest of the team."""
    project = _load_project(db, project_id)
    require_membership(SqlMembershipStore(db), project.team_id, user_id, ADMIN_OR_MEMBER)
    for field, value in data.model_dump(exclude_unset=True).items():
        if value is None and field in _REQUIRED_PROJECT_FIELDS:
            continue
        setattr(project, field, value)
    db.commit()
    db.refresh(project)
    notify_project_updated(db, project, user_id)
    return project


def delete_project(db: Session, project_id: int, user_id: int) -> None:
    project = _load_project(db, project_id)
    require_membership(SqlMembershipStore(db), project.team_id, user_id, ADMIN_ONLY)
    db.delete(project)
    db.commit()
    logger.info("project deleted: id=%s by=%s", project_id, user_id)


# ── Phases ──────────────────────────────────────────────────────────


def list_phases(db: Session, project_id: int, user_id: int) -> list[ProjectPhase]:
    project = get_project(db, project_id, user_id)
    return list(project.phases)


def create_phase(db: Session, project_id: int, data: PhaseCreate, user_id: int) -> ProjectPhase:
    project = _load_project(db, project_id)
    require_membership(SqlMembershipStore(db), project.team_id, user_id, ADMIN_OR_MEMBER)
    phase = ProjectPhase(project_id=project.id, **data.model_dump())
    db.add(phase)
    db.commit()
    db.refresh(phase)
    return phase


def update_phase(
    db: Session, project_id: int, phase_id: int, data: PhaseUpdate, user_id: int
) -> ProjectPhase:
    project = _load_project(db, project_id)
    require_membership(SqlMembershipStore(db), project.team_id, user_id, ADMIN_OR_MEMBER)
    phase = _load_phase(db, project, phase_id)
    for field, value in data.model_dump(exclude_unset=True).items():
        if value is None and field in _REQUIRED_PHASE_FIELDS:
            continue
        setattr(phase, field, value)
    db.commit()
    db.refresh(phase)
    return phase


def delete_phase(db: Session, project_id: int, phase_id: int, user_id: int) -> None:
    project = _load_project(db, project_id)
    require_membership(SqlMembershipStore(db), project.team_id, user_id, ADMIN_OR_MEMBER)
    phase = _load_phase(db, project, phase_id)
    db.delete(phase)
    db.commit()
