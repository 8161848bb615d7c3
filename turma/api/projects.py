"""Project and phase API routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from turma.api.deps import get_db, require_auth
from turma.models.user import User
from turma.schemas.project import (
    PhaseCreate,
    PhaseRead,
    PhaseUpdate,
    ProjectCreate,
    ProjectDetail,
    ProjectRead,
    ProjectStatus,
    ProjectUpdate,
)
from turma.services.project_service import (
    create_phase,
    create_project,
    delete_phase,
    delete_project,
    get_project,
    list_phases,
    list_projects,
    update_phase,
    update_project,
)

router = APIRouter()


@router.get("", response_model=list[ProjectRead])
def api_list_projects(
    team_id: int | None = Query(None),
    status: ProjectStatus | None = Query(None),
    search: str | None = Query(None, max_length=255),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_auth),
) -> list[ProjectRead]:
    """List projects across the caller's teams."""
    projects = list_projects(db, current_user.id, team_id=team_id, status=status, search=search)
    return [ProjectRead.model_validate(p) for p in projects]


@router.post("", response_model=ProjectRead, status_code=201)
def api_create_project(
    data: ProjectCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_auth),
) -> ProjectRead:
    return ProjectRead.model_validate(create_project(db, data, current_user.id))


@router.get("/{project_id}", response_model=ProjectDetail)
def api_get_project(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_auth),
) -> ProjectDetail:
    return ProjectDetail.model_validate(get_project(db, project_id, current_user.id))


@router.put("/{project_id}", response_model=ProjectRead)
def api_update_project(
    project_id: int,
    data: ProjectUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_auth),
) -> ProjectRead:
    return ProjectRead.model_validate(update_project(db, project_id, data, current_user.id))


@router.delete("/{project_id}", status_code=204)
def api_delete_project(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_auth),
) -> None:
    """Delete a project (team admins only)."""
    delete_project(db, project_id, current_user.id)


@router.get("/{project_id}/phases", response_model=list[PhaseRead])
def api_list_phases(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_auth),
) -> list[PhaseRead]:
    return [PhaseRead.model_validate(p) for p in list_phases(db, project_id, current_user.id)]


@router.post("/{project_id}/phases", response_model=PhaseRead, status_code=201)
def api_create_phase(
    project_id: int,
    data: PhaseCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_auth),
) -> PhaseRead:
    return PhaseRead.model_validate(create_phase(db, project_id, data, current_user.id))


@router.put("/{project_id}/phases/{phase_id}", response_model=PhaseRead)
def api_update_phase(
    project_id: int,
    phase_id: int,
    data: PhaseUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_auth),
) -> PhaseRead:
    phase = update_phase(db, project_id, phase_id, data, current_user.id)
    return PhaseRead.model_validate(phase)


@router.delete("/{project_id}/phases/{phase_id}", status_code=204)
def api_delete_phase(
    project_id: int,
    phase_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_auth),
) -> None:
    delete_phase(db, project_id, phase_id, current_user.id)
