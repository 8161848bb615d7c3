"""Team and membership API routes.

Authorization failures raised by the services are translated to HTTP by the
app-level handler in turma.main.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from turma.api.deps import get_db, require_auth
from turma.models.user import User
from turma.schemas.team import (
    TeamCreate,
    TeamDetail,
    TeamMemberCreate,
    TeamMemberRead,
    TeamMemberUpdate,
    TeamRead,
    TeamUpdate,
)
from turma.services.authorization import MembershipConflictError
from turma.services.team_service import (
    add_team_member,
    create_team,
    delete_team,
    get_team,
    list_members,
    list_teams,
    remove_team_member,
    update_team,
    update_team_member,
)

router = APIRouter()


@router.post("", response_model=TeamDetail, status_code=201)
def api_create_team(
    data: TeamCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_auth),
) -> TeamDetail:
    """Create a team; the caller becomes its admin."""
    team = create_team(db, data, current_user.id)
    return TeamDetail.model_validate(team)


@router.get("", response_model=list[TeamRead])
def api_list_teams(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_auth),
) -> list[TeamRead]:
    return [TeamRead.model_validate(t) for t in list_teams(db, current_user.id)]


@router.get("/{team_id}", response_model=TeamDetail)
def api_get_team(
    team_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_auth),
) -> TeamDetail:
    return TeamDetail.model_validate(get_team(db, team_id, current_user.id))


@router.put("/{team_id}", response_model=TeamRead)
def api_update_team(
    team_id: int,
    data: TeamUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_auth),
) -> TeamRead:
    return TeamRead.model_validate(update_team(db, team_id, data, current_user.id))


@router.delete("/{team_id}", status_code=204)
def api_delete_team(
    team_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_auth),
) -> None:
    delete_team(db, team_id, current_user.id)


@router.get("/{team_id}/members", response_model=list[TeamMemberRead])
def api_list_members(
    team_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_auth),
) -> list[TeamMemberRead]:
    return [TeamMemberRead.model_validate(m) for m in list_members(db, team_id, current_user.id)]


@router.post("/{team_id}/members", response_model=TeamMemberRead, status_code=201)
def api_add_member(
    team_id: int,
    data: TeamMemberCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_auth),
) -> TeamMemberRead:
    """Add a user to the team (admins only)."""
    try:
        membership = add_team_member(db, team_id, current_user.id, data.user_id, data.role)
    except MembershipConflictError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    return TeamMemberRead.model_validate(membership)


@router.put("/{team_id}/members/{membership_id}", response_model=TeamMemberRead)
def api_update_member(
    team_id: int,
    membership_id: int,
    data: TeamMemberUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_auth),
) -> TeamMemberRead:
    """Change a member's role (admins only; the last admin cannot be demoted)."""
    membership = update_team_member(db, team_id, current_user.id, membership_id, data.role)
    return TeamMemberRead.model_validate(membership)


@router.delete("/{team_id}/members/{user_id}", status_code=204)
def api_remove_member(
    team_id: int,
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_auth),
) -> None:
    """Remove a member. Members may leave; admins may remove others."""
    remove_team_member(db, team_id, current_user.id, user_id)
