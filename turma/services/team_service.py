"""Team service: team CRUD plus the membership lifecycle behind the team endpoints."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from turma.models import Team, TeamMember, User
from turma.schemas.team import TeamCreate, TeamUpdate
from turma.services.authorization import (
    ADMIN_ONLY,
    ANY_MEMBER,
    ResourceNotFoundError,
    SqlMembershipStore,
    add_member,
    change_member_role,
    create_team_membership,
    remove_member,
    require_membership,
)
from turma.services.notification_service import notify_team_joined, notify_team_left

logger = logging.getLogger(__name__)

# NOT NULL columns; an explicit null in a partial update leaves them unchanged
_REQUIRED_FIELDS = ("name",)


def _load_team(db: Session, team_id: int) -> Team:
    team = db.get(Team, team_id)
    if team is None:
        raise ResourceNotFoundError("Team not found")
    return team


def create_team(db: Session, data: TeamCreate, creator_id: int) -> Team:
    """Create a team and make creator_id its admin in one commit."""
    team = Team(name=data.name, description=data.description)
    db.add(team)
    db.flush()
    create_team_membership(SqlMembershipStore(db), team.id, creator_id)
    db.commit()
    db.refresh(team)
    logger.info("team created: id=%s creator=%s", team.id, creator_id)
    return team


def list_teams(db: Session, user_id: int) -> list[Team]:
    """Teams the user belongs to, most recently joined first."""
    return (
        db.query(Team)
        .join(TeamMember, TeamMember.team_id == Team.id)
        .filter(TeamMember.user_id == user_id)
        .order_by(TeamMember.joined_at.desc(), Team.id.desc())
        .all()
    )


def get_team(db: Session, team_id: int, user_id: int) -> Team:
    require_membership(SqlMembershipStore(db), team_id, user_id, ANY_MEMBER)
    return _load_team(db, team_id)


def update_team(db: Session, team_id: int, data: TeamUpdate, user_id: int) -> Team:
    require_membership(SqlMembershipStore(db), team_id, user_id, ADMIN_ONLY)
    team = _load_team(db, team_id)
    for field, value in data.model_dump(exclude_unset=True).items():
        if value is None and field in _REQUIRED_FIELDS:
            continue
        setattr(team, field, value)
    db.commit()
    db.refresh(team)
    return team


def delete_team(db: Session, team_id: int, user_id: int) -> None:
    """Delete a team with its memberships, projects and channels. Admins only."""
    require_membership(SqlMembershipStore(db), team_id, user_id, ADMIN_ONLY)
    team = _load_team(db, team_id)
    db.delete(team)
    db.commit()
    logger.info("team deleted: id=%s by=%s", team_id, user_id)


def list_members(db: Session, team_id: int, user_id: int) -> list[TeamMember]:
    require_membership(SqlMembershipStore(db), team_id, user_id, ANY_MEMBER)
    return (
        db.query(TeamMember)
        .filter(TeamMember.team_id == team_id)
        .order_by(TeamMember.joined_at, TeamMember.id)
        .all()
    )


def add_team_member(
    db: Session, team_id: int, acting_user_id: int, user_id: int, role: str
) -> TeamMember:
    """Add a member (admins only) and notify the team.

    Raises MembershipConflictError if the user already belongs to the team.
    """
    membership = add_member(SqlMembershipStore(db), team_id, acting_user_id, user_id, role)
    notify_team_joined(db, membership.team, membership.user, acting_user_id)
    db.refresh(membership)
    return membership


def update_team_member(
    db: Session, team_id: int, acting_user_id: int, membership_id: int, role: str
) -> TeamMember:
    membership = change_member_role(
        SqlMembershipStore(db), team_id, acting_user_id, membership_id, role
    )
    db.refresh(membership)
    return membership


def remove_team_member(db: Session, team_id: int, acting_user_id: int, user_id: int) -> None:
    """Remove a member. Anyone may leave; only admins remove others."""
    remove_member(SqlMembershipStore(db), team_id, acting_user_id, user_id)
    team = db.get(Team, team_id)
    user = db.get(User, user_id)
    if team is not None and user is not None:
        notify_team_left(db, team, user)
