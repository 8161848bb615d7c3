"""Membership store: the persistence surface used by the authorization core.

The core only talks to the ``MembershipStore`` protocol. ``SqlMembershipStore``
implements it over a SQLAlchemy session; its ``transaction(team_id)`` locks the
team row so that the guard read, the admin count and the write happen as one
unit per team.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import ContextManager, Protocol

from sqlalchemy import func
from sqlalchemy.orm import Session

from turma.models.team import Team
from turma.models.team_member import TeamMember
from turma.models.user import User
from turma.services.authorization.roles import Role

logger = logging.getLogger(__name__)


class MembershipRecord(Protocol):
    id: int
    team_id: int
    user_id: int
    role: str


class MembershipStore(Protocol):
    def team_exists(self, team_id: int) -> bool: ...

    def user_exists(self, user_id: int) -> bool: ...

    def find_membership(self, team_id: int, user_id: int) -> MembershipRecord | None: ...

    def get_membership(self, membership_id: int) -> MembershipRecord | None: ...

    def count_admins(self, team_id: int) -> int: ...

    def add_membership(self, team_id: int, user_id: int, role: Role) -> MembershipRecord: ...

    def update_role(self, membership_id: int, role: Role) -> MembershipRecord: ...

    def delete_membership(self, membership_id: int) -> None: ...

    def transaction(self, team_id: int) -> ContextManager[None]: ...


class SqlMembershipStore:
    """MembershipStore backed by the team_members table."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def team_exists(self, team_id: int) -> bool:
        return self.db.query(Team.id).filter(Team.id == team_id).first() is not None

    def user_exists(self, user_id: int) -> bool:
        return self.db.query(User.id).filter(User.id == user_id).first() is not None

    def find_membership(self, team_id: int, user_id: int) -> TeamMember | None:
        return (
            self.db.query(TeamMember)
            .filter(TeamMember.team_id == team_id, TeamMember.user_id == user_id)
            .first()
        )

    def get_membership(self, membership_id: int) -> TeamMember | None:
        return self.db.get(TeamMember, membership_id)

    def count_admins(self, team_id: int) -> int:
        return (
            self.db.query(func.count(TeamMember.id))
            .filter(TeamMember.team_id == team_id, TeamMember.role == Role.ADMIN.value)
            .scalar()
            or 0
        )

    def add_membership(self, team_id: int, user_id: int, role: Role) -> TeamMember:
        membership = TeamMember(team_id=team_id, user_id=user_id, role=Role(role).value)
        self.db.add(membership)
        self.db.flush()
        return membership

    def update_role(self, membership_id: int, role: Role) -> TeamMember:
        membership = self.db.get(TeamMember, membership_id)
        membership.role = Role(role).value
        self.db.flush()
        return membership

    def delete_membership(self, membership_id: int) -> None:
        membership = self.db.get(TeamMember, membership_id)
        if membership is not None:
            self.db.delete(membership)
            self.db.flush()

    @contextmanager
    def transaction(self, team_id: int) -> Iterator[None]:
        """Serialize membership mutations for one team; commit or roll back as a unit.

        ``SELECT ... FOR UPDATE`` on the team row blocks other writers of the
        same team until commit. SQLite ignores the clause and serializes all
        writers instead.
        """
        try:
            self.db.query(Team.id).filter(Team.id == team_id).with_for_update().first()
            yield
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
