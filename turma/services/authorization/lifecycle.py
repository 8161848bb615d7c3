"""Membership lifecycle: NonMember -> Member{role} -> Member{role'} -> Removed.

Each transition runs the membership guard, then the admin-invariant check,
then the write, all inside one ``store.transaction(team_id)``.
"""

from __future__ import annotations

import logging

from turma.services.authorization.admin_invariant import check_removal, check_role_change
from turma.services.authorization.decision import ResourceNotFoundError
from turma.services.authorization.guard import require_membership
from turma.services.authorization.roles import ADMIN_ONLY, ANY_MEMBER, Role, parse_role
from turma.services.authorization.store import MembershipRecord, MembershipStore

logger = logging.getLogger(__name__)


class MembershipConflictError(ValueError):
    """Raised when adding a user who is already a member of the team."""

    pass


def create_team_membership(
    store: MembershipStore, team_id: int, creator_id: int
) -> MembershipRecord:
    """Make the team's creator its first admin. Caller owns the transaction."""
    return store.add_membership(team_id, creator_id, Role.ADMIN)


def add_member(
    store: MembershipStore,
    team_id: int,
    acting_user_id: int | None,
    user_id: int,
    role: Role | str,
) -> MembershipRecord:
    """Add user_id to the team with role. Only admins may add members."""
    new_role = parse_role(role)
    with store.transaction(team_id):
        require_membership(store, team_id, acting_user_id, ADMIN_ONLY)
        if not store.user_exists(user_id):
            raise ResourceNotFoundError("User not found")
        if store.find_membership(team_id, user_id) is not None:
            raise MembershipConflictError("User is already a member of this team")
        membership = store.add_membership(team_id, user_id, new_role)
    logger.info(
        "member added: team=%s user=%s role=%s by=%s",
        team_id,
        user_id,
        new_role.value,
        acting_user_id,
    )
    return membership


def change_member_role(
    store: MembershipStore,
    team_id: int,
    acting_user_id: int | None,
    membership_id: int,
    new_role: Role | str,
) -> MembershipRecord:
    """Change a member's role. Only admins may do this; the last admin cannot be demoted."""
    role = parse_role(new_role)
    with store.transaction(team_id):
        require_membership(store, team_id, acting_user_id, ADMIN_ONLY)
        target = store.get_membership(membership_id)
        if target is None or target.team_id != team_id:
            raise ResourceNotFoundError("Team member not found")
        check_role_change(store, team_id, target, role).enforce()
        membership = store.update_role(target.id, role)
    logger.info(
        "member role changed: team=%s membership=%s role=%s by=%s",
        team_id,
        membership_id,
        role.value,
        acting_user_id,
    )
    return membership


def remove_member(
    store: MembershipStore,
    team_id: int,
    acting_user_id: int | None,
    user_id: int,
) -> None:
    """Remove user_id from the team. Members may remove themselves; admins may remove others."""
    with store.transaction(team_id):
        require_membership(store, team_id, acting_user_id, ANY_MEMBER)
        target = store.find_membership(team_id, user_id)
        if target is None:
            raise ResourceNotFoundError("User is not a member of this team")
        check_removal(store, team_id, target, acting_user_id).enforce()
        store.delete_membership(target.id)
    logger.info("member removed: team=%s user=%s by=%s", team_id, user_id, acting_user_id)
