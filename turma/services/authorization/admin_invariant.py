"""Last-admin protection for role changes and removals.

A team must keep at least one admin, except when the departing admin removes
themselves. These checks must run inside ``store.transaction(team_id)``
together with the write they guard.
"""

from __future__ import annotations

from turma.services.authorization.decision import ALLOW, Decision, DenyReason
from turma.services.authorization.roles import Role, coerce_role
from turma.services.authorization.store import MembershipRecord, MembershipStore

LAST_ADMIN_DETAIL = "Cannot remove the last admin of the team"


def check_role_change(
    store: MembershipStore,
    team_id: int,
    target: MembershipRecord,
    new_role: Role | str,
) -> Decision:
    """Deny demoting the team's only admin."""
    role = coerce_role(new_role)
    if role is None:
        return Decision.deny(DenyReason.INVALID_ROLE, f"Invalid role: {new_role!r}")
    if coerce_role(target.role) == Role.ADMIN and role != Role.ADMIN:
        if store.count_admins(team_id) <= 1:
            return Decision.deny(DenyReason.LAST_ADMIN, LAST_ADMIN_DETAIL)
    return ALLOW


def check_removal(
    store: MembershipStore,
    team_id: int,
    target: MembershipRecord,
    acting_user_id: int | None,
) -> Decision:
    """Decide whether acting_user_id may remove target from the team.

    Self-removal is always allowed, even for the sole admin. Removing someone
    else requires admin, and may not remove the last admin.
    """
    if acting_user_id is None:
        return Decision.deny(DenyReason.NOT_AUTHENTICATED, "Authentication required")
    if target.user_id == acting_user_id:
        return ALLOW
    actor = store.find_membership(team_id, acting_user_id)
    if actor is None or coerce_role(actor.role) != Role.ADMIN:
        return Decision.deny(DenyReason.FORBIDDEN, "Only team admins can remove other members")
    if coerce_role(target.role) == Role.ADMIN and store.count_admins(team_id) <= 1:
        return Decision.deny(DenyReason.LAST_ADMIN, LAST_ADMIN_DETAIL)
    return ALLOW
