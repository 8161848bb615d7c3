"""Membership guard and resource ownership guard."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any, Protocol

from turma.services.authorization.decision import ALLOW, Decision, DenyReason
from turma.services.authorization.roles import Role, decide
from turma.services.authorization.store import MembershipRecord, MembershipStore

logger = logging.getLogger(__name__)


class OwnedResource(Protocol):
    owner_id: Any


def _evaluate(
    store: MembershipStore,
    team_id: int,
    user_id: int | None,
    required_roles: Iterable[Role | str],
) -> tuple[Decision, MembershipRecord | None]:
    if user_id is None:
        return Decision.deny(DenyReason.NOT_AUTHENTICATED, "Authentication required"), None
    if not store.team_exists(team_id):
        return Decision.deny(DenyReason.NOT_FOUND, "Team not found"), None
    membership = store.find_membership(team_id, user_id)
    if membership is None:
        return Decision.deny(DenyReason.NOT_FOUND, "You are not a member of this team"), None
    return decide(required_roles, membership.role), membership


def authorize(
    store: MembershipStore,
    team_id: int,
    user_id: int | None,
    required_roles: Iterable[Role | str],
) -> Decision:
    """Decide whether user_id holds one of required_roles in team_id.

    Read-only. "Not a member" and "member with the wrong role" are reported as
    NOT_FOUND and FORBIDDEN respectively.
    """
    decision, _ = _evaluate(store, team_id, user_id, required_roles)
    if not decision:
        logger.info(
            "authorize denied: team=%s user=%s reason=%s",
            team_id,
            user_id,
            decision.reason.value,
        )
    return decision


def require_membership(
    store: MembershipStore,
    team_id: int,
    user_id: int | None,
    required_roles: Iterable[Role | str],
) -> MembershipRecord:
    """Like authorize, but raise on denial and return the acting user's membership."""
    decision, membership = _evaluate(store, team_id, user_id, required_roles)
    if not decision:
        logger.info(
            "authorize denied: team=%s user=%s reason=%s",
            team_id,
            user_id,
            decision.reason.value,
        )
    decision.enforce()
    return membership


def authorize_by_ownership(
    resource: OwnedResource | None,
    user_id: int | None,
    *,
    store: MembershipStore | None = None,
    fallback_roles: Iterable[Role | str] | None = None,
    team_id: int | None = None,
) -> Decision:
    """Allow the resource owner; otherwise fall back to a team role check if given.

    A missing resource is NOT_FOUND before ownership is considered.
    """
    if user_id is None:
        return Decision.deny(DenyReason.NOT_AUTHENTICATED, "Authentication required")
    if resource is None:
        return Decision.deny(DenyReason.NOT_FOUND, "Resource not found")
    if resource.owner_id == user_id:
        return ALLOW
    if fallback_roles is not None and store is not None and team_id is not None:
        if authorize(store, team_id, user_id, fallback_roles):
            return ALLOW
    return Decision.deny(
        DenyReason.FORBIDDEN, "You do not have permission to access this resource"
    )
