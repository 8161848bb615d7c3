"""Team roles and the role policy.

Roles are not structurally ordered: each operation declares the exact set of
roles it accepts, built from the canonical sets below.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from turma.services.authorization.decision import (
    ALLOW,
    Decision,
    DenyReason,
    InvalidRoleError,
)


class Role(str, Enum):
    ADMIN = "admin"
    MEMBER = "member"
    GUEST = "guest"


ANY_MEMBER: frozenset[Role] = frozenset({Role.ADMIN, Role.MEMBER, Role.GUEST})
ADMIN_OR_MEMBER: frozenset[Role] = frozenset({Role.ADMIN, Role.MEMBER})
ADMIN_ONLY: frozenset[Role] = frozenset({Role.ADMIN})


def coerce_role(value: Role | str | None) -> Role | None:
    """Return the Role for value, or None when absent or unrecognized."""
    if value is None:
        return None
    if isinstance(value, Role):
        return value
    try:
        return Role(value)
    except ValueError:
        return None


def parse_role(value: Role | str | None) -> Role:
    """Return the Role for value; raise InvalidRoleError when unrecognized."""
    role = coerce_role(value)
    if role is None:
        raise InvalidRoleError(f"Invalid role: {value!r}. Expected one of: admin, member, guest")
    return role


def describe_roles(roles: Iterable[Role]) -> str:
    return ", ".join(sorted(r.value for r in roles))


def decide(required_roles: Iterable[Role | str], actual_role: Role | str | None) -> Decision:
    """Allow iff actual_role is one of required_roles.

    Pure function. An absent or unknown role is denied, never treated as a
    default role.
    """
    required = {r for r in (coerce_role(v) for v in required_roles) if r is not None}
    role = coerce_role(actual_role)
    if role is not None and role in required:
        return ALLOW
    return Decision.deny(
        DenyReason.FORBIDDEN,
        f"This action requires one of these roles: {describe_roles(required)}",
    )
