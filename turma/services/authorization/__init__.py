"""Team authorization and membership core.

Role policy, membership guard, admin-invariant enforcer and ownership guard,
shared by every team-scoped resource.
"""

from turma.services.authorization.admin_invariant import check_removal, check_role_change
from turma.services.authorization.decision import (
    ALLOW,
    AuthorizationError,
    Decision,
    DenyReason,
    ForbiddenError,
    InvalidRoleError,
    LastAdminError,
    NotAuthenticatedError,
    ResourceNotFoundError,
)
from turma.services.authorization.guard import (
    authorize,
    authorize_by_ownership,
    require_membership,
)
from turma.services.authorization.lifecycle import (
    MembershipConflictError,
    add_member,
    change_member_role,
    create_team_membership,
    remove_member,
)
from turma.services.authorization.roles import (
    ADMIN_ONLY,
    ADMIN_OR_MEMBER,
    ANY_MEMBER,
    Role,
    coerce_role,
    decide,
    parse_role,
)
from turma.services.authorization.store import MembershipStore, SqlMembershipStore

__all__ = [
    "ADMIN_ONLY",
    "ADMIN_OR_MEMBER",
    "ALLOW",
    "ANY_MEMBER",
    "AuthorizationError",
    "Decision",
    "DenyReason",
    "ForbiddenError",
    "InvalidRoleError",
    "LastAdminError",
    "MembershipConflictError",
    "MembershipStore",
    "NotAuthenticatedError",
    "ResourceNotFoundError",
    "Role",
    "SqlMembershipStore",
    "add_member",
    "authorize",
    "authorize_by_ownership",
    "change_member_role",
    "check_removal",
    "check_role_change",
    "coerce_role",
    "create_team_membership",
    "decide",
    "parse_role",
    "remove_member",
    "require_membership",
]
