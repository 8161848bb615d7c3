"""Authorization decisions and the typed failures they raise.

Every check in this package returns a ``Decision``. Callers either inspect it
(``decision.allowed`` / ``decision.reason``) or call ``decision.enforce()`` to
turn a denial into an ``AuthorizationError``. The HTTP layer maps each
``DenyReason`` to exactly one status code.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DenyReason(str, Enum):
    """Why an action was denied."""

    NOT_AUTHENTICATED = "not_authenticated"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    LAST_ADMIN = "last_admin"
    INVALID_ROLE = "invalid_role"


class AuthorizationError(Exception):
    """Base class for denied actions. ``reason`` identifies the denial kind."""

    reason: DenyReason

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class NotAuthenticatedError(AuthorizationError):
    reason = DenyReason.NOT_AUTHENTICATED


class ResourceNotFoundError(AuthorizationError):
    reason = DenyReason.NOT_FOUND


class ForbiddenError(AuthorizationError):
    reason = DenyReason.FORBIDDEN


class LastAdminError(AuthorizationError):
    reason = DenyReason.LAST_ADMIN


class InvalidRoleError(AuthorizationError):
    reason = DenyReason.INVALID_ROLE


ERROR_BY_REASON: dict[DenyReason, type[AuthorizationError]] = {
    DenyReason.NOT_AUTHENTICATED: NotAuthenticatedError,
    DenyReason.NOT_FOUND: ResourceNotFoundError,
    DenyReason.FORBIDDEN: ForbiddenError,
    DenyReason.LAST_ADMIN: LastAdminError,
    DenyReason.INVALID_ROLE: InvalidRoleError,
}


@dataclass(frozen=True)
class Decision:
    """Result of an authorization check: Allow, or Deny with a reason."""

    allowed: bool
    reason: DenyReason | None = None
    detail: str = ""

    def __post_init__(self) -> None:
        if not self.allowed and self.reason is None:
            raise ValueError("A denied Decision requires a reason")

    @classmethod
    def allow(cls) -> Decision:
        return ALLOW

    @classmethod
    def deny(cls, reason: DenyReason, detail: str) -> Decision:
        return cls(allowed=False, reason=reason, detail=detail)

    def __bool__(self) -> bool:
        return self.allowed

    def enforce(self) -> None:
        """Raise the AuthorizationError matching this decision's reason, if denied."""
        if self.allowed:
            return
        raise ERROR_BY_REASON[self.reason](self.detail)


ALLOW = Decision(allowed=True)
