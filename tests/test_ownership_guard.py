"""Resource ownership guard tests."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from tests.fakes import InMemoryMembershipStore
from turma.services.authorization import ADMIN_ONLY, DenyReason, authorize_by_ownership

TEAM = 3


@pytest.fixture
def store() -> InMemoryMembershipStore:
    s = InMemoryMembershipStore()
    s.seed(TEAM, 1, "admin")
    s.seed(TEAM, 2, "member")
    return s


def _resource(owner_id: int) -> SimpleNamespace:
    return SimpleNamespace(owner_id=owner_id)


def test_owner_is_allowed() -> None:
    assert authorize_by_ownership(_resource(5), 5).allowed is True


def test_non_owner_without_fallback_is_forbidden() -> None:
    decision = authorize_by_ownership(_resource(5), 6)
    assert decision.reason == DenyReason.FORBIDDEN


def test_missing_resource_is_not_found_before_ownership() -> None:
    decision = authorize_by_ownership(None, 5)
    assert decision.reason == DenyReason.NOT_FOUND


def test_missing_user_is_not_authenticated() -> None:
    decision = authorize_by_ownership(_resource(5), None)
    assert decision.reason == DenyReason.NOT_AUTHENTICATED


def test_fallback_role_allows_team_admin(store) -> None:
    decision = authorize_by_ownership(
        _resource(2), 1, store=store, fallback_roles=ADMIN_ONLY, team_id=TEAM
    )
    assert decision.allowed is True


def test_fallback_role_rejects_non_admin(store) -> None:
    store.seed(TEAM, 9, "member")
    decision = authorize_by_ownership(
        _resource(2), 9, store=store, fallback_roles=ADMIN_ONLY, team_id=TEAM
    )
    assert decision.reason == DenyReason.FORBIDDEN


def test_fallback_for_outsider_is_forbidden(store) -> None:
    """Membership denial inside the fallback does not leak as NOT_FOUND."""
    decision = authorize_by_ownership(
        _resource(2), 42, store=store, fallback_roles=ADMIN_ONLY, team_id=TEAM
    )
    assert decision.reason == DenyReason.FORBIDDEN


def test_owner_allowed_without_consulting_store(store) -> None:
    decision = authorize_by_ownership(
        _resource(2), 2, store=store, fallback_roles=ADMIN_ONLY, team_id=999
    )
    assert decision.allowed is True


def test_fallback_ignored_without_team(store) -> None:
    decision = authorize_by_ownership(_resource(2), 1, store=store, fallback_roles=ADMIN_ONLY)
    assert decision.reason == DenyReason.FORBIDDEN
