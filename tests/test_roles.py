"""Role policy tests: decide(), parse_role() and the canonical role sets."""

from __future__ import annotations

import pytest

from turma.services.authorization import (
    ADMIN_ONLY,
    ADMIN_OR_MEMBER,
    ANY_MEMBER,
    Decision,
    DenyReason,
    InvalidRoleError,
    Role,
    decide,
    parse_role,
)


class TestDecide:
    @pytest.mark.parametrize("role", ["admin", "member", "guest"])
    def test_any_member_allows_every_role(self, role):
        assert decide(ANY_MEMBER, role).allowed is True

    def test_admin_or_member_denies_guest(self):
        decision = decide(ADMIN_OR_MEMBER, Role.GUEST)
        assert decision.allowed is False
        assert decision.reason == DenyReason.FORBIDDEN

    @pytest.mark.parametrize("role", [Role.MEMBER, Role.GUEST])
    def test_admin_only_denies_non_admins(self, role):
        assert decide(ADMIN_ONLY, role).reason == DenyReason.FORBIDDEN

    def test_admin_only_allows_admin(self):
        assert decide(ADMIN_ONLY, "admin").allowed is True

    def test_absent_role_is_denied_not_defaulted(self):
        """No role never falls back to guest."""
        assert decide(ANY_MEMBER, None).allowed is False

    def test_unknown_role_is_denied(self):
        assert decide(ANY_MEMBER, "owner").allowed is False

    def test_empty_required_set_denies_everyone(self):
        assert decide(set(), Role.ADMIN).allowed is False

    def test_accepts_plain_strings_in_required_set(self):
        assert decide({"admin", "member"}, Role.MEMBER).allowed is True

    def test_denial_detail_lists_required_roles(self):
        decision = decide(ADMIN_OR_MEMBER, Role.GUEST)
        assert "admin, member" in decision.detail

    def test_is_pure(self):
        assert decide(ADMIN_ONLY, Role.MEMBER) == decide(ADMIN_ONLY, Role.MEMBER)


class TestCanonicalSets:
    def test_admin_only_is_subset_of_admin_or_member(self):
        assert ADMIN_ONLY < ADMIN_OR_MEMBER < ANY_MEMBER

    def test_any_member_covers_all_roles(self):
        assert ANY_MEMBER == set(Role)


class TestParseRole:
    @pytest.mark.parametrize("value", ["admin", "member", "guest"])
    def test_known_roles(self, value):
        assert parse_role(value) == Role(value)

    def test_role_passthrough(self):
        assert parse_role(Role.GUEST) is Role.GUEST

    @pytest.mark.parametrize("value", ["Admin", "owner", "", None])
    def test_unknown_roles_raise(self, value):
        with pytest.raises(InvalidRoleError) as exc_info:
            parse_role(value)
        assert exc_info.value.reason == DenyReason.INVALID_ROLE


class TestDecision:
    def test_allow_is_truthy(self):
        assert bool(Decision.allow()) is True

    def test_deny_is_falsy(self):
        assert bool(Decision.deny(DenyReason.FORBIDDEN, "no")) is False

    def test_enforce_on_allow_returns_none(self):
        assert Decision.allow().enforce() is None

    def test_enforce_raises_typed_error(self):
        from turma.services.authorization import LastAdminError

        with pytest.raises(LastAdminError) as exc_info:
            Decision.deny(DenyReason.LAST_ADMIN, "last one").enforce()
        assert exc_info.value.detail == "last one"

    def test_denial_without_reason_is_rejected(self):
        with pytest.raises(ValueError):
            Decision(allowed=False)
