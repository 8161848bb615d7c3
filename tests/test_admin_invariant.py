"""Admin-invariant enforcer tests (check_role_change / check_removal)."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from tests.fakes import FakeMembership, InMemoryMembershipStore
from turma.services.authorization import DenyReason, Role, check_removal, check_role_change

TEAM = 7


@pytest.fixture
def store() -> InMemoryMembershipStore:
    return InMemoryMembershipStore()


class TestCheckRoleChange:
    def test_demoting_sole_admin_is_last_admin(self, store):
        admin = store.seed(TEAM, 1, "admin")
        store.seed(TEAM, 2, "member")
        decision = check_role_change(store, TEAM, admin, "member")
        assert decision.reason == DenyReason.LAST_ADMIN

    def test_demoting_one_of_two_admins_is_allowed(self, store):
        admin = store.seed(TEAM, 1, "admin")
        store.seed(TEAM, 2, "admin")
        assert check_role_change(store, TEAM, admin, Role.GUEST).allowed is True

    def test_keeping_admin_role_skips_count(self, store):
        admin = store.seed(TEAM, 1, "admin")
        assert check_role_change(store, TEAM, admin, "admin").allowed is True
        assert store.count_admins_calls == 0

    def test_promoting_member_is_allowed(self, store):
        store.seed(TEAM, 1, "admin")
        member = store.seed(TEAM, 2, "member")
        assert check_role_change(store, TEAM, member, "admin").allowed is True

    def test_changing_non_admin_skips_count(self, store):
        store.seed(TEAM, 1, "admin")
        guest = store.seed(TEAM, 2, "guest")
        assert check_role_change(store, TEAM, guest, "member").allowed is True
        assert store.count_admins_calls == 0

    def test_invalid_role(self, store):
        admin = store.seed(TEAM, 1, "admin")
        decision = check_role_change(store, TEAM, admin, "superuser")
        assert decision.reason == DenyReason.INVALID_ROLE

    def test_scenario_adding_second_admin_unblocks_demotion(self, store):
        u1 = store.seed(TEAM, 1, "admin")
        store.seed(TEAM, 2, "member")
        assert check_role_change(store, TEAM, u1, "member").reason == DenyReason.LAST_ADMIN
        store.seed(TEAM, 3, "admin")
        assert check_role_change(store, TEAM, u1, "member").allowed is True


class TestCheckRemoval:
    def test_sole_admin_may_remove_themselves(self, store):
        admin = store.seed(TEAM, 1, "admin")
        store.seed(TEAM, 2, "member")
        assert check_removal(store, TEAM, admin, acting_user_id=1).allowed is True

    def test_member_may_remove_themselves(self, store):
        store.seed(TEAM, 1, "admin")
        member = store.seed(TEAM, 2, "member")
        assert check_removal(store, TEAM, member, acting_user_id=2).allowed is True

    def test_non_admin_removing_other_is_forbidden(self, store):
        store.seed(TEAM, 1, "admin")
        store.seed(TEAM, 2, "member")
        guest = store.seed(TEAM, 3, "guest")
        decision = check_removal(store, TEAM, guest, acting_user_id=2)
        assert decision.reason == DenyReason.FORBIDDEN

    def test_admin_removing_member_is_allowed(self, store):
        store.seed(TEAM, 1, "admin")
        member = store.seed(TEAM, 2, "member")
        assert check_removal(store, TEAM, member, acting_user_id=1).allowed is True

    def test_admin_removing_other_admin_with_two_admins(self, store):
        store.seed(TEAM, 1, "admin")
        other = store.seed(TEAM, 2, "admin")
        assert check_removal(store, TEAM, other, acting_user_id=1).allowed is True

    def test_admin_removing_sole_admin_is_last_admin(self):
        """An admin cannot remove another admin when the store counts only one admin."""
        store = MagicMock()
        store.find_membership.return_value = FakeMembership(1, TEAM, 1, "admin")
        store.count_admins.return_value = 1
        target = FakeMembership(2, TEAM, 2, "admin")

        decision = check_removal(store, TEAM, target, acting_user_id=1)

        assert decision.reason == DenyReason.LAST_ADMIN
        store.count_admins.assert_called_once_with(TEAM)

    def test_missing_actor_is_not_authenticated(self, store):
        member = store.seed(TEAM, 2, "member")
        decision = check_removal(store, TEAM, member, acting_user_id=None)
        assert decision.reason == DenyReason.NOT_AUTHENTICATED
