"""Team and membership API tests."""

from __future__ import annotations

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from turma.models import Notification, TeamMember


def _membership_id(db: Session, team_id: int, user_id: int) -> int:
    return (
        db.query(TeamMember.id)
        .filter(TeamMember.team_id == team_id, TeamMember.user_id == user_id)
        .scalar()
    )


class TestTeamCrud:
    def test_create_team_makes_creator_admin(
        self, client_with_db: TestClient, make_user, auth_headers
    ):
        user = make_user()
        response = client_with_db.post(
            "/api/teams", json={"name": "Design"}, headers=auth_headers(user)
        )
        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Design"
        assert [(m["user_id"], m["role"]) for m in data["members"]] == [(user.id, "admin")]

    def test_create_requires_auth(self, client_with_db: TestClient):
        assert client_with_db.post("/api/teams", json={"name": "X"}).status_code == 401

    def test_list_only_my_teams(self, client_with_db: TestClient, make_user, make_team, auth_headers):
        me, other = make_user(), make_user()
        mine = make_team(me, name="Mine")
        make_team(other, name="Theirs")
        response = client_with_db.get("/api/teams", headers=auth_headers(me))
        assert response.status_code == 200
        assert [t["id"] for t in response.json()] == [mine.id]

    def test_get_team_as_guest(self, client_with_db: TestClient, make_user, make_team, auth_headers):
        admin, guest = make_user(), make_user()
        team = make_team(admin, {guest: "guest"})
        response = client_with_db.get(f"/api/teams/{team.id}", headers=auth_headers(guest))
        assert response.status_code == 200
        assert len(response.json()["members"]) == 2

    def test_get_team_as_outsider_is_404(
        self, client_with_db: TestClient, make_user, make_team, auth_headers
    ):
        admin, outsider = make_user(), make_user()
        team = make_team(admin)
        response = client_with_db.get(f"/api/teams/{team.id}", headers=auth_headers(outsider))
        assert response.status_code == 404
        assert response.json()["detail"] == "You are not a member of this team"
        assert response.json()["reason"] == "not_found"

    def test_missing_team_is_404(self, client_with_db: TestClient, make_user, auth_headers):
        response = client_with_db.get("/api/teams/999", headers=auth_headers(make_user()))
        assert response.status_code == 404
        assert response.json()["detail"] == "Team not found"

    def test_member_cannot_update_team(
        self, client_with_db: TestClient, make_user, make_team, auth_headers
    ):
        admin, member = make_user(), make_user()
        team = make_team(admin, {member: "member"})
        response = client_with_db.put(
            f"/api/teams/{team.id}", json={"name": "Renamed"}, headers=auth_headers(member)
        )
        assert response.status_code == 403

    def test_admin_updates_team(self, client_with_db: TestClient, make_user, make_team, auth_headers):
        admin = make_user()
        team = make_team(admin)
        response = client_with_db.put(
            f"/api/teams/{team.id}",
            json={"description": "All things ops"},
            headers=auth_headers(admin),
        )
        assert response.status_code == 200
        assert response.json()["description"] == "All things ops"
        assert response.json()["name"] == "Core"

    def test_null_name_keeps_existing_name(
        self, client_with_db: TestClient, make_user, make_team, auth_headers
    ):
        admin = make_user()
        team = make_team(admin)
        response = client_with_db.put(
            f"/api/teams/{team.id}",
            json={"name": None, "description": "Renamed nothing"},
            headers=auth_headers(admin),
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Core"
        assert response.json()["description"] == "Renamed nothing"

    def test_admin_deletes_team(
        self, client_with_db: TestClient, db: Session, make_user, make_team, auth_headers
    ):
        admin, member = make_user(), make_user()
        team = make_team(admin, {member: "member"})
        team_id = team.id
        response = client_with_db.delete(f"/api/teams/{team_id}", headers=auth_headers(admin))
        assert response.status_code == 204
        assert db.query(TeamMember).filter(TeamMember.team_id == team_id).count() == 0


class TestMembers:
    def test_admin_adds_member_and_notifies(
        self, client_with_db: TestClient, db: Session, make_user, make_team, auth_headers
    ):
        admin, existing, newcomer = make_user(), make_user(), make_user()
        team = make_team(admin, {existing: "member"})
        response = client_with_db.post(
            f"/api/teams/{team.id}/members",
            json={"user_id": newcomer.id, "role": "guest"},
            headers=auth_headers(admin),
        )
        assert response.status_code == 201
        assert response.json()["role"] == "guest"
        assert response.json()["user"]["id"] == newcomer.id

        joined = db.query(Notification).filter(Notification.type == "team_joined").all()
        assert sorted(n.user_id for n in joined) == sorted([newcomer.id, existing.id])

    def test_duplicate_member_is_409(
        self, client_with_db: TestClient, make_user, make_team, auth_headers
    ):
        admin, member = make_user(), make_user()
        team = make_team(admin, {member: "member"})
        response = client_with_db.post(
            f"/api/teams/{team.id}/members",
            json={"user_id": member.id},
            headers=auth_headers(admin),
        )
        assert response.status_code == 409

    def test_unknown_user_is_404(self, client_with_db: TestClient, make_user, make_team, auth_headers):
        admin = make_user()
        team = make_team(admin)
        response = client_with_db.post(
            f"/api/teams/{team.id}/members",
            json={"user_id": 999},
            headers=auth_headers(admin),
        )
        assert response.status_code == 404

    def test_invalid_role_is_422(self, client_with_db: TestClient, make_user, make_team, auth_headers):
        admin, other = make_user(), make_user()
        team = make_team(admin)
        response = client_with_db.post(
            f"/api/teams/{team.id}/members",
            json={"user_id": other.id, "role": "owner"},
            headers=auth_headers(admin),
        )
        assert response.status_code == 422
        assert response.json()["reason"] == "invalid_role"

    def test_member_cannot_add(self, client_with_db: TestClient, make_user, make_team, auth_headers):
        admin, member, other = make_user(), make_user(), make_user()
        team = make_team(admin, {member: "member"})
        response = client_with_db.post(
            f"/api/teams/{team.id}/members",
            json={"user_id": other.id},
            headers=auth_headers(member),
        )
        assert response.status_code == 403

    def test_list_members(self, client_with_db: TestClient, make_user, make_team, auth_headers):
        admin, guest = make_user(), make_user()
        team = make_team(admin, {guest: "guest"})
        response = client_with_db.get(f"/api/teams/{team.id}/members", headers=auth_headers(guest))
        assert response.status_code == 200
        assert {m["role"] for m in response.json()} == {"admin", "guest"}

    def test_demoting_last_admin_is_400(
        self, client_with_db: TestClient, db: Session, make_user, make_team, auth_headers
    ):
        admin, member = make_user(), make_user()
        team = make_team(admin, {member: "member"})
        membership_id = _membership_id(db, team.id, admin.id)
        response = client_with_db.put(
            f"/api/teams/{team.id}/members/{membership_id}",
            json={"role": "member"},
            headers=auth_headers(admin),
        )
        assert response.status_code == 400
        assert response.json()["reason"] == "last_admin"

    def test_promote_then_demote(
        self, client_with_db: TestClient, db: Session, make_user, make_team, auth_headers
    ):
        admin, member = make_user(), make_user()
        team = make_team(admin, {member: "member"})
        member_mid = _membership_id(db, team.id, member.id)
        admin_mid = _membership_id(db, team.id, admin.id)

        promoted = client_with_db.put(
            f"/api/teams/{team.id}/members/{member_mid}",
            json={"role": "admin"},
            headers=auth_headers(admin),
        )
        assert promoted.status_code == 200
        assert promoted.json()["role"] == "admin"

        demoted = client_with_db.put(
            f"/api/teams/{team.id}/members/{admin_mid}",
            json={"role": "member"},
            headers=auth_headers(member),
        )
        assert demoted.status_code == 200
        assert demoted.json()["role"] == "member"

    def test_update_member_of_other_team_is_404(
        self, client_with_db: TestClient, db: Session, make_user, make_team, auth_headers
    ):
        admin, other_admin = make_user(), make_user()
        team = make_team(admin)
        other_team = make_team(other_admin, name="Other")
        foreign_mid = _membership_id(db, other_team.id, other_admin.id)
        response = client_with_db.put(
            f"/api/teams/{team.id}/members/{foreign_mid}",
            json={"role": "guest"},
            headers=auth_headers(admin),
        )
        assert response.status_code == 404

    def test_sole_admin_can_leave(
        self, client_with_db: TestClient, db: Session, make_user, make_team, auth_headers
    ):
        admin, member = make_user(), make_user()
        team = make_team(admin, {member: "member"})
        response = client_with_db.delete(
            f"/api/teams/{team.id}/members/{admin.id}", headers=auth_headers(admin)
        )
        assert response.status_code == 204
        left = db.query(Notification).filter(Notification.type == "team_left").all()
        assert [n.user_id for n in left] == [member.id]

    def test_member_cannot_remove_other(
        self, client_with_db: TestClient, make_user, make_team, auth_headers
    ):
        admin, member, guest = make_user(), make_user(), make_user()
        team = make_team(admin, {member: "member", guest: "guest"})
        response = client_with_db.delete(
            f"/api/teams/{team.id}/members/{guest.id}", headers=auth_headers(member)
        )
        assert response.status_code == 403

    def test_admin_removes_member(
        self, client_with_db: TestClient, make_user, make_team, auth_headers
    ):
        admin, member = make_user(), make_user()
        team = make_team(admin, {member: "member"})
        response = client_with_db.delete(
            f"/api/teams/{team.id}/members/{member.id}", headers=auth_headers(admin)
        )
        assert response.status_code == 204
        after = client_with_db.get(f"/api/teams/{team.id}", headers=auth_headers(member))
        assert after.status_code == 404

