"""Notification service and API tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from turma.models import Notification, Task
from turma.services.notification_service import (
    create_notifications,
    notify_task_updated,
    notify_tasks_due_soon,
)


def _seed(db: Session, user_id: int, types: list[str]) -> list[Notification]:
    created = []
    for t in types:
        created.extend(create_notifications(db, [user_id], t, f"{t} happened"))
    return created


class TestNotificationApi:
    def test_list_with_counts_and_filters(
        self, client_with_db: TestClient, db: Session, make_user, auth_headers
    ):
        user, other = make_user(), make_user()
        seeded = _seed(db, user.id, ["task_assigned", "task_updated", "team_joined"])
        _seed(db, other.id, ["task_assigned"])
        seeded[0].is_read = True
        db.commit()
        headers = auth_headers(user)

        everything = client_with_db.get("/api/notifications", headers=headers).json()
        assert everything["total"] == 3
        assert everything["unread_count"] == 2
        assert all(n["user_id"] == user.id for n in everything["notifications"])

        unread = client_with_db.get("/api/notifications?unread_only=true", headers=headers).json()
        assert unread["total"] == 2

        typed = client_with_db.get(
            "/api/notifications?types=task_updated&types=team_joined", headers=headers
        ).json()
        assert {n["type"] for n in typed["notifications"]} == {"task_updated", "team_joined"}

        page = client_with_db.get("/api/notifications?limit=1&offset=1", headers=headers).json()
        assert len(page["notifications"]) == 1
        assert page["total"] == 3

    def test_mark_read_owner_only(
        self, client_with_db: TestClient, db: Session, make_user, auth_headers
    ):
        owner, other = make_user(), make_user()
        notification = _seed(db, owner.id, ["task_assigned"])[0]

        denied = client_with_db.put(
            f"/api/notifications/{notification.id}/read", headers=auth_headers(other)
        )
        assert denied.status_code == 403
        allowed = client_with_db.put(
            f"/api/notifications/{notification.id}/read", headers=auth_headers(owner)
        )
        assert allowed.status_code == 200
        assert allowed.json()["is_read"] is True

    def test_mark_missing_is_404(self, client_with_db: TestClient, make_user, auth_headers):
        response = client_with_db.put("/api/notifications/999/read", headers=auth_headers(make_user()))
        assert response.status_code == 404

    def test_mark_all_read(self, client_with_db: TestClient, db: Session, make_user, auth_headers):
        user, other = make_user(), make_user()
        _seed(db, user.id, ["task_assigned", "task_updated"])
        _seed(db, other.id, ["task_assigned"])

        response = client_with_db.put("/api/notifications/read-all", headers=auth_headers(user))
        assert response.json() == {"updated": 2}
        still_unread = db.query(Notification).filter(Notification.is_read == False).all()  # noqa: E712
        assert [n.user_id for n in still_unread] == [other.id]

    def test_delete_owner_only(self, client_with_db: TestClient, db: Session, make_user, auth_headers):
        owner, other = make_user(), make_user()
        notification_id = _seed(db, owner.id, ["team_joined"])[0].id

        assert client_with_db.delete(
            f"/api/notifications/{notification_id}", headers=auth_headers(other)
        ).status_code == 403
        assert client_with_db.delete(
            f"/api/notifications/{notification_id}", headers=auth_headers(owner)
        ).status_code == 204
        assert db.get(Notification, notification_id) is None


class TestNotifyHooks:
    def test_task_updated_skipped_when_assignee_is_creator(self, db: Session, make_user):
        user = make_user()
        task = Task(title="Self", created_by_id=user.id, assigned_to_id=user.id)
        db.add(task)
        db.commit()
        assert notify_task_updated(db, task) == []

    def test_due_soon_scan(self, db: Session, make_user):
        owner, assignee = make_user(), make_user()
        now = datetime.now(timezone.utc)
        db.add_all(
            [
                Task(title="Soon", created_by_id=owner.id, assigned_to_id=assignee.id,
                     due_date=now + timedelta(hours=3)),
                Task(title="Done", created_by_id=owner.id, assigned_to_id=assignee.id,
                     due_date=now + timedelta(hours=3), status="completed"),
                Task(title="Far", created_by_id=owner.id, assigned_to_id=assignee.id,
                     due_date=now + timedelta(days=5)),
                Task(title="Unassigned", created_by_id=owner.id, due_date=now + timedelta(hours=1)),
            ]
        )
        db.commit()

        created = notify_tasks_due_soon(db, now=now)

        assert len(created) == 1
        assert created[0].user_id == assignee.id
        assert created[0].type == "task_due_soon"
        assert "Soon" in created[0].content

    def test_create_notifications_with_no_recipients(self, db: Session):
        assert create_notifications(db, [], "team_joined", "nobody") == []
