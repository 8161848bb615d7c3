"""/health reports the app, its version and database reachability."""

from __future__ import annotations

from unittest.mock import patch

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from turma import __version__


def test_health_against_sqlite_engine(client_with_db: TestClient) -> None:
    response = client_with_db.get("/health")
    assert response.status_code == 200
    assert response.json() == {
        "app": "Turma",
        "version": __version__,
        "status": "ok",
        "database": "connected",
    }


def test_health_needs_no_auth(client: TestClient) -> None:
    response = client.get("/health", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 200
    assert response.json()["database"] == "connected"


def test_health_is_503_when_database_refuses(client: TestClient) -> None:
    refused = OperationalError("SELECT 1", {}, Exception("connection refused"))
    with patch("turma.main.check_db_connection", side_effect=refused):
        response = client.get("/health")
    assert response.status_code == 503
    data = response.json()
    assert data["status"] == "unhealthy"
    assert data["database"] == "disconnected"
    assert data["app"] == "Turma"
