"""Quotation tests: totals, numbering and owner-only access."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from turma.schemas.quotation import QuotationItemInput
from turma.services.quotation_service import compute_totals, next_quotation_number

PAYLOAD = {
    "title": "Website build",
    "issue_date": "2026-03-01",
    "client": {"name": "Acme Ltda", "email": "buyer@acme.example"},
    "items": [
        {"description": "Design", "quantity": "2", "unit_price": "150.00"},
        {"description": "Hosting", "quantity": "1", "unit_price": "99.99"},
    ],
    "tax_rate": "10",
    "discount_rate": "5",
}


class TestComputeTotals:
    def test_percentages_of_subtotal(self):
        items = [
            QuotationItemInput(description="A", quantity=Decimal("2"), unit_price=Decimal("150")),
            QuotationItemInput(description="B", quantity=Decimal("1"), unit_price=Decimal("99.99")),
        ]
        lines, subtotal, tax, discount, total = compute_totals(items, Decimal("10"), Decimal("5"))
        assert lines == [Decimal("300.00"), Decimal("99.99")]
        assert subtotal == Decimal("399.99")
        assert tax == Decimal("40.00")
        assert discount == Decimal("20.00")
        assert total == Decimal("419.99")

    def test_zero_rates(self):
        items = [QuotationItemInput(description="A", quantity=Decimal("3"), unit_price=Decimal("1.10"))]
        _, subtotal, tax, discount, total = compute_totals(items, Decimal("0"), Decimal("0"))
        assert subtotal == total == Decimal("3.30")
        assert tax == discount == Decimal("0.00")


class TestNumbering:
    def test_sequence_per_user_and_day(self, client_with_db: TestClient, make_user, auth_headers):
        user, other = make_user(), make_user()
        first = client_with_db.post("/api/quotations", json=PAYLOAD, headers=auth_headers(user))
        second = client_with_db.post("/api/quotations", json=PAYLOAD, headers=auth_headers(user))
        others = client_with_db.post("/api/quotations", json=PAYLOAD, headers=auth_headers(other))
        assert first.json()["number"] == "Q-20260301-0001"
        assert second.json()["number"] == "Q-20260301-0002"
        assert others.json()["number"] == "Q-20260301-0001"

    def test_first_number_of_day(self, db: Session, make_user):
        user = make_user()
        assert next_quotation_number(db, user.id, date(2026, 1, 5)) == "Q-20260105-0001"


class TestQuotationApi:
    def test_create_computes_totals(self, client_with_db: TestClient, make_user, auth_headers):
        response = client_with_db.post("/api/quotations", json=PAYLOAD, headers=auth_headers(make_user()))
        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "draft"
        assert data["client"]["name"] == "Acme Ltda"
        assert Decimal(data["subtotal"]) == Decimal("399.99")
        assert Decimal(data["total"]) == Decimal("419.99")
        assert [i["description"] for i in data["items"]] == ["Design", "Hosting"]

    def test_requires_at_least_one_item(self, client_with_db: TestClient, make_user, auth_headers):
        response = client_with_db.post(
            "/api/quotations", json={**PAYLOAD, "items": []}, headers=auth_headers(make_user())
        )
        assert response.status_code == 422

    def test_owner_only(self, client_with_db: TestClient, make_user, auth_headers):
        owner, other = make_user(), make_user()
        quotation_id = client_with_db.post(
            "/api/quotations", json=PAYLOAD, headers=auth_headers(owner)
        ).json()["id"]

        assert client_with_db.get(f"/api/quotations/{quotation_id}", headers=auth_headers(other)).status_code == 403
        assert client_with_db.delete(f"/api/quotations/{quotation_id}", headers=auth_headers(other)).status_code == 403
        assert client_with_db.get(f"/api/quotations/{quotation_id}", headers=auth_headers(owner)).status_code == 200
        assert client_with_db.get("/api/quotations", headers=auth_headers(other)).json() == []

    def test_missing_is_404(self, client_with_db: TestClient, make_user, auth_headers):
        response = client_with_db.get("/api/quotations/999", headers=auth_headers(make_user()))
        assert response.status_code == 404

    def test_update_rates_recomputes_totals(self, client_with_db: TestClient, make_user, auth_headers):
        headers = auth_headers(make_user())
        quotation_id = client_with_db.post("/api/quotations", json=PAYLOAD, headers=headers).json()["id"]

        response = client_with_db.put(
            f"/api/quotations/{quotation_id}",
            json={"tax_rate": "0", "discount_rate": "0", "status": "sent"},
            headers=headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "sent"
        assert Decimal(data["total"]) == Decimal("399.99")
        assert len(data["items"]) == 2

    def test_update_items_replaces_lines(self, client_with_db: TestClient, make_user, auth_headers):
        headers = auth_headers(make_user())
        quotation_id = client_with_db.post("/api/quotations", json=PAYLOAD, headers=headers).json()["id"]

        response = client_with_db.put(
            f"/api/quotations/{quotation_id}",
            json={"items": [{"description": "Support", "quantity": "4", "unit_price": "25"}]},
            headers=headers,
        )
        data = response.json()
        assert [i["description"] for i in data["items"]] == ["Support"]
        assert Decimal(data["subtotal"]) == Decimal("100.00")
        assert Decimal(data["total"]) == Decimal("105.00")

    def test_filter_by_status(self, client_with_db: TestClient, make_user, auth_headers):
        headers = auth_headers(make_user())
        client_with_db.post("/api/quotations", json=PAYLOAD, headers=headers)
        client_with_db.post("/api/quotations", json={**PAYLOAD, "status": "sent"}, headers=headers)
        sent = client_with_db.get("/api/quotations?status=sent", headers=headers).json()
        assert [q["status"] for q in sent] == ["sent"]
