"""
Sales endpoints: cash and credit sales, listing by type, and settling credit.
"""
from datetime import datetime, timezone

import pytest


def as_utc(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def list_sales(client, headers, sale_type=None):
    params = {"type": sale_type} if sale_type else None
    return client.get("/api/sales", headers=headers, params=params).json()


@pytest.mark.unit
class TestCashSale:

    def test_sales_agent_records_cash_sale(self, client, sales_agent, agent_headers, cash_sale_body):
        response = client.post("/api/sales/cash", json=cash_sale_body, headers=agent_headers)

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["saleType"] == "Cash"
        assert data["amountPaid"] == 25000
        assert data["recordedBy"] == sales_agent.id
        assert data["date"]

    def test_manager_may_record_sales_too(self, client, manager_headers, cash_sale_body):
        response = client.post("/api/sales/cash", json=cash_sale_body, headers=manager_headers)
        assert response.status_code == 201

    def test_zero_tonnage(self, client, agent_headers, cash_sale_body):
        cash_sale_body["tonnage"] = 0
        response = client.post("/api/sales/cash", json=cash_sale_body, headers=agent_headers)

        assert response.status_code == 400
        errors = response.json()["errors"]
        assert errors == [{"field": "tonnage", "message": "Tonnage must be at least 1 kg"}]
        assert list_sales(client, agent_headers)["count"] == 0

    def test_boolean_tonnage_is_not_stored(self, client, agent_headers, cash_sale_body):
        cash_sale_body["tonnage"] = True
        response = client.post("/api/sales/cash", json=cash_sale_body, headers=agent_headers)

        assert response.status_code == 400
        assert response.json()["errors"] == [
            {"field": "tonnage", "message": "Tonnage must be a whole number"}
        ]
        assert list_sales(client, agent_headers)["count"] == 0

    def test_amount_paid_below_minimum(self, client, agent_headers, cash_sale_body):
        cash_sale_body["amountPaid"] = 9000
        response = client.post("/api/sales/cash", json=cash_sale_body, headers=agent_headers)

        assert response.status_code == 400
        assert list_sales(client, agent_headers)["count"] == 0

    def test_requires_token(self, client, cash_sale_body):
        assert client.post("/api/sales/cash", json=cash_sale_body).status_code == 401


@pytest.mark.unit
class TestCreditSale:

    def test_new_credit_sale_is_unpaid(self, client, agent_headers, credit_sale_body):
        response = client.post("/api/sales/credit", json=credit_sale_body, headers=agent_headers)

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["saleType"] == "Credit"
        assert data["isPaid"] is False
        assert data["paymentDate"] is None
        assert data["dispatchDate"]
        assert data["nationalId"] == "CM90012345ABCD"

    def test_client_cannot_create_it_paid(self, client, agent_headers, credit_sale_body):
        credit_sale_body.update(isPaid=True, paymentDate="2025-03-01")
        data = client.post("/api/sales/credit", json=credit_sale_body, headers=agent_headers).json()["data"]

        assert data["isPaid"] is False
        assert data["paymentDate"] is None

    def test_amount_due_below_minimum(self, client, agent_headers, credit_sale_body):
        credit_sale_body["amountDue"] = 9999
        response = client.post("/api/sales/credit", json=credit_sale_body, headers=agent_headers)

        assert response.status_code == 400
        assert response.json()["errors"] == [
            {"field": "amountDue", "message": "Amount due must be at least 10,000 UgX"}
        ]
        assert list_sales(client, agent_headers)["count"] == 0

    def test_past_due_date_accepted(self, client, agent_headers, credit_sale_body):
        credit_sale_body["dueDate"] = "2020-01-15"
        response = client.post("/api/sales/credit", json=credit_sale_body, headers=agent_headers)
        assert response.status_code == 201


@pytest.mark.unit
class TestListSales:

    @pytest.fixture
    def sales(self, client, agent_headers, cash_sale_body, credit_sale_body):
        cash = client.post("/api/sales/cash", json=cash_sale_body, headers=agent_headers).json()["data"]
        credit = client.post("/api/sales/credit", json=credit_sale_body, headers=agent_headers).json()["data"]
        return cash, credit

    def test_all_sales_newest_first(self, client, manager_headers, sales_agent, sales):
        cash, credit = sales
        body = list_sales(client, manager_headers)

        assert body["success"] is True
        assert body["count"] == 2
        assert [s["id"] for s in body["data"]] == [credit["id"], cash["id"]]
        assert body["data"][0]["recordedBy"] == {
            "id": sales_agent.id,
            "name": "Peter Okello",
            "email": "agent@karibu.co.ug",
        }

    @pytest.mark.parametrize("sale_type", ["Cash", "Credit"])
    def test_filter_by_type(self, client, manager_headers, sales, sale_type):
        body = list_sales(client, manager_headers, sale_type)

        assert body["count"] == 1
        assert body["data"][0]["saleType"] == sale_type

    def test_unknown_type(self, client, manager_headers, sales):
        response = client.get("/api/sales", params={"type": "Barter"}, headers=manager_headers)

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "type"


@pytest.mark.unit
class TestCreditPayment:

    @pytest.fixture
    def credit_sale(self, client, agent_headers, credit_sale_body):
        return client.post("/api/sales/credit", json=credit_sale_body, headers=agent_headers).json()["data"]

    def test_payment_marks_sale_paid(self, client, agent_headers, credit_sale):
        response = client.patch(f"/api/sales/credit/{credit_sale['id']}/payment", headers=agent_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["isPaid"] is True
        assert data["paymentDate"] is not None
        assert as_utc(data["paymentDate"]) <= datetime.now(timezone.utc)

    def test_repeat_payment_moves_payment_date(self, client, manager_headers, credit_sale):
        url = f"/api/sales/credit/{credit_sale['id']}/payment"
        first = client.patch(url, headers=manager_headers).json()["data"]
        second = client.patch(url, headers=manager_headers)

        assert second.status_code == 200
        assert second.json()["data"]["isPaid"] is True
        assert as_utc(second.json()["data"]["paymentDate"]) > as_utc(first["paymentDate"])

    def test_payment_is_visible_when_listing(self, client, agent_headers, credit_sale):
        client.patch(f"/api/sales/credit/{credit_sale['id']}/payment", headers=agent_headers)
        listed = list_sales(client, agent_headers, "Credit")["data"][0]

        assert listed["isPaid"] is True
        assert listed["paymentDate"] is not None

    def test_cash_sale_cannot_be_settled(self, client, agent_headers, cash_sale_body):
        cash = client.post("/api/sales/cash", json=cash_sale_body, headers=agent_headers).json()["data"]
        response = client.patch(f"/api/sales/credit/{cash['id']}/payment", headers=agent_headers)

        assert response.status_code == 404
        assert response.json() == {"error": "Credit sale not found"}

    def test_unknown_sale(self, client, agent_headers):
        response = client.patch("/api/sales/credit/nope/payment", headers=agent_headers)
        assert response.status_code == 404

    def test_requires_token(self, client, credit_sale):
        response = client.patch(f"/api/sales/credit/{credit_sale['id']}/payment")
        assert response.status_code == 401
