"""
Payment and cheque portfolio tests.
"""

from datetime import date, timedelta
from decimal import Decimal
import pytest
from httpx import AsyncClient


def cheque_payload(customer_id: int, amount: str = "5000.00", due_in: int = 3) -> dict:
    return {
        "customer_id": customer_id,
        "amount": amount,
        "method": "cheque",
        "cheque": {
            "cheque_number": "00012345",
            "bank": "Banco Nación",
            "due_date": (date.today() + timedelta(days=due_in)).isoformat(),
            "issuer": "Juan Pérez",
        },
    }


async def balance(client: AsyncClient, customer_id: int) -> Decimal:
    response = await client.get(f"/api/v1/current-account/{customer_id}/statement")
    return Decimal(response.json()["current_balance"])


@pytest.mark.asyncio
async def test_cash_payment_credits_account(auth_client: AsyncClient, customer_id):
    response = await auth_client.post(
        "/api/v1/payments",
        json={"customer_id": customer_id, "amount": "1000.00", "method": "cash"},
    )

    assert response.status_code == 201
    data = response.json()
    assert data["payment_number"] == "PAG-000001"
    assert data["status"] == "completed"
    assert data["cheque"] is None
    assert await balance(auth_client, customer_id) == Decimal("-1000")


@pytest.mark.asyncio
async def test_card_payment_stores_net_amount(auth_client: AsyncClient, customer_id):
    response = await auth_client.post(
        "/api/v1/payments",
        json={
            "customer_id": customer_id,
            "amount": "1000.00",
            "method": "credit",
            "card": {"card_brand": "Visa", "last_four_digits": "4242", "installments": 3, "fee": "35.50"},
        },
    )

    assert response.status_code == 201
    data = response.json()
    assert data["card_brand"] == "Visa"
    assert Decimal(data["fee"]) == Decimal("35.50")
    assert Decimal(data["net_amount"]) == Decimal("964.50")

    response = await auth_client.post(
        "/api/v1/payments",
        json={
            "customer_id": customer_id,
            "amount": "10.00",
            "method": "debit",
            "card": {"fee": "20"},
        },
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_payment_against_another_customers_sale(
    auth_client: AsyncClient, customer_id, ri_customer_id, product_id
):
    sale = await auth_client.post(
        "/api/v1/sales",
        json={"customer_id": ri_customer_id, "items": [{"product_id": product_id}]},
    )

    response = await auth_client.post(
        "/api/v1/payments",
        json={
            "customer_id": customer_id,
            "sale_id": sale.json()["id"],
            "amount": "100",
            "method": "cash",
        },
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "La venta no pertenece al cliente"


@pytest.mark.asyncio
async def test_cheque_payment_requires_data(auth_client: AsyncClient, customer_id):
    response = await auth_client.post(
        "/api/v1/payments",
        json={"customer_id": customer_id, "amount": "100", "method": "cheque"},
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_cheque_payment_creates_pending_cheque(auth_client: AsyncClient, customer_id):
    response = await auth_client.post("/api/v1/payments", json=cheque_payload(customer_id))

    assert response.status_code == 201
    cheque = response.json()["cheque"]
    assert cheque["status"] == "pending"
    assert Decimal(cheque["amount"]) == Decimal("5000")

    response = await auth_client.get("/api/v1/cheques/upcoming", params={"days": 7})
    assert [c["id"] for c in response.json()] == [cheque["id"]]

    response = await auth_client.get("/api/v1/cheques/upcoming", params={"days": 1})
    assert response.json() == []


@pytest.mark.asyncio
async def test_rejected_cheque_debits_customer_again(auth_client: AsyncClient, customer_id):
    payment = (await auth_client.post("/api/v1/payments", json=cheque_payload(customer_id))).json()
    cheque_id = payment["cheque_id"]
    assert await balance(auth_client, customer_id) == Decimal("-5000")

    response = await auth_client.patch(
        f"/api/v1/cheques/{cheque_id}/status",
        json={"status": "deposited", "deposit_bank": "Banco Galicia"},
    )
    assert response.status_code == 200
    assert response.json()["deposit_date"] == date.today().isoformat()

    response = await auth_client.patch(
        f"/api/v1/cheques/{cheque_id}/status",
        json={"status": "rejected", "rejection_reason": "Sin fondos"},
    )
    assert response.status_code == 200
    assert response.json()["status"] == "rejected"

    assert await balance(auth_client, customer_id) == 0
    payment = (await auth_client.get(f"/api/v1/payments/{payment['id']}")).json()
    assert payment["status"] == "rejected"

    # Cancelling a bounced payment does not debit twice
    response = await auth_client.post(f"/api/v1/payments/{payment['id']}/cancel")
    assert response.status_code == 200
    assert await balance(auth_client, customer_id) == 0


@pytest.mark.asyncio
async def test_cheque_transitions(auth_client: AsyncClient, customer_id):
    payment = (await auth_client.post("/api/v1/payments", json=cheque_payload(customer_id))).json()
    cheque_id = payment["cheque_id"]

    response = await auth_client.patch(f"/api/v1/cheques/{cheque_id}/status", json={"status": "endorsed"})
    assert response.status_code == 400

    response = await auth_client.patch(
        f"/api/v1/cheques/{cheque_id}/status",
        json={"status": "endorsed", "endorsed_to": "Proveedor SA"},
    )
    assert response.status_code == 200

    response = await auth_client.patch(f"/api/v1/cheques/{cheque_id}/status", json={"status": "deposited"})
    assert response.status_code == 400

    response = await auth_client.get("/api/v1/cheques", params={"status": "endorsed"})
    assert response.json()["total"] == 1


@pytest.mark.asyncio
async def test_cancel_payment(auth_client: AsyncClient, customer_id):
    payment = (
        await auth_client.post(
            "/api/v1/payments",
            json={"customer_id": customer_id, "amount": "700", "method": "transfer",
                  "transfer": {"bank_from": "Santander", "alias": "mi.alias.mp"}},
        )
    ).json()
    assert payment["alias"] == "mi.alias.mp"

    response = await auth_client.post(f"/api/v1/payments/{payment['id']}/cancel")
    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"
    assert await balance(auth_client, customer_id) == 0

    response = await auth_client.post(f"/api/v1/payments/{payment['id']}/cancel")
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_payment_stats(auth_client: AsyncClient, customer_id):
    for amount, method in (("100", "cash"), ("250", "cash"), ("400", "qr")):
        await auth_client.post(
            "/api/v1/payments",
            json={"customer_id": customer_id, "amount": amount, "method": method},
        )

    response = await auth_client.get("/api/v1/payments/stats")

    assert response.status_code == 200
    stats = {row["method"]: row for row in response.json()}
    assert stats["cash"]["count"] == 2
    assert Decimal(stats["cash"]["total"]) == Decimal("350")
    assert Decimal(stats["qr"]["total"]) == Decimal("400")

    response = await auth_client.get("/api/v1/payments", params={"method": "cash"})
    assert response.json()["total"] == 2


@pytest.mark.asyncio
async def test_cheque_payment_cannot_be_cancelled_while_in_portfolio(auth_client: AsyncClient, customer_id):
    payment = (await auth_client.post("/api/v1/payments", json=cheque_payload(customer_id, "500.00"))).json()

    response = await auth_client.post(f"/api/v1/payments/{payment['id']}/cancel")

    assert response.status_code == 400
    assert await balance(auth_client, customer_id) == Decimal("-500")
    cheque = (await auth_client.get(f"/api/v1/cheques/{payment['cheque_id']}")).json()
    assert cheque["status"] == "pending"

    # Rejecting the cheque takes it out of the portfolio and debits the customer back
    response = await auth_client.patch(
        f"/api/v1/cheques/{payment['cheque_id']}/status",
        json={"status": "rejected", "rejection_reason": "Pago anulado"},
    )
    assert response.status_code == 200

    response = await auth_client.post(f"/api/v1/payments/{payment['id']}/cancel")
    assert response.status_code == 200
    assert await balance(auth_client, customer_id) == 0

    response = await auth_client.get("/api/v1/cheques/upcoming", params={"days": 7})
    assert response.json() == []
    stats = (await auth_client.get("/api/v1/dashboard/stats")).json()
    assert stats["cheques"]["pending_count"] == 0
