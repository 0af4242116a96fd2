"""
Sale endpoint tests.
"""

from decimal import Decimal
import pytest
from httpx import AsyncClient


async def create_sale(client: AsyncClient, customer_id: int, product_id: int, **kwargs):
    payload = {
        "customer_id": customer_id,
        "items": [{"product_id": product_id, "quantity": kwargs.pop("quantity", 2)}],
        **kwargs,
    }
    return await client.post("/api/v1/sales", json=payload)


async def product_stock(client: AsyncClient, product_id: int) -> int:
    return (await client.get(f"/api/v1/products/{product_id}")).json()["stock"]


async def balance(client: AsyncClient, customer_id: int) -> Decimal:
    response = await client.get(f"/api/v1/current-account/{customer_id}/statement")
    return Decimal(response.json()["current_balance"])


@pytest.mark.asyncio
async def test_confirmed_sale_takes_stock_and_debits(auth_client: AsyncClient, customer_id, product_id):
    response = await create_sale(auth_client, customer_id, product_id, status="confirmed")

    assert response.status_code == 201
    data = response.json()
    assert data["sale_number"] == "V-00000001"
    assert data["status"] == "confirmed"
    assert data["invoice_type"] == "FACTURA_B"
    assert data["point_of_sale"] == "0001"
    assert Decimal(data["subtotal"]) == Decimal("2000")
    assert Decimal(data["taxed_amount"]) == Decimal("2000")
    assert Decimal(data["tax_amount"]) == Decimal("420")
    assert Decimal(data["total"]) == Decimal("2420")
    assert data["items"][0]["description"] == "Taladro percutor"
    assert data["is_invoiced"] is False

    assert await product_stock(auth_client, product_id) == 8
    assert await balance(auth_client, customer_id) == Decimal("2420")


@pytest.mark.asyncio
async def test_sale_for_responsable_inscripto_is_factura_a(auth_client: AsyncClient, ri_customer_id, product_id):
    response = await create_sale(auth_client, ri_customer_id, product_id, point_of_sale="3")

    assert response.status_code == 201
    assert response.json()["invoice_type"] == "FACTURA_A"
    assert response.json()["point_of_sale"] == "0003"


@pytest.mark.asyncio
async def test_line_discount_and_perception(auth_client: AsyncClient, customer_id, product_id):
    response = await auth_client.post(
        "/api/v1/sales",
        json={
            "customer_id": customer_id,
            "gross_income_perception": "50.00",
            "items": [
                {"product_id": product_id, "quantity": 1, "discount": "10"},
                {
                    "product_id": product_id,
                    "description": "Mano de obra",
                    "quantity": 1,
                    "unit_price": "300",
                    "iva_type": "exento",
                },
            ],
        },
    )

    assert response.status_code == 201
    data = response.json()
    assert Decimal(data["discount_amount"]) == Decimal("100")
    assert Decimal(data["subtotal"]) == Decimal("1200")
    assert Decimal(data["taxed_amount"]) == Decimal("900")
    assert Decimal(data["exempt_amount"]) == Decimal("300")
    assert Decimal(data["tax_amount"]) == Decimal("189")
    assert Decimal(data["total"]) == Decimal("1439")


@pytest.mark.asyncio
async def test_insufficient_stock(auth_client: AsyncClient, customer_id, product_id):
    response = await create_sale(auth_client, customer_id, product_id, quantity=11)

    assert response.status_code == 400
    assert "Stock insuficiente" in response.json()["detail"]
    assert await product_stock(auth_client, product_id) == 10

    response = await auth_client.get("/api/v1/sales")
    assert response.json()["total"] == 0


@pytest.mark.asyncio
async def test_sale_requires_existing_customer(auth_client: AsyncClient, product_id):
    response = await create_sale(auth_client, 9999, product_id)

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_draft_lifecycle(auth_client: AsyncClient, customer_id, product_id):
    response = await create_sale(auth_client, customer_id, product_id, status="draft")
    assert response.status_code == 201
    sale_id = response.json()["id"]

    # Drafts neither move stock nor touch the ledger
    assert await product_stock(auth_client, product_id) == 10
    assert await balance(auth_client, customer_id) == 0

    response = await auth_client.patch(
        f"/api/v1/sales/{sale_id}",
        json={"items": [{"product_id": product_id, "quantity": 3}]},
    )
    assert response.status_code == 200
    assert len(response.json()["items"]) == 1
    assert Decimal(response.json()["total"]) == Decimal("3630")

    response = await auth_client.post(f"/api/v1/sales/{sale_id}/confirm")
    assert response.status_code == 200
    assert response.json()["status"] == "confirmed"
    assert await product_stock(auth_client, product_id) == 7
    assert await balance(auth_client, customer_id) == Decimal("3630")

    response = await auth_client.patch(f"/api/v1/sales/{sale_id}", json={"notes": "x"})
    assert response.status_code == 400

    response = await auth_client.post(f"/api/v1/sales/{sale_id}/deliver")
    assert response.status_code == 200
    assert response.json()["status"] == "delivered"
    assert response.json()["delivery_date"] is not None


@pytest.mark.asyncio
async def test_cancel_restores_stock_and_credits(auth_client: AsyncClient, customer_id, product_id):
    sale_id = (await create_sale(auth_client, customer_id, product_id)).json()["id"]

    response = await auth_client.post(f"/api/v1/sales/{sale_id}/cancel")
    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"

    assert await product_stock(auth_client, product_id) == 10
    assert await balance(auth_client, customer_id) == 0

    response = await auth_client.post(f"/api/v1/sales/{sale_id}/cancel")
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_only_drafts_can_be_deleted(auth_client: AsyncClient, customer_id, product_id):
    confirmed_id = (await create_sale(auth_client, customer_id, product_id)).json()["id"]
    draft_id = (await create_sale(auth_client, customer_id, product_id, status="draft")).json()["id"]

    response = await auth_client.delete(f"/api/v1/sales/{confirmed_id}")
    assert response.status_code == 400

    response = await auth_client.delete(f"/api/v1/sales/{draft_id}")
    assert response.status_code == 200

    response = await auth_client.get(f"/api/v1/sales/{draft_id}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_list_sales_filters(auth_client: AsyncClient, customer_id, product_id):
    await create_sale(auth_client, customer_id, product_id)
    await create_sale(auth_client, customer_id, product_id, status="draft", is_white_invoice=False)

    response = await auth_client.get("/api/v1/sales", params={"status": "draft"})
    assert response.json()["total"] == 1

    response = await auth_client.get("/api/v1/sales", params={"is_white_invoice": True})
    data = response.json()
    assert data["total"] == 1
    assert data["items"][0]["sale_number"] == "V-00000001"


@pytest.mark.asyncio
async def test_sale_pdf(auth_client: AsyncClient, customer_id, product_id):
    sale_id = (await create_sale(auth_client, customer_id, product_id)).json()["id"]

    response = await auth_client.get(f"/api/v1/sales/{sale_id}/pdf")

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content.startswith(b"%PDF")


@pytest.mark.asyncio
async def test_sale_with_credit_note_cannot_be_cancelled(auth_client: AsyncClient, customer_id, product_id):
    sale_id = (await create_sale(auth_client, customer_id, product_id)).json()["id"]
    response = await auth_client.post(
        "/api/v1/credit-notes",
        json={
            "customer_id": customer_id,
            "original_sale_id": sale_id,
            "reason": "return",
            "description": "Devolución total",
            "items": [{"product_id": product_id, "quantity": 2}],
        },
    )
    assert response.status_code == 201
    assert await product_stock(auth_client, product_id) == 10
    assert await balance(auth_client, customer_id) == 0

    response = await auth_client.post(f"/api/v1/sales/{sale_id}/cancel")

    assert response.status_code == 400
    assert response.json()["detail"] == "La venta tiene una nota de crédito"
    assert await product_stock(auth_client, product_id) == 10
    assert await balance(auth_client, customer_id) == 0

    # Once the note is voided the sale can be cancelled normally
    credit_note_id = (await auth_client.get("/api/v1/credit-notes")).json()["items"][0]["id"]
    response = await auth_client.post(f"/api/v1/credit-notes/{credit_note_id}/void")
    assert response.status_code == 200

    response = await auth_client.post(f"/api/v1/sales/{sale_id}/cancel")
    assert response.status_code == 200
    assert await product_stock(auth_client, product_id) == 10
    assert await balance(auth_client, customer_id) == 0
