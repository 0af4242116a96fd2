"""
Quote endpoint tests.
"""

from datetime import date, timedelta
from decimal import Decimal
import pytest
from httpx import AsyncClient


async def create_quote(client: AsyncClient, customer_id: int, product_id: int, **kwargs):
    return await client.post(
        "/api/v1/quotes",
        json={
            "customer_id": customer_id,
            "items": [{"product_id": product_id, "quantity": 3}],
            **kwargs,
        },
    )


@pytest.mark.asyncio
async def test_create_quote_defaults(auth_client: AsyncClient, customer_id, product_id):
    response = await create_quote(auth_client, customer_id, product_id)

    assert response.status_code == 201
    data = response.json()
    assert data["quote_number"] == "P-00000001"
    assert data["status"] == "sent"
    assert data["valid_until"] == (date.today() + timedelta(days=30)).isoformat()
    assert Decimal(data["subtotal"]) == Decimal("3000")
    assert Decimal(data["tax_amount"]) == Decimal("630")
    assert Decimal(data["total"]) == Decimal("3630")
    assert data["can_convert"] is True

    # Quotes do not reserve stock
    product = (await auth_client.get(f"/api/v1/products/{product_id}")).json()
    assert product["stock"] == 10


@pytest.mark.asyncio
async def test_quote_status_transitions(auth_client: AsyncClient, customer_id, product_id):
    quote_id = (await create_quote(auth_client, customer_id, product_id, status="draft")).json()["id"]

    response = await auth_client.patch(f"/api/v1/quotes/{quote_id}/status", json={"status": "accepted"})
    assert response.status_code == 400

    response = await auth_client.patch(f"/api/v1/quotes/{quote_id}/status", json={"status": "sent"})
    assert response.status_code == 200

    response = await auth_client.patch(f"/api/v1/quotes/{quote_id}/status", json={"status": "rejected"})
    assert response.status_code == 200
    assert response.json()["can_convert"] is False

    response = await auth_client.patch(f"/api/v1/quotes/{quote_id}", json={"notes": "tarde"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_update_quote_replaces_items(auth_client: AsyncClient, customer_id, product_id):
    quote_id = (await create_quote(auth_client, customer_id, product_id)).json()["id"]

    response = await auth_client.patch(
        f"/api/v1/quotes/{quote_id}",
        json={"items": [{"product_id": product_id, "quantity": 1, "unit_price": "800"}]},
    )

    assert response.status_code == 200
    data = response.json()
    assert len(data["items"]) == 1
    assert Decimal(data["total"]) == Decimal("968")


@pytest.mark.asyncio
async def test_convert_quote_to_sale(auth_client: AsyncClient, customer_id, product_id):
    quote_id = (await create_quote(auth_client, customer_id, product_id)).json()["id"]

    response = await auth_client.post(f"/api/v1/quotes/{quote_id}/convert")

    assert response.status_code == 201
    sale = response.json()
    assert sale["status"] == "confirmed"
    assert sale["quote_id"] == quote_id
    assert Decimal(sale["total"]) == Decimal("3630")

    quote = (await auth_client.get(f"/api/v1/quotes/{quote_id}")).json()
    assert quote["status"] == "converted"

    product = (await auth_client.get(f"/api/v1/products/{product_id}")).json()
    assert product["stock"] == 7

    # A converted quote cannot be converted again nor deleted
    response = await auth_client.post(f"/api/v1/quotes/{quote_id}/convert")
    assert response.status_code == 400
    response = await auth_client.delete(f"/api/v1/quotes/{quote_id}")
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_delete_quote(auth_client: AsyncClient, customer_id, product_id):
    quote_id = (await create_quote(auth_client, customer_id, product_id)).json()["id"]

    response = await auth_client.delete(f"/api/v1/quotes/{quote_id}")
    assert response.status_code == 200

    response = await auth_client.get(f"/api/v1/quotes/{quote_id}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_list_quotes_by_status(auth_client: AsyncClient, customer_id, product_id):
    await create_quote(auth_client, customer_id, product_id)
    await create_quote(auth_client, customer_id, product_id, status="draft")

    response = await auth_client.get("/api/v1/quotes", params={"status": "draft"})

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 1
    assert data["items"][0]["quote_number"] == "P-00000002"
