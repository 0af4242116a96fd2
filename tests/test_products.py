"""
Product endpoint tests.
"""

from decimal import Decimal
import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_create_product_with_price(auth_client: AsyncClient):
    response = await auth_client.post(
        "/api/v1/products",
        json={
            "name": "Cable HDMI 2m",
            "internal_code": "HDMI-2",
            "price": "2500.00",
            "iva_type": "iva_21",
            "stock": 5,
        },
    )

    assert response.status_code == 201
    data = response.json()
    assert Decimal(data["price"]) == Decimal("2500")
    assert Decimal(data["price_with_iva"]) == Decimal("3025")
    assert data["is_low_stock"] is False


@pytest.mark.asyncio
async def test_create_product_priced_from_usd_cost(auth_client: AsyncClient, manager_headers):
    response = await auth_client.put(
        "/api/v1/currency/exchange-rate",
        json={"usd_to_ars_rate": "1200"},
        headers=manager_headers,
    )
    assert response.status_code == 200

    response = await auth_client.post(
        "/api/v1/products",
        json={"name": "Auriculares BT", "cost_usd": "10.00", "markup_percentage": "50"},
    )

    assert response.status_code == 201
    # 10 USD * 1200 * 1.5
    assert Decimal(response.json()["price"]) == Decimal("18000")


@pytest.mark.asyncio
async def test_create_product_requires_price_or_cost(auth_client: AsyncClient):
    response = await auth_client.post("/api/v1/products", json={"name": "Sin precio"})

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_duplicate_internal_code(auth_client: AsyncClient, product_id):
    response = await auth_client.post(
        "/api/v1/products",
        json={"name": "Otro taladro", "internal_code": "TAL-001", "price": "10"},
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_update_cost_recomputes_price(auth_client: AsyncClient, product_id):
    response = await auth_client.patch(
        f"/api/v1/products/{product_id}",
        json={"cost_usd": "2.00", "markup_percentage": "25"},
    )

    assert response.status_code == 200
    # Default rate of 1000 ARS per USD
    assert Decimal(response.json()["price"]) == Decimal("2500")


@pytest.mark.asyncio
async def test_adjust_stock(auth_client: AsyncClient, product_id):
    response = await auth_client.post(
        f"/api/v1/products/{product_id}/stock",
        json={"quantity": -9, "reason": "Rotura"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["stock"] == 1
    assert data["is_low_stock"] is True

    response = await auth_client.post(
        f"/api/v1/products/{product_id}/stock",
        json={"quantity": -2},
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_list_products_filters(auth_client: AsyncClient, product_id):
    response = await auth_client.get("/api/v1/products", params={"search": "tal-0"})
    assert response.json()["total"] == 1

    response = await auth_client.get("/api/v1/products", params={"low_stock": True})
    assert response.json()["total"] == 0


@pytest.mark.asyncio
async def test_delete_product_deactivates(auth_client: AsyncClient, product_id):
    response = await auth_client.delete(f"/api/v1/products/{product_id}")
    assert response.status_code == 200

    response = await auth_client.get("/api/v1/products")
    assert response.json()["total"] == 0

    response = await auth_client.get(f"/api/v1/products/{product_id}")
    assert response.status_code == 200
    assert response.json()["is_active"] is False
