"""
Customer endpoint tests.
"""

from decimal import Decimal
import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_create_customer_formats_cuit(auth_client: AsyncClient):
    response = await auth_client.post(
        "/api/v1/customers",
        json={
            "business_name": "Distribuidora Norte SA",
            "tax_id": "20123456786",
            "customer_type": "responsable_inscripto",
            "email": "compras@norte.com.ar",
        },
    )

    assert response.status_code == 201
    data = response.json()
    assert data["tax_id"] == "20-12345678-6"
    assert data["customer_type"] == "responsable_inscripto"
    assert data["is_active"] is True
    assert Decimal(data["current_balance"]) == 0


@pytest.mark.asyncio
async def test_create_customer_invalid_cuit(auth_client: AsyncClient):
    response = await auth_client.post(
        "/api/v1/customers",
        json={"business_name": "Cliente Malo", "tax_id": "20-12345678-5"},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "CUIT/CUIL inválido"


@pytest.mark.asyncio
async def test_create_customer_duplicate_cuit(auth_client: AsyncClient, ri_customer_id):
    response = await auth_client.post(
        "/api/v1/customers",
        json={"business_name": "Otro Nombre", "tax_id": "30712345671"},
    )

    assert response.status_code == 400
    assert "Ya existe" in response.json()["detail"]


@pytest.mark.asyncio
async def test_list_customers_with_search(auth_client: AsyncClient, customer_id, ri_customer_id):
    response = await auth_client.get("/api/v1/customers")
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 2
    assert data["pages"] == 1

    response = await auth_client.get("/api/v1/customers", params={"search": "ferre"})
    data = response.json()
    assert data["total"] == 1
    assert data["items"][0]["id"] == ri_customer_id


@pytest.mark.asyncio
async def test_customer_detail_and_update(auth_client: AsyncClient, customer_id):
    response = await auth_client.patch(
        f"/api/v1/customers/{customer_id}",
        json={"phone": "11-5555-0000", "credit_limit": "50000"},
    )
    assert response.status_code == 200
    assert response.json()["phone"] == "11-5555-0000"

    response = await auth_client.get(f"/api/v1/customers/{customer_id}")
    assert response.status_code == 200
    data = response.json()
    assert data["sales_count"] == 0
    assert data["movements_count"] == 0
    assert Decimal(data["credit_limit"]) == Decimal("50000")


@pytest.mark.asyncio
async def test_customer_not_found(auth_client: AsyncClient):
    response = await auth_client.get("/api/v1/customers/9999")

    assert response.status_code == 404
    assert response.json()["detail"] == "Cliente no encontrado"


@pytest.mark.asyncio
async def test_delete_customer_without_history(auth_client: AsyncClient, customer_id):
    response = await auth_client.delete(f"/api/v1/customers/{customer_id}")
    assert response.status_code == 200

    response = await auth_client.get("/api/v1/customers", params={"is_active": False})
    assert response.json()["total"] == 1


@pytest.mark.asyncio
async def test_delete_customer_with_movements_is_refused(auth_client: AsyncClient, customer_id):
    response = await auth_client.post(
        "/api/v1/current-account",
        json={
            "customer_id": customer_id,
            "type": "debit",
            "concept": "Saldo inicial",
            "amount": "1500.00",
        },
    )
    assert response.status_code == 201

    response = await auth_client.delete(f"/api/v1/customers/{customer_id}")
    assert response.status_code == 400

    response = await auth_client.get("/api/v1/customers")
    assert Decimal(response.json()["items"][0]["current_balance"]) == Decimal("1500")
