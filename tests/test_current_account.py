"""
Current account (cuenta corriente) tests.
"""

from decimal import Decimal
import pytest
from httpx import AsyncClient
from sqlalchemy import update

from app.models.current_account import CurrentAccountItem


async def post_movement(client: AsyncClient, customer_id: int, type_: str, amount: str, concept: str = "Ajuste"):
    return await client.post(
        "/api/v1/current-account",
        json={"customer_id": customer_id, "type": type_, "concept": concept, "amount": amount},
    )


@pytest.mark.asyncio
async def test_running_balance(auth_client: AsyncClient, customer_id):
    first = await post_movement(auth_client, customer_id, "debit", "1000.00", "Saldo inicial")
    second = await post_movement(auth_client, customer_id, "credit", "300.00")
    third = await post_movement(auth_client, customer_id, "credit", "900.00")

    assert first.status_code == 201
    assert Decimal(first.json()["balance"]) == Decimal("1000")
    assert Decimal(second.json()["balance"]) == Decimal("700")
    assert Decimal(third.json()["balance"]) == Decimal("-200")

    response = await auth_client.get(f"/api/v1/current-account/{customer_id}/statement")
    assert response.status_code == 200
    statement = response.json()
    assert Decimal(statement["current_balance"]) == Decimal("-200")
    assert statement["is_in_credit"] is True
    assert statement["is_in_debt"] is False
    # Newest first
    assert [Decimal(m["amount"]) for m in statement["items"]] == [
        Decimal("900"), Decimal("300"), Decimal("1000"),
    ]


@pytest.mark.asyncio
async def test_movement_requires_existing_customer(auth_client: AsyncClient):
    response = await post_movement(auth_client, 9999, "debit", "10")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_movement_amount_must_be_positive(auth_client: AsyncClient, customer_id):
    response = await post_movement(auth_client, customer_id, "debit", "-10")

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_list_movements_with_balance(auth_client: AsyncClient, customer_id, ri_customer_id):
    await post_movement(auth_client, customer_id, "debit", "500")
    await post_movement(auth_client, ri_customer_id, "debit", "800")
    await post_movement(auth_client, ri_customer_id, "credit", "100")

    response = await auth_client.get("/api/v1/current-account")
    data = response.json()
    assert data["total"] == 3
    assert data["current_balance"] is None

    response = await auth_client.get(
        "/api/v1/current-account",
        params={"customer_id": ri_customer_id, "type": "debit"},
    )
    data = response.json()
    assert data["total"] == 1
    assert Decimal(data["current_balance"]) == Decimal("700")


@pytest.mark.asyncio
async def test_recalculate_balances(
    auth_client: AsyncClient, manager_headers, db_session, customer_id
):
    await post_movement(auth_client, customer_id, "debit", "1000")
    await post_movement(auth_client, customer_id, "credit", "400")

    # Corrupt the stored running balances
    await db_session.execute(
        update(CurrentAccountItem)
        .where(CurrentAccountItem.customer_id == customer_id)
        .values(balance=Decimal("0"))
    )
    await db_session.commit()

    response = await auth_client.post(f"/api/v1/current-account/{customer_id}/recalculate")
    assert response.status_code == 403

    response = await auth_client.post(
        f"/api/v1/current-account/{customer_id}/recalculate",
        headers=manager_headers,
    )
    assert response.status_code == 200
    data = response.json()
    assert data["movements"] == 2
    assert Decimal(data["current_balance"]) == Decimal("600")

    response = await auth_client.get(f"/api/v1/current-account/{customer_id}/statement")
    balances = [Decimal(m["balance"]) for m in response.json()["items"]]
    assert balances == [Decimal("600"), Decimal("1000")]
