"""
Category endpoint tests.
"""

import pytest
from httpx import AsyncClient

from app.services.category import DEFAULT_CATEGORIES, slugify


def test_slugify():
    assert slugify("Electrónicos Básicos") == "electronicos-basicos"
    assert slugify("  Audio & Video ") == "audio-video"


@pytest.mark.asyncio
async def test_create_category_with_unique_slug(auth_client: AsyncClient):
    first = await auth_client.post("/api/v1/categories", json={"name": "Cables", "type": "tipo"})
    second = await auth_client.post("/api/v1/categories", json={"name": "Cables"})

    assert first.status_code == 201
    assert first.json()["slug"] == "cables"
    assert second.json()["slug"] == "cables-2"


@pytest.mark.asyncio
async def test_category_tree(auth_client: AsyncClient):
    root = (await auth_client.post("/api/v1/categories", json={"name": "Audio"})).json()
    child = (
        await auth_client.post(
            "/api/v1/categories",
            json={"name": "Parlantes", "parent_id": root["id"]},
        )
    ).json()
    await auth_client.post(
        "/api/v1/categories",
        json={"name": "Parlantes portátiles", "parent_id": child["id"]},
    )

    response = await auth_client.get("/api/v1/categories/tree")

    assert response.status_code == 200
    tree = response.json()
    assert [node["name"] for node in tree] == ["Audio"]
    assert tree[0]["children"][0]["name"] == "Parlantes"
    assert tree[0]["children"][0]["children"][0]["slug"] == "parlantes-portatiles"


@pytest.mark.asyncio
async def test_category_cannot_be_its_own_parent(auth_client: AsyncClient):
    category = (await auth_client.post("/api/v1/categories", json={"name": "Metal"})).json()

    response = await auth_client.patch(
        f"/api/v1/categories/{category['id']}",
        json={"parent_id": category["id"]},
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_create_defaults_is_idempotent(auth_client: AsyncClient):
    response = await auth_client.post("/api/v1/categories/defaults")
    assert response.status_code == 201
    assert len(response.json()) == len(DEFAULT_CATEGORIES)

    response = await auth_client.post("/api/v1/categories/defaults")
    assert response.json() == []

    response = await auth_client.get("/api/v1/categories", params={"type": "marca"})
    assert len(response.json()) == 4


@pytest.mark.asyncio
async def test_deactivated_category_is_hidden(auth_client: AsyncClient):
    category = (await auth_client.post("/api/v1/categories", json={"name": "Vidrio"})).json()

    response = await auth_client.delete(f"/api/v1/categories/{category['id']}")
    assert response.status_code == 200

    response = await auth_client.get("/api/v1/categories")
    assert response.json() == []

    response = await auth_client.get("/api/v1/categories", params={"include_inactive": True})
    assert len(response.json()) == 1
