"""
Authentication and user endpoint tests.
"""

import pytest
from httpx import AsyncClient

from app.core.config import settings


@pytest.mark.asyncio
async def test_register_user(client: AsyncClient):
    """Test user registration."""
    response = await client.post(
        "/api/v1/auth/register",
        json={
            "email": "newuser@example.com",
            "password": "password123",
            "full_name": "New User",
        },
    )

    assert response.status_code == 201
    data = response.json()
    assert data["email"] == "newuser@example.com"
    assert data["role"] == "user"
    assert "hashed_password" not in data


@pytest.mark.asyncio
async def test_register_duplicate_email(client: AsyncClient, test_user):
    """Test registration with duplicate email."""
    response = await client.post(
        "/api/v1/auth/register",
        json={
            "email": "test@example.com",
            "password": "password123",
            "full_name": "Another User",
        },
    )

    assert response.status_code == 400
    assert "Ya existe" in response.json()["detail"]


@pytest.mark.asyncio
async def test_register_invalid_payload_returns_400(client: AsyncClient):
    response = await client.post(
        "/api/v1/auth/register",
        json={"email": "not-an-email", "password": "1", "full_name": "X"},
    )

    assert response.status_code == 400
    data = response.json()
    assert data["detail"] == "Error de validación de datos"
    assert len(data["errors"]) >= 1


@pytest.mark.asyncio
async def test_login_success(client: AsyncClient, test_user):
    """Test successful login."""
    response = await client.post(
        "/api/v1/auth/login",
        json={
            "email": "test@example.com",
            "password": "testpassword123",
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert "access_token" in data
    assert "refresh_token" in data
    assert data["token_type"] == "bearer"


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, test_user):
    """Test login with wrong password."""
    response = await client.post(
        "/api/v1/auth/login",
        json={
            "email": "test@example.com",
            "password": "wrongpassword",
        },
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_refresh_token(client: AsyncClient, test_user):
    login = await client.post(
        "/api/v1/auth/login",
        json={"email": "test@example.com", "password": "testpassword123"},
    )
    tokens = login.json()

    response = await client.post(
        "/api/v1/auth/refresh",
        json={"refresh_token": tokens["refresh_token"]},
    )
    assert response.status_code == 200
    assert "access_token" in response.json()

    # An access token is not accepted as refresh token
    response = await client.post(
        "/api/v1/auth/refresh",
        json={"refresh_token": tokens["access_token"]},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_get_current_user(auth_client: AsyncClient):
    """Test getting current user profile."""
    response = await auth_client.get("/api/v1/auth/me")

    assert response.status_code == 200
    data = response.json()
    assert data["email"] == "test@example.com"


@pytest.mark.asyncio
async def test_protected_route_without_token(client: AsyncClient):
    """Test accessing protected route without token."""
    response = await client.get("/api/v1/auth/me")

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_create_admin_requires_setup_token(client: AsyncClient, monkeypatch):
    monkeypatch.setattr(settings, "SETUP_TOKEN", "secreto")
    payload = {
        "email": "boss@example.com",
        "password": "password123",
        "full_name": "Jefe",
    }

    response = await client.post(
        "/api/v1/setup/create-admin",
        json={**payload, "setup_token": "otro"},
    )
    assert response.status_code == 401

    response = await client.post(
        "/api/v1/setup/create-admin",
        json={**payload, "setup_token": "secreto"},
    )
    assert response.status_code == 201
    assert response.json()["role"] == "admin"

    # Only the first administrator can be created this way
    response = await client.post(
        "/api/v1/setup/create-admin",
        json={**payload, "email": "boss2@example.com", "setup_token": "secreto"},
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_change_password(auth_client: AsyncClient):
    response = await auth_client.post(
        "/api/v1/users/me/change-password",
        json={"current_password": "wrong", "new_password": "nuevaclave"},
    )
    assert response.status_code == 400

    response = await auth_client.post(
        "/api/v1/users/me/change-password",
        json={"current_password": "testpassword123", "new_password": "nuevaclave"},
    )
    assert response.status_code == 200

    response = await auth_client.post(
        "/api/v1/auth/login",
        json={"email": "test@example.com", "password": "nuevaclave"},
    )
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_user_admin_endpoints_require_admin(
    auth_client: AsyncClient,
    admin_headers,
    test_user,
):
    user_id = test_user.id

    response = await auth_client.get("/api/v1/users")
    assert response.status_code == 403

    response = await auth_client.get("/api/v1/users", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["total"] == 2

    response = await auth_client.patch(
        f"/api/v1/users/{user_id}",
        json={"role": "viewer"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["role"] == "viewer"


@pytest.mark.asyncio
async def test_viewer_cannot_write(client: AsyncClient, viewer_headers):
    response = await client.post(
        "/api/v1/customers",
        json={"business_name": "Cliente Nuevo"},
        headers=viewer_headers,
    )
    assert response.status_code == 403

    response = await client.get("/api/v1/customers", headers=viewer_headers)
    assert response.status_code == 200
