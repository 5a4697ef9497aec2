"""
Auth endpoint tests — registration, login, bearer-token identity.
"""
from datetime import timedelta

import pytest
from httpx import AsyncClient

from newsportal.security import create_access_token


async def _register(client: AsyncClient, email="reader@example.com", password="secret123", name="Reader"):
    return await client.post("/api/v1/auth/register", json={
        "email": email, "password": password, "name": name,
    })


@pytest.mark.asyncio
async def test_register_returns_user_and_token(async_client: AsyncClient):
    resp = await _register(async_client)
    assert resp.status_code == 201
    data = resp.json()
    assert data["user"]["email"] == "reader@example.com"
    assert data["user"]["name"] == "Reader"
    assert "password" not in data["user"]
    assert data["token"]


@pytest.mark.asyncio
async def test_register_duplicate_email_returns_409(async_client: AsyncClient):
    assert (await _register(async_client)).status_code == 201
    resp = await _register(async_client, email="Reader@Example.com", name="Other")
    assert resp.status_code == 409
    assert "email" in resp.json()["detail"]


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [
    {"email": "not-an-email", "password": "secret123", "name": "Bad"},
    {"email": "short@example.com", "password": "123", "name": "Short"},
    {"email": "noname@example.com", "password": "secret123"},
])
async def test_register_validation(async_client: AsyncClient, payload):
    resp = await async_client.post("/api/v1/auth/register", json=payload)
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_login_and_me(async_client: AsyncClient):
    await _register(async_client)
    resp = await async_client.post("/api/v1/auth/login", json={
        "email": "reader@example.com", "password": "secret123",
    })
    assert resp.status_code == 200
    token = resp.json()["token"]

    me = await async_client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["user"]["email"] == "reader@example.com"


@pytest.mark.asyncio
async def test_login_bad_credentials_returns_401(async_client: AsyncClient):
    await _register(async_client)
    wrong_password = await async_client.post("/api/v1/auth/login", json={
        "email": "reader@example.com", "password": "nope-nope",
    })
    unknown_user = await async_client.post("/api/v1/auth/login", json={
        "email": "ghost@example.com", "password": "secret123",
    })
    assert wrong_password.status_code == 401
    assert unknown_user.status_code == 401


@pytest.mark.asyncio
async def test_me_requires_token(async_client: AsyncClient):
    resp = await async_client.get("/api/v1/auth/me")
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_me_rejects_garbage_and_expired_tokens(async_client: AsyncClient):
    user_id = (await _register(async_client)).json()["user"]["id"]
    expired = create_access_token(user_id, expires_delta=timedelta(minutes=-5))

    for token in ["not-a-jwt", expired]:
        resp = await async_client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401


@pytest.mark.asyncio
async def test_token_for_deleted_user_is_rejected(async_client: AsyncClient):
    token = create_access_token(4242)
    resp = await async_client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
