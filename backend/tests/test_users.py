"""Tests for user profile endpoints."""

from __future__ import annotations

from typing import Any, cast
from uuid import uuid4

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement

from core import create_access_token, verify_password
from models import User


def _eq(column: Any, value: Any) -> ColumnElement[bool]:
    return cast(ColumnElement[bool], column == value)


def build_payload(full_name: str = "Test User") -> dict[str, str]:
    suffix = uuid4().hex[:8]
    return {
        "email": f"user_{suffix}@example.com",
        "fullName": full_name,
        "password": "Sup3rSecret!",
    }


async def register(async_client: AsyncClient, payload: dict[str, str]) -> dict[str, str]:
    response = await async_client.post("/api/auth/register", json=payload)
    assert response.status_code == 201
    return {"Authorization": f"Bearer {response.json()['token']}"}


async def load_user(db_session: AsyncSession, email: str) -> User:
    result = await db_session.execute(
        select(User).where(_eq(User.email, email)).execution_options(populate_existing=True)
    )
    return result.scalar_one()


@pytest.mark.asyncio
async def test_get_me_returns_profile_without_password(async_client: AsyncClient):
    payload = {"email": "a@x.com", "fullName": "Alice", "password": "pw1"}
    headers = await register(async_client, payload)

    response = await async_client.get("/api/me", headers=headers)
    assert response.status_code == 200
    body = response.json()
    assert body["email"] == "a@x.com"
    assert body["fullName"] == "Alice"
    assert body["image"] is None
    assert body["role"] is None
    assert "password" not in body
    assert "passwordHash" not in body
    assert "password_hash" not in body


@pytest.mark.asyncio
async def test_get_me_for_deleted_identity_returns_user_not_found(async_client: AsyncClient):
    headers = {"Authorization": f"Bearer {create_access_token(str(uuid4()))}"}

    response = await async_client.get("/api/me", headers=headers)
    assert response.status_code == 400
    assert response.json() == {"message": "User not found"}


@pytest.mark.asyncio
async def test_edit_me_with_wrong_password_changes_nothing(
    async_client: AsyncClient, db_session: AsyncSession
):
    payload = {"email": "a@x.com", "fullName": "Alice", "password": "pw1"}
    headers = await register(async_client, payload)
    before = await load_user(db_session, "a@x.com")
    original_hash = before.password_hash

    response = await async_client.put(
        "/api/me/edit",
        headers=headers,
        json={"currentPassword": "wrong", "newPassword": "pw2", "email": "b@x.com"},
    )
    assert response.status_code == 400
    assert response.json() == {"message": "Invalid current password"}

    after = await load_user(db_session, "a@x.com")
    assert after.password_hash == original_hash
    missing = await db_session.execute(select(User).where(_eq(User.email, "b@x.com")))
    assert missing.scalar_one_or_none() is None


@pytest.mark.asyncio
async def test_edit_me_changes_password(async_client: AsyncClient, db_session: AsyncSession):
    payload = build_payload()
    headers = await register(async_client, payload)

    response = await async_client.put(
        "/api/me/edit",
        headers=headers,
        json={"currentPassword": payload["password"], "newPassword": "N3wSecret!"},
    )
    assert response.status_code == 200
    assert response.json() == {"message": "Password and/or email changed successfully"}

    user = await load_user(db_session, payload["email"])
    assert verify_password("N3wSecret!", user.password_hash)
    assert not verify_password(payload["password"], user.password_hash)

    old_login = await async_client.post(
        "/api/auth/login",
        json={"email": payload["email"], "password": payload["password"]},
    )
    new_login = await async_client.post(
        "/api/auth/login",
        json={"email": payload["email"], "password": "N3wSecret!"},
    )
    assert old_login.status_code == 400
    assert new_login.status_code == 200


@pytest.mark.asyncio
async def test_edit_me_changes_email(async_client: AsyncClient):
    payload = build_payload()
    headers = await register(async_client, payload)

    response = await async_client.put(
        "/api/me/edit",
        headers=headers,
        json={"currentPassword": payload["password"], "email": "Renamed@Example.com"},
    )
    assert response.status_code == 200

    me = await async_client.get("/api/me", headers=headers)
    assert me.json()["email"] == "renamed@example.com"


@pytest.mark.asyncio
async def test_edit_me_treats_empty_new_password_as_absent(
    async_client: AsyncClient, db_session: AsyncSession
):
    payload = build_payload()
    headers = await register(async_client, payload)
    original_hash = (await load_user(db_session, payload["email"])).password_hash

    response = await async_client.put(
        "/api/me/edit",
        headers=headers,
        json={
            "currentPassword": payload["password"],
            "newPassword": "",
            "email": "moved@example.com",
        },
    )
    assert response.status_code == 200

    user = await load_user(db_session, "moved@example.com")
    assert user.password_hash == original_hash


@pytest.mark.asyncio
async def test_edit_me_with_only_empty_fields_is_rejected(async_client: AsyncClient):
    payload = build_payload()
    headers = await register(async_client, payload)

    response = await async_client.put(
        "/api/me/edit",
        headers=headers,
        json={"currentPassword": payload["password"], "newPassword": "", "email": ""},
    )
    assert response.status_code == 400
    assert "new password or an email" in response.json()["message"]


@pytest.mark.asyncio
async def test_edit_me_requires_new_password_or_email(async_client: AsyncClient):
    payload = build_payload()
    headers = await register(async_client, payload)

    response = await async_client.put(
        "/api/me/edit",
        headers=headers,
        json={"currentPassword": payload["password"]},
    )
    assert response.status_code == 400
    assert "new password or an email" in response.json()["message"]


@pytest.mark.asyncio
async def test_edit_me_requires_current_password(async_client: AsyncClient):
    headers = await register(async_client, build_payload())

    response = await async_client.put(
        "/api/me/edit",
        headers=headers,
        json={"newPassword": "N3wSecret!"},
    )
    assert response.status_code == 400
    assert "currentPassword" in response.json()["message"]


@pytest.mark.asyncio
async def test_edit_me_rejects_email_of_another_account(async_client: AsyncClient):
    taken = build_payload()
    await register(async_client, taken)
    payload = build_payload()
    headers = await register(async_client, payload)

    response = await async_client.put(
        "/api/me/edit",
        headers=headers,
        json={"currentPassword": payload["password"], "email": taken["email"]},
    )
    assert response.status_code == 400
    assert response.json() == {"message": "Email is already in use"}


@pytest.mark.asyncio
async def test_edit_me_requires_token(async_client: AsyncClient):
    response = await async_client.put(
        "/api/me/edit",
        json={"currentPassword": "x", "newPassword": "y"},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_list_users_returns_public_profiles(async_client: AsyncClient):
    first = build_payload("First")
    second = build_payload("Second")
    headers = await register(async_client, first)
    await register(async_client, second)

    response = await async_client.get("/api/users", headers=headers)
    assert response.status_code == 200
    body = response.json()
    assert {user["email"] for user in body} == {first["email"], second["email"]}
    assert all("passwordHash" not in user for user in body)


@pytest.mark.asyncio
async def test_list_users_requires_token(async_client: AsyncClient):
    response = await async_client.get("/api/users")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_get_user_by_id(async_client: AsyncClient, db_session: AsyncSession):
    payload = build_payload("Lookup")
    headers = await register(async_client, payload)
    user = await load_user(db_session, payload["email"])

    response = await async_client.get(f"/api/users/{user.id}", headers=headers)
    assert response.status_code == 200
    assert response.json()["id"] == user.id
    assert response.json()["fullName"] == "Lookup"


@pytest.mark.asyncio
async def test_get_user_by_unknown_id_returns_404(async_client: AsyncClient):
    headers = await register(async_client, build_payload())

    response = await async_client.get(f"/api/users/{uuid4()}", headers=headers)
    assert response.status_code == 404
    assert response.json() == {"message": "User not found"}
