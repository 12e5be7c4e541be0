# -*- coding: utf-8 -*-
"""
Users Router Tests
사용자 관리 API 테스트
"""
from uuid import uuid4

import pytest
from httpx import AsyncClient

USERS = "/api/v1/users"


def new_user_payload(**overrides):
    payload = {
        "username": "jdoe",
        "email": "jdoe@schemajeli.io",
        "fullName": "Jane Doe",
        "password": "Sup3rSecret!",
    }
    payload.update(overrides)
    return payload


class TestUsersRouter:
    """Users API 테스트"""

    @pytest.mark.asyncio
    async def test_create_user_defaults_to_viewer(self, client: AsyncClient, admin_headers):
        response = await client.post(f"{USERS}/", json=new_user_payload(), headers=admin_headers)

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["username"] == "jdoe"
        assert data["role"] == "VIEWER"
        assert data["isActive"] is True
        assert "password" not in data
        assert "passwordHash" not in data

    @pytest.mark.asyncio
    async def test_editor_role_alias(self, client: AsyncClient, admin_headers):
        response = await client.post(
            f"{USERS}/", json=new_user_payload(role="EDITOR"), headers=admin_headers
        )

        assert response.status_code == 201
        assert response.json()["data"]["role"] == "MAINTAINER"

    @pytest.mark.asyncio
    async def test_unknown_role(self, client: AsyncClient, admin_headers):
        response = await client.post(
            f"{USERS}/", json=new_user_payload(role="OWNER"), headers=admin_headers
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_duplicate_email(self, client: AsyncClient, admin_headers):
        await client.post(f"{USERS}/", json=new_user_payload(), headers=admin_headers)

        response = await client.post(
            f"{USERS}/", json=new_user_payload(username="other"), headers=admin_headers
        )

        assert response.status_code == 409
        assert response.json()["message"] == "User with this email already exists"

    @pytest.mark.asyncio
    async def test_invalid_email(self, client: AsyncClient, admin_headers):
        response = await client.post(
            f"{USERS}/", json=new_user_payload(email="not-an-email"), headers=admin_headers
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_list_users(self, client: AsyncClient, admin_headers, viewer_user, maintainer_user):
        response = await client.get(f"{USERS}/", headers=admin_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["pagination"]["total"] == 3
        assert [u["username"] for u in body["data"]] == ["admin", "maintainer", "viewer"]

    @pytest.mark.asyncio
    async def test_list_filter_by_role(self, client: AsyncClient, admin_headers, viewer_user, maintainer_user):
        response = await client.get(f"{USERS}/?role=editor", headers=admin_headers)

        assert [u["username"] for u in response.json()["data"]] == ["maintainer"]

    @pytest.mark.asyncio
    async def test_non_admin_forbidden(self, client: AsyncClient, maintainer_headers):
        response = await client.get(f"{USERS}/", headers=maintainer_headers)

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_get_missing_user(self, client: AsyncClient, admin_headers):
        response = await client.get(f"{USERS}/{uuid4()}", headers=admin_headers)

        assert response.status_code == 404
        assert response.json()["message"] == "User not found"

    @pytest.mark.asyncio
    async def test_update_role_and_deactivate(self, client: AsyncClient, admin_headers, viewer_user):
        response = await client.put(
            f"{USERS}/{viewer_user.id}",
            json={"role": "MAINTAINER", "isActive": False},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["data"]["role"] == "MAINTAINER"
        assert response.json()["data"]["isActive"] is False

    @pytest.mark.asyncio
    async def test_reset_password(self, client: AsyncClient, admin_headers, viewer_user):
        await client.put(
            f"{USERS}/{viewer_user.id}", json={"password": "AnotherPass99"}, headers=admin_headers
        )

        response = await client.post(
            "/api/v1/auth/login", json={"identifier": "viewer", "password": "AnotherPass99"}
        )
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_delete_and_restore(self, client: AsyncClient, admin_headers, viewer_user):
        deleted = await client.delete(f"{USERS}/{viewer_user.id}", headers=admin_headers)

        assert deleted.status_code == 200
        assert deleted.json()["data"]["isActive"] is False
        assert deleted.json()["data"]["deletedAt"] is not None

        listing = await client.get(f"{USERS}/", headers=admin_headers)
        assert "viewer" not in [u["username"] for u in listing.json()["data"]]

        restored = await client.post(f"{USERS}/{viewer_user.id}/restore", headers=admin_headers)
        assert restored.status_code == 200
        assert restored.json()["data"]["isActive"] is True

    @pytest.mark.asyncio
    async def test_username_reusable_after_delete(self, client: AsyncClient, admin_headers, viewer_user):
        await client.delete(f"{USERS}/{viewer_user.id}", headers=admin_headers)

        response = await client.post(
            f"{USERS}/",
            json=new_user_payload(username="viewer", email="viewer2@schemajeli.io"),
            headers=admin_headers,
        )

        assert response.status_code == 201

    @pytest.mark.asyncio
    async def test_stats(self, client: AsyncClient, admin_headers, viewer_user):
        response = await client.get(f"{USERS}/stats", headers=admin_headers)

        data = response.json()["data"]
        assert data["total"] == 2
        assert data["active"] == 2
        assert {"role": "VIEWER", "count": 1} in data["byRole"]
