"""
SchemaJeli - Authentication Tests
=================================
Tests for authentication endpoints
"""

import pytest
from httpx import AsyncClient

from schemajeli.auth.jwt import create_access_token
from schemajeli.models import AuditLog

TEST_PASSWORD = "TestPassword123!"

AUTH = "/api/v1/auth"


class TestLogin:
    """로그인 엔드포인트 테스트"""

    @pytest.mark.asyncio
    async def test_login_with_username(self, client: AsyncClient, admin_user):
        response = await client.post(
            f"{AUTH}/login", json={"identifier": "admin", "password": TEST_PASSWORD}
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["user"]["username"] == "admin"
        assert data["user"]["role"] == "ADMIN"
        assert "passwordHash" not in data["user"]
        assert data["tokens"]["accessToken"]
        assert data["tokens"]["refreshToken"]
        assert data["tokens"]["tokenType"] == "bearer"
        assert data["tokens"]["expiresIn"] > 0

    @pytest.mark.asyncio
    async def test_login_with_email(self, client: AsyncClient, viewer_user):
        response = await client.post(
            f"{AUTH}/login", json={"identifier": "viewer@schemajeli.test", "password": TEST_PASSWORD}
        )

        assert response.status_code == 200
        assert response.json()["data"]["user"]["username"] == "viewer"

    @pytest.mark.asyncio
    async def test_login_updates_last_login(self, client: AsyncClient, db_session, viewer_user):
        assert viewer_user.last_login_at is None

        await client.post(f"{AUTH}/login", json={"identifier": "viewer", "password": TEST_PASSWORD})

        db_session.refresh(viewer_user)
        assert viewer_user.last_login_at is not None
        logs = db_session.query(AuditLog).filter(AuditLog.entity_id == viewer_user.id).all()
        assert any(log.changes == {"action": "login"} for log in logs)

    @pytest.mark.asyncio
    async def test_wrong_password(self, client: AsyncClient, admin_user):
        response = await client.post(
            f"{AUTH}/login", json={"identifier": "admin", "password": "wrong-password"}
        )

        assert response.status_code == 401
        assert response.json() == {
            "status": "error",
            "message": "Invalid credentials",
            "category": "auth",
        }

    @pytest.mark.asyncio
    async def test_unknown_user_same_message(self, client: AsyncClient):
        response = await client.post(
            f"{AUTH}/login", json={"identifier": "ghost", "password": TEST_PASSWORD}
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid credentials"

    @pytest.mark.asyncio
    async def test_inactive_user_cannot_login(self, client: AsyncClient, make_user):
        make_user("VIEWER", username="dormant", is_active=False)

        response = await client.post(
            f"{AUTH}/login", json={"identifier": "dormant", "password": TEST_PASSWORD}
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_missing_fields(self, client: AsyncClient):
        response = await client.post(f"{AUTH}/login", json={"identifier": "admin"})

        assert response.status_code == 400


class TestTokens:
    """토큰 갱신 / 현재 사용자"""

    @pytest.mark.asyncio
    async def test_refresh(self, client: AsyncClient, admin_user):
        login = await client.post(f"{AUTH}/login", json={"identifier": "admin", "password": TEST_PASSWORD})
        refresh_token = login.json()["data"]["tokens"]["refreshToken"]

        response = await client.post(f"{AUTH}/refresh", json={"refreshToken": refresh_token})

        assert response.status_code == 200
        access_token = response.json()["data"]["accessToken"]
        me = await client.get(f"{AUTH}/me", headers={"Authorization": f"Bearer {access_token}"})
        assert me.json()["data"]["username"] == "admin"

    @pytest.mark.asyncio
    async def test_refresh_rejects_access_token(self, client: AsyncClient, admin_user, admin_headers):
        access_token = admin_headers["Authorization"].split(" ", 1)[1]

        response = await client.post(f"{AUTH}/refresh", json={"refreshToken": access_token})

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid refresh token"

    @pytest.mark.asyncio
    async def test_me(self, client: AsyncClient, maintainer_headers):
        response = await client.get(f"{AUTH}/me", headers=maintainer_headers)

        assert response.status_code == 200
        assert response.json()["data"]["role"] == "MAINTAINER"
        assert response.json()["data"]["email"] == "maintainer@schemajeli.test"

    @pytest.mark.asyncio
    async def test_me_without_token(self, client: AsyncClient):
        response = await client.get(f"{AUTH}/me")

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_token_for_deleted_user(self, client: AsyncClient, db_session, settings, viewer_user, admin_user):
        from schemajeli.services.user_service import UserService

        token = create_access_token({"sub": str(viewer_user.id), "username": "viewer", "role": "VIEWER"})
        UserService(db_session, settings).soft_delete(viewer_user.id)

        response = await client.get(f"{AUTH}/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code in (401, 403)

    @pytest.mark.asyncio
    async def test_logout(self, client: AsyncClient, viewer_headers):
        response = await client.post(f"{AUTH}/logout", headers=viewer_headers)

        assert response.status_code == 200
        assert response.json()["message"] == "Logged out successfully"


class TestChangePassword:
    """비밀번호 변경"""

    @pytest.mark.asyncio
    async def test_change_password(self, client: AsyncClient, viewer_headers):
        response = await client.post(
            f"{AUTH}/change-password",
            json={"currentPassword": TEST_PASSWORD, "newPassword": "BrandNewPass456!"},
            headers=viewer_headers,
        )
        assert response.status_code == 200

        old = await client.post(f"{AUTH}/login", json={"identifier": "viewer", "password": TEST_PASSWORD})
        new = await client.post(f"{AUTH}/login", json={"identifier": "viewer", "password": "BrandNewPass456!"})
        assert old.status_code == 401
        assert new.status_code == 200

    @pytest.mark.asyncio
    async def test_wrong_current_password(self, client: AsyncClient, viewer_headers):
        response = await client.post(
            f"{AUTH}/change-password",
            json={"currentPassword": "nope", "newPassword": "BrandNewPass456!"},
            headers=viewer_headers,
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Current password is incorrect"

    @pytest.mark.asyncio
    async def test_short_new_password(self, client: AsyncClient, viewer_headers):
        response = await client.post(
            f"{AUTH}/change-password",
            json={"currentPassword": TEST_PASSWORD, "newPassword": "short"},
            headers=viewer_headers,
        )

        assert response.status_code == 400
