# -*- coding: utf-8 -*-
"""
Audit Router Tests
감사 로그 API 테스트
"""
import pytest
from httpx import AsyncClient

AUDIT = "/api/v1/audit"


class TestAuditRouter:
    """Audit API 테스트"""

    @pytest.mark.asyncio
    async def test_mutations_are_logged(self, client: AsyncClient, admin_headers, admin_user):
        created = await client.post(
            "/api/v1/servers/", json={"name": "audited", "rdbmsType": "ORACLE"}, headers=admin_headers
        )
        server_id = created.json()["data"]["id"]
        await client.put(f"/api/v1/servers/{server_id}", json={"location": "Busan"}, headers=admin_headers)
        await client.delete(f"/api/v1/servers/{server_id}", headers=admin_headers)

        response = await client.get(f"{AUDIT}/SERVER/{server_id}", headers=admin_headers)

        assert response.status_code == 200
        logs = response.json()["data"]
        assert [log["action"] for log in logs] == ["CREATE", "UPDATE", "DELETE"]
        assert all(log["userId"] == str(admin_user.id) for log in logs)
        assert logs[1]["changes"]["after"]["location"] == "Busan"
        assert logs[0]["userAgent"]

    @pytest.mark.asyncio
    async def test_list_with_filters(self, client: AsyncClient, admin_headers, server):
        response = await client.get(f"{AUDIT}/?entityType=SERVER&action=CREATE", headers=admin_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["pagination"]["total"] == 1
        assert body["data"][0]["entityId"] == str(server.id)

    @pytest.mark.asyncio
    async def test_invalid_action_filter(self, client: AsyncClient, admin_headers):
        response = await client.get(f"{AUDIT}/?action=PURGE", headers=admin_headers)

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_password_masked(self, client: AsyncClient, admin_headers):
        created = await client.post(
            "/api/v1/users/",
            json={
                "username": "masked",
                "email": "masked@schemajeli.io",
                "fullName": "Masked User",
                "password": "PlainText123",
            },
            headers=admin_headers,
        )
        user_id = created.json()["data"]["id"]

        response = await client.get(f"{AUDIT}/USER/{user_id}", headers=admin_headers)

        snapshot = response.json()["data"][0]["changes"]["created"]
        assert snapshot["password_hash"] == "***MASKED***"
        assert "PlainText123" not in response.text

    @pytest.mark.asyncio
    async def test_stats(self, client: AsyncClient, admin_headers, server, database):
        response = await client.get(f"{AUDIT}/stats", headers=admin_headers)

        data = response.json()["data"]
        assert data["total"] == 3
        assert {"entityType": "SERVER", "count": 1} in data["byEntityType"]
        assert data["byAction"] == [{"action": "CREATE", "count": 3}]

    @pytest.mark.asyncio
    async def test_admin_only(self, client: AsyncClient, maintainer_headers):
        response = await client.get(f"{AUDIT}/", headers=maintainer_headers)

        assert response.status_code == 403
