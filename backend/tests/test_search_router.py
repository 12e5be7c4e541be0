# -*- coding: utf-8 -*-
"""
Search Router Tests
통합 검색 API 테스트
"""
import pytest
from httpx import AsyncClient

SEARCH = "/api/v1/search"


class TestSearchRouter:
    """Search API 테스트"""

    @pytest.mark.asyncio
    async def test_search_all(self, client: AsyncClient, viewer_headers, table):
        response = await client.get(f"{SEARCH}/?q=acct", headers=viewer_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["query"] == "acct"
        assert [t["name"] for t in data["tables"]] == ["ACCT_MASTER"]
        assert data["servers"] == []
        assert data["totalResults"] == 1

    @pytest.mark.asyncio
    async def test_missing_query(self, client: AsyncClient, viewer_headers):
        response = await client.get(f"{SEARCH}/?q=%20%20", headers=viewer_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "Search query is required"

    @pytest.mark.asyncio
    async def test_search_by_type(self, client: AsyncClient, viewer_headers, server, database):
        response = await client.get(f"{SEARCH}/databases?q=order", headers=viewer_headers)

        assert response.status_code == 200
        assert [d["name"] for d in response.json()["data"]] == ["sales"]

    @pytest.mark.asyncio
    async def test_singular_alias(self, client: AsyncClient, viewer_headers, server):
        response = await client.get(f"{SEARCH}/server?q=seoul", headers=viewer_headers)

        assert [s["name"] for s in response.json()["data"]] == ["prod-db-01"]

    @pytest.mark.asyncio
    async def test_unsupported_type(self, client: AsyncClient, viewer_headers):
        response = await client.get(f"{SEARCH}/users?q=admin", headers=viewer_headers)

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_deleted_rows_excluded(self, client: AsyncClient, viewer_headers, admin_headers, server):
        await client.delete(f"/api/v1/servers/{server.id}", headers=admin_headers)

        response = await client.get(f"{SEARCH}/servers?q=prod", headers=viewer_headers)

        assert response.json()["data"] == []

    @pytest.mark.asyncio
    async def test_index_listing(self, client: AsyncClient, viewer_headers, server):
        response = await client.get(f"{SEARCH}/index?q=seoul&entityType=servers", headers=viewer_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["pagination"]["total"] == 1
        assert body["data"][0]["entityId"] == str(server.id)
        assert body["data"][0]["metadata"]["label"] == "prod-db-01"

    @pytest.mark.asyncio
    async def test_requires_auth(self, client: AsyncClient):
        response = await client.get(f"{SEARCH}/?q=x")

        assert response.status_code == 401
