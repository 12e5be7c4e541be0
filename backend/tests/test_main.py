"""
SchemaJeli - Application Tests
==============================
Root, health, error envelope and startup tests
"""
import pytest
from httpx import ASGITransport, AsyncClient

from schemajeli.config import Settings
from schemajeli.database import Store
from schemajeli.main import create_app
from schemajeli.repositories import UserRepository


class TestBasicEndpoints:
    """기본 엔드포인트"""

    @pytest.mark.asyncio
    async def test_root(self, client: AsyncClient):
        response = await client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["environment"] == "test"

    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "checks": {"database": "ok"}}

    @pytest.mark.asyncio
    async def test_health_without_store(self, settings):
        app = create_app(settings=settings, store=Store("sqlite://"))

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/health")

        assert response.json()["status"] == "unhealthy"

    @pytest.mark.asyncio
    async def test_unknown_route(self, client: AsyncClient):
        response = await client.get("/api/v1/nowhere")

        assert response.status_code == 404
        body = response.json()
        assert body["status"] == "error"
        assert body["category"] == "not_found"

    @pytest.mark.asyncio
    async def test_method_not_allowed(self, client: AsyncClient):
        response = await client.patch("/health")

        assert response.status_code == 405
        assert response.json()["status"] == "error"


class TestProductionErrors:
    """운영 환경에서는 기술적 세부사항 숨김"""

    @pytest.mark.asyncio
    async def test_no_category_in_production(self, store, settings):
        prod = settings.model_copy(update={"environment": "production"})
        app = create_app(settings=prod, store=store)

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/api/v1/servers/")

        assert response.status_code == 401
        assert response.json() == {"status": "error", "message": "Authentication required"}


class TestLifespan:
    """시작 시 스키마 생성 및 관리자 시딩"""

    @pytest.mark.asyncio
    async def test_startup_seeds_admin(self):
        settings = Settings(
            environment="test",
            database_url="sqlite://",
            use_alembic_migration=False,
            metrics_enabled=False,
            admin_username="root",
            admin_email="root@schemajeli.test",
        )
        store = Store(settings.database_url)
        app = create_app(settings=settings, store=store)

        async with app.router.lifespan_context(app):
            with store.session() as db:
                admin = UserRepository(db).get_by_username("root")
                assert admin is not None
                assert admin.role == "ADMIN"

        assert not store.is_connected

    def test_seed_is_idempotent(self, store, settings):
        from schemajeli.init_db import ensure_admin_user

        with store.session() as db:
            first = ensure_admin_user(db, settings)
            second = ensure_admin_user(db, settings)

        assert first.id == second.id
