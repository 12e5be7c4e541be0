"""
SchemaJeli - Test Configuration
================================
pytest fixtures and configuration for backend tests
Uses an in-memory SQLite Store (partial unique indexes and FKs enabled)
"""

import os
from typing import AsyncGenerator, Callable, Dict

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set test environment before importing app modules
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["METRICS_ENABLED"] = "false"

from schemajeli.auth.jwt import create_access_token
from schemajeli.config import Settings
from schemajeli.database import Store, get_db
from schemajeli.main import create_app
from schemajeli.models import Database, Server, Table, User
from schemajeli.services.database_service import DatabaseService
from schemajeli.services.server_service import ServerService
from schemajeli.services.table_service import TableService
from schemajeli.services.user_service import UserService

TEST_PASSWORD = "TestPassword123!"


@pytest.fixture
def settings() -> Settings:
    """Test settings (create_all instead of Alembic, no metrics)"""
    return Settings(
        environment="test",
        database_url="sqlite://",
        use_alembic_migration=False,
        metrics_enabled=False,
        audit_log_durability="durable",
        search_index_durability="best_effort",
        element_restore_policy="append",
    )


@pytest.fixture
def store(settings: Settings):
    """Fresh in-memory store per test"""
    store = Store(settings.database_url).connect()
    store.create_all()
    yield store
    store.drop_all()
    store.disconnect()


@pytest.fixture
def db_session(store: Store):
    """Database session shared by the test and the app under test"""
    session = store.new_session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def app(settings: Settings, store: Store, db_session):
    app = create_app(settings=settings, store=store)

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client for testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ============ Users / Tokens ============


@pytest.fixture
def make_user(db_session, settings: Settings) -> Callable[..., User]:
    """User factory: make_user("ADMIN", username="root")"""
    counter = {"n": 0}

    def _make_user(role: str = "VIEWER", **overrides) -> User:
        counter["n"] += 1
        data = {
            "username": f"user{counter['n']}",
            "email": f"user{counter['n']}@schemajeli.test",
            "full_name": f"Test User {counter['n']}",
            "password": TEST_PASSWORD,
            "role": role,
        }
        data.update(overrides)
        return UserService(db_session, settings).create(data)

    return _make_user


def token_headers(user: User) -> Dict[str, str]:
    token = create_access_token({"sub": str(user.id), "username": user.username, "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_user(make_user) -> User:
    return make_user("ADMIN", username="admin", email="admin@schemajeli.test")


@pytest.fixture
def maintainer_user(make_user) -> User:
    return make_user("MAINTAINER", username="maintainer", email="maintainer@schemajeli.test")


@pytest.fixture
def viewer_user(make_user) -> User:
    return make_user("VIEWER", username="viewer", email="viewer@schemajeli.test")


@pytest.fixture
def admin_headers(admin_user: User) -> Dict[str, str]:
    return token_headers(admin_user)


@pytest.fixture
def maintainer_headers(maintainer_user: User) -> Dict[str, str]:
    return token_headers(maintainer_user)


@pytest.fixture
def viewer_headers(viewer_user: User) -> Dict[str, str]:
    return token_headers(viewer_user)


# ============ Catalog data ============


@pytest.fixture
def server(db_session, settings: Settings) -> Server:
    return ServerService(db_session, settings).create(
        {"name": "prod-db-01", "host": "10.0.0.1", "port": 5432, "rdbms_type": "POSTGRESQL", "location": "Seoul"}
    )


@pytest.fixture
def database(db_session, settings: Settings, server: Server) -> Database:
    return DatabaseService(db_session, settings).create(
        {"server_id": server.id, "name": "sales", "purpose": "Order processing"}
    )


@pytest.fixture
def table(db_session, settings: Settings, database: Database) -> Table:
    return TableService(db_session, settings).create(
        {"database_id": database.id, "name": "ACCT_MASTER", "description": "Account master"}
    )
