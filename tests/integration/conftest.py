"""Integration-test fixtures (requires a migrated PostgreSQL).

All integration tests share a single event loop so that the module-level
SQLAlchemy async engine pool (created at import time) remains valid
across the entire test session.
"""

import uuid

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.main import app
from src.um_common.database import async_session_factory
from src.um_common.errors import UserOperationError
from src.um_user.application.service import UsersService

ADMIN_PASSWORD = "AdminPass1"


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncClient:  # type: ignore[override]
    """Session-scoped async HTTP client; keeps the engine pool alive."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def admin_user() -> dict[str, object]:
    """Insert a throwaway admin straight through the service, delete it afterwards."""
    username = f"admin_{uuid.uuid4().hex[:8]}"
    service = UsersService()
    async with async_session_factory() as db:
        user = await service.create(db, username, ADMIN_PASSWORD, f"{username}@example.com", [])
    yield {"id": user.id, "username": username, "password": ADMIN_PASSWORD}
    async with async_session_factory() as db:
        try:
            await service.delete(db, user.id)  # type: ignore[arg-type]
        except UserOperationError:
            pass  # already removed by a test


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def auth_client(client: AsyncClient, admin_user: dict[str, object]) -> AsyncClient:
    """Authenticated client: logs the admin in and injects the Bearer token."""
    login_resp = await client.post("/api/v1/auth/login", json={
        "username": admin_user["username"],
        "password": admin_user["password"],
    })
    token = login_resp.json()["data"]["access_token"]
    client.headers.update({"Authorization": f"Bearer {token}"})
    return client
