"""Tests for the liveness and readiness endpoints."""

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession


class TestLiveness:
    async def test_reports_healthy_with_version(self, client: AsyncClient) -> None:
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == "1.0.0"
        assert {"timestamp", "environment"} <= data.keys()
        assert data["database"] is None

    async def test_needs_no_token(self, client: AsyncClient) -> None:
        response = await client.get("/health")

        assert response.status_code == 200
        assert "WWW-Authenticate" not in response.headers

    async def test_carries_security_headers_and_request_id(self, client: AsyncClient) -> None:
        response = await client.get("/health", headers={"X-Request-ID": "req-42"})

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Request-ID"] == "req-42"


class TestReadiness:
    async def test_database_reachable(self, db_session: AsyncSession) -> None:
        from httpx import ASGITransport

        from infrastructure.database.session import get_async_session
        from main import create_app

        app = create_app()

        async def override_session() -> AsyncSession:
            return db_session

        app.dependency_overrides[get_async_session] = override_session
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
            response = await c.get("/health/detailed")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "healthy"
