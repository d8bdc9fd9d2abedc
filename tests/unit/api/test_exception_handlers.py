"""Unit tests for exception handlers."""

import json
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException

from api.exception_handlers import setup_exception_handlers
from core.exceptions import (
    InsufficientPermissionsError,
    ProjectNotFoundError,
    QuotaExceededError,
    TransientStoreError,
)


class _Body(BaseModel):
    title: str = Field(..., min_length=1)


def _app() -> FastAPI:
    app = FastAPI()
    setup_exception_handlers(app)

    @app.get("/project")
    async def _project() -> None:
        raise ProjectNotFoundError("p-1")

    @app.get("/forbidden")
    async def _forbidden() -> None:
        raise InsufficientPermissionsError("admin")

    @app.get("/quota")
    async def _quota() -> None:
        raise QuotaExceededError(5, 5)

    @app.get("/store")
    async def _store() -> None:
        raise TransientStoreError()

    @app.get("/http")
    async def _http() -> None:
        raise HTTPException(status_code=405, detail="Method Not Allowed")

    @app.post("/validate")
    async def _validate(body: _Body) -> dict[str, bool]:
        return {"ok": True}

    return app


async def _call(method: str, path: str, **kwargs: object) -> object:
    transport = ASGITransport(app=_app())
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        return await c.request(method, path, **kwargs)  # type: ignore[arg-type]


class TestExceptionHandlers:
    @pytest.mark.asyncio
    async def test_not_found_uses_error_envelope(self) -> None:
        response = await _call("GET", "/project")

        assert response.status_code == 404
        body = response.json()
        assert body["error_code"] == "PROJECT_NOT_FOUND"
        assert body["details"] == {"project_id": "p-1"}

    @pytest.mark.asyncio
    async def test_permission_error_names_required_role(self) -> None:
        response = await _call("GET", "/forbidden")

        assert response.status_code == 403
        assert response.json()["details"]["required_role"] == "admin"

    @pytest.mark.asyncio
    async def test_quota_exceeded_is_429(self) -> None:
        response = await _call("GET", "/quota")

        assert response.status_code == 429
        assert response.json()["error_code"] == "QUOTA_EXCEEDED"

    @pytest.mark.asyncio
    async def test_transient_store_error_sets_retry_after(self) -> None:
        response = await _call("GET", "/store")

        assert response.status_code == 503
        assert response.headers["retry-after"] == "1"
        assert response.json()["error_code"] == "TRANSIENT_STORE_ERROR"

    @pytest.mark.asyncio
    async def test_http_exception(self) -> None:
        response = await _call("GET", "/http")

        assert response.status_code == 405
        assert response.json() == {
            "error_code": "HTTP_ERROR",
            "message": "Method Not Allowed",
            "details": None,
        }

    @pytest.mark.asyncio
    async def test_validation_error_lists_fields(self) -> None:
        response = await _call("POST", "/validate", json={"title": ""})

        assert response.status_code == 422
        body = response.json()
        assert body["error_code"] == "VALIDATION_ERROR"
        assert body["details"][0]["field"] == "body.title"

    @pytest.mark.asyncio
    async def test_unhandled_exception_returns_500_with_request_id(self) -> None:
        app = _app()
        handler = app.exception_handlers[Exception]
        request = MagicMock()
        request.state.request_id = "req-42"

        response = await handler(request, RuntimeError("boom"))  # type: ignore[misc]

        assert response.status_code == 500
        body = json.loads(response.body)
        assert body["error_code"] == "INTERNAL_ERROR"
        assert body["details"]["request_id"] == "req-42"
