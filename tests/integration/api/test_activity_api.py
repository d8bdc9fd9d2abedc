"""Integration tests for the Activity API."""

from typing import Any
from uuid import uuid4

import pytest
from httpx import AsyncClient

from infrastructure.auth.provider import TokenUser


@pytest.fixture
async def project_id(authenticated_client: AsyncClient) -> str:
    response = await authenticated_client.post(
        "/api/v1/projects", json={"title": "Spring Campaign"}
    )
    return str(response.json()["data"]["id"])


class TestProjectFeed:
    async def test_creation_is_recorded(
        self, authenticated_client: AsyncClient, project_id: str, test_user: TokenUser
    ) -> None:
        response = await authenticated_client.get(f"/api/v1/projects/{project_id}/activity")

        assert response.status_code == 200
        body = response.json()
        [entry] = body["data"]
        assert entry["action"] == "created"
        assert entry["resource_type"] == "project"
        assert entry["resource_id"] == project_id
        assert entry["actor_id"] == str(test_user.id)
        assert entry["metadata"] == {"title": "Spring Campaign"}
        assert body["meta"] == {"limit": 50, "offset": 0}

    async def test_update_records_field_diff(
        self, authenticated_client: AsyncClient, project_id: str
    ) -> None:
        await authenticated_client.patch(
            f"/api/v1/projects/{project_id}", json={"title": "Autumn Campaign"}
        )

        response = await authenticated_client.get(f"/api/v1/projects/{project_id}/activity")

        latest = response.json()["data"][0]
        assert latest["action"] == "updated"
        assert latest["metadata"]["changes"] == {
            "title": {"old": "Spring Campaign", "new": "Autumn Campaign"}
        }

    async def test_unchanged_update_records_nothing(
        self, authenticated_client: AsyncClient, project_id: str
    ) -> None:
        await authenticated_client.patch(
            f"/api/v1/projects/{project_id}", json={"title": "Spring Campaign"}
        )

        response = await authenticated_client.get(f"/api/v1/projects/{project_id}/activity")

        assert [e["action"] for e in response.json()["data"]] == ["created"]

    async def test_pagination(self, authenticated_client: AsyncClient, project_id: str) -> None:
        for n in range(3):
            await authenticated_client.patch(
                f"/api/v1/projects/{project_id}", json={"title": f"Title {n}"}
            )

        first = await authenticated_client.get(
            f"/api/v1/projects/{project_id}/activity", params={"limit": 2}
        )
        rest = await authenticated_client.get(
            f"/api/v1/projects/{project_id}/activity", params={"limit": 2, "offset": 2}
        )

        assert len(first.json()["data"]) == 2
        assert [e["action"] for e in rest.json()["data"]] == ["updated", "created"]

    @pytest.mark.parametrize("params", [{"limit": 0}, {"limit": 101}, {"offset": -1}])
    async def test_bad_paging(
        self, authenticated_client: AsyncClient, project_id: str, params: dict[str, int]
    ) -> None:
        response = await authenticated_client.get(
            f"/api/v1/projects/{project_id}/activity", params=params
        )

        assert response.status_code == 422

    async def test_outsider_is_refused(
        self, authenticated_client: AsyncClient, client_for: Any, project_id: str
    ) -> None:
        outsider = TokenUser(id=uuid4(), email="outsider@example.com")

        async with client_for(outsider) as c:
            response = await c.get(f"/api/v1/projects/{project_id}/activity")

        assert response.status_code == 403

    async def test_unknown_project(self, authenticated_client: AsyncClient) -> None:
        response = await authenticated_client.get(f"/api/v1/projects/{uuid4()}/activity")

        assert response.status_code == 404


class TestResourceHistory:
    async def test_article_history(
        self, authenticated_client: AsyncClient, project_id: str
    ) -> None:
        created = await authenticated_client.post(
            f"/api/v1/projects/{project_id}/articles", json={"title": "Draft"}
        )
        article_id = created.json()["data"]["id"]
        await authenticated_client.patch(
            f"/api/v1/articles/{article_id}", json={"content": "Body"}
        )
        await authenticated_client.post(
            f"/api/v1/projects/{project_id}/articles", json={"title": "Other"}
        )

        response = await authenticated_client.get(
            f"/api/v1/projects/{project_id}/activity/article/{article_id}"
        )

        assert response.status_code == 200
        entries = response.json()["data"]
        assert [e["action"] for e in entries] == ["updated", "created"]
        assert all(e["resource_id"] == article_id for e in entries)
        assert entries[0]["metadata"]["fields"] == ["content"]
