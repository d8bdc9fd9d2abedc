"""Integration tests for the Project and membership API."""

from typing import Any
from uuid import uuid4

import pytest
from httpx import AsyncClient

from infrastructure.auth.provider import TokenUser

BASE = "/api/v1/projects"


async def _create_project(client: AsyncClient, title: str = "Spring Campaign") -> dict[str, Any]:
    response = await client.post(BASE, json={"title": title, "description": "Landing pages"})
    assert response.status_code == 201
    return response.json()["data"]


async def _join(
    owner: AsyncClient, invitee: AsyncClient, project_id: str, email: str, role: str
) -> None:
    """Invite ``email`` with ``role`` and accept as the invitee."""
    created = await owner.post(
        f"{BASE}/{project_id}/invitations", json={"email": email, "role": role}
    )
    assert created.status_code == 201
    accepted = await invitee.post(
        "/api/v1/invitations/accept", json={"token": created.json()["token"]}
    )
    assert accepted.status_code == 200


@pytest.fixture
def editor_user() -> TokenUser:
    return TokenUser(id=uuid4(), email="editor@example.com", display_name="Eddie")


@pytest.fixture
def outsider_user() -> TokenUser:
    return TokenUser(id=uuid4(), email="outsider@example.com")


class TestProjectCrud:
    async def test_create_makes_caller_owner(
        self, authenticated_client: AsyncClient, test_user: TokenUser
    ) -> None:
        project = await _create_project(authenticated_client, "  Spring Campaign  ")

        assert project["title"] == "Spring Campaign"
        assert project["owner_id"] == str(test_user.id)

        members = await authenticated_client.get(f"{BASE}/{project['id']}/members")
        assert members.status_code == 200
        [owner] = members.json()["data"]
        assert owner["user_id"] == str(test_user.id)
        assert owner["role"] == "owner"
        assert owner["status"] == "active"

    async def test_list_returns_only_my_projects(
        self, authenticated_client: AsyncClient, client_for: Any, outsider_user: TokenUser
    ) -> None:
        await _create_project(authenticated_client, "Mine")
        async with client_for(outsider_user) as outsider:
            await _create_project(outsider, "Theirs")

        response = await authenticated_client.get(BASE)

        assert response.status_code == 200
        body = response.json()
        assert [p["title"] for p in body["data"]] == ["Mine"]
        assert body["meta"]["total"] == 1

    async def test_blank_title_rejected(self, authenticated_client: AsyncClient) -> None:
        response = await authenticated_client.post(BASE, json={"title": "   "})

        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    async def test_get_and_update(self, authenticated_client: AsyncClient) -> None:
        project = await _create_project(authenticated_client)

        fetched = await authenticated_client.get(f"{BASE}/{project['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["data"]["id"] == project["id"]

        updated = await authenticated_client.patch(
            f"{BASE}/{project['id']}", json={"title": "Autumn Campaign"}
        )
        assert updated.status_code == 200
        assert updated.json()["data"]["title"] == "Autumn Campaign"
        assert updated.json()["data"]["description"] == "Landing pages"

    async def test_unknown_project_is_404(self, authenticated_client: AsyncClient) -> None:
        response = await authenticated_client.get(f"{BASE}/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["error_code"] == "PROJECT_NOT_FOUND"

    async def test_outsider_cannot_read(
        self, authenticated_client: AsyncClient, client_for: Any, outsider_user: TokenUser
    ) -> None:
        project = await _create_project(authenticated_client)

        async with client_for(outsider_user) as outsider:
            response = await outsider.get(f"{BASE}/{project['id']}")

        assert response.status_code == 403
        assert response.json()["error_code"] == "NOT_A_MEMBER"

    async def test_delete_by_owner(self, authenticated_client: AsyncClient) -> None:
        project = await _create_project(authenticated_client)

        response = await authenticated_client.delete(f"{BASE}/{project['id']}")
        assert response.status_code == 204

        gone = await authenticated_client.get(f"{BASE}/{project['id']}")
        assert gone.status_code == 404

    async def test_delete_removes_articles(self, authenticated_client: AsyncClient) -> None:
        project = await _create_project(authenticated_client)
        article = await authenticated_client.post(
            f"{BASE}/{project['id']}/articles", json={"title": "Draft"}
        )
        article_id = article.json()["data"]["id"]

        await authenticated_client.delete(f"{BASE}/{project['id']}")

        response = await authenticated_client.get(f"/api/v1/articles/{article_id}")
        assert response.status_code == 404


class TestPermissions:
    async def test_owner_flags(self, authenticated_client: AsyncClient) -> None:
        project = await _create_project(authenticated_client)

        response = await authenticated_client.get(f"{BASE}/{project['id']}/permissions")

        assert response.status_code == 200
        assert response.json() == {
            "role": "owner",
            "can_view": True,
            "can_edit": True,
            "can_manage_team": True,
            "can_generate": True,
        }

    async def test_editor_flags(
        self, authenticated_client: AsyncClient, client_for: Any, editor_user: TokenUser
    ) -> None:
        project = await _create_project(authenticated_client)

        async with client_for(editor_user) as editor:
            await _join(
                authenticated_client, editor, project["id"], editor_user.email, "editor"
            )
            response = await editor.get(f"{BASE}/{project['id']}/permissions")

        flags = response.json()
        assert flags["role"] == "editor"
        assert flags["can_edit"] is True
        assert flags["can_manage_team"] is False

    async def test_non_member_gets_all_false(
        self, authenticated_client: AsyncClient, client_for: Any, outsider_user: TokenUser
    ) -> None:
        project = await _create_project(authenticated_client)

        async with client_for(outsider_user) as outsider:
            response = await outsider.get(f"{BASE}/{project['id']}/permissions")

        assert response.status_code == 200
        flags = response.json()
        assert flags["role"] is None
        assert not any(flags[name] for name in ("can_view", "can_edit", "can_manage_team"))
        # Quota is per user, not per project
        assert flags["can_generate"] is True


class TestMembers:
    async def test_editor_cannot_update_or_delete_project(
        self, authenticated_client: AsyncClient, client_for: Any, editor_user: TokenUser
    ) -> None:
        project = await _create_project(authenticated_client)

        async with client_for(editor_user) as editor:
            await _join(
                authenticated_client, editor, project["id"], editor_user.email, "editor"
            )
            patched = await editor.patch(f"{BASE}/{project['id']}", json={"title": "Mine now"})
            deleted = await editor.delete(f"{BASE}/{project['id']}")

        assert patched.status_code == 403
        assert patched.json()["details"]["required_role"] == "admin"
        assert deleted.status_code == 403
        assert deleted.json()["details"]["required_role"] == "owner"

    async def test_change_role_and_remove(
        self, authenticated_client: AsyncClient, client_for: Any, editor_user: TokenUser
    ) -> None:
        project = await _create_project(authenticated_client)
        members_url = f"{BASE}/{project['id']}/members"

        async with client_for(editor_user) as editor:
            await _join(
                authenticated_client, editor, project["id"], editor_user.email, "editor"
            )

            promoted = await authenticated_client.patch(
                f"{members_url}/{editor_user.id}", json={"role": "admin"}
            )
            assert promoted.status_code == 200
            assert promoted.json()["data"]["role"] == "admin"

            removed = await authenticated_client.delete(f"{members_url}/{editor_user.id}")
            assert removed.status_code == 204

            locked_out = await editor.get(f"{BASE}/{project['id']}")
            assert locked_out.status_code == 403

        remaining = await authenticated_client.get(members_url)
        assert [m["role"] for m in remaining.json()["data"]] == ["owner"]

    async def test_owner_cannot_be_demoted(
        self,
        authenticated_client: AsyncClient,
        client_for: Any,
        editor_user: TokenUser,
        test_user: TokenUser,
    ) -> None:
        project = await _create_project(authenticated_client)

        async with client_for(editor_user) as editor:
            await _join(authenticated_client, editor, project["id"], editor_user.email, "admin")
            response = await editor.patch(
                f"{BASE}/{project['id']}/members/{test_user.id}", json={"role": "viewer"}
            )

        assert response.status_code == 403
        assert response.json()["error_code"] == "INSUFFICIENT_PERMISSIONS"

    async def test_cannot_grant_owner(
        self, authenticated_client: AsyncClient, client_for: Any, editor_user: TokenUser
    ) -> None:
        project = await _create_project(authenticated_client)

        async with client_for(editor_user) as editor:
            await _join(
                authenticated_client, editor, project["id"], editor_user.email, "editor"
            )

        response = await authenticated_client.patch(
            f"{BASE}/{project['id']}/members/{editor_user.id}", json={"role": "owner"}
        )

        assert response.status_code == 422

    async def test_removing_unknown_member_is_404(
        self, authenticated_client: AsyncClient
    ) -> None:
        project = await _create_project(authenticated_client)

        response = await authenticated_client.delete(
            f"{BASE}/{project['id']}/members/{uuid4()}"
        )

        assert response.status_code == 404
        assert response.json()["error_code"] == "MEMBER_NOT_FOUND"
