"""Integration tests for the Invitation API.

Every scenario runs with at least two identities against one database: the
project owner who sends the invitation and the invitee who answers it.
"""

from datetime import datetime, timedelta
from typing import Any
from uuid import UUID, uuid4

import pytest
from httpx import AsyncClient
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.auth.provider import TokenUser
from infrastructure.database.models import InvitationModel


@pytest.fixture
def invitee() -> TokenUser:
    return TokenUser(id=uuid4(), email="writer@example.com", display_name="Writer")


@pytest.fixture
def stranger() -> TokenUser:
    return TokenUser(id=uuid4(), email="stranger@example.com")


@pytest.fixture
async def project_id(authenticated_client: AsyncClient) -> str:
    response = await authenticated_client.post(
        "/api/v1/projects", json={"title": "Spring Campaign"}
    )
    assert response.status_code == 201
    return str(response.json()["data"]["id"])


async def _invite(
    client: AsyncClient, project_id: str, email: str, role: str = "editor"
) -> dict[str, Any]:
    response = await client.post(
        f"/api/v1/projects/{project_id}/invitations", json={"email": email, "role": role}
    )
    assert response.status_code == 201, response.text
    return response.json()


async def _expire(session_factory: async_sessionmaker[AsyncSession], invitation_id: str) -> None:
    async with session_factory() as session:
        await session.execute(
            update(InvitationModel)
            .where(InvitationModel.id == UUID(invitation_id))
            .values(expires_at=datetime.utcnow() - timedelta(minutes=1))
        )
        await session.commit()


class TestCreateInvitation:
    async def test_returns_token_once_and_normalizes_email(
        self, authenticated_client: AsyncClient, project_id: str, test_user: TokenUser
    ) -> None:
        body = await _invite(authenticated_client, project_id, "  Writer@Example.COM ")

        assert body["token"]
        data = body["data"]
        assert data["email"] == "writer@example.com"
        assert data["role"] == "editor"
        assert data["status"] == "pending"
        assert data["invited_by"] == str(test_user.id)
        assert "token" not in data
        assert "token_hash" not in data

    async def test_defaults_to_viewer(
        self, authenticated_client: AsyncClient, project_id: str
    ) -> None:
        response = await authenticated_client.post(
            f"/api/v1/projects/{project_id}/invitations", json={"email": "v@example.com"}
        )

        assert response.json()["data"]["role"] == "viewer"

    async def test_malformed_email(
        self, authenticated_client: AsyncClient, project_id: str
    ) -> None:
        response = await authenticated_client.post(
            f"/api/v1/projects/{project_id}/invitations", json={"email": "not-an-email"}
        )

        assert response.status_code == 400
        assert response.json()["details"] == {"field": "email"}

    async def test_owner_role_not_grantable(
        self, authenticated_client: AsyncClient, project_id: str
    ) -> None:
        response = await authenticated_client.post(
            f"/api/v1/projects/{project_id}/invitations",
            json={"email": "boss@example.com", "role": "owner"},
        )

        assert response.status_code == 422

    async def test_duplicate_pending(
        self, authenticated_client: AsyncClient, project_id: str
    ) -> None:
        await _invite(authenticated_client, project_id, "writer@example.com")

        response = await authenticated_client.post(
            f"/api/v1/projects/{project_id}/invitations",
            json={"email": "WRITER@example.com", "role": "viewer"},
        )

        assert response.status_code == 409
        assert response.json()["error_code"] == "DUPLICATE_INVITATION"

    async def test_reinvite_after_expiry(
        self,
        authenticated_client: AsyncClient,
        project_id: str,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> None:
        first = await _invite(authenticated_client, project_id, "writer@example.com")
        await _expire(session_factory, first["data"]["id"])

        second = await _invite(authenticated_client, project_id, "writer@example.com")

        assert second["data"]["id"] != first["data"]["id"]

    async def test_inviting_an_active_member(
        self, authenticated_client: AsyncClient, project_id: str
    ) -> None:
        response = await authenticated_client.post(
            f"/api/v1/projects/{project_id}/invitations", json={"email": "test@example.com"}
        )

        assert response.status_code == 409
        assert response.json()["error_code"] == "ALREADY_A_MEMBER"

    async def test_non_admin_cannot_invite(
        self,
        authenticated_client: AsyncClient,
        client_for: Any,
        project_id: str,
        invitee: TokenUser,
    ) -> None:
        created = await _invite(authenticated_client, project_id, invitee.email, "editor")

        async with client_for(invitee) as c:
            await c.post("/api/v1/invitations/accept", json={"token": created["token"]})
            response = await c.post(
                f"/api/v1/projects/{project_id}/invitations", json={"email": "x@example.com"}
            )

        assert response.status_code == 403
        assert response.json()["error_code"] == "INSUFFICIENT_PERMISSIONS"

    async def test_outsider_cannot_invite(
        self,
        authenticated_client: AsyncClient,
        client_for: Any,
        project_id: str,
        stranger: TokenUser,
    ) -> None:
        async with client_for(stranger) as c:
            response = await c.post(
                f"/api/v1/projects/{project_id}/invitations", json={"email": "x@example.com"}
            )

        assert response.status_code == 403
        assert response.json()["error_code"] == "NOT_A_MEMBER"


class TestListInvitations:
    async def test_project_list_shows_pending_only(
        self, authenticated_client: AsyncClient, project_id: str
    ) -> None:
        kept = await _invite(authenticated_client, project_id, "a@example.com")
        dropped = await _invite(authenticated_client, project_id, "b@example.com")
        await authenticated_client.delete(
            f"/api/v1/projects/{project_id}/invitations/{dropped['data']['id']}"
        )

        response = await authenticated_client.get(f"/api/v1/projects/{project_id}/invitations")

        assert response.status_code == 200
        body = response.json()
        assert [i["id"] for i in body["data"]] == [kept["data"]["id"]]
        assert body["meta"]["total"] == 1

    async def test_my_pending(
        self,
        authenticated_client: AsyncClient,
        client_for: Any,
        project_id: str,
        invitee: TokenUser,
    ) -> None:
        await _invite(authenticated_client, project_id, invitee.email)
        await _invite(authenticated_client, project_id, "someone-else@example.com")

        async with client_for(invitee) as c:
            response = await c.get("/api/v1/invitations/pending")

        assert response.status_code == 200
        [invitation] = response.json()["data"]
        assert invitation["email"] == invitee.email
        assert invitation["project_id"] == project_id


class TestAcceptInvitation:
    async def test_accept_by_token(
        self,
        authenticated_client: AsyncClient,
        client_for: Any,
        project_id: str,
        invitee: TokenUser,
        test_user: TokenUser,
    ) -> None:
        created = await _invite(authenticated_client, project_id, invitee.email, "editor")

        async with client_for(invitee) as c:
            response = await c.post(
                "/api/v1/invitations/accept", json={"token": created["token"]}
            )
            permissions = await c.get(f"/api/v1/projects/{project_id}/permissions")

        assert response.status_code == 200
        assert response.json()["project_id"] == project_id
        assert response.json()["role"] == "editor"
        assert permissions.json()["role"] == "editor"

        members = await authenticated_client.get(f"/api/v1/projects/{project_id}/members")
        joined = {m["user_id"]: m for m in members.json()["data"]}
        assert joined[str(invitee.id)]["invited_by"] == str(test_user.id)

    async def test_accept_by_id(
        self,
        authenticated_client: AsyncClient,
        client_for: Any,
        project_id: str,
        invitee: TokenUser,
    ) -> None:
        created = await _invite(authenticated_client, project_id, invitee.email, "viewer")

        async with client_for(invitee) as c:
            response = await c.post(f"/api/v1/invitations/{created['data']['id']}/accept")

        assert response.status_code == 200
        assert response.json()["role"] == "viewer"

    async def test_second_accept_does_not_duplicate_membership(
        self,
        authenticated_client: AsyncClient,
        client_for: Any,
        project_id: str,
        invitee: TokenUser,
    ) -> None:
        created = await _invite(authenticated_client, project_id, invitee.email)

        async with client_for(invitee) as c:
            first = await c.post("/api/v1/invitations/accept", json={"token": created["token"]})
            second = await c.post("/api/v1/invitations/accept", json={"token": created["token"]})

        assert first.status_code == 200
        assert second.status_code == 409
        assert second.json()["error_code"] == "ALREADY_A_MEMBER"

        members = await authenticated_client.get(f"/api/v1/projects/{project_id}/members")
        assert len(members.json()["data"]) == 2

    async def test_wrong_email(
        self,
        authenticated_client: AsyncClient,
        client_for: Any,
        project_id: str,
        invitee: TokenUser,
        stranger: TokenUser,
    ) -> None:
        created = await _invite(authenticated_client, project_id, invitee.email)

        async with client_for(stranger) as c:
            response = await c.post(
                "/api/v1/invitations/accept", json={"token": created["token"]}
            )

        assert response.status_code == 403
        assert response.json()["error_code"] == "INVITATION_EMAIL_MISMATCH"

    async def test_unknown_token(
        self, authenticated_client: AsyncClient, client_for: Any, invitee: TokenUser
    ) -> None:
        async with client_for(invitee) as c:
            response = await c.post("/api/v1/invitations/accept", json={"token": "nope"})

        assert response.status_code == 404
        assert response.json()["error_code"] == "INVITATION_NOT_FOUND"

    async def test_expired(
        self,
        authenticated_client: AsyncClient,
        client_for: Any,
        project_id: str,
        invitee: TokenUser,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> None:
        created = await _invite(authenticated_client, project_id, invitee.email)
        await _expire(session_factory, created["data"]["id"])

        async with client_for(invitee) as c:
            response = await c.post(
                "/api/v1/invitations/accept", json={"token": created["token"]}
            )
            pending = await c.get("/api/v1/invitations/pending")

        assert response.status_code == 400
        assert response.json()["error_code"] == "INVITATION_EXPIRED"
        assert pending.json()["data"] == []

    async def test_cancelled_token_stops_working(
        self,
        authenticated_client: AsyncClient,
        client_for: Any,
        project_id: str,
        invitee: TokenUser,
    ) -> None:
        created = await _invite(authenticated_client, project_id, invitee.email)
        cancelled = await authenticated_client.delete(
            f"/api/v1/projects/{project_id}/invitations/{created['data']['id']}"
        )
        assert cancelled.status_code == 200
        assert cancelled.json()["data"]["status"] == "cancelled"

        async with client_for(invitee) as c:
            response = await c.post(
                "/api/v1/invitations/accept", json={"token": created["token"]}
            )

        assert response.status_code == 404


class TestDeclineInvitation:
    async def test_decline_keeps_row_and_frees_slot(
        self,
        authenticated_client: AsyncClient,
        client_for: Any,
        project_id: str,
        invitee: TokenUser,
    ) -> None:
        created = await _invite(authenticated_client, project_id, invitee.email)

        async with client_for(invitee) as c:
            response = await c.post(f"/api/v1/invitations/{created['data']['id']}/decline")
            again = await c.post(f"/api/v1/invitations/{created['data']['id']}/decline")

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "declined"
        assert again.status_code == 404

        # The address can be invited again
        await _invite(authenticated_client, project_id, invitee.email)

    async def test_decline_someone_elses(
        self,
        authenticated_client: AsyncClient,
        client_for: Any,
        project_id: str,
        invitee: TokenUser,
        stranger: TokenUser,
    ) -> None:
        created = await _invite(authenticated_client, project_id, invitee.email)

        async with client_for(stranger) as c:
            response = await c.post(f"/api/v1/invitations/{created['data']['id']}/decline")

        assert response.status_code == 403

    async def test_decline_after_accept(
        self,
        authenticated_client: AsyncClient,
        client_for: Any,
        project_id: str,
        invitee: TokenUser,
    ) -> None:
        created = await _invite(authenticated_client, project_id, invitee.email)

        async with client_for(invitee) as c:
            await c.post("/api/v1/invitations/accept", json={"token": created["token"]})
            response = await c.post(f"/api/v1/invitations/{created['data']['id']}/decline")

        assert response.status_code == 400
        assert response.json()["error_code"] == "INVITATION_ALREADY_ACCEPTED"


class TestTeamLifecycle:
    async def test_reinvite_of_member_fails_and_demotion_revokes_edit(
        self,
        authenticated_client: AsyncClient,
        client_for: Any,
        project_id: str,
        invitee: TokenUser,
    ) -> None:
        created = await _invite(authenticated_client, project_id, invitee.email, "editor")

        async with client_for(invitee) as c:
            await c.post("/api/v1/invitations/accept", json={"token": created["token"]})
            assert (await c.get(f"/api/v1/projects/{project_id}/permissions")).json()[
                "can_edit"
            ] is True

            again = await authenticated_client.post(
                f"/api/v1/projects/{project_id}/invitations",
                json={"email": invitee.email, "role": "admin"},
            )
            assert again.status_code == 409
            assert again.json()["error_code"] == "ALREADY_A_MEMBER"

            demoted = await authenticated_client.patch(
                f"/api/v1/projects/{project_id}/members/{invitee.id}", json={"role": "viewer"}
            )
            assert demoted.status_code == 200

            flags = (await c.get(f"/api/v1/projects/{project_id}/permissions")).json()
            write = await c.post(
                f"/api/v1/projects/{project_id}/articles", json={"title": "Too late"}
            )

        assert flags["can_edit"] is False
        assert flags["can_view"] is True
        assert write.status_code == 403

        members = await authenticated_client.get(f"/api/v1/projects/{project_id}/members")
        owners = [m for m in members.json()["data"] if m["role"] == "owner"]
        assert len(owners) == 1

    async def test_invite_join_promote_remove_rejoin(
        self,
        authenticated_client: AsyncClient,
        client_for: Any,
        project_id: str,
        invitee: TokenUser,
        test_user: TokenUser,
    ) -> None:
        members_url = f"/api/v1/projects/{project_id}/members"
        first = await _invite(authenticated_client, project_id, invitee.email, "viewer")

        async with client_for(invitee) as c:
            joined = await c.post("/api/v1/invitations/accept", json={"token": first["token"]})
            assert joined.status_code == 200

            promoted = await authenticated_client.patch(
                f"{members_url}/{invitee.id}", json={"role": "editor"}
            )
            assert promoted.json()["data"]["role"] == "editor"
            assert (await c.get(f"/api/v1/projects/{project_id}/permissions")).json()[
                "can_edit"
            ] is True

            removed = await authenticated_client.delete(f"{members_url}/{invitee.id}")
            assert removed.status_code == 204
            assert (await c.get(f"/api/v1/projects/{project_id}")).status_code == 403

            second = await _invite(authenticated_client, project_id, invitee.email, "admin")
            rejoined = await c.post(
                "/api/v1/invitations/accept", json={"token": second["token"]}
            )
            assert rejoined.status_code == 200
            assert rejoined.json()["role"] == "admin"

        members = await authenticated_client.get(members_url)
        roles = {m["user_id"]: m["role"] for m in members.json()["data"]}
        assert roles == {str(test_user.id): "owner", str(invitee.id): "admin"}

        feed = await authenticated_client.get(f"/api/v1/projects/{project_id}/activity")
        actions = [entry["action"] for entry in feed.json()["data"]]
        assert actions == [
            "joined",
            "invited",
            "removed",
            "role_updated",
            "joined",
            "invited",
            "created",
        ]
