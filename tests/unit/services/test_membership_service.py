"""Unit tests for MembershipService."""

from typing import Any
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest

from core.exceptions import (
    ErrorCode,
    InsufficientPermissionsError,
    MemberNotFoundError,
    NotAMemberError,
    ProjectNotFoundError,
    ValidationError,
)
from domain.entities.activity import Actions
from domain.entities.project import MembershipStatus, Project, ProjectMember, ProjectRole
from domain.services.membership_service import MembershipService, parse_assignable_role
from tests.unit.conftest import FakeUnitOfWork, echo, member_of


@pytest.fixture
def activity() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def service(uow: FakeUnitOfWork, activity: AsyncMock) -> MembershipService:
    return MembershipService(lambda: uow, activity_service=activity)


@pytest.fixture
def target_id() -> UUID:
    return uuid4()


def _ledger(uow: FakeUnitOfWork, *members: ProjectMember) -> None:
    by_user = {m.user_id: m for m in members}

    async def get_member(project_id: UUID, user_id: UUID) -> Any:
        return by_user.get(user_id)

    uow.projects.get_member.side_effect = get_member
    uow.projects.update_member.side_effect = echo


class TestParseAssignableRole:
    @pytest.mark.parametrize("label", ["admin", "editor", "viewer", " Editor "])
    def test_accepts_assignable_labels(self, label: str) -> None:
        assert parse_assignable_role(label).label == label.strip().lower()

    def test_rejects_owner(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            parse_assignable_role("owner")
        assert exc_info.value.error_code == ErrorCode.INVALID_ROLE

    def test_rejects_unknown(self) -> None:
        with pytest.raises(ValidationError):
            parse_assignable_role("superuser")


class TestListActiveMembers:
    @pytest.mark.asyncio
    async def test_requires_membership(
        self,
        service: MembershipService,
        uow: FakeUnitOfWork,
        project: Project,
        user_id: UUID,
    ) -> None:
        uow.projects.get.return_value = project
        uow.projects.get_member.return_value = None

        with pytest.raises(NotAMemberError):
            await service.list_active_members(project.id, user_id)

    @pytest.mark.asyncio
    async def test_returns_members(
        self,
        service: MembershipService,
        uow: FakeUnitOfWork,
        project: Project,
        user_id: UUID,
    ) -> None:
        members = [member_of(project.id, user_id, ProjectRole.VIEWER)]
        uow.projects.get.return_value = project
        uow.projects.get_member.return_value = members[0]
        uow.projects.get_active_members.return_value = members

        assert await service.list_active_members(project.id, user_id) == members


class TestSetRole:
    @pytest.mark.asyncio
    async def test_admin_changes_editor_to_viewer(
        self,
        service: MembershipService,
        uow: FakeUnitOfWork,
        activity: AsyncMock,
        project: Project,
        actor_id: UUID,
        target_id: UUID,
    ) -> None:
        uow.projects.get.return_value = project
        _ledger(
            uow,
            member_of(project.id, actor_id, ProjectRole.ADMIN),
            member_of(project.id, target_id, ProjectRole.EDITOR),
        )

        result = await service.set_role(actor_id, project.id, target_id, "viewer")

        assert result.role == ProjectRole.VIEWER
        assert uow.committed
        activity.record.assert_awaited_once()
        kwargs = activity.record.await_args.kwargs
        assert kwargs["action"] == Actions.ROLE_UPDATED
        assert kwargs["metadata"] == {"old_role": "editor", "new_role": "viewer"}

    @pytest.mark.asyncio
    async def test_same_role_writes_no_activity(
        self,
        service: MembershipService,
        uow: FakeUnitOfWork,
        activity: AsyncMock,
        project: Project,
        actor_id: UUID,
        target_id: UUID,
    ) -> None:
        uow.projects.get.return_value = project
        _ledger(
            uow,
            member_of(project.id, actor_id, ProjectRole.OWNER),
            member_of(project.id, target_id, ProjectRole.EDITOR),
        )

        await service.set_role(actor_id, project.id, target_id, ProjectRole.EDITOR)

        activity.record.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_editor_cannot_change_roles(
        self,
        service: MembershipService,
        uow: FakeUnitOfWork,
        project: Project,
        actor_id: UUID,
        target_id: UUID,
    ) -> None:
        uow.projects.get.return_value = project
        _ledger(
            uow,
            member_of(project.id, actor_id, ProjectRole.EDITOR),
            member_of(project.id, target_id, ProjectRole.VIEWER),
        )

        with pytest.raises(InsufficientPermissionsError):
            await service.set_role(actor_id, project.id, target_id, "editor")
        uow.projects.update_member.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_cannot_grant_owner(
        self,
        service: MembershipService,
        uow: FakeUnitOfWork,
        project: Project,
        actor_id: UUID,
        target_id: UUID,
    ) -> None:
        uow.projects.get.return_value = project
        _ledger(
            uow,
            member_of(project.id, actor_id, ProjectRole.OWNER),
            member_of(project.id, target_id, ProjectRole.ADMIN),
        )

        with pytest.raises(ValidationError):
            await service.set_role(actor_id, project.id, target_id, "owner")

    @pytest.mark.asyncio
    async def test_cannot_change_own_role(
        self,
        service: MembershipService,
        uow: FakeUnitOfWork,
        project: Project,
        actor_id: UUID,
    ) -> None:
        uow.projects.get.return_value = project
        _ledger(uow, member_of(project.id, actor_id, ProjectRole.ADMIN))

        with pytest.raises(InsufficientPermissionsError):
            await service.set_role(actor_id, project.id, actor_id, "viewer")

    @pytest.mark.asyncio
    async def test_owner_is_untouchable(
        self,
        service: MembershipService,
        uow: FakeUnitOfWork,
        project: Project,
        actor_id: UUID,
        target_id: UUID,
    ) -> None:
        uow.projects.get.return_value = project
        _ledger(
            uow,
            member_of(project.id, actor_id, ProjectRole.ADMIN),
            member_of(project.id, target_id, ProjectRole.OWNER),
        )

        with pytest.raises(InsufficientPermissionsError):
            await service.set_role(actor_id, project.id, target_id, "viewer")
        assert not uow.committed

    @pytest.mark.asyncio
    async def test_unknown_target_raises(
        self,
        service: MembershipService,
        uow: FakeUnitOfWork,
        project: Project,
        actor_id: UUID,
        target_id: UUID,
    ) -> None:
        uow.projects.get.return_value = project
        _ledger(uow, member_of(project.id, actor_id, ProjectRole.ADMIN))

        with pytest.raises(MemberNotFoundError):
            await service.set_role(actor_id, project.id, target_id, "viewer")

    @pytest.mark.asyncio
    async def test_missing_project_raises(
        self, service: MembershipService, uow: FakeUnitOfWork, actor_id: UUID, target_id: UUID
    ) -> None:
        uow.projects.get.return_value = None

        with pytest.raises(ProjectNotFoundError):
            await service.set_role(actor_id, uuid4(), target_id, "viewer")


class TestDeactivate:
    @pytest.mark.asyncio
    async def test_marks_member_inactive(
        self,
        service: MembershipService,
        uow: FakeUnitOfWork,
        activity: AsyncMock,
        project: Project,
        actor_id: UUID,
        target_id: UUID,
    ) -> None:
        uow.projects.get.return_value = project
        _ledger(
            uow,
            member_of(project.id, actor_id, ProjectRole.ADMIN),
            member_of(project.id, target_id, ProjectRole.EDITOR),
        )

        result = await service.deactivate(actor_id, project.id, target_id)

        assert result.status == MembershipStatus.INACTIVE
        assert not result.is_active
        assert uow.committed
        assert activity.record.await_args.kwargs["action"] == Actions.REMOVED

    @pytest.mark.asyncio
    async def test_already_inactive_is_not_found(
        self,
        service: MembershipService,
        uow: FakeUnitOfWork,
        project: Project,
        actor_id: UUID,
        target_id: UUID,
    ) -> None:
        gone = member_of(project.id, target_id, ProjectRole.EDITOR)
        gone.status = MembershipStatus.INACTIVE
        uow.projects.get.return_value = project
        _ledger(uow, member_of(project.id, actor_id, ProjectRole.ADMIN), gone)

        with pytest.raises(MemberNotFoundError):
            await service.deactivate(actor_id, project.id, target_id)

    @pytest.mark.asyncio
    async def test_cannot_remove_owner(
        self,
        service: MembershipService,
        uow: FakeUnitOfWork,
        project: Project,
        actor_id: UUID,
        target_id: UUID,
    ) -> None:
        uow.projects.get.return_value = project
        _ledger(
            uow,
            member_of(project.id, actor_id, ProjectRole.ADMIN),
            member_of(project.id, target_id, ProjectRole.OWNER),
        )

        with pytest.raises(InsufficientPermissionsError):
            await service.deactivate(actor_id, project.id, target_id)

    @pytest.mark.asyncio
    async def test_viewer_cannot_remove(
        self,
        service: MembershipService,
        uow: FakeUnitOfWork,
        project: Project,
        actor_id: UUID,
        target_id: UUID,
    ) -> None:
        uow.projects.get.return_value = project
        _ledger(
            uow,
            member_of(project.id, actor_id, ProjectRole.VIEWER),
            member_of(project.id, target_id, ProjectRole.VIEWER),
        )

        with pytest.raises(InsufficientPermissionsError):
            await service.deactivate(actor_id, project.id, target_id)
