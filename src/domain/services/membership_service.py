"""Membership ledger: who belongs to a project and with which role."""

from collections.abc import Callable
from datetime import datetime
from typing import Optional
from uuid import UUID

import structlog

from core.exceptions import (
    ErrorCode,
    InsufficientPermissionsError,
    MemberNotFoundError,
    ValidationError,
)
from core.retry import retry_transient
from domain.entities.activity import Actions, ResourceTypes
from domain.entities.project import (
    ASSIGNABLE_ROLES,
    MembershipStatus,
    ProjectMember,
    ProjectRole,
)
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.activity_service import ActivityService
from domain.services.authorization_service import require_project, require_role

logger = structlog.get_logger()


def parse_assignable_role(role: ProjectRole | str) -> ProjectRole:
    """Coerce a role name into one an invitation or role change may grant."""
    if isinstance(role, str):
        try:
            role = ProjectRole.from_label(role)
        except KeyError:
            raise ValidationError(
                f"Unknown role '{role}'", field="role", error_code=ErrorCode.INVALID_ROLE
            ) from None
    if role not in ASSIGNABLE_ROLES:
        raise ValidationError(
            f"Role '{role.label}' cannot be granted", field="role", error_code=ErrorCode.INVALID_ROLE
        )
    return role


class MembershipService:
    """Service layer for project membership management."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        activity_service: Optional["ActivityService"] = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._activity = activity_service

    @retry_transient()
    async def list_active_members(self, project_id: UUID, user_id: UUID) -> list[ProjectMember]:
        """List active members ordered by join time. Requires view access."""
        async with self._uow_factory() as uow:
            await require_project(uow, project_id)
            await require_role(uow, project_id, user_id, ProjectRole.VIEWER)
            return await uow.projects.get_active_members(project_id)  # type: ignore[no-any-return]

    @retry_transient()
    async def role_of(self, user_id: UUID, project_id: UUID) -> ProjectRole | None:
        """Return the user's active role, or None."""
        async with self._uow_factory() as uow:
            member = await uow.projects.get_member(project_id, user_id)
            if not member or not member.is_active:
                return None
            return member.role

    async def set_role(
        self,
        actor_id: UUID,
        project_id: UUID,
        target_user_id: UUID,
        new_role: ProjectRole | str,
    ) -> ProjectMember:
        """Change a member's role. Requires Admin+.

        Raises:
            ProjectNotFoundError: If the project does not exist.
            NotAMemberError: If the actor has no active membership.
            InsufficientPermissionsError: If the actor is below Admin, targets
                themself, or targets the owner.
            ValidationError: If ``new_role`` is unknown or is owner.
            MemberNotFoundError: If the target has no active membership.
        """
        async with self._uow_factory() as uow:
            await require_project(uow, project_id)
            await require_role(uow, project_id, actor_id, ProjectRole.ADMIN)
            role = parse_assignable_role(new_role)
            target = await self._require_manageable_target(uow, project_id, actor_id, target_user_id)

            old_role = target.role
            target.role = role
            target.updated_at = datetime.utcnow()
            updated = await uow.projects.update_member(target)
            await uow.commit()

        logger.info(
            "member_role_updated",
            project_id=str(project_id),
            user_id=str(target_user_id),
            old_role=old_role.label,
            new_role=role.label,
        )
        if self._activity and old_role != role:
            await self._activity.record(
                project_id=project_id,
                actor_id=actor_id,
                action=Actions.ROLE_UPDATED,
                resource_type=ResourceTypes.TEAM_MEMBER,
                resource_id=target_user_id,
                metadata={"old_role": old_role.label, "new_role": role.label},
            )
        return updated

    async def deactivate(
        self,
        actor_id: UUID,
        project_id: UUID,
        target_user_id: UUID,
    ) -> ProjectMember:
        """Remove a member by marking the membership inactive. Requires Admin+.

        The row is kept so that history referencing the member stays intact.
        """
        async with self._uow_factory() as uow:
            await require_project(uow, project_id)
            await require_role(uow, project_id, actor_id, ProjectRole.ADMIN)
            target = await self._require_manageable_target(uow, project_id, actor_id, target_user_id)

            target.status = MembershipStatus.INACTIVE
            target.updated_at = datetime.utcnow()
            updated = await uow.projects.update_member(target)
            await uow.commit()

        logger.info(
            "member_deactivated",
            project_id=str(project_id),
            user_id=str(target_user_id),
            actor_id=str(actor_id),
        )
        if self._activity:
            await self._activity.record(
                project_id=project_id,
                actor_id=actor_id,
                action=Actions.REMOVED,
                resource_type=ResourceTypes.TEAM_MEMBER,
                resource_id=target_user_id,
                metadata={"role": updated.role.label},
            )
        return updated

    # --- Internal helpers ---

    async def _require_manageable_target(
        self,
        uow: IUnitOfWork,
        project_id: UUID,
        actor_id: UUID,
        target_user_id: UUID,
    ) -> ProjectMember:
        """Load the target membership, refusing self-management and the owner."""
        if target_user_id == actor_id:
            raise InsufficientPermissionsError(message="You cannot change your own membership")

        target = await uow.projects.get_member(project_id, target_user_id)
        if not target or not target.is_active:
            raise MemberNotFoundError(str(target_user_id))
        if target.role == ProjectRole.OWNER:
            raise InsufficientPermissionsError(
                message="The project owner cannot be modified or removed"
            )
        return target
