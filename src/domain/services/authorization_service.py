"""Authorization facade over the membership ledger.

Every predicate reads the membership afresh; nothing is cached between calls,
so a demotion is visible to the very next check.
"""

from collections.abc import Callable
from typing import Optional
from uuid import UUID

from core.exceptions import (
    InsufficientPermissionsError,
    NotAMemberError,
    ProjectNotFoundError,
    QuotaExceededError,
)
from core.retry import retry_transient
from domain.entities.project import Project, ProjectMember, ProjectRole, has_permission
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.quota_service import QuotaService


async def require_project(uow: IUnitOfWork, project_id: UUID) -> Project:
    """Load a project or raise ProjectNotFoundError."""
    project = await uow.projects.get(project_id)
    if not project:
        raise ProjectNotFoundError(str(project_id))
    return project


async def require_role(
    uow: IUnitOfWork,
    project_id: UUID,
    user_id: UUID,
    minimum: ProjectRole,
) -> ProjectMember:
    """Verify the user holds an active role of at least ``minimum``.

    Must run inside the caller's unit of work before any write.
    """
    member = await uow.projects.get_member(project_id, user_id)
    if not member or not member.is_active:
        raise NotAMemberError(str(project_id))
    if not has_permission(member.role, minimum):
        raise InsufficientPermissionsError(minimum.label)
    return member


class AuthorizationService:
    """Side-effect-free permission predicates for a user on a project."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        quota_service: Optional["QuotaService"] = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._quota = quota_service

    @retry_transient()
    async def role_of(self, user_id: UUID, project_id: UUID) -> ProjectRole | None:
        """Return the active role, or None when the user has no active membership."""
        async with self._uow_factory() as uow:
            member = await uow.projects.get_member(project_id, user_id)
            if not member or not member.is_active:
                return None
            return member.role

    async def can_view(self, user_id: UUID, project_id: UUID) -> bool:
        return has_permission(await self.role_of(user_id, project_id), ProjectRole.VIEWER)

    async def can_edit(self, user_id: UUID, project_id: UUID) -> bool:
        return has_permission(await self.role_of(user_id, project_id), ProjectRole.EDITOR)

    async def can_manage_team(self, user_id: UUID, project_id: UUID) -> bool:
        return has_permission(await self.role_of(user_id, project_id), ProjectRole.ADMIN)

    async def can_generate(self, user_id: UUID) -> bool:
        """True while the user still has AI generations left this period."""
        if self._quota is None:
            return False
        try:
            await self._quota.try_consume(user_id)
        except QuotaExceededError:
            return False
        return True

    async def permissions(self, user_id: UUID, project_id: UUID) -> dict[str, object]:
        """Evaluate every project predicate from a single membership read."""
        role = await self.role_of(user_id, project_id)
        return {
            "role": role.label if role else None,
            "can_view": has_permission(role, ProjectRole.VIEWER),
            "can_edit": has_permission(role, ProjectRole.EDITOR),
            "can_manage_team": has_permission(role, ProjectRole.ADMIN),
        }
