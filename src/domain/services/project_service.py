"""Project service layer with business logic."""

from collections.abc import Callable
from datetime import datetime
from typing import Optional
from uuid import UUID

import structlog

from core.exceptions import ValidationError
from core.retry import retry_transient
from domain.entities.activity import Actions, ResourceTypes
from domain.entities.project import (
    PROJECT_DESCRIPTION_MAX_LENGTH,
    PROJECT_TITLE_MAX_LENGTH,
    Project,
    ProjectMember,
    ProjectRole,
)
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.activity_service import ActivityService
from domain.services.authorization_service import require_project, require_role

logger = structlog.get_logger()


def _clean_title(title: str) -> str:
    cleaned = title.strip()
    if not cleaned:
        raise ValidationError("Title must not be empty", field="title")
    if len(cleaned) > PROJECT_TITLE_MAX_LENGTH:
        raise ValidationError(
            f"Title must be at most {PROJECT_TITLE_MAX_LENGTH} characters", field="title"
        )
    return cleaned


def _clean_description(description: str | None) -> str | None:
    if description is None:
        return None
    if len(description) > PROJECT_DESCRIPTION_MAX_LENGTH:
        raise ValidationError(
            f"Description must be at most {PROJECT_DESCRIPTION_MAX_LENGTH} characters",
            field="description",
        )
    return description


class ProjectService:
    """Service layer for Project business logic."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        activity_service: Optional["ActivityService"] = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._activity = activity_service

    @retry_transient()
    async def list_for_user(self, user_id: UUID) -> list[Project]:
        """Get all projects the user actively belongs to, newest first."""
        async with self._uow_factory() as uow:
            return await uow.projects.get_all_for_user(user_id)  # type: ignore[no-any-return]

    @retry_transient()
    async def get(self, project_id: UUID, user_id: UUID) -> Project:
        """Get a project by ID, verifying the user can view it."""
        async with self._uow_factory() as uow:
            project = await require_project(uow, project_id)
            await require_role(uow, project_id, user_id, ProjectRole.VIEWER)
            return project

    async def create(
        self,
        user_id: UUID,
        title: str,
        description: str | None = None,
    ) -> Project:
        """Create a project and add the creator as its Owner."""
        project = Project(
            title=_clean_title(title),
            description=_clean_description(description),
            owner_id=user_id,
        )

        async with self._uow_factory() as uow:
            created = await uow.projects.create(project)
            await uow.projects.add_member(
                ProjectMember(
                    project_id=created.id,
                    user_id=user_id,
                    role=ProjectRole.OWNER,
                )
            )
            await uow.commit()

        if self._activity:
            await self._activity.record(
                project_id=created.id,
                actor_id=user_id,
                action=Actions.CREATED,
                resource_type=ResourceTypes.PROJECT,
                resource_id=created.id,
                metadata={"title": created.title},
            )
        return created

    async def update(
        self,
        project_id: UUID,
        user_id: UUID,
        title: str | None = None,
        description: str | None = None,
    ) -> Project:
        """Update a project. Requires Admin+ role."""
        async with self._uow_factory() as uow:
            project = await require_project(uow, project_id)
            await require_role(uow, project_id, user_id, ProjectRole.ADMIN)

            old_state = {"title": project.title, "description": project.description}

            if title is not None:
                project.title = _clean_title(title)
            if description is not None:
                project.description = _clean_description(description)

            project.updated_at = datetime.utcnow()
            updated = await uow.projects.update(project)
            await uow.commit()

        changes = ActivityService.compute_diff(
            old_state, {"title": updated.title, "description": updated.description}
        )
        if self._activity and changes:
            await self._activity.record(
                project_id=project_id,
                actor_id=user_id,
                action=Actions.UPDATED,
                resource_type=ResourceTypes.PROJECT,
                resource_id=project_id,
                metadata={"changes": changes},
            )
        return updated

    async def delete(self, project_id: UUID, user_id: UUID) -> bool:
        """Delete a project and everything it owns. Requires Owner role.

        Memberships, invitations, articles, comments and the activity history
        are removed in the same transaction, so no activity entry is written.
        """
        async with self._uow_factory() as uow:
            await require_project(uow, project_id)
            await require_role(uow, project_id, user_id, ProjectRole.OWNER)

            deleted = await uow.projects.delete(project_id)
            await uow.commit()

        logger.info("project_deleted", project_id=str(project_id), actor_id=str(user_id))
        return deleted  # type: ignore[no-any-return]
