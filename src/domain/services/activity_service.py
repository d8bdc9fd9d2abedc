"""Activity service layer for recording and querying project activity."""

from collections.abc import Callable
from typing import Any
from uuid import UUID

import structlog

from core.retry import retry_transient
from domain.entities.activity import ActivityLog
from domain.entities.project import ProjectRole
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.authorization_service import require_project, require_role

logger = structlog.get_logger()


class ActivityService:
    """Service layer for activity logging and retrieval."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def record(
        self,
        project_id: UUID,
        actor_id: UUID,
        action: str,
        resource_type: str,
        resource_id: UUID | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> ActivityLog | None:
        """Append an activity entry in its own transaction.

        Call after the triggering change has committed. Failures are logged
        and swallowed; the primary action has already succeeded.

        Args:
            project_id: The project where the activity occurred.
            actor_id: The user who performed the action.
            action: The action string (use Actions constants).
            resource_type: The kind of resource affected (use ResourceTypes).
            resource_id: The ID of the resource affected, if any.
            metadata: Optional additional context, e.g. old and new role.

        Returns:
            The created ActivityLog entry, or None if the write failed.
        """
        activity = ActivityLog(
            project_id=project_id,
            actor_id=actor_id,
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            metadata=metadata,
        )
        try:
            async with self._uow_factory() as uow:
                created = await uow.activities.create(activity)
                await uow.commit()
                return created
        except Exception:
            logger.exception(
                "activity_log_write_failed",
                project_id=str(project_id),
                actor_id=str(actor_id),
                action=action,
                resource_type=resource_type,
            )
            return None

    @retry_transient()
    async def list_for_resource(
        self,
        project_id: UUID,
        user_id: UUID,
        resource_type: str,
        resource_id: UUID,
        limit: int = 50,
    ) -> list[ActivityLog]:
        """Get the history of one resource within a project. Requires view access."""
        async with self._uow_factory() as uow:
            await require_project(uow, project_id)
            await require_role(uow, project_id, user_id, ProjectRole.VIEWER)

            return await uow.activities.get_for_resource(  # type: ignore[no-any-return]
                project_id, resource_type, resource_id, limit=limit
            )

    @retry_transient()
    async def list_for_project(
        self,
        project_id: UUID,
        user_id: UUID,
        limit: int = 50,
        offset: int = 0,
    ) -> list[ActivityLog]:
        """Get the activity feed for a project, newest first. Requires view access."""
        async with self._uow_factory() as uow:
            await require_project(uow, project_id)
            await require_role(uow, project_id, user_id, ProjectRole.VIEWER)

            return await uow.activities.get_for_project(  # type: ignore[no-any-return]
                project_id, limit=limit, offset=offset
            )

    @staticmethod
    def compute_diff(
        old_dict: dict[str, Any], new_dict: dict[str, Any]
    ) -> dict[str, dict[str, Any]]:
        """Return ``{field: {"old": ..., "new": ...}}`` for every changed field."""
        return {
            key: {"old": old_dict.get(key), "new": new_dict.get(key)}
            for key in sorted(set(old_dict) | set(new_dict))
            if old_dict.get(key) != new_dict.get(key)
        }
