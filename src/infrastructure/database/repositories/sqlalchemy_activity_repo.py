"""SQLAlchemy implementation of Activity Log repository."""

from typing import List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.activity import ActivityLog
from infrastructure.database.models import ActivityLogModel


class SQLAlchemyActivityRepository:
    """SQLAlchemy implementation of IActivityRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, activity: ActivityLog) -> ActivityLog:
        """Append an activity log entry."""
        model = self._to_model(activity)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def get_for_project(
        self,
        project_id: UUID,
        limit: int = 50,
        offset: int = 0,
    ) -> List[ActivityLog]:
        """Get activity log entries for a project, newest first.

        Entries sharing a timestamp come back in reverse insertion order, so
        consecutive pages neither repeat nor skip rows.
        """
        stmt = (
            select(ActivityLogModel)
            .where(ActivityLogModel.project_id == project_id)
            .order_by(ActivityLogModel.created_at.desc(), ActivityLogModel.seq.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_for_resource(
        self,
        project_id: UUID,
        resource_type: str,
        resource_id: UUID,
        limit: int = 50,
    ) -> List[ActivityLog]:
        """Get activity log entries for a specific resource in a project."""
        stmt = (
            select(ActivityLogModel)
            .where(
                ActivityLogModel.project_id == project_id,
                ActivityLogModel.resource_type == resource_type,
                ActivityLogModel.resource_id == resource_id,
            )
            .order_by(ActivityLogModel.created_at.desc(), ActivityLogModel.seq.desc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    def _to_entity(self, model: ActivityLogModel) -> ActivityLog:
        """Convert ORM model to domain entity."""
        return ActivityLog(
            id=model.id,
            project_id=model.project_id,
            actor_id=model.actor_id,
            action=model.action,
            resource_type=model.resource_type,
            resource_id=model.resource_id,
            metadata=model.metadata_,
            created_at=model.created_at,
        )

    def _to_model(self, entity: ActivityLog) -> ActivityLogModel:
        """Convert domain entity to ORM model."""
        return ActivityLogModel(
            id=entity.id,
            project_id=entity.project_id,
            actor_id=entity.actor_id,
            action=entity.action,
            resource_type=entity.resource_type,
            resource_id=entity.resource_id,
            metadata_=entity.metadata,
            created_at=entity.created_at,
        )
