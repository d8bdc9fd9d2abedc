"""Activity log repository protocol."""

from typing import List, Protocol
from uuid import UUID

from domain.entities.activity import ActivityLog


class IActivityRepository(Protocol):
    """Repository interface for ActivityLog entities. Append-only."""

    async def create(self, activity: ActivityLog) -> ActivityLog:
        """Append an activity log entry."""
        ...

    async def get_for_project(
        self,
        project_id: UUID,
        limit: int = 50,
        offset: int = 0,
    ) -> List[ActivityLog]:
        """Get activity log entries for a project, ordered by newest first."""
        ...

    async def get_for_resource(
        self,
        project_id: UUID,
        resource_type: str,
        resource_id: UUID,
        limit: int = 50,
    ) -> List[ActivityLog]:
        """Get activity log entries for a specific resource in a project."""
        ...
