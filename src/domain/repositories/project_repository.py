"""Project repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.project import Project, ProjectMember


class IProjectRepository(Protocol):
    """Repository interface for Project entities and their memberships."""

    async def get(self, id: UUID) -> Project | None:
        """Get a project by ID."""
        ...

    async def get_all_for_user(self, user_id: UUID) -> list[Project]:
        """Get all projects a user actively belongs to, newest first."""
        ...

    async def count_for_user(self, user_id: UUID) -> int:
        """Count the projects a user actively belongs to."""
        ...

    async def create(self, project: Project) -> Project:
        """Create a new project."""
        ...

    async def update(self, project: Project) -> Project:
        """Update an existing project."""
        ...

    async def delete(self, id: UUID) -> bool:
        """Delete a project with its memberships, invitations, articles and activity."""
        ...

    async def get_member(self, project_id: UUID, user_id: UUID) -> ProjectMember | None:
        """Get a membership row regardless of status."""
        ...

    async def get_active_members(self, project_id: UUID) -> list[ProjectMember]:
        """Get active members ordered by joined_at."""
        ...

    async def add_member(self, member: ProjectMember) -> ProjectMember:
        """Insert a membership row."""
        ...

    async def update_member(self, member: ProjectMember) -> ProjectMember:
        """Persist role, status and timestamps of an existing membership row."""
        ...

    async def count_active_owners(self, project_id: UUID) -> int:
        """Count active owner memberships of a project."""
        ...
