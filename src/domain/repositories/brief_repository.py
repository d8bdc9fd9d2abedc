"""Content brief repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.brief import ContentBrief


class IBriefRepository(Protocol):
    """Repository interface for ContentBrief entities."""

    async def get(self, id: UUID) -> ContentBrief | None:
        """Get a brief by ID."""
        ...

    async def get_for_user(self, user_id: UUID) -> list[ContentBrief]:
        """Get a user's briefs, most recently updated first."""
        ...

    async def count_for_user(self, user_id: UUID) -> int:
        """Count briefs owned by a user."""
        ...

    async def create(self, brief: ContentBrief) -> ContentBrief:
        """Create a new brief."""
        ...

    async def update(self, brief: ContentBrief) -> ContentBrief:
        """Update an existing brief."""
        ...

    async def delete(self, id: UUID) -> bool:
        """Delete a brief."""
        ...
