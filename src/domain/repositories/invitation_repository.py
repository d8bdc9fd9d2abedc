"""Invitation repository protocol."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from domain.entities.invitation import Invitation, InvitationStatus


class IInvitationRepository(Protocol):
    """Repository interface for Invitation entities."""

    async def create(self, invitation: Invitation) -> Invitation:
        """Create a new invitation."""
        ...

    async def get_by_id(self, id: UUID) -> Invitation | None:
        """Get an invitation by its primary key."""
        ...

    async def get_by_token_hash(self, token_hash: str) -> Invitation | None:
        """Get an invitation by its hashed token."""
        ...

    async def get_pending_for_project(self, project_id: UUID) -> list[Invitation]:
        """Get pending, unexpired invitations for a project, newest first."""
        ...

    async def get_pending_for_email(self, email: str) -> list[Invitation]:
        """Get pending, unexpired invitations for an email address, newest first."""
        ...

    async def get_pending_for_project_email(
        self, project_id: UUID, email: str
    ) -> Invitation | None:
        """Get the pending row for a project and email, expired or not."""
        ...

    async def update_status(
        self,
        id: UUID,
        status: InvitationStatus,
        accepted_at: datetime | None = None,
    ) -> Invitation:
        """Update the status of an invitation."""
        ...
