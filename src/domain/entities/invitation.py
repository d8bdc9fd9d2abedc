"""Invitation domain entity."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import StrEnum
from uuid import UUID, uuid4

from domain.entities.project import ProjectRole


class InvitationStatus(StrEnum):
    """Status of a project invitation.

    Declined and cancelled invitations keep their row so the audit trail
    can still show who was invited and what happened to the offer.
    """

    PENDING = "pending"
    ACCEPTED = "accepted"
    EXPIRED = "expired"
    DECLINED = "declined"
    CANCELLED = "cancelled"


# Default invitation expiry: 7 days
INVITATION_EXPIRY_DAYS = 7


@dataclass
class Invitation:
    """Domain entity for a project invitation."""

    project_id: UUID
    email: str
    role: ProjectRole
    token_hash: str
    invited_by: UUID
    id: UUID = field(default_factory=uuid4)
    status: InvitationStatus = InvitationStatus.PENDING
    created_at: datetime = field(default_factory=datetime.utcnow)
    expires_at: datetime = field(
        default_factory=lambda: datetime.utcnow() + timedelta(days=INVITATION_EXPIRY_DAYS)
    )
    accepted_at: datetime | None = None

    @property
    def is_expired(self) -> bool:
        """Check if the invitation has expired."""
        return self.status == InvitationStatus.EXPIRED or datetime.utcnow() > self.expires_at

    @property
    def is_pending(self) -> bool:
        """Check if the invitation is still pending and not expired."""
        return self.status == InvitationStatus.PENDING and not self.is_expired

    @property
    def is_accepted(self) -> bool:
        return self.status == InvitationStatus.ACCEPTED or self.accepted_at is not None

    def is_for(self, email: str) -> bool:
        """Compare against a verified identity email, ignoring case and padding."""
        return self.email.strip().lower() == email.strip().lower()
