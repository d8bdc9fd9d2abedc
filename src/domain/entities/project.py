"""Project and membership domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum, StrEnum
from uuid import UUID, uuid4

PROJECT_TITLE_MAX_LENGTH = 100
PROJECT_DESCRIPTION_MAX_LENGTH = 500


class ProjectRole(IntEnum):
    """Project role hierarchy. Higher value = more permissions.

    Use >= comparison for permission checks:
        user_role >= ProjectRole.ADMIN  # True if Admin or Owner
    """

    VIEWER = 10
    EDITOR = 20
    ADMIN = 30
    OWNER = 40

    @property
    def label(self) -> str:
        """Lower-case name used in storage and API payloads."""
        return self.name.lower()

    @classmethod
    def from_label(cls, label: str) -> "ProjectRole":
        """Parse a lower-case role name. Raises KeyError for unknown names."""
        return cls[label.strip().upper()]


# Roles an invitation (or a role change) may grant. Owner only comes from creation.
ASSIGNABLE_ROLES = frozenset({ProjectRole.ADMIN, ProjectRole.EDITOR, ProjectRole.VIEWER})


class MembershipStatus(StrEnum):
    """Lifecycle of a membership row. Removal is a soft delete."""

    ACTIVE = "active"
    INACTIVE = "inactive"


def has_permission(user_role: ProjectRole | None, required_role: ProjectRole) -> bool:
    """Check if a user role meets the required permission level.

    ``None`` (no active membership) never satisfies any requirement.
    """
    if user_role is None:
        return False
    return user_role >= required_role


@dataclass
class Project:
    """Domain entity for a Project."""

    title: str
    owner_id: UUID
    id: UUID = field(default_factory=uuid4)
    description: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at


@dataclass
class ProjectMember:
    """Domain entity for a project membership."""

    project_id: UUID
    user_id: UUID
    role: ProjectRole = ProjectRole.VIEWER
    status: MembershipStatus = MembershipStatus.ACTIVE
    invited_by: UUID | None = None
    joined_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_active(self) -> bool:
        return self.status == MembershipStatus.ACTIVE
