"""Activity log domain entity and action constants."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

# --- Activity Action Constants ---
# The verb goes in ``action``; the affected entity goes in ``resource_type``.


class Actions:
    """Activity action constants."""

    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"

    # Team actions
    INVITED = "invited"
    JOINED = "joined"
    REMOVED = "removed"
    ROLE_UPDATED = "role_updated"
    INVITATION_CANCELLED = "invitation_cancelled"
    INVITATION_DECLINED = "invitation_declined"

    # Comment actions
    COMMENTED = "commented"
    COMMENT_RESOLVED = "comment_resolved"
    COMMENT_REOPENED = "comment_reopened"
    COMMENT_DELETED = "comment_deleted"


class ResourceTypes:
    """Values for ActivityLog.resource_type."""

    PROJECT = "project"
    ARTICLE = "article"
    COMMENT = "comment"
    TEAM_MEMBER = "team_member"
    CONTENT_BRIEF = "content_brief"
    INVITATION = "invitation"


@dataclass
class ActivityLog:
    """Domain entity for an activity log entry. Never mutated once written."""

    project_id: UUID
    actor_id: UUID
    action: str
    resource_type: str
    resource_id: UUID | None = None
    id: UUID = field(default_factory=uuid4)
    metadata: dict[str, Any] | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
