"""Content brief domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

CONTENT_TYPES = ("blog-post", "article", "guide", "whitepaper", "case-study")


def word_count_for(content_type: str) -> str:
    """Suggested length range for a piece of the given content type."""
    if content_type == "blog-post":
        return "1200-1800 words"
    if content_type == "article":
        return "800-1200 words"
    return "500-800 words"


@dataclass
class ContentBrief:
    """Domain entity for a content brief.

    Briefs belong to the user who wrote them. ``project_id`` files the brief
    under a project for the team's activity feed but grants no access to it.
    """

    user_id: UUID
    title: str
    topic: str
    id: UUID = field(default_factory=uuid4)
    project_id: UUID | None = None
    target_audience: str = ""
    content_outline: list[str] = field(default_factory=list)
    key_points: list[str] = field(default_factory=list)
    tone_style: str = ""
    word_count: str = ""
    target_keywords: list[str] = field(default_factory=list)
    seo_tips: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def is_owned_by(self, user_id: UUID) -> bool:
        return self.user_id == user_id
