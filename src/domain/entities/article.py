"""Article and comment domain entities.

Article content is stored as an opaque string; the editor owns its format.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4


@dataclass
class Article:
    """Domain entity for an Article."""

    project_id: UUID
    title: str
    created_by: UUID
    id: UUID = field(default_factory=uuid4)
    content: str = ""
    seo_score: int | None = None
    keywords: list[str] = field(default_factory=list)
    meta_description: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class ArticleComment:
    """Domain entity for a comment on an article."""

    article_id: UUID
    user_id: UUID
    content: str
    id: UUID = field(default_factory=uuid4)
    position: dict[str, Any] | None = None
    resolved: bool = False
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)
