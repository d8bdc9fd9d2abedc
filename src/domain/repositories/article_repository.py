"""Article repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.article import Article, ArticleComment


class IArticleRepository(Protocol):
    """Repository interface for Article entities and their comments."""

    async def get(self, id: UUID) -> Article | None:
        """Get an article by ID."""
        ...

    async def get_for_project(self, project_id: UUID) -> list[Article]:
        """Get all articles of a project, most recently updated first."""
        ...

    async def count_by_author(self, user_id: UUID) -> int:
        """Count articles created by a user."""
        ...

    async def create(self, article: Article) -> Article:
        """Create a new article."""
        ...

    async def update(self, article: Article) -> Article:
        """Update an existing article."""
        ...

    async def delete(self, id: UUID) -> bool:
        """Delete an article and its comments."""
        ...

    async def get_comment(self, id: UUID) -> ArticleComment | None:
        """Get a comment by ID."""
        ...

    async def get_comments(self, article_id: UUID) -> list[ArticleComment]:
        """Get comments of an article, oldest first."""
        ...

    async def create_comment(self, comment: ArticleComment) -> ArticleComment:
        """Create a new comment."""
        ...

    async def update_comment(self, comment: ArticleComment) -> ArticleComment:
        """Update content or resolved flag of a comment."""
        ...

    async def delete_comment(self, id: UUID) -> bool:
        """Delete a comment."""
        ...
