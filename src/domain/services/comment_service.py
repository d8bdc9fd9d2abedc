"""Comment service layer for article review threads."""

from collections.abc import Callable
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from core.exceptions import (
    ArticleNotFoundError,
    CommentNotFoundError,
    InsufficientPermissionsError,
    ValidationError,
)
from core.retry import retry_transient
from domain.entities.activity import Actions, ResourceTypes
from domain.entities.article import Article, ArticleComment
from domain.entities.project import ProjectRole, has_permission
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.activity_service import ActivityService
from domain.services.authorization_service import require_role

COMMENT_MAX_LENGTH = 2000


def _clean_content(content: str) -> str:
    cleaned = content.strip()
    if not cleaned or len(cleaned) > COMMENT_MAX_LENGTH:
        raise ValidationError(
            f"Comment must be 1-{COMMENT_MAX_LENGTH} characters", field="content"
        )
    return cleaned


class CommentService:
    """Service layer for ArticleComment business logic."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        activity_service: Optional["ActivityService"] = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._activity = activity_service

    @retry_transient()
    async def list_for_article(self, article_id: UUID, user_id: UUID) -> list[ArticleComment]:
        """List comments of an article, oldest first. Requires view access."""
        async with self._uow_factory() as uow:
            article = await self._require_article(uow, article_id)
            await require_role(uow, article.project_id, user_id, ProjectRole.VIEWER)
            return await uow.articles.get_comments(article_id)  # type: ignore[no-any-return]

    async def create(
        self,
        article_id: UUID,
        user_id: UUID,
        content: str,
        position: dict[str, Any] | None = None,
    ) -> ArticleComment:
        """Comment on an article. Requires Editor+ role."""
        cleaned = _clean_content(content)
        async with self._uow_factory() as uow:
            article = await self._require_article(uow, article_id)
            await require_role(uow, article.project_id, user_id, ProjectRole.EDITOR)

            created = await uow.articles.create_comment(
                ArticleComment(
                    article_id=article_id,
                    user_id=user_id,
                    content=cleaned,
                    position=position,
                )
            )
            await uow.commit()

        await self._record(article, user_id, Actions.COMMENTED, created.id)
        return created

    async def update(self, comment_id: UUID, user_id: UUID, content: str) -> ArticleComment:
        """Edit a comment's text. Only its author, while holding Editor+."""
        cleaned = _clean_content(content)
        async with self._uow_factory() as uow:
            comment, article = await self._require_comment(uow, comment_id)
            await require_role(uow, article.project_id, user_id, ProjectRole.EDITOR)
            if comment.user_id != user_id:
                raise InsufficientPermissionsError(message="Only the author can edit a comment")

            comment.content = cleaned
            comment.updated_at = datetime.utcnow()
            updated = await uow.articles.update_comment(comment)
            await uow.commit()
            return updated  # type: ignore[no-any-return]

    async def set_resolved(
        self,
        comment_id: UUID,
        user_id: UUID,
        resolved: bool = True,
    ) -> ArticleComment:
        """Resolve or reopen a comment. Requires Editor+ role."""
        async with self._uow_factory() as uow:
            comment, article = await self._require_comment(uow, comment_id)
            await require_role(uow, article.project_id, user_id, ProjectRole.EDITOR)

            if comment.resolved == resolved:
                return comment

            comment.resolved = resolved
            comment.updated_at = datetime.utcnow()
            updated = await uow.articles.update_comment(comment)
            await uow.commit()

        action = Actions.COMMENT_RESOLVED if resolved else Actions.COMMENT_REOPENED
        await self._record(article, user_id, action, comment_id)
        return updated  # type: ignore[no-any-return]

    async def delete(self, comment_id: UUID, user_id: UUID) -> bool:
        """Delete a comment.

        The author may delete their own comment while holding Editor+;
        Admin+ may delete any comment in the project.
        """
        async with self._uow_factory() as uow:
            comment, article = await self._require_comment(uow, comment_id)
            member = await require_role(uow, article.project_id, user_id, ProjectRole.EDITOR)
            if comment.user_id != user_id and not has_permission(member.role, ProjectRole.ADMIN):
                raise InsufficientPermissionsError(ProjectRole.ADMIN.label)

            deleted = await uow.articles.delete_comment(comment_id)
            await uow.commit()

        await self._record(article, user_id, Actions.COMMENT_DELETED, comment_id)
        return deleted  # type: ignore[no-any-return]

    # --- Internal helpers ---

    @staticmethod
    async def _require_article(uow: IUnitOfWork, article_id: UUID) -> Article:
        article = await uow.articles.get(article_id)
        if not article:
            raise ArticleNotFoundError(str(article_id))
        return article

    async def _require_comment(
        self, uow: IUnitOfWork, comment_id: UUID
    ) -> tuple[ArticleComment, Article]:
        comment = await uow.articles.get_comment(comment_id)
        if not comment:
            raise CommentNotFoundError(str(comment_id))
        article = await self._require_article(uow, comment.article_id)
        return comment, article

    async def _record(
        self, article: Article, actor_id: UUID, action: str, comment_id: UUID
    ) -> None:
        if self._activity:
            await self._activity.record(
                project_id=article.project_id,
                actor_id=actor_id,
                action=action,
                resource_type=ResourceTypes.COMMENT,
                resource_id=comment_id,
                metadata={"article_id": str(article.id), "article_title": article.title},
            )
