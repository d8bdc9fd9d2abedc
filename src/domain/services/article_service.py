"""Article service layer with business logic."""

from collections.abc import Callable
from datetime import datetime
from typing import Optional
from uuid import UUID

from core.exceptions import ArticleNotFoundError, ValidationError
from core.retry import retry_transient
from domain.entities.activity import Actions, ResourceTypes
from domain.entities.article import Article
from domain.entities.project import ProjectRole
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.activity_service import ActivityService
from domain.services.authorization_service import require_project, require_role

ARTICLE_TITLE_MAX_LENGTH = 200
META_DESCRIPTION_MAX_LENGTH = 300

# Sentinel for "field not supplied" on partial updates
_UNSET = object()


def _validate(article: Article) -> None:
    article.title = article.title.strip()
    if not article.title or len(article.title) > ARTICLE_TITLE_MAX_LENGTH:
        raise ValidationError(
            f"Title must be 1-{ARTICLE_TITLE_MAX_LENGTH} characters", field="title"
        )
    if article.seo_score is not None and not 0 <= article.seo_score <= 100:
        raise ValidationError("SEO score must be between 0 and 100", field="seo_score")
    if (
        article.meta_description is not None
        and len(article.meta_description) > META_DESCRIPTION_MAX_LENGTH
    ):
        raise ValidationError(
            f"Meta description must be at most {META_DESCRIPTION_MAX_LENGTH} characters",
            field="meta_description",
        )


class ArticleService:
    """Service layer for Article business logic."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        activity_service: Optional["ActivityService"] = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._activity = activity_service

    @retry_transient()
    async def list_for_project(self, project_id: UUID, user_id: UUID) -> list[Article]:
        """List a project's articles. Requires view access."""
        async with self._uow_factory() as uow:
            await require_project(uow, project_id)
            await require_role(uow, project_id, user_id, ProjectRole.VIEWER)
            return await uow.articles.get_for_project(project_id)  # type: ignore[no-any-return]

    @retry_transient()
    async def get(self, article_id: UUID, user_id: UUID) -> Article:
        """Get an article. Requires view access to its project."""
        async with self._uow_factory() as uow:
            article = await uow.articles.get(article_id)
            if not article:
                raise ArticleNotFoundError(str(article_id))
            await require_role(uow, article.project_id, user_id, ProjectRole.VIEWER)
            return article

    async def create(
        self,
        project_id: UUID,
        user_id: UUID,
        title: str,
        content: str = "",
        keywords: list[str] | None = None,
        meta_description: str | None = None,
        seo_score: int | None = None,
    ) -> Article:
        """Create an article. Requires Editor+ role."""
        article = Article(
            project_id=project_id,
            title=title,
            created_by=user_id,
            content=content,
            keywords=list(keywords or []),
            meta_description=meta_description,
            seo_score=seo_score,
        )
        _validate(article)

        async with self._uow_factory() as uow:
            await require_project(uow, project_id)
            await require_role(uow, project_id, user_id, ProjectRole.EDITOR)

            created = await uow.articles.create(article)
            await uow.commit()

        if self._activity:
            await self._activity.record(
                project_id=project_id,
                actor_id=user_id,
                action=Actions.CREATED,
                resource_type=ResourceTypes.ARTICLE,
                resource_id=created.id,
                metadata={"title": created.title},
            )
        return created

    async def update(
        self,
        article_id: UUID,
        user_id: UUID,
        title: str | None = None,
        content: str | None = None,
        keywords: list[str] | None = None,
        meta_description: object = _UNSET,
        seo_score: object = _UNSET,
    ) -> Article:
        """Update an article. Requires Editor+ role.

        ``meta_description`` and ``seo_score`` may be cleared by passing None.
        """
        async with self._uow_factory() as uow:
            article = await uow.articles.get(article_id)
            if not article:
                raise ArticleNotFoundError(str(article_id))
            await require_role(uow, article.project_id, user_id, ProjectRole.EDITOR)

            old_title = article.title
            changed: list[str] = []
            if title is not None:
                article.title = title
                changed.append("title")
            if content is not None:
                article.content = content
                changed.append("content")
            if keywords is not None:
                article.keywords = list(keywords)
                changed.append("keywords")
            if meta_description is not _UNSET:
                article.meta_description = meta_description  # type: ignore[assignment]
                changed.append("meta_description")
            if seo_score is not _UNSET:
                article.seo_score = seo_score  # type: ignore[assignment]
                changed.append("seo_score")
            _validate(article)

            article.updated_at = datetime.utcnow()
            updated = await uow.articles.update(article)
            await uow.commit()

        if self._activity and changed:
            metadata: dict[str, object] = {"fields": changed}
            if updated.title != old_title:
                metadata["title"] = {"old": old_title, "new": updated.title}
            await self._activity.record(
                project_id=updated.project_id,
                actor_id=user_id,
                action=Actions.UPDATED,
                resource_type=ResourceTypes.ARTICLE,
                resource_id=article_id,
                metadata=metadata,
            )
        return updated

    async def delete(self, article_id: UUID, user_id: UUID) -> bool:
        """Delete an article and its comments. Requires Editor+ role."""
        async with self._uow_factory() as uow:
            article = await uow.articles.get(article_id)
            if not article:
                raise ArticleNotFoundError(str(article_id))
            await require_role(uow, article.project_id, user_id, ProjectRole.EDITOR)

            deleted = await uow.articles.delete(article_id)
            await uow.commit()

        if self._activity:
            await self._activity.record(
                project_id=article.project_id,
                actor_id=user_id,
                action=Actions.DELETED,
                resource_type=ResourceTypes.ARTICLE,
                resource_id=article_id,
                metadata={"title": article.title},
            )
        return deleted  # type: ignore[no-any-return]
