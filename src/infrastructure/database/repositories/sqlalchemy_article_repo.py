"""SQLAlchemy implementation of Article repository."""

from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.article import Article, ArticleComment
from infrastructure.database.models import ArticleCommentModel, ArticleModel


class SQLAlchemyArticleRepository:
    """SQLAlchemy implementation of IArticleRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Article | None:
        """Get an article by ID."""
        stmt = select(ArticleModel).where(ArticleModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_for_project(self, project_id: UUID) -> list[Article]:
        """Get all articles of a project, most recently updated first."""
        stmt = (
            select(ArticleModel)
            .where(ArticleModel.project_id == project_id)
            .order_by(ArticleModel.updated_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def count_by_author(self, user_id: UUID) -> int:
        """Count articles created by a user."""
        stmt = select(func.count()).select_from(ArticleModel).where(ArticleModel.created_by == user_id)
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def create(self, article: Article) -> Article:
        """Create a new article."""
        model = self._to_model(article)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, article: Article) -> Article:
        """Update an existing article."""
        stmt = select(ArticleModel).where(ArticleModel.id == article.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Article {article.id} not found")

        model.title = article.title
        model.content = article.content
        model.keywords = list(article.keywords)
        model.meta_description = article.meta_description
        model.seo_score = article.seo_score
        model.updated_at = article.updated_at

        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, id: UUID) -> bool:
        """Delete an article and its comments."""
        found = await self._session.scalar(select(ArticleModel.id).where(ArticleModel.id == id))
        if found is None:
            return False

        await self._session.execute(
            delete(ArticleCommentModel).where(ArticleCommentModel.article_id == id)
        )
        await self._session.execute(delete(ArticleModel).where(ArticleModel.id == id))
        await self._session.flush()
        return True

    async def get_comment(self, id: UUID) -> ArticleComment | None:
        """Get a comment by ID."""
        stmt = select(ArticleCommentModel).where(ArticleCommentModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._comment_to_entity(model) if model else None

    async def get_comments(self, article_id: UUID) -> list[ArticleComment]:
        """Get comments of an article, oldest first."""
        stmt = (
            select(ArticleCommentModel)
            .where(ArticleCommentModel.article_id == article_id)
            .order_by(ArticleCommentModel.created_at)
        )
        result = await self._session.execute(stmt)
        return [self._comment_to_entity(model) for model in result.scalars()]

    async def create_comment(self, comment: ArticleComment) -> ArticleComment:
        """Create a new comment."""
        model = ArticleCommentModel(
            id=comment.id,
            article_id=comment.article_id,
            user_id=comment.user_id,
            content=comment.content,
            position=comment.position,
            resolved=comment.resolved,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._comment_to_entity(model)

    async def update_comment(self, comment: ArticleComment) -> ArticleComment:
        """Update content or resolved flag of a comment."""
        stmt = select(ArticleCommentModel).where(ArticleCommentModel.id == comment.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Comment {comment.id} not found")

        model.content = comment.content
        model.resolved = comment.resolved
        model.updated_at = comment.updated_at

        await self._session.flush()
        return self._comment_to_entity(model)

    async def delete_comment(self, id: UUID) -> bool:
        """Delete a comment."""
        stmt = select(ArticleCommentModel).where(ArticleCommentModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    def _to_entity(self, model: ArticleModel) -> Article:
        """Convert ORM model to domain entity."""
        return Article(
            id=model.id,
            project_id=model.project_id,
            title=model.title,
            content=model.content,
            seo_score=model.seo_score,
            keywords=list(model.keywords or []),
            meta_description=model.meta_description,
            created_by=model.created_by,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Article) -> ArticleModel:
        """Convert domain entity to ORM model."""
        return ArticleModel(
            id=entity.id,
            project_id=entity.project_id,
            title=entity.title,
            content=entity.content,
            seo_score=entity.seo_score,
            keywords=list(entity.keywords),
            meta_description=entity.meta_description,
            created_by=entity.created_by,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

    def _comment_to_entity(self, model: ArticleCommentModel) -> ArticleComment:
        """Convert comment ORM model to domain entity."""
        return ArticleComment(
            id=model.id,
            article_id=model.article_id,
            user_id=model.user_id,
            content=model.content,
            position=model.position,
            resolved=model.resolved,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
