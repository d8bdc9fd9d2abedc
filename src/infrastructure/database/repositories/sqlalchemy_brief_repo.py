"""SQLAlchemy implementation of ContentBrief repository."""

from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.brief import ContentBrief
from infrastructure.database.models import ContentBriefModel


class SQLAlchemyBriefRepository:
    """SQLAlchemy implementation of IBriefRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> ContentBrief | None:
        """Get a brief by ID."""
        stmt = select(ContentBriefModel).where(ContentBriefModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_for_user(self, user_id: UUID) -> list[ContentBrief]:
        """Get a user's briefs, most recently updated first."""
        stmt = (
            select(ContentBriefModel)
            .where(ContentBriefModel.user_id == user_id)
            .order_by(ContentBriefModel.updated_at.desc(), ContentBriefModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def count_for_user(self, user_id: UUID) -> int:
        stmt = (
            select(func.count())
            .select_from(ContentBriefModel)
            .where(ContentBriefModel.user_id == user_id)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def create(self, brief: ContentBrief) -> ContentBrief:
        """Create a new brief."""
        model = self._to_model(brief)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, brief: ContentBrief) -> ContentBrief:
        """Update an existing brief."""
        stmt = select(ContentBriefModel).where(ContentBriefModel.id == brief.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Content brief {brief.id} not found")

        model.project_id = brief.project_id
        model.title = brief.title
        model.topic = brief.topic
        model.target_audience = brief.target_audience
        model.content_outline = list(brief.content_outline)
        model.key_points = list(brief.key_points)
        model.tone_style = brief.tone_style
        model.word_count = brief.word_count
        model.target_keywords = list(brief.target_keywords)
        model.seo_tips = list(brief.seo_tips)
        model.updated_at = brief.updated_at

        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, id: UUID) -> bool:
        """Delete a brief."""
        found = await self._session.scalar(
            select(ContentBriefModel.id).where(ContentBriefModel.id == id)
        )
        if found is None:
            return False

        await self._session.execute(delete(ContentBriefModel).where(ContentBriefModel.id == id))
        await self._session.flush()
        return True

    def _to_entity(self, model: ContentBriefModel) -> ContentBrief:
        """Convert ORM model to domain entity."""
        return ContentBrief(
            id=model.id,
            user_id=model.user_id,
            project_id=model.project_id,
            title=model.title,
            topic=model.topic,
            target_audience=model.target_audience,
            content_outline=list(model.content_outline or []),
            key_points=list(model.key_points or []),
            tone_style=model.tone_style,
            word_count=model.word_count,
            target_keywords=list(model.target_keywords or []),
            seo_tips=list(model.seo_tips or []),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: ContentBrief) -> ContentBriefModel:
        """Convert domain entity to ORM model."""
        return ContentBriefModel(
            id=entity.id,
            user_id=entity.user_id,
            project_id=entity.project_id,
            title=entity.title,
            topic=entity.topic,
            target_audience=entity.target_audience,
            content_outline=list(entity.content_outline),
            key_points=list(entity.key_points),
            tone_style=entity.tone_style,
            word_count=entity.word_count,
            target_keywords=list(entity.target_keywords),
            seo_tips=list(entity.seo_tips),
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
