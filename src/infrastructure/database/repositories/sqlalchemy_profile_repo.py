"""SQLAlchemy implementation of Profile repository."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.profile import Profile, SubscriptionTier, UsageEvent
from infrastructure.database.models import ProfileModel, UsageEventModel


class SQLAlchemyProfileRepository:
    """SQLAlchemy implementation of IProfileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Profile | None:
        """Get a profile by user ID, bypassing any stale identity-map copy."""
        stmt = (
            select(ProfileModel)
            .where(ProfileModel.id == id)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_email(self, email: str) -> Profile | None:
        """Get a profile by normalized email."""
        stmt = select(ProfileModel).where(ProfileModel.email == email)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def create(self, profile: Profile) -> Profile:
        """Create a new profile."""
        model = self._to_model(profile)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update_tier(
        self, id: UUID, tier: SubscriptionTier, usage_limit: int
    ) -> Profile | None:
        """Set the subscription tier and its usage limit."""
        stmt = (
            update(ProfileModel)
            .where(ProfileModel.id == id)
            .values(
                subscription_tier=tier.value,
                usage_limit=usage_limit,
                updated_at=datetime.utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)
        return await self.get(id)

    async def update_display_name(self, id: UUID, display_name: str | None) -> Profile | None:
        """Set or clear the display name."""
        stmt = (
            update(ProfileModel)
            .where(ProfileModel.id == id)
            .values(display_name=display_name, updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)
        return await self.get(id)

    async def reset_usage_if_stale(self, id: UUID, period_start: datetime) -> bool:
        """Start a new billing period for a profile still on an older one."""
        stmt = (
            update(ProfileModel)
            .where(
                ProfileModel.id == id,
                ProfileModel.usage_period_start < period_start,
            )
            .values(usage_count=0, usage_period_start=period_start, updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return bool(result.rowcount)

    async def increment_usage(self, id: UUID) -> Profile | None:
        """Add one to usage_count in place, without a read-modify-write."""
        stmt = (
            update(ProfileModel)
            .where(ProfileModel.id == id)
            .values(usage_count=ProfileModel.usage_count + 1, updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        if not result.rowcount:
            return None
        return await self.get(id)

    async def get_usage_event(self, user_id: UUID, idempotency_key: str) -> UsageEvent | None:
        """Get a recorded usage event by its idempotency key."""
        stmt = select(UsageEventModel).where(
            UsageEventModel.user_id == user_id,
            UsageEventModel.idempotency_key == idempotency_key,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if not model:
            return None
        return UsageEvent(
            id=model.id,
            user_id=model.user_id,
            idempotency_key=model.idempotency_key,
            created_at=model.created_at,
        )

    async def record_usage_event(self, event: UsageEvent) -> UsageEvent:
        """Persist a usage event; flushing surfaces a duplicate key immediately."""
        self._session.add(
            UsageEventModel(
                id=event.id,
                user_id=event.user_id,
                idempotency_key=event.idempotency_key,
                created_at=event.created_at,
            )
        )
        await self._session.flush()
        return event

    def _to_entity(self, model: ProfileModel) -> Profile:
        """Convert ORM model to domain entity."""
        return Profile(
            id=model.id,
            email=model.email,
            display_name=model.display_name,
            subscription_tier=SubscriptionTier(model.subscription_tier),
            usage_count=model.usage_count,
            usage_limit=model.usage_limit,
            usage_period_start=model.usage_period_start,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Profile) -> ProfileModel:
        """Convert domain entity to ORM model."""
        return ProfileModel(
            id=entity.id,
            email=entity.email,
            display_name=entity.display_name,
            subscription_tier=entity.subscription_tier.value,
            usage_count=entity.usage_count,
            usage_limit=entity.usage_limit,
            usage_period_start=entity.usage_period_start,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
