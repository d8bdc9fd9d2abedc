"""Profile service: provisioning, display name, stats and subscription tier."""

from collections.abc import Callable
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError

from core.config import Settings, get_settings
from core.exceptions import ProfileNotFoundError, ValidationError
from core.retry import retry_transient
from domain.entities.profile import Profile, ProfileStats, SubscriptionTier
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()

DISPLAY_NAME_MAX_LENGTH = 100


class ProfileService:
    """Service layer for user profiles."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        settings: Settings | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._settings = settings or get_settings()

    async def ensure_profile(
        self,
        user_id: UUID,
        email: str,
        display_name: str | None = None,
    ) -> Profile:
        """Return the user's profile, creating it on first sight.

        Idempotent. Concurrent first requests race on the primary key; the
        loser reloads the winner's row.
        """
        async with self._uow_factory() as uow:
            existing = await uow.profiles.get(user_id)
            if existing:
                return existing

            profile = Profile(
                id=user_id,
                email=email.strip().lower(),
                display_name=display_name,
                subscription_tier=SubscriptionTier.FREE,
                usage_limit=self._settings.usage_limit_for_tier(SubscriptionTier.FREE),
            )

            try:
                created = await uow.profiles.create(profile)
                await uow.commit()
            except IntegrityError as exc:
                await uow.rollback()
                # Only swallow unique-constraint violations (race condition).
                orig = str(exc.orig).lower() if exc.orig else ""
                if "unique" not in orig and "duplicate" not in orig:
                    raise
                winner = await uow.profiles.get(user_id)
                if not winner:
                    raise
                logger.debug("profile_already_created", user_id=str(user_id))
                return winner

            logger.info("profile_created", user_id=str(user_id))
            return created

    @retry_transient()
    async def get(self, user_id: UUID) -> Profile:
        """Get a profile by user ID."""
        async with self._uow_factory() as uow:
            profile = await uow.profiles.get(user_id)
            if not profile:
                raise ProfileNotFoundError(str(user_id))
            return profile

    async def update_profile(self, user_id: UUID, display_name: str | None) -> Profile:
        """Change the user-editable part of a profile.

        Tier and usage are owned by billing and the quota ledger, so only the
        display name can be set here. Blank names clear it.
        """
        name = display_name.strip() if display_name else None
        if name and len(name) > DISPLAY_NAME_MAX_LENGTH:
            raise ValidationError(
                f"Display name must be at most {DISPLAY_NAME_MAX_LENGTH} characters",
                field="display_name",
            )

        async with self._uow_factory() as uow:
            updated = await uow.profiles.update_display_name(user_id, name or None)
            if not updated:
                raise ProfileNotFoundError(str(user_id))
            await uow.commit()

        logger.info("profile_updated", user_id=str(user_id))
        return updated  # type: ignore[no-any-return]

    @retry_transient()
    async def get_stats(self, user_id: UUID) -> ProfileStats:
        """Dashboard counters: projects, authored articles and usage."""
        async with self._uow_factory() as uow:
            profile = await uow.profiles.get(user_id)
            if not profile:
                raise ProfileNotFoundError(str(user_id))

            return ProfileStats(
                total_projects=await uow.projects.count_for_user(user_id),
                total_articles=await uow.articles.count_by_author(user_id),
                usage_count=profile.usage_count,
                usage_limit=profile.usage_limit,
            )

    async def set_subscription_tier(
        self,
        user_id: UUID,
        tier: SubscriptionTier | str,
    ) -> Profile:
        """Apply a tier change from the billing integration.

        The usage limit follows the tier; the current count is kept.
        """
        try:
            tier = SubscriptionTier(tier)
        except ValueError:
            raise ValidationError(f"Unknown subscription tier '{tier}'", field="tier") from None

        async with self._uow_factory() as uow:
            updated = await uow.profiles.update_tier(
                user_id, tier, self._settings.usage_limit_for_tier(tier)
            )
            if not updated:
                raise ProfileNotFoundError(str(user_id))
            await uow.commit()

        logger.info(
            "subscription_tier_changed",
            user_id=str(user_id),
            tier=str(tier),
            usage_limit=updated.usage_limit,
        )
        return updated  # type: ignore[no-any-return]
