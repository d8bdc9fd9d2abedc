"""Usage quota ledger for AI generations.

The count only moves through an in-place ``usage_count + 1`` update, so two
concurrent consumers never lose an increment. A check followed by a consume
is not atomic: concurrent generations may overshoot the limit by the width of
that window.
"""

from collections.abc import Awaitable, Callable
from typing import Any, Protocol, TypeVar
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError

from core.exceptions import ProfileNotFoundError, QuotaExceededError
from core.retry import retry_transient
from domain.entities.profile import Profile, UsageEvent, billing_period_start
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()

T = TypeVar("T")


class IContentGenerator(Protocol):
    """External AI content generation adapter."""

    async def generate(self, prompt: str, **options: Any) -> str:
        """Generate content for a prompt."""
        ...


class QuotaService:
    """Service layer for per-user usage quotas."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def _load_current(self, uow: IUnitOfWork, user_id: UUID) -> Profile:
        """Roll the billing period forward if needed and load the profile."""
        if await uow.profiles.reset_usage_if_stale(user_id, billing_period_start()):
            await uow.commit()
            logger.info("usage_period_reset", user_id=str(user_id))

        profile = await uow.profiles.get(user_id)
        if not profile:
            raise ProfileNotFoundError(str(user_id))
        return profile

    @retry_transient()
    async def status(self, user_id: UUID) -> Profile:
        """Current usage for the billing period, without enforcing the limit."""
        async with self._uow_factory() as uow:
            return await self._load_current(uow, user_id)

    async def try_consume(self, user_id: UUID) -> Profile:
        """Check that one more generation fits in the quota.

        Raises:
            ProfileNotFoundError: If the user has no profile.
            QuotaExceededError: If usage_count has reached usage_limit.
        """
        async with self._uow_factory() as uow:
            profile = await self._load_current(uow, user_id)

            if not profile.has_quota_remaining:
                logger.info(
                    "quota_exceeded",
                    user_id=str(user_id),
                    usage_count=profile.usage_count,
                    usage_limit=profile.usage_limit,
                )
                raise QuotaExceededError(profile.usage_count, profile.usage_limit)

            return profile

    async def consume(self, user_id: UUID, idempotency_key: str | None = None) -> Profile:
        """Record one successful generation.

        With an idempotency key that was already recorded for this user the
        profile is returned unchanged.
        """
        async with self._uow_factory() as uow:
            await self._load_current(uow, user_id)

            if idempotency_key:
                seen = await uow.profiles.get_usage_event(user_id, idempotency_key)
                if seen:
                    return await self._load_current(uow, user_id)

            profile = await uow.profiles.increment_usage(user_id)
            if not profile:
                raise ProfileNotFoundError(str(user_id))

            if idempotency_key:
                try:
                    await uow.profiles.record_usage_event(
                        UsageEvent(user_id=user_id, idempotency_key=idempotency_key)
                    )
                except IntegrityError:
                    # A concurrent request with the same key won; drop our increment.
                    await uow.rollback()
                    return await self._load_current(uow, user_id)

            await uow.commit()
            logger.info(
                "usage_consumed",
                user_id=str(user_id),
                usage_count=profile.usage_count,
                usage_limit=profile.usage_limit,
            )
            return profile

    async def run_metered(
        self,
        user_id: UUID,
        operation: Callable[[], Awaitable[T]],
        idempotency_key: str | None = None,
    ) -> T:
        """Check quota, run ``operation``, then consume one unit.

        If the operation raises, nothing is consumed and the error propagates.
        """
        await self.try_consume(user_id)
        result = await operation()
        await self.consume(user_id, idempotency_key)
        return result

    async def generate(
        self,
        user_id: UUID,
        generator: IContentGenerator,
        prompt: str,
        idempotency_key: str | None = None,
        **options: Any,
    ) -> str:
        """Run a metered generation through a content generator."""

        async def _call() -> str:
            return await generator.generate(prompt, **options)

        return await self.run_metered(user_id, _call, idempotency_key)
