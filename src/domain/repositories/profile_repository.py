"""Profile repository protocol."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from domain.entities.profile import Profile, SubscriptionTier, UsageEvent


class IProfileRepository(Protocol):
    """Repository interface for Profile entities and the usage ledger."""

    async def get(self, id: UUID) -> Profile | None:
        """Get a profile by user ID."""
        ...

    async def get_by_email(self, email: str) -> Profile | None:
        """Get a profile by normalized email."""
        ...

    async def create(self, profile: Profile) -> Profile:
        """Create a new profile."""
        ...

    async def update_tier(
        self, id: UUID, tier: SubscriptionTier, usage_limit: int
    ) -> Profile | None:
        """Set the subscription tier and its usage limit."""
        ...

    async def update_display_name(self, id: UUID, display_name: str | None) -> Profile | None:
        """Set or clear the display name."""
        ...

    async def reset_usage_if_stale(self, id: UUID, period_start: datetime) -> bool:
        """Zero usage_count when the stored period began before ``period_start``.

        Returns True if a row was reset.
        """
        ...

    async def increment_usage(self, id: UUID) -> Profile | None:
        """Atomically add one to usage_count and return the fresh profile."""
        ...

    async def get_usage_event(self, user_id: UUID, idempotency_key: str) -> UsageEvent | None:
        """Get a recorded usage event by its idempotency key."""
        ...

    async def record_usage_event(self, event: UsageEvent) -> UsageEvent:
        """Persist a usage event. Unique on (user_id, idempotency_key)."""
        ...
