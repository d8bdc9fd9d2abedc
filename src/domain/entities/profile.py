"""Profile domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4


class SubscriptionTier(StrEnum):
    """Billing tier. Changed only by the billing integration."""

    FREE = "free"
    PRO = "pro"
    ENTERPRISE = "enterprise"


def billing_period_start(now: datetime | None = None) -> datetime:
    """First instant of the UTC calendar month containing ``now``."""
    now = now or datetime.utcnow()
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


@dataclass
class Profile:
    """Domain entity for a user profile (keyed by the identity provider subject)."""

    id: UUID = field(default_factory=uuid4)
    email: str = ""
    display_name: str | None = None
    subscription_tier: SubscriptionTier = SubscriptionTier.FREE
    usage_count: int = 0
    usage_limit: int = 5
    usage_period_start: datetime = field(default_factory=billing_period_start)
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at

    @property
    def has_quota_remaining(self) -> bool:
        return self.usage_count < self.usage_limit

    @property
    def remaining_quota(self) -> int:
        return max(self.usage_limit - self.usage_count, 0)


@dataclass
class ProfileStats:
    """Dashboard counters for a user."""

    total_projects: int
    total_articles: int
    usage_count: int
    usage_limit: int


@dataclass
class UsageEvent:
    """One recorded AI generation, keyed by a caller-supplied idempotency key."""

    user_id: UUID
    idempotency_key: str
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.utcnow)
