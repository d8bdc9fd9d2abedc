"""Pydantic schemas for the current user's profile and usage."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.profile import Profile


class ProfileResponse(BaseModel):
    """Schema for Profile response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    display_name: Optional[str]
    subscription_tier: str
    usage_count: int
    usage_limit: int
    created_at: datetime


class ProfileUpdate(BaseModel):
    """Schema for editing the current user's profile. Only fields that are sent change."""

    display_name: Optional[str] = Field(None, max_length=100)


class ProfileStatsResponse(BaseModel):
    """Dashboard counters for the current user."""

    model_config = ConfigDict(from_attributes=True)

    total_projects: int
    total_articles: int
    usage_count: int
    usage_limit: int


class UsageResponse(BaseModel):
    """Quota status for the current billing period."""

    usage_count: int
    usage_limit: int
    remaining: int
    can_generate: bool
    period_start: datetime

    @classmethod
    def from_profile(cls, profile: Profile) -> "UsageResponse":
        return cls(
            usage_count=profile.usage_count,
            usage_limit=profile.usage_limit,
            remaining=profile.remaining_quota,
            can_generate=profile.has_quota_remaining,
            period_start=profile.usage_period_start,
        )
