"""Current-user API routes: profile, dashboard stats and usage quota."""

from typing import Annotated

from fastapi import APIRouter, Depends, Header, Request

from api.dependencies.auth import InitializedUser
from api.v1.dependencies import get_profile_service, get_quota_service
from api.v1.schemas.profile import (
    ProfileResponse,
    ProfileStatsResponse,
    ProfileUpdate,
    UsageResponse,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.services.profile_service import ProfileService
from domain.services.quota_service import QuotaService

router = APIRouter(prefix="/me", tags=["profile"])


@router.get("", response_model=ProfileResponse, summary="Get my profile")
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_me(
    request: Request,
    user: InitializedUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    """Return the authenticated user's profile, creating it on first call."""
    profile = await service.get(user.id)
    return ProfileResponse.model_validate(profile)


@router.patch("", response_model=ProfileResponse, summary="Update my profile")
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_me(
    request: Request,
    body: ProfileUpdate,
    user: InitializedUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    """Set the display name. Sending ``null`` or a blank name clears it."""
    if "display_name" not in body.model_fields_set:
        return ProfileResponse.model_validate(await service.get(user.id))
    profile = await service.update_profile(user.id, body.display_name)
    return ProfileResponse.model_validate(profile)


@router.get("/stats", response_model=ProfileStatsResponse, summary="Get my dashboard stats")
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_my_stats(
    request: Request,
    user: InitializedUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileStatsResponse:
    """Project count, authored article count and usage for the current period."""
    stats = await service.get_stats(user.id)
    return ProfileStatsResponse.model_validate(stats)


@router.get("/usage", response_model=UsageResponse, summary="Get my generation quota")
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_my_usage(
    request: Request,
    user: InitializedUser,
    service: QuotaService = Depends(get_quota_service),
) -> UsageResponse:
    """Usage for the current billing month and whether another generation fits."""
    profile = await service.status(user.id)
    return UsageResponse.from_profile(profile)


@router.post(
    "/usage/consume",
    response_model=UsageResponse,
    summary="Record one AI generation",
    responses={
        200: {"description": "Usage recorded (or already recorded for this key)"},
        404: {"description": "Profile not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def consume_usage(
    request: Request,
    user: InitializedUser,
    idempotency_key: Annotated[str | None, Header(max_length=255)] = None,
    service: QuotaService = Depends(get_quota_service),
) -> UsageResponse:
    """Count one successful generation.

    Retrying with the same ``Idempotency-Key`` header never counts twice.
    """
    profile = await service.consume(user.id, idempotency_key=idempotency_key)
    return UsageResponse.from_profile(profile)
