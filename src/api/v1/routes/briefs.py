"""Content brief API routes."""

from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, Depends, Header, Request, status

from api.dependencies.auth import InitializedUser
from api.v1.dependencies import get_brief_service
from api.v1.schemas.brief import (
    BriefCreate,
    BriefDetailResponse,
    BriefGenerateRequest,
    BriefListResponse,
    BriefResponse,
    BriefUpdate,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.services.brief_service import BriefService

router = APIRouter(prefix="/briefs", tags=["briefs"])


@router.get("", response_model=BriefListResponse, summary="List my content briefs")
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_briefs(
    request: Request,
    user: InitializedUser,
    service: BriefService = Depends(get_brief_service),
) -> BriefListResponse:
    """The caller's briefs, most recently updated first."""
    briefs = await service.list_for_user(user.id)
    data = [BriefResponse.model_validate(b) for b in briefs]
    return BriefListResponse(data=data, meta={"total": len(data)})


@router.post(
    "",
    response_model=BriefDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Save a content brief",
    responses={403: {"description": "Editor+ on the project only"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def create_brief(
    request: Request,
    body: BriefCreate,
    user: InitializedUser,
    service: BriefService = Depends(get_brief_service),
) -> BriefDetailResponse:
    brief = await service.create(user.id, **body.model_dump())
    return BriefDetailResponse(data=BriefResponse.model_validate(brief))


@router.post(
    "/generate",
    response_model=BriefDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Generate a content brief",
    responses={
        403: {"description": "Editor+ on the project only"},
        429: {"description": "Monthly generation quota used up"},
        502: {"description": "Generator failed; no quota consumed"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def generate_brief(
    request: Request,
    body: BriefGenerateRequest,
    user: InitializedUser,
    idempotency_key: Annotated[str | None, Header(max_length=255)] = None,
    service: BriefService = Depends(get_brief_service),
) -> BriefDetailResponse:
    """Generate and save a brief. Counts one generation against the quota.

    Retrying with the same ``Idempotency-Key`` header never counts twice.
    """
    brief = await service.generate(
        user.id,
        topic=body.topic,
        industry=body.industry,
        content_type=body.content_type,
        project_id=body.project_id,
        idempotency_key=idempotency_key,
    )
    return BriefDetailResponse(data=BriefResponse.model_validate(brief))


@router.get("/{brief_id}", response_model=BriefDetailResponse, summary="Get a content brief")
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_brief(
    request: Request,
    brief_id: UUID,
    user: InitializedUser,
    service: BriefService = Depends(get_brief_service),
) -> BriefDetailResponse:
    brief = await service.get(brief_id, user.id)
    return BriefDetailResponse(data=BriefResponse.model_validate(brief))


@router.patch(
    "/{brief_id}",
    response_model=BriefDetailResponse,
    summary="Update a content brief",
    responses={404: {"description": "Brief not found"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_brief(
    request: Request,
    brief_id: UUID,
    body: BriefUpdate,
    user: InitializedUser,
    service: BriefService = Depends(get_brief_service),
) -> BriefDetailResponse:
    """Partial update. Sending ``null`` for project_id detaches the brief."""
    changes: dict[str, Any] = {
        name: value
        for name, value in body.model_dump(exclude_unset=True).items()
        if value is not None or name == "project_id"
    }
    brief = await service.update(brief_id, user.id, **changes)
    return BriefDetailResponse(data=BriefResponse.model_validate(brief))


@router.delete(
    "/{brief_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a content brief",
    responses={404: {"description": "Brief not found"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_brief(
    request: Request,
    brief_id: UUID,
    user: InitializedUser,
    service: BriefService = Depends(get_brief_service),
) -> None:
    await service.delete(brief_id, user.id)
