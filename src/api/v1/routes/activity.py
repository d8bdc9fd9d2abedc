"""Activity log API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request

from api.dependencies.auth import InitializedUser
from api.v1.dependencies import get_activity_service
from api.v1.schemas.activity import ActivityListResponse, ActivityLogResponse
from core.rate_limit import READ_LIMIT, limiter
from domain.entities.activity import ActivityLog
from domain.services.activity_service import ActivityService

router = APIRouter(prefix="/projects/{project_id}/activity", tags=["activity"])


def _to_response(entry: ActivityLog) -> ActivityLogResponse:
    return ActivityLogResponse(
        id=entry.id,
        project_id=entry.project_id,
        actor_id=entry.actor_id,
        action=entry.action,
        resource_type=entry.resource_type,
        resource_id=entry.resource_id,
        metadata=entry.metadata,
        created_at=entry.created_at,
    )


@router.get(
    "",
    response_model=ActivityListResponse,
    summary="Get project activity feed",
    responses={
        403: {"description": "Not a member of this project"},
        404: {"description": "Project not found"},
    },
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_project_activity(
    request: Request,
    project_id: UUID,
    user: InitializedUser,
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    service: ActivityService = Depends(get_activity_service),
) -> ActivityListResponse:
    """Project history, newest first."""
    entries = await service.list_for_project(project_id, user.id, limit=limit, offset=offset)
    return ActivityListResponse(
        data=[_to_response(e) for e in entries],
        meta={"limit": limit, "offset": offset},
    )


@router.get(
    "/{resource_type}/{resource_id}",
    response_model=ActivityListResponse,
    summary="Get history of one resource",
    responses={
        403: {"description": "Not a member of this project"},
        404: {"description": "Project not found"},
    },
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_resource_activity(
    request: Request,
    project_id: UUID,
    resource_type: str,
    resource_id: UUID,
    user: InitializedUser,
    limit: int = Query(50, ge=1, le=100),
    service: ActivityService = Depends(get_activity_service),
) -> ActivityListResponse:
    entries = await service.list_for_resource(
        project_id, user.id, resource_type, resource_id, limit=limit
    )
    return ActivityListResponse(
        data=[_to_response(e) for e in entries],
        meta={"limit": limit},
    )
