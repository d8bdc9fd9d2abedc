"""Project and membership API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import InitializedUser
from api.v1.dependencies import (
    get_authorization_service,
    get_membership_service,
    get_project_service,
)
from api.v1.schemas.project import (
    MemberDetailResponse,
    MemberListResponse,
    MemberResponse,
    PermissionsResponse,
    ProjectCreate,
    ProjectDetailResponse,
    ProjectListResponse,
    ProjectResponse,
    ProjectUpdate,
    UpdateMemberRoleRequest,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.services.authorization_service import AuthorizationService
from domain.services.membership_service import MembershipService
from domain.services.project_service import ProjectService

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("", response_model=ProjectListResponse, summary="List my projects")
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_projects(
    request: Request,
    user: InitializedUser,
    service: ProjectService = Depends(get_project_service),
) -> ProjectListResponse:
    """Projects the user is an active member of, newest first."""
    projects = await service.list_for_user(user.id)
    data = [ProjectResponse.from_entity(p) for p in projects]
    return ProjectListResponse(data=data, meta={"total": len(data)})


@router.post(
    "",
    response_model=ProjectDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a project",
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def create_project(
    request: Request,
    body: ProjectCreate,
    user: InitializedUser,
    service: ProjectService = Depends(get_project_service),
) -> ProjectDetailResponse:
    """Create a project. The creator becomes its Owner."""
    project = await service.create(user.id, body.title, body.description)
    return ProjectDetailResponse(data=ProjectResponse.from_entity(project))


@router.get(
    "/{project_id}",
    response_model=ProjectDetailResponse,
    summary="Get a project",
    responses={403: {"description": "Not a member"}, 404: {"description": "Project not found"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_project(
    request: Request,
    project_id: UUID,
    user: InitializedUser,
    service: ProjectService = Depends(get_project_service),
) -> ProjectDetailResponse:
    project = await service.get(project_id, user.id)
    return ProjectDetailResponse(data=ProjectResponse.from_entity(project))


@router.patch(
    "/{project_id}",
    response_model=ProjectDetailResponse,
    summary="Update a project",
    responses={403: {"description": "Admin+ only"}, 404: {"description": "Project not found"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_project(
    request: Request,
    project_id: UUID,
    body: ProjectUpdate,
    user: InitializedUser,
    service: ProjectService = Depends(get_project_service),
) -> ProjectDetailResponse:
    project = await service.update(
        project_id, user.id, title=body.title, description=body.description
    )
    return ProjectDetailResponse(data=ProjectResponse.from_entity(project))


@router.delete(
    "/{project_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a project",
    responses={403: {"description": "Owner only"}, 404: {"description": "Project not found"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_project(
    request: Request,
    project_id: UUID,
    user: InitializedUser,
    service: ProjectService = Depends(get_project_service),
) -> None:
    """Delete a project with its team, invitations, articles and history."""
    await service.delete(project_id, user.id)


@router.get(
    "/{project_id}/permissions",
    response_model=PermissionsResponse,
    summary="What can I do in this project",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_permissions(
    request: Request,
    project_id: UUID,
    user: InitializedUser,
    service: AuthorizationService = Depends(get_authorization_service),
) -> PermissionsResponse:
    """Role and permission flags. UI hints only; every action re-checks."""
    flags = await service.permissions(user.id, project_id)
    return PermissionsResponse(**flags, can_generate=await service.can_generate(user.id))


@router.get(
    "/{project_id}/members",
    response_model=MemberListResponse,
    summary="List project members",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_members(
    request: Request,
    project_id: UUID,
    user: InitializedUser,
    service: MembershipService = Depends(get_membership_service),
) -> MemberListResponse:
    """Active members in join order."""
    members = await service.list_active_members(project_id, user.id)
    data = [MemberResponse.from_entity(m) for m in members]
    return MemberListResponse(data=data, meta={"total": len(data)})


@router.patch(
    "/{project_id}/members/{member_user_id}",
    response_model=MemberDetailResponse,
    summary="Change a member's role",
    responses={
        403: {"description": "Admin+ only; owner and self cannot be changed"},
        404: {"description": "Project or member not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_member_role(
    request: Request,
    project_id: UUID,
    member_user_id: UUID,
    body: UpdateMemberRoleRequest,
    user: InitializedUser,
    service: MembershipService = Depends(get_membership_service),
) -> MemberDetailResponse:
    member = await service.set_role(user.id, project_id, member_user_id, body.role)
    return MemberDetailResponse(data=MemberResponse.from_entity(member))


@router.delete(
    "/{project_id}/members/{member_user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a member",
    responses={
        403: {"description": "Admin+ only; owner and self cannot be removed"},
        404: {"description": "Project or member not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def remove_member(
    request: Request,
    project_id: UUID,
    member_user_id: UUID,
    user: InitializedUser,
    service: MembershipService = Depends(get_membership_service),
) -> None:
    """Deactivate the membership; the row and its history are kept."""
    await service.deactivate(user.id, project_id, member_user_id)
