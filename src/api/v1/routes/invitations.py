"""Invitation API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import InitializedUser
from api.v1.dependencies import get_invitation_service
from api.v1.schemas.invitation import (
    AcceptInvitationRequest,
    AcceptInvitationResponse,
    CreateInvitationRequest,
    InvitationCreatedResponse,
    InvitationDetailResponse,
    InvitationListResponse,
    InvitationResponse,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.services.invitation_service import InvitationService

# Project-scoped invitation routes
project_invitations_router = APIRouter(
    prefix="/projects/{project_id}/invitations",
    tags=["invitations"],
)

# User-scoped invitation routes (accept, decline, pending)
invitations_router = APIRouter(
    prefix="/invitations",
    tags=["invitations"],
)


@project_invitations_router.post(
    "",
    response_model=InvitationCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Invite someone to a project",
    responses={
        201: {"description": "Invitation created"},
        400: {"description": "Invalid email or role"},
        403: {"description": "Insufficient permissions (Admin+ only)"},
        404: {"description": "Project not found"},
        409: {"description": "Duplicate invitation or already a member"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def create_invitation(
    request: Request,
    project_id: UUID,
    body: CreateInvitationRequest,
    user: InitializedUser,
    service: InvitationService = Depends(get_invitation_service),
) -> InvitationCreatedResponse:
    """Invite an email address to the project. Requires Admin+ role."""
    invitation, raw_token = await service.invite(
        actor_id=user.id,
        project_id=project_id,
        email=body.email,
        role=body.role,
    )
    return InvitationCreatedResponse(
        data=InvitationResponse.from_entity(invitation),
        token=raw_token,
    )


@project_invitations_router.get(
    "",
    response_model=InvitationListResponse,
    summary="List pending project invitations",
    responses={
        403: {"description": "Not a member of this project"},
        404: {"description": "Project not found"},
    },
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_project_invitations(
    request: Request,
    project_id: UUID,
    user: InitializedUser,
    service: InvitationService = Depends(get_invitation_service),
) -> InvitationListResponse:
    invitations = await service.list_pending_for_project(project_id, user.id)
    data = [InvitationResponse.from_entity(inv) for inv in invitations]
    return InvitationListResponse(data=data, meta={"total": len(data)})


@project_invitations_router.delete(
    "/{invitation_id}",
    response_model=InvitationDetailResponse,
    summary="Cancel a pending invitation",
    responses={
        403: {"description": "Insufficient permissions (Admin+ only)"},
        404: {"description": "Invitation not found or no longer pending"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def cancel_invitation(
    request: Request,
    project_id: UUID,
    invitation_id: UUID,
    user: InitializedUser,
    service: InvitationService = Depends(get_invitation_service),
) -> InvitationDetailResponse:
    """Withdraw an invitation. Its token stops working immediately."""
    invitation = await service.cancel(user.id, invitation_id, project_id=project_id)
    return InvitationDetailResponse(data=InvitationResponse.from_entity(invitation))


@invitations_router.get(
    "/pending",
    response_model=InvitationListResponse,
    summary="List my pending invitations",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_my_invitations(
    request: Request,
    user: InitializedUser,
    service: InvitationService = Depends(get_invitation_service),
) -> InvitationListResponse:
    """Pending invitations addressed to the authenticated user's email."""
    invitations = await service.list_pending_for_user(user.email)
    data = [InvitationResponse.from_entity(inv) for inv in invitations]
    return InvitationListResponse(data=data, meta={"total": len(data)})


@invitations_router.post(
    "/accept",
    response_model=AcceptInvitationResponse,
    summary="Accept an invitation by token",
    responses={
        200: {"description": "Invitation accepted, membership created"},
        403: {"description": "Invitation is for a different email"},
        404: {"description": "Invalid token"},
        409: {"description": "Already a member"},
        400: {"description": "Invitation expired"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def accept_invitation_by_token(
    request: Request,
    body: AcceptInvitationRequest,
    user: InitializedUser,
    service: InvitationService = Depends(get_invitation_service),
) -> AcceptInvitationResponse:
    """Accept using the raw token from the invitation link."""
    member = await service.accept_by_token(body.token, user.id, user.email)
    return AcceptInvitationResponse(project_id=member.project_id, role=member.role.label)


@invitations_router.post(
    "/{invitation_id}/accept",
    response_model=AcceptInvitationResponse,
    summary="Accept an invitation",
    responses={
        403: {"description": "Invitation is for a different email"},
        404: {"description": "Invitation not found"},
        409: {"description": "Already a member"},
        400: {"description": "Invitation expired"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def accept_invitation(
    request: Request,
    invitation_id: UUID,
    user: InitializedUser,
    service: InvitationService = Depends(get_invitation_service),
) -> AcceptInvitationResponse:
    """Accept from the in-app invitation banner."""
    member = await service.accept(invitation_id, user.id, user.email)
    return AcceptInvitationResponse(project_id=member.project_id, role=member.role.label)


@invitations_router.post(
    "/{invitation_id}/decline",
    response_model=InvitationDetailResponse,
    summary="Decline an invitation",
    responses={
        403: {"description": "Invitation is for a different email"},
        404: {"description": "Invitation not found"},
        400: {"description": "Invitation already accepted"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def decline_invitation(
    request: Request,
    invitation_id: UUID,
    user: InitializedUser,
    service: InvitationService = Depends(get_invitation_service),
) -> InvitationDetailResponse:
    invitation = await service.decline(invitation_id, user.id, user.email)
    return InvitationDetailResponse(data=InvitationResponse.from_entity(invitation))
