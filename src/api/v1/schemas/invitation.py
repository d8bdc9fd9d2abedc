"""Pydantic schemas for Invitation API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.invitation import Invitation


class CreateInvitationRequest(BaseModel):
    """Schema for inviting someone to a project.

    Email syntax is checked by the invitation service so that a malformed
    address is reported the same way from every entry point.
    """

    email: str = Field(..., min_length=3, max_length=255)
    role: str = Field("viewer", pattern="^(admin|editor|viewer)$")


class AcceptInvitationRequest(BaseModel):
    """Schema for accepting an invitation with its raw token."""

    token: str = Field(..., min_length=1, max_length=512)


class InvitationResponse(BaseModel):
    """Schema for Invitation response."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "project_id": "456e4567-e89b-12d3-a456-426614174000",
                "email": "writer@example.com",
                "role": "editor",
                "status": "pending",
                "invited_by": "789e4567-e89b-12d3-a456-426614174000",
                "created_at": "2026-02-01T10:00:00",
                "expires_at": "2026-02-08T10:00:00",
            }
        },
    )

    id: UUID
    project_id: UUID
    email: str
    role: str
    status: str
    invited_by: UUID
    created_at: datetime
    expires_at: datetime
    accepted_at: datetime | None = None

    @classmethod
    def from_entity(cls, invitation: Invitation) -> "InvitationResponse":
        return cls(
            id=invitation.id,
            project_id=invitation.project_id,
            email=invitation.email,
            role=invitation.role.label,
            status=invitation.status.value,
            invited_by=invitation.invited_by,
            created_at=invitation.created_at,
            expires_at=invitation.expires_at,
            accepted_at=invitation.accepted_at,
        )


class InvitationListResponse(BaseModel):
    """Schema for list of Invitations response."""

    data: list[InvitationResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class InvitationDetailResponse(BaseModel):
    """Schema for a single Invitation response."""

    data: InvitationResponse


class InvitationCreatedResponse(BaseModel):
    """Schema for invitation creation response (includes raw token)."""

    data: InvitationResponse
    token: str = Field(
        ...,
        description="Raw invitation token. Share this with the invitee. "
        "This value is only shown once.",
    )


class AcceptInvitationResponse(BaseModel):
    """Schema for accepting an invitation response."""

    project_id: UUID
    role: str
    message: str = "Invitation accepted successfully"
