"""Pydantic schemas for Project and membership API."""

from datetime import datetime
from typing import Any, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from domain.entities.project import Project, ProjectMember


class ProjectCreate(BaseModel):
    """Schema for creating a Project."""

    title: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title must not be blank")
        return v.strip()


class ProjectUpdate(BaseModel):
    """Schema for updating a Project (all fields optional)."""

    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)


class ProjectResponse(BaseModel):
    """Schema for Project response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "title": "Spring campaign",
                "description": "Landing pages for the spring launch",
                "owner_id": "456e4567-e89b-12d3-a456-426614174000",
                "created_at": "2026-02-01T10:00:00",
                "updated_at": "2026-02-01T10:00:00",
            }
        },
    )

    id: UUID
    title: str
    description: Optional[str]
    owner_id: UUID
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, project: Project) -> "ProjectResponse":
        return cls.model_validate(project)


class ProjectListResponse(BaseModel):
    """Schema for list of Projects response."""

    data: List[ProjectResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class ProjectDetailResponse(BaseModel):
    """Schema for single Project response."""

    data: ProjectResponse


class PermissionsResponse(BaseModel):
    """What the current user may do in a project."""

    role: Optional[str]
    can_view: bool
    can_edit: bool
    can_manage_team: bool
    can_generate: bool


class MemberResponse(BaseModel):
    """Schema for Project Member response."""

    user_id: UUID
    project_id: UUID
    role: str
    status: str
    invited_by: Optional[UUID] = None
    joined_at: datetime

    @classmethod
    def from_entity(cls, member: ProjectMember) -> "MemberResponse":
        return cls(
            user_id=member.user_id,
            project_id=member.project_id,
            role=member.role.label,
            status=member.status.value,
            invited_by=member.invited_by,
            joined_at=member.joined_at,
        )


class MemberListResponse(BaseModel):
    """Schema for list of Project Members response."""

    data: List[MemberResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class MemberDetailResponse(BaseModel):
    """Schema for single Project Member response."""

    data: MemberResponse


class UpdateMemberRoleRequest(BaseModel):
    """Schema for changing a member's role."""

    role: str = Field(..., pattern="^(admin|editor|viewer)$")
