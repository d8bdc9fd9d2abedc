"""Pydantic schemas for Content Brief API."""

from datetime import datetime
from typing import Any, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

ContentType = Literal["blog-post", "article", "guide", "whitepaper", "case-study"]


class BriefGenerateRequest(BaseModel):
    """Schema for generating a brief from a topic."""

    topic: str = Field(..., min_length=1, max_length=200)
    industry: Optional[str] = Field(None, max_length=100)
    content_type: ContentType = "blog-post"
    project_id: Optional[UUID] = None


class BriefCreate(BaseModel):
    """Schema for saving a hand-written brief."""

    title: str = Field(..., min_length=1, max_length=200)
    topic: str = Field(..., min_length=1, max_length=200)
    project_id: Optional[UUID] = None
    target_audience: str = Field("", max_length=300)
    content_outline: list[str] = Field(default_factory=list, max_length=50)
    key_points: list[str] = Field(default_factory=list, max_length=50)
    tone_style: str = Field("", max_length=200)
    word_count: str = Field("", max_length=50)
    target_keywords: list[str] = Field(default_factory=list, max_length=50)
    seo_tips: list[str] = Field(default_factory=list, max_length=50)


class BriefUpdate(BaseModel):
    """Schema for updating a brief. Only fields that are sent change."""

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    topic: Optional[str] = Field(None, min_length=1, max_length=200)
    project_id: Optional[UUID] = None
    target_audience: Optional[str] = Field(None, max_length=300)
    content_outline: Optional[list[str]] = Field(None, max_length=50)
    key_points: Optional[list[str]] = Field(None, max_length=50)
    tone_style: Optional[str] = Field(None, max_length=200)
    word_count: Optional[str] = Field(None, max_length=50)
    target_keywords: Optional[list[str]] = Field(None, max_length=50)
    seo_tips: Optional[list[str]] = Field(None, max_length=50)


class BriefResponse(BaseModel):
    """Schema for Content Brief response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    project_id: Optional[UUID]
    title: str
    topic: str
    target_audience: str
    content_outline: list[str]
    key_points: list[str]
    tone_style: str
    word_count: str
    target_keywords: list[str]
    seo_tips: list[str]
    created_at: datetime
    updated_at: datetime


class BriefListResponse(BaseModel):
    """Schema for list of Content Briefs response."""

    data: list[BriefResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class BriefDetailResponse(BaseModel):
    """Schema for single Content Brief response."""

    data: BriefResponse
