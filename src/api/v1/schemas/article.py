"""Pydantic schemas for Article and Comment API."""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ArticleCreate(BaseModel):
    """Schema for creating an Article."""

    title: str = Field(..., min_length=1, max_length=200)
    content: str = ""
    keywords: list[str] = Field(default_factory=list, max_length=50)
    meta_description: Optional[str] = Field(None, max_length=300)
    seo_score: Optional[int] = Field(None, ge=0, le=100)


class ArticleUpdate(BaseModel):
    """Schema for updating an Article. Only fields that are sent change."""

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    content: Optional[str] = None
    keywords: Optional[list[str]] = Field(None, max_length=50)
    meta_description: Optional[str] = Field(None, max_length=300)
    seo_score: Optional[int] = Field(None, ge=0, le=100)


class ArticleResponse(BaseModel):
    """Schema for Article response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    project_id: UUID
    title: str
    content: str
    keywords: list[str]
    meta_description: Optional[str]
    seo_score: Optional[int]
    created_by: UUID
    created_at: datetime
    updated_at: datetime


class ArticleListResponse(BaseModel):
    """Schema for list of Articles response."""

    data: list[ArticleResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class ArticleDetailResponse(BaseModel):
    """Schema for single Article response."""

    data: ArticleResponse


class CommentCreate(BaseModel):
    """Schema for creating a Comment."""

    content: str = Field(..., min_length=1, max_length=2000)
    position: Optional[dict[str, Any]] = None


class CommentUpdate(BaseModel):
    """Schema for editing a Comment."""

    content: str = Field(..., min_length=1, max_length=2000)


class CommentResolveRequest(BaseModel):
    """Schema for resolving or reopening a Comment."""

    resolved: bool = True


class CommentResponse(BaseModel):
    """Schema for Comment response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    article_id: UUID
    user_id: UUID
    content: str
    position: Optional[dict[str, Any]] = None
    resolved: bool
    created_at: datetime
    updated_at: datetime


class CommentListResponse(BaseModel):
    """Schema for list of Comments response."""

    data: list[CommentResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class CommentDetailResponse(BaseModel):
    """Schema for single Comment response."""

    data: CommentResponse
