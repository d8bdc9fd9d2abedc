"""Article and review comment API routes."""

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import InitializedUser
from api.v1.dependencies import get_article_service, get_comment_service
from api.v1.schemas.article import (
    ArticleCreate,
    ArticleDetailResponse,
    ArticleListResponse,
    ArticleResponse,
    ArticleUpdate,
    CommentCreate,
    CommentDetailResponse,
    CommentListResponse,
    CommentResolveRequest,
    CommentResponse,
    CommentUpdate,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.services.article_service import ArticleService
from domain.services.comment_service import CommentService

project_articles_router = APIRouter(prefix="/projects/{project_id}/articles", tags=["articles"])
articles_router = APIRouter(prefix="/articles", tags=["articles"])
comments_router = APIRouter(prefix="/comments", tags=["comments"])


@project_articles_router.get("", response_model=ArticleListResponse, summary="List articles")
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_articles(
    request: Request,
    project_id: UUID,
    user: InitializedUser,
    service: ArticleService = Depends(get_article_service),
) -> ArticleListResponse:
    articles = await service.list_for_project(project_id, user.id)
    data = [ArticleResponse.model_validate(a) for a in articles]
    return ArticleListResponse(data=data, meta={"total": len(data)})


@project_articles_router.post(
    "",
    response_model=ArticleDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an article",
    responses={403: {"description": "Editor+ only"}, 404: {"description": "Project not found"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def create_article(
    request: Request,
    project_id: UUID,
    body: ArticleCreate,
    user: InitializedUser,
    service: ArticleService = Depends(get_article_service),
) -> ArticleDetailResponse:
    article = await service.create(
        project_id,
        user.id,
        title=body.title,
        content=body.content,
        keywords=body.keywords,
        meta_description=body.meta_description,
        seo_score=body.seo_score,
    )
    return ArticleDetailResponse(data=ArticleResponse.model_validate(article))


@articles_router.get("/{article_id}", response_model=ArticleDetailResponse, summary="Get an article")
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_article(
    request: Request,
    article_id: UUID,
    user: InitializedUser,
    service: ArticleService = Depends(get_article_service),
) -> ArticleDetailResponse:
    article = await service.get(article_id, user.id)
    return ArticleDetailResponse(data=ArticleResponse.model_validate(article))


@articles_router.patch(
    "/{article_id}",
    response_model=ArticleDetailResponse,
    summary="Update an article",
    responses={403: {"description": "Editor+ only"}, 404: {"description": "Article not found"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_article(
    request: Request,
    article_id: UUID,
    body: ArticleUpdate,
    user: InitializedUser,
    service: ArticleService = Depends(get_article_service),
) -> ArticleDetailResponse:
    """Partial update. Sending ``null`` clears meta_description or seo_score."""
    clearable: dict[str, Any] = {
        name: getattr(body, name)
        for name in ("meta_description", "seo_score")
        if name in body.model_fields_set
    }
    article = await service.update(
        article_id,
        user.id,
        title=body.title,
        content=body.content,
        keywords=body.keywords,
        **clearable,
    )
    return ArticleDetailResponse(data=ArticleResponse.model_validate(article))


@articles_router.delete(
    "/{article_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an article",
    responses={403: {"description": "Editor+ only"}, 404: {"description": "Article not found"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_article(
    request: Request,
    article_id: UUID,
    user: InitializedUser,
    service: ArticleService = Depends(get_article_service),
) -> None:
    await service.delete(article_id, user.id)


@articles_router.get(
    "/{article_id}/comments",
    response_model=CommentListResponse,
    tags=["comments"],
    summary="List review comments",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_comments(
    request: Request,
    article_id: UUID,
    user: InitializedUser,
    service: CommentService = Depends(get_comment_service),
) -> CommentListResponse:
    comments = await service.list_for_article(article_id, user.id)
    data = [CommentResponse.model_validate(c) for c in comments]
    return CommentListResponse(data=data, meta={"total": len(data)})


@articles_router.post(
    "/{article_id}/comments",
    response_model=CommentDetailResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["comments"],
    summary="Comment on an article",
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def create_comment(
    request: Request,
    article_id: UUID,
    body: CommentCreate,
    user: InitializedUser,
    service: CommentService = Depends(get_comment_service),
) -> CommentDetailResponse:
    comment = await service.create(article_id, user.id, body.content, position=body.position)
    return CommentDetailResponse(data=CommentResponse.model_validate(comment))


@comments_router.patch(
    "/{comment_id}",
    response_model=CommentDetailResponse,
    summary="Edit a comment",
    responses={403: {"description": "Author only"}, 404: {"description": "Comment not found"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_comment(
    request: Request,
    comment_id: UUID,
    body: CommentUpdate,
    user: InitializedUser,
    service: CommentService = Depends(get_comment_service),
) -> CommentDetailResponse:
    comment = await service.update(comment_id, user.id, body.content)
    return CommentDetailResponse(data=CommentResponse.model_validate(comment))


@comments_router.post(
    "/{comment_id}/resolve",
    response_model=CommentDetailResponse,
    summary="Resolve or reopen a comment",
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def resolve_comment(
    request: Request,
    comment_id: UUID,
    user: InitializedUser,
    body: CommentResolveRequest | None = None,
    service: CommentService = Depends(get_comment_service),
) -> CommentDetailResponse:
    resolved = body.resolved if body else True
    comment = await service.set_resolved(comment_id, user.id, resolved=resolved)
    return CommentDetailResponse(data=CommentResponse.model_validate(comment))


@comments_router.delete(
    "/{comment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a comment",
    responses={
        403: {"description": "Author or Admin+ only"},
        404: {"description": "Comment not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_comment(
    request: Request,
    comment_id: UUID,
    user: InitializedUser,
    service: CommentService = Depends(get_comment_service),
) -> None:
    await service.delete(comment_id, user.id)
