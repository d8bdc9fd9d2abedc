"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.activity import router as activity_router
from api.v1.routes.briefs import router as briefs_router
from api.v1.routes.articles import (
    articles_router,
    comments_router,
    project_articles_router,
)
from api.v1.routes.invitations import invitations_router, project_invitations_router
from api.v1.routes.profile import router as profile_router
from api.v1.routes.projects import router as projects_router

router = APIRouter()
router.include_router(profile_router)
router.include_router(projects_router)
router.include_router(project_invitations_router)
router.include_router(invitations_router)
router.include_router(activity_router)
router.include_router(project_articles_router)
router.include_router(articles_router)
router.include_router(comments_router)
router.include_router(briefs_router)
