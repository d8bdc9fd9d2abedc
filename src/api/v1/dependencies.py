"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Callable

from core.config import settings
from domain.services.activity_service import ActivityService
from domain.services.article_service import ArticleService
from domain.services.authorization_service import AuthorizationService
from domain.services.brief_service import BriefService
from domain.services.comment_service import CommentService
from domain.services.invitation_service import InvitationService
from domain.services.membership_service import MembershipService
from domain.services.profile_service import ProfileService
from domain.services.project_service import ProjectService
from domain.services.quota_service import QuotaService
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
from infrastructure.generation.template_brief_generator import TemplateBriefGenerator


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_activity_service() -> ActivityService:
    """Get Activity service instance."""
    return ActivityService(get_uow_factory())


@lru_cache
def get_quota_service() -> QuotaService:
    """Get Quota service instance."""
    return QuotaService(get_uow_factory())


@lru_cache
def get_authorization_service() -> AuthorizationService:
    """Get Authorization service instance."""
    return AuthorizationService(get_uow_factory(), quota_service=get_quota_service())


@lru_cache
def get_profile_service() -> ProfileService:
    """Get Profile service instance."""
    return ProfileService(get_uow_factory(), settings=settings)


@lru_cache
def get_project_service() -> ProjectService:
    """Get Project service instance."""
    return ProjectService(get_uow_factory(), activity_service=get_activity_service())


@lru_cache
def get_membership_service() -> MembershipService:
    """Get Membership service instance."""
    return MembershipService(get_uow_factory(), activity_service=get_activity_service())


@lru_cache
def get_invitation_service() -> InvitationService:
    """Get Invitation service instance."""
    return InvitationService(
        get_uow_factory(),
        activity_service=get_activity_service(),
        expiry_days=settings.invitation_expiry_days,
    )


@lru_cache
def get_article_service() -> ArticleService:
    """Get Article service instance."""
    return ArticleService(get_uow_factory(), activity_service=get_activity_service())


@lru_cache
def get_comment_service() -> CommentService:
    """Get Comment service instance."""
    return CommentService(get_uow_factory(), activity_service=get_activity_service())


@lru_cache
def get_brief_service() -> BriefService:
    """Get Content Brief service instance."""
    return BriefService(
        get_uow_factory(),
        quota_service=get_quota_service(),
        generator=TemplateBriefGenerator(),
        activity_service=get_activity_service(),
    )
