"""Pytest configuration and fixtures."""

import os
from collections.abc import AsyncGenerator, Callable
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator
from uuid import uuid4

# Disable rate limiting in tests
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.pool import StaticPool

# Load the api.v1 package before api.dependencies.auth so the
# auth <-> api.v1 import cycle resolves in the same order as in main.py.
import api.v1  # noqa: F401
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser
from infrastructure.database.models import Base


# Compile JSONB as JSON for SQLite (used in tests)
@compiles(JSONB, "sqlite")
def _compile_jsonb_sqlite(type_: Any, compiler: Any, **kw: Any) -> str:
    return "JSON"


# Test database URL (SQLite in memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Fixed test user ID for consistency
TEST_USER_ID = uuid4()


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database per test, shared by every session via StaticPool."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def test_user() -> TokenUser:
    """Create a test user with fixed ID."""
    return TokenUser(
        id=TEST_USER_ID,
        email="test@example.com",
        display_name="Test User",
    )


@pytest.fixture
def auth_provider() -> JWTAuthProvider:
    """Create auth provider for testing."""
    return JWTAuthProvider(
        secret_key="test-secret-key",
        algorithm="HS256",
        expire_minutes=30,
    )


@pytest.fixture
def auth_token(auth_provider: JWTAuthProvider, test_user: TokenUser) -> str:
    """Create auth token for test user."""
    return str(auth_provider.create_token(test_user))


@pytest.fixture
def auth_headers(auth_token: str) -> dict[str, str]:
    """Create authorization headers."""
    return {"Authorization": f"Bearer {auth_token}"}


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client (no auth)."""
    from main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


def _build_test_app(
    session_factory: async_sessionmaker[AsyncSession],
    user: TokenUser,
    auth_provider: JWTAuthProvider,
) -> FastAPI:
    """App whose services talk to the test database and whose caller is ``user``."""
    from api.dependencies.auth import get_auth_provider, get_current_user
    from api.v1 import dependencies as deps
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
    from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
    from infrastructure.generation.template_brief_generator import TemplateBriefGenerator
    from main import create_app

    app = create_app()

    def uow_factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    activity = ActivityService(uow_factory)
    quota = QuotaService(uow_factory)

    async def override_get_user() -> TokenUser:
        return user

    app.dependency_overrides[get_current_user] = override_get_user
    app.dependency_overrides[get_auth_provider] = lambda: auth_provider
    app.dependency_overrides[deps.get_activity_service] = lambda: activity
    app.dependency_overrides[deps.get_quota_service] = lambda: quota
    app.dependency_overrides[deps.get_authorization_service] = lambda: AuthorizationService(
        uow_factory, quota_service=quota
    )
    app.dependency_overrides[deps.get_profile_service] = lambda: ProfileService(
        uow_factory, settings=settings
    )
    app.dependency_overrides[deps.get_project_service] = lambda: ProjectService(
        uow_factory, activity_service=activity
    )
    app.dependency_overrides[deps.get_membership_service] = lambda: MembershipService(
        uow_factory, activity_service=activity
    )
    app.dependency_overrides[deps.get_invitation_service] = lambda: InvitationService(
        uow_factory, activity_service=activity
    )
    app.dependency_overrides[deps.get_article_service] = lambda: ArticleService(
        uow_factory, activity_service=activity
    )
    app.dependency_overrides[deps.get_comment_service] = lambda: CommentService(
        uow_factory, activity_service=activity
    )
    app.dependency_overrides[deps.get_brief_service] = lambda: BriefService(
        uow_factory,
        quota_service=quota,
        generator=TemplateBriefGenerator(),
        activity_service=activity,
    )
    return app


@pytest.fixture
def client_for(
    session_factory: async_sessionmaker[AsyncSession],
    auth_provider: JWTAuthProvider,
) -> Callable[[TokenUser], Any]:
    """Open an authenticated client acting as the given user.

    Usage::

        async with client_for(user) as c:
            await c.get("/api/v1/me")
    """

    @asynccontextmanager
    async def _open(user: TokenUser) -> AsyncIterator[AsyncClient]:
        app = _build_test_app(session_factory, user, auth_provider)
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            yield c
        app.dependency_overrides.clear()

    return _open


@pytest.fixture
async def authenticated_client(
    client_for: Callable[[TokenUser], Any],
    test_user: TokenUser,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create authenticated test client with proper database and auth overrides.

    This client:
    - Uses a fresh in-memory SQLite database
    - Overrides auth dependency to return the test user
    - Overrides every service to use the test session factory
    """
    async with client_for(test_user) as c:
        yield c
