"""SQLAlchemy Unit of Work implementation."""

from typing import Any, Optional

import structlog
from sqlalchemy.exc import InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.exceptions import TransientStoreError
from infrastructure.database.repositories.sqlalchemy_activity_repo import SQLAlchemyActivityRepository
from infrastructure.database.repositories.sqlalchemy_article_repo import SQLAlchemyArticleRepository
from infrastructure.database.repositories.sqlalchemy_brief_repo import SQLAlchemyBriefRepository
from infrastructure.database.repositories.sqlalchemy_invitation_repo import SQLAlchemyInvitationRepository
from infrastructure.database.repositories.sqlalchemy_profile_repo import SQLAlchemyProfileRepository
from infrastructure.database.repositories.sqlalchemy_project_repo import SQLAlchemyProjectRepository

logger = structlog.get_logger()

# Failures after which the outcome of the transaction is unknown
TRANSIENT_ERRORS = (OperationalError, InterfaceError, PoolTimeoutError, TimeoutError)


class SQLAlchemyUnitOfWork:
    """Unit of Work implementation using SQLAlchemy."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None

    def _require_session(self) -> AsyncSession:
        if not self._session:
            raise RuntimeError("UnitOfWork not initialized. Use as context manager.")
        return self._session

    @property
    def profiles(self) -> SQLAlchemyProfileRepository:
        """Get profile repository."""
        return SQLAlchemyProfileRepository(self._require_session())

    @property
    def projects(self) -> SQLAlchemyProjectRepository:
        """Get project repository."""
        return SQLAlchemyProjectRepository(self._require_session())

    @property
    def invitations(self) -> SQLAlchemyInvitationRepository:
        """Get invitation repository."""
        return SQLAlchemyInvitationRepository(self._require_session())

    @property
    def activities(self) -> SQLAlchemyActivityRepository:
        """Get activity log repository."""
        return SQLAlchemyActivityRepository(self._require_session())

    @property
    def articles(self) -> SQLAlchemyArticleRepository:
        """Get article repository."""
        return SQLAlchemyArticleRepository(self._require_session())

    @property
    def briefs(self) -> SQLAlchemyBriefRepository:
        """Get content brief repository."""
        return SQLAlchemyBriefRepository(self._require_session())

    async def commit(self) -> None:
        """Commit the current transaction."""
        if self._session:
            await self._session.commit()

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        if self._session:
            await self._session.rollback()

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        """Enter the context manager and create session."""
        self._session = self._session_factory()
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Any,
    ) -> None:
        """Exit the context manager, rolling back on error.

        Connection and timeout failures are re-raised as TransientStoreError.
        """
        if not self._session:
            return
        try:
            if exc_type:
                try:
                    await self.rollback()
                except SQLAlchemyError:
                    logger.warning("uow_rollback_failed", exc_info=True)
        finally:
            await self._session.close()
            self._session = None

        if isinstance(exc_val, TRANSIENT_ERRORS):
            logger.warning("transient_store_error", error=str(exc_val))
            raise TransientStoreError() from exc_val
