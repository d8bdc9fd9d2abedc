"""Database engine and session factory."""

from typing import Any, AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from core.config import Settings, settings


def build_connect_args(config: Settings) -> dict[str, Any]:
    """Driver options bounding every store round-trip.

    Supabase's Supavisor pooler runs in transaction mode, which breaks
    asyncpg's prepared statement cache, so the cache is disabled there.
    """
    url = config.async_database_url
    if not url.startswith("postgresql+asyncpg"):
        return {}

    connect_args: dict[str, Any] = {
        "timeout": config.database_timeout_seconds,
        "command_timeout": config.database_timeout_seconds,
    }
    if "supabase.com" in url:
        connect_args["statement_cache_size"] = 0
    return connect_args


engine = create_async_engine(
    settings.async_database_url,
    echo=settings.debug,
    pool_pre_ping=True,
    pool_timeout=settings.database_timeout_seconds,
    connect_args=build_connect_args(settings),
)

async_session_factory = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting async database sessions."""
    async with async_session_factory() as session:
        yield session
