"""Database connection and session management"""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from workflow_helper.config import Settings
from workflow_helper.db.models import Base


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    if settings.database_url.startswith("sqlite"):
        # SQLite configuration for development and tests
        return create_async_engine(
            settings.database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=settings.debug,
        )

    # PostgreSQL
    return create_async_engine(
        settings.database_url,
        echo=settings.debug,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
        pool_timeout=settings.http_timeout_seconds,
        connect_args={"command_timeout": settings.http_timeout_seconds},
    )


class Database:
    """Engine plus session factory for one process."""

    def __init__(self, settings: Settings):
        self.engine = create_engine_from_settings(settings)
        self.session_maker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    async def init_db(self):
        """Create tables that do not exist yet."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_db(self):
        """Drop all database tables (for testing)"""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def dispose(self):
        await self.engine.dispose()
