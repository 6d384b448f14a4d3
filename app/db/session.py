import logging
from typing import Any, AsyncIterator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import Settings
from app.db.models import Base

logger = logging.getLogger(__name__)


class Database:
    """
    Process-wide store handle: one engine (and its connection pool) plus the
    session factory built on it. Constructed once and handed to the app.
    """

    def __init__(self, url: str, *, create_tables: bool = True, **engine_kwargs: Any):
        self.url = url
        self.create_tables = create_tables
        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        self.sessionmaker = async_sessionmaker(self.engine, class_=AsyncSession, expire_on_commit=False)

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        url = settings.database_url
        engine_kwargs: dict[str, Any] = {"pool_pre_ping": True, "echo": False}
        # sqlite drivers do not take queue pool sizing
        if not make_url(url).get_backend_name().startswith("sqlite"):
            engine_kwargs.update(
                pool_size=settings.DB_POOL_SIZE,
                max_overflow=settings.DB_MAX_OVERFLOW,
                pool_timeout=settings.DB_POOL_TIMEOUT,
                pool_recycle=settings.DB_POOL_RECYCLE,
            )
        return cls(url, create_tables=settings.DB_CREATE_TABLES, **engine_kwargs)

    async def connect(self) -> None:
        """
        Verify the store is reachable and create missing tables. Raises on
        failure so the process never starts serving without a store.
        """
        try:
            async with self.engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
                if self.create_tables:
                    await conn.run_sync(Base.metadata.create_all)
        except Exception:
            logger.exception("Unable to connect to database at %s", self.engine.url.render_as_string())
            raise
        logger.info("Database connected (%s)", self.engine.url.get_backend_name())

    async def ping(self) -> bool:
        """
        Simple connection test that returns True/False without raising.
        """
        try:
            async with self.sessionmaker() as session:
                await session.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error("Database connection test failed: %s", e)
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("Database connections closed")


def get_database(request: Request) -> Database:
    return request.app.state.database


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """
    Dependency that provides one session per request from the app's store.
    """
    async with get_database(request).sessionmaker() as session:
        yield session
