"""
Async database sessions (SQLAlchemy asyncio)

The API initializes the engine in its lifespan; the worker initializes lazily
from settings and disposes the engine after each task run.
"""
import asyncio
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from packages.common.config import get_settings

_SERVER_POOL = {
    "pool_size": 20,
    "max_overflow": 10,
    "pool_pre_ping": True,
    "pool_recycle": 3600,
}


def async_database_url(url: str) -> str:
    """postgresql:// URLs run on asyncpg; anything else is used as given"""
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


class DatabaseSessionManager:

    def __init__(self):
        self._engine: Optional[AsyncEngine] = None
        self._sessionmaker: Optional[async_sessionmaker] = None
        self._lock = asyncio.Lock()

    @property
    def initialized(self) -> bool:
        return self._sessionmaker is not None

    async def init(self, database_url: str, **engine_kwargs) -> None:
        async with self._lock:
            if self.initialized:
                return

            url = async_database_url(database_url)
            options = {} if url.startswith("sqlite") else dict(_SERVER_POOL)
            options.update(engine_kwargs)

            self._engine = create_async_engine(url, **options)
            self._sessionmaker = async_sessionmaker(
                bind=self._engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )

    async def close(self) -> None:
        """Dispose the engine; safe to call when not initialized"""
        if self._engine is not None:
            await self._engine.dispose()
        self._engine = None
        self._sessionmaker = None

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Session that commits on success and rolls back on error"""
        if not self.initialized:
            raise RuntimeError("DatabaseSessionManager not initialized")

        async with self._sessionmaker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise


# Global session manager instance
sessionmanager = DatabaseSessionManager()


async def _ensure_initialized() -> None:
    """Lazy init for the worker and scripts (no lifespan to call init())"""
    if not sessionmanager.initialized:
        settings = get_settings()
        await sessionmanager.init(settings.database_url, echo=settings.debug)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request"""
    await _ensure_initialized()
    async with sessionmanager.session() as session:
        yield session
