"""Async SQLAlchemy database engine, session factory, and utilities."""

import logging
from collections.abc import AsyncIterator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class Database:
    """Owns the one engine for the process and hands out sessions."""

    def __init__(self, url: str, echo: bool = False) -> None:
        self.url = url
        self.engine = create_async_engine(url, echo=echo)
        self.session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )
        self.connected = False

    async def init_db(self) -> None:
        """Create all tables defined by ORM models."""
        # Import for the side effect of registering tables on Base.metadata.
        import app.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
            await conn.execute(text("SELECT 1"))

    async def connect(self) -> bool:
        """Create the schema and check connectivity.

        Failures are logged and swallowed: the server keeps running and each
        request that needs the store fails on its own.
        """
        try:
            await self.init_db()
        except Exception:
            logger.exception("Database connection error (%s)", self.engine.url.render_as_string())
            self.connected = False
        else:
            logger.info("Connected to database %s", self.engine.url.render_as_string())
            self.connected = True
        return self.connected

    async def dispose(self) -> None:
        await self.engine.dispose()


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """FastAPI dependency that yields an async database session."""
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        yield session
