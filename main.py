"""Rank items API - FastAPI application entry point."""

import asyncio
import logging
import sys
from contextlib import asynccontextmanager, suppress

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import Settings
from app.database import Database
from app.errors import ConfigurationError, register_exception_handlers
from app.logging_config import configure_logging
from app.routers import rank_items

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    """Build the application.

    ``database`` lets callers (tests, scripts) supply an already-built store;
    otherwise one is created from ``settings.DATABASE_URL``.
    """
    if settings is None:
        settings = Settings.from_env()
    if database is None:
        database = Database(settings.require_database_url(), echo=settings.APP_DEBUG)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup / shutdown lifecycle."""
        settings.DATA_DIR.mkdir(parents=True, exist_ok=True)
        # Connect in the background; the listener starts whatever the outcome.
        connect_task = asyncio.create_task(database.connect())
        app.state.connect_task = connect_task
        yield
        connect_task.cancel()
        with suppress(asyncio.CancelledError):
            await connect_task
        await database.dispose()

    app = FastAPI(title="Rank Items", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.database = database

    # Middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routers; /api/rankitems serves clients that are not behind a prefix-stripping proxy
    app.include_router(rank_items.router)
    app.include_router(rank_items.router, prefix="/api")

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok", "database": database.connected}

    # Must come after the routers
    register_exception_handlers(app)
    return app


def main() -> None:
    try:
        settings = Settings.from_env()
        configure_logging(settings.LOG_LEVEL)
        settings.require_database_url()
    except ConfigurationError as e:
        configure_logging()
        logger.error("%s", e.message)
        sys.exit(1)

    app = create_app(settings)
    logger.info("Server is running on port %d", settings.PORT)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    main()
