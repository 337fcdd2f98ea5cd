"""Shared pytest fixtures for the rank items test suite."""

from collections.abc import AsyncGenerator

import httpx
import pytest
from fastapi import FastAPI

from app.config import Settings
from app.database import Database
from app.repositories.rank_items import InMemoryRankItemRepository
from app.services.rank_items import RankItemService
from main import create_app

# ---------------------------------------------------------------------------
# Database & app fixtures (file-backed SQLite per test)
# ---------------------------------------------------------------------------


@pytest.fixture()
def database_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"


@pytest.fixture()
async def database(database_url: str) -> AsyncGenerator[Database, None]:
    """Create a fresh database with all tables per test."""
    db = Database(database_url)
    await db.init_db()
    yield db
    await db.dispose()


@pytest.fixture()
def test_settings(database_url: str, tmp_path) -> Settings:
    return Settings(DATABASE_URL=database_url, DATA_DIR=tmp_path / "data")


@pytest.fixture()
def app(test_settings: Settings, database: Database) -> FastAPI:
    return create_app(test_settings, database=database)


@pytest.fixture()
async def client(app: FastAPI) -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTPX async client wired to the FastAPI app."""
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://testserver",
    ) as ac:
        yield ac


# ---------------------------------------------------------------------------
# Service fixtures (no database)
# ---------------------------------------------------------------------------


@pytest.fixture()
def repository() -> InMemoryRankItemRepository:
    return InMemoryRankItemRepository()


@pytest.fixture()
def service(repository: InMemoryRankItemRepository) -> RankItemService:
    return RankItemService(repository)


# ---------------------------------------------------------------------------
# Convenience / data fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_item() -> dict:
    """A complete, valid rank item payload."""
    return {
        "siteName": "Acme Bet",
        "logo": "http://x/a.png",
        "advantages": ["Fast payouts"],
        "welcomeBonus": "100%",
        "payments": ["Visa"],
        "promoCode": "ACME100",
        "rank": 1,
    }


@pytest.fixture()
def make_item(sample_item: dict):
    """Build a payload with a distinct siteName and rank."""

    def _make(rank: int, **overrides) -> dict:
        return {**sample_item, "siteName": f"Site {rank}", "rank": rank, **overrides}

    return _make
