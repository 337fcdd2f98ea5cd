"""Fault boundary tests: unexpected failures become a generic 500."""

import httpx
from fastapi import FastAPI
from sqlalchemy.exc import IntegrityError

from app.errors import GENERIC_ERROR_MESSAGE, StoreError
from app.repositories.rank_items import (
    InMemoryRankItemRepository,
    conflict_from_integrity_error,
)
from app.routers.rank_items import get_rank_item_repository


def _client(app: FastAPI) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://testserver",
    )


class _BrokenRepository(InMemoryRankItemRepository):
    async def list_by_rank(self):
        raise StoreError("timeout talking to db-host-7")

    async def get(self, item_id):
        raise RuntimeError("internal detail that must not leak")


async def test_store_error_hides_detail(app: FastAPI):
    app.dependency_overrides[get_rank_item_repository] = _BrokenRepository
    async with _client(app) as client:
        response = await client.get("/rankitems")
    app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json() == {"message": GENERIC_ERROR_MESSAGE}
    assert "db-host-7" not in response.text


async def test_unexpected_exception_is_generic_500(app: FastAPI):
    app.dependency_overrides[get_rank_item_repository] = _BrokenRepository
    async with _client(app) as client:
        response = await client.get("/rankitems/0123456789abcdef0123456789abcdef")
    app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json() == {"message": GENERIC_ERROR_MESSAGE}
    assert "internal detail" not in response.text


async def test_router_runs_against_fake_repository(app: FastAPI, sample_item: dict):
    repository = InMemoryRankItemRepository()
    app.dependency_overrides[get_rank_item_repository] = lambda: repository
    async with _client(app) as client:
        response = await client.post("/rankitems", json=sample_item)
    app.dependency_overrides.clear()

    assert response.status_code == 201
    assert list(repository.items) == [response.json()["id"]]


def test_conflict_names_sqlite_column():
    exc = IntegrityError("INSERT ...", {}, Exception("UNIQUE constraint failed: rank_items.site_name"))
    assert conflict_from_integrity_error(exc).field == "siteName"


def test_conflict_names_postgres_constraint():
    exc = IntegrityError(
        "UPDATE ...",
        {},
        Exception('duplicate key value violates unique constraint "uq_rank_items_rank"'),
    )
    assert conflict_from_integrity_error(exc).field == "rank"


def test_conflict_unrecognized_constraint():
    exc = IntegrityError("INSERT ...", {}, Exception("something else"))
    conflict = conflict_from_integrity_error(exc)
    assert conflict.field is None
    assert conflict.status_code == 409
