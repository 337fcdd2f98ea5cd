"""Ranked item CRUD API routes."""

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.errors import error_response
from app.repositories.rank_items import RankItemRepository, SqlRankItemRepository
from app.schemas.rank_item import MessageOut, RankItemIn, RankItemOut
from app.services.rank_items import Err, RankItemService, Result

router = APIRouter(prefix="/rankitems", tags=["rankitems"])


def get_rank_item_repository(db: AsyncSession = Depends(get_db)) -> RankItemRepository:
    return SqlRankItemRepository(db)


def get_rank_item_service(
    repository: RankItemRepository = Depends(get_rank_item_repository),
) -> RankItemService:
    return RankItemService(repository)


def _as_changes(body: RankItemIn | None) -> dict | None:
    # Only the keys the client actually sent take part in the merge.
    return body.model_dump(exclude_unset=True) if body is not None else None


def _unwrap(result: Result):
    if isinstance(result, Err):
        return error_response(result.error)
    return result.value


@router.get("", response_model=list[RankItemOut])
async def list_rank_items(service: RankItemService = Depends(get_rank_item_service)):
    """Return all rank items, best rank first."""
    return _unwrap(await service.list_items())


@router.post("", response_model=RankItemOut, status_code=201)
async def create_rank_item(
    body: RankItemIn | None = Body(default=None),
    service: RankItemService = Depends(get_rank_item_service),
):
    """Create a rank item. ``siteName`` is required."""
    return _unwrap(await service.create_item(_as_changes(body)))


@router.get("/{item_id}", response_model=RankItemOut)
async def get_rank_item(
    item_id: str,
    service: RankItemService = Depends(get_rank_item_service),
):
    return _unwrap(await service.get_item(item_id))


@router.put("/{item_id}", response_model=RankItemOut)
async def update_rank_item(
    item_id: str,
    body: RankItemIn | None = Body(default=None),
    service: RankItemService = Depends(get_rank_item_service),
):
    """Apply a partial update; omitted fields keep their stored values."""
    return _unwrap(await service.update_item(item_id, _as_changes(body)))


@router.delete("/{item_id}", response_model=MessageOut)
async def delete_rank_item(
    item_id: str,
    service: RankItemService = Depends(get_rank_item_service),
):
    return _unwrap(await service.delete_item(item_id))
