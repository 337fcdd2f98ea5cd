"""Ranked item persistence.

``RankItemRepository`` is the interface the service layer talks to.
``SqlRankItemRepository`` is the real store; ``InMemoryRankItemRepository``
keeps records in a dict and is what unit tests run against.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import ConflictError, StoreError
from app.models.rank_item import RankItem, new_id, utcnow
from app.schemas.rank_item import RankItemData, RankItemOut

logger = logging.getLogger(__name__)

# Constraint name or SQLite "table.column" fragment -> client-facing field.
_UNIQUE_FIELDS = (
    (("uq_rank_items_site_name", "rank_items.site_name"), "siteName"),
    (("uq_rank_items_rank", "rank_items.rank"), "rank"),
)


def conflict_from_integrity_error(exc: IntegrityError) -> ConflictError:
    """Name the unique field a failed write collided on, when recognizable."""
    detail = str(exc.orig)
    for markers, field_name in _UNIQUE_FIELDS:
        if any(marker in detail for marker in markers):
            return ConflictError(
                f"A rank item with this {field_name} already exists",
                field_name=field_name,
            )
    return ConflictError("Rank item conflicts with an existing record")


class RankItemRepository(ABC):
    """Abstract interface for ranked item storage."""

    @abstractmethod
    async def list_by_rank(self) -> list[RankItemOut]:
        """Return every record, ascending by rank."""

    @abstractmethod
    async def get(self, item_id: str) -> RankItemOut | None:
        """Return the record or None."""

    @abstractmethod
    async def add(self, data: RankItemData) -> RankItemOut:
        """Insert a new record and return it with id and timestamps."""

    @abstractmethod
    async def update(self, item_id: str, data: RankItemData) -> RankItemOut | None:
        """Overwrite the editable fields of a record. None if absent."""

    @abstractmethod
    async def delete(self, item_id: str) -> bool:
        """Hard-delete a record. False if absent."""


class SqlRankItemRepository(RankItemRepository):
    """SQLAlchemy-backed implementation; one instance per request session."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @asynccontextmanager
    async def _store_errors(self) -> AsyncIterator[None]:
        try:
            yield
        except IntegrityError as e:
            await self._session.rollback()
            raise conflict_from_integrity_error(e) from e
        except SQLAlchemyError as e:
            await self._session.rollback()
            raise StoreError(f"Store operation failed: {e}") from e

    async def list_by_rank(self) -> list[RankItemOut]:
        async with self._store_errors():
            result = await self._session.execute(
                select(RankItem).order_by(RankItem.rank.asc())
            )
            return [RankItemOut.model_validate(r) for r in result.scalars().all()]

    async def get(self, item_id: str) -> RankItemOut | None:
        async with self._store_errors():
            item = await self._session.get(RankItem, item_id)
            return RankItemOut.model_validate(item) if item is not None else None

    async def add(self, data: RankItemData) -> RankItemOut:
        async with self._store_errors():
            item = RankItem(**data.model_dump())
            self._session.add(item)
            await self._session.commit()
            await self._session.refresh(item)
            return RankItemOut.model_validate(item)

    async def update(self, item_id: str, data: RankItemData) -> RankItemOut | None:
        async with self._store_errors():
            item = await self._session.get(RankItem, item_id)
            if item is None:
                return None
            for key, value in data.model_dump().items():
                setattr(item, key, value)
            item.updated_at = utcnow()
            await self._session.commit()
            await self._session.refresh(item)
            return RankItemOut.model_validate(item)

    async def delete(self, item_id: str) -> bool:
        async with self._store_errors():
            item = await self._session.get(RankItem, item_id)
            if item is None:
                return False
            await self._session.delete(item)
            await self._session.commit()
            return True


class InMemoryRankItemRepository(RankItemRepository):
    """Dict-backed store enforcing the same uniqueness rules as the database."""

    def __init__(self) -> None:
        self.items: dict[str, RankItemOut] = {}

    def _check_unique(self, data: RankItemData, exclude_id: str | None = None) -> None:
        for item in self.items.values():
            if item.id == exclude_id:
                continue
            if item.site_name == data.site_name:
                raise ConflictError(
                    "A rank item with this siteName already exists", field_name="siteName"
                )
            if item.rank == data.rank:
                raise ConflictError(
                    "A rank item with this rank already exists", field_name="rank"
                )

    async def list_by_rank(self) -> list[RankItemOut]:
        return sorted(self.items.values(), key=lambda item: item.rank)

    async def get(self, item_id: str) -> RankItemOut | None:
        return self.items.get(item_id)

    async def add(self, data: RankItemData) -> RankItemOut:
        self._check_unique(data)
        now = utcnow()
        item = RankItemOut(id=new_id(), created_at=now, updated_at=now, **data.model_dump())
        self.items[item.id] = item
        return item

    async def update(self, item_id: str, data: RankItemData) -> RankItemOut | None:
        current = self.items.get(item_id)
        if current is None:
            return None
        self._check_unique(data, exclude_id=item_id)
        item = current.model_copy(update={**data.model_dump(), "updated_at": utcnow()})
        self.items[item_id] = item
        return item

    async def delete(self, item_id: str) -> bool:
        return self.items.pop(item_id, None) is not None
