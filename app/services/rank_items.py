"""Ranked item operations.

Each operation returns a ``Result``: ``Ok(value)`` on success or ``Err(error)``
for the outcomes a client can cause or correct (missing site name, invalid
fields, unknown id, duplicate siteName/rank) and for store failures. The HTTP
layer turns ``Err`` into a status code; nothing here knows about HTTP.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

from app.errors import AppError, FieldError, NotFoundError, StoreError, ValidationError
from app.repositories.rank_items import RankItemRepository
from app.schemas.rank_item import (
    RankItemData,
    RankItemOut,
    editable_changes,
    parse_item_id,
    validate_rank_item,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

DELETED_MESSAGE = "Rank item deleted successfully"


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    error: AppError


Result = Union[Ok[T], Err]


def _site_name_missing(body: dict[str, Any]) -> bool:
    site_name = body.get("siteName", body.get("site_name"))
    return not isinstance(site_name, str) or not site_name.strip()


class RankItemService:
    def __init__(self, repository: RankItemRepository) -> None:
        self._repository = repository

    async def list_items(self) -> Result[list[RankItemOut]]:
        try:
            return Ok(await self._repository.list_by_rank())
        except StoreError as e:
            return Err(e)

    async def create_item(self, body: Any) -> Result[RankItemOut]:
        logger.debug("Create payload: %r", body)
        if not isinstance(body, dict):
            return Err(ValidationError(
                "Request body must be a JSON object",
                [FieldError("body", "Expected an object")],
            ))
        if _site_name_missing(body):
            return Err(ValidationError(
                "Site name is required", [FieldError("siteName", "Field required")]
            ))

        checked = validate_rank_item(body)
        if not checked.ok:
            return Err(ValidationError("Invalid rank item", checked.errors))

        try:
            item = await self._repository.add(checked.value)
        except StoreError as e:
            return Err(e)
        logger.info("Created rank item %s (%s, rank %d)", item.id, item.site_name, item.rank)
        return Ok(item)

    async def get_item(self, raw_id: str) -> Result[RankItemOut]:
        item_id = parse_item_id(raw_id)
        if item_id is None:
            return Err(NotFoundError())
        try:
            item = await self._repository.get(item_id)
        except StoreError as e:
            return Err(e)
        if item is None:
            return Err(NotFoundError())
        return Ok(item)

    async def update_item(self, raw_id: str, body: Any) -> Result[RankItemOut]:
        """Merge ``body`` onto the stored record and re-validate the whole."""
        found = await self.get_item(raw_id)
        if isinstance(found, Err):
            return found
        current = found.value

        if body is None:
            body = {}
        if not isinstance(body, dict):
            return Err(ValidationError(
                "Request body must be a JSON object",
                [FieldError("body", "Expected an object")],
            ))

        merged = {name: getattr(current, name) for name in RankItemData.model_fields}
        merged.update(editable_changes(body))
        checked = validate_rank_item(merged)
        if not checked.ok:
            return Err(ValidationError("Invalid rank item", checked.errors))

        try:
            item = await self._repository.update(current.id, checked.value)
        except StoreError as e:
            return Err(e)
        if item is None:
            # Deleted between the read and the write.
            return Err(NotFoundError())
        logger.info("Updated rank item %s", item.id)
        return Ok(item)

    async def delete_item(self, raw_id: str) -> Result[dict[str, str]]:
        item_id = parse_item_id(raw_id)
        if item_id is None:
            return Err(NotFoundError())
        try:
            deleted = await self._repository.delete(item_id)
        except StoreError as e:
            return Err(e)
        if not deleted:
            return Err(NotFoundError())
        logger.info("Deleted rank item %s", item_id)
        return Ok({"message": DELETED_MESSAGE})
