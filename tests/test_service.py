"""Service-layer tests against the in-memory repository."""

import uuid

from app.errors import ConflictError, NotFoundError, StoreError, ValidationError
from app.repositories.rank_items import InMemoryRankItemRepository
from app.services.rank_items import DELETED_MESSAGE, Err, Ok, RankItemService


async def test_create_then_get(service: RankItemService, sample_item: dict):
    created = await service.create_item(sample_item)
    assert isinstance(created, Ok)
    item = created.value
    assert len(item.id) == 32
    assert item.created_at == item.updated_at

    fetched = await service.get_item(item.id)
    assert isinstance(fetched, Ok)
    assert fetched.value == item


async def test_create_without_site_name(service, repository, sample_item: dict):
    payload = {k: v for k, v in sample_item.items() if k != "siteName"}
    result = await service.create_item(payload)
    assert isinstance(result, Err)
    assert isinstance(result.error, ValidationError)
    assert result.error.message == "Site name is required"
    assert repository.items == {}


async def test_create_invalid_fields(service, repository, sample_item: dict):
    result = await service.create_item({**sample_item, "payments": []})
    assert isinstance(result, Err)
    assert [e.field for e in result.error.errors] == ["payments"]
    assert repository.items == {}


async def test_create_non_object(service):
    result = await service.create_item("just a string")
    assert isinstance(result.error, ValidationError)


async def test_duplicate_site_name_conflicts(service, make_item):
    await service.create_item(make_item(1, siteName="Same"))
    result = await service.create_item(make_item(2, siteName="Same"))
    assert isinstance(result, Err)
    assert isinstance(result.error, ConflictError)
    assert result.error.field == "siteName"


async def test_duplicate_rank_conflicts(service, make_item):
    await service.create_item(make_item(1))
    result = await service.create_item(make_item(1, siteName="Other"))
    assert isinstance(result.error, ConflictError)
    assert result.error.field == "rank"


async def test_list_orders_by_rank(service, make_item):
    for rank in (5, 2, 9, 1):
        await service.create_item(make_item(rank))
    result = await service.list_items()
    assert [item.rank for item in result.value] == [1, 2, 5, 9]


async def test_partial_update_keeps_other_fields(service, sample_item: dict):
    item = (await service.create_item(sample_item)).value
    result = await service.update_item(item.id, {"rank": 2, "promoCode": "NEW"})
    assert isinstance(result, Ok)
    updated = result.value
    assert updated.rank == 2
    assert updated.promo_code == "NEW"
    assert updated.site_name == item.site_name
    assert updated.advantages == item.advantages
    assert updated.created_at == item.created_at
    assert updated.updated_at >= item.updated_at


async def test_update_ignores_system_fields(service, sample_item: dict):
    item = (await service.create_item(sample_item)).value
    result = await service.update_item(item.id, {"id": uuid.uuid4().hex})
    assert result.value.id == item.id


async def test_update_revalidates_merged_record(service, sample_item: dict):
    item = (await service.create_item(sample_item)).value
    result = await service.update_item(item.id, {"advantages": []})
    assert isinstance(result.error, ValidationError)
    assert (await service.get_item(item.id)).value.advantages == ["Fast payouts"]


async def test_update_into_taken_rank_conflicts(service, make_item):
    await service.create_item(make_item(1))
    second = (await service.create_item(make_item(2))).value
    result = await service.update_item(second.id, {"rank": 1})
    assert isinstance(result.error, ConflictError)


async def test_unknown_and_malformed_ids_not_found(service):
    missing = uuid.uuid4().hex
    for raw in (missing, "not-an-id"):
        assert isinstance((await service.get_item(raw)).error, NotFoundError)
        assert isinstance((await service.update_item(raw, {"rank": 3})).error, NotFoundError)
        assert isinstance((await service.delete_item(raw)).error, NotFoundError)


async def test_delete_then_get(service, sample_item: dict):
    item = (await service.create_item(sample_item)).value
    result = await service.delete_item(item.id)
    assert result.value == {"message": DELETED_MESSAGE}
    assert isinstance((await service.get_item(item.id)).error, NotFoundError)


class _BrokenRepository(InMemoryRankItemRepository):
    async def list_by_rank(self):
        raise StoreError("connection refused")


async def test_store_failure_is_returned_as_error():
    result = await RankItemService(_BrokenRepository()).list_items()
    assert isinstance(result, Err)
    assert isinstance(result.error, StoreError)
