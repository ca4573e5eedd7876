"""Tests for the SQL data source built on BaseCRUD."""

from decimal import Decimal

import pytest

from pagewise_backend.core.base_crud import CRUDDataSource, RecordFilter
from pagewise_backend.core.exceptions import DataSourceError
from pagewise_backend.core.pagination import (
    DataSource,
    PageRequest,
    SortDirection,
    SortField,
    resolve_page,
)
from pagewise_backend.modules.items.crud import item_crud
from pagewise_backend.modules.items.schemas import ItemCreate

pytestmark = pytest.mark.anyio

BY_ID = (SortField(field="id"),)


async def test_fetch_returns_requested_slice(session, seed_items):
    await seed_items(25)

    items = await item_crud.fetch(session, None, 1, 10, BY_ID)

    assert [i.sku for i in items] == [f"BOO-{n:04d}" for n in range(11, 21)]


async def test_fetch_past_end_is_empty(session, seed_items):
    await seed_items(5)

    assert await item_crud.fetch(session, None, 3, 10, BY_ID) == []


async def test_count_applies_filter(session, seed_items):
    await seed_items(12, category="books")
    await seed_items(7, category="games")
    await seed_items(3, category="games", is_active=False)

    assert await item_crud.count(session, None) == 22
    assert await item_crud.count(session, RecordFilter(equals={"category": "games"})) == 10
    assert (
        await item_crud.count(
            session, RecordFilter(is_active=True, equals={"category": "games"})
        )
        == 7
    )


async def test_search_filter_matches_name_and_sku(session, seed_items):
    await seed_items(3, category="books")
    await seed_items(2, category="games")

    assert await item_crud.count(session, RecordFilter(search="game")) == 2
    assert await item_crud.count(session, RecordFilter(search="boo-0002")) == 1


async def test_none_and_unknown_equality_filters_are_ignored(session, seed_items):
    await seed_items(4)

    record_filter = RecordFilter(equals={"category": None, "colour": "red"})

    assert await item_crud.count(session, record_filter) == 4


async def test_fetch_orders_by_requested_fields(session, seed_items):
    await seed_items(5)

    ordering = (SortField(field="sku", direction=SortDirection.DESC),)
    items = await item_crud.fetch(session, None, 0, 3, ordering)

    assert [i.sku for i in items] == ["BOO-0005", "BOO-0004", "BOO-0003"]


async def test_unknown_sort_field_falls_back_to_default_order(session, seed_items):
    await seed_items(4)

    ordering = (SortField(field="does_not_exist"),)
    items = await item_crud.fetch(session, None, 0, 10, ordering)
    default_items = await item_crud.fetch(session, None, 0, 10)

    assert len(items) == 4
    assert [i.id for i in items] == [i.id for i in default_items]


async def test_source_satisfies_data_source_protocol(session):
    source = item_crud.source(session)

    assert isinstance(source, CRUDDataSource)
    assert isinstance(source, DataSource)


async def test_resolver_redirects_through_sql_source(session, seed_items):
    await seed_items(27)

    page = await resolve_page(
        PageRequest(index=5, size=100, ordering=BY_ID), None, item_crud.source(session)
    )

    assert page.request_index == 0
    assert len(page.items) == 27
    assert page.total_matching == 27


async def test_resolver_serves_partial_last_page_through_sql_source(session, seed_items):
    await seed_items(250)

    page = await resolve_page(
        PageRequest(index=10, size=100, ordering=BY_ID), None, item_crud.source(session)
    )

    assert page.request_index == 2
    assert [i.sku for i in page.items] == [f"BOO-{n:04d}" for n in range(201, 251)]


async def test_fetch_failure_is_raised_as_data_source_error(broken_session_factory):
    async with broken_session_factory() as session:
        with pytest.raises(DataSourceError) as exc_info:
            await item_crud.fetch(session, None, 0, 10)

    assert exc_info.value.operation == "fetch"
    assert exc_info.value.__cause__ is not None


async def test_count_failure_is_raised_as_data_source_error(broken_session_factory):
    async with broken_session_factory() as session:
        with pytest.raises(DataSourceError) as exc_info:
            await item_crud.count(session, RecordFilter())

    assert exc_info.value.operation == "count"
    assert exc_info.value.status_code == 503


async def test_create_get_and_delete(session):
    item = await item_crud.create(
        session,
        ItemCreate(sku="X-1", name="Lamp", category="home", price=Decimal("19.50")),
    )

    assert item.id is not None
    assert (await item_crud.get(session, item.id)).sku == "X-1"
    assert (await item_crud.get_by(session, sku="X-1")).id == item.id

    await item_crud.delete(session, item)

    assert await item_crud.get(session, item.id) is None
    assert await item_crud.get_by(session, sku="X-1") is None


async def test_get_by_none_matches_null_only(session, seed_items):
    await seed_items(3)

    assert await item_crud.get_by(session, sku=None) is None
    assert (await item_crud.get_by(session, description=None)) is not None


async def test_non_column_equality_filter_is_ignored(session, seed_items):
    await seed_items(2)

    record_filter = RecordFilter(equals={"metadata": "x", "__init__": 1})

    assert await item_crud.count(session, record_filter) == 2
