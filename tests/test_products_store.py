"""
Tests for the product store: paging, CRUD and server-side filtering.
"""

import uuid

import pytest
from pydantic import ValidationError as SchemaError

from catalog.filters import sort_products
from core.errors import NotFound, ValidationError
from database import products as store
from utils.schemas import FilterState, ProductCreate, ProductUpdate, SortDirection, SortField, SortSpec


def _fields(**overrides) -> ProductCreate:
    defaults = dict(name="Widget", description="A useful widget", category="home", price=9.99, rating=4.5)
    defaults.update(overrides)
    return ProductCreate(**defaults)


async def _seed(session, count: int):
    return [
        await store.create_product(session, _fields(name=f"Item {i:02d}", price=float(i), rating=i % 6))
        for i in range(1, count + 1)
    ]


class TestListing:
    @pytest.mark.asyncio
    async def test_second_page_of_fifteen(self, session):
        await _seed(session, 15)
        items, total = await store.list_products(session, page=2, limit=10)
        assert total == 15
        assert [p.name for p in items] == [f"Item {i:02d}" for i in range(11, 16)]

    @pytest.mark.asyncio
    async def test_page_past_the_end_is_empty(self, session):
        await _seed(session, 15)
        items, total = await store.list_products(session, page=5, limit=10)
        assert items == []
        assert total == 15

    @pytest.mark.asyncio
    async def test_huge_page_is_empty_not_an_overflow(self, session):
        await _seed(session, 3)
        items, total = await store.list_products(session, page=10**19, limit=10)
        assert items == []
        assert total == 3

    @pytest.mark.asyncio
    async def test_persisted_order(self, session):
        created = await _seed(session, 3)
        items, _ = await store.list_products(session)
        assert [p.product_id for p in items] == [p.product_id for p in created]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("page, limit", [(0, 10), (1, 0), (1, 10_000)])
    async def test_bad_window_rejected(self, session, page, limit):
        with pytest.raises(ValidationError):
            await store.list_products(session, page=page, limit=limit)


class TestServerSideQuery:
    @pytest.mark.asyncio
    async def test_filter_spans_whole_catalog_before_paging(self, session):
        await _seed(session, 15)
        filters = FilterState(min_price=12)
        items, total = await store.list_products(session, page=1, limit=2, filters=filters)
        assert total == 4
        assert [p.name for p in items] == ["Item 12", "Item 13"]

    @pytest.mark.asyncio
    async def test_text_query_is_case_insensitive_substring(self, session):
        await store.create_product(session, _fields(name="Blue Kettle", description="boils water"))
        await store.create_product(session, _fields(name="Lamp", description="A KETTLE-shaped lamp"))
        await store.create_product(session, _fields(name="Chair", description="sit"))
        items, total = await store.list_products(session, filters=FilterState(query="kettle"))
        assert total == 2
        assert {p.name for p in items} == {"Blue Kettle", "Lamp"}

    @pytest.mark.asyncio
    async def test_like_metacharacters_are_literal(self, session):
        await store.create_product(session, _fields(name="100% cotton"))
        await store.create_product(session, _fields(name="1000 cotton"))
        items, _ = await store.list_products(session, filters=FilterState(query="0%"))
        assert [p.name for p in items] == ["100% cotton"]

    @pytest.mark.asyncio
    async def test_sort_desc_keeps_insertion_order_for_ties(self, session):
        a = await store.create_product(session, _fields(name="a", price=5))
        b = await store.create_product(session, _fields(name="b", price=7))
        c = await store.create_product(session, _fields(name="c", price=5))
        sort = SortSpec(field=SortField.PRICE, direction=SortDirection.DESC)
        items, _ = await store.list_products(session, sort=sort)
        assert [p.product_id for p in items] == [b.product_id, a.product_id, c.product_id]

    @pytest.mark.asyncio
    async def test_name_sort_matches_in_memory_engine(self, session):
        await store.create_product(session, _fields(name="Straße"))
        await store.create_product(session, _fields(name="strasse"))
        sort = SortSpec(field=SortField.NAME)
        items, _ = await store.list_products(session, sort=sort)
        assert [p.name for p in items] == [p.name for p in sort_products(items, SortField.NAME)]
        assert [p.name for p in items] == ["strasse", "Straße"]


class TestCrud:
    @pytest.mark.asyncio
    async def test_widget_lifecycle(self, session):
        widget = await store.create_product(session, _fields())
        items, _ = await store.list_products(session)
        assert widget.product_id in [p.product_id for p in items]

        updated = await store.update_product(session, widget.product_id, ProductUpdate(price=12.50))
        assert updated.price == 12.50
        assert (updated.name, updated.description, updated.category, updated.rating) == (
            "Widget",
            "A useful widget",
            "home",
            4.5,
        )

        await store.delete_product(session, widget.product_id)
        with pytest.raises(NotFound):
            await store.get_product(session, widget.product_id)

    @pytest.mark.asyncio
    async def test_image_attached_and_replaced(self, session):
        product = await store.create_product(session, _fields(), image_url="http://x/uploads/a.png")
        assert product.image == "http://x/uploads/a.png"
        kept = await store.update_product(session, product.product_id, ProductUpdate(name="Renamed"))
        assert kept.image == "http://x/uploads/a.png"
        replaced = await store.update_product(
            session, product.product_id, ProductUpdate(), image_url="http://x/uploads/b.png"
        )
        assert replaced.image == "http://x/uploads/b.png"
        assert replaced.name == "Renamed"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("product_id", [str(uuid.uuid4()), "nope"])
    async def test_missing_ids(self, session, product_id):
        with pytest.raises(NotFound):
            await store.get_product(session, product_id)
        with pytest.raises(NotFound):
            await store.update_product(session, product_id, ProductUpdate(price=1))
        with pytest.raises(NotFound):
            await store.delete_product(session, product_id)

    def test_range_validation(self):
        with pytest.raises(SchemaError):
            ProductCreate(name="x", description="y", category="z", price=-1, rating=3)
        with pytest.raises(SchemaError):
            ProductCreate(name="x", description="y", category="z", price=1, rating=5.5)
        with pytest.raises(SchemaError):
            ProductUpdate(rating=-0.1)
        with pytest.raises(SchemaError):
            ProductCreate(name="x", description="y", category="z", price=float("inf"), rating=3)
        with pytest.raises(SchemaError):
            ProductUpdate(price=float("nan"))
