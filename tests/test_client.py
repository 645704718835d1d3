"""
Tests for CatalogClient against the in-process app.
"""

import httpx
import pytest
import pytest_asyncio

from catalog.client import CatalogClient
from catalog.view import CatalogView
from core.errors import DuplicateEmail, Forbidden, InvalidCredentials, NotFound, ValidationError
from utils.schemas import FilterState, ProductCreate, ProductUpdate, SortDirection, SortField, SortSpec

from conftest import promote_to_admin


@pytest_asyncio.fixture
async def api(client, session_factory):
    from main import app

    async with CatalogClient("http://testserver", transport=httpx.ASGITransport(app=app)) as c:
        yield c


async def _admin(api, session_factory) -> None:
    await api.signup("Admin", "boss@example.com", "boss-pass")
    await promote_to_admin(session_factory, "boss@example.com")


class TestCatalogClient:
    @pytest.mark.asyncio
    async def test_auth_errors_map_to_taxonomy(self, api):
        auth = await api.signup("Fay", "fay@example.com", "fay-pass")
        assert api.token == auth.token
        with pytest.raises(DuplicateEmail):
            await api.signup("Fay", "fay@example.com", "fay-pass")
        with pytest.raises(InvalidCredentials):
            await api.login("fay@example.com", "wrong-pass")
        with pytest.raises(Forbidden):
            await api.create_product(
                ProductCreate(name="x", description="y", category="home", price=1, rating=1)
            )

    @pytest.mark.asyncio
    async def test_admin_round_trip(self, api, session_factory):
        await _admin(api, session_factory)
        created = await api.create_product(
            ProductCreate(name="Widget", description="Handy", category="home", price=9.99, rating=4.5),
            image=("w.jpg", b"jpeg-bytes", "image/jpeg"),
        )
        assert created.image and created.image.endswith(".jpg")

        updated = await api.update_product(created.id, ProductUpdate(price=12.5))
        assert updated.price == 12.5 and updated.name == "Widget" and updated.image == created.image

        await api.delete_product(created.id)
        with pytest.raises(NotFound):
            await api.get_product(created.id)

    @pytest.mark.asyncio
    async def test_validation_detail_survives(self, api, session_factory):
        await _admin(api, session_factory)
        with pytest.raises(ValidationError) as exc:
            await api.update_product("any-id", ProductUpdate.model_construct(rating=9.0, _fields_set={"rating"}))
        assert exc.value.errors[0]["field"] == "rating"

    @pytest.mark.asyncio
    async def test_page_into_view(self, api, session_factory):
        await _admin(api, session_factory)
        for name, price in [("Cup", 3), ("Bowl", 8), ("Plate", 5), ("Vase", 30)]:
            await api.create_product(
                ProductCreate(name=name, description="ceramic", category="home", price=price, rating=4)
            )

        products, total = await api.list_products(page=1, limit=3)
        view = CatalogView(limit=3)
        view.load_page(products, total)
        assert total == 4
        assert view.window().pages == [1, 2]
        # whole-catalog filter happens server-side; the view only narrows its page
        assert [p.name for p in view.set_filters(min_price=10)] == []
        remote, remote_total = await api.list_products(
            filters=FilterState(min_price=10),
            sort=SortSpec(field=SortField.PRICE, direction=SortDirection.DESC),
        )
        assert [p.name for p in remote] == ["Vase"] and remote_total == 1
