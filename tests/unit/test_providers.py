"""Tests for restaurant source providers."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from dishscout.errors import MalformedRecord
from dishscout.ingestion.providers import (
    DocumentStoreProvider,
    LocalMenuStore,
    RestaurantProvider,
    StaticProvider,
)


@pytest.fixture
def menu_file(tmp_path):
    """Local menu file in the ``menus`` layout."""
    path = tmp_path / "restaurant_menus.json"
    path.write_text(
        json.dumps(
            {
                "menus": {
                    "gb_london_bao": {
                        "restaurant_id": "bao",
                        "restaurant_name": "Bao",
                        "location": {"city": "London", "country_code": "GB"},
                        "menu_items": [{"name": "Classic Bao"}],
                    },
                    "gb_bristol_wahaca": {
                        "restaurant_id": "wahaca",
                        "restaurant_name": "Wahaca",
                        "location": {"city": "Bristol", "country_code": "GB"},
                        "menu_items": [],
                    },
                },
                "stats": {"total_restaurants": 2},
            }
        )
    )
    return path


class TestStaticProvider:
    """Tests for StaticProvider."""

    @pytest.mark.asyncio
    async def test_lists_with_filters(self):
        provider = StaticProvider(
            "local",
            [
                {"restaurant_id": "a", "location": {"city": "London"}},
                {"restaurant_id": "b", "location": {"city": "Leeds"}},
            ],
        )

        assert len(await provider.list_restaurants()) == 2
        london = await provider.list_restaurants({"city": "london"})
        assert [r["restaurant_id"] for r in london] == ["a"]

    @pytest.mark.asyncio
    async def test_menu_items_from_mapping_or_record(self):
        provider = StaticProvider(
            "primary",
            [{"restaurant_id": "a", "menu_items": [{"name": "Embedded"}]}, {"restaurant_id": "b"}],
            {"b": [{"name": "Mapped"}]},
        )

        assert await provider.list_menu_items("a") == [{"name": "Embedded"}]
        assert await provider.list_menu_items("b") == [{"name": "Mapped"}]
        assert await provider.list_menu_items("missing") == []

    def test_satisfies_protocol(self):
        assert isinstance(StaticProvider("local", []), RestaurantProvider)


class TestDocumentStoreProvider:
    """Tests for DocumentStoreProvider."""

    @pytest.mark.asyncio
    async def test_async_client(self):
        client = AsyncMock()
        client.get_restaurants = AsyncMock(return_value=[{"restaurant_id": "a"}])
        client.get_menu_items = AsyncMock(return_value=[{"menu_item_id": "x"}])
        provider = DocumentStoreProvider(client)

        assert await provider.list_restaurants() == [{"restaurant_id": "a"}]
        assert await provider.list_menu_items("a") == [{"menu_item_id": "x"}]
        client.get_restaurants.assert_awaited_once_with({})
        client.get_menu_items.assert_awaited_once_with("a")

    @pytest.mark.asyncio
    async def test_blocking_client(self):
        client = MagicMock()
        client.get_restaurants.return_value = ({"restaurant_id": "a"},)
        provider = DocumentStoreProvider(client, name="primary")

        assert await provider.list_restaurants({"city": "London"}) == [{"restaurant_id": "a"}]
        client.get_restaurants.assert_called_once_with({"city": "London"})

    @pytest.mark.asyncio
    async def test_client_errors_propagate(self):
        client = AsyncMock()
        client.get_restaurants = AsyncMock(side_effect=ConnectionError("refused"))

        with pytest.raises(ConnectionError):
            await DocumentStoreProvider(client).list_restaurants()


class TestLocalMenuStore:
    """Tests for LocalMenuStore."""

    @pytest.mark.asyncio
    async def test_loads_menus_layout(self, menu_file):
        store = LocalMenuStore(menu_file)

        records = await store.list_restaurants()

        assert [r["restaurant_id"] for r in records] == ["bao", "wahaca"]
        assert await store.list_menu_items("bao") == [{"name": "Classic Bao"}]
        assert store.stats == {"total_restaurants": 2, "total_items": 1}

    @pytest.mark.asyncio
    async def test_loads_flat_layout(self, tmp_path):
        path = tmp_path / "flat.json"
        path.write_text(
            json.dumps(
                {"gb_london_bao": {"restaurant_id": "bao", "restaurant_name": "Bao", "location": {"city": "London"}}}
            )
        )

        records = await LocalMenuStore(path).list_restaurants()
        assert [r["restaurant_id"] for r in records] == ["bao"]

    @pytest.mark.asyncio
    async def test_missing_file_is_empty(self, tmp_path):
        store = LocalMenuStore(tmp_path / "missing.json")
        assert await store.list_restaurants() == []

    @pytest.mark.asyncio
    async def test_read_once(self, menu_file):
        store = LocalMenuStore(menu_file)
        await store.list_restaurants()

        menu_file.write_text(json.dumps({"menus": {}}))

        # Served from the cache, not the file
        assert len(await store.list_restaurants()) == 2

    @pytest.mark.asyncio
    async def test_filters(self, menu_file):
        records = await LocalMenuStore(menu_file).list_restaurants({"city": "Bristol"})
        assert [r["restaurant_id"] for r in records] == ["wahaca"]

    @pytest.mark.asyncio
    async def test_add_restaurant_menu_persists(self, menu_file):
        store = LocalMenuStore(menu_file)

        result = await store.add_restaurant_menu(
            {
                "restaurant_id": "hoppers",
                "restaurant_name": "Hoppers",
                "location": {"city": "London", "country_code": "gb"},
                "menu_items": [{"name": "Egg Hopper"}],
            }
        )

        assert result["menu_key"] == "gb_london_hoppers"
        assert result["items_added"] == 1
        assert result["replaced"] is False
        assert len(await store.list_restaurants()) == 3

        saved = json.loads(menu_file.read_text())
        assert "gb_london_hoppers" in saved["menus"]
        assert saved["menus"]["gb_london_hoppers"]["location"]["country_code"] == "GB"
        assert saved["stats"]["total_restaurants"] == 3
        saved_item = saved["menus"]["gb_london_hoppers"]["menu_items"][0]
        assert saved_item["menu_item_id"] == "hoppers_0"
        assert saved_item["meal_period"] == "all_day"
        assert saved_item["search_tags"] == []
        assert saved["menus"]["gb_london_hoppers"]["cuisine_type"] == "international"

        reloaded = LocalMenuStore(menu_file)
        assert len(await reloaded.list_restaurants()) == 3

    @pytest.mark.asyncio
    async def test_added_items_are_enriched(self, menu_file):
        store = LocalMenuStore(menu_file)

        await store.add_restaurant_menu(
            {
                "restaurant_id": "flat_iron",
                "restaurant_name": "Flat Iron",
                "location": {"city": "London"},
                "menu_items": [{"name": "Flat Iron Steak", "description": "Grilled, with crispy fries"}],
            }
        )

        records = await store.list_restaurants({"restaurant_id": "flat_iron"})
        item = records[0]["menu_items"][0]
        assert item["meal_period"] == "dinner"
        assert item["search_tags"] == ["american", "fried", "grilled"]
        assert records[0]["cuisine_type"] == "international"

    @pytest.mark.asyncio
    async def test_add_replaces_existing(self, menu_file):
        store = LocalMenuStore(menu_file)
        record = {
            "restaurant_id": "bao",
            "restaurant_name": "Bao Soho",
            "location": {"city": "London", "country_code": "GB"},
        }

        result = await store.add_restaurant_menu(record)

        assert result["replaced"] is True
        assert result["items_added"] == 0
        assert len(await store.list_restaurants()) == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "record",
        [
            {"restaurant_name": "Bao", "location": {"city": "London"}},
            {"restaurant_id": "bao", "location": {"city": "London"}},
            {"restaurant_id": "bao", "restaurant_name": "Bao", "location": {}},
        ],
    )
    async def test_add_requires_identity(self, menu_file, record):
        store = LocalMenuStore(menu_file)

        with pytest.raises(MalformedRecord):
            await store.add_restaurant_menu(record)
        assert len(await store.list_restaurants()) == 2
