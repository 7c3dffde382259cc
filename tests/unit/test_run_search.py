"""Tests for the search CLI helpers."""

import json

import pytest

from scripts.run_search import load_primary_dump, resolve_source_mode


class TestResolveSourceMode:
    """Tests for resolve_source_mode."""

    @pytest.mark.parametrize(
        "requested,has_primary,expected",
        [
            (None, False, "local"),
            (None, True, "hybrid"),
            ("primary", True, "primary"),
            ("hybrid", False, "hybrid"),
        ],
    )
    def test_resolution(self, requested, has_primary, expected):
        assert resolve_source_mode(requested, has_primary) == expected


class TestLoadPrimaryDump:
    """Tests for load_primary_dump."""

    @pytest.mark.asyncio
    async def test_loads_restaurants_and_items(self, tmp_path):
        path = tmp_path / "primary.json"
        path.write_text(
            json.dumps(
                {
                    "restaurants": [{"restaurant_id": "p-1", "basic_info": {"name": "Dishoom"}}],
                    "menu_items": {"p-1": [{"menu_item_id": "daal"}]},
                }
            )
        )

        provider = load_primary_dump(path)

        assert provider.name == "primary"
        assert [r["restaurant_id"] for r in await provider.list_restaurants()] == ["p-1"]
        assert await provider.list_menu_items("p-1") == [{"menu_item_id": "daal"}]
