"""Tests for the record normalizer."""

import pytest

from dishscout.errors import MalformedRecord
from dishscout.ingestion.normalizer import RecordNormalizer


@pytest.fixture
def primary_doc() -> dict:
    """Primary-store restaurant document."""
    return {
        "restaurant_id": "dishoom_cg",
        "basic_info": {
            "name": "Dishoom Covent Garden",
            "cuisine_type": "indian",
            "website": "https://www.dishoom.com",
        },
        "location": {
            "city": "London",
            "country_code": "gb",
            "address": "12 Upper St Martin's Lane",
            "coordinates": {"latitude": 51.5101, "longitude": -0.128},
        },
        "business_info": {
            "opening_hours": {
                "Monday": {"open": "8:00", "close": "23:00"},
                "tuesday": "closed",
                "wednesday": {"open": "late", "close": "23:00"},
            },
            "delivery_platforms": {"deliveroo_id": "dishoom-cg", "ubereats_id": ""},
            "price_range": "$$$",
        },
        "media": {"hero_image": "https://img.example/hero.jpg"},
        "metadata": {
            "goals": ["Highlight Specialties", "attract-dietary"],
            "hidden_gem_tier": "Legendary",
        },
        "statistics": {"community_rating": 4.8, "review_count": 3247, "popularity_score": 40},
    }


@pytest.fixture
def primary_items() -> list[dict]:
    """Primary-store menu item documents."""
    return [
        {
            "menu_item_id": "daal",
            "basic_info": {"name": "House Black Daal", "price": 8.9},
            "classification": {
                "meal_period": "Dinner",
                "cuisine_tags": ["curry", "comfort"],
                "dietary": {"vegetarian": True, "gluten-free": True},
            },
            "availability": {"daily_limit": 10, "schedule": "weekends only"},
            "marketing": {"signature_dish": True, "chef_recommendation": True},
            "hidden_gem_factors": {"secret_recipe": True, "traditional_method": True},
        },
        {
            "basic_info": {"name": "No Id"},
        },
    ]


@pytest.fixture
def local_record() -> dict:
    """Local menu cache record."""
    return {
        "restaurant_id": "pizza_pilgrims",
        "restaurant_name": "Pizza Pilgrims",
        "location": {"city": "London"},
        "menu_items": [
            {
                "name": "Margherita",
                "price": "£9.50",
                "tags": ["vegetarian", "Family Recipe", "signature"],
                "search_tags": ["Italian"],
                "meal_period": "brunch",
                "dietary": {"vegetarian": True},
                "availability": "seasonal",
                "cooking_method": "traditional",
            },
            {"menu_item_id": "nameless", "name": "   "},
        ],
    }


class TestPrimaryLayout:
    """Tests for primary-store records."""

    def test_restaurant_fields(self, primary_doc, primary_items):
        normalizer = RecordNormalizer()
        restaurant = normalizer.normalize_restaurant(primary_doc, "primary", primary_items)

        assert restaurant.restaurant_id == "dishoom_cg"
        assert restaurant.name == "Dishoom Covent Garden"
        assert restaurant.cuisine == "indian"
        assert restaurant.price_range == "$$$"
        assert restaurant.location.country_code == "GB"
        assert restaurant.location.latitude == 51.5101
        assert restaurant.location.longitude == -0.128
        assert restaurant.website == "https://www.dishoom.com"
        assert restaurant.delivery_platforms == {"deliveroo": "dishoom-cg"}
        assert restaurant.goals == {"highlight_specialties", "attract_dietary"}
        assert restaurant.gem_tier == "legendary"
        assert restaurant.reputation.rating == 4.8
        assert restaurant.data_source == "primary"
        assert restaurant.priority == 2

    def test_opening_hours(self, primary_doc):
        restaurant = RecordNormalizer().normalize_restaurant(primary_doc, "primary", [])

        assert restaurant.opening_hours["monday"].open == "08:00"
        assert restaurant.opening_hours["tuesday"].closed is True
        # Unparsable entry is treated as absent
        assert "wednesday" not in restaurant.opening_hours

    def test_item_fields(self, primary_doc, primary_items):
        normalizer = RecordNormalizer()
        restaurant = normalizer.normalize_restaurant(primary_doc, "primary", primary_items)

        assert len(restaurant.menu_items) == 1
        item = restaurant.menu_items[0]
        assert item.restaurant_id == "dishoom_cg"
        assert item.meal_period == "dinner"
        assert item.price == "8.90"
        assert item.dietary.vegetarian is True
        assert item.dietary.gluten_free is True
        assert item.dietary.vegan is False
        assert item.is_signature
        assert "chef_special" in item.tags
        assert item.availability_tags == {"weekends_only", "chef_special"}
        assert item.rarity_tags == {"secret_recipe", "traditional"}
        assert item.daily_limit == 10

    def test_item_without_id_dropped(self, primary_doc, primary_items):
        normalizer = RecordNormalizer()
        normalizer.normalize_restaurant(primary_doc, "primary", primary_items)

        assert normalizer.stats["items_normalized"] == 1
        assert normalizer.stats["items_dropped"] == 1

    def test_null_sections_use_defaults(self, primary_doc, primary_items):
        primary_doc["business_info"] = None
        primary_doc["statistics"] = None
        primary_doc["media"] = {"hero_image": None, "gallery": None}
        primary_items[0]["classification"] = {"meal_period": None, "cuisine_tags": None, "dietary": None}
        primary_items[0]["availability"] = None

        restaurant = RecordNormalizer().normalize_restaurant(primary_doc, "primary", primary_items)

        assert restaurant.opening_hours is None
        assert restaurant.price_range == "$$"
        assert restaurant.reputation.rating is None
        assert restaurant.media.gallery == []
        item = restaurant.menu_items[0]
        assert item.meal_period == "all_day"
        assert item.available is True
        assert item.cuisine_tags == []

    def test_missing_hours_table_is_none(self, primary_doc):
        primary_doc["business_info"]["opening_hours"] = {}
        restaurant = RecordNormalizer().normalize_restaurant(primary_doc, "primary", [])
        assert restaurant.opening_hours is None


class TestLocalLayout:
    """Tests for local menu cache records."""

    def test_defaults(self, local_record):
        restaurant = RecordNormalizer().normalize_restaurant(local_record, "local")

        assert restaurant.location.country_code == "GB"
        assert restaurant.price_range == "$$"
        assert restaurant.cuisine == "international"
        assert restaurant.opening_hours is None
        assert restaurant.data_source == "local"
        assert restaurant.priority == 1

    def test_item_mapping(self, local_record):
        restaurant = RecordNormalizer().normalize_restaurant(local_record, "local")

        assert len(restaurant.menu_items) == 1
        item = restaurant.menu_items[0]
        assert item.menu_item_id == "pizza_pilgrims_0"
        assert item.meal_period == "all_day"
        assert item.available is True
        assert item.tags == ["vegetarian", "family_recipe", "signature"]
        assert item.cuisine_tags == ["italian"]
        assert item.availability_tags == {"seasonal"}
        assert item.rarity_tags == {"family_recipe", "traditional"}
        assert item.dietary.vegan is False

    def test_explicit_items_override_embedded(self, local_record):
        items = [{"menu_item_id": "x", "name": "Marinara"}]
        restaurant = RecordNormalizer().normalize_restaurant(local_record, "local", items)

        assert [i.name for i in restaurant.menu_items] == ["Marinara"]

    def test_null_optional_fields_use_defaults(self, local_record):
        local_record.update(
            opening_hours=None,
            media=None,
            metadata=None,
            delivery_platforms=None,
            cuisine_type=None,
        )
        local_record["menu_items"] = [
            {"menu_item_id": "m1", "name": "Marinara", "tags": None, "search_tags": None, "dietary": None},
            {"menu_item_id": "m2", "name": "Diavola", "tags": ["spicy", None], "available": None},
            None,
        ]
        normalizer = RecordNormalizer()

        restaurants = normalizer.normalize_batch([(local_record, None)], "local")

        assert len(restaurants) == 1
        restaurant = restaurants[0]
        assert restaurant.opening_hours is None
        assert restaurant.media.hero_image is None
        assert restaurant.goals == frozenset()
        assert restaurant.delivery_platforms == {}
        assert restaurant.cuisine == "international"
        assert [i.menu_item_id for i in restaurant.menu_items] == ["m1", "m2"]
        assert restaurant.menu_items[0].tags == []
        assert restaurant.menu_items[0].dietary.vegetarian is False
        assert restaurant.menu_items[1].tags == ["spicy"]
        assert restaurant.menu_items[1].available is True
        assert normalizer.stats["restaurants_dropped"] == 0
        assert normalizer.stats["items_dropped"] == 1

    def test_nested_coordinates(self, local_record):
        local_record["location"]["coordinates"] = {"lat": 51.51, "lng": -0.13}
        restaurant = RecordNormalizer().normalize_restaurant(local_record, "local")

        assert restaurant.location.has_coordinates
        assert restaurant.location.latitude == 51.51


class TestMalformedRecords:
    """Tests for dropping and counting malformed records."""

    @pytest.mark.parametrize("missing", ["restaurant_id", "restaurant_name"])
    def test_missing_identity_raises(self, local_record, missing):
        del local_record[missing]

        with pytest.raises(MalformedRecord):
            RecordNormalizer().normalize_restaurant(local_record, "local")

    def test_missing_city_raises(self, local_record):
        local_record["location"] = {"country_code": "GB"}

        with pytest.raises(MalformedRecord):
            RecordNormalizer().normalize_restaurant(local_record, "local")

    def test_invalid_layout_raises(self, local_record):
        local_record["menu_items"] = "not a list"

        with pytest.raises(MalformedRecord):
            RecordNormalizer().normalize_restaurant(local_record, "local")

    def test_batch_drops_and_counts(self, local_record, primary_doc):
        broken = {"restaurant_name": "No Id", "location": {"city": "London"}}
        normalizer = RecordNormalizer()

        restaurants = normalizer.normalize_batch([(local_record, None), (broken, None)], "local")

        assert [r.restaurant_id for r in restaurants] == ["pizza_pilgrims"]
        assert normalizer.stats["restaurants_normalized"] == 1
        assert normalizer.stats["restaurants_dropped"] == 1
        assert normalizer.dropped == 2  # one restaurant plus the nameless item

    def test_reset_stats(self, local_record):
        normalizer = RecordNormalizer()
        normalizer.normalize_batch([(local_record, None)], "local")
        normalizer.reset_stats()

        assert normalizer.stats == {
            "restaurants_normalized": 0,
            "items_normalized": 0,
            "restaurants_dropped": 0,
            "items_dropped": 0,
        }
