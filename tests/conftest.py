"""Shared fixtures."""

import random

import pytest

from dishscout.config import Settings
from dishscout.models.domain import (
    DayHours,
    DietaryFlags,
    Location,
    Media,
    MenuItem,
    Reputation,
    Restaurant,
)


@pytest.fixture
def settings() -> Settings:
    """Settings with deterministic relevance scoring."""
    return Settings(relevance_noise_enabled=False, random_seed=7)


@pytest.fixture
def make_item():
    """Factory for canonical menu items."""

    def _make(
        menu_item_id: str = "item-1",
        restaurant_id: str = "rest-1",
        name: str = "House Black Daal",
        dietary: dict | None = None,
        availability_tags: set[str] | None = None,
        rarity_tags: set[str] | None = None,
        **overrides,
    ) -> MenuItem:
        return MenuItem(
            menu_item_id=menu_item_id,
            restaurant_id=restaurant_id,
            name=name,
            dietary=DietaryFlags(**(dietary or {})),
            availability_tags=frozenset(availability_tags or ()),
            rarity_tags=frozenset(rarity_tags or ()),
            **overrides,
        )

    return _make


@pytest.fixture
def make_restaurant():
    """Factory for canonical restaurants."""

    def _make(
        restaurant_id: str = "rest-1",
        name: str = "Dishoom",
        city: str = "London",
        country_code: str = "GB",
        latitude: float | None = None,
        longitude: float | None = None,
        neighborhood: str | None = None,
        address: str | None = None,
        goals: set[str] | None = None,
        rating: float | None = None,
        review_count: int | None = None,
        popularity_score: float | None = None,
        hero_image: str | None = None,
        opening_hours: dict[str, dict] | None = None,
        data_source: str = "local",
        menu_items: list[MenuItem] | None = None,
        **overrides,
    ) -> Restaurant:
        hours = None
        if opening_hours is not None:
            hours = {day: DayHours(**entry) for day, entry in opening_hours.items()}
        return Restaurant(
            restaurant_id=restaurant_id,
            name=name,
            location=Location(
                city=city,
                country_code=country_code,
                latitude=latitude,
                longitude=longitude,
                neighborhood=neighborhood,
                address=address,
            ),
            goals=frozenset(goals or ()),
            reputation=Reputation(
                rating=rating,
                review_count=review_count,
                popularity_score=popularity_score,
            ),
            media=Media(hero_image=hero_image),
            opening_hours=hours,
            data_source=data_source,
            priority=2 if data_source == "primary" else 1,
            menu_items=menu_items or [],
            **overrides,
        )

    return _make


@pytest.fixture
def rng() -> random.Random:
    return random.Random(42)
