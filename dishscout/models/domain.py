"""Canonical restaurant and menu models shared by every pipeline stage.

Both sources are mapped onto these shapes by the record normalizer; nothing
downstream of it reads source-specific fields.
"""

import re
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

MealPeriod = Literal["breakfast", "lunch", "dinner", "snack", "all_day"]
DataSource = Literal["primary", "local"]

MEAL_PERIODS: tuple[str, ...] = ("breakfast", "lunch", "dinner", "snack", "all_day")
DIETARY_FLAGS: tuple[str, ...] = (
    "vegetarian",
    "vegan",
    "gluten_free",
    "dairy_free",
    "halal",
    "kosher",
)
WEEKDAYS: tuple[str, ...] = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

PRIMARY_PRIORITY = 2
LOCAL_PRIORITY = 1

_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def normalize_tag(value: str) -> str:
    """Lower-case a tag and collapse whitespace/hyphen runs to underscores."""
    return re.sub(r"[\s\-]+", "_", value.strip().lower())


def to_minutes(value: str) -> int:
    """Convert an ``HH:MM`` string to whole minutes since midnight."""
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


class Location(BaseModel):
    """Where a restaurant is."""

    city: str
    country_code: str
    address: str | None = None
    neighborhood: str | None = None
    latitude: float | None = None
    longitude: float | None = None

    class Config:
        frozen = True

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class DayHours(BaseModel):
    """Opening hours for a single weekday."""

    open: str | None = None
    close: str | None = None
    closed: bool = False

    class Config:
        frozen = True

    @field_validator("open", "close")
    @classmethod
    def _check_time(cls, value: str | None) -> str | None:
        if value is None:
            return value
        value = value.strip()
        if len(value) == 4 and value[1] == ":":
            value = f"0{value}"
        if not _TIME_PATTERN.match(value):
            raise ValueError(f"invalid time '{value}', expected HH:MM")
        return value

    @model_validator(mode="after")
    def _require_bounds(self) -> "DayHours":
        if not self.closed and (self.open is None or self.close is None):
            raise ValueError("open and close are required unless the day is closed")
        return self

    @property
    def open_minutes(self) -> int | None:
        return to_minutes(self.open) if self.open else None

    @property
    def close_minutes(self) -> int | None:
        return to_minutes(self.close) if self.close else None


class DietaryFlags(BaseModel):
    """Declared dietary properties of a dish."""

    vegetarian: bool = False
    vegan: bool = False
    gluten_free: bool = False
    dairy_free: bool = False
    halal: bool = False
    kosher: bool = False

    class Config:
        frozen = True

    def satisfies(self, flag: str) -> bool:
        """Whether the (normalized) flag is declared true."""
        if flag not in DIETARY_FLAGS:
            return False
        return bool(getattr(self, flag))


class Media(BaseModel):
    """Restaurant imagery."""

    hero_image: str | None = None
    gallery: list[str] = Field(default_factory=list)

    class Config:
        frozen = True

    @property
    def has_any(self) -> bool:
        return bool(self.hero_image) or bool(self.gallery)


class Reputation(BaseModel):
    """Review and popularity signals."""

    rating: float | None = None
    review_count: int | None = None
    popularity_score: float | None = None

    class Config:
        frozen = True


class MenuItem(BaseModel):
    """A single dish offered by a restaurant."""

    menu_item_id: str
    restaurant_id: str
    name: str
    description: str = ""
    price: str | None = None
    category: str = "main"
    meal_period: MealPeriod = "all_day"
    tags: list[str] = Field(default_factory=list)
    cuisine_tags: list[str] = Field(default_factory=list)
    dietary: DietaryFlags = Field(default_factory=DietaryFlags)
    available: bool = True
    availability_tags: frozenset[str] = frozenset()
    daily_limit: int | None = None
    rarity_tags: frozenset[str] = frozenset()

    class Config:
        frozen = True

    @property
    def is_signature(self) -> bool:
        return "signature" in self.tags

    @property
    def search_text(self) -> str:
        """Lower-cased text used for mood keyword matching."""
        parts = [self.name, self.description, " ".join(self.tags), " ".join(self.cuisine_tags)]
        return " ".join(part for part in parts if part).lower()


class RestaurantSummary(BaseModel):
    """Lightweight restaurant view attached to results."""

    restaurant_id: str
    name: str
    cuisine: str
    price_range: str
    location: Location
    rating: float | None = None
    review_count: int | None = None
    data_source: DataSource


class Restaurant(BaseModel):
    """Canonical restaurant record with its menu."""

    restaurant_id: str
    name: str
    location: Location
    cuisine: str = "international"
    price_range: str = "$$"
    opening_hours: dict[str, DayHours] | None = None
    booking_url: str | None = None
    website: str | None = None
    delivery_platforms: dict[str, str] = Field(default_factory=dict)
    media: Media = Field(default_factory=Media)
    reputation: Reputation = Field(default_factory=Reputation)
    goals: frozenset[str] = frozenset()
    gem_override: float | None = None
    gem_tier: str | None = None
    data_source: DataSource
    priority: int
    menu_items: list[MenuItem] = Field(default_factory=list)

    class Config:
        frozen = True

    def has_goal(self, goal: str) -> bool:
        return goal in self.goals

    def summary(self) -> RestaurantSummary:
        """Project to the view attached to scored results."""
        return RestaurantSummary(
            restaurant_id=self.restaurant_id,
            name=self.name,
            cuisine=self.cuisine,
            price_range=self.price_range,
            location=self.location,
            rating=self.reputation.rating,
            review_count=self.reputation.review_count,
            data_source=self.data_source,
        )
