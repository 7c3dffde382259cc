"""Raw record models for the two restaurant sources.

The primary document store nests fields in ``basic_info`` / ``business_info``
sections; the local menu cache keeps a flat record with embedded menu items.
Identity fields are optional here so the normalizer can count and drop
malformed records instead of failing the batch. An explicit ``null`` on any
field means the same as leaving it out.
"""

from typing import Any

from pydantic import AliasChoices, BaseModel, Field, model_validator


class SourceModel(BaseModel):
    """Base for raw source layouts."""

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


# ---------------------------------------------------------------------------
# Primary document store
# ---------------------------------------------------------------------------


class PrimaryCoordinates(SourceModel):
    """Geo point as stored in the document store."""

    lat: float | None = Field(default=None, validation_alias=AliasChoices("lat", "latitude"))
    lng: float | None = Field(
        default=None, validation_alias=AliasChoices("lng", "lon", "longitude")
    )


class PrimaryBasicInfo(SourceModel):
    name: str | None = None
    cuisine_type: str | list[str] | None = None
    description: str | None = None
    website: str | None = None
    phone: str | None = None


class PrimaryLocation(SourceModel):
    city: str | None = None
    country_code: str | None = None
    address: str | None = None
    neighborhood: str | None = None
    coordinates: PrimaryCoordinates | None = None


class PrimaryBusinessInfo(SourceModel):
    opening_hours: dict[str, Any] = Field(default_factory=dict)
    delivery_platforms: dict[str, Any] = Field(default_factory=dict)
    price_range: str | None = None
    booking_url: str | None = None


class SourceMedia(SourceModel):
    """Media block, same layout in both sources."""

    hero_image: str | None = None
    gallery: list[str | None] = Field(default_factory=list)


class SourceMetadata(SourceModel):
    """Signup metadata, same layout in both sources."""

    goals: list[str | None] = Field(default_factory=list)
    hidden_gem_override: float | None = None
    hidden_gem_tier: str | None = None


class PrimaryStatistics(SourceModel):
    community_rating: float | None = None
    review_count: int | None = None
    popularity_score: float | None = None


class PrimaryRestaurantDoc(SourceModel):
    """Restaurant document from the primary store."""

    restaurant_id: str | None = Field(
        default=None, validation_alias=AliasChoices("restaurant_id", "id")
    )
    basic_info: PrimaryBasicInfo = Field(default_factory=PrimaryBasicInfo)
    location: PrimaryLocation = Field(default_factory=PrimaryLocation)
    business_info: PrimaryBusinessInfo = Field(default_factory=PrimaryBusinessInfo)
    media: SourceMedia = Field(default_factory=SourceMedia)
    metadata: SourceMetadata = Field(default_factory=SourceMetadata)
    statistics: PrimaryStatistics = Field(default_factory=PrimaryStatistics)


class PrimaryItemBasicInfo(SourceModel):
    name: str | None = None
    description: str | None = None
    price: str | float | None = None
    category: str | None = None


class PrimaryClassification(SourceModel):
    meal_period: str | None = None
    cuisine_tags: list[str | None] = Field(default_factory=list)
    dietary: dict[str, Any] = Field(default_factory=dict)


class PrimaryAvailability(SourceModel):
    available: bool = True
    seasonal: bool = False
    daily_limit: int | None = None
    schedule: str | None = None


class PrimaryMarketing(SourceModel):
    signature_dish: bool = False
    chef_recommendation: bool = False
    popular: bool = False
    new_item: bool = False


class PrimaryGemFactors(SourceModel):
    family_recipe: bool = False
    secret_recipe: bool = False
    traditional_method: bool = False


class PrimaryMenuItemDoc(SourceModel):
    """Menu item document from the primary store."""

    menu_item_id: str | None = Field(
        default=None, validation_alias=AliasChoices("menu_item_id", "id")
    )
    restaurant_id: str | None = None
    basic_info: PrimaryItemBasicInfo = Field(default_factory=PrimaryItemBasicInfo)
    classification: PrimaryClassification = Field(default_factory=PrimaryClassification)
    availability: PrimaryAvailability = Field(default_factory=PrimaryAvailability)
    marketing: PrimaryMarketing = Field(default_factory=PrimaryMarketing)
    hidden_gem_factors: PrimaryGemFactors = Field(default_factory=PrimaryGemFactors)


# ---------------------------------------------------------------------------
# Local menu cache
# ---------------------------------------------------------------------------


class LocalLocation(SourceModel):
    city: str | None = None
    country_code: str | None = None
    address: str | None = None
    neighborhood: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    coordinates: PrimaryCoordinates | None = None


class LocalMenuItem(SourceModel):
    """Menu item embedded in a local cache record."""

    menu_item_id: str | None = None
    name: str | None = None
    description: str | None = None
    price: str | float | None = None
    category: str | None = None
    tags: list[str | None] = Field(default_factory=list)
    search_tags: list[str | None] = Field(default_factory=list)
    meal_period: str | None = None
    dietary: dict[str, Any] = Field(default_factory=dict)
    available: bool = True
    availability: str | None = None
    daily_limit: int | None = None
    cooking_method: str | None = None


class LocalRestaurantRecord(SourceModel):
    """Restaurant record from the local menu cache."""

    restaurant_id: str | None = None
    restaurant_name: str | None = None
    location: LocalLocation = Field(default_factory=LocalLocation)
    cuisine_type: str | None = None
    price_range: str | None = None
    website: str | None = None
    booking_url: str | None = None
    delivery_platforms: dict[str, Any] = Field(default_factory=dict)
    opening_hours: dict[str, Any] = Field(default_factory=dict)
    metadata: SourceMetadata = Field(default_factory=SourceMetadata)
    media: SourceMedia = Field(default_factory=SourceMedia)
    rating: float | None = None
    review_count: int | None = None
    popularity_score: float | None = None
    menu_items: list[dict[str, Any] | None] = Field(default_factory=list)
