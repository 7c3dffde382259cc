"""Normalize raw source records into canonical restaurants and menu items."""

from typing import Any, Iterable

import structlog
from pydantic import ValidationError

from dishscout.errors import MalformedRecord
from dishscout.metrics import record_malformed_record
from dishscout.models.domain import (
    DIETARY_FLAGS,
    LOCAL_PRIORITY,
    MEAL_PERIODS,
    PRIMARY_PRIORITY,
    WEEKDAYS,
    DataSource,
    DayHours,
    DietaryFlags,
    Location,
    Media,
    MenuItem,
    Reputation,
    Restaurant,
    normalize_tag,
)
from dishscout.models.source import (
    LocalMenuItem,
    LocalRestaurantRecord,
    PrimaryMenuItemDoc,
    PrimaryRestaurantDoc,
    SourceMedia,
    SourceMetadata,
)

logger = structlog.get_logger()

AVAILABILITY_KINDS = frozenset({"weekends_only", "seasonal", "chef_special", "limited_daily"})
RARITY_KINDS = frozenset({"family_recipe", "secret_recipe", "traditional"})
_RARITY_ALIASES = {"traditional_method": "traditional"}


def _dedupe(values: Iterable[str]) -> list[str]:
    seen: dict[str, None] = {}
    for value in values:
        if value:
            seen.setdefault(value, None)
    return list(seen)


def _tags(values: Iterable[Any]) -> list[str]:
    return _dedupe(normalize_tag(str(v)) for v in values if v is not None)


def _text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _price(value: str | float | None) -> str | None:
    if value is None or value == "":
        return None
    if isinstance(value, float):
        return f"{value:.2f}"
    return str(value).strip()


def _positive_int(value: int | None) -> int | None:
    if value is None or value <= 0:
        return None
    return value


class RecordNormalizer:
    """Map primary-store and local-cache records onto the canonical shape.

    Records missing identity fields are dropped and counted; nothing here
    raises to the caller for a single bad record.
    """

    def __init__(self, default_country_code: str = "GB"):
        self.default_country_code = default_country_code.upper()
        self._stats = self._empty_stats()

    @staticmethod
    def _empty_stats() -> dict[str, int]:
        return {
            "restaurants_normalized": 0,
            "items_normalized": 0,
            "restaurants_dropped": 0,
            "items_dropped": 0,
        }

    @property
    def stats(self) -> dict:
        """Get normalization statistics."""
        return self._stats.copy()

    @property
    def dropped(self) -> int:
        return self._stats["restaurants_dropped"] + self._stats["items_dropped"]

    def reset_stats(self) -> None:
        """Reset normalization statistics."""
        self._stats = self._empty_stats()

    def normalize_batch(
        self,
        records: Iterable[tuple[dict[str, Any], list[dict[str, Any]] | None]],
        source: DataSource,
    ) -> list[Restaurant]:
        """Normalize ``(restaurant, items)`` pairs, dropping malformed ones."""
        restaurants = []
        for raw, raw_items in records:
            try:
                restaurants.append(self.normalize_restaurant(raw, source, raw_items))
            except MalformedRecord as e:
                self._drop(source, e)
                self._stats["restaurants_dropped"] += 1

        logger.info(
            "normalization_complete",
            source=source,
            restaurants=len(restaurants),
            stats=self._stats,
        )
        return restaurants

    def normalize_restaurant(
        self,
        raw: dict[str, Any],
        source: DataSource,
        raw_items: list[dict[str, Any]] | None = None,
    ) -> Restaurant:
        """Normalize one restaurant record.

        Args:
            raw: Restaurant record in the source's layout
            source: Which source produced the record
            raw_items: Menu item records; when omitted the record's embedded
                ``menu_items`` are used

        Raises:
            MalformedRecord: if the restaurant lacks identity fields
        """
        if source == "primary":
            embedded = raw.get("menu_items") or []
            restaurant = self._from_primary(raw, embedded if raw_items is None else raw_items)
        else:
            restaurant = self._from_local(raw, raw_items)

        self._stats["restaurants_normalized"] += 1
        return restaurant

    # -- primary store ------------------------------------------------------

    def _from_primary(self, raw: dict[str, Any], raw_items: list[dict[str, Any]]) -> Restaurant:
        try:
            doc = PrimaryRestaurantDoc.model_validate(raw)
        except ValidationError as e:
            raise MalformedRecord("restaurant", f"invalid layout: {e.error_count()} errors") from e

        restaurant_id = _text(doc.restaurant_id)
        name = _text(doc.basic_info.name)
        self._require_identity(restaurant_id, name, doc.location.city)

        coords = doc.location.coordinates
        location = Location(
            city=doc.location.city.strip(),
            country_code=(_text(doc.location.country_code) or self.default_country_code).upper(),
            address=_text(doc.location.address),
            neighborhood=_text(doc.location.neighborhood),
            latitude=coords.lat if coords else None,
            longitude=coords.lng if coords else None,
        )

        cuisine = doc.basic_info.cuisine_type
        if isinstance(cuisine, list):
            cuisine = cuisine[0] if cuisine else None

        items = []
        for index, raw_item in enumerate(raw_items):
            item = self._safe_item(raw_item, restaurant_id, index, "primary")
            if item is not None:
                items.append(item)

        return Restaurant(
            restaurant_id=restaurant_id,
            name=name,
            location=location,
            cuisine=_text(cuisine) or "international",
            price_range=_text(doc.business_info.price_range) or "$$",
            opening_hours=self._opening_hours(doc.business_info.opening_hours, restaurant_id),
            booking_url=_text(doc.business_info.booking_url),
            website=_text(doc.basic_info.website),
            delivery_platforms=self._delivery_platforms(doc.business_info.delivery_platforms),
            media=self._media(doc.media),
            reputation=Reputation(
                rating=doc.statistics.community_rating,
                review_count=doc.statistics.review_count,
                popularity_score=doc.statistics.popularity_score,
            ),
            **self._metadata(doc.metadata),
            data_source="primary",
            priority=PRIMARY_PRIORITY,
            menu_items=items,
        )

    def _primary_item(self, raw: dict[str, Any], restaurant_id: str) -> MenuItem:
        doc = PrimaryMenuItemDoc.model_validate(raw)

        item_id = _text(doc.menu_item_id)
        name = _text(doc.basic_info.name)
        if not item_id:
            raise MalformedRecord("menu_item", "missing menu_item_id")
        if not name:
            raise MalformedRecord("menu_item", "missing name", record_id=item_id)

        marketing = doc.marketing
        factors = doc.hidden_gem_factors
        cuisine_tags = _tags(doc.classification.cuisine_tags)

        tags = []
        if marketing.signature_dish or "signature" in cuisine_tags:
            tags.append("signature")
        if marketing.chef_recommendation:
            tags.append("chef_special")
        if marketing.popular:
            tags.append("popular")
        if marketing.new_item:
            tags.append("new")

        rarity = {tag for tag in cuisine_tags if tag in RARITY_KINDS}
        if factors.family_recipe:
            rarity.add("family_recipe")
        if factors.secret_recipe:
            rarity.add("secret_recipe")
        if factors.traditional_method:
            rarity.add("traditional")
        tags.extend(sorted(rarity))

        availability = set()
        if doc.availability.schedule:
            schedule = normalize_tag(doc.availability.schedule)
            if schedule in AVAILABILITY_KINDS:
                availability.add(schedule)
        if doc.availability.seasonal:
            availability.add("seasonal")
        if marketing.chef_recommendation:
            availability.add("chef_special")

        return MenuItem(
            menu_item_id=item_id,
            restaurant_id=restaurant_id,
            name=name,
            description=_text(doc.basic_info.description) or "",
            price=_price(doc.basic_info.price),
            category=_text(doc.basic_info.category) or "main",
            meal_period=self._meal_period(doc.classification.meal_period),
            tags=_dedupe(tags),
            cuisine_tags=cuisine_tags,
            dietary=self._dietary(doc.classification.dietary),
            available=doc.availability.available,
            availability_tags=frozenset(availability),
            daily_limit=_positive_int(doc.availability.daily_limit),
            rarity_tags=frozenset(rarity),
        )

    # -- local cache ----------------------------------------------------------

    def _from_local(self, raw: dict[str, Any], raw_items: list[dict[str, Any]] | None) -> Restaurant:
        try:
            record = LocalRestaurantRecord.model_validate(raw)
        except ValidationError as e:
            raise MalformedRecord("restaurant", f"invalid layout: {e.error_count()} errors") from e

        restaurant_id = _text(record.restaurant_id)
        name = _text(record.restaurant_name)
        self._require_identity(restaurant_id, name, record.location.city)

        latitude, longitude = record.location.latitude, record.location.longitude
        coords = record.location.coordinates
        if (latitude is None or longitude is None) and coords is not None:
            latitude, longitude = coords.lat, coords.lng

        location = Location(
            city=record.location.city.strip(),
            country_code=(_text(record.location.country_code) or self.default_country_code).upper(),
            address=_text(record.location.address),
            neighborhood=_text(record.location.neighborhood),
            latitude=latitude,
            longitude=longitude,
        )

        items = []
        for index, raw_item in enumerate(record.menu_items if raw_items is None else raw_items):
            item = self._safe_item(raw_item, restaurant_id, index, "local")
            if item is not None:
                items.append(item)

        return Restaurant(
            restaurant_id=restaurant_id,
            name=name,
            location=location,
            cuisine=_text(record.cuisine_type) or "international",
            price_range=_text(record.price_range) or "$$",
            opening_hours=self._opening_hours(record.opening_hours, restaurant_id),
            booking_url=_text(record.booking_url),
            website=_text(record.website),
            delivery_platforms=self._delivery_platforms(record.delivery_platforms),
            media=self._media(record.media),
            reputation=Reputation(
                rating=record.rating,
                review_count=record.review_count,
                popularity_score=record.popularity_score,
            ),
            **self._metadata(record.metadata),
            data_source="local",
            priority=LOCAL_PRIORITY,
            menu_items=items,
        )

    def _local_item(self, raw: dict[str, Any], restaurant_id: str, index: int) -> MenuItem:
        item = LocalMenuItem.model_validate(raw)

        name = _text(item.name)
        if not name:
            raise MalformedRecord("menu_item", "missing name", record_id=item.menu_item_id)

        tags = _tags(item.tags)
        rarity = {_RARITY_ALIASES.get(tag, tag) for tag in tags}
        rarity &= RARITY_KINDS
        if item.cooking_method and normalize_tag(item.cooking_method) == "traditional":
            rarity.add("traditional")

        availability = set()
        if item.availability:
            kind = normalize_tag(item.availability)
            if kind in AVAILABILITY_KINDS:
                availability.add(kind)

        return MenuItem(
            menu_item_id=_text(item.menu_item_id) or f"{restaurant_id}_{index}",
            restaurant_id=restaurant_id,
            name=name,
            description=_text(item.description) or "",
            price=_price(item.price),
            category=_text(item.category) or "main",
            meal_period=self._meal_period(item.meal_period),
            tags=tags,
            cuisine_tags=_tags(item.search_tags),
            dietary=self._dietary(item.dietary),
            available=item.available,
            availability_tags=frozenset(availability),
            daily_limit=_positive_int(item.daily_limit),
            rarity_tags=frozenset(rarity),
        )

    # -- shared helpers -------------------------------------------------------

    def _safe_item(
        self,
        raw: dict[str, Any],
        restaurant_id: str,
        index: int,
        source: DataSource,
    ) -> MenuItem | None:
        try:
            if source == "primary":
                item = self._primary_item(raw, restaurant_id)
            else:
                item = self._local_item(raw, restaurant_id, index)
        except ValidationError as e:
            self._drop(source, MalformedRecord("menu_item", f"invalid layout: {e.error_count()} errors"))
            self._stats["items_dropped"] += 1
            return None
        except MalformedRecord as e:
            self._drop(source, e)
            self._stats["items_dropped"] += 1
            return None

        self._stats["items_normalized"] += 1
        return item

    @staticmethod
    def _require_identity(restaurant_id: str | None, name: str | None, city: str | None) -> None:
        if not restaurant_id:
            raise MalformedRecord("restaurant", "missing restaurant_id")
        if not name:
            raise MalformedRecord("restaurant", "missing name", record_id=restaurant_id)
        if not _text(city):
            raise MalformedRecord("restaurant", "missing location.city", record_id=restaurant_id)

    @staticmethod
    def _drop(source: DataSource, error: MalformedRecord) -> None:
        logger.warning(
            "record_dropped",
            source=source,
            kind=error.kind,
            record_id=error.record_id,
            reason=error.reason,
        )
        record_malformed_record(source, error.kind)

    @staticmethod
    def _meal_period(value: str | None) -> str:
        if not value:
            return "all_day"
        period = normalize_tag(value)
        return period if period in MEAL_PERIODS else "all_day"

    @staticmethod
    def _dietary(raw: dict[str, Any]) -> DietaryFlags:
        flags = {normalize_tag(key): bool(value) for key, value in raw.items()}
        return DietaryFlags(**{flag: flags.get(flag, False) for flag in DIETARY_FLAGS})

    @staticmethod
    def _delivery_platforms(raw: dict[str, Any]) -> dict[str, str]:
        platforms = {}
        for key, value in raw.items():
            identifier = _text(value)
            if not identifier:
                continue
            platform = normalize_tag(key)
            if platform.endswith("_id"):
                platform = platform[: -len("_id")]
            platforms[platform] = identifier
        return platforms

    @staticmethod
    def _media(media: SourceMedia) -> Media:
        return Media(
            hero_image=_text(media.hero_image),
            gallery=[url for url in media.gallery if _text(url)],
        )

    @staticmethod
    def _metadata(metadata: SourceMetadata) -> dict[str, Any]:
        tier = _text(metadata.hidden_gem_tier)
        return {
            "goals": frozenset(_tags(metadata.goals)),
            "gem_override": metadata.hidden_gem_override,
            "gem_tier": tier.lower() if tier else None,
        }

    @staticmethod
    def _opening_hours(raw: dict[str, Any], restaurant_id: str) -> dict[str, DayHours] | None:
        if not raw:
            return None

        table: dict[str, DayHours] = {}
        for day, entry in raw.items():
            day_key = str(day).strip().lower()
            if day_key not in WEEKDAYS:
                continue
            if isinstance(entry, str) and entry.strip().lower() == "closed":
                table[day_key] = DayHours(closed=True)
                continue
            try:
                table[day_key] = DayHours.model_validate(entry)
            except ValidationError as e:
                logger.warning(
                    "opening_hours_entry_dropped",
                    restaurant_id=restaurant_id,
                    day=day_key,
                    error=str(e.errors()[0]["msg"]),
                )

        return table or None
