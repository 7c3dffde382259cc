"""Search query models."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from dishscout.models.domain import WEEKDAYS, MealPeriod, normalize_tag

SortBy = Literal["relevance", "hidden_gem", "distance"]
SourceMode = Literal["hybrid", "primary", "local"]


class QueryLocation(BaseModel):
    """Where the user is searching."""

    city: str = ""
    country_code: str = "GB"
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class TimeContext(BaseModel):
    """Point in time used for opening-hours checks."""

    day_of_week: str
    hour: int = Field(ge=0, le=23)
    minute: int = Field(default=0, ge=0, le=59)

    @field_validator("day_of_week")
    @classmethod
    def _check_day(cls, value: str) -> str:
        day = value.strip().lower()
        if day not in WEEKDAYS:
            raise ValueError(f"unknown weekday '{value}'")
        return day

    @property
    def minutes_since_midnight(self) -> int:
        return self.hour * 60 + self.minute

    @classmethod
    def from_datetime(cls, moment: datetime) -> "TimeContext":
        """Build a context from a (local) datetime."""
        return cls(
            day_of_week=WEEKDAYS[moment.weekday()],
            hour=moment.hour,
            minute=moment.minute,
        )


class SearchQuery(BaseModel):
    """A single food-decision request.

    ``limit``, ``per_restaurant_items`` and ``search_radius_km`` fall back to
    settings when left unset. Dietary requirements use AND semantics and are
    normalized so ``gluten-free`` and ``gluten_free`` are equivalent.
    """

    location: QueryLocation = Field(default_factory=QueryLocation)
    search_radius_km: float | None = None
    mood_text: str = ""
    dietary: list[str] = Field(default_factory=list)
    meal_period: MealPeriod = "all_day"
    time_context: TimeContext | None = None
    sort_by: SortBy = "relevance"
    limit: int | None = None
    per_restaurant_items: int | None = None
    source_mode: SourceMode = "hybrid"

    @field_validator("dietary")
    @classmethod
    def _normalize_dietary(cls, value: list[str]) -> list[str]:
        return [normalize_tag(flag) for flag in value if flag and flag.strip()]

    @property
    def mood_words(self) -> list[str]:
        """Lower-cased mood words longer than two characters, repeats kept."""
        return [word for word in self.mood_text.lower().split() if len(word) > 2]
