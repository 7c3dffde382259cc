"""Data models for the matching engine."""

from dishscout.models.domain import (
    DIETARY_FLAGS,
    MEAL_PERIODS,
    WEEKDAYS,
    DayHours,
    DietaryFlags,
    Location,
    Media,
    MenuItem,
    Reputation,
    Restaurant,
    RestaurantSummary,
    normalize_tag,
)
from dishscout.models.source import (
    LocalMenuItem,
    LocalRestaurantRecord,
    PrimaryMenuItemDoc,
    PrimaryRestaurantDoc,
)
from dishscout.models.query import QueryLocation, SearchQuery, TimeContext
from dishscout.models.results import (
    GemBadge,
    OpenStatus,
    RestaurantLink,
    RestaurantShortlistEntry,
    ScoredResult,
    SearchResponse,
)

__all__ = [
    # Canonical models
    "DIETARY_FLAGS",
    "MEAL_PERIODS",
    "WEEKDAYS",
    "DayHours",
    "DietaryFlags",
    "Location",
    "Media",
    "MenuItem",
    "Reputation",
    "Restaurant",
    "RestaurantSummary",
    "normalize_tag",
    # Source models
    "LocalMenuItem",
    "LocalRestaurantRecord",
    "PrimaryMenuItemDoc",
    "PrimaryRestaurantDoc",
    # Query models
    "QueryLocation",
    "SearchQuery",
    "TimeContext",
    # Result models
    "GemBadge",
    "OpenStatus",
    "RestaurantLink",
    "RestaurantShortlistEntry",
    "ScoredResult",
    "SearchResponse",
]
