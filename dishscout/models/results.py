"""Result models returned to callers."""

from typing import Literal

from pydantic import BaseModel, Field

from dishscout.models.domain import MenuItem, RestaurantSummary

OpenStatusValue = Literal["open", "closing_soon", "closed", "unknown"]
LinkType = Literal["reservation", "website", "delivery", "map"]


class OpenStatus(BaseModel):
    """Opening-hours verdict for a restaurant at a point in time."""

    status: OpenStatusValue
    label: str
    opens_at: str | None = None
    closes_at: str | None = None

    @property
    def is_closed(self) -> bool:
        return self.status == "closed"


class RestaurantLink(BaseModel):
    """The single outbound link shown for a restaurant."""

    url: str
    type: LinkType
    label: str


class GemBadge(BaseModel):
    """Hidden-gem tier badge."""

    label: str
    emoji: str
    color: str


class ScoredResult(BaseModel):
    """A matching dish with its restaurant view and scores."""

    item: MenuItem
    restaurant: RestaurantSummary
    relevance_score: float
    gem_score: float
    badge: GemBadge | None = None
    distance_km: float | None = None
    distance_display: str
    open_status: OpenStatus | None = None
    link: RestaurantLink


class RestaurantShortlistEntry(BaseModel):
    """Per-restaurant aggregation of scored results."""

    restaurant: RestaurantSummary
    sample_items: list[MenuItem] = Field(default_factory=list)
    matched_items: int
    avg_relevance: float
    avg_gem: float
    experience_score: int
    badge: GemBadge | None = None
    vibes: list[str] = Field(default_factory=list)
    distance_km: float | None = None
    distance_display: str
    open_status: OpenStatus | None = None
    link: RestaurantLink


class SearchResponse(BaseModel):
    """Everything a caller gets back for one query."""

    results: list[ScoredResult] = Field(default_factory=list)
    shortlist: list[RestaurantShortlistEntry] = Field(default_factory=list)
    total_matches: int = 0
    sort_by: str
    sources_used: list[str] = Field(default_factory=list)
    sources_failed: list[str] = Field(default_factory=list)
    degraded: bool = False
    dropped_records: int = 0
