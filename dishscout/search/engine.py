"""Matching engine: query in, ranked dishes and restaurant shortlist out."""

import random
import time
from dataclasses import dataclass, field
from typing import Any

import structlog
from pydantic import ValidationError

from dishscout.config import Settings, get_settings
from dishscout.errors import InvalidQuery
from dishscout.ingestion.merger import SourceMerger
from dishscout.ingestion.providers import LocalMenuStore, RestaurantProvider
from dishscout.metrics import record_degraded_search, record_search_request
from dishscout.models.domain import DIETARY_FLAGS, RestaurantSummary
from dishscout.models.query import SearchQuery
from dishscout.models.results import RestaurantLink, ScoredResult, SearchResponse
from dishscout.search.filters import FilterEngine
from dishscout.search.geo import display_distance
from dishscout.search.hidden_gem import HiddenGemScorer, badge_for_score
from dishscout.search.links import resolve_link
from dishscout.search.relevance import RelevanceScorer
from dishscout.search.shortlist import ShortlistAggregator, sort_results

logger = structlog.get_logger()


@dataclass
class SearchContext:
    """Providers, settings and the random source shared by pipeline stages."""

    primary_provider: RestaurantProvider | None = None
    local_provider: RestaurantProvider | None = None
    settings: Settings = field(default_factory=get_settings)
    rng: random.Random | None = None

    def __post_init__(self):
        if self.rng is None:
            self.rng = random.Random(self.settings.random_seed)

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        primary_provider: RestaurantProvider | None = None,
    ) -> "SearchContext":
        """Context with the local menu cache at ``settings.local_menu_path``."""
        settings = settings or get_settings()
        return cls(
            primary_provider=primary_provider,
            local_provider=LocalMenuStore(settings.local_menu_path),
            settings=settings,
        )


def validate_query(query: SearchQuery, settings: Settings) -> None:
    """Reject queries that violate basic shape constraints.

    Raises:
        InvalidQuery: on the first violated constraint
    """
    unknown = [flag for flag in query.dietary if flag not in DIETARY_FLAGS]
    if unknown:
        raise InvalidQuery(f"unknown dietary flags: {', '.join(unknown)}", field="dietary")

    if query.limit is not None and query.limit < 1:
        raise InvalidQuery("limit must be at least 1", field="limit")
    if query.limit is not None and query.limit > settings.max_limit:
        raise InvalidQuery(f"limit must not exceed {settings.max_limit}", field="limit")

    if query.per_restaurant_items is not None and query.per_restaurant_items < 1:
        raise InvalidQuery("per_restaurant_items must be at least 1", field="per_restaurant_items")

    if query.search_radius_km is not None and query.search_radius_km <= 0:
        raise InvalidQuery("search_radius_km must be positive", field="search_radius_km")

    location = query.location
    if (location.latitude is None) != (location.longitude is None):
        raise InvalidQuery("latitude and longitude must be given together", field="location")
    if not location.city.strip() and not location.has_coordinates:
        raise InvalidQuery("location needs a city or coordinates", field="location")


def build_query(**payload: Any) -> SearchQuery:
    """Build a query from caller-supplied fields.

    Raises:
        InvalidQuery: if the payload does not fit the query shape
    """
    try:
        return SearchQuery.model_validate(payload)
    except ValidationError as e:
        error = e.errors()[0]
        field_name = ".".join(str(part) for part in error["loc"]) or None
        raise InvalidQuery(f"{field_name}: {error['msg']}", field=field_name) from e


class MatchingEngine:
    """Run one search request end to end."""

    def __init__(self, context: SearchContext):
        self.context = context
        settings = context.settings
        self.settings = settings
        self.merger = SourceMerger(context.primary_provider, context.local_provider, settings)
        self.filter_engine = FilterEngine(
            search_radius_km=settings.default_search_radius_km,
            closing_soon_minutes=settings.closing_soon_minutes,
        )
        self.relevance_scorer = RelevanceScorer(
            rng=context.rng,
            noise_enabled=settings.relevance_noise_enabled,
            noise_max=settings.relevance_noise_max,
        )
        self.gem_scorer = HiddenGemScorer()
        self.aggregator = ShortlistAggregator(max_vibes=settings.max_vibes)

    async def search(
        self,
        query: SearchQuery,
        primary_timeout: float | None = None,
        local_timeout: float | None = None,
    ) -> SearchResponse:
        """Execute a search.

        Args:
            query: The food-decision request
            primary_timeout: Override for the primary source timeout
            local_timeout: Override for the local source timeout

        Returns:
            Flat results truncated to the limit plus the restaurant shortlist

        Raises:
            InvalidQuery: before any provider is called
            SourceUnavailable: if no requested source could be loaded
        """
        validate_query(query, self.settings)
        limit = query.limit or self.settings.default_limit
        per_restaurant_items = query.per_restaurant_items or self.settings.per_restaurant_items

        logger.info(
            "search_started",
            city=query.location.city,
            mood_text=query.mood_text[:50],
            dietary=query.dietary,
            meal_period=query.meal_period,
            sort_by=query.sort_by,
            source_mode=query.source_mode,
        )

        start_time = time.time()
        working_set = await self.merger.load(
            query.source_mode,
            primary_timeout=primary_timeout,
            local_timeout=local_timeout,
        )

        candidates = self.filter_engine.filter(working_set.restaurants, query)

        links: dict[str, RestaurantLink] = {}
        summaries: dict[str, RestaurantSummary] = {}
        results: list[ScoredResult] = []
        for candidate in candidates:
            restaurant = candidate.restaurant
            restaurant_id = restaurant.restaurant_id
            if restaurant_id not in links:
                links[restaurant_id] = resolve_link(restaurant)
                summaries[restaurant_id] = restaurant.summary()

            gem_score = self.gem_scorer.score(candidate.item, restaurant)
            results.append(
                ScoredResult(
                    item=candidate.item,
                    restaurant=summaries[restaurant_id],
                    relevance_score=self.relevance_scorer.score(candidate.item, restaurant, query),
                    gem_score=gem_score,
                    badge=badge_for_score(gem_score),
                    distance_km=candidate.distance_km,
                    distance_display=display_distance(candidate.distance_km, restaurant),
                    open_status=candidate.open_status,
                    link=links[restaurant_id],
                )
            )

        ordered = sort_results(results, query.sort_by)
        shortlist = self.aggregator.shortlist(ordered, per_restaurant_items, limit)

        response = SearchResponse(
            results=ordered[:limit],
            shortlist=shortlist,
            total_matches=len(ordered),
            sort_by=query.sort_by,
            sources_used=working_set.sources_used,
            sources_failed=working_set.sources_failed,
            degraded=working_set.degraded,
            dropped_records=working_set.dropped_records,
        )

        duration = time.time() - start_time
        record_search_request(query.sort_by, query.source_mode, duration, response.total_matches)
        if response.degraded:
            record_degraded_search()

        logger.info(
            "search_complete",
            total_matches=response.total_matches,
            returned=len(response.results),
            shortlist=len(response.shortlist),
            degraded=response.degraded,
            duration=duration,
        )
        return response
