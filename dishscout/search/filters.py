"""Candidate filtering over the merged working set."""

from dataclasses import dataclass

import structlog

from dishscout.models.domain import MenuItem, Restaurant, normalize_tag
from dishscout.models.query import SearchQuery
from dishscout.models.results import OpenStatus
from dishscout.search.availability import DEFAULT_CLOSING_SOON_MINUTES, check_open
from dishscout.search.geo import restaurant_distance

logger = structlog.get_logger()


@dataclass(frozen=True)
class Candidate:
    """A menu item that passed every filter, with its restaurant context."""

    restaurant: Restaurant
    item: MenuItem
    distance_km: float | None
    open_status: OpenStatus | None


def location_key(country_code: str, city: str) -> str:
    return normalize_tag(f"{country_code}_{city}")


def satisfies_dietary(item: MenuItem, dietary: list[str]) -> bool:
    """AND semantics: every requested flag must be true on the item."""
    return all(item.dietary.satisfies(flag) for flag in dietary)


def matches_meal_period(item: MenuItem, meal_period: str) -> bool:
    if meal_period == "all_day":
        return True
    return item.meal_period in ("all_day", meal_period)


class FilterEngine:
    """Apply location, opening-hours and per-item predicates."""

    def __init__(
        self,
        search_radius_km: float,
        closing_soon_minutes: int = DEFAULT_CLOSING_SOON_MINUTES,
    ):
        self.search_radius_km = search_radius_km
        self.closing_soon_minutes = closing_soon_minutes

    def filter(self, restaurants: list[Restaurant], query: SearchQuery) -> list[Candidate]:
        """Return the candidate items for a query, in working-set order."""
        radius = query.search_radius_km or self.search_radius_km
        query_key = location_key(query.location.country_code, query.location.city)
        candidates: list[Candidate] = []
        skipped = {"location": 0, "closed": 0}

        for restaurant in restaurants:
            distance = restaurant_distance(
                query.location.latitude, query.location.longitude, restaurant
            )
            if distance is not None:
                if distance > radius:
                    skipped["location"] += 1
                    continue
            else:
                restaurant_loc = location_key(
                    restaurant.location.country_code, restaurant.location.city
                )
                # Loose match: either key may contain the other
                if query_key not in restaurant_loc and restaurant_loc not in query_key:
                    skipped["location"] += 1
                    continue

            open_status = None
            if query.time_context is not None:
                open_status = check_open(restaurant, query.time_context, self.closing_soon_minutes)
                if open_status.is_closed:
                    skipped["closed"] += 1
                    continue

            for item in restaurant.menu_items:
                if not item.available:
                    continue
                if not matches_meal_period(item, query.meal_period):
                    continue
                if not satisfies_dietary(item, query.dietary):
                    continue
                candidates.append(Candidate(restaurant, item, distance, open_status))

        logger.debug(
            "candidates_filtered",
            restaurants=len(restaurants),
            candidates=len(candidates),
            skipped_location=skipped["location"],
            skipped_closed=skipped["closed"],
        )
        return candidates
