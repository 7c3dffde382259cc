"""Flat result ordering and per-restaurant shortlist aggregation."""

from dishscout.models.query import SortBy
from dishscout.models.results import RestaurantShortlistEntry, ScoredResult
from dishscout.search.geo import round_half_up

RELEVANCE_WEIGHT = 0.6
GEM_WEIGHT = 0.4


def sort_results(results: list[ScoredResult], sort_by: SortBy) -> list[ScoredResult]:
    """Stable sort of the flat list.

    ``distance`` puts unknown distances last and falls back to relevance when
    no result has a distance.
    """
    if sort_by == "hidden_gem":
        return sorted(results, key=lambda r: r.gem_score, reverse=True)
    if sort_by == "distance" and any(r.distance_km is not None for r in results):
        return sorted(
            results,
            key=lambda r: (r.distance_km is None, r.distance_km if r.distance_km is not None else 0.0),
        )
    return sorted(results, key=lambda r: r.relevance_score, reverse=True)


def experience_score(avg_relevance: float, avg_gem: float) -> int:
    blended = avg_relevance * RELEVANCE_WEIGHT + avg_gem * GEM_WEIGHT
    return round_half_up(min(100.0, max(0.0, blended)))


class ShortlistAggregator:
    """Group scored results by restaurant and rank the groups."""

    def __init__(self, max_vibes: int = 6):
        self.max_vibes = max_vibes

    def shortlist(
        self,
        results: list[ScoredResult],
        per_restaurant_items: int,
        limit: int,
    ) -> list[RestaurantShortlistEntry]:
        """Aggregate an already sorted result stream.

        Groups keep first-seen order. Samples are the first
        ``per_restaurant_items`` results of each group in stream order, while
        averages cover every matched result. Groups are ordered by descending
        experience score with ties kept in encounter order, then truncated to
        ``limit``.
        """
        groups: dict[str, list[ScoredResult]] = {}
        for result in results:
            groups.setdefault(result.restaurant.restaurant_id, []).append(result)

        entries = [self._entry(group, per_restaurant_items) for group in groups.values()]
        entries.sort(key=lambda e: e.experience_score, reverse=True)
        return entries[:limit]

    def _entry(self, results: list[ScoredResult], per_restaurant_items: int) -> RestaurantShortlistEntry:
        first = results[0]
        count = len(results)
        avg_relevance = sum(r.relevance_score for r in results) / count
        avg_gem = sum(r.gem_score for r in results) / count

        best = first
        for result in results[1:]:
            if result.gem_score > best.gem_score:
                best = result

        vibes: list[str] = []
        for result in results:
            for tag in [*result.item.tags, *result.item.cuisine_tags]:
                if len(vibes) >= self.max_vibes:
                    break
                if tag not in vibes:
                    vibes.append(tag)

        return RestaurantShortlistEntry(
            restaurant=first.restaurant,
            sample_items=[r.item for r in results[:per_restaurant_items]],
            matched_items=count,
            avg_relevance=avg_relevance,
            avg_gem=avg_gem,
            experience_score=experience_score(avg_relevance, avg_gem),
            badge=best.badge,
            vibes=vibes,
            distance_km=first.distance_km,
            distance_display=first.distance_display,
            open_status=first.open_status,
            link=first.link,
        )
