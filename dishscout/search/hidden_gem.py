"""Query-independent "hidden gem" rarity scoring and badges."""

from dishscout.models.domain import MenuItem, Restaurant
from dishscout.models.results import GemBadge

MIN_SCORE = 0.0
MAX_SCORE = 100.0
LEGENDARY_FLOOR = 90.0

AVAILABILITY_POINTS = {
    "weekends_only": 30.0,
    "seasonal": 25.0,
    "chef_special": 20.0,
}
RARITY_POINTS = {
    "family_recipe": 20.0,
    "traditional": 10.0,
    "secret_recipe": 25.0,
}
SMALL_BATCH_LIMIT = 20
SMALL_BATCH_POINTS = 25.0

# Evaluated highest first
BADGE_TIERS: tuple[tuple[float, GemBadge], ...] = (
    (90.0, GemBadge(label="Legendary Find", emoji="🏆", color="#FFD700")),
    (70.0, GemBadge(label="Hidden Gem", emoji="💎", color="#9B59B6")),
    (50.0, GemBadge(label="Local Favorite", emoji="⭐", color="#3498DB")),
    (30.0, GemBadge(label="Worth Discovering", emoji="🔍", color="#95A5A6")),
)


def badge_for_score(score: float) -> GemBadge | None:
    for threshold, badge in BADGE_TIERS:
        if score >= threshold:
            return badge
    return None


class HiddenGemScorer:
    """Additive rarity score in ``[0, 100]``.

    Signals are limited availability, small batches, recipe provenance, an
    absence of self-promotion, strong ratings on few reviews, imagery and low
    popularity. A restaurant's manual override is added before clamping; a
    ``legendary`` tier lifts the final score to at least 90.
    """

    def breakdown(self, item: MenuItem, restaurant: Restaurant) -> dict[str, float]:
        """Individual contributions, keyed by signal name."""
        parts: dict[str, float] = {}

        for tag, points in AVAILABILITY_POINTS.items():
            if tag in item.availability_tags:
                parts[tag] = points

        if item.daily_limit is not None and item.daily_limit < SMALL_BATCH_LIMIT:
            parts["daily_limit"] = SMALL_BATCH_POINTS

        for tag, points in RARITY_POINTS.items():
            if tag in item.rarity_tags:
                parts[tag] = points

        if not restaurant.has_goal("increase_visibility"):
            parts["low_visibility"] = 12.0
        if restaurant.has_goal("highlight_specialties") and item.is_signature:
            parts["specialty"] = 10.0

        reputation = restaurant.reputation
        if reputation.rating is not None:
            parts["rating"] = max(0.0, (reputation.rating - 4) * 12)
        if reputation.review_count is not None:
            if reputation.review_count < 25:
                parts["few_reviews"] = 8.0
            elif reputation.review_count > 200:
                parts["many_reviews"] = -6.0

        if restaurant.media.has_any:
            parts["media"] = 5.0
        if reputation.popularity_score is not None:
            parts["low_popularity"] = max(0.0, 18 - reputation.popularity_score)

        if restaurant.gem_override is not None:
            parts["override"] = restaurant.gem_override

        return parts

    def score(self, item: MenuItem, restaurant: Restaurant) -> float:
        total = sum(self.breakdown(item, restaurant).values())
        score = min(MAX_SCORE, max(MIN_SCORE, total))
        if restaurant.gem_tier == "legendary":
            score = max(score, LEGENDARY_FLOOR)
        return score
