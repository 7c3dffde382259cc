"""Query relevance scoring."""

import random

from dishscout.models.domain import MenuItem, Restaurant
from dishscout.models.query import SearchQuery

MOOD_WORD_BOOST = 10.0
VISIBILITY_BOOST = 3.0
SIGNATURE_BOOST = 15.0
DIETARY_GOAL_BOOST = 12.0
PRIMARY_SOURCE_BOOST = 5.0


class RelevanceScorer:
    """Score how well an item answers a query.

    The score starts from uniform noise in ``[0, noise_max)`` drawn from the
    injected random source, which varies the order of otherwise tied items
    between calls. Seed the source, or disable the noise, for repeatable
    totals. The score is comparative and is not clamped.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        noise_enabled: bool = True,
        noise_max: float = 5.0,
    ):
        self.rng = rng or random.Random()
        self.noise_enabled = noise_enabled
        self.noise_max = noise_max

    def noise(self) -> float:
        if not self.noise_enabled or self.noise_max <= 0:
            return 0.0
        return self.rng.random() * self.noise_max

    def score(self, item: MenuItem, restaurant: Restaurant, query: SearchQuery) -> float:
        score = self.noise()

        text = item.search_text
        for word in query.mood_words:
            if word in text:
                score += MOOD_WORD_BOOST

        if restaurant.has_goal("increase_visibility"):
            score += VISIBILITY_BOOST

        if restaurant.has_goal("highlight_specialties") and item.is_signature:
            score += SIGNATURE_BOOST

        if restaurant.has_goal("attract_dietary") and query.dietary:
            if any(item.dietary.satisfies(flag) for flag in query.dietary):
                score += DIETARY_GOAL_BOOST

        if restaurant.data_source == "primary":
            score += PRIMARY_SOURCE_BOOST

        return score
