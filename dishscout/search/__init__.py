"""Filtering, scoring and ranking."""

from dishscout.search.engine import MatchingEngine, SearchContext, build_query, validate_query
from dishscout.search.filters import Candidate, FilterEngine
from dishscout.search.hidden_gem import HiddenGemScorer, badge_for_score
from dishscout.search.relevance import RelevanceScorer
from dishscout.search.shortlist import ShortlistAggregator, sort_results

__all__ = [
    "MatchingEngine",
    "SearchContext",
    "build_query",
    "validate_query",
    "Candidate",
    "FilterEngine",
    "HiddenGemScorer",
    "badge_for_score",
    "RelevanceScorer",
    "ShortlistAggregator",
    "sort_results",
]
