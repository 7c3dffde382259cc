"""Source providers, record normalization and merging."""

from dishscout.ingestion.enrichment import enrich_menu
from dishscout.ingestion.normalizer import RecordNormalizer
from dishscout.ingestion.providers import (
    DocumentStoreProvider,
    LocalMenuStore,
    RestaurantProvider,
    StaticProvider,
)
from dishscout.ingestion.merger import SourceMerger, UnifiedRestaurantSet, merge, merge_key

__all__ = [
    "enrich_menu",
    "RecordNormalizer",
    "DocumentStoreProvider",
    "LocalMenuStore",
    "RestaurantProvider",
    "StaticProvider",
    "SourceMerger",
    "UnifiedRestaurantSet",
    "merge",
    "merge_key",
]
