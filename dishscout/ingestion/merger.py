"""Fetch both restaurant sources and merge them into one working set."""

import asyncio
import re
import time
from dataclasses import dataclass, field
from typing import Any

import structlog

from dishscout.config import Settings, get_settings
from dishscout.errors import SourceUnavailable
from dishscout.ingestion.normalizer import RecordNormalizer
from dishscout.ingestion.providers import RestaurantProvider
from dishscout.metrics import (
    record_source_failure,
    record_source_fetch,
    record_working_set_size,
)
from dishscout.models.domain import Restaurant
from dishscout.models.query import SourceMode

logger = structlog.get_logger()


def merge_key(country_code: str, city: str, name: str) -> str:
    """Dedup key: ``{country}_{city}_{name}`` lower-cased, whitespace as ``_``."""
    return re.sub(r"\s+", "_", f"{country_code}_{city}_{name}").lower()


def restaurant_key(restaurant: Restaurant) -> str:
    return merge_key(restaurant.location.country_code, restaurant.location.city, restaurant.name)


@dataclass
class UnifiedRestaurantSet:
    """Merged, read-only working set for one request."""

    restaurants: list[Restaurant] = field(default_factory=list)
    source_counts: dict[str, int] = field(default_factory=dict)
    sources_used: list[str] = field(default_factory=list)
    sources_failed: list[str] = field(default_factory=list)
    duplicates_discarded: int = 0
    dropped_records: int = 0

    @property
    def degraded(self) -> bool:
        return bool(self.sources_failed)

    def __len__(self) -> int:
        return len(self.restaurants)


def merge(primary: list[Restaurant], local: list[Restaurant]) -> UnifiedRestaurantSet:
    """Merge normalized restaurants, keeping the primary record on key collision.

    Whole-record precedence: a local record whose key is already taken is
    discarded, no field is copied across.
    """
    merged: dict[str, Restaurant] = {}
    counts = {"primary": 0, "local": 0}
    duplicates = 0

    for restaurant in primary:
        key = restaurant_key(restaurant)
        if key in merged:
            duplicates += 1
            continue
        merged[key] = restaurant
        counts["primary"] += 1

    for restaurant in local:
        key = restaurant_key(restaurant)
        if key in merged:
            duplicates += 1
            continue
        merged[key] = restaurant
        counts["local"] += 1

    logger.info(
        "sources_merged",
        primary_count=counts["primary"],
        local_count=counts["local"],
        duplicates_discarded=duplicates,
        total=len(merged),
    )
    return UnifiedRestaurantSet(
        restaurants=list(merged.values()),
        source_counts=counts,
        duplicates_discarded=duplicates,
    )


class SourceMerger:
    """Load the working set from the primary store and the local cache."""

    def __init__(
        self,
        primary_provider: RestaurantProvider | None,
        local_provider: RestaurantProvider | None,
        settings: Settings | None = None,
    ):
        self.settings = settings or get_settings()
        self.primary_provider = primary_provider
        self.local_provider = local_provider

    async def load(
        self,
        mode: SourceMode = "hybrid",
        primary_timeout: float | None = None,
        local_timeout: float | None = None,
    ) -> UnifiedRestaurantSet:
        """Fetch the requested sources concurrently and merge them.

        Args:
            mode: ``hybrid`` fetches both sources; ``primary``/``local`` skip
                the other source entirely
            primary_timeout: Override for ``settings.primary_timeout_seconds``
            local_timeout: Override for ``settings.local_timeout_seconds``

        Returns:
            Merged working set, flagged degraded when a source failed

        Raises:
            SourceUnavailable: if no requested source succeeded
        """
        requested = ["primary", "local"] if mode == "hybrid" else [mode]
        timeouts = {
            "primary": (
                self.settings.primary_timeout_seconds if primary_timeout is None else primary_timeout
            ),
            "local": self.settings.local_timeout_seconds if local_timeout is None else local_timeout,
        }
        providers = {"primary": self.primary_provider, "local": self.local_provider}

        # Drop counters are per load
        normalizer = RecordNormalizer(self.settings.default_country_code)
        outcomes = await asyncio.gather(
            *(
                self._fetch(source, providers[source], timeouts[source], normalizer)
                for source in requested
            ),
            return_exceptions=True,
        )

        fetched: dict[str, list[Restaurant]] = {"primary": [], "local": []}
        used: list[str] = []
        failed: list[str] = []
        last_error: SourceUnavailable | None = None
        for source, outcome in zip(requested, outcomes):
            if isinstance(outcome, SourceUnavailable):
                failed.append(source)
                last_error = outcome
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                fetched[source] = outcome
                used.append(source)

        if not used:
            logger.error("all_sources_unavailable", mode=mode, sources_failed=failed)
            raise last_error

        working_set = merge(fetched["primary"], fetched["local"])
        working_set.sources_used = used
        working_set.sources_failed = failed
        working_set.dropped_records = normalizer.dropped

        if working_set.degraded:
            logger.warning(
                "working_set_degraded",
                sources_used=used,
                sources_failed=failed,
            )
        record_working_set_size(len(working_set))
        return working_set

    async def _fetch(
        self,
        source: str,
        provider: RestaurantProvider | None,
        timeout: float,
        normalizer: RecordNormalizer,
    ) -> list[Restaurant]:
        """Fetch and normalize one source; failures become ``SourceUnavailable``."""
        if provider is None:
            record_source_failure(source, "not_configured")
            logger.warning("source_not_configured", source=source)
            raise SourceUnavailable(source, "not configured")

        start_time = time.time()
        try:
            raw = await asyncio.wait_for(self._fetch_raw(provider), timeout=timeout)
        except asyncio.TimeoutError as e:
            record_source_failure(source, "timeout")
            logger.warning("source_fetch_failed", source=source, reason="timeout", timeout=timeout)
            raise SourceUnavailable(source, f"timed out after {timeout}s") from e
        except Exception as e:
            record_source_failure(source, "error")
            logger.warning("source_fetch_failed", source=source, reason="error", error=str(e))
            raise SourceUnavailable(source, str(e) or type(e).__name__) from e

        duration = time.time() - start_time
        record_source_fetch(source, duration)

        restaurants = normalizer.normalize_batch(raw, source)
        logger.info(
            "source_fetched",
            source=source,
            raw_count=len(raw),
            restaurant_count=len(restaurants),
            duration=duration,
        )
        return restaurants

    @staticmethod
    async def _fetch_raw(
        provider: RestaurantProvider,
    ) -> list[tuple[dict[str, Any], list[dict[str, Any]] | None]]:
        """Pair each record with its menu items.

        Records that embed ``menu_items`` keep them; the same restaurant id
        may appear under several cities, so only records without embedded
        items are looked up by id.
        """
        records = await provider.list_restaurants(None)

        async def with_items(
            record: dict[str, Any],
        ) -> tuple[dict[str, Any], list[dict[str, Any]] | None]:
            if isinstance(record.get("menu_items"), list):
                return record, None
            restaurant_id = record.get("restaurant_id") or record.get("id")
            if not restaurant_id:
                return record, []
            return record, await provider.list_menu_items(restaurant_id)

        return list(await asyncio.gather(*(with_items(record) for record in records)))
