"""Restaurant source providers.

A provider is the only I/O seam of the engine. Providers hand back raw
records in their own layout; the record normalizer maps them to the
canonical shape.
"""

import asyncio
import inspect
import json
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import structlog

from dishscout.errors import MalformedRecord
from dishscout.ingestion.enrichment import enrich_menu

logger = structlog.get_logger()


@runtime_checkable
class RestaurantProvider(Protocol):
    """Narrow read interface onto one restaurant source."""

    name: str

    async def list_restaurants(self, filters: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        ...

    async def list_menu_items(self, restaurant_id: str) -> list[dict[str, Any]]:
        ...


def _matches(record: dict[str, Any], filters: dict[str, Any] | None) -> bool:
    """Equality match on top-level or ``location`` fields, case-insensitive."""
    if not filters:
        return True
    location = record.get("location") or {}
    for key, expected in filters.items():
        actual = record.get(key, location.get(key))
        if actual is None or str(actual).lower() != str(expected).lower():
            return False
    return True


class StaticProvider:
    """Provider over records already held in memory."""

    def __init__(
        self,
        name: str,
        restaurants: list[dict[str, Any]],
        menu_items: dict[str, list[dict[str, Any]]] | None = None,
    ):
        self.name = name
        self._restaurants = restaurants
        self._menu_items = menu_items or {}

    async def list_restaurants(self, filters: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        return [r for r in self._restaurants if _matches(r, filters)]

    async def list_menu_items(self, restaurant_id: str) -> list[dict[str, Any]]:
        if restaurant_id in self._menu_items:
            return self._menu_items[restaurant_id]
        for record in self._restaurants:
            if record.get("restaurant_id") == restaurant_id:
                return record.get("menu_items", [])
        return []


class DocumentStoreProvider:
    """Provider backed by a document-store client.

    The client exposes ``get_restaurants(filters)`` and
    ``get_menu_items(restaurant_id)``. Coroutine methods are awaited; blocking
    ones run in a worker thread.
    """

    def __init__(self, client: Any, name: str = "primary"):
        self.client = client
        self.name = name

    async def _call(self, method_name: str, *args: Any) -> Any:
        method = getattr(self.client, method_name)
        if inspect.iscoroutinefunction(method):
            return await method(*args)
        return await asyncio.to_thread(method, *args)

    async def list_restaurants(self, filters: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        records = await self._call("get_restaurants", filters or {})
        logger.debug("document_store_restaurants", count=len(records))
        return list(records)

    async def list_menu_items(self, restaurant_id: str) -> list[dict[str, Any]]:
        return list(await self._call("get_menu_items", restaurant_id))


class LocalMenuStore:
    """JSON-file read-through cache of restaurant menus.

    The file is read once on first use and afterwards served from memory.
    Only ``add_restaurant_menu`` refreshes the cache, and it persists the
    file in the same call. Both ``{"menus": {...}, "stats": {...}}`` and a
    flat ``{key: record}`` mapping are accepted on read; writes always use
    the ``menus`` layout.
    """

    def __init__(self, path: str | Path, name: str = "local"):
        self.path = Path(path)
        self.name = name
        self._menus: dict[str, dict[str, Any]] | None = None
        self._lock = asyncio.Lock()

    @staticmethod
    def menu_key(country_code: str, city: str, restaurant_id: str) -> str:
        return re.sub(r"\s+", "_", f"{country_code}_{city}_{restaurant_id}").lower()

    @property
    def stats(self) -> dict[str, Any]:
        menus = self._menus or {}
        return {
            "total_restaurants": len(menus),
            "total_items": sum(len(m.get("menu_items") or []) for m in menus.values()),
        }

    def _read(self) -> dict[str, dict[str, Any]]:
        if not self.path.exists():
            logger.info("local_menu_file_missing", path=str(self.path))
            return {}

        with self.path.open(encoding="utf-8") as f:
            data = json.load(f)

        if isinstance(data.get("menus"), dict):
            data = data["menus"]
        return {
            key: record
            for key, record in data.items()
            if isinstance(record, dict) and key not in ("stats", "last_saved")
        }

    def _write(self, menus: dict[str, dict[str, Any]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "menus": menus,
            "stats": {
                "total_restaurants": len(menus),
                "total_items": sum(len(m.get("menu_items") or []) for m in menus.values()),
            },
            "last_saved": datetime.now(timezone.utc).isoformat(),
        }
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, ensure_ascii=False)
        tmp_path.replace(self.path)

    async def load(self) -> dict[str, dict[str, Any]]:
        """Load the cache if it has not been loaded yet."""
        if self._menus is None:
            async with self._lock:
                if self._menus is None:
                    self._menus = await asyncio.to_thread(self._read)
                    logger.info("local_menus_loaded", path=str(self.path), **self.stats)
        return self._menus

    async def list_restaurants(self, filters: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        menus = await self.load()
        return [record for record in menus.values() if _matches(record, filters)]

    async def list_menu_items(self, restaurant_id: str) -> list[dict[str, Any]]:
        menus = await self.load()
        for record in menus.values():
            if record.get("restaurant_id") == restaurant_id:
                return record.get("menu_items") or []
        return []

    async def add_restaurant_menu(self, record: dict[str, Any]) -> dict[str, Any]:
        """Add or replace a restaurant menu and persist the file.

        Items are enriched with search tags and a detected meal period, and
        the cuisine is detected when the record has none.

        Raises:
            MalformedRecord: if an identity field is missing
        """
        restaurant_id = record.get("restaurant_id")
        location = record.get("location") or {}
        for field, value in (
            ("restaurant_id", restaurant_id),
            ("restaurant_name", record.get("restaurant_name")),
            ("location.city", location.get("city")),
        ):
            if not value or not str(value).strip():
                raise MalformedRecord("restaurant", f"missing {field}", record_id=restaurant_id)

        country_code = (location.get("country_code") or "GB").upper()
        key = self.menu_key(country_code, location["city"], restaurant_id)
        entry = enrich_menu({**record, "location": {**location, "country_code": country_code}})

        menus = await self.load()
        async with self._lock:
            replaced = key in menus
            updated = {**menus, key: entry}
            await asyncio.to_thread(self._write, updated)
            self._menus = updated

        logger.info(
            "restaurant_menu_saved",
            restaurant_id=restaurant_id,
            menu_key=key,
            items=len(entry["menu_items"]),
            replaced=replaced,
        )
        return {
            "restaurant_id": restaurant_id,
            "menu_key": key,
            "items_added": len(entry["menu_items"]),
            "replaced": replaced,
        }
