#!/usr/bin/env python3
"""Script to run a search against local menu data."""

import asyncio
import argparse
import json
import sys
from datetime import datetime
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dishscout.config import configure_logging, get_settings
from dishscout.errors import DishScoutError
from dishscout.ingestion.providers import LocalMenuStore, StaticProvider
from dishscout.models.query import TimeContext
from dishscout.search.engine import MatchingEngine, SearchContext, build_query


def load_primary_dump(path: Path) -> StaticProvider:
    """Load ``{"restaurants": [...], "menu_items": {restaurant_id: [...]}}``."""
    with path.open(encoding="utf-8") as f:
        data = json.load(f)
    return StaticProvider(
        "primary",
        restaurants=data.get("restaurants", []),
        menu_items=data.get("menu_items", {}),
    )


def resolve_source_mode(requested: str | None, has_primary: bool) -> str:
    """Explicit mode wins; otherwise search only the sources that are configured."""
    if requested:
        return requested
    return "hybrid" if has_primary else "local"


async def main():
    settings = get_settings()

    parser = argparse.ArgumentParser(
        description="Find dishes and restaurants for a mood, diet and location"
    )
    parser.add_argument("city", help="City to search in")
    parser.add_argument("--country", default=settings.default_country_code, help="Country code")
    parser.add_argument("--mood", default="", help="Free-text mood, e.g. 'spicy comfort food'")
    parser.add_argument(
        "--dietary",
        action="append",
        default=[],
        help="Dietary requirement (repeatable), e.g. --dietary vegan",
    )
    parser.add_argument(
        "--meal-period",
        default="all_day",
        choices=["breakfast", "lunch", "dinner", "snack", "all_day"],
    )
    parser.add_argument("--lat", type=float, help="Latitude of the searcher")
    parser.add_argument("--lon", type=float, help="Longitude of the searcher")
    parser.add_argument("--radius", type=float, help="Search radius in km")
    parser.add_argument(
        "--sort-by",
        default="relevance",
        choices=["relevance", "hidden_gem", "distance"],
    )
    parser.add_argument("--limit", type=int, help="Number of results")
    parser.add_argument(
        "--source-mode",
        choices=["hybrid", "primary", "local"],
        help="Sources to search (default: hybrid with --primary, otherwise local)",
    )
    parser.add_argument(
        "--now",
        action="store_true",
        help="Only return restaurants open at the current local time",
    )
    parser.add_argument(
        "--menus",
        default=settings.local_menu_path,
        help=f"Local menu JSON file (default: {settings.local_menu_path})",
    )
    parser.add_argument("--primary", help="Primary store JSON dump")
    parser.add_argument(
        "--shortlist",
        action="store_true",
        help="Print the restaurant shortlist instead of individual dishes",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")

    args = parser.parse_args()
    configure_logging(
        "DEBUG" if args.verbose else settings.log_level,
        log_format=settings.log_format,
        app_name=settings.app_name,
    )

    primary_provider = None
    if args.primary:
        primary_path = Path(args.primary)
        if not primary_path.exists():
            print(f"Error: Primary dump does not exist: {primary_path}")
            sys.exit(1)
        primary_provider = load_primary_dump(primary_path)

    source_mode = resolve_source_mode(args.source_mode, primary_provider is not None)

    context = SearchContext(
        primary_provider=primary_provider,
        local_provider=LocalMenuStore(args.menus),
        settings=settings,
    )
    engine = MatchingEngine(context)

    try:
        query = build_query(
            location={
                "city": args.city,
                "country_code": args.country,
                "latitude": args.lat,
                "longitude": args.lon,
            },
            search_radius_km=args.radius,
            mood_text=args.mood,
            dietary=args.dietary,
            meal_period=args.meal_period,
            time_context=TimeContext.from_datetime(datetime.now()) if args.now else None,
            sort_by=args.sort_by,
            limit=args.limit,
            source_mode=source_mode,
        )
        response = await engine.search(query)
    except DishScoutError as e:
        print(f"\nError during search: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)

    if args.shortlist:
        payload = [entry.model_dump(mode="json") for entry in response.shortlist]
    else:
        payload = response.model_dump(mode="json", exclude={"shortlist"})
    print(json.dumps(payload, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    asyncio.run(main())
