"""Keyword enrichment for menus written to the local cache.

Runs only on the write path. Records read back are normalized as stored, so
an item saved before enrichment existed still defaults to ``all_day``.
"""

import re
from typing import Any

# First match wins
CUISINE_PATTERNS: tuple[tuple[str, re.Pattern], ...] = (
    ("italian", re.compile(r"pizza|pasta|risotto|lasagna|spaghetti|ravioli", re.I)),
    ("indian", re.compile(r"curry|tikka|masala|biryani|naan|dal|samosa", re.I)),
    ("chinese", re.compile(r"fried rice|sweet sour|chow mein|dim sum|wonton", re.I)),
    ("japanese", re.compile(r"sushi|ramen|tempura|teriyaki|miso|udon|sashimi", re.I)),
    ("mexican", re.compile(r"burrito|taco|quesadilla|nachos|salsa|guacamole", re.I)),
    ("american", re.compile(r"burger|bbq|wings|fries|mac cheese|sandwich", re.I)),
    ("thai", re.compile(r"pad thai|tom yum|green curry|massaman|som tam", re.I)),
    ("british", re.compile(r"fish chips|shepherd pie|bangers mash|sunday roast", re.I)),
)

MEAL_PERIOD_PATTERNS: tuple[tuple[str, re.Pattern], ...] = (
    (
        "breakfast",
        re.compile(
            r"breakfast|pancake|waffle|omelette|eggs|bacon|cereal|croissant|porridge|toast|granola|yogurt",
            re.I,
        ),
    ),
    ("lunch", re.compile(r"lunch|sandwich|salad|wrap|soup|light meal", re.I)),
    ("dinner", re.compile(r"dinner|steak|roast|curry|pasta|main course|hearty", re.I)),
    ("snack", re.compile(r"snack|chips|nuts|fruit|cake|cookie|pastry", re.I)),
)

# Cuisine, then diet and mood, then texture and cooking style
SEARCH_TAG_PATTERNS: tuple[tuple[str, re.Pattern], ...] = (
    ("indian", re.compile(r"curry|tikka|masala|biryani|dal|naan", re.I)),
    ("japanese", re.compile(r"sushi|ramen|tempura|teriyaki|miso", re.I)),
    ("italian", re.compile(r"pasta|pizza|risotto|italian", re.I)),
    ("american", re.compile(r"burger|fries|wings|american", re.I)),
    ("mexican", re.compile(r"taco|burrito|mexican|salsa", re.I)),
    ("british", re.compile(r"fish.*chips|british|pie", re.I)),
    ("vegan", re.compile(r"vegan|plant.*based", re.I)),
    ("vegetarian", re.compile(r"vegetarian|veggie", re.I)),
    ("gluten-free", re.compile(r"gluten.*free", re.I)),
    ("spicy", re.compile(r"spicy|hot|chili", re.I)),
    ("healthy", re.compile(r"healthy|light|fresh", re.I)),
    ("comfort", re.compile(r"comfort|hearty|filling", re.I)),
    ("fried", re.compile(r"fried|crispy|crunchy", re.I)),
    ("grilled", re.compile(r"grilled|barbecue|bbq", re.I)),
    ("fresh", re.compile(r"fresh|raw|salad", re.I)),
)


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(v) for v in value if v is not None]


def detect_cuisine_type(items: list[dict[str, Any]]) -> str:
    """Guess a restaurant's cuisine from its item names."""
    names = " ".join(str(item.get("name") or "") for item in items).lower()
    for cuisine, pattern in CUISINE_PATTERNS:
        if pattern.search(names):
            return cuisine
    return "international"


def detect_meal_period(item: dict[str, Any]) -> str:
    """Guess an item's meal period from its name and tags."""
    text = f"{item.get('name') or ''} {' '.join(_string_list(item.get('tags')))}"
    for period, pattern in MEAL_PERIOD_PATTERNS:
        if pattern.search(text):
            return period
    return item.get("meal_period") or "all_day"


def generate_search_tags(item: dict[str, Any]) -> list[str]:
    """Item tags plus keywords found in its name and description."""
    text = f"{item.get('name') or ''} {item.get('description') or ''}"
    tags = _string_list(item.get("tags")) + _string_list(item.get("search_tags"))
    tags.extend(tag for tag, pattern in SEARCH_TAG_PATTERNS if pattern.search(text))
    return list(dict.fromkeys(tags))


def enrich_menu_item(item: dict[str, Any], restaurant_id: str, index: int) -> dict[str, Any]:
    """Fill in id, meal period and search tags for an item being saved."""
    enriched = dict(item)
    enriched["menu_item_id"] = item.get("menu_item_id") or f"{restaurant_id}_{index}"
    enriched["tags"] = _string_list(item.get("tags"))
    if not item.get("meal_period"):
        enriched["meal_period"] = detect_meal_period(item)
    enriched["search_tags"] = generate_search_tags(item)
    return enriched


def enrich_menu(record: dict[str, Any]) -> dict[str, Any]:
    """Enrich every item of a restaurant record and fill in its cuisine."""
    restaurant_id = record["restaurant_id"]
    items = [
        enrich_menu_item(item, restaurant_id, index)
        for index, item in enumerate(record.get("menu_items") or [])
        if isinstance(item, dict)
    ]
    enriched = {**record, "menu_items": items}
    if not record.get("cuisine_type"):
        enriched["cuisine_type"] = detect_cuisine_type(items)
    return enriched
