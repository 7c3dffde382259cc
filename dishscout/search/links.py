"""One outbound link per restaurant."""

from urllib.parse import quote

from dishscout.models.domain import Restaurant
from dishscout.models.results import RestaurantLink

# Checked in order after the booking URL and website
DELIVERY_PLATFORMS: tuple[tuple[str, str, str], ...] = (
    ("deliveroo", "Deliveroo", "https://deliveroo.co.uk/menu/{id}"),
    ("ubereats", "Uber Eats", "https://www.ubereats.com/store/{id}"),
    ("doordash", "DoorDash", "https://www.doordash.com/store/{id}"),
    ("grubhub", "Grubhub", "https://www.grubhub.com/restaurant/{id}"),
)
MAP_SEARCH_URL = "https://www.google.com/maps/search/?api=1&query={query}"


def map_link(restaurant: Restaurant) -> RestaurantLink:
    query = restaurant.location.address or f"{restaurant.name}, {restaurant.location.city}"
    return RestaurantLink(
        url=MAP_SEARCH_URL.format(query=quote(query, safe="")),
        type="map",
        label="View on Map",
    )


def resolve_link(restaurant: Restaurant) -> RestaurantLink:
    """Booking URL, then website, then a delivery platform, then a map search."""
    if restaurant.booking_url:
        return RestaurantLink(url=restaurant.booking_url, type="reservation", label="Book a Table")

    if restaurant.website:
        return RestaurantLink(url=restaurant.website, type="website", label="Visit Website")

    for platform, display_name, template in DELIVERY_PLATFORMS:
        identifier = restaurant.delivery_platforms.get(platform)
        if identifier:
            return RestaurantLink(
                url=template.format(id=quote(identifier, safe="")),
                type="delivery",
                label=f"Order on {display_name}",
            )

    return map_link(restaurant)
