"""Distance computation and display."""

import math

from dishscout.models.domain import Restaurant

EARTH_RADIUS_KM = 6371.0


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points in km (haversine)."""
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = math.sin(delta_lat / 2) ** 2 + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lon / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def restaurant_distance(
    latitude: float | None,
    longitude: float | None,
    restaurant: Restaurant,
) -> float | None:
    """Distance from a point to a restaurant, or None when either lacks coordinates."""
    if latitude is None or longitude is None or not restaurant.location.has_coordinates:
        return None
    return distance_km(latitude, longitude, restaurant.location.latitude, restaurant.location.longitude)


def format_distance(km: float) -> str:
    """Render a distance as ``999m away``, ``1.0km away`` or ``15km away``."""
    if km < 1:
        return f"{round_half_up(km * 1000)}m away"
    if km < 10:
        return f"{km:.1f}km away"
    return f"{round_half_up(km)}km away"


def display_distance(km: float | None, restaurant: Restaurant) -> str:
    """Formatted distance, falling back to neighborhood then city."""
    if km is not None:
        return format_distance(km)
    return restaurant.location.neighborhood or restaurant.location.city
