"""Tests for distance computation and display."""

import pytest

from dishscout.search.geo import display_distance, distance_km, format_distance, restaurant_distance


class TestDistance:
    """Tests for the haversine distance."""

    def test_same_point_is_zero(self):
        assert distance_km(51.5074, -0.1278, 51.5074, -0.1278) == pytest.approx(0.0)

    def test_london_to_paris(self):
        # Roughly 344 km between central London and central Paris
        assert distance_km(51.5074, -0.1278, 48.8566, 2.3522) == pytest.approx(343.5, abs=1.0)

    def test_symmetric(self):
        there = distance_km(51.5101, -0.128, 51.5136, -0.1365)
        back = distance_km(51.5136, -0.1365, 51.5101, -0.128)
        assert there == pytest.approx(back)

    def test_restaurant_without_coordinates(self, make_restaurant):
        restaurant = make_restaurant()
        assert restaurant_distance(51.5, -0.12, restaurant) is None

    def test_query_without_coordinates(self, make_restaurant):
        restaurant = make_restaurant(latitude=51.5, longitude=-0.12)
        assert restaurant_distance(None, None, restaurant) is None


class TestFormatDistance:
    """Tests for distance display strings."""

    @pytest.mark.parametrize(
        "km,expected",
        [
            (0.999, "999m away"),
            (0.25, "250m away"),
            (1.0, "1.0km away"),
            (3.456, "3.5km away"),
            (9.94, "9.9km away"),
            (15, "15km away"),
            (15.6, "16km away"),
        ],
    )
    def test_format(self, km, expected):
        assert format_distance(km) == expected

    def test_display_falls_back_to_neighborhood(self, make_restaurant):
        restaurant = make_restaurant(neighborhood="Covent Garden")
        assert display_distance(None, restaurant) == "Covent Garden"

    def test_display_falls_back_to_city(self, make_restaurant):
        restaurant = make_restaurant(city="London")
        assert display_distance(None, restaurant) == "London"

    def test_display_uses_distance_when_known(self, make_restaurant):
        restaurant = make_restaurant(neighborhood="Soho")
        assert display_distance(0.5, restaurant) == "500m away"
