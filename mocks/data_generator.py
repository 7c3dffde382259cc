"""Generate realistic mock restaurant records for testing."""

import random
from uuid import uuid4

from faker import Faker

fake = Faker("en_GB")


class MockDataGenerator:
    """Generate raw records in the primary-store and local-cache layouts."""

    CUISINES = ["indian", "italian", "mexican", "japanese", "british", "lebanese", "thai"]
    DIETARY_FLAGS = ["vegetarian", "vegan", "gluten_free", "dairy_free", "halal", "kosher"]
    MEAL_PERIODS = ["breakfast", "lunch", "dinner", "snack", "all_day"]
    GOALS = [
        "increase visibility",
        "highlight specialties",
        "attract dietary",
        "fill off peak",
    ]
    TAGS = ["signature", "spicy", "comfort", "family recipe", "secret recipe", "traditional", "sharing"]
    AVAILABILITY = [None, None, "weekends_only", "seasonal", "chef_special", "limited_daily"]
    PRICE_RANGES = ["$", "$$", "$$$"]

    ITEM_TEMPLATES = {
        "indian": [
            ("Black Daal", "Slow-cooked black lentils, simmered overnight"),
            ("Chicken Ruby", "Tender chicken in a rich tomato and butter sauce"),
            ("Paneer Tikka", "Charred cottage cheese with peppers"),
        ],
        "italian": [
            ("Margherita", "San Marzano tomato, fior di latte, basil"),
            ("Cacio e Pepe", "Pecorino, black pepper, fresh tonnarelli"),
            ("Tiramisu", "Mascarpone, espresso, cocoa"),
        ],
        "mexican": [
            ("Sweet Potato Taco", "Roast sweet potato with feta and salsa"),
            ("Pork Pibil", "Slow-roast pork in achiote"),
            ("Churros", "Cinnamon sugar with chocolate sauce"),
        ],
        "japanese": [
            ("Tonkotsu Ramen", "Pork bone broth, chashu, egg"),
            ("Yasai Gyoza", "Vegetable dumplings"),
            ("Katsu Curry", "Panko chicken with curry sauce"),
        ],
    }

    # Central London, offsets stay within a few km
    BASE_LAT = 51.5074
    BASE_LON = -0.1278

    def __init__(self, seed: int | None = None):
        if seed:
            random.seed(seed)
            Faker.seed(seed)

    def _coordinates(self) -> tuple[float, float]:
        return (
            round(self.BASE_LAT + random.uniform(-0.03, 0.03), 6),
            round(self.BASE_LON + random.uniform(-0.05, 0.05), 6),
        )

    def _opening_hours(self) -> dict:
        days = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]
        hours = {}
        for day in days:
            if random.random() < 0.1:
                hours[day] = {"closed": True}
            else:
                opens = random.randint(7, 12)
                closes = random.randint(20, 23)
                hours[day] = {"open": f"{opens:02d}:00", "close": f"{closes:02d}:00"}
        return hours

    def _dietary(self) -> dict:
        return {flag: random.random() < 0.3 for flag in self.DIETARY_FLAGS}

    def _template(self, cuisine: str) -> tuple[str, str]:
        templates = self.ITEM_TEMPLATES.get(cuisine, self.ITEM_TEMPLATES["italian"])
        return random.choice(templates)

    def generate_primary_restaurant(self, city: str = "London", item_count: int = 3) -> tuple[dict, list[dict]]:
        """Generate a primary-store restaurant document and its menu item documents."""
        restaurant_id = f"rest_{uuid4().hex[:10]}"
        cuisine = random.choice(self.CUISINES)
        lat, lon = self._coordinates()

        doc = {
            "restaurant_id": restaurant_id,
            "basic_info": {
                "name": f"{fake.last_name()}'s {cuisine.title()} Kitchen",
                "cuisine_type": cuisine,
                "website": fake.url() if random.random() < 0.5 else None,
                "phone": fake.phone_number(),
            },
            "location": {
                "city": city,
                "country_code": "GB",
                "address": fake.street_address(),
                "neighborhood": fake.city_suffix(),
                "coordinates": {"lat": lat, "lng": lon},
            },
            "business_info": {
                "opening_hours": self._opening_hours(),
                "delivery_platforms": {"deliveroo_id": fake.slug()} if random.random() < 0.5 else {},
                "price_range": random.choice(self.PRICE_RANGES),
                "booking_url": fake.url() if random.random() < 0.3 else None,
            },
            "media": {"hero_image": fake.image_url() if random.random() < 0.5 else None, "gallery": []},
            "metadata": {
                "goals": random.sample(self.GOALS, k=random.randint(0, 2)),
                "hidden_gem_override": None,
                "hidden_gem_tier": None,
            },
            "statistics": {
                "community_rating": round(random.uniform(3.0, 5.0), 1),
                "review_count": random.randint(0, 400),
                "popularity_score": round(random.uniform(0, 30), 1),
            },
        }

        items = []
        for _ in range(item_count):
            name, description = self._template(cuisine)
            items.append(
                {
                    "menu_item_id": f"item_{uuid4().hex[:10]}",
                    "restaurant_id": restaurant_id,
                    "basic_info": {
                        "name": name,
                        "description": description,
                        "price": f"£{random.randint(5, 25)}.{random.choice(['00', '50', '95'])}",
                        "category": "main",
                    },
                    "classification": {
                        "meal_period": random.choice(self.MEAL_PERIODS),
                        "cuisine_tags": [cuisine, *random.sample(self.TAGS, k=random.randint(0, 2))],
                        "dietary": self._dietary(),
                    },
                    "availability": {
                        "available": random.random() < 0.9,
                        "seasonal": random.random() < 0.1,
                        "daily_limit": random.choice([None, None, 10, 30]),
                        "schedule": random.choice(self.AVAILABILITY),
                    },
                    "marketing": {
                        "signature_dish": random.random() < 0.2,
                        "chef_recommendation": random.random() < 0.2,
                    },
                    "hidden_gem_factors": {
                        "family_recipe": random.random() < 0.2,
                        "secret_recipe": random.random() < 0.1,
                        "traditional_method": random.random() < 0.2,
                    },
                }
            )
        return doc, items

    def generate_local_record(self, city: str = "London", item_count: int = 3) -> dict:
        """Generate a local menu cache record with embedded menu items."""
        restaurant_id = f"local_{uuid4().hex[:10]}"
        cuisine = random.choice(self.CUISINES)
        lat, lon = self._coordinates()

        menu_items = []
        for index in range(item_count):
            name, description = self._template(cuisine)
            menu_items.append(
                {
                    "menu_item_id": f"{restaurant_id}_{index}",
                    "name": name,
                    "description": description,
                    "price": f"£{random.randint(5, 25)}",
                    "category": "main",
                    "tags": random.sample(self.TAGS, k=random.randint(0, 3)),
                    "search_tags": [cuisine],
                    "meal_period": random.choice(self.MEAL_PERIODS),
                    "dietary": self._dietary(),
                    "available": random.random() < 0.9,
                    "availability": random.choice(self.AVAILABILITY),
                    "daily_limit": random.choice([None, None, 12]),
                    "cooking_method": random.choice([None, "traditional", "grilled"]),
                }
            )

        return {
            "restaurant_id": restaurant_id,
            "restaurant_name": f"{fake.first_name()}'s {cuisine.title()}",
            "location": {
                "city": city,
                "country_code": "GB",
                "address": fake.street_address(),
                "latitude": lat,
                "longitude": lon,
            },
            "cuisine_type": cuisine,
            "price_range": random.choice(self.PRICE_RANGES),
            "website": fake.url() if random.random() < 0.4 else None,
            "delivery_platforms": {"ubereats_id": fake.slug()} if random.random() < 0.4 else {},
            "opening_hours": self._opening_hours() if random.random() < 0.7 else {},
            "metadata": {"goals": random.sample(self.GOALS, k=random.randint(0, 2))},
            "rating": round(random.uniform(3.0, 5.0), 1),
            "review_count": random.randint(0, 300),
            "menu_items": menu_items,
        }

    def generate_primary_dump(self, count: int = 5, city: str = "London") -> tuple[list[dict], dict[str, list[dict]]]:
        """Generate restaurants plus a ``restaurant_id -> items`` mapping."""
        restaurants, items = [], {}
        for _ in range(count):
            doc, doc_items = self.generate_primary_restaurant(city=city)
            restaurants.append(doc)
            items[doc["restaurant_id"]] = doc_items
        return restaurants, items

    def generate_local_menus(self, count: int = 5, city: str = "London") -> dict:
        """Generate a local menu file payload in the ``menus`` layout."""
        menus = {}
        for _ in range(count):
            record = self.generate_local_record(city=city)
            key = f"gb_{city}_{record['restaurant_id']}".replace(" ", "_").lower()
            menus[key] = record
        return {"menus": menus, "stats": {"total_restaurants": len(menus)}}
