from __future__ import annotations

from pathlib import Path
from typing import List, Protocol, Sequence

import orjson
from pydantic import ValidationError

from .types import Period, Place, PlaceCategory, UserPreferences


class PlaceCatalog(Protocol):
    def attractions(self) -> List[Place]: ...

    def restaurants(self) -> List[Place]: ...


class StaticPlaceCatalog:
    def __init__(self, attractions: Sequence[Place], restaurants: Sequence[Place]) -> None:
        self._attractions = tuple(attractions)
        self._restaurants = tuple(restaurants)

    def attractions(self) -> List[Place]:
        return list(self._attractions)

    def restaurants(self) -> List[Place]:
        return list(self._restaurants)


def _busy(morning: int, afternoon: int, evening: int):
    return {Period.morning: morning, Period.afternoon: afternoon, Period.evening: evening}


DEFAULT_ATTRACTIONS = (
    Place(name="Central Park", category=PlaceCategory.park, rating=4.8, busyness=_busy(60, 90, 70), time_needed=120, location=(40.7829, -73.9654)),
    Place(name="Art Museum", category=PlaceCategory.museum, rating=4.6, busyness=_busy(40, 80, 30), time_needed=90, location=(40.7794, -73.9632)),
    Place(name="Local Market", category=PlaceCategory.shopping, rating=4.3, busyness=_busy(70, 85, 40), time_needed=60, location=(40.7831, -73.9712)),
    Place(name="Botanical Garden", category=PlaceCategory.nature, rating=4.7, busyness=_busy(50, 75, 45), time_needed=120, location=(40.7815, -73.9733)),
)

DEFAULT_RESTAURANTS = (
    Place(name="Green Leaf", category=PlaceCategory.restaurant, cuisine="vegetarian", price_level=2, rating=4.5, busyness=_busy(30, 80, 90), avg_meal_time=45, location=(40.7834, -73.9723)),
    Place(name="Spice Route", category=PlaceCategory.restaurant, cuisine="indian", price_level=3, rating=4.7, busyness=_busy(20, 70, 95), avg_meal_time=60, location=(40.7821, -73.9701)),
    Place(name="Pizza Corner", category=PlaceCategory.restaurant, cuisine="italian", price_level=2, rating=4.4, busyness=_busy(40, 75, 85), avg_meal_time=30, location=(40.7847, -73.9689)),
    Place(name="Sushi Express", category=PlaceCategory.restaurant, cuisine="japanese", price_level=3, rating=4.6, busyness=_busy(30, 65, 90), avg_meal_time=45, location=(40.7856, -73.9667)),
)

DEFAULT_CATALOG = StaticPlaceCatalog(DEFAULT_ATTRACTIONS, DEFAULT_RESTAURANTS)

DEFAULT_USER_PREFERENCES = UserPreferences(
    cuisines=("vegetarian", "indian"),
    max_price_level=2,
    max_distance=2000,
    home_location=(40.7831, -73.9712),
)


def load_catalog(path: str | Path) -> StaticPlaceCatalog:
    """Load a catalog file of the form ``{"attractions": [...], "restaurants": [...]}``.

    Raises ``ValueError`` when the file is not valid JSON or a record does not
    validate as a :class:`Place`.
    """
    raw = Path(path).read_bytes()
    try:
        data = orjson.loads(raw)
    except orjson.JSONDecodeError as ex:
        raise ValueError(f"Catalog {path} is not valid JSON: {ex}") from ex
    if not isinstance(data, dict):
        raise ValueError(f"Catalog {path} must be a JSON object")
    try:
        attractions = [Place.model_validate(p) for p in data.get("attractions", [])]
        restaurants = [Place.model_validate(p) for p in data.get("restaurants", [])]
    except ValidationError as ex:
        raise ValueError(f"Catalog {path} has an invalid place: {ex}") from ex
    return StaticPlaceCatalog(attractions, restaurants)
