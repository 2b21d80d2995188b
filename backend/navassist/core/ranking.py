from __future__ import annotations

from typing import Iterable, List

from .types import Period, Place, UserPreferences

TRAVEL_BUFFER_MINUTES = 30
MIN_REMAINING_MINUTES = 60


def period_for_hour(hour: int) -> Period:
    if not 0 <= hour <= 23:
        raise ValueError(f"hour must be within 0-23, got {hour}")
    if hour < 12:
        return Period.morning
    if hour < 17:
        return Period.afternoon
    return Period.evening


def rank(places: Iterable[Place], period: Period) -> List[Place]:
    # sorted() is stable: equal rating and busyness keep catalog order
    return sorted(places, key=lambda p: (-p.rating, p.busyness_at(period)))


def rank_by_rating(places: Iterable[Place]) -> List[Place]:
    return sorted(places, key=lambda p: -p.rating)


def filter_by_preference(restaurants: Iterable[Place], prefs: UserPreferences) -> List[Place]:
    cuisines = set(prefs.cuisines)
    return [
        r
        for r in restaurants
        if r.cuisine in cuisines
        and r.price_level is not None
        and r.price_level <= prefs.max_price_level
    ]


def pack_by_time_budget(attractions: Iterable[Place], total_minutes: int) -> List[Place]:
    """Greedily fit attractions, in the given order, into ``total_minutes``.

    Each stop costs its ``time_needed`` plus a fixed travel buffer. The scan
    stops as soon as less than an hour remains. This is a first-fit
    approximation; it does not search for the schedule that uses the budget
    best, so a lower-rated short stop can be skipped once the scan has ended.
    """
    remaining = total_minutes
    schedule: List[Place] = []
    for place in attractions:
        cost = place.duration + TRAVEL_BUFFER_MINUTES
        if remaining >= cost:
            schedule.append(place)
            remaining -= cost
        if remaining < MIN_REMAINING_MINUTES:
            break
    return schedule
