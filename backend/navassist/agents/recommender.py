from __future__ import annotations

from navassist.core.catalog import PlaceCatalog
from navassist.core.logger import SessionLogger
from navassist.core.ports import Clock
from navassist.core.ranking import (
    filter_by_preference,
    pack_by_time_budget,
    period_for_hour,
    rank,
    rank_by_rating,
)
from navassist.core.types import Recommendation, UserPreferences


class Recommender:
    def __init__(
        self,
        logger: SessionLogger,
        catalog: PlaceCatalog,
        user_preferences: UserPreferences,
        clock: Clock,
    ) -> None:
        self.logger = logger
        self.catalog = catalog
        self.user_preferences = user_preferences
        self.clock = clock

    def _log(self, name: str, input_data: dict, result: Recommendation) -> Recommendation:
        self.logger.step(
            "recommender",
            {"action": name, **input_data},
            {"places": [p.name for p in result.places], "period": result.period, "hours": result.hours},
        )
        return result

    def find_restaurants(self, limit: int = 3) -> Recommendation:
        period = period_for_hour(self.clock())
        candidates = filter_by_preference(self.catalog.restaurants(), self.user_preferences)
        result = Recommendation(kind="find_restaurant", period=period, places=rank(candidates, period)[:limit])
        return self._log("find_restaurant", {"candidates": len(candidates)}, result)

    def plan_day(self, stops: int = 3) -> Recommendation:
        period = period_for_hour(self.clock())
        result = Recommendation(kind="plan_day", period=period, places=rank(self.catalog.attractions(), period)[:stops])
        return self._log("plan_day", {}, result)

    def plan_exploration(self, hours: int) -> Recommendation:
        schedule = pack_by_time_budget(rank_by_rating(self.catalog.attractions()), hours * 60)
        result = Recommendation(kind="explore", places=schedule, hours=hours)
        return self._log("explore", {"hours": hours}, result)
