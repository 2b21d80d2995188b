from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class Period(str, Enum):
    morning = "morning"
    afternoon = "afternoon"
    evening = "evening"


class PlaceCategory(str, Enum):
    park = "park"
    museum = "museum"
    shopping = "shopping"
    nature = "nature"
    restaurant = "restaurant"


class Stage(str, Enum):
    idle = "idle"
    await_time = "await_time"
    await_weather = "await_weather"
    await_breaks = "await_breaks"
    await_confirmation = "await_confirmation"
    navigating = "navigating"


AWAITING_STAGES = (
    Stage.await_time,
    Stage.await_weather,
    Stage.await_breaks,
    Stage.await_confirmation,
)


class IntentName(str, Enum):
    navigation = "navigation"
    plan_day = "plan_day"
    find_restaurant = "find_restaurant"
    explore = "explore"
    negative_time = "negative_time"
    explicit_time = "explicit_time"
    avoid_highways = "avoid_highways"
    affirmative = "affirmative"
    negative = "negative"
    confirm = "confirm"


class ErrorKind(str, Enum):
    no_recognized_intent = "no_recognized_intent"
    empty_result_set = "empty_result_set"
    invalid_destination = "invalid_destination"


class TemplateTag(str, Enum):
    initial_planning = "initial_planning"
    weather_check = "weather_check"
    break_suggestion = "break_suggestion"
    route_confirmation = "route_confirmation"
    final_confirmation = "final_confirmation"
    restaurant_recommendation = "restaurant_recommendation"
    day_plan = "day_plan"
    time_boxed_exploration = "time_boxed_exploration"
    help = "help"
    reprompt = "reprompt"


class WeatherPreference(str, Enum):
    any = "any"
    avoid_rain = "avoid_rain"
    avoid_snow = "avoid_snow"


class Place(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    category: PlaceCategory
    rating: float = Field(ge=0.0, le=5.0)
    busyness: Dict[Period, int] = Field(default_factory=dict)
    time_needed: Optional[int] = None  # attractions, minutes
    avg_meal_time: Optional[int] = None  # restaurants, minutes
    cuisine: Optional[str] = None
    price_level: Optional[int] = None
    location: Tuple[float, float] = (0.0, 0.0)

    def busyness_at(self, period: Period) -> int:
        return self.busyness.get(period, 0)

    @property
    def duration(self) -> int:
        if self.time_needed is not None:
            return self.time_needed
        return self.avg_meal_time or 0


class UserPreferences(BaseModel):
    model_config = ConfigDict(frozen=True)

    cuisines: Tuple[str, ...] = ()
    max_price_level: int = 2
    max_distance: int = 2000  # meters, informational
    home_location: Tuple[float, float] = (0.0, 0.0)


class DrivingPreferences(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    avoid_highways: bool = False
    prefer_well_lit: bool = False
    needs_frequent_breaks: bool = False
    arrival_time: Optional[str] = None
    weather_preference: WeatherPreference = WeatherPreference.any


class ConversationContext(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    is_planning: bool = False
    destination: Optional[str] = None
    current_trip_duration: Optional[int] = None
    stage: Stage = Stage.idle


class Recommendation(BaseModel):
    kind: Literal["plan_day", "find_restaurant", "explore"]
    period: Optional[Period] = None
    places: List[Place] = Field(default_factory=list)
    hours: Optional[int] = None


class ResponseContext(BaseModel):
    stage: Stage = Stage.idle
    destination: Optional[str] = None
    trip_duration: Optional[int] = None
    preferences: DrivingPreferences = Field(default_factory=DrivingPreferences)
    weather_condition: str = ""
    recommendation: Optional[Recommendation] = None


class Turn(BaseModel):
    utterance: str
    normalized: str
    stage_before: Stage
    stage: Stage
    intent: Optional[IntentName] = None
    captured: List[str] = Field(default_factory=list)
    template: TemplateTag
    response: str
    error: Optional[ErrorKind] = None
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class Message(BaseModel):
    role: Literal["user", "assistant", "system"] = "assistant"
    content: str


class ChatRequest(BaseModel):
    session_id: Optional[str] = None
    message: str
    metadata: Optional[Dict[str, str]] = None


class SessionSnapshot(BaseModel):
    session_id: str
    context: ConversationContext
    preferences: DrivingPreferences


class ChatResponse(BaseModel):
    session_id: str
    messages: List[Message]
    stage: Stage
    awaiting_user: bool = False
    intent: Optional[IntentName] = None
    error: Optional[ErrorKind] = None
    destination: Optional[str] = None
    trip_duration: Optional[int] = None
    preferences: DrivingPreferences = Field(default_factory=DrivingPreferences)
