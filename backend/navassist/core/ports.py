from __future__ import annotations

import random
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Protocol

from .logger import SessionLogger

TranscriptSource = Iterable[str]
Clock = Callable[[], int]
DurationSource = Callable[[], int]
WeatherSource = Callable[[], str]

DEFAULT_WEATHER_CONDITION = "getting dark"


class Speaker(Protocol):
    def speak(self, text: str) -> None: ...

    def cancel(self) -> None: ...


def system_clock() -> int:
    return datetime.now().hour


def uniform_duration_source(low: int = 30, high: int = 90, rng: Optional[random.Random] = None) -> DurationSource:
    """Trip minutes drawn uniformly from ``[low, high)``; stands in for a routing engine."""
    if high <= low:
        raise ValueError(f"empty duration range [{low}, {high})")
    r = rng or random.Random()

    def draw() -> int:
        return r.randrange(low, high)

    return draw


def fixed_weather(condition: str = DEFAULT_WEATHER_CONDITION) -> WeatherSource:
    return lambda: condition


class RecordingSpeaker:
    """Keeps every spoken text in memory; used by the HTTP API and tests."""

    def __init__(self) -> None:
        self.spoken: List[str] = []
        self.cancelled = 0

    def speak(self, text: str) -> None:
        self.spoken.append(text)

    def cancel(self) -> None:
        self.cancelled += 1


class SpeechChannel:
    """Single-slot mailbox in front of a Speaker.

    Saying a new response cancels whatever is still pending, so at most one
    response is active. Speaker signals are logged but never change dialogue
    state; a reported error stays on ``last_error`` for the caller.
    """

    def __init__(self, speaker: Speaker, logger: SessionLogger) -> None:
        self.speaker = speaker
        self.logger = logger
        self.active: Optional[str] = None
        self.last_error: Optional[str] = None

    def say(self, text: str) -> None:
        if self.active is not None:
            self.speaker.cancel()
            self.logger.speaker_event("cancelled", text=self.active)
        self.active = text
        self.last_error = None
        self.speaker.speak(text)

    def started(self) -> None:
        self.logger.speaker_event("started", text=self.active)

    def ended(self) -> None:
        self.logger.speaker_event("ended", text=self.active)
        self.active = None

    def error(self, reason: str) -> None:
        self.logger.speaker_event("error", text=self.active, reason=reason)
        self.last_error = reason
        self.active = None
