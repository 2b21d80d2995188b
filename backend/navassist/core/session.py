from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from navassist.agents.recommender import Recommender
from navassist.agents.responder import Responder

from . import nlu
from .catalog import DEFAULT_CATALOG, DEFAULT_USER_PREFERENCES, PlaceCatalog
from .logger import SessionLogger
from .ports import (
    Clock,
    DurationSource,
    RecordingSpeaker,
    Speaker,
    SpeechChannel,
    TranscriptSource,
    WeatherSource,
    fixed_weather,
    system_clock,
    uniform_duration_source,
)
from .types import (
    ConversationContext,
    DrivingPreferences,
    ErrorKind,
    Recommendation,
    ResponseContext,
    Stage,
    TemplateTag,
    Turn,
    UserPreferences,
)

Effect = Callable[["DialogueSession", nlu.Match], Optional[Recommendation]]
Guard = Callable[[nlu.Match], bool]


@dataclass(frozen=True)
class Transition:
    stage: Stage
    rules: nlu.IntentRules
    next_stage: Stage
    template: TemplateTag
    effect: Optional[Effect] = None
    guard: Optional[Guard] = None
    rejection: Optional[ErrorKind] = None


def _start_trip(session: DialogueSession, match: nlu.Match) -> None:
    session.context = ConversationContext(is_planning=True, destination=nlu.destination_from(match))
    session.preferences = DrivingPreferences()


def _set_arrival_time(session: DialogueSession, match: nlu.Match) -> None:
    session.preferences.arrival_time = nlu.time_token_from(match)


def _avoid_highways(session: DialogueSession, match: nlu.Match) -> None:
    session.preferences.avoid_highways = True


def _lighting(prefer_well_lit: bool) -> Effect:
    def effect(session: DialogueSession, match: nlu.Match) -> None:
        session.preferences.prefer_well_lit = prefer_well_lit
        if session.context.current_trip_duration is None:
            session.context.current_trip_duration = session.durations()

    return effect


def _breaks(needs_breaks: bool) -> Effect:
    def effect(session: DialogueSession, match: nlu.Match) -> None:
        session.preferences.needs_frequent_breaks = needs_breaks

    return effect


def _begin_navigation(session: DialogueSession, match: nlu.Match) -> None:
    session.context.is_planning = False


def _find_restaurants(session: DialogueSession, match: nlu.Match) -> Recommendation:
    return session.recommender.find_restaurants()


def _plan_day(session: DialogueSession, match: nlu.Match) -> Recommendation:
    return session.recommender.plan_day()


def _plan_exploration(session: DialogueSession, match: nlu.Match) -> Recommendation:
    return session.recommender.plan_exploration(nlu.extract_hours(session.last_normalized))


def _has_destination(match: nlu.Match) -> bool:
    return bool(nlu.destination_from(match))


T = Transition
S = Stage
R = TemplateTag

# Rows are scanned in order for the current stage; the first match fires.
# Negative answers come before positive ones so that "no specific time" or
# "no breaks" never falls into a broader affirmative or digit pattern.
TRANSITIONS: Tuple[Transition, ...] = (
    T(S.idle, nlu.NAVIGATION, S.await_time, R.initial_planning, _start_trip,
      guard=_has_destination, rejection=ErrorKind.invalid_destination),
    T(S.idle, nlu.PLAN_DAY, S.idle, R.day_plan, _plan_day),
    T(S.idle, nlu.FIND_RESTAURANT, S.idle, R.restaurant_recommendation, _find_restaurants),
    T(S.idle, nlu.EXPLORE, S.idle, R.time_boxed_exploration, _plan_exploration),

    T(S.await_time, nlu.NEGATIVE_TIME, S.await_weather, R.weather_check),
    T(S.await_time, nlu.EXPLICIT_TIME, S.await_weather, R.weather_check, _set_arrival_time),

    T(S.await_weather, nlu.AVOID_HIGHWAYS, S.await_weather, R.weather_check, _avoid_highways),
    T(S.await_weather, nlu.WEATHER_NEGATIVE, S.await_breaks, R.break_suggestion, _lighting(False)),
    T(S.await_weather, nlu.WELL_LIT_AFFIRMATIVE, S.await_breaks, R.break_suggestion, _lighting(True)),

    T(S.await_breaks, nlu.AVOID_HIGHWAYS, S.await_breaks, R.break_suggestion, _avoid_highways),
    T(S.await_breaks, nlu.BREAK_NEGATIVE, S.await_confirmation, R.route_confirmation, _breaks(False)),
    T(S.await_breaks, nlu.BREAK_AFFIRMATIVE, S.await_confirmation, R.route_confirmation, _breaks(True)),

    T(S.await_confirmation, nlu.AVOID_HIGHWAYS, S.await_confirmation, R.route_confirmation, _avoid_highways),
    T(S.await_confirmation, nlu.CONFIRMATION, S.navigating, R.final_confirmation, _begin_navigation),
)


def transitions_for(stage: Stage) -> List[Transition]:
    return [t for t in TRANSITIONS if t.stage == stage]


class DialogueSession:
    """One conversation: stage, collected preferences and the reply channel.

    Every utterance runs one classify, transition and compose cycle to
    completion. An utterance that matches nothing valid for the current stage
    leaves the stage alone and answers with that stage's re-prompt.
    """

    def __init__(
        self,
        logger: SessionLogger,
        transcripts: Optional[TranscriptSource] = None,
        speaker: Optional[Speaker] = None,
        catalog: PlaceCatalog = DEFAULT_CATALOG,
        user_preferences: UserPreferences = DEFAULT_USER_PREFERENCES,
        clock: Clock = system_clock,
        durations: Optional[DurationSource] = None,
        weather: Optional[WeatherSource] = None,
    ) -> None:
        self.logger = logger
        self.transcripts = transcripts
        self.channel = SpeechChannel(speaker or RecordingSpeaker(), logger)
        self.durations = durations or uniform_duration_source()
        self.weather = weather or fixed_weather()
        self.recommender = Recommender(logger, catalog, user_preferences, clock)
        self.responder = Responder(logger)
        self.context = ConversationContext()
        self.preferences = DrivingPreferences()
        self.last_normalized = ""

    @property
    def stage(self) -> Stage:
        return self.context.stage

    def reset(self) -> None:
        self.logger.info("Session reset", stage=self.stage.value)
        self._set_stage(Stage.idle)
        self.context = ConversationContext()
        self.preferences = DrivingPreferences()

    def _set_stage(self, new_stage: Stage) -> None:
        if self.context.stage != new_stage:
            self.logger.state_transition(self.context.stage.value, new_stage.value)
            self.context.stage = new_stage

    def _snapshot(self, recommendation: Optional[Recommendation] = None) -> ResponseContext:
        return ResponseContext(
            stage=self.stage,
            destination=self.context.destination,
            trip_duration=self.context.current_trip_duration,
            preferences=self.preferences.model_copy(),
            weather_condition=self.weather(),
            recommendation=recommendation,
        )

    def handle(self, utterance: str) -> Turn:
        self.logger.user_message(utterance)
        stage_before = self.stage
        self.last_normalized = nlu.normalize(utterance)

        fired: Optional[Transition] = None
        match: Optional[nlu.Match] = None
        rejection: Optional[ErrorKind] = None
        for transition in transitions_for(stage_before):
            result = nlu.classify(self.last_normalized, transition.rules)
            if isinstance(result, nlu.NoMatch):
                continue
            if transition.guard is not None and not transition.guard(result):
                rejection = rejection or transition.rejection
                continue
            fired, match = transition, result
            break

        error: Optional[ErrorKind] = None
        recommendation: Optional[Recommendation] = None
        if fired is None:
            template = TemplateTag.help if stage_before == Stage.idle else TemplateTag.reprompt
            error = rejection or ErrorKind.no_recognized_intent
        else:
            template = fired.template
            if fired.effect is not None:
                recommendation = fired.effect(self, match)
            if recommendation is not None and not recommendation.places:
                error = ErrorKind.empty_result_set
            self._set_stage(fired.next_stage)

        message = self.responder.run(template, self._snapshot(recommendation))
        self.logger.assistant_message(message.content)
        self.channel.say(message.content)

        return Turn(
            utterance=utterance,
            normalized=self.last_normalized,
            stage_before=stage_before,
            stage=self.stage,
            intent=match.intent if match else None,
            captured=list(match.groups) if match else [],
            template=template,
            response=message.content,
            error=error,
        )

    def run(self) -> List[Turn]:
        turns: List[Turn] = []
        if self.transcripts is None:
            return turns
        for utterance in self.transcripts:
            turns.append(self.handle(utterance))
        return turns
