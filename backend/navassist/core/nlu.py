from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Optional, Pattern, Tuple, Union

from .types import IntentName


@dataclass(frozen=True)
class Rule:
    pattern: Pattern[str]
    accept: Optional[Callable[[re.Match], bool]] = None


@dataclass(frozen=True)
class IntentRules:
    """Ordered pattern alternatives for one intent; the first accepted one wins."""

    intent: IntentName
    rules: Tuple[Rule, ...]


@dataclass(frozen=True)
class Match:
    intent: IntentName
    groups: Tuple[str, ...] = ()


@dataclass(frozen=True)
class NoMatch:
    pass


NO_MATCH = NoMatch()
MatchResult = Union[Match, NoMatch]


def _rules(intent: IntentName, *patterns: str, accept: Optional[Callable[[re.Match], bool]] = None) -> IntentRules:
    return IntentRules(intent, tuple(Rule(re.compile(p), accept) for p in patterns))


# A final "." that closes "a.m." or "p.m." belongs to the time token.
_TRAILING_PUNCT = re.compile(r"(?<![ap]\.m)[\s.,!?;:]+$")


def normalize(utterance: str) -> str:
    t = utterance.replace("’", "'").replace("‘", "'").lower()
    t = " ".join(t.split())
    return _TRAILING_PUNCT.sub("", t)


def classify(utterance: str, rules: IntentRules) -> MatchResult:
    t = normalize(utterance)
    for rule in rules.rules:
        m = rule.pattern.search(t)
        if not m:
            continue
        if rule.accept is not None and not rule.accept(m):
            continue
        return Match(rules.intent, tuple(g if g is not None else "" for g in m.groups()))
    return NO_MATCH


def _valid_time(m: re.Match) -> bool:
    hour = int(m.group("hour"))
    minutes = m.group("minutes")
    if minutes is not None and int(minutes) > 59:
        return False
    if m.group("meridiem"):
        return 1 <= hour <= 12
    return 0 <= hour <= 23


# Clock-time token: "5", "5pm", "17:30", "5:15 p.m."
_TIME_TOKEN = (
    r"(?<![\w:])(?P<token>(?P<hour>\d{1,2})(?::(?P<minutes>\d{2}))?"
    r"(?:\s*(?P<meridiem>am|pm|a\.m\.?|p\.m\.?))?)(?![\w:])"
)

_YES = r"(?:yes|yeah|yep|sure)"

_NEGATED = re.compile(r"^(?:no|nope|nah)\b|\b(?:don't|do not|not|never)\b")


def _not_negated(m: re.Match) -> bool:
    return not _NEGATED.search(m.string)


NAVIGATION = _rules(
    IntentName.navigation,
    r"\b(?:navigate to|take me to|drive to|directions to|how do i get to)\b(.*)$",
)

PLAN_DAY = _rules(
    IntentName.plan_day,
    r"\bplan my\b.*\b(?:weekend|saturday|sunday|day)\b",
)

FIND_RESTAURANT = _rules(
    IntentName.find_restaurant,
    r"\bfind\b.*\b(?:lunch|dinner|place|eat)\b",
)

EXPLORE = _rules(
    IntentName.explore,
    r"\bhours?\b.*\bexplore\b",
    r"\bexplore\b.*\bhours?\b",
)

NEGATIVE_TIME = _rules(
    IntentName.negative_time,
    r"\bno(?: specific| particular)? time\b",
    r"\bdoesn't matter\b",
    r"\bany ?time\b",
    r"^(?:no|nope)$",
)

EXPLICIT_TIME = _rules(
    IntentName.explicit_time,
    r"\b(?:arrive|be there) by\s+" + _TIME_TOKEN,
    _TIME_TOKEN,
    accept=_valid_time,
)

AVOID_HIGHWAYS = _rules(
    IntentName.avoid_highways,
    r"\b(?:avoid|no|skip)(?: the)? highways?\b",
    r"\b(?:local|side|smaller) roads?\b",
)

WEATHER_NEGATIVE = _rules(
    IntentName.negative,
    r"^(?:no|nope|nah)(?: thanks| thank you)?$",
    r"\bnot really\b",
    r"\b(?:prefer not|no preference)\b",
    r"\b(?:don't|do not|not) prefer\b",
    r"\b(?:doesn't|does not) matter\b",
    r"\b(?:don't|do not) (?:need|want|care)\b",
    r"^(?:no|nope|nah),",
)

WELL_LIT_AFFIRMATIVE = _rules(
    IntentName.affirmative,
    r"\b" + _YES + r"\b.*\b(?:well[- ]?lit|visibility)\b",
    r"\bprefer well[- ]?lit roads\b",
    r"\bprefer\b",
    r"^" + _YES + r"(?: please)?$",
    accept=_not_negated,
)

BREAK_NEGATIVE = _rules(
    IntentName.negative,
    r"\bno breaks?\b",
    r"\b(?:don't|do not) (?:need|want) (?:any )?breaks?\b",
    r"\b(?:don't|do not|not) (?:plan|include|add)\b",
    r"^(?:no|nope|nah),",
    r"^(?:no|nope|nah)(?: thanks| thank you)?$",
)

BREAK_AFFIRMATIVE = _rules(
    IntentName.affirmative,
    r"\b" + _YES + r"\b.*\bbreaks?\b",
    r"\b(?:plan|include|add)\b.*\bbreaks?\b",
    r"^(?:" + _YES + r"|please)(?: please)?$",
    accept=_not_negated,
)

CONFIRMATION = _rules(
    IntentName.confirm,
    r"^(?:yes|yeah|yep|sure|okay|ok)\b",
    r"\bstart\b",
    r"\b(?:let's go|go ahead)\b",
    accept=_not_negated,
)


def destination_from(match: Match) -> str:
    return match.groups[0].strip() if match.groups else ""


def time_token_from(match: Match) -> str:
    # groups: token, hour, minutes, meridiem
    return match.groups[0].strip() if match.groups else ""


def extract_hours(utterance: str, default: int = 3) -> int:
    m = re.search(r"\d+", utterance)
    return int(m.group(0)) if m else default
