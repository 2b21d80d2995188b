from __future__ import annotations

from typing import Callable, Dict, List

from navassist.core.logger import SessionLogger
from navassist.core.types import Message, Place, ResponseContext, Stage, TemplateTag

HELP_TEXT = (
    "I'm sorry, I didn't understand that. You can ask me to navigate somewhere, "
    "plan your day, find a place to eat, or help you explore for a specific number of hours."
)

REPROMPTS: Dict[Stage, str] = {
    Stage.idle: HELP_TEXT,
    Stage.await_time: (
        "Sorry, I didn't catch a time. Please say a time like \"5 pm\" or \"arrive by 17:30\", "
        "or say \"no specific time\"."
    ),
    Stage.await_weather: (
        "Please say yes if you'd like well-lit roads with good visibility, or no if it doesn't matter."
    ),
    Stage.await_breaks: "Should I plan breaks along the way? Please answer yes or no.",
    Stage.await_confirmation: "Say \"start\" or \"yes\" when you're ready to begin navigation.",
    Stage.navigating: "Navigation is already in progress. Reset the session to plan a new trip.",
}


def _initial_planning(ctx: ResponseContext) -> str:
    return f"I'll help you get to {ctx.destination}. Would you like to arrive by a specific time?"


def _weather_check(ctx: ResponseContext) -> str:
    return (
        f"I notice it's {ctx.weather_condition}. "
        "Would you prefer a route with good visibility and well-lit roads?"
    )


def _break_suggestion(ctx: ResponseContext) -> str:
    return (
        f"This will be a {ctx.trip_duration} minute trip. "
        "Would you like me to plan any breaks along the way?"
    )


def _route_confirmation(ctx: ResponseContext) -> str:
    avoiding = " avoiding highways" if ctx.preferences.avoid_highways else ""
    return (
        "I've found a route that matches your preferences. "
        f"It will take about {ctx.trip_duration} minutes{avoiding}. "
        "Would you like to hear about potential stops?"
    )


def _final_confirmation(ctx: ResponseContext) -> str:
    return "Great! I'll start navigation now. I'll notify you about breaks and conditions along the way."


def _places(ctx: ResponseContext) -> List[Place]:
    return list(ctx.recommendation.places) if ctx.recommendation else []


def _restaurant_recommendation(ctx: ResponseContext) -> str:
    picks = _places(ctx)[:3]
    if not picks:
        return "I couldn't find any restaurants matching your preferences at this time."
    text = f"I recommend these restaurants: 1. {picks[0].name}, known for excellent {picks[0].cuisine} cuisine."
    if len(picks) > 1:
        text += f" 2. {picks[1].name}"
        if len(picks) > 2:
            text += f", and 3. {picks[2].name}"
        text += "."
    return text + " These are selected based on your preferences and current availability."


def _day_plan(ctx: ResponseContext) -> str:
    stops = _places(ctx)[:3]
    if not stops:
        return "I couldn't find any attractions to plan your day around right now."
    text = f"Here's your plan: Start with {stops[0].name} which is perfect for this time."
    if len(stops) > 1:
        text += f" Then head to {stops[1].name}"
        if len(stops) > 2:
            text += f", and finish your day at {stops[2].name}"
        text += "."
    return text + " Each place has been chosen based on current crowds and ratings."


def _time_boxed_exploration(ctx: ResponseContext) -> str:
    hours = ctx.recommendation.hours if ctx.recommendation else None
    stops = _places(ctx)
    if not stops:
        return f"I couldn't plan a suitable itinerary for {hours} hours."
    text = f"For your {hours}-hour exploration, I suggest: Start at {stops[0].name} ({stops[0].duration} minutes)"
    if len(stops) > 1:
        text += f", then visit {stops[1].name} ({stops[1].duration} minutes)"
    if len(stops) > 2:
        text += f", and if time permits, check out {stops[2].name}"
    return text + ". This plan includes travel time between locations."


def _help(ctx: ResponseContext) -> str:
    return HELP_TEXT


def _reprompt(ctx: ResponseContext) -> str:
    return REPROMPTS[ctx.stage]


_TEMPLATES: Dict[TemplateTag, Callable[[ResponseContext], str]] = {
    TemplateTag.initial_planning: _initial_planning,
    TemplateTag.weather_check: _weather_check,
    TemplateTag.break_suggestion: _break_suggestion,
    TemplateTag.route_confirmation: _route_confirmation,
    TemplateTag.final_confirmation: _final_confirmation,
    TemplateTag.restaurant_recommendation: _restaurant_recommendation,
    TemplateTag.day_plan: _day_plan,
    TemplateTag.time_boxed_exploration: _time_boxed_exploration,
    TemplateTag.help: _help,
    TemplateTag.reprompt: _reprompt,
}


def compose(tag: TemplateTag, ctx: ResponseContext) -> str:
    return _TEMPLATES[tag](ctx)


class Responder:
    def __init__(self, logger: SessionLogger) -> None:
        self.logger = logger

    def run(self, tag: TemplateTag, ctx: ResponseContext) -> Message:
        message = Message(role="assistant", content=compose(tag, ctx))
        self.logger.step(
            "responder",
            {"template": tag.value, "context": ctx.model_dump(mode="json")},
            message.model_dump(),
        )
        return message
