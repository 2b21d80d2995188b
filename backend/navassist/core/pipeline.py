from __future__ import annotations

import os
import re
import threading
import uuid
from typing import Dict, Optional

from navassist.core.catalog import DEFAULT_CATALOG, PlaceCatalog, load_catalog
from navassist.core.logger import SessionLogger
from navassist.core.ports import Clock, fixed_weather, system_clock, uniform_duration_source
from navassist.core.session import DialogueSession
from navassist.core.types import (
    AWAITING_STAGES,
    ChatResponse,
    Message,
    SessionSnapshot,
    Stage,
)

CATALOG_PATH = os.getenv("CATALOG_PATH")
TRIP_MIN_MINUTES = int(os.getenv("TRIP_MIN_MINUTES", "30"))
TRIP_MAX_MINUTES = int(os.getenv("TRIP_MAX_MINUTES", "90"))
WEATHER_CONDITION = os.getenv("WEATHER_CONDITION", "getting dark")

RESET_MESSAGE = "Okay, I've reset this conversation. Where would you like to go?"


class AssistantPipeline:
    """Routes chat messages to per-session dialogues.

    Turns for one session id are handled one at a time, in arrival order;
    different sessions run independently.
    """

    def __init__(self, catalog: Optional[PlaceCatalog] = None, clock: Clock = system_clock) -> None:
        self._loggers: Dict[str, SessionLogger] = {}
        self._sessions: Dict[str, DialogueSession] = {}
        self._session_locks: Dict[str, threading.Lock] = {}
        self._lock = threading.Lock()
        self.catalog = catalog or (load_catalog(CATALOG_PATH) if CATALOG_PATH else DEFAULT_CATALOG)
        self.clock = clock

    def _get_logger(self, session_id: str) -> SessionLogger:
        if session_id not in self._loggers:
            self._loggers[session_id] = SessionLogger(session_id)
        return self._loggers[session_id]

    def _get_session(self, session_id: str) -> DialogueSession:
        with self._lock:
            session = self._sessions.get(session_id)
            if not session:
                session = DialogueSession(
                    self._get_logger(session_id),
                    catalog=self.catalog,
                    clock=self.clock,
                    durations=uniform_duration_source(TRIP_MIN_MINUTES, TRIP_MAX_MINUTES),
                    weather=fixed_weather(WEATHER_CONDITION),
                )
                self._sessions[session_id] = session
                self._session_locks[session_id] = threading.Lock()
            return session

    def _is_reset(self, text: str) -> bool:
        return bool(re.search(r"\b(cancel|never mind|reset|start over)\b", text, re.I))

    def has_session(self, session_id: str) -> bool:
        return session_id in self._sessions

    def _snapshot(self, session_id: str, session: DialogueSession) -> SessionSnapshot:
        return SessionSnapshot(
            session_id=session_id,
            context=session.context.model_copy(),
            preferences=session.preferences.model_copy(),
        )

    def snapshot(self, session_id: str) -> SessionSnapshot:
        session = self._get_session(session_id)
        with self._session_locks[session_id]:
            return self._snapshot(session_id, session)

    def reset(self, session_id: str) -> SessionSnapshot:
        session = self._get_session(session_id)
        with self._session_locks[session_id]:
            session.reset()
            return self._snapshot(session_id, session)

    def process(self, user_message: str, session_id: str | None = None) -> ChatResponse:
        sid = session_id or str(uuid.uuid4())
        session = self._get_session(sid)
        with self._session_locks[sid]:
            if self._is_reset(user_message):
                return self._reset_turn(sid, session, user_message)
            turn = session.handle(user_message)
            return ChatResponse(
                session_id=sid,
                messages=[
                    Message(role="user", content=user_message),
                    Message(role="assistant", content=turn.response),
                ],
                stage=turn.stage,
                awaiting_user=turn.stage in AWAITING_STAGES,
                intent=turn.intent,
                error=turn.error,
                destination=session.context.destination,
                trip_duration=session.context.current_trip_duration,
                preferences=session.preferences.model_copy(),
            )

    def _reset_turn(self, sid: str, session: DialogueSession, user_message: str) -> ChatResponse:
        logger = self._get_logger(sid)
        logger.user_message(user_message)
        session.reset()
        logger.assistant_message(RESET_MESSAGE)
        return ChatResponse(
            session_id=sid,
            messages=[
                Message(role="user", content=user_message),
                Message(role="assistant", content=RESET_MESSAGE),
            ],
            stage=Stage.idle,
            awaiting_user=False,
        )
