import itertools
from typing import Iterable, Optional

import pytest

from navassist.core.logger import SessionLogger
from navassist.core.ports import RecordingSpeaker
from navassist.core.session import DialogueSession


@pytest.fixture(autouse=True)
def isolated_logs(tmp_path, monkeypatch):
    logs_dir = tmp_path / "logs"
    monkeypatch.setenv("LOGS_DIR", str(logs_dir))
    return logs_dir


@pytest.fixture
def make_session(tmp_path):
    counter = itertools.count()

    def factory(
        transcripts: Optional[Iterable[str]] = None,
        hour: int = 19,
        duration: int = 45,
        **kwargs,
    ) -> DialogueSession:
        kwargs.setdefault("speaker", RecordingSpeaker())
        kwargs.setdefault("clock", lambda: hour)
        kwargs.setdefault("durations", lambda: duration)
        return DialogueSession(
            SessionLogger(f"test-{next(counter)}", base_dir=str(tmp_path / "session-logs")),
            transcripts=transcripts,
            **kwargs,
        )

    return factory
