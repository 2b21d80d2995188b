import json

import pytest

from navassist.core.catalog import load_catalog
from navassist.core.logger import SessionLogger
from navassist.core.pipeline import AssistantPipeline
from navassist.core.ports import RecordingSpeaker, SpeechChannel, uniform_duration_source


def read_events(path):
    return [json.loads(line) for line in path.read_text(encoding="utf-8").strip().splitlines()]


def test_logs_are_written_per_session(isolated_logs):
    pipe = AssistantPipeline()
    r = pipe.process("take me to the airport")

    log_file = isolated_logs / f"session_{r.session_id}.jsonl"
    assert log_file.exists()
    events = [rec["event"] for rec in read_events(log_file)]
    assert "user_message" in events
    assert "agent_step" in events
    assert "state_transition" in events
    assert "assistant_message" in events


def test_logger_base_dir_overrides_env(tmp_path):
    logger = SessionLogger("explicit", base_dir=str(tmp_path / "custom"))
    logger.info("hello", stage="idle")
    records = read_events(tmp_path / "custom" / "session_explicit.jsonl")
    assert records[0]["event"] == "info"
    assert records[0]["payload"] == {"message": "hello", "stage": "idle"}
    assert records[0]["ts"].endswith("Z")


def test_speech_channel_supersedes_pending_reply(tmp_path):
    speaker = RecordingSpeaker()
    channel = SpeechChannel(speaker, SessionLogger("speech", base_dir=str(tmp_path)))

    channel.say("first")
    channel.say("second")
    assert speaker.cancelled == 1
    assert channel.active == "second"

    channel.ended()
    channel.say("third")
    assert speaker.cancelled == 1
    assert speaker.spoken == ["first", "second", "third"]


def test_speech_channel_surfaces_errors(tmp_path):
    logger = SessionLogger("speech-error", base_dir=str(tmp_path))
    channel = SpeechChannel(RecordingSpeaker(), logger)
    channel.say("hello")
    channel.error("synthesis failed")
    assert channel.last_error == "synthesis failed"
    assert channel.active is None
    kinds = [r["payload"]["kind"] for r in read_events(tmp_path / "session_speech-error.jsonl")]
    assert kinds == ["error"]


def test_uniform_duration_source_range():
    draw = uniform_duration_source(30, 90)
    assert all(30 <= draw() < 90 for _ in range(200))


def test_uniform_duration_source_rejects_empty_range():
    with pytest.raises(ValueError):
        uniform_duration_source(60, 60)


def test_load_catalog(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(
        json.dumps(
            {
                "attractions": [
                    {
                        "name": "Harbor Walk",
                        "category": "nature",
                        "rating": 4.2,
                        "busyness": {"morning": 10, "afternoon": 50, "evening": 70},
                        "time_needed": 45,
                        "location": [40.7, -74.0],
                    }
                ],
                "restaurants": [],
            }
        ),
        encoding="utf-8",
    )
    catalog = load_catalog(path)
    [walk] = catalog.attractions()
    assert walk.name == "Harbor Walk"
    assert walk.duration == 45
    assert catalog.restaurants() == []


def test_catalog_path_env_is_used(tmp_path, monkeypatch):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps({"attractions": [], "restaurants": []}), encoding="utf-8")
    import navassist.core.pipeline as pipeline_mod

    monkeypatch.setattr(pipeline_mod, "CATALOG_PATH", str(path))
    r = AssistantPipeline(clock=lambda: 12).process("plan my day")
    assert r.error == "empty_result_set"


@pytest.mark.parametrize(
    "content",
    [
        "not json",
        "[1, 2, 3]",
        json.dumps({"attractions": [{"name": "Nowhere", "category": "park", "rating": 9}]}),
    ],
)
def test_load_catalog_rejects_bad_files(tmp_path, content):
    path = tmp_path / "catalog.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ValueError):
        load_catalog(path)
