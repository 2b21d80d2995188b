import json

import streamlit_app
from navassist.core.logger import SessionLogger


def write_log(path, records):
    path.write_text("\n".join(json.dumps(r) for r in records) + "\n{truncated", encoding="utf-8")


def test_read_jsonl_skips_partial_lines(tmp_path):
    path = tmp_path / "session_x.jsonl"
    write_log(path, [{"event": "user_message", "payload": {"message": "hi"}}])
    assert streamlit_app.read_jsonl(str(path)) == [{"event": "user_message", "payload": {"message": "hi"}}]
    assert streamlit_app.read_jsonl(str(tmp_path / "missing.jsonl")) == []


def test_stage_path_and_reprompt_count(tmp_path):
    records = [
        {"event": "state_transition", "payload": {"from": "idle", "to": "await_time"}},
        {"event": "agent_step", "payload": {"name": "responder", "input": {"template": "reprompt"}}},
        {"event": "state_transition", "payload": {"from": "await_time", "to": "await_weather"}},
        {"event": "agent_step", "payload": {"name": "recommender", "input": {"action": "plan_day"}}},
    ]
    assert streamlit_app.stage_path(records) == ["idle", "await_time", "await_weather"]
    assert streamlit_app.unrecognized_turns(records) == 1


def test_log_files_come_from_logs_dir(isolated_logs):
    SessionLogger("viewer").info("hello")
    assert streamlit_app.get_logs_dir() == str(isolated_logs)
    files = streamlit_app.list_session_files(streamlit_app.get_logs_dir())
    assert [f.rsplit("/", 1)[-1] for f in files] == ["session_viewer.jsonl"]


def test_format_ts():
    assert streamlit_app.format_ts("2026-01-02T03:04:05Z") == "2026-01-02 03:04:05"
    assert streamlit_app.format_ts("garbage") == "garbage"
    assert streamlit_app.format_ts(None) == ""


def test_idle_help_counts_as_unrecognized():
    records = [
        {"event": "agent_step", "payload": {"name": "responder", "input": {"template": "help"}}},
        {"event": "agent_step", "payload": {"name": "responder", "input": {"template": "day_plan"}}},
    ]
    assert streamlit_app.unrecognized_turns(records) == 1
