from __future__ import annotations

import glob
import json
import os
from collections import Counter
from datetime import datetime
from typing import Any, Dict, List, Optional

import streamlit as st

EVENTS = (
    "user_message",
    "assistant_message",
    "state_transition",
    "agent_step",
    "speaker_event",
    "info",
)


def get_logs_dir() -> str:
    # Same override as the backend logger; default to backend/logs next to this file
    env_dir = os.getenv("LOGS_DIR")
    if env_dir:
        return env_dir
    here = os.path.dirname(os.path.abspath(__file__))
    return os.path.join(here, "backend", "logs")


def list_session_files(logs_dir: str) -> List[str]:
    files = glob.glob(os.path.join(logs_dir, "session_*.jsonl"))
    files.sort(key=lambda p: os.path.getmtime(p), reverse=True)
    return files


def read_jsonl(path: str) -> List[Dict[str, Any]]:
    records: List[Dict[str, Any]] = []
    try:
        with open(path, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                try:
                    records.append(json.loads(line))
                except json.JSONDecodeError:
                    # A line still being written by the backend
                    continue
    except FileNotFoundError:
        return []
    return records


def format_ts(ts: Optional[str]) -> str:
    if not ts:
        return ""
    try:
        return datetime.fromisoformat(ts.replace("Z", "+00:00")).strftime("%Y-%m-%d %H:%M:%S")
    except ValueError:
        return ts


def stage_path(records: List[Dict[str, Any]]) -> List[str]:
    """Stages visited in order, starting from the first transition's source."""
    path: List[str] = []
    for rec in records:
        if rec.get("event") != "state_transition":
            continue
        payload = rec.get("payload", {})
        if not path:
            path.append(payload.get("from", "idle"))
        path.append(payload.get("to", ""))
    return path


def unrecognized_turns(records: List[Dict[str, Any]]) -> int:
    count = 0
    for rec in records:
        payload = rec.get("payload", {})
        if rec.get("event") == "agent_step" and payload.get("name") == "responder":
            if payload.get("input", {}).get("template") in ("reprompt", "help"):
                count += 1
    return count


def event_palette(event: str) -> str:
    return {
        "user_message": "#1f6feb",
        "assistant_message": "#3fb950",
        "agent_step": "#9e6ffe",
        "state_transition": "#ffa657",
        "speaker_event": "#d29922",
        "info": "#8b949e",
    }.get(event, "#8b949e")


def render_event(rec: Dict[str, Any]) -> None:
    ev = rec.get("event")
    payload = rec.get("payload", {})

    with st.container():
        st.markdown(f"<div style='color:{event_palette(ev)};font-weight:600'>{ev}</div>", unsafe_allow_html=True)
        if rec.get("ts"):
            st.caption(format_ts(rec.get("ts")))

        if ev == "user_message":
            st.markdown(f"Driver: {payload.get('message', '')}")
        elif ev == "assistant_message":
            st.markdown(f"Assistant: {payload.get('message', '')}")
        elif ev == "state_transition":
            st.markdown(f"Stage: {payload.get('from')} → {payload.get('to')}")
        elif ev == "speaker_event":
            reason = payload.get("reason")
            st.markdown(f"Speaker {payload.get('kind')}" + (f": {reason}" if reason else ""))
        elif ev == "agent_step":
            with st.expander(f"Step: {payload.get('name', 'agent')}"):
                st.write("Input:")
                st.json(payload.get("input", {}), expanded=False)
                st.write("Output:")
                st.json(payload.get("output", {}), expanded=False)
        else:
            st.json(payload, expanded=False)


def main() -> None:
    st.set_page_config(page_title="NavAssist Logs", layout="wide")
    st.title("NavAssist – Session Logs")

    logs_dir = get_logs_dir()
    st.sidebar.header("Controls")
    st.sidebar.write(f"Logs dir: {logs_dir}")

    files = list_session_files(logs_dir)
    if not files:
        st.info("No session logs found yet. Start a conversation with the backend to generate logs.")
        return

    labels = [os.path.basename(p) for p in files]
    choice = st.sidebar.selectbox("Session", options=list(range(len(files))), format_func=lambda i: labels[i], index=0)
    path = files[choice]

    st.sidebar.subheader("Event filters")
    filters = {ev: st.sidebar.checkbox(ev, value=ev not in ("info", "speaker_event")) for ev in EVENTS}

    records = read_jsonl(path)
    st.subheader(os.path.basename(path))
    if not records:
        st.warning("Log file is empty.")
        return

    counts = Counter(rec.get("event") for rec in records)
    cols = st.columns(3)
    cols[0].metric("Utterances", counts.get("user_message", 0))
    cols[1].metric("Re-prompts", unrecognized_turns(records))
    cols[2].metric("Stage changes", counts.get("state_transition", 0))
    path_taken = stage_path(records)
    if path_taken:
        st.caption(" → ".join(path_taken))

    for rec in records:
        if not filters.get(rec.get("event"), False):
            continue
        render_event(rec)
        st.divider()

    with open(path, "rb") as f:
        st.download_button("Download log file", data=f, file_name=os.path.basename(path), mime="text/plain")


if __name__ == "__main__":
    main()
