import threading
import time

from navassist.core.catalog import DEFAULT_CATALOG
from navassist.core.pipeline import RESET_MESSAGE, AssistantPipeline
from navassist.core.types import ErrorKind, Stage


def make_pipeline():
    return AssistantPipeline(catalog=DEFAULT_CATALOG, clock=lambda: 18)


def test_pipeline_full_trip_over_several_turns():
    pipe = make_pipeline()

    r1 = pipe.process("Take me to Central Park")
    assert r1.stage == Stage.await_time
    assert r1.awaiting_user is True
    assert r1.destination == "central park"
    sid = r1.session_id

    r2 = pipe.process("be there by 6 pm", session_id=sid)
    assert r2.stage == Stage.await_weather
    assert r2.preferences.arrival_time == "6 pm"

    r3 = pipe.process("yeah, well-lit roads", session_id=sid)
    assert r3.stage == Stage.await_breaks
    assert r3.preferences.prefer_well_lit is True
    assert 30 <= r3.trip_duration < 90

    r4 = pipe.process("no breaks", session_id=sid)
    assert r4.stage == Stage.await_confirmation

    r5 = pipe.process("start", session_id=sid)
    assert r5.stage == Stage.navigating
    assert r5.awaiting_user is False
    assert r5.trip_duration == r3.trip_duration
    assert [m.role for m in r5.messages] == ["user", "assistant"]


def test_pipeline_unrecognized_turn_reports_error():
    pipe = make_pipeline()
    r = pipe.process("sing me a song")
    assert r.stage == Stage.idle
    assert r.error == ErrorKind.no_recognized_intent
    assert r.awaiting_user is False


def test_pipeline_recommendation_in_one_turn():
    r = make_pipeline().process("find a place for lunch")
    assert r.stage == Stage.idle
    assert "Green Leaf" in r.messages[-1].content


def test_cancel_resets_session():
    pipe = make_pipeline()
    r1 = pipe.process("drive to the stadium")
    sid = r1.session_id
    r2 = pipe.process("never mind", session_id=sid)
    assert r2.stage == Stage.idle
    assert r2.messages[-1].content == RESET_MESSAGE
    assert pipe.snapshot(sid).context.destination is None

    r3 = pipe.process("drive to the harbor", session_id=sid)
    assert r3.destination == "the harbor"


def test_sessions_do_not_share_state():
    pipe = make_pipeline()
    a = pipe.process("take me to the airport")
    b = pipe.process("take me to the library")
    assert a.session_id != b.session_id
    assert pipe.snapshot(a.session_id).context.destination == "the airport"
    assert pipe.snapshot(b.session_id).context.destination == "the library"


def test_reset_by_id():
    pipe = make_pipeline()
    sid = pipe.process("take me to the airport").session_id
    snap = pipe.reset(sid)
    assert snap.context.stage == Stage.idle
    assert snap.context.destination is None


def test_turns_for_one_session_run_in_order():
    pipe = make_pipeline()
    sid = pipe.process("take me to the airport").session_id
    pipe.process("no time", session_id=sid)

    def slow_duration():
        time.sleep(0.05)
        return 45

    pipe._get_session(sid).durations = slow_duration
    results = {}

    def send(name, text):
        results[name] = pipe.process(text, session_id=sid)

    threads = [threading.Thread(target=send, args=args) for args in (("a", "yes"), ("b", "no"))]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    # Whichever turn runs second must see the stage the first one left behind
    assert {r.stage for r in results.values()} == {Stage.await_breaks, Stage.await_confirmation}
    assert pipe.snapshot(sid).context.stage == Stage.await_confirmation


def test_concurrent_first_turns_share_one_session():
    pipe = make_pipeline()
    barrier = threading.Barrier(8)
    sessions = []

    def fetch():
        barrier.wait()
        sessions.append(pipe._get_session("shared"))

    threads = [threading.Thread(target=fetch) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len({id(s) for s in sessions}) == 1
