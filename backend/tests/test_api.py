from fastapi.testclient import TestClient
from navassist.main import app

client = TestClient(app)


def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json().get("status") == "ok"


def test_chat_endpoint():
    r = client.post("/chat", json={"message": "take me to the airport"})
    assert r.status_code == 200
    data = r.json()
    assert "session_id" in data
    assert data["stage"] == "await_time"
    assert data["destination"] == "the airport"
    assert data["messages"][-1]["content"].startswith("I'll help you get to the airport.")


def test_chat_invalid_payload_returns_422():
    r = client.post("/chat", json={})
    assert r.status_code == 422


def test_session_snapshot_and_reset():
    sid = client.post("/chat", json={"message": "drive to the pier"}).json()["session_id"]
    client.post("/chat", json={"message": "no specific time", "session_id": sid})

    snap = client.get(f"/sessions/{sid}")
    assert snap.status_code == 200
    assert snap.json()["context"]["stage"] == "await_weather"

    reset = client.delete(f"/sessions/{sid}")
    assert reset.status_code == 200
    assert reset.json()["context"]["stage"] == "idle"
    assert reset.json()["context"]["destination"] is None


def test_unknown_session_returns_404():
    assert client.get("/sessions/does-not-exist").status_code == 404


def test_reset_unknown_session_returns_404(isolated_logs):
    assert client.delete("/sessions/never-created").status_code == 404
    assert not (isolated_logs / "session_never-created.jsonl").exists()
