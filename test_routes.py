"""Tests for the HTTP surface, using the Flask test client."""

from dataclasses import replace

import pytest

import config
from flask_app import app
from state_store import store, StateStore, SESSION_KEY
from calculator_state import AppState


@pytest.fixture
def client():
    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client


def act(client, action_type, value=None):
    return client.post("/api/action", json={"type": action_type, "value": value})


def session_id(client):
    with client.session_transaction() as sess:
        return sess[SESSION_KEY]


def test_landing_page(client):
    response = client.get("/")
    assert response.status_code == 200
    assert b"SciCalc" in response.data


def test_new_session_starts_clean(client):
    data = client.get("/api/state").get_json()
    assert data["display"] == "0"
    assert data["history"] == []
    assert data["angle_unit"] == config.DEFAULT_ANGLE_UNIT


def test_actions_evaluate_expression(client):
    for ch in "2+3×4":
        act(client, "input", ch)
    data = act(client, "evaluate").get_json()
    assert data["display"] == "14"
    assert data["equation"] == "2+3×4 ="
    assert len(data["history"]) == 1
    assert data["history"][0]["kind"] == "arithmetic"


def test_sessions_are_isolated(client):
    act(client, "input", "9")
    with app.test_client() as other:
        assert other.get("/api/state").get_json()["display"] == "0"
    assert client.get("/api/state").get_json()["display"] == "9"


def test_invalid_action(client):
    assert act(client, "explode").status_code == 400
    assert act(client, "set_angle_unit", "grad").status_code == 400
    assert client.post("/api/action", json={}).status_code == 400


def test_internal_actions_are_rejected(client):
    assert act(client, "advanced_started").status_code == 400
    assert act(client, "advanced_settled", {"input": "x", "output": "y"}).status_code == 400


def test_keyboard(client):
    for key in ["2", "*", "3", "Enter"]:
        data = client.post("/api/key", json={"key": key}).get_json()
    assert data["display"] == "6"
    assert data["equation"] == "2×3 ="

    data = client.post("/api/key", json={"key": "q"}).get_json()
    assert data["ignored"] is True
    assert data["display"] == "6"


def test_stateless_calculate(client):
    response = client.post("/api/calculate", json={"expression": "sin(30)+1"})
    assert response.get_json() == {"result": "1.5", "equation": "sin(30)+1 ="}

    response = client.post("/api/calculate", json={"expression": "Ans×2", "last_answer": "4"})
    assert response.get_json()["result"] == "8"

    assert client.post("/api/calculate", json={"expression": "5÷0"}).status_code == 400
    assert client.post("/api/calculate", json={"expression": ""}).status_code == 400
    assert client.post("/api/calculate", json={"expression": "1", "angle_unit": "x"}).status_code == 400
    # stateless evaluation never touches the session log
    assert client.get("/api/history").get_json()["history"] == []


def test_stateless_calculate_uses_configured_angle_unit(client, monkeypatch):
    monkeypatch.setattr(config, "DEFAULT_ANGLE_UNIT", "rad")
    response = client.post("/api/calculate", json={"expression": "cos(π)"})
    assert response.get_json()["result"] == "-1"


def test_history_clear(client):
    act(client, "input", "1")
    act(client, "evaluate")
    assert len(client.get("/api/history").get_json()["history"]) == 1
    data = client.post("/api/history/clear").get_json()
    assert data["history"] == []


def test_advanced_success(client, monkeypatch):
    seen = {}

    def fake_generate(text, image):
        seen.update(text=text, image=image)
        return "**x = 2**"

    monkeypatch.setattr("blueprints.advanced.routes.generate_advanced_response", fake_generate)
    act(client, "open_advanced")

    data = client.post("/api/advanced", json={"text": " solve 2x=4 "}).get_json()

    assert seen == {"text": "solve 2x=4", "image": None}
    assert data["processing"] is False
    assert data["advanced_open"] is False
    assert data["log_open"] is True
    assert data["history"][0]["kind"] == "advanced"
    assert data["history"][0]["input"] == "solve 2x=4"
    assert data["history"][0]["output"] == "**x = 2**"


def test_advanced_image_only(client, monkeypatch):
    monkeypatch.setattr("blueprints.advanced.routes.generate_advanced_response", lambda text, image: "A triangle")
    data = client.post("/api/advanced", json={"image": "data:image/png;base64,AAAA"}).get_json()
    assert data["history"][0]["input"] == "[Image Input]"


def test_advanced_unexpected_failure_is_logged(client, monkeypatch):
    def boom(text, image):
        raise RuntimeError("socket closed")

    monkeypatch.setattr("blueprints.advanced.routes.generate_advanced_response", boom)
    data = client.post("/api/advanced", json={"text": "hi"}).get_json()
    record = data["history"][0]
    assert record["input"] == config.CONNECTION_FAILED_INPUT
    assert record["output"] == config.CONNECTION_FAILED_MESSAGE
    assert data["processing"] is False


def test_advanced_rejects_concurrent_submit(client, monkeypatch):
    monkeypatch.setattr("blueprints.advanced.routes.generate_advanced_response", lambda text, image: "ok")
    client.get("/api/state")
    sid = session_id(client)
    store.update(sid, lambda state: replace(state, processing=True))

    response = client.post("/api/advanced", json={"text": "hi"})

    assert response.status_code == 409
    assert store.get(sid).log == ()


def test_advanced_image_validation(client, monkeypatch):
    monkeypatch.setattr(config, "MAX_IMAGE_SIZE", 2)
    response = client.post("/api/advanced", json={"image": "data:image/png;base64,AAAAAAAA"})
    assert response.status_code == 400
    assert client.post("/api/advanced", json={"image": "data:image/png;base64,A"}).status_code == 400
    assert client.post("/api/advanced", json={"image": 42}).status_code == 400


def test_health(client):
    data = client.get("/health").get_json()
    assert data["status"] == "healthy"
    assert data["provider"] == config.PROVIDER


def test_state_store_evicts_least_recently_used():
    small = StateStore(max_sessions=2)
    small.update("a", lambda s: replace(s, display="1"))
    small.update("b", lambda s: replace(s, display="2"))
    small.get("a")
    small.update("c", lambda s: replace(s, display="3"))
    assert len(small) == 2
    assert small.get("a").display == "1"
    assert small.get("b") == AppState.default()
