"""Tests for API endpoints (no LLM calls)."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from canvas_observer.dependencies import get_analyzer
from canvas_observer.main import app
from canvas_observer.models.analysis import AnalysisResult
from tests.conftest import png_b64


client = TestClient(app)


def _points(pairs):
    return [{"x": x, "y": y} for x, y in pairs]


LINE_STROKE = {"id": "l1", "points": _points([(i * 10, i * 5) for i in range(10)])}
ERASER_STROKE = {**LINE_STROKE, "id": "e1", "tool": "eraser"}


@pytest.fixture
def analyzer_calls():
    calls = []

    async def analyzer(update):
        calls.append(update)
        return AnalysisResult(analysis={"context": update.context}, text="looks good")

    app.dependency_overrides[get_analyzer] = lambda: analyzer
    yield calls
    app.dependency_overrides.pop(get_analyzer, None)


def test_health():
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["active_sessions"] == 0


def test_classify_line():
    response = client.post("/api/classify", json={"stroke": LINE_STROKE})
    assert response.status_code == 200
    shape = response.json()["shape"]
    assert shape["type"] == "line"
    assert shape["confidence"] >= 0.9
    assert shape["stroke_id"] == "l1"
    assert shape["bounds"]["width"] == 90


def test_classify_eraser_is_null():
    response = client.post("/api/classify", json={"stroke": ERASER_STROKE})
    assert response.status_code == 200
    assert response.json()["shape"] is None


def test_classify_rejects_empty_stroke():
    response = client.post("/api/classify", json={"stroke": {"id": "x", "points": []}})
    assert response.status_code == 422


def test_drawing_analyze():
    strokes = [LINE_STROKE, {**LINE_STROKE, "id": "l2", "points": _points([(i * 10, 100) for i in range(10)])}]
    response = client.post("/api/drawing/analyze", json={"strokes": strokes})
    assert response.status_code == 200
    data = response.json()
    assert len(data["shapes"]) == 2
    assert "2 lines detected" in data["patterns"]
    assert data["smart_suggestions"][0]["manipulative"] == "number-line"


def _receive_until(ws, msg_type, limit=10):
    seen = []
    for _ in range(limit):
        message = ws.receive_json()
        seen.append(message)
        if message["type"] == msg_type:
            return message, seen
    raise AssertionError(f"no {msg_type} message in {seen}")


def test_session_stroke_produces_shape_and_observation(analyzer_calls):
    with client.websocket_connect("/api/sessions/ws") as ws:
        hello = ws.receive_json()
        assert hello["type"] == "connected"
        assert hello["session_id"]

        ws.send_json({"type": "session_start", "problem_image": png_b64(200, 100)})
        ws.send_json({"type": "stroke_end", "stroke": LINE_STROKE, "canvas_image": png_b64()})

        observation, seen = _receive_until(ws, "observation")
        assert observation["context"] == "stroke_completed"
        assert observation["analysis"] == {"context": "stroke_completed"}
        assert observation["text"] == "looks good"

        shapes = [m for m in seen if m["type"] == "shape"]
        assert shapes and shapes[0]["shape"]["type"] == "line"

    update = analyzer_calls[0]
    assert update.quality == 0.6
    assert update.canvas_image.startswith("data:image/jpeg;base64,")
    assert update.problem_image.startswith("data:image/jpeg;base64,")


def test_session_clear_sends_high_fidelity_update(analyzer_calls):
    with client.websocket_connect("/api/sessions/ws") as ws:
        ws.receive_json()
        ws.send_json({"type": "clear", "canvas_image": png_b64()})
        observation, _ = _receive_until(ws, "observation")
        assert observation["context"] == "canvas_cleared"

    assert analyzer_calls[0].quality == 0.9


def test_session_rejects_bad_messages(analyzer_calls):
    with client.websocket_connect("/api/sessions/ws") as ws:
        ws.receive_json()

        ws.send_json({"type": "teleport"})
        assert ws.receive_json() == {"type": "error", "message": "Unknown message type: teleport"}

        ws.send_json({"type": "stroke_end"})
        error = ws.receive_json()
        assert error["type"] == "error"
        assert error["message"].startswith("Malformed stroke_end message")

        ws.send_text("not json")
        assert ws.receive_json()["type"] == "error"

    assert analyzer_calls == []


def test_session_survives_non_finite_manipulative_position(analyzer_calls):
    with client.websocket_connect("/api/sessions/ws") as ws:
        ws.receive_json()

        ws.send_text('{"type": "manipulative_move", "id": "m1", "x": Infinity, "y": 0, "manipulative_type": "bar"}')
        error = ws.receive_json()
        assert error["type"] == "error"
        assert error["message"].startswith("Malformed manipulative_move message")

        ws.send_json({"type": "manipulative_move", "id": "m1", "x": "inf", "y": 0, "manipulative_type": "bar"})
        assert ws.receive_json()["type"] == "error"

        ws.send_json({"type": "clear", "canvas_image": png_b64()})
        observation, _ = _receive_until(ws, "observation")
        assert observation["context"] == "canvas_cleared"


def test_bad_problem_image_does_not_block_canvas_updates(analyzer_calls):
    with client.websocket_connect("/api/sessions/ws") as ws:
        ws.receive_json()

        ws.send_json({"type": "session_start", "problem_image": "not-an-image"})
        error = ws.receive_json()
        assert error["type"] == "error"
        assert "problem image" in error["message"]

        ws.send_json({"type": "clear", "canvas_image": png_b64()})
        observation, _ = _receive_until(ws, "observation")
        assert observation["context"] == "canvas_cleared"

    update = analyzer_calls[0]
    assert update.problem_image == ""
    assert update.canvas_image.startswith("data:image/jpeg;base64,")
