"""WS /api/sessions/ws — live canvas session: events in, shapes/activity/observations out."""

from __future__ import annotations

import asyncio
import json
import logging
import uuid
from typing import Any

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from canvas_observer.dependencies import get_analyzer, get_observer_config
from canvas_observer.engine.config import ObserverConfig
from canvas_observer.engine.observation_queue import Analyzer
from canvas_observer.engine.session import CanvasSession
from canvas_observer.models.analysis import Observation
from canvas_observer.models.requests import StrokeModel
from canvas_observer.models.responses import ShapeModel

logger = logging.getLogger(__name__)

router = APIRouter()


class SessionConnection:
    """Routes incoming WebSocket messages to one CanvasSession."""

    def __init__(self, websocket: WebSocket, session: CanvasSession) -> None:
        self.websocket = websocket
        self.session = session
        self._tasks: set[asyncio.Task] = set()

        session.on_activity_change(self._on_activity_change)
        session.on_result(self._on_observation)

    async def on_connect(self) -> None:
        await self.send({"type": "connected", "session_id": self.session.session_id})

    async def handle_message(self, data: dict[str, Any]) -> None:
        msg_type = data.get("type")
        try:
            if msg_type in ("session_start", "problem_image"):
                if not self.session.update_problem_image(data.get("problem_image", "")):
                    await self.send({"type": "error", "message": "Invalid problem image, keeping the previous one"})
            elif msg_type == "stroke_end":
                stroke = StrokeModel.model_validate(data["stroke"]).to_stroke()
                shape = self.session.stroke_end(stroke, data.get("canvas_image", ""))
                await self.send({
                    "type": "shape",
                    "stroke_id": stroke.id,
                    "shape": ShapeModel.from_shape(shape).model_dump(mode="json") if shape else None,
                })
            elif msg_type == "tool_change":
                self.session.tool_change(str(data["tool"]), data.get("canvas_image", ""))
            elif msg_type == "manipulative_move":
                self.session.manipulative_move(
                    str(data["id"]),
                    float(data["x"]),
                    float(data["y"]),
                    str(data["manipulative_type"]),
                    data.get("canvas_image", ""),
                )
            elif msg_type == "clear":
                self.session.clear(data.get("canvas_image", ""))
            elif msg_type == "force_update":
                self.session.force_update(data.get("canvas_image", ""))
            else:
                await self.send({"type": "error", "message": f"Unknown message type: {msg_type}"})
        except (KeyError, TypeError, ValueError, ValidationError) as e:
            logger.debug("Malformed %s message: %s", msg_type, e)
            await self.send({"type": "error", "message": f"Malformed {msg_type} message: {e}"})

    async def cleanup(self) -> None:
        await self.session.dispose()
        for task in list(self._tasks):
            task.cancel()

    def _on_activity_change(self, active: bool) -> None:
        # Called from timer callbacks; sending has to be scheduled
        task = asyncio.get_running_loop().create_task(self.send({"type": "activity", "active": active}))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _on_observation(self, observation: Observation) -> None:
        await self.send({"type": "observation", **observation.model_dump(mode="json")})

    async def send(self, payload: dict[str, Any]) -> None:
        try:
            await self.websocket.send_json(payload)
        except (WebSocketDisconnect, RuntimeError) as e:
            # Socket already closed
            logger.debug("Dropped %s message for closed socket: %s", payload.get("type"), e)


@router.websocket("/sessions/ws")
async def session_ws(
    websocket: WebSocket,
    analyzer: Analyzer = Depends(get_analyzer),
    config: ObserverConfig = Depends(get_observer_config),
) -> None:
    await websocket.accept()
    session_id = uuid.uuid4().hex[:12]
    session = CanvasSession(analyzer, config=config, session_id=session_id)
    connection = SessionConnection(websocket, session)
    sessions = websocket.app.state.sessions
    sessions[session_id] = session

    try:
        await connection.on_connect()
        while True:
            raw = await websocket.receive_text()
            try:
                data = json.loads(raw)
            except json.JSONDecodeError:
                data = None
            if not isinstance(data, dict):
                await connection.send({"type": "error", "message": "Expected a JSON object"})
                continue
            await connection.handle_message(data)
    except WebSocketDisconnect:
        logger.info("Session %s disconnected", session_id)
    finally:
        sessions.pop(session_id, None)
        await connection.cleanup()
