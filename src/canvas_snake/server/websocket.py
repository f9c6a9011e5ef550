"""WebSocket handler forwarding keys and focus changes into a session."""

from __future__ import annotations

import json
import logging
import time

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from canvas_snake.server.models import SessionStatus
from canvas_snake.server.session_manager import SessionInstance, SessionManager

logger = logging.getLogger(__name__)

ws_router = APIRouter()


def _get_manager(ws: WebSocket) -> SessionManager:
    return ws.app.state.session_manager


async def _dispatch(session: SessionInstance, msg: dict) -> None:
    """Apply one client message to the session's engine."""
    key = msg.get("key")
    focus = msg.get("focus")
    async with session.lock:
        if session.status != SessionStatus.ACTIVE:
            return
        if isinstance(key, str):
            session.engine.handle_key(key)
        if isinstance(focus, bool):
            if focus:
                session.engine.hide_focus_banner()
            else:
                session.engine.show_focus_banner()


@ws_router.websocket("/sessions/{session_id}/play")
async def play(websocket: WebSocket, session_id: str, token: str = "") -> None:
    """Player WebSocket: send keys and focus changes, receive frames."""
    manager = _get_manager(websocket)
    session = manager.get_session(session_id)
    if session is None:
        await websocket.close(code=4004, reason="Session not found.")
        return
    if token != session.token:
        await websocket.close(code=4001, reason="Invalid token.")
        return

    await websocket.accept()

    # Enforce a single active socket per session.
    previous_ws = session.websocket
    if previous_ws is not None and previous_ws is not websocket:
        try:
            await previous_ws.close(code=4008, reason="Replaced by new connection.")
        except Exception:
            logger.warning(
                "Failed closing previous socket for session %s.", session_id,
            )

    session.websocket = websocket
    session.connected = True
    session.idle_since = None
    logger.info("Player connected to session %s.", session_id)

    async with session.lock:
        session.engine.hide_focus_banner()
        frame = manager.current_frame(session)
    await websocket.send_text(frame)

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                msg = json.loads(raw)
            except json.JSONDecodeError:
                continue
            if not isinstance(msg, dict):
                continue
            await _dispatch(session, msg)
    except WebSocketDisconnect:
        logger.info("Player disconnected from session %s.", session_id)
    finally:
        # A newer connection may have replaced this socket while this handler
        # was still shutting down.
        if session.websocket is websocket:
            session.websocket = None
            session.connected = False
            session.idle_since = time.monotonic()
            async with session.lock:
                session.engine.show_focus_banner()
