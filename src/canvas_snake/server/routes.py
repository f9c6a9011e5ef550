"""REST API route handlers for session lifecycle management."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from canvas_snake.config import EngineConfig
from canvas_snake.server.models import (
    CreateSessionRequest,
    CreateSessionResponse,
    ErrorResponse,
    SessionSummary,
)
from canvas_snake.server.session_manager import RateLimitExceeded

router = APIRouter(prefix="/sessions", tags=["sessions"])


def _get_manager(request: Request):
    return request.app.state.session_manager


@router.post(
    "",
    status_code=201,
    responses={
        422: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
    },
)
async def create_session(
    body: CreateSessionRequest, request: Request,
) -> CreateSessionResponse:
    """Create a session and start ticking it."""
    manager = _get_manager(request)
    client_ip = request.client.host if request.client else "unknown"
    try:
        config = EngineConfig(**body.model_dump())
        session = manager.create_session(config, client_ip=client_ip)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except RateLimitExceeded as exc:
        raise HTTPException(status_code=429, detail=str(exc)) from exc
    return CreateSessionResponse(
        **session.summary().model_dump(), token=session.token,
    )


@router.get("")
async def list_sessions(request: Request) -> list[SessionSummary]:
    """List running sessions."""
    return _get_manager(request).list_sessions()


@router.get("/{session_id}", responses={404: {"model": ErrorResponse}})
async def get_session(session_id: str, request: Request) -> dict:
    """Get session metadata and the current engine state."""
    manager = _get_manager(request)
    session = manager.get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found.")
    result: dict = session.summary().model_dump(mode="json")
    result["config"] = session.config.to_dict()
    result["state"] = session.engine.get_state()
    return result


@router.delete(
    "/{session_id}",
    status_code=200,
    responses={
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)
async def stop_session(session_id: str, token: str, request: Request) -> dict:
    """Stop a session (token holder only)."""
    manager = _get_manager(request)
    try:
        await manager.stop_session(session_id, token)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except PermissionError as exc:
        raise HTTPException(status_code=403, detail=str(exc)) from exc
    return {"status": "stopped", "session_id": session_id}
