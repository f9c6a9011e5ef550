"""Pydantic models for API request/response schemas."""

from __future__ import annotations

import enum

from pydantic import BaseModel, Field


class SessionStatus(str, enum.Enum):
    """Lifecycle states for a play session."""

    ACTIVE = "active"
    FINISHED = "finished"


class CreateSessionRequest(BaseModel):
    """Request body for POST /sessions."""

    cols: int = Field(default=32, ge=1, le=200)
    rows: int = Field(default=24, ge=1, le=200)
    cell_size: int = Field(default=20, ge=1, le=100)
    num_apples: int = Field(default=1, ge=0)
    min_speed_frames: int = Field(default=8, ge=0, le=1000)
    max_speed_frames: int = Field(default=1, ge=0, le=1000)
    key_buffer_size: int = Field(default=3, ge=1, le=32)
    tick_rate_ms: int = Field(default=25, ge=10, le=2000)
    seed: int | None = None


class SessionSummary(BaseModel):
    """Compact session info for list endpoints."""

    session_id: str
    status: SessionStatus
    connected: bool
    width: int
    height: int
    tick_rate_ms: int


class CreateSessionResponse(SessionSummary):
    """Response for a newly created session, including its play token."""

    token: str


class ErrorResponse(BaseModel):
    """Standard error envelope."""

    detail: str
