"""In-memory session registry, lifecycle management, and async tick loops."""

from __future__ import annotations

import asyncio
import json
import logging
import time
import uuid
from dataclasses import dataclass, field

from starlette.websockets import WebSocket, WebSocketState

from canvas_snake.config import EngineConfig
from canvas_snake.engine import SnakeEngine
from canvas_snake.render import RecordingSurface
from canvas_snake.server.models import SessionStatus, SessionSummary

logger = logging.getLogger(__name__)

# Simple rate limit: max sessions created per IP within the window.
_RATE_LIMIT_WINDOW = 60.0  # seconds
_RATE_LIMIT_MAX = 10
_RATE_COMPACT_INTERVAL = 60.0  # seconds between stale-key sweeps
_MAX_FINISHED_SESSIONS = 100
_IDLE_TIMEOUT = 300.0  # seconds without a player before a session ends


class RateLimitExceeded(Exception):
    """Raised when a client creates sessions too quickly."""


@dataclass
class SessionInstance:
    """One engine, its tick loop, and the socket currently playing it."""

    session_id: str
    config: EngineConfig
    token: str
    engine: SnakeEngine
    status: SessionStatus = SessionStatus.ACTIVE
    websocket: WebSocket | None = None
    connected: bool = False
    created_at: float = field(default_factory=time.monotonic)
    finished_at: float | None = None
    # Monotonic time the last player left; None while one is connected.
    idle_since: float | None = field(default_factory=time.monotonic)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    _task: asyncio.Task | None = field(default=None, repr=False)

    def summary(self) -> SessionSummary:
        return SessionSummary(
            session_id=self.session_id,
            status=self.status,
            connected=self.connected,
            width=self.config.width,
            height=self.config.height,
            tick_rate_ms=self.config.tick_rate_ms,
        )


def frame_payload(state: dict, surface: RecordingSurface) -> str:
    """Encode one rendered frame for the wire."""
    return json.dumps(
        {
            "tick": state["tick"],
            "width": surface.width,
            "height": surface.height,
            "status": state["status"],
            "score": state["score"],
            "focus_lost": state["focus_lost"],
            "frame": surface.commands,
        },
        separators=(",", ":"),
    )


class SessionManager:
    """Central registry managing all play sessions."""

    def __init__(
        self,
        max_finished_sessions: int = _MAX_FINISHED_SESSIONS,
        idle_timeout: float = _IDLE_TIMEOUT,
    ) -> None:
        if max_finished_sessions < 0:
            raise ValueError("max_finished_sessions must be >= 0.")
        if idle_timeout <= 0:
            raise ValueError("idle_timeout must be > 0.")
        self._idle_timeout = idle_timeout
        self._sessions: dict[str, SessionInstance] = {}
        self._rate_limits: dict[str, list[float]] = {}
        self._last_rate_compact: float = 0.0
        self._max_finished_sessions = max_finished_sessions

    def _check_rate_limit(self, client_ip: str) -> bool:
        """Return True if the client is within rate limits."""
        now = time.monotonic()
        timestamps = self._rate_limits.get(client_ip, [])
        timestamps = [t for t in timestamps if now - t < _RATE_LIMIT_WINDOW]
        if timestamps:
            self._rate_limits[client_ip] = timestamps
        else:
            self._rate_limits.pop(client_ip, None)
        self._compact_rate_limits(now)
        return len(timestamps) < _RATE_LIMIT_MAX

    def _compact_rate_limits(self, now: float) -> None:
        """Remove rate-limit entries whose timestamps have all expired."""
        if now - self._last_rate_compact < _RATE_COMPACT_INTERVAL:
            return
        self._last_rate_compact = now
        stale_ips = [
            ip for ip, ts in self._rate_limits.items()
            if all(now - t >= _RATE_LIMIT_WINDOW for t in ts)
        ]
        for ip in stale_ips:
            del self._rate_limits[ip]
        if stale_ips:
            logger.info(
                "Compacted %d stale rate-limit entries.", len(stale_ips),
            )

    def _record_creation(self, client_ip: str) -> None:
        self._rate_limits.setdefault(client_ip, []).append(time.monotonic())

    def create_session(
        self,
        config: EngineConfig,
        client_ip: str = "unknown",
    ) -> SessionInstance:
        """Create a session and start its tick loop.

        Must be called from within a running event loop.
        """
        if not self._check_rate_limit(client_ip):
            raise RateLimitExceeded("Rate limit exceeded. Try again later.")

        session_id = uuid.uuid4().hex[:12]
        session = SessionInstance(
            session_id=session_id,
            config=config,
            token=uuid.uuid4().hex,
            engine=SnakeEngine(config),
        )
        # Nobody is playing yet; hold the game until a player connects.
        session.engine.show_focus_banner()
        self._sessions[session_id] = session
        self._record_creation(client_ip)
        session._task = asyncio.create_task(self._tick_loop(session))
        logger.info(
            "Session %s created (%dx%d, tick=%dms).",
            session_id, config.cols, config.rows, config.tick_rate_ms,
        )
        return session

    def get_session(self, session_id: str) -> SessionInstance | None:
        return self._sessions.get(session_id)

    def list_sessions(self) -> list[SessionSummary]:
        """Return summaries of sessions that are still running."""
        return [
            s.summary() for s in self._sessions.values()
            if s.status == SessionStatus.ACTIVE
        ]

    async def stop_session(self, session_id: str, token: str) -> None:
        """Stop a running session. Only the token holder may stop it."""
        session = self._sessions.get(session_id)
        if session is None:
            raise KeyError(f"Session {session_id} not found.")
        if token != session.token:
            raise PermissionError("Invalid session token.")
        if session.status == SessionStatus.FINISHED:
            return

        self._mark_session_finished(session)
        task = session._task
        if task is not None and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
        await self._close_connection(session)
        self._prune_finished_sessions()
        logger.info("Session %s stopped.", session_id)

    def current_frame(self, session: SessionInstance) -> str:
        """Render the session's state without ticking it."""
        surface = RecordingSurface(session.config.width, session.config.height)
        session.engine.render(surface)
        return frame_payload(session.engine.get_state(), surface)

    async def _tick_loop(self, session: SessionInstance) -> None:
        """Tick the engine at the session's rate and stream each frame."""
        tick_interval = session.config.tick_rate_ms / 1000.0
        try:
            while session.status == SessionStatus.ACTIVE:
                await asyncio.sleep(tick_interval)
                async with session.lock:
                    surface = RecordingSurface(
                        session.config.width, session.config.height,
                    )
                    state = session.engine.tick(surface)
                await self._send(session, frame_payload(state, surface))
                if self._idle_expired(session):
                    logger.info(
                        "Session %s had no player for %.0fs, finishing.",
                        session.session_id, self._idle_timeout,
                    )
                    self._mark_session_finished(session)
                    self._prune_finished_sessions()
        except asyncio.CancelledError:
            logger.info("Tick loop cancelled for session %s.", session.session_id)
        except Exception:
            logger.exception("Tick loop error in session %s.", session.session_id)
            self._mark_session_finished(session)
            await self._close_connection(session)
            self._prune_finished_sessions()

    def _idle_expired(self, session: SessionInstance) -> bool:
        if session.websocket is not None or session.idle_since is None:
            return False
        return time.monotonic() - session.idle_since >= self._idle_timeout

    def _mark_session_finished(self, session: SessionInstance) -> None:
        """Transition a session to finished exactly once."""
        if session.status != SessionStatus.FINISHED:
            session.status = SessionStatus.FINISHED
            session.finished_at = time.monotonic()

    async def _close_connection(self, session: SessionInstance) -> None:
        """Close the player socket of a finished session, if any."""
        ws = session.websocket
        session.websocket = None
        session.connected = False
        session.idle_since = time.monotonic()
        if ws is None:
            return
        try:
            if ws.client_state == WebSocketState.CONNECTED:
                await ws.close(code=1000, reason="Session finished.")
        except Exception:
            logger.warning(
                "Failed closing player socket for session %s.",
                session.session_id,
            )

    def _prune_finished_sessions(self) -> None:
        """Bound retained finished sessions to avoid unbounded registry growth."""
        finished = [
            s for s in self._sessions.values()
            if s.status == SessionStatus.FINISHED
        ]
        overflow = len(finished) - self._max_finished_sessions
        if overflow <= 0:
            return

        finished.sort(
            key=lambda s: s.finished_at if s.finished_at is not None else s.created_at,
        )
        for stale in finished[:overflow]:
            self._sessions.pop(stale.session_id, None)
        logger.info(
            "Pruned %d finished sessions (retaining up to %d).",
            overflow,
            self._max_finished_sessions,
        )

    async def _send(self, session: SessionInstance, payload: str) -> None:
        """Send a frame to the connected player, dropping a dead socket."""
        ws = session.websocket
        if ws is None:
            return
        try:
            if ws.client_state == WebSocketState.CONNECTED:
                await ws.send_text(payload)
        except Exception:
            if session.websocket is ws:
                session.websocket = None
                session.connected = False
                session.idle_since = time.monotonic()

    async def cleanup(self) -> None:
        """Cancel all running tick loops and release rate-limit state."""
        tasks = [
            s._task for s in self._sessions.values()
            if s._task and not s._task.done()
        ]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._rate_limits.clear()
        logger.info("SessionManager cleanup complete.")
