"""Session management for the Web API.

Each signed-in identity gets a session holding its own ScoreBoard (the
client mirror). The registry is guarded by an asyncio lock; the boards
themselves are not.
"""

from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import structlog

from scoremanager.auth.access import Identity
from scoremanager.core.board import ScoreBoard, StudentStoreProtocol

logger = structlog.get_logger(__name__)


@dataclass
class Session:
    """An active signed-in session."""

    session_id: str
    identity: Identity
    board: ScoreBoard
    created_at: str = ""

    def __post_init__(self):
        if not self.created_at:
            self.created_at = datetime.now(timezone.utc).isoformat()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for API response."""
        return {
            "session_id": self.session_id,
            "email": self.identity.email,
            "created_at": self.created_at,
            "student_count": len(self.board.state.students),
        }


class SessionManager:
    """Manages signed-in sessions."""

    def __init__(self):
        self._sessions: dict[str, Session] = {}
        self._lock = asyncio.Lock()

    async def create_session(
        self,
        identity: Identity,
        store: StudentStoreProtocol,
    ) -> Session:
        """Create a session with an empty board for an allowed identity.

        The caller loads the mirror with ``session.board.refresh()``.
        """
        session_id = uuid.uuid4().hex

        session = Session(
            session_id=session_id,
            identity=identity,
            board=ScoreBoard(store),
        )

        async with self._lock:
            self._sessions[session_id] = session

        logger.info("session_created", session_id=session_id, email=identity.email)
        return session

    async def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        async with self._lock:
            return self._sessions.get(session_id)

    async def end_session(self, session_id: str) -> Session | None:
        """Remove a session and drop its mirror.

        Returns:
            The ended session, or None if not found
        """
        async with self._lock:
            session = self._sessions.pop(session_id, None)

        if session is None:
            return None

        session.board.clear()
        logger.info("session_ended", session_id=session_id)
        return session

    async def get_session_count(self) -> int:
        """Get count of active sessions."""
        async with self._lock:
            return len(self._sessions)


# Global session manager instance
_session_manager: SessionManager | None = None


def get_session_manager() -> SessionManager:
    """Get the global session manager instance."""
    global _session_manager
    if _session_manager is None:
        _session_manager = SessionManager()
    return _session_manager


def reset_session_manager() -> None:
    """Reset the session manager (for testing)."""
    global _session_manager
    _session_manager = None
