"""Request dependencies shared by the route modules."""

from fastapi import Header, HTTPException, Request, status

from scoremanager.auth.access import AccessGate
from scoremanager.config.app_config import AppConfig
from scoremanager.core.board import StudentStoreProtocol
from scoremanager.web.sessions import Session, get_session_manager

SESSION_HEADER = "X-Session-Id"


def get_store(request: Request) -> StudentStoreProtocol:
    return request.app.state.store


def get_gate(request: Request) -> AccessGate:
    return request.app.state.gate


def get_config(request: Request) -> AppConfig:
    return request.app.state.config


async def get_current_session(
    x_session_id: str | None = Header(default=None, alias=SESSION_HEADER),
) -> Session:
    """Resolve the session from the X-Session-Id header, or 401."""
    session = None
    if x_session_id:
        session = await get_session_manager().get_session(x_session_id)

    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not signed in",
        )
    return session
