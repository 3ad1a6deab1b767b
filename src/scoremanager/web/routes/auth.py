"""Sign-in and sign-out endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status

from scoremanager.auth.access import AccessGate, AuthenticationError
from scoremanager.core.board import StudentStoreProtocol
from scoremanager.web.dependencies import get_current_session, get_gate, get_store
from scoremanager.web.schemas import LoginRequest, LoginResponse, SessionInfoResponse
from scoremanager.web.sessions import Session, get_session_manager

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    gate: AccessGate = Depends(get_gate),
    store: StudentStoreProtocol = Depends(get_store),
) -> LoginResponse:
    """Sign in through the access gate and load the mirror."""
    try:
        result = await gate.sign_in(body.email)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        )

    if not result.allowed:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=result.message,
        )

    session = await get_session_manager().create_session(result.identity, store)
    loaded = await session.board.refresh()
    if not loaded.success:
        await get_session_manager().end_session(session.session_id)
        await gate.sign_out(result.identity)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=loaded.message,
        )

    return LoginResponse(
        session_id=session.session_id,
        email=session.identity.email,
        student_count=len(session.board.state.students),
    )


@router.get("/session", response_model=SessionInfoResponse)
async def current_session(
    session: Session = Depends(get_current_session),
) -> SessionInfoResponse:
    """Describe the signed-in session."""
    return SessionInfoResponse(**session.to_dict())


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    session: Session = Depends(get_current_session),
    gate: AccessGate = Depends(get_gate),
) -> None:
    """End the session and sign out at the provider."""
    await get_session_manager().end_session(session.session_id)
    await gate.sign_out(session.identity)
