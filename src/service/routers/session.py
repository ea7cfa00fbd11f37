from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse, RedirectResponse
import logging

from session import Session, current_session, set_session
from schema import LoginRequest, SessionInfoResponse, StatusResponse

logger = logging.getLogger('sigil.service.routers.session')

router = APIRouter(
    tags=["session"],
)


@router.post("/login")
async def login(request: Request, body: LoginRequest):
    """
    Log a user in by replacing the current session with a fresh one carrying the username.
    """
    session = Session.new()
    session.insert("username", body.username)
    set_session(request, session)
    logger.info("Login: new session issued")
    return RedirectResponse(url="/", status_code=303)


@router.get("/logout")
async def logout(session: Session = Depends(current_session)):
    """
    Destroy the current session; the middleware clears the cookie.
    """
    session.destroy()
    return RedirectResponse(url="/", status_code=303)


@router.get("/", response_class=PlainTextResponse)
async def home(session: Session = Depends(current_session)):
    return session.get("username", "home")


@router.get("/session")
async def session_info(session: Session = Depends(current_session)) -> SessionInfoResponse:
    username = session.get("username")
    expires_in = session.expires_in()
    return SessionInfoResponse(
        session_type="authenticated" if username else "anonymous",
        username=username,
        expires_in_seconds=int(expires_in.total_seconds()) if expires_in is not None else None,
    )


@router.get("/status")
async def status(request: Request) -> StatusResponse:
    return StatusResponse(session_store=type(request.app.state.session_config.store).__name__)
