"""
Request-scoped access to the current session.

The session lives in ``request.state`` under ``SESSION_STATE_KEY`` for the
duration of the handler chain. Handlers may read it, mutate it, replace it
with ``set_session`` or call ``cease`` to stop the middleware from writing
anything back for this request.
"""
from typing import Optional

from fastapi import Request

from .errors import SessionInvariantError
from .models import Session

SESSION_STATE_KEY = "sigil_session"
CEASED_STATE_KEY = "sigil_session_ceased"


def set_session(request: Request, session: Session) -> None:
    setattr(request.state, SESSION_STATE_KEY, session)


def get_session(request: Request) -> Optional[Session]:
    return getattr(request.state, SESSION_STATE_KEY, None)


def take_session(request: Request) -> Optional[Session]:
    """Remove the session from the request and return it."""
    session = get_session(request)
    if session is not None:
        delattr(request.state, SESSION_STATE_KEY)
    return session


def cease(request: Request) -> None:
    """Skip session persistence for this request; no cookie is written and the store is not called."""
    setattr(request.state, CEASED_STATE_KEY, True)


def is_ceased(request: Request) -> bool:
    return getattr(request.state, CEASED_STATE_KEY, False)


def current_session(request: Request) -> Session:
    """FastAPI dependency returning the session attached by ``SessionMiddleware``."""
    session = get_session(request)
    if session is None:
        raise SessionInvariantError("no session in request state; is SessionMiddleware installed?")
    return session
