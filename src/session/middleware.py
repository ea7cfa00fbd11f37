"""
Session lifecycle middleware.

On the way in, the session cookie is verified and the referenced session is
loaded from the store. A missing, malformed, forged or unknown cookie, or a
store that cannot be reached, all lead to the same outcome: a fresh, empty
session. Nothing about the failure is surfaced to handlers or the client.

On the way out, the session is taken back from the request state and either
destroyed (cookie cleared), stored (cookie re-signed and re-issued when the
store hands back a value) or left alone. Store failures are logged and the
response is returned unchanged.
"""
import logging
from typing import Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

from .config import SessionCookieConfig
from .context import is_ceased, set_session, take_session
from .cookies import CookieAttributes, clear_cookie
from .errors import SessionInvariantError, VerificationError
from .models import Session
from .signing import sign, verify

logger = logging.getLogger('sigil.session.middleware')


def is_encrypted(request: Request) -> bool:
    return request.url.scheme in ("https", "wss")


class SessionMiddleware(BaseHTTPMiddleware):
    """Attach a verified session to every request and persist it once the handler chain is done"""

    def __init__(self, app: ASGIApp, config: SessionCookieConfig):
        super().__init__(app)
        self.config = config

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        await self.begin(request)

        # An exception or cancellation in the chain propagates and skips persistence
        response = await call_next(request)

        await self.end(request, response)
        return response

    async def begin(self, request: Request) -> Session:
        cookie_value = self.verified_cookie_value(request)
        session = await self.load_or_create(cookie_value)

        if self.config.session_ttl is not None:
            session.expire_in(self.config.session_ttl)

        set_session(request, session)
        return session

    async def end(self, request: Request, response: Response) -> None:
        if is_ceased(request):
            logger.debug("Handler chain ceased, skipping session persistence")
            take_session(request)
            return

        session = take_session(request)
        if session is None:
            raise SessionInvariantError("session should exist in request state")

        config = self.config
        secure = is_encrypted(request)

        if session.is_destroyed:
            try:
                await config.store.destroy(session)
            except Exception as e:
                logger.error(f"Unable to destroy session: {e}")
            clear_cookie(
                response,
                config.cookie_name,
                path=config.cookie_path,
                domain=config.cookie_domain,
                same_site=config.same_site,
                is_encrypted_connection=secure,
            )
            return

        if not (config.save_unchanged or session.data_changed):
            logger.debug("Session unchanged, not saving")
            return

        try:
            token = await config.store.store(session)
        except Exception as e:
            logger.error(f"Store session error: {e}")
            return

        if token is None:
            return

        CookieAttributes.build(
            config.cookie_name,
            sign(token, config.signing_key),
            path=config.cookie_path,
            domain=config.cookie_domain,
            same_site=config.same_site,
            ttl=config.session_ttl,
            is_encrypted_connection=secure,
        ).apply(response)

    def verified_cookie_value(self, request: Request) -> Optional[str]:
        cookie = request.cookies.get(self.config.cookie_name)
        if cookie is None:
            return None
        try:
            return verify(cookie, self.config.keys)
        except VerificationError as e:
            logger.debug(f"Rejected session cookie: {e}")
            return None

    async def load_or_create(self, cookie_value: Optional[str]) -> Session:
        session = None
        if cookie_value is not None:
            try:
                session = await self.config.store.load(cookie_value)
            except Exception as e:
                logger.warning(f"Unable to load session, starting a new one: {e}")
                session = None

        if session is not None:
            session = session.validate_expiry()
        if session is None:
            session = Session.new()
        return session
