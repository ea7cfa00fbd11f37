import base64
import binascii
import logging
from typing import Optional

from pydantic import ValidationError

from ..models import Session
from .base import SessionStore

logger = logging.getLogger('sigil.session.stores')


class CookieStore(SessionStore):
    """
    Keeps the whole session in the cookie itself.

    The cookie value is the base64 encoding of the serialised session, so it
    is signed but readable by the client. Every store call returns a fresh
    value, which means the cookie is re-issued whenever the session is saved.
    """

    async def load(self, cookie_value: str) -> Optional[Session]:
        try:
            raw = base64.b64decode(cookie_value, validate=True)
            session = Session.model_validate_json(raw)
        except (binascii.Error, ValueError, ValidationError) as e:
            logger.debug(f"Unreadable cookie session: {e}")
            return None
        return session.validate_expiry()

    async def store(self, session: Session) -> Optional[str]:
        session.reset_data_changed()
        return base64.b64encode(session.model_dump_json().encode("utf-8")).decode("ascii")

    async def destroy(self, session: Session) -> None:
        # Nothing is held server-side; clearing the cookie is enough
        return None

    async def clear(self) -> None:
        return None
