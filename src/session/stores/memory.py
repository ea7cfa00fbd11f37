import logging
from typing import Dict, Optional

from pydantic import ValidationError

from ..models import Session, id_from_cookie_value
from .base import SessionStore

logger = logging.getLogger('sigil.session.stores')


class MemoryStore(SessionStore):
    """
    In-process session store.

    Sessions are kept as serialised JSON so that a handler mutating its session
    after the response has been sent cannot change what is stored. Suitable for
    tests and single-process development servers only.
    """

    def __init__(self):
        self._sessions: Dict[str, str] = {}

    async def load(self, cookie_value: str) -> Optional[Session]:
        session_id = id_from_cookie_value(cookie_value)
        raw = self._sessions.get(session_id)
        if raw is None:
            return None

        try:
            session = Session.model_validate_json(raw)
        except ValidationError as e:
            logger.error(f"Invalid session data found for session {session_id}: {e}")
            self._sessions.pop(session_id, None)
            return None

        if session.is_expired():
            logger.debug(f"Session {session_id} expired, discarding")
            self._sessions.pop(session_id, None)
            return None
        return session

    async def store(self, session: Session) -> Optional[str]:
        self._sessions[session.id] = session.model_dump_json()
        session.reset_data_changed()
        return session.into_cookie_value()

    async def destroy(self, session: Session) -> None:
        if self._sessions.pop(session.id, None) is None:
            logger.debug(f"Session {session.id} was not stored, nothing to destroy")

    async def clear(self) -> None:
        self._sessions.clear()

    async def cleanup(self) -> int:
        """Drop expired sessions and return how many were removed."""
        expired = [
            session_id for session_id, raw in self._sessions.items()
            if Session.model_validate_json(raw).is_expired()
        ]
        for session_id in expired:
            del self._sessions[session_id]
        if expired:
            logger.info(f"Removed {len(expired)} expired sessions")
        return len(expired)

    def count(self) -> int:
        return len(self._sessions)
