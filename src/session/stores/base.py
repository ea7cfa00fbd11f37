from abc import ABC, abstractmethod
from typing import Optional

from ..models import Session


class SessionStore(ABC):
    """
    Persistence contract consumed by ``SessionMiddleware``.

    Implementations raise ``StoreError`` when the backing system fails. A
    missing, expired or unreadable session is not a failure: ``load`` returns
    None for it.
    """

    @abstractmethod
    async def load(self, cookie_value: str) -> Optional[Session]:
        """Return the session referenced by a verified cookie value, or None."""

    @abstractmethod
    async def store(self, session: Session) -> Optional[str]:
        """
        Persist the session.

        Returns:
            The value to sign into the next cookie, or None to leave the cookie alone
        """

    @abstractmethod
    async def destroy(self, session: Session) -> None:
        """Remove persisted state for the session. Destroying an unknown session is not an error."""

    async def clear(self) -> None:
        """Remove every session held by the store."""
        raise NotImplementedError(f"{type(self).__name__} does not support clear()")
