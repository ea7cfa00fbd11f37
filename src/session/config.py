"""
Immutable configuration for ``SessionMiddleware``.

Build it once at startup; any secret that cannot be turned into a signing key
raises ``ConfigurationError`` here rather than on the first request.
"""
from datetime import timedelta
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict

from .cookies import SameSite
from .signing import SigningKey, SigningKeySet
from .stores.base import SessionStore

DEFAULT_COOKIE_NAME = "salvo.sid"
DEFAULT_COOKIE_PATH = "/"
DEFAULT_SESSION_TTL = timedelta(days=1)


class SessionCookieConfig(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    store: SessionStore
    keys: SigningKeySet
    cookie_name: str = DEFAULT_COOKIE_NAME
    cookie_path: str = DEFAULT_COOKIE_PATH
    cookie_domain: Optional[str] = None
    same_site: SameSite = SameSite.lax
    session_ttl: Optional[timedelta] = DEFAULT_SESSION_TTL
    save_unchanged: bool = True

    @classmethod
    def create(
        cls,
        store: SessionStore,
        secret: str | bytes,
        fallback_secrets: Iterable[str | bytes] = (),
        **options,
    ) -> "SessionCookieConfig":
        """
        Build a configuration from raw secrets.

        Args:
            store: Backing session store
            secret: Master secret for the primary signing key (at least 64 bytes)
            fallback_secrets: Previously used secrets still accepted for verification
            **options: Any other field, e.g. ``cookie_name`` or ``session_ttl``

        Raises:
            ConfigurationError: if any secret is too short
        """
        return cls(store=store, keys=SigningKeySet(secret, fallback_secrets), **options)

    @property
    def signing_key(self) -> SigningKey:
        return self.keys.primary

    def with_fallback_key(self, secret: str | bytes) -> "SessionCookieConfig":
        return self.model_copy(update={"keys": self.keys.with_fallback(secret)})

    def rotate(self, secret: str | bytes) -> "SessionCookieConfig":
        """Sign with ``secret`` from now on while still accepting cookies signed under the current key."""
        return self.model_copy(update={"keys": self.keys.rotate(secret)})
