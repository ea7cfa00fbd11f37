"""Signed session cookies backed by a pluggable session store."""

from .config import SessionCookieConfig
from .context import cease, current_session, get_session, set_session, take_session
from .cookies import CookieAttributes, SameSite
from .errors import (
    ConfigurationError,
    CookieMalformed,
    SessionError,
    SessionInvariantError,
    SignatureMismatch,
    StoreError,
    StoreUnavailable,
    VerificationError,
)
from .middleware import SessionMiddleware
from .models import Session
from .signing import BASE64_DIGEST_LEN, SigningKey, SigningKeySet, sign, verify
from .stores import CookieStore, MemoryStore, RedisStore, SessionStore

__all__ = [
    "SessionCookieConfig",
    "SessionMiddleware",
    "Session",
    "SessionStore",
    "MemoryStore",
    "CookieStore",
    "RedisStore",
    "CookieAttributes",
    "SameSite",
    "SigningKey",
    "SigningKeySet",
    "BASE64_DIGEST_LEN",
    "sign",
    "verify",
    "cease",
    "current_session",
    "get_session",
    "set_session",
    "take_session",
    "SessionError",
    "ConfigurationError",
    "VerificationError",
    "CookieMalformed",
    "SignatureMismatch",
    "StoreError",
    "StoreUnavailable",
    "SessionInvariantError",
]
