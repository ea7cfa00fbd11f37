"""
HMAC signing of session cookie values.

A signed value is the standard base64 encoding of ``HMAC-SHA256(key, raw)``
followed directly by ``raw``. The digest prefix always encodes 32 bytes, so it
is exactly ``BASE64_DIGEST_LEN`` characters long and no separator is needed.
"""
import base64
import binascii
import hashlib
import logging
from typing import Iterable, Sequence

from itsdangerous.encoding import want_bytes
from itsdangerous.signer import HMACAlgorithm

from .errors import ConfigurationError, CookieMalformed, SignatureMismatch

logger = logging.getLogger('sigil.session.signing')

BASE64_DIGEST_LEN = 44
MASTER_KEY_LEN = 64
SIGNING_KEY_LEN = 32

_algorithm = HMACAlgorithm(hashlib.sha256)


class SigningKey:
    """
    A fixed-length HMAC key derived from a master secret.

    The master secret must be at least ``MASTER_KEY_LEN`` bytes; the first
    ``SIGNING_KEY_LEN`` bytes are used as the HMAC key.
    """

    __slots__ = ("_key",)

    def __init__(self, secret: str | bytes):
        master = want_bytes(secret)
        if len(master) < MASTER_KEY_LEN:
            raise ConfigurationError(
                f"invalid key length: signing secrets must be at least {MASTER_KEY_LEN} bytes, got {len(master)}"
            )
        self._key = master[:SIGNING_KEY_LEN]

    def digest(self, value: str) -> bytes:
        return _algorithm.get_signature(self._key, want_bytes(value))

    def verify(self, value: str, digest: bytes) -> bool:
        return _algorithm.verify_signature(self._key, want_bytes(value), digest)

    def __eq__(self, other):
        if not isinstance(other, SigningKey):
            return NotImplemented
        return self._key == other._key

    def __hash__(self):
        return hash(self._key)

    def __repr__(self):
        return "SigningKey(..)"


class SigningKeySet:
    """One primary key used for signing plus ordered fallback keys used only for verification."""

    __slots__ = ("_primary", "_fallbacks")

    def __init__(self, primary: str | bytes | SigningKey, fallbacks: Iterable[str | bytes | SigningKey] = ()):
        self._primary = _as_key(primary)
        self._fallbacks = tuple(_as_key(key) for key in fallbacks)

    @property
    def primary(self) -> SigningKey:
        return self._primary

    @property
    def fallbacks(self) -> Sequence[SigningKey]:
        return self._fallbacks

    def with_fallback(self, secret: str | bytes | SigningKey) -> "SigningKeySet":
        return SigningKeySet(self._primary, (*self._fallbacks, secret))

    def rotate(self, secret: str | bytes | SigningKey) -> "SigningKeySet":
        """Make ``secret`` the primary key and keep the current primary as the first fallback."""
        return SigningKeySet(secret, (self._primary, *self._fallbacks))

    def __iter__(self):
        yield self._primary
        yield from self._fallbacks

    def __len__(self):
        return 1 + len(self._fallbacks)

    def __repr__(self):
        return f"SigningKeySet(primary=.., fallbacks={len(self._fallbacks)})"


def _as_key(key: str | bytes | SigningKey) -> SigningKey:
    if isinstance(key, SigningKey):
        return key
    return SigningKey(key)


def sign(raw_value: str, key: SigningKey) -> str:
    """Prepend the base64 HMAC-SHA256 digest of ``raw_value`` under ``key``."""
    digest = base64.b64encode(key.digest(raw_value)).decode("ascii")
    return digest + raw_value


def verify(cookie_value: str, keys: SigningKeySet) -> str:
    """
    Authenticate a signed cookie value and return the raw value it carries.

    Keys are tried in order: the primary first, then each fallback.

    Raises:
        CookieMalformed: the value is shorter than the digest prefix or the prefix is not base64
        SignatureMismatch: no key reproduces the digest
    """
    if len(cookie_value) < BASE64_DIGEST_LEN:
        raise CookieMalformed("length of value is shorter than the digest prefix")

    digest_str, value = cookie_value[:BASE64_DIGEST_LEN], cookie_value[BASE64_DIGEST_LEN:]
    try:
        digest = base64.b64decode(digest_str, validate=True)
    except (binascii.Error, ValueError):
        raise CookieMalformed("bad base64 digest")

    for key in keys:
        if key.verify(value, digest):
            return value

    raise SignatureMismatch("value did not verify")
