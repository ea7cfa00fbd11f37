import base64
import hashlib
import json
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, PrivateAttr

COOKIE_VALUE_BYTES = 64


def _now() -> datetime:
    return datetime.now(timezone.utc)


def generate_cookie_value() -> str:
    return base64.b64encode(secrets.token_bytes(COOKIE_VALUE_BYTES)).decode("ascii")


def id_from_cookie_value(cookie_value: str) -> str:
    """Derive the store id from the value carried in the cookie."""
    return base64.b64encode(hashlib.sha256(cookie_value.encode("utf-8")).digest()).decode("ascii")


class Session(BaseModel):
    """
    Per-client session state.

    ``data`` maps each key to the JSON encoding of its value. A freshly created session
    carries the random value that will be signed into the client's cookie;
    sessions rebuilt from a store do not, so re-storing them yields no new
    cookie unless the store chooses to return one.
    """
    id: str
    data: Dict[str, str] = Field(default_factory=dict)
    expiry: Optional[datetime] = None

    _cookie_value: Optional[str] = PrivateAttr(default=None)
    _data_changed: bool = PrivateAttr(default=False)
    _destroyed: bool = PrivateAttr(default=False)

    @classmethod
    def new(cls) -> "Session":
        cookie_value = generate_cookie_value()
        session = cls(id=id_from_cookie_value(cookie_value))
        session._cookie_value = cookie_value
        return session

    def get(self, key: str, default: Any = None) -> Any:
        """Return a fresh copy of the value under ``key``; mutating it does not touch the session."""
        raw = self.data.get(key)
        if raw is None:
            return default
        return json.loads(raw)

    def insert(self, key: str, value: Any) -> None:
        # Values are held in their serialised form, so what is compared is exactly what gets stored
        raw = json.dumps(value)
        if self.data.get(key) != raw:
            self.data[key] = raw
            self._data_changed = True

    def remove(self, key: str) -> Any:
        raw = self.data.pop(key, None)
        if raw is None:
            return None
        self._data_changed = True
        return json.loads(raw)

    def clear(self) -> None:
        if self.data:
            self._data_changed = True
        self.data.clear()

    def __contains__(self, key: str) -> bool:
        return key in self.data

    def __len__(self) -> int:
        return len(self.data)

    @property
    def data_changed(self) -> bool:
        return self._data_changed

    def reset_data_changed(self) -> None:
        self._data_changed = False

    def destroy(self) -> None:
        self._destroyed = True

    @property
    def is_destroyed(self) -> bool:
        return self._destroyed

    def regenerate(self) -> None:
        """Issue a new id and cookie value, keeping the data."""
        cookie_value = generate_cookie_value()
        self.id = id_from_cookie_value(cookie_value)
        self._cookie_value = cookie_value
        self._data_changed = True

    @property
    def cookie_value(self) -> Optional[str]:
        return self._cookie_value

    def into_cookie_value(self) -> Optional[str]:
        cookie_value, self._cookie_value = self._cookie_value, None
        return cookie_value

    def expire_in(self, ttl: timedelta) -> None:
        self.expiry = _now() + ttl

    def set_expiry(self, expiry: datetime) -> None:
        if expiry.tzinfo is None:
            expiry = expiry.replace(tzinfo=timezone.utc)
        self.expiry = expiry

    def expires_in(self) -> Optional[timedelta]:
        if self.expiry is None:
            return None
        return self.expiry - _now()

    def is_expired(self) -> bool:
        return self.expiry is not None and self.expiry <= _now()

    def validate_expiry(self) -> Optional["Session"]:
        """Return this session if it has not expired, otherwise None."""
        if self.is_expired():
            return None
        return self


__all__ = [
    "Session",
    "generate_cookie_value",
    "id_from_cookie_value",
]
