"""Outbound session cookie description."""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

from starlette.responses import Response


class SameSite(str, Enum):
    lax = "lax"
    strict = "strict"
    none = "none"


@dataclass(frozen=True)
class CookieAttributes:
    """
    Everything needed to emit the session cookie.

    ``http_only`` is always set. ``secure`` mirrors whether the request came in
    over an encrypted connection, and ``expires`` is recomputed from the TTL
    every time a cookie is built, never copied from an earlier cookie.
    """
    name: str
    value: str
    path: str = "/"
    domain: Optional[str] = None
    same_site: SameSite = SameSite.lax
    expires: Optional[datetime] = None
    secure: bool = False
    http_only: bool = True

    @classmethod
    def build(
        cls,
        name: str,
        value: str,
        *,
        path: str = "/",
        domain: Optional[str] = None,
        same_site: SameSite = SameSite.lax,
        ttl: Optional[timedelta] = None,
        is_encrypted_connection: bool = False,
    ) -> "CookieAttributes":
        expires = datetime.now(timezone.utc) + ttl if ttl is not None else None
        return cls(
            name=name,
            value=value,
            path=path,
            domain=domain,
            same_site=SameSite(same_site),
            expires=expires,
            secure=is_encrypted_connection,
            http_only=True,
        )

    def apply(self, response: Response) -> None:
        response.set_cookie(
            key=self.name,
            value=self.value,
            expires=self.expires,
            path=self.path,
            domain=self.domain,
            secure=self.secure,
            httponly=self.http_only,
            samesite=self.same_site.value,
        )


def clear_cookie(
    response: Response,
    name: str,
    *,
    path: str = "/",
    domain: Optional[str] = None,
    same_site: SameSite = SameSite.lax,
    is_encrypted_connection: bool = False,
) -> None:
    """Instruct the client to drop the session cookie."""
    response.delete_cookie(
        key=name,
        path=path,
        domain=domain,
        secure=is_encrypted_connection,
        httponly=True,
        samesite=SameSite(same_site).value,
    )
