"""Shared helpers for the session tests."""
from typing import Optional

from httpx import AsyncClient, ASGITransport

SECRET = b"secretabsecretabsecretabsecretabsecretabsecretabsecretabsecretab"
OTHER_SECRET = b"rotatedkeyrotatedkeyrotatedkeyrotatedkeyrotatedkeyrotatedkeyrota"
COOKIE_NAME = "salvo.sid"


def session_cookie_header(response, name: str = COOKIE_NAME) -> Optional[str]:
    for header in response.headers.get_list("set-cookie"):
        if header.startswith(f"{name}="):
            return header
    return None


def session_cookie(response, name: str = COOKIE_NAME) -> Optional[str]:
    """Return the session cookie set on ``response`` exactly as a browser would send it back."""
    header = session_cookie_header(response, name)
    if header is None:
        return None
    return header.split(";", 1)[0][len(name) + 1:]


def unquote(cookie_value: str) -> str:
    return cookie_value.strip('"')


async def send(app, method: str, path: str, cookie: Optional[str] = None, name: str = COOKIE_NAME,
               base_url: str = "http://testserver", **kwargs):
    """Send one request with a fresh client, so no cookie jar carries state between requests."""
    headers = kwargs.pop("headers", {})
    if cookie is not None:
        headers["cookie"] = f"{name}={cookie}"
    async with AsyncClient(transport=ASGITransport(app=app), base_url=base_url) as client:
        return await client.request(method, path, headers=headers, **kwargs)
