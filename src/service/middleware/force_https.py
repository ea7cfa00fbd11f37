import logging
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import RedirectResponse
from starlette.types import ASGIApp
from fastapi import Request

logger = logging.getLogger('sigil.service.middleware')

RequestFilter = Callable[[Request], bool]


def redirect_host(host: str, https_port: Optional[int]) -> str:
    """Rewrite the port of ``host`` to ``https_port``; without an override the host is returned unchanged."""
    if https_port is None:
        return host
    hostname, _, _ = host.partition(":")
    return f"{hostname}:{https_port}"


class ForceHttpsMiddleware(BaseHTTPMiddleware):
    """Middleware to permanently redirect plain HTTP requests to their HTTPS equivalent"""

    def __init__(self, app: ASGIApp, https_port: Optional[int] = None, filter: Optional[RequestFilter] = None):
        super().__init__(app)
        self.https_port = https_port
        self.filter = filter

    async def dispatch(self, request: Request, call_next):
        if request.url.scheme == "https" or (self.filter is not None and not self.filter(request)):
            return await call_next(request)

        host = request.headers.get("host")
        if not host:
            logger.warning(f"Cannot redirect {request.url.path} to https: no Host header")
            return await call_next(request)

        url = f"https://{redirect_host(host, self.https_port)}{request.url.path}"
        if request.url.query:
            url = f"{url}?{request.url.query}"
        logger.debug(f"Redirecting {request.url} to {url}")
        return RedirectResponse(url, status_code=308)
