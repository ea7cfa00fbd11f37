import logging as log
from typing import Optional

from fastapi import FastAPI

from session import SessionCookieConfig, SessionMiddleware
from .logging import RequestResponseLoggingMiddleware
from .error_handling import ErrorHandlingMiddleware
from .force_https import ForceHttpsMiddleware, redirect_host

logger = log.getLogger('sigil.service.middleware')


def setup_middleware(
    app: FastAPI,
    session_config: SessionCookieConfig,
    force_https: bool = False,
    https_port: Optional[int] = None,
):
    """
    Setup all middleware for the FastAPI application.

    Middleware are added in reverse order (last added = first executed).
    Current order of execution:
    1. ForceHttpsMiddleware (optional, redirects plain HTTP before anything else runs)
    2. ErrorHandlingMiddleware (catches unhandled errors, including lost sessions)
    3. RequestResponseLoggingMiddleware (logs requests/responses)
    4. SessionMiddleware (verifies the cookie, loads and persists the session)

    Args:
        app: FastAPI application instance
        session_config: Session cookie configuration
        force_https: Whether to redirect plain HTTP requests to HTTPS
        https_port: Port to use in the redirect target, if not the default
    """
    app.add_middleware(SessionMiddleware, config=session_config)

    app.add_middleware(RequestResponseLoggingMiddleware, cookie_name=session_config.cookie_name)

    app.add_middleware(ErrorHandlingMiddleware)

    if force_https:
        app.add_middleware(ForceHttpsMiddleware, https_port=https_port)
        logger.info(f"HTTPS redirect enabled (port override: {https_port})")


__all__ = [
    'setup_middleware',
    'RequestResponseLoggingMiddleware',
    'ErrorHandlingMiddleware',
    'ForceHttpsMiddleware',
    'redirect_host',
]
