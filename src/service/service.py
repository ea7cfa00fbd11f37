import logging
from typing import Optional

from fastapi import FastAPI

from session import SessionCookieConfig

from .config import build_session_config, get_force_https_config
from .lifecycle import lifespan
from .middleware import setup_middleware
from .routers import session_router

logger = logging.getLogger('sigil.service')


def create_app(
    session_config: Optional[SessionCookieConfig] = None,
    force_https: Optional[bool] = None,
    https_port: Optional[int] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        session_config: Session configuration; read from the environment when omitted
        force_https: Redirect plain HTTP to HTTPS; read from FORCE_HTTPS when omitted
        https_port: Port used in HTTPS redirects; read from HTTPS_PORT when omitted

    Returns:
        Configured FastAPI instance
    """
    if session_config is None:
        session_config = build_session_config()

    if force_https is None:
        https_config = get_force_https_config()
        force_https = https_config.enabled
        https_port = https_port if https_port is not None else https_config.https_port

    app = FastAPI(title="Sigil session service", lifespan=lifespan)
    app.state.session_config = session_config

    setup_middleware(app, session_config, force_https=force_https, https_port=https_port)
    app.include_router(session_router)

    logger.info("Session service application created")
    return app
