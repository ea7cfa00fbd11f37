"""
Configuration setup for the session service.

This module handles all configuration initialization including:
- Session cookie and signing key settings
- Session store selection
- HTTPS enforcement settings
- Environment variables parsing
"""
import os
import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from session import CookieStore, MemoryStore, RedisStore, SameSite, SessionCookieConfig, SessionStore
from .redis_client import get_redis_client

logger = logging.getLogger('sigil.service.config')

VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


@dataclass(frozen=True)
class ForceHttpsConfig:
    enabled: bool = False
    https_port: Optional[int] = None


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str) -> list[str]:
    values = os.getenv(name, "").split(",")
    return [value.strip() for value in values if value.strip()]


def get_session_ttl() -> Optional[timedelta]:
    """
    Parse SESSION_TTL_SECONDS.

    Returns:
        The TTL, one day when unset, or None when set to 0 or "none"
    """
    raw = os.getenv("SESSION_TTL_SECONDS")
    if raw is None or not raw.strip():
        return timedelta(days=1)
    if raw.strip().lower() == "none":
        return None
    seconds = int(raw)
    if seconds < 0:
        raise ValueError(f"SESSION_TTL_SECONDS must not be negative, got {seconds}")
    if seconds == 0:
        return None
    return timedelta(seconds=seconds)


def get_session_store() -> SessionStore:
    """
    Create the session store named by SESSION_STORE (memory, cookie or redis).
    """
    store_name = os.getenv("SESSION_STORE", "memory").strip().lower()
    if store_name == "memory":
        return MemoryStore()
    if store_name == "cookie":
        return CookieStore()
    if store_name == "redis":
        return RedisStore(get_redis_client(), prefix=os.getenv("SESSION_REDIS_PREFIX", "session:"))
    raise ValueError(f"Unknown SESSION_STORE '{store_name}', must be one of memory, cookie, redis")


def build_session_config(store: Optional[SessionStore] = None) -> SessionCookieConfig:
    """
    Build the session cookie configuration from environment variables.

    Args:
        store: Store to use instead of the one selected by SESSION_STORE

    Returns:
        Validated, immutable SessionCookieConfig

    Raises:
        ValueError: if SESSION_SECRET_KEY is missing or any secret is too short
    """
    # Get secret key from environment variable
    if not (secret_key := os.getenv("SESSION_SECRET_KEY")):
        raise ValueError("SESSION_SECRET_KEY environment variable must be set")

    fallback_keys = _env_list("SESSION_FALLBACK_SECRET_KEYS")
    options = {
        "cookie_path": os.getenv("SESSION_COOKIE_PATH", "/"),
        "cookie_domain": os.getenv("SESSION_COOKIE_DOMAIN") or None,
        "same_site": SameSite(os.getenv("SESSION_SAME_SITE", "lax").strip().lower()),
        "session_ttl": get_session_ttl(),
        "save_unchanged": _env_flag("SESSION_SAVE_UNCHANGED", "true"),
    }
    if cookie_name := os.getenv("SESSION_COOKIE_NAME"):
        options["cookie_name"] = cookie_name

    config = SessionCookieConfig.create(
        store if store is not None else get_session_store(),
        secret_key,
        fallback_keys,
        **options,
    )
    logger.info(
        f"Session cookie '{config.cookie_name}' configured with {type(config.store).__name__}, "
        f"{len(fallback_keys)} fallback key(s), ttl={config.session_ttl}"
    )
    return config


def get_force_https_config() -> ForceHttpsConfig:
    https_port = os.getenv("HTTPS_PORT")
    return ForceHttpsConfig(
        enabled=_env_flag("FORCE_HTTPS", "false"),
        https_port=int(https_port) if https_port else None,
    )


def get_log_level() -> str:
    """Return LOG_LEVEL, falling back to INFO for unknown values."""
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    if log_level not in VALID_LOG_LEVELS:
        logger.warning(f"Invalid LOG_LEVEL '{log_level}'. Using INFO instead. Valid levels: {', '.join(VALID_LOG_LEVELS)}")
        return 'INFO'
    return log_level


__all__ = [
    'ForceHttpsConfig',
    'build_session_config',
    'get_force_https_config',
    'get_log_level',
    'get_session_store',
    'get_session_ttl',
]
