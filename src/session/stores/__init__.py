from .base import SessionStore
from .memory import MemoryStore
from .cookie import CookieStore
from .redis_backend import RedisStore

__all__ = [
    "SessionStore",
    "MemoryStore",
    "CookieStore",
    "RedisStore",
]
