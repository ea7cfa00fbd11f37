import logging
import math
from typing import Optional

import redis.asyncio as aioredis
from redis import RedisError, ConnectionError as RedisConnectionError
from pydantic import ValidationError

from ..errors import StoreError, StoreUnavailable
from ..models import Session, id_from_cookie_value
from .base import SessionStore

logger = logging.getLogger('sigil.session.stores')


class RedisStore(SessionStore):
    def __init__(self, redis_client: aioredis.Redis, prefix: str = "session:"):
        """Initialize the Redis store with an async Redis client."""
        self.redis_client = redis_client
        self.prefix = prefix

    def _key(self, session_id: str) -> str:
        return f"{self.prefix}{session_id}"

    def _handle_redis_error(self, operation: str, session_id: str, error: Exception) -> None:
        """Centralized error handling for Redis operations."""
        if isinstance(error, RedisConnectionError):
            logger.error(f"Redis connection failed during {operation} for session {session_id}: {error}")
            raise StoreUnavailable(f"Database connection error during {operation}") from error
        elif isinstance(error, RedisError):
            logger.error(f"Redis error during {operation} for session {session_id}: {error}")
            raise StoreError(f"Database error during {operation}") from error
        else:
            logger.error(f"Unexpected error during {operation} for session {session_id}: {error}")
            raise StoreError(f"Unexpected error during {operation}") from error

    async def load(self, cookie_value: str) -> Optional[Session]:
        session_id = id_from_cookie_value(cookie_value)
        try:
            raw = await self.redis_client.get(self._key(session_id))
        except Exception as e:
            self._handle_redis_error("session load", session_id, e)
            raise  # Never reached, but helps type checker

        if not raw:
            return None

        try:
            session = Session.model_validate_json(raw)
        except ValidationError as e:
            logger.error(f"Invalid session data format for session {session_id}: {e}")
            return None

        return session.validate_expiry()

    async def store(self, session: Session) -> Optional[str]:
        key = self._key(session.id)
        ttl = session.expires_in()
        try:
            if ttl is not None and ttl.total_seconds() <= 0:
                # Already expired: make sure nothing stale lingers
                await self.redis_client.delete(key)
                logger.debug(f"Session {session.id} already expired, not stored")
                return None

            ex = math.ceil(ttl.total_seconds()) if ttl is not None else None
            await self.redis_client.set(key, session.model_dump_json(), ex=ex)
            logger.debug(f"Session {session.id} stored successfully")
        except Exception as e:
            self._handle_redis_error("session store", session.id, e)

        session.reset_data_changed()
        return session.into_cookie_value()

    async def destroy(self, session: Session) -> None:
        try:
            deleted_count = await self.redis_client.delete(self._key(session.id))
        except Exception as e:
            self._handle_redis_error("session deletion", session.id, e)
            return

        if deleted_count == 0:
            logger.debug(f"Session {session.id} was not present, may have been removed concurrently")
        else:
            logger.debug(f"Session {session.id} deleted successfully")

    async def clear(self) -> None:
        try:
            async for key in self.redis_client.scan_iter(match=f"{self.prefix}*"):
                await self.redis_client.delete(key)
        except Exception as e:
            self._handle_redis_error("session clear", "*", e)
